from portfolio_cms.extensions import db


class Project(db.Model):
    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.String(2000), nullable=False)
    technology_stack = db.Column(db.String(500), nullable=True)  # e.g. "Flask, PostgreSQL"
    project_url = db.Column(db.String(500), nullable=True)
    github_url = db.Column(db.String(500), nullable=True)
    image_url = db.Column(db.String(500), nullable=True)
    completed_at = db.Column(db.DateTime, nullable=True)

    # Manual sort only, duplicates allowed
    display_order = db.Column(db.Integer, nullable=False, default=0, index=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "technology_stack": self.technology_stack,
            "project_url": self.project_url,
            "github_url": self.github_url,
            "image_url": self.image_url,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "display_order": self.display_order,
            "is_active": self.is_active,
        }

    def __repr__(self):
        return f"<Project {self.title}>"
