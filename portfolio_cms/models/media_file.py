from datetime import datetime

from portfolio_cms.extensions import db


class MediaFile(db.Model):
    __tablename__ = "media_files"

    id = db.Column(db.Integer, primary_key=True)
    file_name = db.Column(db.String(255), nullable=False, unique=True)  # generated storage key
    original_file_name = db.Column(db.String(255), nullable=False)
    content_type = db.Column(db.String(100), nullable=False)
    file_size = db.Column(db.BigInteger, nullable=False)
    url = db.Column(db.String(1000), nullable=False)
    category = db.Column(db.String(50), nullable=False, default="", index=True)

    uploaded_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    uploaded_by = db.Column(db.String(450), nullable=True, index=True)

    # Both null -> orphan
    article_id = db.Column(db.Integer, db.ForeignKey("articles.id", ondelete="SET NULL"), nullable=True)
    project_id = db.Column(db.Integer, db.ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)

    article = db.relationship("Article", backref="media_files")
    project = db.relationship("Project", backref="media_files")

    @property
    def is_orphan(self):
        return self.article_id is None and self.project_id is None

    def to_dict(self):
        return {
            "id": self.id,
            "file_name": self.file_name,
            "original_file_name": self.original_file_name,
            "content_type": self.content_type,
            "file_size": self.file_size,
            "url": self.url,
            "category": self.category,
            "uploaded_at": self.uploaded_at.isoformat() if self.uploaded_at else None,
            "uploaded_by": self.uploaded_by,
            "article_id": self.article_id,
            "project_id": self.project_id,
        }

    def __repr__(self):
        return f"<MediaFile {self.file_name}>"
