from datetime import datetime

from portfolio_cms.extensions import db


class CommentStatus:
    # Pending -> Approved | Rejected, only by moderator action
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"

    ALL = (PENDING, APPROVED, REJECTED)


class Comment(db.Model):
    __tablename__ = "comments"

    id = db.Column(db.Integer, primary_key=True)
    author_name = db.Column(db.String(100), nullable=False)
    author_email = db.Column(db.String(200), nullable=False)
    content = db.Column(db.String(2000), nullable=False)

    submitted_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default=CommentStatus.PENDING, index=True)

    # abuse review
    ip_address = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.String(500), nullable=True)

    article_id = db.Column(
        db.Integer, db.ForeignKey("articles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    article = db.relationship("Article", back_populates="comments")

    def to_dict(self):
        return {
            "id": self.id,
            "author_name": self.author_name,
            "content": self.content,
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
            "status": self.status,
            "article_id": self.article_id,
        }

    def to_moderation_dict(self):
        data = self.to_dict()
        data.update({
            "author_email": self.author_email,
            "article_title": self.article.title if self.article else "",
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
        })
        return data

    def __repr__(self):
        return f"<Comment {self.id} {self.status}>"
