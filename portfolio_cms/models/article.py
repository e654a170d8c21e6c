from datetime import datetime

from portfolio_cms.extensions import db


class ArticleStatus:
    DRAFT = "Draft"
    PUBLISHED = "Published"

    ALL = (DRAFT, PUBLISHED)


# Many-to-many Article <-> Tag
article_tags = db.Table(
    "article_tags",
    db.Column("article_id", db.Integer, db.ForeignKey("articles.id", ondelete="CASCADE"), primary_key=True),
    db.Column("tag_id", db.Integer, db.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
    db.Column("created_at", db.DateTime, default=datetime.utcnow),
)


class Article(db.Model):
    __tablename__ = "articles"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False)
    summary = db.Column(db.String(500), nullable=False, default="")

    status = db.Column(db.String(20), nullable=False, default=ArticleStatus.DRAFT, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    # First-publish timestamp, never cleared on unpublish
    published_at = db.Column(db.DateTime, nullable=True, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    featured_image_url = db.Column(db.String(500), nullable=True)
    meta_description = db.Column(db.String(300), nullable=True)
    meta_keywords = db.Column(db.String(255), nullable=True)

    # Caller identity from the JWT, kept for audit only
    author_id = db.Column(db.String(450), nullable=True, index=True)

    tags = db.relationship("Tag", secondary=article_tags, back_populates="articles", lazy="selectin")
    comments = db.relationship(
        "Comment",
        back_populates="article",
        cascade="all, delete-orphan",
        order_by="Comment.submitted_at",
    )

    @property
    def is_published(self):
        return self.status == ArticleStatus.PUBLISHED

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "status": self.status,
            "created_at": _iso(self.created_at),
            "published_at": _iso(self.published_at),
            "featured_image_url": self.featured_image_url,
            "meta_description": self.meta_description,
            "meta_keywords": self.meta_keywords,
            "tags": [tag.to_dict() for tag in self.tags],
        }

    def to_detail_dict(self, comments):
        data = self.to_dict()
        data["content"] = self.content
        data["updated_at"] = _iso(self.updated_at)
        data["comments"] = [c.to_dict() for c in comments]
        return data

    def __repr__(self):
        return f"<Article {self.title}>"


def _iso(value):
    return value.isoformat() if value else None
