from datetime import datetime

from portfolio_cms.models.comment import Comment, CommentStatus
from portfolio_cms.repositories.base import BaseRepository


class CommentRepository(BaseRepository):
    model = Comment

    def approved_for_article(self, article_id):
        return (
            self.query()
            .filter(Comment.article_id == article_id, Comment.status == CommentStatus.APPROVED)
            .order_by(Comment.submitted_at.asc(), Comment.id.asc())
            .all()
        )

    def newest_first(self, status=None):
        query = self.query()
        if status:
            query = query.filter(Comment.status == status)
        return query.order_by(Comment.submitted_at.desc(), Comment.id.desc())

    def count_by_status(self, status):
        return self.query().filter(Comment.status == status).count()

    def count_since(self, since: datetime):
        return self.query().filter(Comment.submitted_at >= since).count()
