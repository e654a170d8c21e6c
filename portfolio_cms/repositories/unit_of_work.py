from contextlib import contextmanager

from portfolio_cms.repositories.comments import CommentRepository
from portfolio_cms.repositories.content import ArticleRepository, ProjectRepository, TagRepository
from portfolio_cms.repositories.media import MediaFileRepository


class UnitOfWork:
    """Groups the repositories over one session so several of them can commit together."""

    def __init__(self, session):
        self.session = session
        self.articles = ArticleRepository(session)
        self.tags = TagRepository(session)
        self.projects = ProjectRepository(session)
        self.comments = CommentRepository(session)
        self.media_files = MediaFileRepository(session)

    @contextmanager
    def transaction(self):
        """Commit on normal exit; roll back and re-raise on any exception."""
        try:
            yield self
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()
