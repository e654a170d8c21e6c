from sqlalchemy import func

from portfolio_cms.models.media_file import MediaFile
from portfolio_cms.repositories.base import BaseRepository


class MediaFileRepository(BaseRepository):
    model = MediaFile

    def newest_first(self, category=None):
        query = self.query()
        if category:
            query = query.filter(MediaFile.category == category)
        return query.order_by(MediaFile.uploaded_at.desc(), MediaFile.id.desc())

    def by_category(self, category):
        return self.newest_first(category).all()

    def for_article(self, article_id):
        return self.query().filter(MediaFile.article_id == article_id).order_by(MediaFile.id).all()

    def for_project(self, project_id):
        return self.query().filter(MediaFile.project_id == project_id).order_by(MediaFile.id).all()

    def orphans_query(self):
        return self.query().filter(MediaFile.article_id.is_(None), MediaFile.project_id.is_(None))

    def orphans(self):
        return self.orphans_query().order_by(MediaFile.id).all()

    def total_size(self):
        return self.session.query(func.coalesce(func.sum(MediaFile.file_size), 0)).scalar()

    def count_by(self, column):
        return dict(self.session.query(column, func.count(MediaFile.id)).group_by(column).all())
