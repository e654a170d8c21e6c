from sqlalchemy import func, or_

from portfolio_cms.models.article import Article, ArticleStatus, article_tags
from portfolio_cms.models.project import Project
from portfolio_cms.models.tag import Tag
from portfolio_cms.repositories.base import BaseRepository

SORT_COLUMNS = {
    "title": Article.title,
    "publisheddate": Article.published_at,
    "createddate": Article.created_at,
    "status": Article.status,
}


class ArticleRepository(BaseRepository):
    model = Article

    def search(self, search=None, tag_slug=None, status=None, sort_by=None, sort_order=None):
        """Filtered, sorted query. Sorting falls back to newest first."""
        query = self.query()

        if status:
            query = query.filter(Article.status == status)

        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Article.title.ilike(pattern),
                    Article.content.ilike(pattern),
                    Article.summary.ilike(pattern),
                )
            )

        if tag_slug:
            query = query.filter(Article.tags.any(Tag.slug == tag_slug))

        column = SORT_COLUMNS.get((sort_by or "").lower())
        if column is None:
            return query.order_by(Article.created_at.desc(), Article.id.desc())
        # descending unless asc is asked for explicitly
        direction = column.asc() if (sort_order or "").lower() == "asc" else column.desc()
        return query.order_by(direction, Article.id.asc())

    def published(self, **filters):
        return self.search(status=ArticleStatus.PUBLISHED, **filters)


class TagRepository(BaseRepository):
    model = Tag

    def get_by_name(self, name):
        # exact, case-sensitive
        return self.query().filter(Tag.name == name).first()

    def get_by_slug(self, slug):
        return self.query().filter(Tag.slug == slug).first()

    def ordered(self):
        return self.query().order_by(Tag.name.asc()).all()

    def with_published_counts(self, limit=None):
        """[(tag, published_article_count)] most used first."""
        usage = (
            self.session.query(article_tags.c.tag_id, func.count(Article.id).label("article_count"))
            .join(Article, Article.id == article_tags.c.article_id)
            .filter(Article.status == ArticleStatus.PUBLISHED)
            .group_by(article_tags.c.tag_id)
            .subquery()
        )
        count_col = func.coalesce(usage.c.article_count, 0)
        query = (
            self.session.query(Tag, count_col)
            .outerjoin(usage, usage.c.tag_id == Tag.id)
            .order_by(count_col.desc(), Tag.name.asc())
        )
        if limit:
            query = query.limit(limit)
        return query.all()


class ProjectRepository(BaseRepository):
    model = Project

    def ordered(self, active_only=False):
        query = self.query()
        if active_only:
            query = query.filter(Project.is_active.is_(True))
        return query.order_by(Project.display_order.asc(), Project.id.asc()).all()
