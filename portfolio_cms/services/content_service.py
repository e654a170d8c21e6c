"""Article publishing workflow and tag management.

Articles move between Draft and Published. ``published_at`` records the
first publish and is never cleared or re-stamped afterwards, so an article
that is unpublished and published again keeps its original date.

Tags are resolved by exact, case-sensitive name, then by derived slug, so
names that only differ in case or punctuation share one tag. On update the article's tag
set is cleared and rebuilt from the supplied names rather than diffed, which
means association rows (and their timestamps) are recreated on every save.
"""
import logging
from datetime import datetime

from portfolio_cms.models.article import Article, ArticleStatus
from portfolio_cms.models.comment import CommentStatus
from portfolio_cms.models.tag import Tag
from portfolio_cms.services.results import PagedResult, ServiceResult, normalize_page
from portfolio_cms.utils.slug import generate_slug

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = (
    "title",
    "content",
    "summary",
    "featured_image_url",
    "meta_description",
    "meta_keywords",
)


class ContentService:
    def __init__(self, uow, events, clock=datetime.utcnow, page_size=10):
        self.uow = uow
        self.events = events
        self.clock = clock
        self.page_size = page_size

    # ------------------------------------------------------------------ reads

    def list_published(self, search=None, tag=None, sort_by=None, sort_order=None, page=1, page_size=None):
        query = self.uow.articles.published(
            search=search, tag_slug=tag, sort_by=sort_by, sort_order=sort_order
        )
        return self._page(query, page, page_size)

    def list_all(self, search=None, tag=None, status=None, sort_by=None, sort_order=None, page=1, page_size=None):
        """Admin listing over every status."""
        query = self.uow.articles.search(
            search=search, tag_slug=tag, status=status, sort_by=sort_by, sort_order=sort_order
        )
        return self._page(query, page, page_size)

    def search(self, text, page=1, page_size=None):
        return self.list_published(search=text, page=page, page_size=page_size)

    def by_tag(self, tag_slug, page=1, page_size=None):
        return self.list_published(tag=tag_slug, page=page, page_size=page_size)

    def get_published(self, article_id):
        """Public detail. Drafts are reported as missing."""
        article = self.uow.articles.get(article_id)
        if article is None or not article.is_published:
            return ServiceResult.not_found("Article not found")
        approved = [c for c in article.comments if c.status == CommentStatus.APPROVED]
        return ServiceResult.ok(article.to_detail_dict(approved))

    def get_for_edit(self, article_id):
        article = self.uow.articles.get(article_id)
        if article is None:
            return ServiceResult.not_found("Article not found")
        return ServiceResult.ok(article.to_detail_dict(article.comments))

    def _page(self, query, page, page_size):
        page, page_size = normalize_page(page, page_size or self.page_size, self.page_size)
        items, total = self.uow.articles.paginate(query, page, page_size)
        return PagedResult([a.to_dict() for a in items], total, page, page_size)

    # ----------------------------------------------------------------- writes

    def create(self, fields, caller_id=None):
        now = self.clock()
        status = fields.get("status") or ArticleStatus.DRAFT

        with self.uow.transaction():
            article = Article(
                status=status,
                created_at=now,
                published_at=now if status == ArticleStatus.PUBLISHED else None,
                author_id=caller_id,
            )
            self._assign(article, fields)
            article.tags = self._resolve_tags(fields.get("tag_names") or [])
            self.uow.articles.add(article)

        self.events.emit(
            "ArticleCreated", article_id=article.id, title=article.title, status=article.status, caller_id=caller_id
        )
        return ServiceResult.ok(article.to_dict(), "Article created successfully")

    def update(self, article_id, fields, caller_id=None):
        article = self.uow.articles.get(article_id)
        if article is None:
            return ServiceResult.not_found("Article not found")

        with self.uow.transaction():
            self._assign(article, fields)
            status = fields.get("status") or article.status
            article.status = status
            if status == ArticleStatus.PUBLISHED and article.published_at is None:
                article.published_at = self.clock()
            article.tags.clear()
            article.tags = self._resolve_tags(fields.get("tag_names") or [])

        self.events.emit("ArticleUpdated", article_id=article.id, title=article.title, caller_id=caller_id)
        return ServiceResult.ok(article.to_dict(), "Article updated successfully")

    def publish(self, article_id, caller_id=None):
        return self._transition(article_id, ArticleStatus.PUBLISHED, "ArticlePublished", caller_id)

    def unpublish(self, article_id, caller_id=None):
        return self._transition(article_id, ArticleStatus.DRAFT, "ArticleUnpublished", caller_id)

    def delete(self, article_id, caller_id=None):
        article = self.uow.articles.get(article_id)
        if article is None:
            return ServiceResult.not_found("Article not found")

        title = article.title
        with self.uow.transaction():
            # comments go with it (delete-orphan cascade / ON DELETE CASCADE)
            self.uow.articles.delete(article)

        self.events.emit("ArticleDeleted", article_id=article_id, title=title, caller_id=caller_id)
        return ServiceResult.ok(message="Article deleted successfully")

    def _transition(self, article_id, status, event_name, caller_id):
        article = self.uow.articles.get(article_id)
        if article is None:
            return ServiceResult.not_found("Article not found")

        with self.uow.transaction():
            article.status = status
            if status == ArticleStatus.PUBLISHED and article.published_at is None:
                article.published_at = self.clock()

        self.events.emit(event_name, article_id=article.id, title=article.title, caller_id=caller_id)
        verb = "published" if status == ArticleStatus.PUBLISHED else "unpublished"
        return ServiceResult.ok(article.to_dict(), f"Article {verb} successfully")

    @staticmethod
    def _assign(article, fields):
        for name in _EDITABLE_FIELDS:
            if name in fields:
                setattr(article, name, fields[name])
        if article.summary is None:
            article.summary = ""

    def _resolve_tags(self, names):
        tags = []
        seen = set()
        for name in names:
            slug = generate_slug(name)
            if slug in seen:
                continue
            seen.add(slug)
            # "python" reuses "Python": both map to the same unique slug
            tag = self.uow.tags.get_by_name(name) or self.uow.tags.get_by_slug(slug)
            if tag is None:
                tag = Tag(name=name, slug=slug, created_at=self.clock())
                self.uow.tags.add(tag)
                logger.info("Created tag %r while saving article", name)
            tags.append(tag)
        return tags

    # ------------------------------------------------------------------- tags

    def list_tags(self):
        return [dict(tag.to_dict(), article_count=count) for tag, count in self.uow.tags.with_published_counts()]

    def popular_tags(self, count=10):
        return [
            dict(tag.to_dict(), article_count=n)
            for tag, n in self.uow.tags.with_published_counts(limit=count)
        ]

    def create_tag(self, name, description=None, caller_id=None):
        if self.uow.tags.get_by_name(name) is not None or self.uow.tags.get_by_slug(generate_slug(name)) is not None:
            return ServiceResult.conflict("Tag with this name already exists")

        with self.uow.transaction():
            tag = self.uow.tags.add(
                Tag(name=name, slug=generate_slug(name), description=description, created_at=self.clock())
            )

        self.events.emit("TagCreated", tag_id=tag.id, tag_name=tag.name, caller_id=caller_id)
        return ServiceResult.ok(tag.to_dict(), "Tag created successfully")

    def update_tag(self, tag_id, name, description=None, caller_id=None):
        tag = self.uow.tags.get(tag_id)
        if tag is None:
            return ServiceResult.not_found("Tag not found")
        for existing in (self.uow.tags.get_by_name(name), self.uow.tags.get_by_slug(generate_slug(name))):
            if existing is not None and existing.id != tag.id:
                return ServiceResult.conflict("Tag with this name already exists")

        with self.uow.transaction():
            tag.name = name
            tag.slug = generate_slug(name)
            tag.description = description

        self.events.emit("TagUpdated", tag_id=tag.id, tag_name=tag.name, caller_id=caller_id)
        return ServiceResult.ok(tag.to_dict(), "Tag updated successfully")

    def delete_tag(self, tag_id, caller_id=None):
        tag = self.uow.tags.get(tag_id)
        if tag is None:
            return ServiceResult.not_found("Tag not found")

        name = tag.name
        with self.uow.transaction():
            self.uow.tags.delete(tag)

        self.events.emit("TagDeleted", tag_id=tag_id, tag_name=name, caller_id=caller_id)
        return ServiceResult.ok(message="Tag deleted successfully")
