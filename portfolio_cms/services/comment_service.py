"""Comment intake and moderation.

Comments enter as Pending and only a moderator moves them to Approved or
Rejected; nothing is classified automatically. Deletion is permanent and
allowed from any status.

Bulk operations run in a single transaction. Ids that no longer exist are
skipped and simply not counted. Any other exception rolls back the whole
batch and comes back as a TRANSACTION_FAILED result, so either every
existing comment in the batch changes or none do.

Moderator ids are recorded in events for audit. Access control happens in
the HTTP layer before these methods are called.
"""
import logging
from datetime import datetime, time, timedelta

from portfolio_cms.models.comment import Comment, CommentStatus
from portfolio_cms.services.results import PagedResult, ServiceResult, normalize_page

logger = logging.getLogger(__name__)


class CommentService:
    def __init__(self, uow, events, clock=datetime.utcnow, page_size=20):
        self.uow = uow
        self.events = events
        self.clock = clock
        self.page_size = page_size

    def submit(self, article_id, author_name, author_email, content, ip_address=None, user_agent=None):
        # Drafts accept comments too; only existence is checked.
        article = self.uow.articles.get(article_id)
        if article is None:
            return ServiceResult.not_found("Article not found")

        with self.uow.transaction():
            comment = self.uow.comments.add(
                Comment(
                    article_id=article.id,
                    author_name=author_name,
                    author_email=author_email,
                    content=content,
                    submitted_at=self.clock(),
                    status=CommentStatus.PENDING,
                    ip_address=(ip_address or None) and ip_address[:45],
                    user_agent=(user_agent or None) and user_agent[:500],
                )
            )

        self.events.emit("CommentSubmitted", comment_id=comment.id, article_id=article.id)
        return ServiceResult.ok(comment.to_dict(), "Comment submitted successfully and is pending moderation")

    def list_approved(self, article_id):
        return [c.to_dict() for c in self.uow.comments.approved_for_article(article_id)]

    def list_pending(self, page=1, page_size=None):
        return self._page(self.uow.comments.newest_first(CommentStatus.PENDING), page, page_size)

    def list_all(self, page=1, page_size=None):
        return self._page(self.uow.comments.newest_first(), page, page_size)

    def _page(self, query, page, page_size):
        page, page_size = normalize_page(page, page_size or self.page_size, self.page_size)
        items, total = self.uow.comments.paginate(query, page, page_size)
        return PagedResult([c.to_moderation_dict() for c in items], total, page, page_size)

    # ------------------------------------------------------------ single item

    def approve(self, comment_id, moderator_id):
        return self._set_status(comment_id, CommentStatus.APPROVED, "CommentApproved", moderator_id)

    def reject(self, comment_id, moderator_id):
        return self._set_status(comment_id, CommentStatus.REJECTED, "CommentRejected", moderator_id)

    def delete(self, comment_id, moderator_id):
        comment = self.uow.comments.get(comment_id)
        if comment is None:
            return ServiceResult.not_found("Comment not found")

        article_id = comment.article_id
        with self.uow.transaction():
            self.uow.comments.delete(comment)

        self.events.emit("CommentDeleted", comment_id=comment_id, article_id=article_id, moderator_id=moderator_id)
        return ServiceResult.ok(message="Comment deleted successfully")

    def _set_status(self, comment_id, status, event_name, moderator_id):
        comment = self.uow.comments.get(comment_id)
        if comment is None:
            return ServiceResult.not_found("Comment not found")

        # last write wins, no version check
        with self.uow.transaction():
            comment.status = status

        self.events.emit(
            event_name, comment_id=comment.id, article_id=comment.article_id, moderator_id=moderator_id
        )
        return ServiceResult.ok(comment.to_dict(), f"Comment {status.lower()} successfully")

    # ------------------------------------------------------------------- bulk

    def bulk_approve(self, comment_ids, moderator_id):
        return self._bulk(comment_ids, moderator_id, "approved", "CommentsBulkApproved",
                          lambda c: setattr(c, "status", CommentStatus.APPROVED))

    def bulk_reject(self, comment_ids, moderator_id):
        return self._bulk(comment_ids, moderator_id, "rejected", "CommentsBulkRejected",
                          lambda c: setattr(c, "status", CommentStatus.REJECTED))

    def bulk_delete(self, comment_ids, moderator_id):
        return self._bulk(comment_ids, moderator_id, "deleted", "CommentsBulkDeleted", self.uow.comments.delete)

    def _bulk(self, comment_ids, moderator_id, verb, event_name, apply):
        affected = 0
        try:
            with self.uow.transaction():
                for comment_id in dict.fromkeys(comment_ids):
                    comment = self.uow.comments.get(comment_id)
                    if comment is None:
                        continue  # already gone: skip, not a failure
                    apply(comment)
                    affected += 1
                self.uow.comments.flush()
        except Exception as exc:
            logger.exception(
                "Bulk %s failed, batch rolled back (moderator=%s, ids=%s)", verb, moderator_id, list(comment_ids)
            )
            return ServiceResult.failed(f"Failed to {verb[:-1]} comments", exc)

        self.events.emit(event_name, comment_count=affected, moderator_id=moderator_id)
        return ServiceResult.ok(affected, f"{affected} comments {verb} successfully")

    # ------------------------------------------------------------- statistics

    def statistics(self):
        """Counts by status and by period. Recomputed on every call against the service clock."""
        today = datetime.combine(self.clock().date(), time.min)
        # Sunday-based week: weekday() is Monday=0 .. Sunday=6
        week_start = today - timedelta(days=(today.weekday() + 1) % 7)
        month_start = today.replace(day=1)

        comments = self.uow.comments
        return {
            "total_comments": comments.count(),
            "pending_comments": comments.count_by_status(CommentStatus.PENDING),
            "approved_comments": comments.count_by_status(CommentStatus.APPROVED),
            "rejected_comments": comments.count_by_status(CommentStatus.REJECTED),
            "comments_today": comments.count_since(today),
            "comments_this_week": comments.count_since(week_start),
            "comments_this_month": comments.count_since(month_start),
        }
