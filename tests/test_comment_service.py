from datetime import datetime

from portfolio_cms.models.comment import Comment, CommentStatus
from portfolio_cms.services.results import NOT_FOUND, TRANSACTION_FAILED


def _submit(service, article_id, content="Nice post"):
    return service.submit(article_id, "Reader", "reader@example.com", content, "203.0.113.7", "pytest-agent")


def test_submit_creates_pending_comment(comment_service, published_article, uow):
    result = _submit(comment_service, published_article["id"])

    assert result.success
    comment = uow.comments.get(result.data["id"])
    assert comment.status == CommentStatus.PENDING
    assert comment.ip_address == "203.0.113.7"
    assert comment.user_agent == "pytest-agent"


def test_submit_to_missing_article_is_not_found(comment_service):
    result = _submit(comment_service, 404)

    assert result.code == NOT_FOUND


def test_draft_articles_accept_comments(comment_service, content_service, article_fields):
    draft_id = content_service.create(article_fields(), "admin-1").data["id"]

    assert _submit(comment_service, draft_id).success


def test_only_approved_comments_are_listed_oldest_first(comment_service, published_article):
    ids = [_submit(comment_service, published_article["id"], f"comment {i}").data["id"] for i in range(3)]
    comment_service.approve(ids[2], "mod-1")
    comment_service.approve(ids[0], "mod-1")

    listed = comment_service.list_approved(published_article["id"])

    assert [c["id"] for c in listed] == [ids[0], ids[2]]
    assert "author_email" not in listed[0]


def test_pending_queue_is_newest_first(comment_service, published_article):
    ids = [_submit(comment_service, published_article["id"]).data["id"] for _ in range(3)]
    comment_service.reject(ids[1], "mod-1")

    page = comment_service.list_pending()

    assert page.total_count == 2
    assert [c["id"] for c in page.items] == [ids[2], ids[0]]
    assert page.items[0]["author_email"] == "reader@example.com"


def test_approve_and_reject_missing_comment(comment_service):
    assert comment_service.approve(1, "mod-1").code == NOT_FOUND
    assert comment_service.reject(1, "mod-1").code == NOT_FOUND
    assert comment_service.delete(1, "mod-1").code == NOT_FOUND


def test_moderation_is_last_write_wins(comment_service, published_article, uow):
    comment_id = _submit(comment_service, published_article["id"]).data["id"]

    comment_service.approve(comment_id, "mod-1")
    comment_service.reject(comment_id, "mod-2")

    assert uow.comments.get(comment_id).status == CommentStatus.REJECTED


def test_delete_is_permanent(comment_service, published_article, uow):
    comment_id = _submit(comment_service, published_article["id"]).data["id"]
    comment_service.approve(comment_id, "mod-1")

    assert comment_service.delete(comment_id, "mod-1").success
    assert uow.comments.get(comment_id) is None


def test_bulk_approve_skips_missing_ids(comment_service, published_article, uow):
    ids = [_submit(comment_service, published_article["id"]).data["id"] for _ in range(2)]

    result = comment_service.bulk_approve(ids + [9999], "mod-1")

    assert result.success
    assert result.data == 2
    assert all(uow.comments.get(i).status == CommentStatus.APPROVED for i in ids)


def test_bulk_counts_duplicate_ids_once(comment_service, published_article):
    comment_id = _submit(comment_service, published_article["id"]).data["id"]

    result = comment_service.bulk_reject([comment_id, comment_id], "mod-1")

    assert result.data == 1


def test_bulk_delete_removes_comments(comment_service, published_article, uow):
    ids = [_submit(comment_service, published_article["id"]).data["id"] for _ in range(3)]

    result = comment_service.bulk_delete(ids[:2], "mod-1")

    assert result.data == 2
    assert uow.comments.count() == 1


def test_bulk_failure_rolls_back_whole_batch(comment_service, published_article, uow, monkeypatch):
    ids = [_submit(comment_service, published_article["id"]).data["id"] for _ in range(3)]

    def broken_flush():
        raise RuntimeError("database went away")

    monkeypatch.setattr(uow.comments, "flush", broken_flush)
    result = comment_service.bulk_approve(ids, "mod-1")
    monkeypatch.undo()

    assert not result.success
    assert result.code == TRANSACTION_FAILED
    assert isinstance(result.cause, RuntimeError)
    assert all(uow.comments.get(i).status == CommentStatus.PENDING for i in ids)


def test_bulk_emits_single_event_with_count(comment_service, published_article, events):
    ids = [_submit(comment_service, published_article["id"]).data["id"] for _ in range(2)]

    comment_service.bulk_approve(ids, "mod-1")

    name, context = events.events[-1]
    assert name == "CommentsBulkApproved"
    assert context == {"comment_count": "2", "moderator_id": "mod-1"}


def test_statistics_by_status_and_period(comment_service, published_article, uow, clock):
    # 2024-05-15 is a Wednesday, so the week started on Sunday 2024-05-12
    submitted = [
        (datetime(2024, 5, 15, 8, 0), CommentStatus.PENDING),
        (datetime(2024, 5, 12, 0, 30), CommentStatus.APPROVED),
        (datetime(2024, 5, 11, 23, 0), CommentStatus.APPROVED),
        (datetime(2024, 4, 30, 10, 0), CommentStatus.REJECTED),
    ]
    with uow.transaction():
        for when, status in submitted:
            uow.comments.add(
                Comment(
                    article_id=published_article["id"],
                    author_name="Reader",
                    author_email="reader@example.com",
                    content="hi",
                    submitted_at=when,
                    status=status,
                )
            )
    clock.set(datetime(2024, 5, 15, 12, 0))

    stats = comment_service.statistics()

    assert stats == {
        "total_comments": 4,
        "pending_comments": 1,
        "approved_comments": 2,
        "rejected_comments": 1,
        "comments_today": 1,
        "comments_this_week": 2,
        "comments_this_month": 3,
    }


def test_statistics_week_starts_today_on_sunday(comment_service, published_article, uow, clock):
    with uow.transaction():
        uow.comments.add(
            Comment(
                article_id=published_article["id"],
                author_name="Reader",
                author_email="reader@example.com",
                content="hi",
                submitted_at=datetime(2024, 5, 11, 22, 0),
            )
        )
    clock.set(datetime(2024, 5, 12, 9, 0))

    stats = comment_service.statistics()

    assert stats["comments_this_week"] == 0
    assert stats["comments_this_month"] == 1


def test_bulk_fault_midway_rolls_back_earlier_changes(comment_service, published_article, uow, monkeypatch):
    ids = [_submit(comment_service, published_article["id"]).data["id"] for _ in range(3)]
    real_get = uow.comments.get
    calls = []

    def get_then_fail(comment_id):
        calls.append(comment_id)
        if len(calls) == 2:
            raise RuntimeError("lost connection mid-batch")
        return real_get(comment_id)

    monkeypatch.setattr(uow.comments, "get", get_then_fail)
    result = comment_service.bulk_approve(ids, "mod-1")
    monkeypatch.undo()

    assert result.code == TRANSACTION_FAILED
    assert calls == ids[:2]
    assert all(uow.comments.get(i).status == CommentStatus.PENDING for i in ids)


def test_submitted_event_has_no_author_details(comment_service, published_article, events):
    comment_id = _submit(comment_service, published_article["id"]).data["id"]

    name, context = events.events[-1]

    assert name == "CommentSubmitted"
    assert context == {"comment_id": str(comment_id), "article_id": str(published_article["id"])}
