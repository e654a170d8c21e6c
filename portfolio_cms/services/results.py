from __future__ import annotations

from dataclasses import dataclass, field
from math import ceil
from typing import Any, Generic, TypeVar

T = TypeVar("T")

NOT_FOUND = "NOT_FOUND"
VALIDATION_FAILED = "VALIDATION_FAILED"
CONFLICT = "CONFLICT"
TRANSACTION_FAILED = "TRANSACTION_FAILED"


@dataclass
class ServiceResult(Generic[T]):
    """Outcome of a service call. Expected failures travel here instead of raising."""

    success: bool
    data: T | None = None
    message: str = ""
    code: str | None = None
    errors: list[str] = field(default_factory=list)
    cause: BaseException | None = None

    @classmethod
    def ok(cls, data: Any = None, message: str = "Success") -> "ServiceResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def not_found(cls, message: str) -> "ServiceResult":
        return cls(success=False, message=message, code=NOT_FOUND)

    @classmethod
    def invalid(cls, errors: list[str], message: str = "Validation failed") -> "ServiceResult":
        return cls(success=False, message=message, code=VALIDATION_FAILED, errors=list(errors))

    @classmethod
    def conflict(cls, message: str) -> "ServiceResult":
        return cls(success=False, message=message, code=CONFLICT)

    @classmethod
    def failed(cls, message: str, cause: BaseException) -> "ServiceResult":
        return cls(
            success=False,
            message=message,
            code=TRANSACTION_FAILED,
            errors=[str(cause)],
            cause=cause,
        )


@dataclass
class PagedResult(Generic[T]):
    items: list[T]
    total_count: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return ceil(self.total_count / self.page_size) if self.page_size else 0

    def to_dict(self, serialize=None) -> dict[str, Any]:
        return {
            "items": [serialize(i) for i in self.items] if serialize else self.items,
            "total_count": self.total_count,
            "page": self.page,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
        }


def normalize_page(page, page_size, default_size, max_size=100):
    """Clamp paging params the way the list endpoints expect (1-based page)."""
    try:
        page = int(page)
    except (TypeError, ValueError):
        page = 1
    try:
        page_size = int(page_size)
    except (TypeError, ValueError):
        page_size = default_size
    return max(1, page), max(1, min(page_size, max_size))
