"""Pagination as an ending scope."""

from __future__ import annotations

from typing import Any

from AdminQuery.core.coercion import INTEGER, Coercion, default_coercion_service
from AdminQuery.core.params import PAGE_KEY, is_blank, param_text
from AdminQuery.core.query import ListQuery, apply_scope
from AdminQuery.core.spec import EndingScope

_PAGE_COERCION = Coercion(kind=INTEGER)

# Row offsets are bound as signed 64-bit integers.
MAX_OFFSET = 2**63 - 1


def page_number(value: Any, per_page: int = 1) -> int:
    """Read a 1-based page number; anything invalid means the first page.

    A page whose row offset ``(page - 1) * per_page`` exceeds ``MAX_OFFSET``
    is invalid too.
    """
    raw = param_text(value)
    if is_blank(raw):
        return 1
    result = default_coercion_service.coerce(_PAGE_COERCION, raw)
    if not result.ok or result.value < 1:
        return 1
    if (result.value - 1) * max(per_page, 1) > MAX_OFFSET:
        return 1
    return result.value


def paginate(per_page: int = 25, scope: str = "paginate") -> EndingScope:
    """Build an ending scope applying ``scope(page, per_page)`` from ``params["page"]``.

    Args:
        per_page: Rows per page.
        scope: Name of the pagination scope on the collection handle.

    Returns:
        Callable suitable for ``QuerySpecBuilder.set_ending_scope``.

    Raises:
        ValueError: If ``per_page`` is not positive.
    """
    if per_page <= 0:
        raise ValueError("per_page must be positive")

    def _paginate(handle: Any, query: ListQuery) -> Any:
        page = page_number(query.params.get(PAGE_KEY), per_page)
        return apply_scope(handle, scope, page, per_page)

    return _paginate
