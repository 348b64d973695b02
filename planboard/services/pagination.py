import math
from typing import Any, Dict, List, Sequence, Union

ELLIPSIS = "..."


def page_numbers(current: int, total_pages: int) -> List[Union[int, str]]:
    """Page links for a pager: every page up to 7, otherwise first, last,
    the neighbours of `current` and ellipsis gaps."""
    if total_pages <= 7:
        return list(range(1, total_pages + 1))

    pages: List[Union[int, str]] = [1]
    if current > 3:
        pages.append(ELLIPSIS)
    for page in range(max(2, current - 1), min(total_pages - 1, current + 1) + 1):
        pages.append(page)
    if current < total_pages - 2:
        pages.append(ELLIPSIS)
    pages.append(total_pages)
    return pages


def paginate(items: Sequence[Any], page: int, per_page: int) -> Dict[str, Any]:
    total = len(items)
    total_pages = math.ceil(total / per_page) if per_page > 0 else 0
    page = min(max(page, 1), max(total_pages, 1))
    start = (page - 1) * per_page
    end = start + per_page
    return {
        "items": list(items[start:end]),
        "page": page,
        "per_page": per_page,
        "total": total,
        "total_pages": total_pages,
        "showing_start": start + 1 if total else 0,
        "showing_end": min(end, total),
        "page_numbers": page_numbers(page, total_pages),
    }
