import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Pagination:
    current_page: int
    total_pages: int
    prev_url: Optional[str] = None
    next_url: Optional[str] = None

    @property
    def has_prev(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def total_pages(item_count: int, page_size: int) -> int:
    """ceil(item_count / page_size), never less than 1."""
    return max(1, math.ceil(item_count / max(1, page_size)))


def page_url(root: str, page: int) -> str:
    """URL of a listing page; page 1 is the listing root itself."""
    root = root.rstrip('/') + '/'
    if page <= 1:
        return root
    return f"{root}page/{page}/"


def page_dir(page: int) -> Tuple[str, ...]:
    """Path segments of a listing page relative to its root directory."""
    if page <= 1:
        return ()
    return ('page', str(page))


def paginate(items: Sequence, page_size: int, root: str) -> List[Tuple[Pagination, list]]:
    """
    Split items into pages under the listing root.

    An empty sequence still yields one (empty) page.
    """
    pages = total_pages(len(items), page_size)
    result = []
    for page in range(1, pages + 1):
        start = (page - 1) * page_size
        pagination = Pagination(
            current_page=page,
            total_pages=pages,
            prev_url=page_url(root, page - 1) if page > 1 else None,
            next_url=page_url(root, page + 1) if page < pages else None,
        )
        result.append((pagination, list(items[start:start + page_size])))
    return result
