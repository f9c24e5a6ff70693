"""Read helpers shared by the query modules.

Protean's query set caps each fetch (100 rows by default), so ``fetch_all``
walks the result in batches until a short batch comes back.
"""

from dataclasses import dataclass, field

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from coursereviews.errors import not_found

BATCH_SIZE = 100
DEFAULT_PAGE_SIZE = 10


def fetch_all(aggregate_cls, **filters):
    """Every record of ``aggregate_cls`` matching ``filters``."""
    dao = current_domain.repository_for(aggregate_cls)._dao
    records = []
    offset = 0
    while True:
        query = dao.query.filter(**filters) if filters else dao.query
        batch = query.offset(offset).limit(BATCH_SIZE).all().items
        records.extend(batch)
        if len(batch) < BATCH_SIZE:
            return records
        offset += BATCH_SIZE


def fetch_first(aggregate_cls, **filters):
    dao = current_domain.repository_for(aggregate_cls)._dao
    items = dao.query.filter(**filters).limit(1).all().items
    return items[0] if items else None


def newest_first(records):
    """Sort by creation time descending; ties broken by id descending."""
    return sorted(records, key=lambda r: (r.created_at, str(r.id)), reverse=True)


@dataclass
class Page:
    items: list = field(default_factory=list)
    page: int = 0
    size: int = DEFAULT_PAGE_SIZE
    total: int = 0

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return (self.total + self.size - 1) // self.size

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages


def paginate(items, page=0, size=DEFAULT_PAGE_SIZE) -> Page:
    """Slice an ordered list into a zero-based page."""
    page = max(page, 0)
    size = size if size > 0 else DEFAULT_PAGE_SIZE
    start = page * size
    return Page(items=list(items[start : start + size]), page=page, size=size, total=len(items))


def get_or_not_found(aggregate_cls, identifier, kind):
    """Load an aggregate by id, reporting a miss as ``NotFound`` for ``kind``."""
    try:
        return current_domain.repository_for(aggregate_cls).get(str(identifier))
    except ObjectNotFoundError:
        raise not_found(kind, identifier) from None
