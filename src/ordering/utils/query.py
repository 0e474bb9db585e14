"""Helpers for walking repository queries past the default page size."""

PAGE_SIZE = 100


def iter_all(queryset, page_size=PAGE_SIZE):
    """Yield every record matched by `queryset`, fetching one page at a time."""
    offset = 0
    while True:
        page = queryset.offset(offset).limit(page_size).all()
        yield from page.items
        if len(page.items) < page_size:
            return
        offset += page_size
