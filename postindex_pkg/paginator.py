"""
Pagination of ordered post sequences.
"""

from .errors import InvalidConfigError
from .models import Page

ELLIPSIS = '...'


def check_per_page(per_page):
    if isinstance(per_page, bool) or not isinstance(per_page, int) or per_page <= 0:
        raise InvalidConfigError('per_page', per_page, 'must be a positive integer')
    return per_page


def paginate(posts, config, term=None):
    """
    Split an ordered post sequence into pages.

    ``total_pages`` is ceil(N / per_page); page i holds offsets
    [(i-1)*per_page, min(i*per_page, N)). An empty sequence still yields one
    empty page so its index is linkable.

    Args:
        posts: Master sequence or a single term's post list
        config: PaginationConfig supplying per_page
        term: Owning TaxonomyTerm, recorded on every page

    Returns:
        List of Page objects, in order

    Raises:
        InvalidConfigError: if per_page is not a positive integer
    """
    per_page = check_per_page(config.per_page)
    posts = tuple(posts)
    total_posts = len(posts)
    total_pages = max(1, (total_posts + per_page - 1) // per_page)  # integer ceiling

    pages = []
    for page_num in range(1, total_pages + 1):
        start_idx = (page_num - 1) * per_page
        end_idx = min(start_idx + per_page, total_posts)
        pages.append(Page(
            number=page_num,
            posts=posts[start_idx:end_idx],
            total_pages=total_pages,
            previous_page=page_num - 1 if page_num > 1 else None,
            next_page=page_num + 1 if page_num < total_pages else None,
            term=term,
        ))
    return pages


def page_window(current_page, total_pages, delta=2):
    """
    Returns a list of page numbers (or ellipses) to display in pagination.
    Always shows page 1 and total_pages.
    Shows ``delta`` pages before and after the current page.
    Inserts '...' when there is a gap.
    """
    links = [1]

    start = max(current_page - delta, 2)
    end = min(current_page + delta, total_pages - 1)

    if start > 2:
        links.append(ELLIPSIS)

    links.extend(range(start, end + 1))

    if end < total_pages - 1:
        links.append(ELLIPSIS)

    if total_pages > 1:
        links.append(total_pages)

    return links
