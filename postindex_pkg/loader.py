"""
Content loading: turn post records into one ordered, immutable sequence.
"""

from collections.abc import Mapping
from dataclasses import replace
from datetime import date, datetime, timezone

from .errors import DuplicateSlugError, InvalidPostError
from .models import Post

LEGACY_DATE_FORMATS = ['%Y-%m-%dT%H:%M:%S', '%Y-%m-%d', '%b %d, %Y']


def parse_date(value):
    """Parse a publish date into a timezone-aware datetime, or return None."""
    parsed = None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            for fmt in LEGACY_DATE_FORMATS:
                try:
                    parsed = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def lookup_term(value, declared):
    """Resolve an integer term reference against a declared term table."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        entry = (declared or {}).get(value)
        if isinstance(entry, Mapping):
            return entry.get('name')
        if isinstance(entry, str):
            return entry
        return None
    if isinstance(value, str):
        return value
    return None


def _term_names(raw, declared, identifier, field):
    if raw is None:
        return ()
    if isinstance(raw, (str, int)) and not isinstance(raw, bool):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        raise InvalidPostError(identifier, field, 'must be a list of names')
    names = []
    for value in raw:
        name = lookup_term(value, declared)
        if name is None:
            raise InvalidPostError(identifier, field, f'references unknown term {value!r}')
        names.append(name)
    return tuple(names)


def _require_slug(value, index):
    if not isinstance(value, str) or not value.strip():
        raise InvalidPostError(f'#{index}', 'slug', 'is required')
    return value.strip()


def _require_date(value, identifier):
    published = parse_date(value)
    if published is None:
        raise InvalidPostError(identifier, 'date', f"is missing or unparseable: {value!r}")
    return published


def post_from_record(record, categories=None, tags=None, index=None):
    """
    Coerce a post record into a Post.

    Args:
        record: A Post, or a mapping with slug, title, date, categories, tags,
            excerpt and body keys
        categories: Declared category table used to resolve integer references
        tags: Declared tag table used to resolve integer references
        index: Position of the record, used in error messages when it has no slug

    Returns:
        Post instance

    Raises:
        InvalidPostError: if slug or date is missing or malformed
    """
    if isinstance(record, Post):
        # Post instances go through the same slug and date rules as mappings
        slug = _require_slug(record.slug, index)
        published = _require_date(record.date, f"'{slug}'")
        if slug == record.slug and published is record.date:
            return record
        return replace(record, slug=slug, date=published)
    if not isinstance(record, Mapping):
        raise InvalidPostError(f'#{index}', 'record', f'must be a mapping, got {type(record).__name__}')

    slug = _require_slug(record.get('slug'), index)
    identifier = f"'{slug}'"
    published = _require_date(record.get('date'), identifier)

    title = record.get('title')
    return Post(
        slug=slug,
        title=title if isinstance(title, str) else 'Untitled',
        date=published,
        categories=_term_names(record.get('categories'), categories, identifier, 'categories'),
        tags=_term_names(record.get('tags'), tags, identifier, 'tags'),
        excerpt=str(record.get('excerpt') or ''),
        body=record.get('body'),
    )


def load_posts(records, config, categories=None, tags=None):
    """
    Load post records into the master sequence.

    Posts are ordered by publish date (newest first when ``config.sort_reverse``
    is set) and ties are always broken by slug ascending.

    Raises:
        DuplicateSlugError: if two records share a slug
        InvalidPostError: if a record cannot be coerced into a Post
    """
    posts = [post_from_record(record, categories, tags, index) for index, record in enumerate(records)]

    seen = set()
    for post in posts:
        if post.slug in seen:
            raise DuplicateSlugError(post.slug)
        seen.add(post.slug)

    # sorted() is stable with reverse=True too; equal dates keep slug order.
    by_slug = sorted(posts, key=lambda p: p.slug)
    return tuple(sorted(by_slug, key=lambda p: p.date, reverse=config.sort_reverse))
