"""
Taxonomy indexing: group the master sequence into category and tag buckets.
"""

from collections.abc import Mapping

from .models import TAXONOMY_KINDS, TaxonomyTerm


def normalize_term(name):
    """Trim and lower-case a term name. Returns '' for blank names."""
    return str(name).strip().lower()


def _declared_entries(entries):
    """Yield (label, description) pairs from a categories.yml/tags.yml style table."""
    if not entries:
        return
    values = entries.values() if isinstance(entries, Mapping) else entries
    for entry in values:
        if isinstance(entry, Mapping):
            if entry.get('name'):
                yield str(entry['name']), entry.get('description')
        elif isinstance(entry, str):
            yield entry, None


def build_taxonomy(posts, declared=None):
    """
    Group posts into taxonomy terms.

    Args:
        posts: The sorted master sequence
        declared: Optional mapping of kind ('category' or 'tag') to declared
            term entries; declared terms exist even when no post uses them

    Returns:
        Dict keyed by (kind, normalized name), ordered by key. Each term's posts
        keep the master order and a post is listed at most once per term.
    """
    labels = {}
    descriptions = {}
    members = {}

    for kind in TAXONOMY_KINDS:
        for label, description in _declared_entries((declared or {}).get(kind)):
            key = (kind, normalize_term(label))
            if not key[1]:
                continue
            labels.setdefault(key, label.strip())
            descriptions.setdefault(key, description)
            members.setdefault(key, [])

    for post in posts:
        for kind in TAXONOMY_KINDS:
            seen = set()
            for raw in post.terms(kind):
                key = (kind, normalize_term(raw))
                if not key[1] or key in seen:
                    continue
                seen.add(key)
                labels.setdefault(key, str(raw).strip())
                members.setdefault(key, []).append(post)

    return {
        key: TaxonomyTerm(
            kind=key[0],
            name=key[1],
            label=labels[key],
            posts=tuple(members[key]),
            description=descriptions.get(key),
        )
        for key in sorted(members)
    }
