"""
postindex - paginated listing and taxonomy index pages for a blog.

postindex takes a collection of dated posts and computes the listing pages a
static blog needs: the numbered main index plus one paginated index per
category and tag, each with a resolved permalink and previous/next links.
"""

__version__ = "1.0.0"

from .core import PostIndex
from .errors import (
    DuplicateSlugError,
    InvalidConfigError,
    InvalidPostError,
    OutputPathCollisionError,
    PostIndexError,
    UnresolvedPlaceholderError,
)
from .models import Page, PageDescriptor, PaginationConfig, Post, TaxonomyTerm

__all__ = [
    'PostIndex',
    'Post',
    'TaxonomyTerm',
    'Page',
    'PageDescriptor',
    'PaginationConfig',
    'PostIndexError',
    'DuplicateSlugError',
    'InvalidConfigError',
    'InvalidPostError',
    'OutputPathCollisionError',
    'UnresolvedPlaceholderError',
]
