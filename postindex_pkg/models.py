"""
Data model for listing generation.

All entities are immutable and rebuilt on every run from the current post
collection.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from .errors import InvalidConfigError
from .permalink import validate_template

CATEGORY = 'category'
TAG = 'tag'
TAXONOMY_KINDS = (CATEGORY, TAG)


@dataclass(frozen=True)
class Post:
    """A single parsed post. ``body`` is an opaque handle and never inspected."""
    slug: str
    title: str
    date: datetime
    categories: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    excerpt: str = ''
    body: Any = field(default=None, compare=False, repr=False)

    def terms(self, kind: str) -> Tuple[str, ...]:
        """Return the raw term names this post declares for ``kind``."""
        return self.categories if kind == CATEGORY else self.tags

    def to_dict(self) -> Dict[str, Any]:
        return {
            'slug': self.slug,
            'title': self.title,
            'date': self.date.isoformat(),
            'categories': list(self.categories),
            'tags': list(self.tags),
            'excerpt': self.excerpt,
        }


@dataclass(frozen=True)
class TaxonomyTerm:
    """A category or tag bucket. ``name`` is already normalized."""
    kind: str
    name: str
    label: str
    posts: Tuple[Post, ...] = ()
    description: Optional[str] = None


@dataclass(frozen=True)
class Page:
    """One numbered slice of an ordered post sequence."""
    number: int
    posts: Tuple[Post, ...]
    total_pages: int
    previous_page: Optional[int] = None
    next_page: Optional[int] = None
    term: Optional[TaxonomyTerm] = None
    path: Optional[str] = None

    def with_path(self, path: str) -> 'Page':
        return replace(self, path=path)


@dataclass(frozen=True)
class PageDescriptor:
    """Everything a template renderer needs to write one listing page."""
    path: str
    posts: Tuple[Post, ...]
    number: int
    total_pages: int
    kind: str = 'index'
    term: Optional[str] = None
    term_label: Optional[str] = None
    previous_path: Optional[str] = None
    next_path: Optional[str] = None
    page_numbers: Tuple[Union[int, str], ...] = ()
    page_paths: Tuple[Tuple[int, str], ...] = ()

    def path_for(self, number: int) -> Optional[str]:
        """Return the path of page ``number`` of this sequence, if it was emitted."""
        return dict(self.page_paths).get(number)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': self.path,
            'kind': self.kind,
            'term': self.term,
            'term_label': self.term_label,
            'number': self.number,
            'total_pages': self.total_pages,
            'previous_path': self.previous_path,
            'next_path': self.next_path,
            'page_numbers': list(self.page_numbers),
            'page_paths': {str(number): path for number, path in self.page_paths},
            'posts': [post.to_dict() for post in self.posts],
        }


@dataclass(frozen=True)
class PaginationConfig:
    """Settings shared by every component of a run."""
    per_page: int = 10
    permalink_template: str = '/page/:num/'
    sort_reverse: bool = True
    first_page_is_root: bool = True
    root_path: str = '/'
    category_template: str = '/category/:term/page/:num/'
    tag_template: str = '/tags/:term/page/:num/'
    strict: bool = True
    workers: int = 1

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> 'PaginationConfig':
        """Build a config from a settings mapping, ignoring unrelated keys."""
        known = {name: settings[name] for name in cls.__dataclass_fields__ if name in settings}
        return cls(**known)

    def template_for(self, kind: Optional[str]) -> str:
        """Return the permalink template used for ``kind`` (None is the master sequence)."""
        if kind == CATEGORY:
            return self.category_template
        if kind == TAG:
            return self.tag_template
        return self.permalink_template

    def validate(self) -> 'PaginationConfig':
        """
        Check every setting before any pagination work starts.

        Returns:
            The config itself, so calls can be chained

        Raises:
            InvalidConfigError: naming the first offending field
        """
        if isinstance(self.per_page, bool) or not isinstance(self.per_page, int) or self.per_page <= 0:
            raise InvalidConfigError('per_page', self.per_page, 'must be a positive integer')
        if isinstance(self.workers, bool) or not isinstance(self.workers, int) or self.workers <= 0:
            raise InvalidConfigError('workers', self.workers, 'must be a positive integer')
        for name in ('sort_reverse', 'first_page_is_root', 'strict'):
            if not isinstance(getattr(self, name), bool):
                raise InvalidConfigError(name, getattr(self, name), 'must be true or false')
        if not isinstance(self.root_path, str) or not self.root_path.startswith('/'):
            raise InvalidConfigError('root_path', self.root_path, "must start with '/'")
        for name in ('permalink_template', 'category_template', 'tag_template'):
            problem = validate_template(getattr(self, name))
            if problem:
                raise InvalidConfigError(name, getattr(self, name), problem)
        return self


def flatten(pages: List[Page]) -> List[Post]:
    """Concatenate the posts of ``pages`` in page order."""
    return [post for page in pages for post in page.posts]
