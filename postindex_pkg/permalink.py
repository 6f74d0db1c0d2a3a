"""
Permalink resolution for listing pages.

Templates are plain paths with ``:slot`` placeholders, e.g.
``/category/:term/page/:num/``. Only a closed set of slots is recognised;
anything else is rejected instead of being copied into the output path.
A template may carry a first-page override after ``|``, e.g.
``/page/:num/|/`` sends page 1 to ``/``.
"""

import re
from typing import Dict, Optional, Tuple
from unicodedata import normalize

from .errors import UnresolvedPlaceholderError

PLACEHOLDER_PATTERN = re.compile(r':([A-Za-z_][A-Za-z0-9_]*)')
FIRST_PAGE_SEPARATOR = '|'

# slot name -> (value type, canonical slot)
SLOTS = {
    'num': (int, 'num'),
    'term': (str, 'term'),
    'name': (str, 'term'),
}


def split_template(template: str) -> Tuple[str, Optional[str]]:
    """Split a template into its pattern and optional first-page override."""
    if FIRST_PAGE_SEPARATOR in template:
        pattern, override = template.split(FIRST_PAGE_SEPARATOR, 1)
        return pattern.strip(), override.strip()
    return template.strip(), None


def placeholders(template: str) -> Tuple[str, ...]:
    return tuple(PLACEHOLDER_PATTERN.findall(template))


def validate_template(template) -> Optional[str]:
    """
    Check a permalink template without resolving it.

    Args:
        template: Template string to check

    Returns:
        A description of the problem, or None if the template is usable
    """
    if not isinstance(template, str) or not template.strip():
        return 'template must be a non-empty string'
    pattern, override = split_template(template)
    for part in filter(None, (pattern, override)):
        unknown = [name for name in placeholders(part) if name not in SLOTS]
        if unknown:
            return f"unknown placeholder ':{unknown[0]}'"
    if 'num' not in placeholders(pattern):
        return "template must contain ':num'"
    if override is not None and not override:
        return 'first-page override is empty'
    return None


def term_slug(name: str) -> str:
    """
    Convert a term name to its URL form.

    Lower-cases, turns whitespace into hyphens and strips everything that is
    not an ASCII letter, digit or hyphen. Accented letters are transliterated
    first, so ``Café Latte`` becomes ``cafe-latte``.
    """
    text = normalize('NFKD', name).encode('ascii', 'ignore').decode('ascii')
    text = re.sub(r'\s+', '-', text.strip().lower())
    text = re.sub(r'[^a-z0-9-]', '', text)
    text = re.sub(r'-{2,}', '-', text)
    return text.strip('-')


def normalize_path(path: str) -> str:
    """Return ``path`` with a single leading slash and no doubled slashes."""
    path = re.sub(r'/{2,}', '/', '/' + path.strip())
    return path


class PermalinkResolver:
    """Expand permalink templates into output paths."""

    def __init__(self, first_page_is_root: bool = True, root_path: str = '/'):
        self.first_page_is_root = first_page_is_root
        self.root_path = root_path

    @classmethod
    def from_config(cls, config) -> 'PermalinkResolver':
        return cls(first_page_is_root=config.first_page_is_root, root_path=config.root_path)

    def resolve(self, template: str, page, term=None, is_master: bool = False) -> str:
        """
        Resolve the output path for ``page``.

        Args:
            template: Permalink template, optionally with a ``|`` first-page override
            page: The page being placed; only its number is read
            term: Owning TaxonomyTerm for taxonomy pages. Defaults to ``page.term``
            is_master: True for pages of the full post sequence

        Returns:
            The concrete output path

        Raises:
            UnresolvedPlaceholderError: if the template needs a slot this page lacks
        """
        term = term if term is not None else getattr(page, 'term', None)
        pattern, override = split_template(template)

        if page.number == 1:
            if override is not None:
                return self._substitute(override, template, page.number, term)
            if is_master and self.first_page_is_root:
                return normalize_path(self.root_path)

        return self._substitute(pattern, template, page.number, term)

    def _substitute(self, pattern: str, template: str, number: int, term) -> str:
        values = self._slot_values(template, number, term)

        def replace_slot(match):
            name = match.group(1)
            if name not in SLOTS:
                raise UnresolvedPlaceholderError(name, template, getattr(term, 'name', None),
                                                 'unknown placeholder')
            value_type, slot = SLOTS[name]
            value = values.get(slot)
            if value is None:
                raise UnresolvedPlaceholderError(name, template, getattr(term, 'name', None),
                                                 'not available for this page')
            if not isinstance(value, value_type):
                raise UnresolvedPlaceholderError(name, template, getattr(term, 'name', None),
                                                 f'expected {value_type.__name__}')
            return str(value)

        return normalize_path(PLACEHOLDER_PATTERN.sub(replace_slot, pattern))

    def _slot_values(self, template: str, number: int, term) -> Dict[str, object]:
        values = {'num': number, 'term': None}
        if term is not None:
            slug = term_slug(term.name)
            uses_term = any(name in SLOTS and SLOTS[name][1] == 'term' for name in placeholders(template))
            if not slug and uses_term:
                raise UnresolvedPlaceholderError('term', template, term.name,
                                                 'term name has no URL-safe characters')
            values['term'] = slug or None
        return values
