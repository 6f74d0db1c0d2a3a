"""
Error types raised while building listing pages.

Every error carries the input that caused it (slug, term, config field or
template) so a failing build can be traced back to a single record or setting.
"""

from typing import Any, Optional


class PostIndexError(Exception):
    """Base class for all build failures."""


class DuplicateSlugError(PostIndexError):
    """Two post records share the same slug."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Duplicate post slug: '{slug}'")


class InvalidConfigError(PostIndexError):
    """A pagination setting has an unusable value."""

    def __init__(self, field: str, value: Any, reason: str = None):
        self.field = field
        self.value = value
        message = f"Invalid value for '{field}': {value!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InvalidPostError(PostIndexError):
    """A post record is missing a required field or has a malformed one."""

    def __init__(self, identifier: str, field: str, reason: str):
        self.identifier = identifier
        self.field = field
        super().__init__(f"Invalid post {identifier}: field '{field}' {reason}")


class UnresolvedPlaceholderError(PostIndexError):
    """A permalink template references a slot the page cannot supply."""

    def __init__(self, placeholder: str, template: str, term: Optional[str] = None, reason: str = None):
        self.placeholder = placeholder
        self.template = template
        self.term = term
        message = f"Cannot resolve ':{placeholder}' in permalink template '{template}'"
        if term is not None:
            message += f" for term '{term}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class OutputPathCollisionError(PostIndexError):
    """Two generated pages resolved to the same output path."""

    def __init__(self, path: str, first: str, second: str):
        self.path = path
        self.first = first
        self.second = second
        super().__init__(f"Output path '{path}' produced by both {first} and {second}")
