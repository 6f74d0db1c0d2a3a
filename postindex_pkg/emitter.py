"""
Page emission: attach resolved paths and navigation links to pages.

Nothing here touches the filesystem; descriptors are handed to a renderer.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import UnresolvedPlaceholderError
from .models import Page, PageDescriptor, TaxonomyTerm
from .paginator import page_window
from .permalink import PermalinkResolver


@dataclass
class EmitResult:
    descriptors: List[PageDescriptor] = field(default_factory=list)
    failures: List[UnresolvedPlaceholderError] = field(default_factory=list)


class PageEmitter:
    """Turn paginated sequences into PageDescriptors."""

    def __init__(self, resolver: PermalinkResolver, strict: bool = True):
        self.resolver = resolver
        self.strict = strict
        self.logger = logging.getLogger('PageEmitter')

    @classmethod
    def from_config(cls, config) -> 'PageEmitter':
        return cls(PermalinkResolver.from_config(config), strict=config.strict)

    def emit(self, pages: List[Page], template: str, term: Optional[TaxonomyTerm] = None,
             is_master: bool = False) -> EmitResult:
        """
        Resolve paths for one paginated sequence and build its descriptors.

        In strict mode the first unresolvable page aborts the call. Otherwise the
        page is skipped, the failure is recorded on the result, and links from
        its neighbours fall back to None.
        """
        result = EmitResult()
        label = f"{term.kind} '{term.name}'" if term is not None else 'index'

        resolved = {}
        for page in pages:
            try:
                resolved[page.number] = page.with_path(self.resolver.resolve(template, page, term, is_master))
            except UnresolvedPlaceholderError as e:
                if self.strict:
                    raise
                self.logger.error(f"Skipping page {page.number} of {label}: {e}")
                result.failures.append(e)

        for number, page in resolved.items():
            previous_page = resolved.get(page.previous_page)
            next_page = resolved.get(page.next_page)
            window = page_window(number, page.total_pages)
            result.descriptors.append(PageDescriptor(
                path=page.path,
                posts=page.posts,
                number=number,
                total_pages=page.total_pages,
                kind=term.kind if term is not None else 'index',
                term=term.name if term is not None else None,
                term_label=term.label if term is not None else None,
                previous_path=previous_page.path if previous_page else None,
                next_path=next_page.path if next_page else None,
                page_numbers=tuple(window),
                page_paths=tuple((n, resolved[n].path) for n in window if n in resolved),
            ))
            self.logger.debug(f"Emitted {label} page {number}/{page.total_pages} at {page.path}")

        return result
