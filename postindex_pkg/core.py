import os
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from .emitter import EmitResult, PageEmitter
from .errors import OutputPathCollisionError
from .loader import load_posts
from .models import CATEGORY, TAG, PaginationConfig
from .paginator import paginate
from .taxonomy import build_taxonomy

FILE_LOGGERS = ('PostIndex', 'PageEmitter', 'FrontMatter', 'Renderer')


class InfoFilter(logging.Filter):
    """Filter to allow only selected INFO messages to be shown in the console."""
    def filter(self, record):
        if record.levelno >= logging.WARNING:
            return True
        allowed_messages = [
            "Building listing pages",
            "Listing build completed in",
            "Total posts loaded:",
            "Total terms indexed:",
            "Total pages emitted:",
            "Total pages skipped:",
            "Total pages written:",
            "Rendering pages",
        ]
        return any(msg in record.getMessage() for msg in allowed_messages)


class PostIndex:
    """
    Compute the listing pages of a blog: the paginated master index plus one
    paginated index per category and tag.
    """

    def __init__(self, config=None, declared_terms=None, log_dir=None):
        self.config = config or PaginationConfig()
        self.declared_terms = declared_terms or {}
        self.log_dir = log_dir
        self.posts_loaded = 0
        self.terms_indexed = 0
        self.pages_emitted = 0
        self.failures = []
        self.build_time = 0.0

        self.setup_logging()

    @property
    def pages_failed(self):
        return len(self.failures)

    def setup_logging(self):
        """Set up logging configuration."""
        self.logger = logging.getLogger('PostIndex')
        self.logger.setLevel(logging.DEBUG)

        if not self.logger.handlers:
            # Console handler with filter
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.INFO)
            console_handler.addFilter(InfoFilter())
            console_handler.setFormatter(logging.Formatter('%(message)s'))
            self.logger.addHandler(console_handler)

        self.file_handler = None
        if self.log_dir:
            os.makedirs(self.log_dir, exist_ok=True)
            log_filename = datetime.now().strftime('postindex_%Y-%m-%d_%H-%M-%S.log')
            self.file_handler = logging.FileHandler(os.path.join(self.log_dir, log_filename))
            self.file_handler.setLevel(logging.DEBUG)
            self.file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            # Component loggers share the file log
            for name in FILE_LOGGERS:
                logging.getLogger(name).addHandler(self.file_handler)

    def close_logging(self):
        """Detach and close the file handler added by setup_logging."""
        if self.file_handler is None:
            return
        for name in FILE_LOGGERS:
            logging.getLogger(name).removeHandler(self.file_handler)
        self.file_handler.close()
        self.file_handler = None

    def build(self, records):
        """
        Run the whole pipeline over ``records``.

        The config is validated before anything else, and duplicate slugs abort
        the run before any page is produced.

        Returns:
            Ordered list of PageDescriptors: the master index first, then every
            taxonomy term in (kind, name) order
        """
        start_time = time.time()
        self.config.validate()
        self.logger.info("Building listing pages")

        posts = load_posts(
            records,
            self.config,
            categories=self.declared_terms.get(CATEGORY),
            tags=self.declared_terms.get(TAG),
        )
        self.posts_loaded = len(posts)
        self.logger.debug(f"Loaded {len(posts)} posts")

        terms = list(build_taxonomy(posts, self.declared_terms).values())
        self.terms_indexed = len(terms)

        emitter = PageEmitter.from_config(self.config)
        results = [self.emit_sequence(emitter, posts)]
        if self.config.workers > 1 and len(terms) > 1:
            self.logger.debug(f"Paginating {len(terms)} terms with {self.config.workers} workers")
            with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
                results.extend(executor.map(lambda term: self.emit_sequence(emitter, term.posts, term), terms))
        else:
            results.extend(self.emit_sequence(emitter, term.posts, term) for term in terms)

        descriptors = self.merge(results)
        self.pages_emitted = len(descriptors)
        self.build_time = time.time() - start_time

        self.logger.info(f"Listing build completed in {self.build_time:.6f} seconds.")
        self.logger.info(f"Total posts loaded: {self.posts_loaded}")
        self.logger.info(f"Total terms indexed: {self.terms_indexed}")
        self.logger.info(f"Total pages emitted: {self.pages_emitted}")
        if self.failures:
            self.logger.info(f"Total pages skipped: {self.pages_failed}")
        return descriptors

    def emit_sequence(self, emitter, posts, term=None):
        """Paginate and emit one sequence (the master index when ``term`` is None)."""
        pages = paginate(posts, self.config, term=term)
        template = self.config.template_for(term.kind if term is not None else None)
        return emitter.emit(pages, template, term=term, is_master=term is None)

    def merge(self, results):
        """
        Concatenate emit results in order, checking for output path collisions.

        In best-effort mode a sequence that claims a path already taken is
        dropped as a whole and recorded as one failure.
        """
        merged = EmitResult()
        owners = {}
        for result in results:
            merged.failures.extend(result.failures)
            claimed = {}
            collision = None
            for descriptor in result.descriptors:
                owner = f"{descriptor.kind} '{descriptor.term}' page {descriptor.number}" if descriptor.term else f"index page {descriptor.number}"
                first = owners.get(descriptor.path) or claimed.get(descriptor.path)
                if first:
                    collision = OutputPathCollisionError(descriptor.path, first, owner)
                    break
                claimed[descriptor.path] = owner

            if collision is not None:
                if self.config.strict:
                    raise collision
                head = result.descriptors[0]
                label = f"{head.kind} '{head.term}'" if head.term else 'index'
                self.logger.error(f"Skipping {label}: {collision}")
                merged.failures.append(collision)
                continue

            owners.update(claimed)
            merged.descriptors.extend(result.descriptors)
        self.failures = merged.failures
        return merged.descriptors
