#!/usr/bin/env python3
"""
Command-line interface for postindex - blog listing page generator.
"""

import os
import sys
import json
import argparse
from typing import List, Optional

from . import __version__
from .core import PostIndex
from .errors import PostIndexError
from .frontmatter import FrontMatterReader
from .models import PaginationConfig
from .renderer import PageRenderer
from .settings import PostIndexSettings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='postindex - paginated blog and taxonomy index pages')
    parser.add_argument('--content', type=str,
                        help='Content directory containing posts/*.md')
    parser.add_argument('--templates', type=str,
                        help='Templates directory for listing pages')
    parser.add_argument('--output', type=str,
                        help='Output directory for generated pages')
    parser.add_argument('--per-page', dest='per_page', type=int,
                        help='Number of posts per listing page')
    parser.add_argument('--permalink-template', dest='permalink_template', type=str,
                        help="Permalink template for the main index, e.g. '/page/:num/'")
    parser.add_argument('--category-template', dest='category_template', type=str,
                        help="Permalink template for category pages, e.g. '/category/:term/page/:num/'")
    parser.add_argument('--tag-template', dest='tag_template', type=str,
                        help="Permalink template for tag pages, e.g. '/tags/:term/page/:num/'")
    parser.add_argument('--oldest-first', dest='sort_reverse', action='store_const', const=False,
                        help='List oldest posts first')
    parser.add_argument('--no-root-first-page', dest='first_page_is_root', action='store_const', const=False,
                        help='Keep page 1 of the main index under the permalink template')
    parser.add_argument('--best-effort', dest='strict', action='store_const', const=False,
                        help='Skip pages whose permalink cannot be resolved instead of failing')
    parser.add_argument('--workers', type=int,
                        help='Worker threads for taxonomy pagination')
    parser.add_argument('--log-dir', dest='log_dir', type=str,
                        help='Directory for the debug log file')
    parser.add_argument('--dry-run', action='store_true',
                        help='Print page descriptors as JSON instead of writing HTML')
    parser.add_argument('--init', type=str, choices=['yml', 'yaml', 'json'],
                        help='Create a sample configuration file')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.init:
        settings_loader = PostIndexSettings()
        config_path = settings_loader.create_sample_config(args.init)
        print(f"Created sample configuration file: {config_path}")
        return

    settings_loader = PostIndexSettings()
    settings_loader.load_settings()

    args_dict = {k: v for k, v in vars(args).items() if v is not None and k not in ('dry_run', 'init')}
    final_settings = settings_loader.merge_with_args(args_dict)

    output_dir = os.path.expanduser(final_settings['output'])

    generator = None
    try:
        config = PaginationConfig.from_settings(final_settings)
        reader = FrontMatterReader(final_settings['content'])
        generator = PostIndex(config, declared_terms=reader.load_declared_terms(),
                              log_dir=final_settings['log_dir'])

        descriptors = generator.build(reader.read_records())

        if args.dry_run:
            print(json.dumps([descriptor.to_dict() for descriptor in descriptors], indent=2))
            return

        generator.logger.info(f"Rendering pages into {output_dir}")
        renderer = PageRenderer(output_dir=output_dir, templates_dir=final_settings['templates'])
        renderer.render_all(descriptors)
        generator.logger.info(f"Total pages written: {renderer.pages_written}")

    except PostIndexError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        if generator is not None:
            generator.close_logging()


if __name__ == '__main__':
    main()
