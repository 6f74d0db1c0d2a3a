"""
Reads post records from a content directory.

Posts live in ``<content>/posts/*.md`` with YAML front matter; categories and
tags may be declared in ``<content>/categories.yml`` and ``<content>/tags.yml``.
Markdown bodies are not rendered: the file path is passed on as the body handle.
"""

import os
import re
import logging

import yaml

from .models import CATEGORY, TAG


class FrontMatterReader:
    def __init__(self, content_dir):
        self.content_dir = content_dir
        self.posts_dir = os.path.join(content_dir, 'posts')
        self.logger = logging.getLogger('FrontMatter')

    def get_markdown_files(self, directory):
        """Get all markdown files from a directory, sorted by name."""
        markdown_files = []
        if os.path.exists(directory):
            for file in sorted(os.listdir(directory)):
                if file.endswith('.md'):
                    markdown_files.append(os.path.join(directory, file))
        return markdown_files

    def parse_markdown_with_metadata(self, filepath):
        """Parse a markdown file with YAML front matter."""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                content = f.read()
        except (IOError, OSError, PermissionError) as e:
            self.logger.error(f"Failed to read markdown file {filepath}: {e}")
            return {}, ""

        if not content.lstrip().startswith('---'):
            return {}, content

        parts = content.lstrip().split('---', 2)
        if len(parts) >= 3:
            try:
                metadata = yaml.safe_load(parts[1]) or {}
            except yaml.YAMLError as e:
                self.logger.error(f"Invalid YAML front matter in {filepath}: {e}")
                metadata = {}
            if not isinstance(metadata, dict):
                self.logger.error(f"Front matter in {filepath} is not a mapping")
                metadata = {}
            markdown_content = parts[2].strip()
        else:
            metadata = {}
            markdown_content = content

        return metadata, markdown_content

    def generate_excerpt(self, content):
        """Generate an excerpt from content."""
        plain_text = re.sub(r'<[^>]+>', '', content)
        plain_text = re.sub(r'[#*_`>\[\]]', '', plain_text)
        words = plain_text.split()
        if len(words) > 30:
            return ' '.join(words[:30]) + '...'
        return ' '.join(words)

    def load_term_file(self, type_name):
        """Load categories or tags from YAML file."""
        file_path = os.path.join(self.content_dir, f'{type_name}.yml')
        if os.path.exists(file_path):
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    return yaml.safe_load(f) or {}
            except (IOError, OSError, PermissionError) as e:
                self.logger.error(f"Failed to read {type_name} file {file_path}: {e}")
                return {}
            except yaml.YAMLError as e:
                self.logger.error(f"Invalid YAML in {type_name} file {file_path}: {e}")
                return {}
        return {}

    def load_declared_terms(self):
        """Return declared terms keyed by taxonomy kind."""
        return {
            CATEGORY: self.load_term_file('categories'),
            TAG: self.load_term_file('tags'),
        }

    def read_record(self, file_path):
        """Build a post record (plain dict) from one markdown file."""
        metadata, markdown_content = self.parse_markdown_with_metadata(file_path)
        slug = metadata.get('slug') or metadata.get('custom_url') or os.path.splitext(os.path.basename(file_path))[0]
        return {
            'slug': str(slug).strip('/'),
            'title': metadata.get('title', 'Untitled'),
            'date': metadata.get('date'),
            'categories': metadata.get('categories') or [],
            'tags': metadata.get('tags') or [],
            'excerpt': metadata.get('excerpt') or metadata.get('description') or self.generate_excerpt(markdown_content),
            'body': file_path,
        }

    def read_records(self):
        """Read every post under ``<content>/posts``."""
        post_files = self.get_markdown_files(self.posts_dir)
        if not post_files:
            self.logger.warning(f"No markdown files found in {self.posts_dir}")
        records = [self.read_record(file_path) for file_path in post_files]
        self.logger.debug(f"Read {len(records)} post records from {self.posts_dir}")
        return records
