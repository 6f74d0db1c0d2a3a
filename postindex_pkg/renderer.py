"""
Jinja2 hand-off: write each PageDescriptor to ``<output>/<path>/index.html``.
"""

import os
import logging

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, TemplateSyntaxError, select_autoescape

PACKAGE_TEMPLATES = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'templates')


class PageRenderer:
    def __init__(self, output_dir='output', templates_dir=None, site_context=None):
        self.output_dir = output_dir
        self.templates_dir = templates_dir
        self.site_context = site_context or {}
        self.pages_written = 0
        self.logger = logging.getLogger('Renderer')

        # Fall back to the bundled templates when none are configured
        if not self.templates_dir or not os.path.exists(self.templates_dir):
            if self.templates_dir:
                self.logger.warning(f"Templates directory {self.templates_dir} not found. Using bundled templates.")
            self.templates_dir = PACKAGE_TEMPLATES

        self.env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=select_autoescape(['html']),
        )

    def template_name_for(self, descriptor):
        """Pick ``<kind>.html`` when the theme has one, else ``index.html``."""
        if descriptor.kind != 'index':
            candidate = f'{descriptor.kind}.html'
            if os.path.exists(os.path.join(self.templates_dir, candidate)):
                return candidate
        return 'index.html'

    def output_file_for(self, descriptor):
        """Map a descriptor path to a file below the output directory."""
        relative = descriptor.path.strip('/')
        if descriptor.path.endswith('/') or not relative:
            return os.path.join(self.output_dir, relative, 'index.html')
        return os.path.join(self.output_dir, relative)

    def calculate_relative_path(self, current_output_dir):
        """Calculate relative path from current directory to root."""
        rel_path = os.path.relpath(self.output_dir, current_output_dir)
        if rel_path == '.':
            return ''
        return rel_path + '/'

    def render_template(self, template_name, **context):
        """Render a Jinja2 template."""
        try:
            template = self.env.get_template(template_name)
            return template.render(**context)
        except (TemplateNotFound, TemplateSyntaxError) as e:
            self.logger.error(f"Template error: {e}")
            return None

    def render(self, descriptor):
        """Render and write one descriptor. Returns the written file path, or None."""
        output_file = self.output_file_for(descriptor)
        page_output_dir = os.path.dirname(output_file)

        html = self.render_template(
            self.template_name_for(descriptor),
            page=descriptor,
            posts=descriptor.posts,
            current_page=descriptor.number,
            total_pages=descriptor.total_pages,
            page_numbers=descriptor.page_numbers,
            relative_path=self.calculate_relative_path(page_output_dir),
            **self.site_context
        )
        if html is None:
            return None

        try:
            os.makedirs(page_output_dir, exist_ok=True)
            with open(output_file, 'w', encoding='utf-8') as f:
                f.write(html)
        except (IOError, OSError, PermissionError) as e:
            self.logger.error(f"Failed to write listing page {output_file}: {e}")
            return None

        self.pages_written += 1
        self.logger.debug(f"Generated listing page at {output_file}")
        return output_file

    def render_all(self, descriptors):
        """Render every descriptor in order, returning the files written."""
        written = []
        for descriptor in descriptors:
            output_file = self.render(descriptor)
            if output_file:
                written.append(output_file)
        return written
