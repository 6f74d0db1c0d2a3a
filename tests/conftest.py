"""Test configuration and fixtures for postindex tests."""

import pytest
import tempfile
import shutil
from datetime import datetime, timedelta, timezone
from pathlib import Path
import yaml


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def make_records():
    """Factory for post records published one day apart, oldest first."""
    def factory(count, categories=None, tags=None, start=datetime(2024, 1, 1, tzinfo=timezone.utc)):
        return [
            {
                'slug': f'post-{i:02d}',
                'title': f'Post {i}',
                'date': start + timedelta(days=i),
                'categories': list(categories or []),
                'tags': list(tags or []),
                'excerpt': f'Excerpt {i}',
            }
            for i in range(count)
        ]
    return factory


@pytest.fixture
def blog_records():
    """A small blog with overlapping categories and tags."""
    return [
        {'slug': 'spring-events', 'title': 'Spring application events', 'date': '2023-03-01',
         'categories': ['Spring'], 'tags': ['Java', 'Events']},
        {'slug': 'rabbitmq-retries', 'title': 'Retrying RabbitMQ consumers', 'date': '2023-04-15',
         'categories': ['Messaging'], 'tags': ['RabbitMQ', 'java']},
        {'slug': 'k8s-probes', 'title': 'Kubernetes probes', 'date': '2023-05-20T08:30:00Z',
         'categories': ['DevOps'], 'tags': ['Kubernetes']},
        {'slug': 'ef-core-tracking', 'title': 'EF Core change tracking', 'date': '2023-06-02',
         'categories': ['devops ', 'Data'], 'tags': ['EF Core']},
    ]


@pytest.fixture
def mock_content_dir(temp_dir):
    """Create a mock content directory structure."""
    content_dir = Path(temp_dir) / 'content'
    posts_dir = content_dir / 'posts'
    posts_dir.mkdir(parents=True)

    categories_file = content_dir / 'categories.yml'
    categories_file.write_text(yaml.dump({
        1: {'name': 'General', 'description': 'General posts'},
        2: {'name': 'Tech', 'description': 'Technical posts'},
    }))

    tags_file = content_dir / 'tags.yml'
    tags_file.write_text(yaml.dump({
        1: {'name': 'python'},
        2: {'name': 'Jekyll', 'description': 'Static sites'},
    }))

    (posts_dir / 'first-post.md').write_text("""---
title: First Post
date: 2023-01-01
categories: [1]
tags: [1]
---

# First Post

This is the first post.
""")

    (posts_dir / 'second.md').write_text("""---
title: Second Post
custom_url: second-post
date: 2023-02-01
categories: [Tech]
tags: [python, web]
excerpt: Handwritten excerpt
---

Body of the second post.
""")

    return str(content_dir)


@pytest.fixture
def mock_templates_dir(temp_dir):
    """Create a mock templates directory."""
    templates_dir = Path(temp_dir) / 'templates'
    templates_dir.mkdir()

    (templates_dir / 'index.html').write_text(
        "<h1>Index {{ current_page }}/{{ total_pages }}</h1>"
        "{% for post in posts %}<article>{{ post.title }}</article>{% endfor %}"
    )
    (templates_dir / 'tag.html').write_text(
        "<h1>Tag {{ page.term_label }}</h1>"
        "{% for post in posts %}<article>{{ post.title }}</article>{% endfor %}"
    )
    return str(templates_dir)
