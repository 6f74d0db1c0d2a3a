"""Tests for the content loader."""

import pytest
import os
from datetime import date, datetime, timedelta, timezone

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from postindex_pkg.errors import DuplicateSlugError, InvalidPostError
from postindex_pkg.loader import load_posts, parse_date, post_from_record
from postindex_pkg.models import PaginationConfig, Post


class TestParseDate:
    """Test cases for publish date parsing."""

    def test_parse_date_formats(self):
        """Test the accepted date formats all become aware UTC datetimes."""
        test_cases = [
            ('2023-01-01', datetime(2023, 1, 1, tzinfo=timezone.utc)),
            ('2023-01-01T12:00:00', datetime(2023, 1, 1, 12, 0, 0, tzinfo=timezone.utc)),
            ('2023-01-01T12:00:00Z', datetime(2023, 1, 1, 12, 0, 0, tzinfo=timezone.utc)),
            ('Jan 01, 2023', datetime(2023, 1, 1, tzinfo=timezone.utc)),
            (date(2023, 1, 1), datetime(2023, 1, 1, tzinfo=timezone.utc)),
            (datetime(2023, 1, 1, 9, 30), datetime(2023, 1, 1, 9, 30, tzinfo=timezone.utc)),
        ]

        for value, expected in test_cases:
            assert parse_date(value) == expected

    def test_parse_date_keeps_offset(self):
        """Test that an explicit offset is preserved."""
        result = parse_date('2023-01-01T12:00:00+02:00')
        assert result.utcoffset() == timedelta(hours=2)
        assert result == datetime(2023, 1, 1, 10, 0, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize('value', [None, '', 'not a date', 42])
    def test_parse_date_invalid(self, value):
        """Test that unparseable values return None."""
        assert parse_date(value) is None


class TestPostFromRecord:
    """Test cases for record coercion."""

    def test_full_record(self):
        """Test a complete record becomes a Post."""
        post = post_from_record({
            'slug': 'hello',
            'title': 'Hello',
            'date': '2023-01-01',
            'categories': ['Spring'],
            'tags': ['Java', 'Events'],
            'excerpt': 'Short text',
            'body': '/content/posts/hello.md',
        })

        assert post.slug == 'hello'
        assert post.title == 'Hello'
        assert post.categories == ('Spring',)
        assert post.tags == ('Java', 'Events')
        assert post.excerpt == 'Short text'
        assert post.body == '/content/posts/hello.md'

    def test_post_instance_passthrough(self):
        """Test that Post instances are used as-is."""
        post = Post(slug='a', title='A', date=datetime(2023, 1, 1, tzinfo=timezone.utc))
        assert post_from_record(post) is post

    def test_post_instance_naive_date(self):
        """Test that a Post with a naive date is normalized to UTC."""
        post = Post(slug=' a ', title='A', date=datetime(2023, 1, 1, 9, 30))
        result = post_from_record(post)

        assert result.slug == 'a'
        assert result.date == datetime(2023, 1, 1, 9, 30, tzinfo=timezone.utc)
        assert result.title == 'A'

    @pytest.mark.parametrize('slug,value,field', [
        ('', datetime(2023, 1, 1), 'slug'),
        ('a', None, 'date'),
        ('a', 'not a date', 'date'),
    ])
    def test_post_instance_invalid(self, slug, value, field):
        """Test that Post instances are checked like mapping records."""
        with pytest.raises(InvalidPostError) as exc_info:
            post_from_record(Post(slug=slug, title='A', date=value), index=0)
        assert exc_info.value.field == field

    def test_single_string_term(self):
        """Test that a single string is accepted in place of a list."""
        post = post_from_record({'slug': 'a', 'date': '2023-01-01', 'tags': 'Jekyll'})
        assert post.tags == ('Jekyll',)
        assert post.categories == ()
        assert post.title == 'Untitled'

    def test_integer_term_references(self):
        """Test that numeric ids resolve against declared term tables."""
        categories = {1: {'name': 'General'}, 2: 'Tech'}
        post = post_from_record({'slug': 'a', 'date': '2023-01-01', 'categories': [1, 2]},
                                categories=categories)
        assert post.categories == ('General', 'Tech')

    def test_unknown_integer_term(self):
        """Test that an unknown numeric id is rejected."""
        with pytest.raises(InvalidPostError, match="references unknown term 7"):
            post_from_record({'slug': 'a', 'date': '2023-01-01', 'categories': [7]}, categories={})

    def test_missing_slug(self):
        """Test that a record without slug is rejected with its index."""
        with pytest.raises(InvalidPostError) as exc_info:
            post_from_record({'title': 'No slug', 'date': '2023-01-01'}, index=3)
        assert exc_info.value.field == 'slug'
        assert exc_info.value.identifier == '#3'

    def test_missing_date(self):
        """Test that a record without a date is rejected."""
        with pytest.raises(InvalidPostError) as exc_info:
            post_from_record({'slug': 'undated'})
        assert exc_info.value.field == 'date'
        assert 'undated' in str(exc_info.value)

    def test_non_mapping_record(self):
        """Test that non-mapping records are rejected."""
        with pytest.raises(InvalidPostError, match='must be a mapping'):
            post_from_record(['slug', 'a'], index=0)


class TestLoadPosts:
    """Test cases for load_posts."""

    def test_newest_first_by_default(self, make_records):
        """Test default ordering is newest first."""
        posts = load_posts(make_records(5), PaginationConfig())
        assert [p.slug for p in posts] == ['post-04', 'post-03', 'post-02', 'post-01', 'post-00']

    def test_oldest_first(self, make_records):
        """Test sort_reverse=False orders oldest first."""
        posts = load_posts(make_records(3), PaginationConfig(sort_reverse=False))
        assert [p.slug for p in posts] == ['post-00', 'post-01', 'post-02']

    def test_unordered_input(self, make_records):
        """Test that input order does not affect the result."""
        records = make_records(6)
        shuffled = [records[i] for i in (3, 0, 5, 1, 4, 2)]
        assert load_posts(shuffled, PaginationConfig()) == load_posts(records, PaginationConfig())

    @pytest.mark.parametrize('sort_reverse', [True, False])
    def test_ties_broken_by_slug_ascending(self, sort_reverse):
        """Test identical timestamps are ordered by slug ascending in both directions."""
        records = [
            {'slug': 'charlie', 'date': '2023-01-01'},
            {'slug': 'alpha', 'date': '2023-01-01'},
            {'slug': 'bravo', 'date': '2023-01-01'},
        ]
        posts = load_posts(records, PaginationConfig(sort_reverse=sort_reverse))
        assert [p.slug for p in posts] == ['alpha', 'bravo', 'charlie']

    def test_ties_inside_mixed_dates(self):
        """Test tie-breaking only applies among equal dates."""
        records = [
            {'slug': 'b-new', 'date': '2023-02-01'},
            {'slug': 'z-old', 'date': '2023-01-01'},
            {'slug': 'a-new', 'date': '2023-02-01'},
            {'slug': 'a-old', 'date': '2023-01-01'},
        ]
        posts = load_posts(records, PaginationConfig())
        assert [p.slug for p in posts] == ['a-new', 'b-new', 'a-old', 'z-old']

    def test_mixed_post_instances_and_mappings(self):
        """Test Post instances with naive dates sort alongside mapping records."""
        records = [
            Post(slug='a', title='A', date=datetime(2023, 1, 1)),
            {'slug': 'b', 'date': '2023-01-02'},
            Post(slug='c', title='C', date=datetime(2023, 1, 3, tzinfo=timezone.utc)),
        ]
        posts = load_posts(records, PaginationConfig())

        assert [p.slug for p in posts] == ['c', 'b', 'a']
        assert all(p.date.tzinfo is not None for p in posts)

    def test_duplicate_slug(self, make_records):
        """Test that duplicate slugs abort loading."""
        records = make_records(2)
        records[0]['slug'] = 'my-post'
        records[1]['slug'] = 'my-post'

        with pytest.raises(DuplicateSlugError) as exc_info:
            load_posts(records, PaginationConfig())
        assert exc_info.value.slug == 'my-post'

    def test_empty_collection(self):
        """Test that no records yields an empty sequence."""
        assert load_posts([], PaginationConfig()) == ()

    def test_result_is_immutable(self, make_records):
        """Test that the master sequence is a tuple."""
        assert isinstance(load_posts(make_records(2), PaginationConfig()), tuple)
