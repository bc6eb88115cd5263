"""Tests for the persistence gateway: schemas, batches, queries and updates."""

import sqlite3

import pytest

from acxcrawl.db import ArticleStorage, CommentStorage, init_database
from acxcrawl.db.init import ARTICLE_COLUMNS, COMMENT_COLUMNS
from acxcrawl.errors import StorageError
from acxcrawl.models import Article, Comment, canonical_json


class CommitFailingConnection:
    """Delegates to a real connection but refuses to commit."""

    def __init__(self, conn):
        self._conn = conn

    def execute(self, sql, *args):
        if sql == "COMMIT":
            raise sqlite3.OperationalError("database is locked")
        return self._conn.execute(sql, *args)

    def __getattr__(self, name):
        return getattr(self._conn, name)


def _article_row(article_json, article_id, slug=None):
    element = article_json(article_id, slug=slug)
    return Article.model_validate(element).to_row(canonical_json(element))


class TestSchema:
    """Schema creation."""

    def test_ensure_schema_is_idempotent(self, database, article_json):
        database.ensure_schema("articles")
        with database.batch("articles", ARTICLE_COLUMNS) as batch:
            batch.insert_row(_article_row(article_json, 1))

        database.ensure_schema("articles")
        database.ensure_schema("articles")

        assert database.count("articles") == 1

    def test_init_database_creates_every_table(self, database):
        init_database(database)
        init_database(database)
        tables = {
            row[0]
            for row in database.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }
        assert {"articles", "comments", "crawl_runs", "crawl_failures"} <= tables

    def test_unknown_schema(self, database):
        with pytest.raises(ValueError):
            database.ensure_schema("users")


class TestBatch:
    """Batched transactional inserts."""

    def test_failing_row_does_not_abort_batch(self, database, article_json):
        database.ensure_schema("articles")
        rows = [
            _article_row(article_json, 1),
            _article_row(article_json, 2),
            _article_row(article_json, 1, slug="other-slug"),
            _article_row(article_json, 3),
            _article_row(article_json, 4),
        ]

        with database.batch("articles", ARTICLE_COLUMNS) as batch:
            errors = [batch.insert_row(row) for row in rows]

        assert errors[0] is None
        assert isinstance(errors[2], sqlite3.IntegrityError)
        assert batch.result.inserted == 4
        assert [key for key, _ in batch.result.failures] == [1]
        assert sorted(database.query_distinct("articles", "ID")) == [1, 2, 3, 4]

    def test_duplicate_slug_fails_only_that_row(self, database, article_json):
        storage = ArticleStorage(database)
        storage.ensure_schema()
        first = article_json(1, slug="same")
        second = article_json(2, slug="same")

        result = storage.insert_page(
            [
                (Article.model_validate(first), canonical_json(first)),
                (Article.model_validate(second), canonical_json(second)),
            ]
        )

        assert result.inserted == 1
        assert result.failures[0][0] == 2
        assert storage.count() == 1

    def test_failed_commit_leaves_no_rows(self, database, article_json):
        database.ensure_schema("articles")
        real = database._conn
        database._conn = CommitFailingConnection(real)
        try:
            with pytest.raises(StorageError, match="commit"):
                with database.batch("articles", ARTICLE_COLUMNS) as batch:
                    batch.insert_row(_article_row(article_json, 1))
                    batch.insert_row(_article_row(article_json, 2))
        finally:
            database._conn = real

        assert not database.in_transaction
        assert database.count("articles") == 0

    def test_error_inside_block_rolls_back(self, database, article_json):
        database.ensure_schema("articles")
        with pytest.raises(RuntimeError):
            with database.batch("articles", ARTICLE_COLUMNS) as batch:
                batch.insert_row(_article_row(article_json, 1))
                raise RuntimeError("boom")

        assert database.count("articles") == 0

    def test_prepare_fails_without_table(self, database):
        with pytest.raises(StorageError, match="prepare"):
            with database.batch("comments", COMMENT_COLUMNS):
                pass
        assert not database.in_transaction

    def test_batch_rejects_unknown_columns(self, database):
        with pytest.raises(ValueError):
            with database.batch("articles", ["ID", "Nope"]):
                pass

    def test_comment_storage_inserts_each_comment(self, database):
        storage = CommentStorage(database)
        storage.ensure_schema()
        comments = [Comment(id=1, post_id=9), Comment(id=2, post_id=9), Comment(id=1, post_id=9)]

        result = storage.insert_comments(comments)

        assert result.inserted == 2
        assert [key for key, _ in result.failures] == [1]
        assert storage.count() == 2

    def test_unencodable_comment_fails_only_that_row(self, database):
        class Unencodable(Comment):
            def to_row(self):
                raise ValueError("cannot encode")

        storage = CommentStorage(database)
        storage.ensure_schema()

        result = storage.insert_comments(
            [Comment(id=1, post_id=9), Unencodable(id=2, post_id=9), Comment(id=3, post_id=9)]
        )

        assert result.inserted == 2
        [(key, error)] = result.failures
        assert key == 2
        assert isinstance(error, ValueError)
        assert sorted(database.query_distinct("comments", "ID")) == [1, 3]


class TestQueries:
    """Distinct queries and keyed updates."""

    def test_query_distinct(self, database, article_json):
        storage = ArticleStorage(database)
        storage.ensure_schema()
        page = [article_json(i) for i in (5, 6, 7)]
        storage.insert_page([(Article.model_validate(e), canonical_json(e)) for e in page])

        assert sorted(storage.get_ids()) == [5, 6, 7]
        assert sorted(storage.get_slugs()) == ["post-5", "post-6", "post-7"]

    def test_query_distinct_missing_table(self, database):
        with pytest.raises(StorageError):
            database.query_distinct("articles", "Slug")

    def test_query_rejects_unknown_identifiers(self, database):
        with pytest.raises(ValueError):
            database.query_distinct("articles; DROP TABLE articles", "ID")

    def test_update_by_key(self, database, article_json):
        storage = ArticleStorage(database)
        storage.ensure_schema()
        element = article_json(1, slug="first")
        storage.insert_page([(Article.model_validate(element), canonical_json(element))])

        assert storage.update_body("first", "<p>body</p>") == 1
        assert storage.update_body("missing", "<p>body</p>") == 0

        body = database.execute("SELECT BodyHTML FROM articles WHERE Slug = 'first'").fetchone()[0]
        assert body == "<p>body</p>"
