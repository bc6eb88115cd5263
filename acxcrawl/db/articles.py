"""Article storage."""

from typing import List, Sequence, Tuple

from ..models import Article
from .connection import BatchResult, Database
from .init import ARTICLE_COLUMNS


class ArticleStorage:
    """Read and write the ``articles`` table."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def ensure_schema(self) -> None:
        self.database.ensure_schema("articles")

    def insert_page(self, page: Sequence[Tuple[Article, str]]) -> BatchResult:
        """
        Insert one listing page in a single transaction.

        Args:
            page: Pairs of typed article and its original JSON text

        Returns:
            Inserted count and the rows skipped, keyed by article ID
        """
        with self.database.batch("articles", ARTICLE_COLUMNS) as batch:
            for article, original_json in page:
                batch.insert_row(article.to_row(original_json), key=article.id)
        return batch.result

    def count(self) -> int:
        return self.database.count("articles")

    def get_ids(self) -> List[int]:
        return self.database.query_distinct("articles", "ID")

    def get_slugs(self) -> List[str]:
        return self.database.query_distinct("articles", "Slug")

    def update_body(self, slug: str, body_html: str) -> int:
        """Store the HTML body on the article with this slug."""
        return self.database.update_by_key("articles", "Slug", slug, "BodyHTML", body_html)
