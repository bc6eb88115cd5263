"""Article lister: walk the archive listing until an empty page."""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from ..db import ArticleStorage, Database, RunManager
from ..errors import DecodeError
from ..models import Article, canonical_json
from .base import Pipeline, console
from .client import ApiClient
from .throttle import Throttle

PAGE_SIZE = 12


class ArticleLister(Pipeline):
    """Store every article of the archive listing, one transaction per page."""

    name = "articles"

    def __init__(
        self,
        database: Database,
        client: ApiClient,
        throttle: Throttle,
        run_manager: Optional[RunManager] = None,
        page_size: int = PAGE_SIZE,
    ) -> None:
        super().__init__(database, client, throttle, run_manager)
        self.page_size = page_size
        self.storage = ArticleStorage(database)

    def _decode_page(self, payload: Any, offset: int) -> List[Tuple[Article, str]]:
        """Typed view and verbatim JSON for each element of a page."""
        if not isinstance(payload, list):
            raise DecodeError(
                f"Archive page at offset {offset} is not a JSON array",
                url=self.client.archive_url(),
            )
        page = []
        for index, element in enumerate(payload):
            try:
                article = Article.model_validate(element)
            except ValidationError as e:
                raise DecodeError(
                    f"Invalid article {index} at offset {offset}: {e}",
                    url=self.client.archive_url(),
                ) from e
            page.append((article, canonical_json(element)))
        return page

    def run(self, run_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Crawl the archive from offset 0.

        Fetch, decode and storage errors are fatal. Rows that violate a
        constraint are skipped.

        Returns:
            Statistics dictionary
        """
        self.run_id = run_id
        self.skipped = 0
        self.storage.ensure_schema()

        stats = {"requests": 0, "pages": 0, "inserted": 0, "skipped": 0, "total": 0}
        offset = 0

        while True:
            self.throttle.wait()
            payload = self.client.get_archive_page(offset, self.page_size)
            stats["requests"] += 1

            page = self._decode_page(payload, offset)
            if not page:
                break

            result = self.storage.insert_page(page)
            for article_id, error in result.failures:
                self.skip(article_id, "insert", error)

            stats["pages"] += 1
            stats["inserted"] += result.inserted
            offset += self.page_size

        stats["skipped"] = self.skipped
        stats["total"] = self.storage.count()
        console.print(f"{stats['total']} articles found")
        return stats
