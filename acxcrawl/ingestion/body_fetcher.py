"""Body fetcher: store the HTML body of every known article."""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..db import ArticleStorage, Database, RunManager
from ..errors import DecodeError, FetchError, StorageError
from ..models import PostBody
from .base import Pipeline, console
from .client import ApiClient
from .throttle import Throttle


class BodyFetcher(Pipeline):
    """Fill ``articles.BodyHTML`` from the slug-addressed detail endpoint."""

    name = "bodies"

    def __init__(
        self,
        database: Database,
        client: ApiClient,
        throttle: Throttle,
        run_manager: Optional[RunManager] = None,
    ) -> None:
        super().__init__(database, client, throttle, run_manager)
        self.storage = ArticleStorage(database)

    def fetch_body(self, slug: str) -> str:
        payload = self.client.get_post(slug)
        try:
            return PostBody.model_validate(payload).body_html
        except ValidationError as e:
            raise DecodeError(f"Invalid post payload: {e}", url=self.client.post_url(slug)) from e

    def run(self, run_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Fetch bodies for every slug in the database.

        Every per-slug failure is skipped. Only reading the slugs can fail
        the run.

        Returns:
            Statistics dictionary
        """
        self.run_id = run_id
        self.skipped = 0
        slugs = self.storage.get_slugs()

        stats = {"articles": len(slugs), "updated": 0, "skipped": 0}

        for slug in slugs:
            self.throttle.wait()
            try:
                body_html = self.fetch_body(slug)
            except FetchError as e:
                self.skip(slug, "fetch", e)
                continue
            except DecodeError as e:
                self.skip(slug, "decode", e)
                continue

            try:
                updated = self.storage.update_body(slug, body_html)
            except StorageError as e:
                self.skip(slug, "update", e)
                continue
            if updated == 0:
                self.skip(slug, "update", "no article matches this slug")
                continue

            stats["updated"] += 1

        stats["skipped"] = self.skipped
        console.print(f"{stats['updated']}/{stats['articles']} article bodies stored")
        return stats
