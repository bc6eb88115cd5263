"""Comment harvester: fetch each article's comment tree and store it flat."""

import sqlite3
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..db import ArticleStorage, CommentStorage, Database, RunManager
from ..errors import DecodeError, FetchError
from ..models import CommentsResponse, flatten_comments
from .base import Pipeline, console
from .client import ApiClient
from .throttle import Throttle


class CommentHarvester(Pipeline):
    """Store every comment of every known article, one transaction per article."""

    name = "comments"

    def __init__(
        self,
        database: Database,
        client: ApiClient,
        throttle: Throttle,
        run_manager: Optional[RunManager] = None,
    ) -> None:
        super().__init__(database, client, throttle, run_manager)
        self.articles = ArticleStorage(database)
        self.storage = CommentStorage(database)

    def fetch_comments(self, article_id: int) -> CommentsResponse:
        payload = self.client.get_post_comments(article_id)
        try:
            return CommentsResponse.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(
                f"Invalid comments payload: {e}",
                url=self.client.comments_url(article_id),
            ) from e

    def run(self, run_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Harvest comments for every article ID in the database.

        An article whose comments cannot be fetched or decoded is skipped;
        storage errors are fatal.

        Returns:
            Statistics dictionary
        """
        self.run_id = run_id
        self.skipped = 0
        self.storage.ensure_schema()
        article_ids = self.articles.get_ids()

        stats = {"articles": len(article_ids), "harvested": 0, "inserted": 0, "skipped": 0}

        for article_id in article_ids:
            self.throttle.wait()
            try:
                response = self.fetch_comments(article_id)
            except FetchError as e:
                self.skip(article_id, "fetch", e)
                continue
            except DecodeError as e:
                self.skip(article_id, "decode", e)
                continue

            result = self.storage.insert_comments(flatten_comments(response.comments))
            for comment_id, error in result.failures:
                stage = "insert" if isinstance(error, sqlite3.Error) else "encode"
                self.skip(comment_id, stage, error)

            stats["harvested"] += 1
            stats["inserted"] += result.inserted

        stats["skipped"] = self.skipped
        console.print(
            f"{stats['inserted']} comments stored from {stats['harvested']}/{stats['articles']} articles"
        )
        return stats
