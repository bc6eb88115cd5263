"""Comment storage."""

from typing import Sequence

from ..models import Comment
from .connection import BatchResult, Database
from .init import COMMENT_COLUMNS


class CommentStorage:
    """Write flattened comments to the ``comments`` table."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def ensure_schema(self) -> None:
        self.database.ensure_schema("comments")

    def insert_comments(self, comments: Sequence[Comment]) -> BatchResult:
        """Insert the comments of one article in a single transaction."""
        with self.database.batch("comments", COMMENT_COLUMNS) as batch:
            for comment in comments:
                try:
                    row = comment.to_row()
                except (TypeError, ValueError) as e:
                    batch.skip_row(comment.id, e)
                    continue
                batch.insert_row(row, key=comment.id)
        return batch.result

    def count(self) -> int:
        return self.database.count("comments")
