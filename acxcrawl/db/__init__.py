"""Database management for the crawler."""

from .articles import ArticleStorage
from .comments import CommentStorage
from .connection import Batch, BatchResult, Database, get_connection
from .init import init_database
from .runs import RunManager

__all__ = [
    "ArticleStorage",
    "Batch",
    "BatchResult",
    "CommentStorage",
    "Database",
    "RunManager",
    "get_connection",
    "init_database",
]
