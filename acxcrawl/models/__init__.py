"""Data models for the crawler."""

from .article import Article, PostBody
from .base import canonical_json
from .comment import Comment, CommentsResponse, build_comment_tree, flatten_comments
from .run import Failure, Run

__all__ = [
    "Article",
    "Comment",
    "CommentsResponse",
    "Failure",
    "PostBody",
    "Run",
    "build_comment_tree",
    "canonical_json",
    "flatten_comments",
]
