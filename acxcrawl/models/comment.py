"""Comment tree models and flattening.

Reply trees can nest arbitrarily deep, so they are never validated or
serialized recursively: each node is validated on its own and the tree is
assembled and dumped with an explicit stack.
"""

import json
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from .base import ApiModel


class Comment(ApiModel):
    """A comment with its replies.

    ``deleted`` is decoded but not stored as a column; deleted comments
    usually arrive with ``body`` set to null.
    """

    id: int = Field(..., description="Remote comment ID")
    post_id: int = Field(0, description="Owning post ID")
    user_id: int = Field(0, description="Author user ID")
    date: str = Field("", description="Comment timestamp, kept verbatim")
    body: Optional[str] = Field(None, description="Comment text, null when deleted")
    name: str = Field("", description="Author display name")
    deleted: bool = Field(False, description="Whether the comment was deleted")
    ancestor_path: str = Field("", description="Position in the reply tree")
    children_count: int = Field(0, description="Number of direct replies")
    children: List["Comment"] = Field(default_factory=list, description="Replies")

    @field_validator("children", mode="before")
    @classmethod
    def build_replies(cls, value: Any) -> Any:
        if isinstance(value, list):
            return build_comment_tree(value)
        return value

    def to_json(self) -> str:
        """Compact JSON of this comment and all of its replies.

        Same output as ``model_dump_json()``, built bottom-up.
        """
        encoded: Dict[int, str] = {}
        for comment in reversed(flatten_comments([self])):
            own = json.dumps(
                comment.model_dump(exclude={"children"}),
                ensure_ascii=False,
                separators=(",", ":"),
            )
            replies = ",".join(encoded.pop(id(child)) for child in comment.children)
            encoded[id(comment)] = f'{own[:-1]},"children":[{replies}]}}'
        return encoded[id(self)]

    def to_row(self) -> tuple:
        """Column values in ``COMMENT_COLUMNS`` order.

        The raw JSON column is the re-serialized model, replies included.
        """
        return (
            self.id,
            self.post_id,
            self.user_id,
            self.date,
            self.body,
            self.name,
            self.ancestor_path,
            self.children_count,
            self.to_json(),
        )


class CommentsResponse(ApiModel):
    """Payload of the comments endpoint."""

    comments: List[Comment] = Field(default_factory=list, description="Top-level comments")


def build_comment_tree(nodes: List[Any]) -> List[Comment]:
    """Validate raw comment objects into a tree, one node at a time."""
    roots: List[Comment] = []
    stack = [(node, roots) for node in reversed(nodes)]
    while stack:
        node, siblings = stack.pop()
        if isinstance(node, Comment):
            siblings.append(node)
            continue
        if not isinstance(node, dict):
            raise ValueError(f"Comment must be an object, got {type(node).__name__}")

        replies = node.get("children") or []
        if not isinstance(replies, list):
            raise ValueError(f"Replies of comment {node.get('id')} must be a list")

        comment = Comment.model_validate({k: v for k, v in node.items() if k != "children"})
        siblings.append(comment)
        stack.extend((reply, comment.children) for reply in reversed(replies))
    return roots


def flatten_comments(comments: List[Comment]) -> List[Comment]:
    """Flatten comment trees depth-first, each node before its replies."""
    output: List[Comment] = []
    stack = list(reversed(comments))
    while stack:
        comment = stack.pop()
        output.append(comment)
        stack.extend(reversed(comment.children))
    return output
