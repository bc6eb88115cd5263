"""Article model for posts listed by the archive endpoint."""

from pydantic import Field

from .base import ApiModel


class Article(ApiModel):
    """Article metadata as returned by the archive listing."""

    id: int = Field(..., description="Remote post ID")
    publication_id: int = Field(0, description="Publication the post belongs to")
    title: str = Field("", description="Post title")
    social_title: str = Field("", description="Title used for social cards")
    slug: str = Field("", description="URL slug, addresses the detail endpoint")
    post_date: str = Field("", description="Publication timestamp, kept verbatim")
    audience: str = Field("", description="Audience (everyone, only_paid, ...)")
    write_comment_permissions: str = Field("", description="Who may comment")
    canonical_url: str = Field("", description="Canonical post URL")
    cover_image: str = Field("", description="Cover image URL")
    description: str = Field("", description="Post subtitle/description")
    wordcount: int = Field(0, description="Word count")
    comment_count: int = Field(0, description="Top-level comment count")
    child_comment_count: int = Field(0, description="Reply count")

    def to_row(self, original_json: str) -> tuple:
        """Column values in ``ARTICLE_COLUMNS`` order."""
        return (
            self.id,
            self.publication_id,
            self.title,
            self.social_title,
            self.slug,
            self.post_date,
            self.audience,
            self.write_comment_permissions,
            self.canonical_url,
            self.cover_image,
            self.description,
            self.wordcount,
            self.comment_count,
            self.child_comment_count,
            original_json,
        )


class PostBody(ApiModel):
    """Detail endpoint payload; only the HTML body is decoded."""

    body_html: str = Field("", description="Rendered HTML body of the post")
