"""Database schema definitions and initialization."""

from typing import Dict, List

ARTICLE_COLUMNS = (
    "ID",
    "PublicationID",
    "Title",
    "SocialTitle",
    "Slug",
    "PostDate",
    "Audience",
    "WriteCommentPermissions",
    "CanonicalURL",
    "CoverImage",
    "Description",
    "WordCount",
    "CommentCount",
    "ChildCommentCount",
    "OriginalJSON",
)

COMMENT_COLUMNS = (
    "ID",
    "PostID",
    "UserID",
    "Date",
    "Body",
    "Name",
    "AncestorPath",
    "ChildrenCount",
    "OriginalJSON",
)

ARTICLES_SQL = """
CREATE TABLE IF NOT EXISTS articles (
    ID                      INTEGER PRIMARY KEY,
    PublicationID           INTEGER NOT NULL,
    Title                   TEXT NOT NULL,
    SocialTitle             TEXT NOT NULL,
    Slug                    TEXT UNIQUE NOT NULL,
    PostDate                TEXT NOT NULL,
    Audience                TEXT NOT NULL,
    WriteCommentPermissions TEXT NOT NULL,
    CanonicalURL            TEXT NOT NULL,
    CoverImage              TEXT NOT NULL,
    Description             TEXT NOT NULL,
    WordCount               INTEGER NOT NULL,
    CommentCount            INTEGER NOT NULL,
    ChildCommentCount       INTEGER NOT NULL,
    BodyHTML                TEXT,
    OriginalJSON            TEXT NOT NULL
);
"""

COMMENTS_SQL = """
CREATE TABLE IF NOT EXISTS comments (
    ID            INTEGER PRIMARY KEY,
    PostID        INTEGER,
    UserID        INTEGER,
    Date          TEXT,
    Body          TEXT,
    Name          TEXT,
    AncestorPath  TEXT,
    ChildrenCount INTEGER,
    OriginalJSON  TEXT NOT NULL
);
"""

RUNS_SQL = """
CREATE TABLE IF NOT EXISTS crawl_runs (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    pipeline    TEXT NOT NULL,
    started_at  TEXT NOT NULL,
    finished_at TEXT,
    status      TEXT NOT NULL DEFAULT 'running' CHECK (status IN ('running', 'success', 'failed')),
    stats_json  TEXT
);
"""

FAILURES_SQL = """
CREATE TABLE IF NOT EXISTS crawl_failures (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    run_id     INTEGER REFERENCES crawl_runs(id),
    pipeline   TEXT NOT NULL,
    item_key   TEXT NOT NULL,
    stage      TEXT NOT NULL,
    error      TEXT NOT NULL,
    created_at TEXT NOT NULL
);
"""

SCHEMAS: Dict[str, List[str]] = {
    "articles": [ARTICLES_SQL],
    "comments": [
        COMMENTS_SQL,
        "CREATE INDEX IF NOT EXISTS idx_comments_post_id ON comments(PostID);",
    ],
    "runs": [
        RUNS_SQL,
        FAILURES_SQL,
        "CREATE INDEX IF NOT EXISTS idx_crawl_failures_run_id ON crawl_failures(run_id);",
    ],
}

# Identifiers accepted by the generic query/update helpers
TABLE_COLUMNS: Dict[str, frozenset] = {
    "articles": frozenset(ARTICLE_COLUMNS) | {"BodyHTML"},
    "comments": frozenset(COMMENT_COLUMNS),
}


def init_database(database) -> None:
    """Create every schema that does not exist yet."""
    for name in SCHEMAS:
        database.ensure_schema(name)
