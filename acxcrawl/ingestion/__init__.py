"""Crawl pipelines and the API client they share."""

from .article_lister import PAGE_SIZE, ArticleLister
from .base import Pipeline
from .body_fetcher import BodyFetcher
from .client import DEFAULT_BASE_URL, ApiClient
from .comment_harvester import CommentHarvester
from .throttle import FixedIntervalThrottle, Throttle

__all__ = [
    "ApiClient",
    "ArticleLister",
    "BodyFetcher",
    "CommentHarvester",
    "DEFAULT_BASE_URL",
    "FixedIntervalThrottle",
    "PAGE_SIZE",
    "Pipeline",
    "Throttle",
]
