"""Shared pytest fixtures for the acxcrawl test suite."""

from typing import Any, Callable, Dict

import httpx
import pytest

from acxcrawl.db import Database
from acxcrawl.ingestion import ApiClient, FixedIntervalThrottle

BASE_URL = "https://blog.example.com"


class FakeClock:
    """Monotonic clock that only advances when slept on."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def database(tmp_path):
    """An empty crawl database in a temp directory."""
    db = Database(tmp_path / "crawl.db")
    yield db
    db.close()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def throttle(clock: FakeClock) -> FixedIntervalThrottle:
    return FixedIntervalThrottle(1.0, clock=clock, sleep=clock.sleep)


@pytest.fixture
def make_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], ApiClient]:
    """Build an ApiClient whose requests are answered by ``handler``."""
    clients = []

    def factory(handler):
        client = ApiClient(
            base_url=BASE_URL,
            transport=httpx.MockTransport(handler),
            verbose=False,
        )
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()


@pytest.fixture
def article_json() -> Callable[..., Dict[str, Any]]:
    """Build an archive listing element."""

    def factory(article_id: int, slug: str = None, **overrides) -> Dict[str, Any]:
        data = {
            "id": article_id,
            "publication_id": 89120,
            "title": f"Post {article_id}",
            "social_title": f"Post {article_id}",
            "slug": slug or f"post-{article_id}",
            "post_date": "2024-03-01T10:00:00.000Z",
            "audience": "everyone",
            "write_comment_permissions": "everyone",
            "canonical_url": f"{BASE_URL}/p/{slug or f'post-{article_id}'}",
            "cover_image": None,
            "description": "A description",
            "wordcount": 1500,
            "comment_count": 3,
            "child_comment_count": 7,
            "reactions": {"❤": 12},
        }
        data.update(overrides)
        return data

    return factory
