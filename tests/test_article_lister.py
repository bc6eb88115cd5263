"""Tests for the archive listing pipeline."""

import json
import math

import httpx
import pytest

from acxcrawl.db import RunManager
from acxcrawl.errors import DecodeError, FetchError
from acxcrawl.ingestion import ArticleLister


def _archive_handler(articles, calls, page_size=12):
    def handler(request):
        offset = int(request.url.params["offset"])
        limit = int(request.url.params["limit"])
        assert limit == page_size
        calls.append(offset)
        page = articles[offset:offset + limit]
        if not page:
            return httpx.Response(200, content=b"[]")
        return httpx.Response(200, json=page)

    return handler


def test_one_full_page_then_empty(database, make_client, throttle, article_json, capsys):
    articles = [article_json(i) for i in range(1, 13)]
    calls = []
    lister = ArticleLister(database, make_client(_archive_handler(articles, calls)), throttle)

    stats = lister.run()

    assert calls == [0, 12]
    assert stats["total"] == 12
    assert stats["inserted"] == 12
    assert database.count("articles") == 12
    assert "12 articles found" in capsys.readouterr().out


@pytest.mark.parametrize("total", [0, 1, 11, 12, 13, 30, 36])
def test_request_count_is_pages_plus_one(database, make_client, throttle, article_json, total):
    articles = [article_json(i) for i in range(1, total + 1)]
    calls = []
    lister = ArticleLister(database, make_client(_archive_handler(articles, calls)), throttle)

    stats = lister.run()

    assert len(calls) == math.ceil(total / 12) + 1
    assert calls == [12 * i for i in range(len(calls))]
    assert stats["requests"] == len(calls)
    assert stats["total"] == total


def test_pauses_between_pages(database, make_client, clock, throttle, article_json):
    articles = [article_json(i) for i in range(1, 25)]
    lister = ArticleLister(database, make_client(_archive_handler(articles, [])), throttle)

    lister.run()

    assert clock.sleeps == [1.0, 1.0]


def test_custom_page_size(database, make_client, throttle, article_json):
    articles = [article_json(i) for i in range(1, 6)]
    calls = []
    handler = _archive_handler(articles, calls, page_size=2)
    lister = ArticleLister(database, make_client(handler), throttle, page_size=2)

    assert lister.run()["total"] == 5
    assert calls == [0, 2, 4, 6]


def test_original_json_is_the_wire_element(database, make_client, throttle, article_json):
    element = article_json(1, reactions={"❤": 3}, podcast_url=None)
    lister = ArticleLister(database, make_client(_archive_handler([element], [])), throttle)

    lister.run()

    stored = database.execute("SELECT OriginalJSON, CoverImage FROM articles").fetchone()
    assert json.loads(stored[0]) == element
    assert stored[1] == ""


def test_rerun_skips_existing_rows(database, make_client, throttle, article_json):
    articles = [article_json(i) for i in range(1, 13)]
    run_manager = RunManager(database)
    run_id = run_manager.create_run("articles")
    client = make_client(_archive_handler(articles, []))

    ArticleLister(database, client, throttle).run()
    stats = ArticleLister(database, client, throttle, run_manager=run_manager).run(run_id=run_id)

    assert stats["inserted"] == 0
    assert stats["skipped"] == 12
    assert stats["total"] == 12
    failures = run_manager.get_failures(run_id)
    assert len(failures) == 12
    assert {f.stage for f in failures} == {"insert"}
    assert failures[0].item_key == "1"


def test_fetch_failure_is_fatal_and_keeps_committed_pages(database, make_client, throttle, article_json):
    articles = [article_json(i) for i in range(1, 13)]

    def handler(request):
        if request.url.params["offset"] == "12":
            return httpx.Response(429, text="slow down")
        return httpx.Response(200, json=articles)

    with pytest.raises(FetchError):
        ArticleLister(database, make_client(handler), throttle).run()

    assert database.count("articles") == 12


def test_malformed_page_is_fatal(database, make_client, throttle):
    client = make_client(lambda request: httpx.Response(200, text="[{"))
    with pytest.raises(DecodeError):
        ArticleLister(database, client, throttle).run()


def test_non_array_page_is_fatal(database, make_client, throttle):
    client = make_client(lambda request: httpx.Response(200, json={"error": "nope"}))
    with pytest.raises(DecodeError, match="not a JSON array"):
        ArticleLister(database, client, throttle).run()


def test_invalid_element_is_fatal(database, make_client, throttle):
    client = make_client(lambda request: httpx.Response(200, json=[{"title": "no id"}]))
    with pytest.raises(DecodeError, match="Invalid article 0"):
        ArticleLister(database, client, throttle).run()
    assert database.count("articles") == 0
