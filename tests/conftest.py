"""
Shared fixtures: in-memory store, fake remote scorers and a fake HTTP client.
"""
import asyncio
from datetime import datetime, timezone

import pytest

from ziptales.credibility import CredibilityAnalyzer
from ziptales.db import Database
from ziptales.models import Article, Votes
from ziptales.service import NewsService


class FixedRemote:
    """Remote tier that always answers with the same score."""

    def __init__(self, score):
        self.score = score
        self.calls = 0
        self.available = True

    async def score_text(self, text):
        self.calls += 1
        return self.score


class SlowRemote:
    available = True

    async def score_text(self, text):
        await asyncio.sleep(5)
        return 99


class BrokenRemote:
    available = True

    async def score_text(self, text):
        raise ConnectionError("network unreachable")


class UnavailableRemote:
    available = False

    async def score_text(self, text):
        raise AssertionError("must not be called when unavailable")


class FakeHTTPClient:
    def __init__(self, pages=None):
        self.pages = pages or {}
        self.requested = []

    async def fetch(self, url, accept=None):
        self.requested.append(url)
        return self.pages.get(url)


def make_article(article_id="a1", score=50, upvotes=0, downvotes=0, **overrides) -> Article:
    fields = dict(
        id=article_id,
        title=f"Article {article_id}",
        summary="Summary",
        content="Plain content about local events.",
        author="Reporter",
        source="Daily Source",
        category="Technology",
        published_at=datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc),
        tags=["News"],
        credibility_score=score,
        votes=Votes(upvotes=upvotes, downvotes=downvotes),
    )
    fields.update(overrides)
    return Article(**fields)


@pytest.fixture
def store():
    return Database(":memory:")


@pytest.fixture
def local_analyzer():
    return CredibilityAnalyzer(remote=None)


@pytest.fixture
def service(store, local_analyzer):
    return NewsService(store, local_analyzer, min_analysis_chars=20)
