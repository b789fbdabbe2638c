import sqlite3
import threading

import pytest

from ziptales.db import Database
from ziptales.errors import ArticleNotFoundError, PersistenceError
from ziptales.models import Votes, VoteDirection
from ziptales.votes import VoteAggregator, VoteStatus, blended_score

from conftest import make_article


@pytest.fixture
def aggregator(store):
    return VoteAggregator(store)


def test_first_upvote_on_fresh_article(store, aggregator):
    store.insert_article(make_article("a1", score=50))

    result = aggregator.cast_vote("a1", VoteDirection.UP, "alice")

    assert result.status is VoteStatus.ACCEPTED
    assert result.article.votes == Votes(upvotes=1, downvotes=0)
    assert result.article.credibility_score == 70
    stored = store.get_article("a1")
    assert stored.votes == Votes(upvotes=1, downvotes=0)
    assert stored.credibility_score == 70


@pytest.mark.parametrize("prior", [0, 33, 50, 85, 100])
def test_single_upvote_formula(store, aggregator, prior):
    store.insert_article(make_article("a1", score=prior))
    result = aggregator.cast_vote("a1", "up", "alice")
    assert result.article.credibility_score == int(prior * 0.6 + 40 + 0.5)


@pytest.mark.parametrize("prior", [0, 33, 50, 85, 100])
def test_single_downvote_formula(store, aggregator, prior):
    store.insert_article(make_article("a1", score=prior))
    result = aggregator.cast_vote("a1", "down", "alice")
    assert result.article.credibility_score == int(prior * 0.6 + 0.5)
    assert result.article.votes == Votes(upvotes=0, downvotes=1)


def test_ratio_uses_post_increment_totals(store, aggregator):
    store.insert_article(make_article("a1", score=45, upvotes=34, downvotes=67))
    result = aggregator.cast_vote("a1", "up", "alice")
    # 45 * 0.6 + 35/102 * 40 = 40.72
    assert result.article.credibility_score == 41
    assert result.article.votes == Votes(upvotes=35, downvotes=67)


def test_second_vote_by_same_user_is_ignored(store, aggregator):
    store.insert_article(make_article("a1", score=50))
    aggregator.cast_vote("a1", "up", "alice")
    before = store.get_article("a1")

    result = aggregator.cast_vote("a1", "down", "alice")

    assert result.status is VoteStatus.DUPLICATE
    after = store.get_article("a1")
    assert after.votes == before.votes
    assert after.credibility_score == before.credibility_score


def test_different_users_both_counted(store, aggregator):
    store.insert_article(make_article("a1", score=50))
    aggregator.cast_vote("a1", "up", "alice")
    result = aggregator.cast_vote("a1", "down", "bob")
    assert result.article.votes == Votes(upvotes=1, downvotes=1)
    # 70 * 0.6 + 0.5 * 40
    assert result.article.credibility_score == 62
    assert store.count_user_votes("alice") == 1


def test_unknown_article_raises_and_records_nothing(store, aggregator):
    with pytest.raises(ArticleNotFoundError):
        aggregator.cast_vote("missing", "up", "alice")
    assert not store.has_voted("alice", "missing")


def test_storage_failure_rolls_back_vote(store, aggregator, monkeypatch):
    store.insert_article(make_article("a1", score=50))

    def fail(*args, **kwargs):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(store, "update_article_votes", fail)

    with pytest.raises(PersistenceError):
        aggregator.cast_vote("a1", "up", "alice")

    assert not store.has_voted("alice", "a1")
    article = store.get_article("a1")
    assert article.votes == Votes()
    assert article.credibility_score == 50


def test_blended_score_with_no_votes_uses_even_ratio():
    assert blended_score(50, Votes()) == 50


def test_blended_score_rounds_half_up():
    # 0 * 0.6 + 1/16 * 40 = 2.5
    assert blended_score(0, Votes(upvotes=1, downvotes=15)) == 3


def test_blended_score_stays_in_range():
    assert blended_score(100, Votes(upvotes=10, downvotes=0)) == 100
    assert blended_score(0, Votes(upvotes=0, downvotes=10)) == 0


def test_concurrent_votes_are_not_lost(tmp_path):
    path = str(tmp_path / "votes.db")
    Database(path).insert_article(make_article("a1", score=50))
    errors = []

    def worker(prefix):
        # sqlite connections are per thread
        aggregator = VoteAggregator(Database(path))
        try:
            for i in range(10):
                aggregator.cast_vote("a1", "up", f"{prefix}-{i}")
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(name,)) for name in ("a", "b", "c")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert Database(path).get_article("a1").votes == Votes(upvotes=30, downvotes=0)
