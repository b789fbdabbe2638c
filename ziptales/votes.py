import math
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ziptales.db import Database, InsertResult
from ziptales.errors import ArticleNotFoundError
from ziptales.models import Article, Votes, VoteDirection

logger = logging.getLogger(__name__)

PRIOR_WEIGHT = 0.6
COMMUNITY_WEIGHT = 40  # 0.4 of a 0-100 scale


class VoteStatus(Enum):
    ACCEPTED = "accepted"
    DUPLICATE = "duplicate"
    UNAUTHENTICATED = "unauthenticated"


@dataclass
class VoteResult:
    status: VoteStatus
    article: Optional[Article] = None

    @property
    def accepted(self) -> bool:
        return self.status is VoteStatus.ACCEPTED


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def blended_score(prior_score: int, votes: Votes) -> int:
    """Blend the prior score with the community vote ratio, clamped to 0-100."""
    score = round_half_up(prior_score * PRIOR_WEIGHT + votes.ratio * COMMUNITY_WEIGHT)
    return max(0, min(100, score))


class VoteAggregator:
    """
    Single write path for vote tallies and vote-driven score changes.
    Callers are responsible for authenticating user_id.
    """

    def __init__(self, store: Database):
        self.store = store

    def cast_vote(self, article_id: str, direction: VoteDirection, user_id: str) -> VoteResult:
        direction = VoteDirection(direction)
        with self.store.transaction():
            if self.store.has_voted(user_id, article_id):
                logger.debug(f"Duplicate vote ignored: user={user_id} article={article_id}")
                return VoteResult(VoteStatus.DUPLICATE, self.store.get_article(article_id))

            article = self.store.get_article(article_id)
            if article is None:
                raise ArticleNotFoundError(article_id)

            if self.store.insert_vote(user_id, article_id, direction) is InsertResult.ALREADY_EXISTS:
                return VoteResult(VoteStatus.DUPLICATE, article)

            votes = self.store.increment_votes(article_id, direction)
            score = blended_score(article.credibility_score, votes)
            self.store.update_article_votes(article_id, votes, score)

        logger.info(
            f"Vote {direction.value} on '{article.title[:50]}': "
            f"{article.credibility_score} -> {score} ({votes.upvotes}/{votes.downvotes})"
        )
        article.votes = votes
        article.credibility_score = score
        return VoteResult(VoteStatus.ACCEPTED, article)
