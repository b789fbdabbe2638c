"""
News service: the entry point callers use to browse, submit, search,
save and vote on articles. All state lives in the injected store.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from ziptales.credibility import CredibilityAnalyzer, fact_check_report
from ziptales.db import Database
from ziptales.errors import ArticleNotFoundError
from ziptales.models import Article, Submission, Vote, VoteDirection, TRUSTED_THRESHOLD, PENDING_THRESHOLD
from ziptales.votes import VoteAggregator, VoteResult, VoteStatus

logger = logging.getLogger(__name__)

STATUS_FILTERS = ("all", "pending", "disputed")

FACT_CHECK_PROMPT = (
    "Please provide the news content you'd like me to analyze. "
    "I can help verify claims, check for bias, and assess credibility."
)


@dataclass
class CategoryStats:
    category: str
    articles: int
    trusted: int
    pending: int
    average_score: int


@dataclass
class VotingStats:
    trusted: int
    pending: int
    disputed: int
    total_votes: int


def is_verified(score: int) -> bool:
    return score >= TRUSTED_THRESHOLD


def _matches_status(article: Article, status: str) -> bool:
    score = article.credibility_score
    if status == "pending":
        return PENDING_THRESHOLD <= score < TRUSTED_THRESHOLD
    if status == "disputed":
        return score < PENDING_THRESHOLD
    return True


class NewsService:
    def __init__(self, store: Database, analyzer: CredibilityAnalyzer, min_analysis_chars: int = 20):
        self.store = store
        self.analyzer = analyzer
        self.aggregator = VoteAggregator(store)
        self.min_analysis_chars = min_analysis_chars

    # Browsing

    def list_articles(self, category: Optional[str] = None) -> List[Article]:
        return self.store.list_articles(category)

    def get_article(self, article_id: str) -> Optional[Article]:
        return self.store.get_article(article_id)

    def search(self, term: str = "", status: str = "all") -> List[Article]:
        if status not in STATUS_FILTERS:
            raise ValueError(f"Unknown status filter '{status}'. Use one of {STATUS_FILTERS}")
        needle = term.lower()
        return [
            article for article in self.store.list_articles()
            if (needle in article.title.lower() or needle in article.content.lower())
            and _matches_status(article, status)
        ]

    # Analysis

    def _long_enough(self, text: str) -> bool:
        return len((text or "").strip()) >= self.min_analysis_chars

    async def preview_score(self, content: str) -> Optional[int]:
        """Score shown before submitting. None for trivially short content."""
        if not self._long_enough(content):
            return None
        return await self.analyzer.analyze(content)

    async def fact_check(self, text: str) -> str:
        if not self._long_enough(text):
            return FACT_CHECK_PROMPT
        assessment = await self.analyzer.assess(text)
        return fact_check_report(assessment)

    # Submission and ingestion

    async def submit_article(self, user_id: Optional[str], submission: Submission,
                             author: Optional[str] = None) -> Optional[Article]:
        if not user_id:
            logger.info("Submission ignored: no authenticated user")
            return None

        score = await self.analyzer.analyze(submission.content)
        article = Article(
            id=uuid.uuid4().hex,
            title=submission.title,
            summary=submission.summary or submission.content[:200],
            content=submission.content,
            author=author or user_id,
            source=submission.source or "Community",
            category=submission.category,
            published_at=datetime.now(timezone.utc),
            tags=list(submission.tags),
            location=submission.location,
            url=submission.url,
            credibility_score=score,
            verified=is_verified(score),
        )
        self.store.insert_article(article)
        logger.info(f"Submitted '{article.title[:50]}' with credibility {score}")
        return article

    async def ingest(self, feeds, analyze: bool = True, enrich: bool = False) -> int:
        """
        Pull articles from each feed and store the ones not seen before.
        With analyze=False the feed's own scores are kept (used for seeding).
        Returns the number of articles added.
        """
        added = 0
        for feed in feeds:
            logger.info(f"Running feed: {feed.name}")
            try:
                articles = await feed.fetch_articles()
            except Exception as e:
                logger.error(f"Feed {feed.name} failed: {e}")
                continue
            logger.info(f"Found {len(articles)} articles from {feed.name}")

            for article in articles:
                if self.store.article_exists(article.id):
                    logger.debug(f"Duplicate article skipped: {article.title}")
                    continue
                if enrich:
                    await feed.enrich_article(article)
                if analyze:
                    article.credibility_score = await self.analyzer.analyze(
                        f"{article.title}\n\n{article.content or article.summary}"
                    )
                    article.verified = is_verified(article.credibility_score)
                if self.store.insert_article(article):
                    added += 1
        logger.info(f"Ingestion complete: {added} new articles")
        return added

    # Community actions

    def vote(self, user_id: Optional[str], article_id: str, direction: VoteDirection) -> VoteResult:
        if not user_id:
            logger.info("Vote ignored: no authenticated user")
            return VoteResult(VoteStatus.UNAUTHENTICATED)
        return self.aggregator.cast_vote(article_id, direction, user_id)

    def toggle_save(self, user_id: Optional[str], article_id: str) -> Optional[bool]:
        if not user_id:
            logger.info("Save ignored: no authenticated user")
            return None
        if not self.store.article_exists(article_id):
            raise ArticleNotFoundError(article_id)
        return self.store.toggle_saved(user_id, article_id)

    def saved_articles(self, user_id: str) -> List[Article]:
        articles = [self.store.get_article(article_id) for article_id in self.store.saved_article_ids(user_id)]
        return [article for article in articles if article is not None]

    def user_vote(self, user_id: Optional[str], article_id: str) -> Optional[Vote]:
        if not user_id:
            return None
        return self.store.get_vote(user_id, article_id)

    def user_vote_count(self, user_id: str) -> int:
        return self.store.count_user_votes(user_id)

    # Stats

    def category_stats(self, category: str) -> CategoryStats:
        articles = self.store.list_articles(category)
        scores = [article.credibility_score for article in articles]
        average = int(sum(scores) / len(scores) + 0.5) if scores else 0
        return CategoryStats(
            category=category,
            articles=len(articles),
            trusted=sum(1 for s in scores if s >= TRUSTED_THRESHOLD),
            pending=sum(1 for s in scores if PENDING_THRESHOLD <= s < TRUSTED_THRESHOLD),
            average_score=average,
        )

    def voting_stats(self) -> VotingStats:
        articles = self.store.list_articles()
        return VotingStats(
            trusted=sum(1 for a in articles if a.credibility_score >= TRUSTED_THRESHOLD),
            pending=sum(1 for a in articles if _matches_status(a, "pending")),
            disputed=sum(1 for a in articles if _matches_status(a, "disputed")),
            total_votes=sum(a.votes.total for a in articles),
        )
