import argparse
import asyncio
import logging
import sys
from dotenv import load_dotenv

from ziptales.ai import GeminiScorer
from ziptales.config import Settings
from ziptales.credibility import CredibilityAnalyzer
from ziptales.db import Database
from ziptales.errors import ZipTalesError
from ziptales.http_client import HTTPClient
from ziptales.models import Article, Submission
from ziptales.service import NewsService, STATUS_FILTERS

from feeds.rss import DEFAULT_FEEDS
from feeds.sample import SampleFeed

logger = logging.getLogger(__name__)


def build_service(settings: Settings) -> NewsService:
    db = Database(settings.database_path, enabled=settings.database_enabled)
    scorer = GeminiScorer(api_key=settings.gemini_api_key, model_name=settings.gemini_model)
    analyzer = CredibilityAnalyzer(remote=scorer, timeout=settings.credibility_timeout)
    return NewsService(db, analyzer, min_analysis_chars=settings.analysis_min_chars)


def format_article(article: Article) -> str:
    badge = " [Verified]" if article.verified else ""
    return (
        f"{article.id}  {article.title}{badge}\n"
        f"    {article.source} | {article.category} | "
        f"{article.label} ({article.credibility_score}%) | "
        f"+{article.votes.upvotes} / -{article.votes.downvotes}"
    )


def print_articles(articles):
    if not articles:
        print("No articles found.")
    for article in articles:
        print(format_article(article))


async def refresh(service: NewsService, settings: Settings):
    http = HTTPClient()
    try:
        feeds = [feed_cls(http) for feed_cls in DEFAULT_FEEDS]
        added = await service.ingest(feeds, enrich=settings.enrich_articles)
    finally:
        await http.close()
    print(f"Added {added} new articles.")


async def run(args, settings: Settings) -> int:
    service = build_service(settings)

    if args.command == "refresh":
        await refresh(service, settings)
    elif args.command == "seed":
        added = await service.ingest([SampleFeed()], analyze=False)
        print(f"Seeded {added} articles.")
    elif args.command == "list":
        print_articles(service.list_articles(args.category))
    elif args.command == "search":
        print_articles(service.search(args.term, status=args.status))
    elif args.command == "show":
        article = service.get_article(args.article_id)
        if article is None:
            print(f"Article not found: {args.article_id}")
            return 1
        print(format_article(article))
        vote = service.user_vote(args.user, article.id)
        if vote:
            print(f"    You voted {vote.direction.value}")
        print()
        print(article.content)
    elif args.command == "analyze":
        score = await service.preview_score(args.text)
        if score is None:
            print("Content too short to analyze.")
        else:
            print(f"Credibility score: {score}")
    elif args.command == "fact-check":
        print(await service.fact_check(args.text))
    elif args.command == "submit":
        submission = Submission(
            title=args.title,
            content=args.content,
            category=args.category,
            source=args.source or "",
            url=args.url,
            tags=[t.strip() for t in (args.tags or "").split(",") if t.strip()],
            location=args.location,
        )
        article = await service.submit_article(args.user, submission)
        print(format_article(article))
    elif args.command == "vote":
        result = service.vote(args.user, args.article_id, args.direction)
        print(f"Vote {result.status.value}.")
        if result.article:
            print(format_article(result.article))
    elif args.command == "save":
        saved = service.toggle_save(args.user, args.article_id)
        print("Saved." if saved else "Removed from saved.")
    elif args.command == "saved":
        print_articles(service.saved_articles(args.user))
    elif args.command == "stats":
        if args.category:
            stats = service.category_stats(args.category)
            print(f"{stats.category}: {stats.articles} articles, {stats.trusted} trusted, "
                  f"{stats.pending} pending, avg credibility {stats.average_score}%")
        else:
            stats = service.voting_stats()
            print(f"Trusted: {stats.trusted}  Pending: {stats.pending}  "
                  f"Disputed: {stats.disputed}  Total votes cast: {stats.total_votes}")
    return 0


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="ZipTales - community-verified news with credibility scores")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("refresh", help="Fetch new articles from the configured RSS feeds")
    sub.add_parser("seed", help="Load the sample launch articles")

    p = sub.add_parser("list", help="List articles, newest first")
    p.add_argument("--category")

    p = sub.add_parser("search", help="Search titles and content")
    p.add_argument("term", nargs="?", default="")
    p.add_argument("--status", choices=STATUS_FILTERS, default="all")

    p = sub.add_parser("show", help="Show one article")
    p.add_argument("article_id")
    p.add_argument("--user")

    p = sub.add_parser("analyze", help="Score a piece of text")
    p.add_argument("text")

    p = sub.add_parser("fact-check", help="Print a credibility report for a piece of text")
    p.add_argument("text")

    p = sub.add_parser("submit", help="Submit a news article")
    p.add_argument("--user", required=True)
    p.add_argument("--title", required=True)
    p.add_argument("--content", required=True)
    p.add_argument("--category", required=True)
    p.add_argument("--source")
    p.add_argument("--url")
    p.add_argument("--tags", help="Comma separated")
    p.add_argument("--location")

    p = sub.add_parser("vote", help="Vote on an article's credibility")
    p.add_argument("--user", required=True)
    p.add_argument("article_id")
    p.add_argument("direction", choices=["up", "down"])

    p = sub.add_parser("save", help="Toggle an article in your saved list")
    p.add_argument("--user", required=True)
    p.add_argument("article_id")

    p = sub.add_parser("saved", help="List your saved articles")
    p.add_argument("--user", required=True)

    p = sub.add_parser("stats", help="Voting or category statistics")
    p.add_argument("--category")

    return parser.parse_args(argv)


def main(argv=None) -> int:
    load_dotenv()
    settings = Settings.from_env()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    args = parse_args(argv)
    try:
        return asyncio.run(run(args, settings))
    except ZipTalesError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
