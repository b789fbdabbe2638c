from typing import List, Optional
import feedparser
from email.utils import parsedate_to_datetime
import hashlib
import logging
from bs4 import BeautifulSoup

from feeds.base import BaseFeed
from ziptales.http_client import FEED_ACCEPT
from ziptales.models import Article

logger = logging.getLogger(__name__)


def article_id_for(link: str) -> str:
    return hashlib.md5(link.encode()).hexdigest()


def _clean_html(text: str) -> str:
    if not text:
        return ""
    return BeautifulSoup(text, "html.parser").get_text(" ", strip=True)


def _image_for(entry) -> Optional[str]:
    for key in ("media_content", "media_thumbnail"):
        media = entry.get(key)
        if media and media[0].get("url"):
            return media[0]["url"]
    return None


class RSSFeed(BaseFeed):
    """Generic RSS/Atom feed. Subclasses set RSS_URL, SOURCE and CATEGORY."""
    RSS_URL = ""

    def parse_entries(self, content: str) -> List[Article]:
        articles = []
        feed = feedparser.parse(content)

        for entry in feed.entries:
            try:
                link = entry.link
                summary = _clean_html(entry.get("description", ""))

                published_at = None
                if "published" in entry:
                    try:
                        published_at = parsedate_to_datetime(entry.published)
                    except (TypeError, ValueError):
                        logger.warning(f"Could not parse date: {entry.published}")

                article = Article(
                    id=article_id_for(link),
                    title=entry.title,
                    summary=summary,
                    content=summary,
                    author=entry.get("author", "") or self.SOURCE,
                    source=self.SOURCE,
                    category=self.CATEGORY,
                    published_at=published_at,
                    tags=[tag.term for tag in entry.get("tags", []) if tag.get("term")],
                    image_url=_image_for(entry),
                    url=link,
                )
                articles.append(article)
            except (AttributeError, KeyError) as e:
                logger.error(f"Error parsing entry: {e}")
                continue
        return articles

    async def fetch_articles(self) -> List[Article]:
        content = await self.http_client.fetch(self.RSS_URL, accept=FEED_ACCEPT)
        if not content:
            return []
        return self.parse_entries(content)


class BBCWorldFeed(RSSFeed):
    RSS_URL = "https://feeds.bbci.co.uk/news/world/rss.xml"
    SOURCE = "BBC News"
    CATEGORY = "Politics"


class BBCTechnologyFeed(RSSFeed):
    RSS_URL = "https://feeds.bbci.co.uk/news/technology/rss.xml"
    SOURCE = "BBC News"
    CATEGORY = "Technology"


class ScienceDailyFeed(RSSFeed):
    RSS_URL = "https://www.sciencedaily.com/rss/all.xml"
    SOURCE = "ScienceDaily"
    CATEGORY = "Science"


class NPRHealthFeed(RSSFeed):
    RSS_URL = "https://feeds.npr.org/1128/rss.xml"
    SOURCE = "NPR"
    CATEGORY = "Health"


DEFAULT_FEEDS = [BBCWorldFeed, BBCTechnologyFeed, ScienceDailyFeed, NPRHealthFeed]
