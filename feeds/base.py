from abc import ABC, abstractmethod
from typing import List
import logging
import re
from bs4 import BeautifulSoup
from readability import Document
from ziptales.http_client import HTTPClient
from ziptales.models import Article

logger = logging.getLogger(__name__)


class BaseFeed(ABC):
    SOURCE = ""
    CATEGORY = "General"

    def __init__(self, http_client: HTTPClient):
        self.http_client = http_client
        self.name = self.__class__.__name__

    @abstractmethod
    async def fetch_articles(self) -> List[Article]:
        """
        Main entry point for the feed.
        Returns a list of Article objects with a neutral credibility score.
        """
        pass

    async def enrich_article(self, article: Article):
        """
        Fetches the full text of the article from its URL into article.content.
        Leaves the article untouched if the page cannot be fetched.
        """
        if not article.url:
            return
        try:
            logger.info(f"Enriching article: {article.title}")
            html = await self.http_client.fetch(article.url)
            if not html:
                return
            soup = BeautifulSoup(Document(html).summary(), "lxml")

            paragraphs = []
            for node in soup.find_all(["p", "h2", "h3"]):
                text = re.sub(r"\s+", " ", node.get_text(separator=" ", strip=True))
                if text:
                    paragraphs.append(text)

            if paragraphs:
                article.content = "\n\n".join(paragraphs)
                if not article.summary:
                    article.summary = article.content[:500] + "..."
        except Exception as e:
            logger.warning(f"Failed to enrich article {article.url}: {e}")
