import logging
import httpx
from typing import Optional
from fake_useragent import UserAgent
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

logger = logging.getLogger(__name__)

FEED_ACCEPT = "application/rss+xml,application/atom+xml,application/xml;q=0.9,*/*;q=0.8"
PAGE_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


class HTTPClient:
    def __init__(self, timeout: float = 15.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.ua = UserAgent()
        self.timeout = timeout
        self.client = httpx.AsyncClient(follow_redirects=True, transport=transport)

    def _get_headers(self, accept: str = PAGE_ACCEPT):
        return {
            "User-Agent": self.ua.random,
            "Accept": accept,
            "Accept-Language": "en-US,en;q=0.5",
            "DNT": "1",
        }

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((httpx.RequestError, httpx.TimeoutException)),
        reraise=True,
    )
    async def fetch(self, url: str, accept: str = PAGE_ACCEPT) -> Optional[str]:
        """
        Fetch a URL with retries on network errors and a fresh user agent per attempt.
        HTTP error statuses raise httpx.HTTPStatusError without retrying.
        """
        response = await self.client.get(url, headers=self._get_headers(accept), timeout=self.timeout)
        response.raise_for_status()
        logger.info(f"Fetched {url}")
        return response.text

    async def close(self):
        await self.client.aclose()
