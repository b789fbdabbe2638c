import google.generativeai as genai
import os
import re
import logging
from typing import Optional

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"\d+")

PROMPT_TEMPLATE = """Analyze the credibility of this news content and respond with ONLY a single integer from 0 to 100.

Consider:
- Source reliability
- Factual accuracy
- Bias
- Sensationalism

0 = fabricated or misleading, 100 = fully credible.

Content:
{content}
"""


def parse_score(response_text: str) -> Optional[int]:
    """Return the first integer found in a model response, clamped to 0-100."""
    if not response_text:
        return None
    match = _INTEGER.search(response_text)
    if not match:
        return None
    return max(0, min(100, int(match.group(0))))


class GeminiScorer:
    """Remote credibility tier backed by the Gemini API. One call, no retries."""

    def __init__(self, api_key: Optional[str] = None, model_name: str = "gemini-2.0-flash"):
        self.api_key = api_key or os.getenv("GEMINI_API_KEY")
        self.model_name = model_name

        if not self.api_key:
            logger.warning("No GEMINI_API_KEY found. Remote credibility analysis will be disabled.")
            self.model = None
        else:
            genai.configure(api_key=self.api_key)
            self.model = genai.GenerativeModel(self.model_name)
            logger.info(f"Using Gemini model: {self.model_name}")

    @property
    def available(self) -> bool:
        return self.model is not None

    async def score_text(self, text: str) -> Optional[int]:
        """
        Ask the model for a credibility score.
        Returns None when the call fails or the reply holds no integer.
        """
        if not self.model:
            return None

        prompt = PROMPT_TEMPLATE.format(content=text[:4000])

        try:
            response = await self.model.generate_content_async(prompt)
        except Exception as e:
            logger.warning(f"Credibility request to {self.model_name} failed: {str(e)[:100]}")
            return None

        # Blocked or empty candidates raise on .text
        try:
            response_text = response.text
        except Exception as text_error:
            logger.warning(f"Model {self.model_name} response has no valid text: {text_error}")
            return None

        score = parse_score(response_text)
        if score is None:
            logger.warning(f"No score in model response: {response_text[:80]!r}")
        else:
            logger.debug(f"Remote credibility score = {score}")
        return score
