"""
Credibility analysis.

Scores are resolved in two stages: the remote model tier (bounded by a
timeout), then the local keyword heuristic. The local tier is pure, so the
same text always gets the same fallback score.
"""
import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

BASELINE_SCORE = 50
KEYWORD_TABLE_VERSION = 2


@dataclass(frozen=True)
class KeywordRule:
    name: str
    weight: int
    finding: str
    keywords: Tuple[str, ...] = ()
    pattern: Optional[re.Pattern] = None

    def matches(self, lowered: str) -> bool:
        if any(keyword in lowered for keyword in self.keywords):
            return True
        return bool(self.pattern and self.pattern.search(lowered))


# Each rule fires at most once per text, however many of its keywords appear.
KEYWORD_TABLE: Tuple[KeywordRule, ...] = (
    KeywordRule("academic", 20, "Academic sources mentioned.",
                keywords=("study", "research", "university")),
    KeywordRule("official", 15, "Official confirmation language used.",
                keywords=("confirmed", "verified", "official")),
    KeywordRule("expert", 10, "Expert opinion cited.",
                keywords=("expert", "professor", "scientist")),
    KeywordRule("cited_link", 8, "Links to external references.",
                pattern=re.compile(r"https?://\S+|www\.\S+")),
    KeywordRule("sensational", -10, "Sensational language detected.",
                keywords=("breaking", "urgent", "shocking")),
    KeywordRule("anonymous", -15, "Anonymous sources present.",
                keywords=("anonymous", "unnamed source")),
    KeywordRule("unconfirmed", -20, "Unverified claims or rumors.",
                keywords=("rumor", "allegedly", "unconfirmed")),
    KeywordRule("conspiracy", -30, "Conspiracy framing detected.",
                keywords=("conspiracy", "cover-up", "they don't want you to know")),
)


def clamp_score(score: float) -> int:
    return int(max(0, min(100, score)))


@dataclass
class CredibilityAssessment:
    score: int
    tier: str  # "remote" or "local"
    findings: List[str] = field(default_factory=list)


class LocalScorer:
    """Deterministic keyword heuristic used when the remote tier has no answer."""

    def __init__(self, rules: Tuple[KeywordRule, ...] = KEYWORD_TABLE, baseline: int = BASELINE_SCORE):
        self.rules = rules
        self.baseline = baseline

    def assess(self, text: str) -> CredibilityAssessment:
        lowered = (text or "").lower()
        score = self.baseline
        findings = []
        for rule in self.rules:
            if rule.matches(lowered):
                score += rule.weight
                findings.append(rule.finding)
        return CredibilityAssessment(score=clamp_score(score), tier="local", findings=findings)

    def score(self, text: str) -> int:
        return self.assess(text).score


class CredibilityAnalyzer:
    """
    Maps free text to a credibility score in [0, 100]. Never raises.

    Args:
        remote: object with an async ``score_text(text) -> Optional[int]``
            (e.g. GeminiScorer), or None to always use the local tier.
        timeout: seconds to wait for the remote tier before falling back.
    """

    def __init__(self, remote=None, local: Optional[LocalScorer] = None, timeout: float = 10.0):
        self.remote = remote
        self.local = local or LocalScorer()
        self.timeout = timeout

    async def analyze(self, text: str) -> int:
        assessment = await self.assess(text)
        return assessment.score

    async def assess(self, text: str) -> CredibilityAssessment:
        remote_score = await self._resolve_remote(text)
        if remote_score is not None:
            return CredibilityAssessment(score=clamp_score(remote_score), tier="remote")
        return self.local.assess(text)

    async def _resolve_remote(self, text: str) -> Optional[int]:
        if self.remote is None or not getattr(self.remote, "available", True):
            return None
        try:
            return await asyncio.wait_for(self.remote.score_text(text), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Remote credibility analysis timed out after {self.timeout}s, using local heuristic")
            return None
        except Exception as e:
            logger.warning(f"Remote credibility analysis failed: {str(e)[:100]}, using local heuristic")
            return None


def status_line(score: int) -> str:
    if score >= 70:
        return "✅ Status: Likely Trustworthy"
    if score >= 40:
        return "⚠️ Status: Requires Verification"
    return "❌ Status: High Risk - Verify Carefully"


RECOMMENDATIONS = (
    "Cross-check with multiple reliable sources",
    "Look for official statements or documentation",
    "Check the author's credentials and publication history",
    "Verify any statistical claims with original sources",
)


def fact_check_report(assessment: CredibilityAssessment) -> str:
    analysis = " ".join(assessment.findings) or "Standard news content detected."
    lines = [
        "Based on my analysis:",
        "",
        f"📊 Credibility Score: {assessment.score}%",
        "",
        f"🔍 Analysis: {analysis}",
        "",
        status_line(assessment.score),
        "",
        "Recommendations:",
    ]
    lines.extend(f"- {item}" for item in RECOMMENDATIONS)
    return "\n".join(lines)
