from dataclasses import dataclass, field
from typing import Optional, List
from datetime import datetime
from enum import Enum
import json

TRUSTED_THRESHOLD = 70
PENDING_THRESHOLD = 40


class VoteDirection(str, Enum):
    UP = "up"
    DOWN = "down"


@dataclass
class Votes:
    upvotes: int = 0
    downvotes: int = 0

    @property
    def total(self) -> int:
        return self.upvotes + self.downvotes

    @property
    def ratio(self) -> float:
        """Share of up-votes; 0.5 when nobody has voted yet."""
        if self.total == 0:
            return 0.5
        return self.upvotes / self.total


@dataclass
class Article:
    id: str
    title: str
    summary: str
    content: str
    author: str
    source: str  # Publication or site name
    category: str
    published_at: Optional[datetime]
    tags: List[str] = field(default_factory=list)
    location: Optional[str] = None
    image_url: Optional[str] = None
    url: Optional[str] = None
    credibility_score: int = 50  # 0-100
    votes: Votes = field(default_factory=Votes)
    verified: bool = False

    @property
    def label(self) -> str:
        return credibility_label(self.credibility_score)

    def to_row(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "content": self.content,
            "author": self.author,
            "source": self.source,
            "category": self.category,
            "published_at": self.published_at.isoformat() if self.published_at else None,  # Stored as ISO string
            "tags": json.dumps(self.tags),
            "location": self.location,
            "image_url": self.image_url,
            "url": self.url,
            "credibility_score": self.credibility_score,
            "upvotes": self.votes.upvotes,
            "downvotes": self.votes.downvotes,
            "verified": 1 if self.verified else 0,
        }

    @classmethod
    def from_row(cls, row: dict) -> "Article":
        published_at = row.get("published_at")
        tags = row.get("tags") or "[]"
        return cls(
            id=row["id"],
            title=row["title"],
            summary=row.get("summary") or "",
            content=row.get("content") or "",
            author=row.get("author") or "",
            source=row.get("source") or "",
            category=row.get("category") or "",
            published_at=datetime.fromisoformat(published_at) if published_at else None,
            tags=json.loads(tags) if isinstance(tags, str) else list(tags),
            location=row.get("location"),
            image_url=row.get("image_url"),
            url=row.get("url"),
            credibility_score=int(row.get("credibility_score") or 0),
            votes=Votes(upvotes=int(row.get("upvotes") or 0), downvotes=int(row.get("downvotes") or 0)),
            verified=bool(row.get("verified")),
        )


@dataclass
class Submission:
    """User-submitted article before it gets an id and a score."""
    title: str
    content: str
    category: str
    source: str = ""
    url: Optional[str] = None
    summary: str = ""
    tags: List[str] = field(default_factory=list)
    location: Optional[str] = None


@dataclass
class Vote:
    user_id: str
    article_id: str
    direction: VoteDirection
    created_at: Optional[datetime] = None


def credibility_label(score: int) -> str:
    if score >= TRUSTED_THRESHOLD:
        return "Trusted"
    if score >= PENDING_THRESHOLD:
        return "Pending Verification"
    return "Disputed"
