from datetime import datetime
from typing import List

from feeds.base import BaseFeed
from ziptales.models import Article, Votes


class SampleFeed(BaseFeed):
    """Launch articles used to seed an empty store. Needs no network access."""
    SOURCE = "ZipTales"

    def __init__(self, http_client=None):
        super().__init__(http_client)

    async def fetch_articles(self) -> List[Article]:
        return [
            Article(
                id="1",
                title="AI Technology Breakthrough in Medical Diagnosis",
                summary="Researchers develop new AI system that can detect diseases with 95% accuracy, "
                        "potentially revolutionizing healthcare diagnostics.",
                content="A groundbreaking AI system developed by researchers at leading universities "
                        "has achieved remarkable accuracy in medical diagnosis...",
                author="Dr. Sarah Johnson",
                source="TechMed Today",
                category="Technology",
                published_at=datetime.fromisoformat("2025-01-15T10:30:00+00:00"),
                tags=["AI", "Healthcare", "Technology"],
                location="Stanford, CA",
                image_url="https://images.pexels.com/photos/3825581/pexels-photo-3825581.jpeg",
                credibility_score=85,
                votes=Votes(upvotes=142, downvotes=8),
                verified=True,
            ),
            Article(
                id="2",
                title="Climate Change Summit Reaches Historic Agreement",
                summary="World leaders agree on ambitious carbon reduction targets, marking a significant "
                        "step in global climate action.",
                content="In a historic moment for environmental policy, world leaders have reached "
                        "a comprehensive agreement...",
                author="Michael Chen",
                source="Global News Network",
                category="Politics",
                published_at=datetime.fromisoformat("2025-01-15T08:15:00+00:00"),
                tags=["Climate", "Politics", "Environment"],
                location="Geneva, Switzerland",
                image_url="https://images.pexels.com/photos/1108572/pexels-photo-1108572.jpeg",
                credibility_score=78,
                votes=Votes(upvotes=89, downvotes=12),
                verified=True,
            ),
            Article(
                id="3",
                title="Controversial Social Media Policy Changes",
                summary="Major platform announces significant changes to content moderation policies, "
                        "sparking debate among users and experts.",
                content="The announcement has generated mixed reactions from users, privacy advocates, "
                        "and industry experts...",
                author="Anonymous Source",
                source="Social Media Insider",
                category="Technology",
                published_at=datetime.fromisoformat("2025-01-14T16:45:00+00:00"),
                tags=["Social Media", "Policy", "Privacy"],
                image_url="https://images.pexels.com/photos/267350/pexels-photo-267350.jpeg",
                credibility_score=45,
                votes=Votes(upvotes=34, downvotes=67),
                verified=False,
            ),
        ]
