import pytest

from ziptales.ai import GeminiScorer


class FakeResponse:
    def __init__(self, text=None, blocked=False):
        self._text = text
        self._blocked = blocked

    @property
    def text(self):
        if self._blocked:
            raise ValueError("response was blocked")
        return self._text


class FakeModel:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.prompts = []

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.response


@pytest.fixture
def scorer(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    return GeminiScorer()


@pytest.mark.asyncio
async def test_disabled_without_api_key(scorer):
    assert not scorer.available
    assert await scorer.score_text("anything") is None


@pytest.mark.asyncio
async def test_score_parsed_from_model_reply(scorer):
    scorer.model = FakeModel(FakeResponse("Score: 64"))
    assert await scorer.score_text("Some article text") == 64
    assert "Some article text" in scorer.model.prompts[0]


@pytest.mark.asyncio
@pytest.mark.parametrize("model", [
    FakeModel(error=RuntimeError("429 quota exceeded")),
    FakeModel(FakeResponse(blocked=True)),
    FakeModel(FakeResponse("no number here")),
])
async def test_failures_yield_no_score(scorer, model):
    scorer.model = model
    assert await scorer.score_text("Some article text") is None
