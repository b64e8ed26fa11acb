"""Tests for AI recommender adapters and the recommendation prompt."""

import json
from types import SimpleNamespace
from uuid import uuid4

import httpx
import pytest
from conftest import FakeCatalog, make_book
from openai import OpenAIError

from bookreview.adapters.ai.factory import build_ai_recommender
from bookreview.adapters.ai.mock import DisabledAIRecommender, MockAIRecommender
from bookreview.adapters.ai.ollama import OllamaRecommender
from bookreview.adapters.ai.openai_adapter import OpenAIRecommender
from bookreview.config import AIProvider, Settings
from bookreview.domain.entities import Genre, UserProfile
from bookreview.domain.errors import CollaboratorError
from bookreview.prompts.templates import (
    RECOMMEND_BOOKS,
    parse_recommended_titles,
    render_recommendation_prompt,
    truncate_to_tokens,
)


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(
        id=uuid4(),
        preferred_genres=frozenset({Genre.SCIENCE_FICTION}),
        favorite_genres=frozenset({Genre.MYSTERY}),
        bio="Engineer who reads on the train",
    )


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog(
        books=[
            make_book("Dune", rating=4.6, genres=(Genre.SCIENCE_FICTION,)),
            make_book("Foundation", rating=4.3, genres=(Genre.SCIENCE_FICTION,)),
            make_book("Gone Girl", rating=4.1, genres=(Genre.MYSTERY,)),
            make_book("Emma", rating=3.9, genres=(Genre.ROMANCE,)),
        ]
    )


class StubCompletions:
    def __init__(self, content: str | None = None, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.requests: list[dict] = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def stub_openai_client(completions: StubCompletions) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


# ── Prompt ─────────────────────────────────────────


def test_render_prompt_includes_profile_and_history(profile, catalog):
    prompt = render_recommendation_prompt(profile, catalog.books[:1], limit=6)

    assert prompt["system"] == RECOMMEND_BOOKS.system
    assert "science fiction" in prompt["user"]
    assert "mystery" in prompt["user"]
    assert "Engineer who reads on the train" in prompt["user"]
    assert "- Dune by Some Author (Genres: science fiction)" in prompt["user"]
    assert "up to 6 books" in prompt["user"]


def test_render_prompt_without_history_or_bio():
    prompt = render_recommendation_prompt(UserProfile(id=uuid4()), [], limit=3)
    assert "No books reviewed yet." in prompt["user"]
    assert "No bio provided" in prompt["user"]
    assert "none stated" in prompt["user"]


def test_truncate_to_tokens_marks_truncation():
    text = "\n".join(f"- Book {i} by Author" for i in range(500))
    truncated = truncate_to_tokens(text, 100)
    assert len(truncated) < len(text)
    assert truncated.endswith("[Reading history truncated]")


def test_parse_titles_from_fenced_json():
    raw = 'Sure!\n```json\n[{"title": "Dune", "author": "Herbert"}, {"title": " Emma "}, {"x": 1}]\n```'
    assert parse_recommended_titles(raw) == ["Dune", "Emma"]


def test_parse_titles_from_wrapped_object():
    raw = json.dumps({"books": [{"title": "Foundation", "author": "Asimov"}]})
    assert parse_recommended_titles(raw) == ["Foundation"]


@pytest.mark.parametrize("raw", ["no json here", "[not valid json]"])
def test_parse_titles_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parse_recommended_titles(raw)


# ── OpenAI ─────────────────────────────────────────


def test_openai_unavailable_without_api_key(catalog):
    assert not OpenAIRecommender(catalog, api_key="", model="gpt-4o-mini").is_available()
    assert not OpenAIRecommender(
        catalog, api_key="sk-test", model="gpt-4o-mini", enabled=False
    ).is_available()


async def test_openai_unavailable_returns_empty(catalog, profile):
    recommender = OpenAIRecommender(catalog, api_key="", model="gpt-4o-mini")
    assert await recommender.get_recommendations(profile, [], 5) == []


async def test_openai_resolves_suggested_titles_against_catalog(catalog, profile):
    completions = StubCompletions(
        json.dumps(
            [
                {"title": "Foundation", "author": "Isaac Asimov"},
                {"title": "Not In Catalog", "author": "Nobody"},
                {"title": "gone girl", "author": "Gillian Flynn"},
            ]
        )
    )
    recommender = OpenAIRecommender(
        catalog, api_key="sk-test", model="gpt-4o-mini", client=stub_openai_client(completions)
    )

    books = await recommender.get_recommendations(profile, catalog.books[:1], 5)

    assert [b.title for b in books] == ["Foundation", "Gone Girl"]
    request = completions.requests[0]
    assert request["model"] == "gpt-4o-mini"
    assert request["max_tokens"] == RECOMMEND_BOOKS.max_tokens
    assert request["messages"][0]["role"] == "system"


async def test_openai_truncates_to_max_results(catalog, profile):
    completions = StubCompletions(
        json.dumps([{"title": t} for t in ("Dune", "Foundation", "Emma")])
    )
    recommender = OpenAIRecommender(
        catalog, api_key="sk-test", model="m", client=stub_openai_client(completions)
    )
    assert len(await recommender.get_recommendations(profile, [], 2)) == 2


async def test_openai_sdk_error_becomes_collaborator_error(catalog, profile):
    completions = StubCompletions(error=OpenAIError("rate limited"))
    recommender = OpenAIRecommender(
        catalog, api_key="sk-test", model="m", client=stub_openai_client(completions)
    )
    with pytest.raises(CollaboratorError):
        await recommender.get_recommendations(profile, [], 3)


async def test_openai_unparseable_response_is_collaborator_error(catalog, profile):
    completions = StubCompletions("I would suggest reading Dune.")
    recommender = OpenAIRecommender(
        catalog, api_key="sk-test", model="m", client=stub_openai_client(completions)
    )
    with pytest.raises(CollaboratorError):
        await recommender.get_recommendations(profile, [], 3)


# ── Ollama ─────────────────────────────────────────


async def test_ollama_posts_chat_request(catalog, profile):
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        assert request.url.path == "/api/chat"
        content = json.dumps({"books": [{"title": "Dune", "author": "Frank Herbert"}]})
        return httpx.Response(200, json={"message": {"content": content}})

    recommender = OllamaRecommender(
        catalog,
        base_url="http://ollama:11434/",
        model="llama3",
        transport=httpx.MockTransport(handler),
    )

    books = await recommender.get_recommendations(profile, [], 4)

    assert [b.title for b in books] == ["Dune"]
    assert seen[0]["model"] == "llama3"
    assert seen[0]["stream"] is False


async def test_ollama_http_error_becomes_collaborator_error(catalog, profile):
    recommender = OllamaRecommender(
        catalog,
        base_url="http://ollama:11434",
        model="llama3",
        transport=httpx.MockTransport(lambda request: httpx.Response(503)),
    )
    with pytest.raises(CollaboratorError):
        await recommender.get_recommendations(profile, [], 4)


def test_ollama_gated_by_enabled_flag(catalog):
    recommender = OllamaRecommender(catalog, "http://ollama", "llama3", enabled=False)
    assert not recommender.is_available()


# ── Mock / disabled ────────────────────────────────


async def test_mock_recommender_is_deterministic(catalog, profile):
    recommender = MockAIRecommender(catalog, latency=0)
    read = [catalog.books[0]]

    first = await recommender.get_recommendations(profile, read, 5)
    second = await recommender.get_recommendations(profile, read, 5)

    assert recommender.is_available()
    assert [b.title for b in first] == ["Foundation", "Gone Girl"]
    assert first == second


async def test_mock_recommender_uses_history_genres_without_profile_signal(catalog):
    recommender = MockAIRecommender(catalog, latency=0)
    books = await recommender.get_recommendations(
        UserProfile(id=uuid4()), [catalog.books[3]], 5
    )
    assert books == []  # only romance title is the one already read


async def test_disabled_recommender(profile):
    recommender = DisabledAIRecommender()
    assert not recommender.is_available()
    assert await recommender.get_recommendations(profile, [], 5) == []


# ── Factory ────────────────────────────────────────


@pytest.mark.parametrize(
    ("provider", "expected"),
    [
        (AIProvider.DISABLED, DisabledAIRecommender),
        (AIProvider.MOCK, MockAIRecommender),
        (AIProvider.OPENAI, OpenAIRecommender),
        (AIProvider.OLLAMA, OllamaRecommender),
    ],
)
def test_factory_selects_adapter(catalog, provider, expected):
    settings = Settings(ai_provider=provider, ai_enabled=True, openai_api_key="sk-test")
    assert isinstance(build_ai_recommender(settings, catalog), expected)


def test_factory_openai_without_key_is_unavailable(catalog):
    settings = Settings(ai_provider=AIProvider.OPENAI, ai_enabled=True, openai_api_key="")
    assert not build_ai_recommender(settings, catalog).is_available()


@pytest.mark.parametrize(
    "provider", [AIProvider.MOCK, AIProvider.OPENAI, AIProvider.OLLAMA]
)
def test_factory_respects_ai_enabled_flag(catalog, provider):
    settings = Settings(ai_provider=provider, ai_enabled=False, openai_api_key="sk-test")
    assert not build_ai_recommender(settings, catalog).is_available()
