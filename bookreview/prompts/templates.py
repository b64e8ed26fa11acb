"""
Versioned prompt templates for LLM-backed recommendation.

Templates are immutable and adapter-agnostic: the same rendered prompt is sent
to OpenAI or Ollama. Truncation of user-supplied content happens here rather
than in the adapters.
"""

import json
import re
from dataclasses import dataclass, field

from bookreview.domain.entities import CandidateBook, UserProfile


# ── Token Estimation ─────────────────────────────────────────────
# Rough estimate: 1 token ≈ 4 characters for English text.

CHARS_PER_TOKEN = 4


def truncate_to_tokens(text: str, max_tokens: int) -> str:
    """Truncate text to approximately max_tokens, preferring a line boundary."""
    max_chars = max_tokens * CHARS_PER_TOKEN
    if len(text) <= max_chars:
        return text
    truncated = text[:max_chars]
    last_newline = truncated.rfind("\n")
    if last_newline > max_chars * 0.8:
        truncated = truncated[:last_newline]
    return truncated + "\n[Reading history truncated]"


# ── Prompt Template ──────────────────────────────────────────────

@dataclass(frozen=True)
class PromptTemplate:
    """
    Immutable prompt template with system persona and user message.

    Attributes:
        name:              Unique identifier for logging and tracking.
        version:           Semantic version for prompt iteration tracking.
        system:            System message defining the LLM persona and constraints.
        user_template:     User message template with {variable} placeholders.
        max_tokens:        Maximum output tokens requested from the LLM.
        input_token_limit: Maximum tokens for input content.
        tags:              Metadata tags for categorization.
    """

    name: str
    version: str
    system: str
    user_template: str
    max_tokens: int = 1024
    input_token_limit: int = 4000
    tags: tuple[str, ...] = field(default_factory=tuple)

    def render(self, **kwargs: str) -> dict[str, str]:
        """Render template with variables, returning system + user messages."""
        return {
            "system": self.system,
            "user": self.user_template.format(**kwargs),
        }

    def render_with_truncation(self, content_key: str, **kwargs: str) -> dict[str, str]:
        """Render template, truncating the specified content field to fit token limits."""
        if content_key in kwargs:
            kwargs[content_key] = truncate_to_tokens(
                kwargs[content_key], self.input_token_limit
            )
        return self.render(**kwargs)


# ── Book Recommendation Prompt ───────────────────────────────────

RECOMMEND_BOOKS = PromptTemplate(
    name="recommend_books",
    version="1.0.0",
    system=(
        "You are a knowledgeable librarian recommending books to readers of a "
        "book review platform.\n\n"
        "Guidelines:\n"
        "- Recommend well-known, published books only.\n"
        "- Never recommend a book the reader has already read.\n"
        "- Favor the reader's preferred genres, but include a surprising pick "
        "when the reading history supports it.\n"
        "- Respond with a JSON array only, no prose. Each element is an object "
        'with "title", "author" and "reason" string fields.'
    ),
    user_template=(
        "Reader profile:\n"
        "- Preferred genres: {preferred_genres}\n"
        "- Genres of favorite books: {favorite_genres}\n"
        "- Bio: {bio}\n\n"
        "--- READING HISTORY (START) ---\n"
        "{reading_history}\n"
        "--- READING HISTORY (END) ---\n\n"
        "Recommend up to {limit} books this reader would enjoy:"
    ),
    max_tokens=800,
    input_token_limit=2000,
    tags=("recommendation", "books", "personalization"),
)


# ── Rendering Helpers ────────────────────────────────────────────

def _genre_list(genres) -> str:
    return ", ".join(sorted(g.label for g in genres)) or "none stated"


def render_recommendation_prompt(
    profile: UserProfile,
    read_books: list[CandidateBook],
    limit: int,
) -> dict[str, str]:
    """
    Render the book recommendation prompt.

    Args:
        profile: The reader's genre preferences and optional bio.
        read_books: Books the reader has reviewed, most recent first.
        limit: How many suggestions to ask for.

    Returns:
        Dict with 'system' and 'user' keys ready for any LLM adapter.
    """
    if read_books:
        history = "\n".join(
            f"- {b.title} by {b.author} (Genres: {_genre_list(b.genres)})"
            for b in read_books
        )
    else:
        history = "No books reviewed yet."

    return RECOMMEND_BOOKS.render_with_truncation(
        content_key="reading_history",
        preferred_genres=_genre_list(profile.preferred_genres),
        favorite_genres=_genre_list(profile.favorite_genres),
        bio=profile.bio or "No bio provided",
        reading_history=history,
        limit=str(limit),
    )


_JSON_ARRAY = re.compile(r"\[.*\]", re.DOTALL)


def parse_recommended_titles(raw: str) -> list[str]:
    """
    Extract book titles from a model response.

    Accepts a bare JSON array or one wrapped in prose/code fences. Raises
    ValueError when no array of objects with a "title" can be found.
    """
    match = _JSON_ARRAY.search(raw)
    if not match:
        raise ValueError("Response does not contain a JSON array")
    try:
        items = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Response is not valid JSON: {exc}") from exc

    titles: list[str] = []
    for item in items:
        if isinstance(item, dict) and isinstance(item.get("title"), str):
            title = item["title"].strip()
            if title:
                titles.append(title)
    return titles
