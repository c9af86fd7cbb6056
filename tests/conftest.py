"""Shared fixtures: in-process fakes for the embedding and LLM providers."""

import hashlib
import json
import re
from typing import Callable, Union

import pytest

from nido.analysis import BaseEmbeddingProvider, BaseLLMProvider, ConstraintExtractor, ResponseComposer
from nido.config import get_settings
from nido.database import InMemoryListingStore
from nido.ingestion import extract_property_type, generate_description
from nido.models import Listing
from nido.search import SearchEngine

EMBEDDING_DIM = 64


def vectorize(text: str) -> list[float]:
    """Deterministic bag-of-words hashing embedding."""
    vector = [0.0] * EMBEDDING_DIM
    for token in re.findall(r"[a-z0-9]+", text.lower()):
        index = int(hashlib.md5(token.encode()).hexdigest(), 16) % EMBEDDING_DIM
        vector[index] += 1.0
    return vector


class HashingEmbedder(BaseEmbeddingProvider):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail:
            raise RuntimeError("embedding service down")
        return vectorize(text)


class ScriptedLLM(BaseLLMProvider):
    """Answers with a fixed string, a function of the prompt, or raises."""

    provider_name = "scripted"

    def __init__(self, response: Union[str, Callable[[str], str], Exception] = ""):
        self.response = response
        self.prompts: list[str] = []

    async def complete(self, prompt: str, temperature: float = 0.2, max_tokens: int = 1024) -> str:
        self.prompts.append(prompt)
        if isinstance(self.response, Exception):
            raise self.response
        if callable(self.response):
            return self.response(prompt)
        return self.response


def extraction_llm(intents: dict, default: Union[dict, None] = None) -> ScriptedLLM:
    """LLM fake for the extractor: maps the user query to a JSON intent."""
    default = default or {"queryType": "search", "filters": {}}

    def respond(prompt: str) -> str:
        query = prompt.rsplit("User query:", 1)[1].strip()
        return "```json\n" + json.dumps(intents.get(query, default)) + "\n```"

    return ScriptedLLM(respond)


RAW_PROPERTIES = [
    (1, "Luxury Apartment in Atlanta", 450000, "Atlanta, GA", 2, 2, 1200, ["Pool", "Gym"]),
    (2, "Modern Apartment Downtown", 320000, "Atlanta, GA", 1, 1, 750, ["Gym"]),
    (3, "Sky Penthouse on the Strip", 2500000, "Las Vegas, NV", 3, 3, 3100, ["Pool", "Concierge"]),
    (4, "Family House with Garden", 650000, "Austin, TX", 3, 2, 2200, ["Garden", "Garage"]),
    (5, "Cozy Studio near Campus", 280000, "Boston, MA", 0, 1, 450, ["Laundry"]),
    (6, "Spacious Townhouse", 540000, "Atlanta, GA", 3, 2.5, 1900, ["Patio"]),
    (7, "Beachfront Villa", 3200000, "Miami, FL", 5, 4, 5200, ["Pool", "Ocean View"]),
    (8, "Mountain Cabin Retreat", 390000, "Denver, CO", 2, 1, 1100, ["Fireplace"]),
    (9, "Historic Brownstone", 1800000, "New York, NY", 4, 3, 3000, ["Roof Deck"]),
    (10, "Downtown Loft", 720000, "Chicago, IL", 2, 2, 1400, ["Exposed Brick"]),
    (11, "Garden Condo", 610000, "Atlanta, GA", 3, 2, 1500, ["Garden", "Gym"]),
    (12, "Lakeside Mansion", 5400000, "Seattle, WA", 7, 6, 9000, ["Pool", "Dock"]),
]


def build_listing(row) -> Listing:
    listing_id, title, price, location, bedrooms, bathrooms, size, amenities = row
    data = {
        "id": listing_id,
        "title": title,
        "price": price,
        "location": location,
        "bedrooms": bedrooms,
        "bathrooms": bathrooms,
        "size_sqft": size,
        "amenities": amenities,
        "property_type": extract_property_type(title),
    }
    description = generate_description(data)
    return Listing(**data, description=description, embedding=vectorize(description))


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def listings() -> list[Listing]:
    return [build_listing(row) for row in RAW_PROPERTIES]


@pytest.fixture
def store(listings) -> InMemoryListingStore:
    return InMemoryListingStore(listings)


@pytest.fixture
def make_engine(store):
    """Builds a SearchEngine over the sample pool with scripted providers."""

    def factory(
        intents: Union[dict, None] = None,
        extractor_llm: Union[BaseLLMProvider, None] = None,
        summary: Union[str, Exception] = "Here is what I found.",
        embedder: Union[BaseEmbeddingProvider, None] = None,
        **kwargs,
    ) -> SearchEngine:
        engine = SearchEngine(
            store=store,
            embedder=embedder or HashingEmbedder(),
            extractor=ConstraintExtractor(provider=extractor_llm or extraction_llm(intents or {})),
            composer=ResponseComposer(provider=ScriptedLLM(summary)),
            **kwargs,
        )
        return engine

    return factory
