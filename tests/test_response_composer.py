"""Tests for the prompt branches of the response composer."""

import pytest

from nido.analysis import ResponseComposer, catalog_statistics
from nido.models import QueryType

from conftest import ScriptedLLM


class TestCatalogStatistics:
    def test_aggregates(self, listings):
        stats = catalog_statistics(listings)
        assert stats["count"] == 12
        assert stats["min_price"] == 280000
        assert stats["max_price"] == 5400000
        assert stats["avg_price"] == pytest.approx(sum(l.price for l in listings) / 12)
        assert "Atlanta, GA" in stats["locations"]
        assert len(stats["locations"]) == len(set(stats["locations"]))

    def test_empty_catalog(self):
        stats = catalog_statistics([])
        assert stats["count"] == 0
        assert stats["min_price"] is None
        assert stats["avg_price"] is None


class TestBuildPrompt:
    def test_results_branch_includes_context_and_total(self, listings):
        composer = ResponseComposer(provider=ScriptedLLM())
        prompt = composer.build_prompt("apartments in Atlanta", listings[:2], total_matches=8)
        assert "Luxury Apartment in Atlanta" in prompt
        assert "$450,000" in prompt
        assert "Amenities: Pool, Gym" in prompt
        assert "8 matching properties" in prompt

    def test_zero_results_branch_has_no_listing_context(self, listings):
        composer = ResponseComposer(provider=ScriptedLLM())
        prompt = composer.build_prompt("castle in Atlanta", [], total_matches=0)
        assert "broaden" in prompt
        assert "Property 1" not in prompt

    def test_informational_branch_uses_statistics(self, listings):
        composer = ResponseComposer(provider=ScriptedLLM())
        prompt = composer.build_prompt(
            "How many properties do you have?",
            [],
            total_matches=0,
            query_type=QueryType.INFORMATIONAL,
            catalog=listings,
        )
        assert "Total properties: 12" in prompt
        assert "Do NOT list individual properties" in prompt
        assert "Luxury Apartment in Atlanta" not in prompt


class TestCompose:
    @pytest.mark.asyncio
    async def test_returns_generated_text(self, listings):
        llm = ScriptedLLM("I found 2 great apartments.")
        text = await ResponseComposer(provider=llm).compose("apartments", listings[:2], 2)
        assert text == "I found 2 great apartments."
        assert len(llm.prompts) == 1

    @pytest.mark.asyncio
    async def test_generation_failure_propagates(self, listings):
        composer = ResponseComposer(provider=ScriptedLLM(RuntimeError("quota exceeded")))
        with pytest.raises(RuntimeError, match="quota exceeded"):
            await composer.compose("apartments", listings[:2], 2)
