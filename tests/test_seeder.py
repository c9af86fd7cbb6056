"""Tests for offline ingestion: merge, category inference, description and seeding."""

import json

import pytest

from nido.database import InMemoryListingStore
from nido.ingestion import (
    CatalogSeeder,
    extract_property_type,
    generate_description,
    merge_property_data,
)
from nido.models import PropertyType

from conftest import HashingEmbedder

BASICS = [
    {"id": 1, "title": "3 BHK in Midtown", "price": 450000, "location": "Atlanta, GA"},
    {"id": 2, "title": "Sky Penthouse", "price": 2500000, "location": "Las Vegas, NV"},
    {"id": 3, "title": "Quiet Retreat", "price": 300000, "location": "Denver, CO"},
]
CHARACTERISTICS = [
    {"id": 1, "bedrooms": 3, "bathrooms": 2, "size_sqft": 1400, "amenities": ["Gym"]},
    {"id": 2, "bedrooms": 3, "bathrooms": 3, "size_sqft": 3100, "amenities": ["Pool", "Spa"]},
]
IMAGES = [
    {"id": 1, "image_url": "https://img.example/1.jpg"},
    {"id": 2, "image_url": "https://img.example/2.jpg"},
    {"id": 3, "image_url": "https://img.example/3.jpg"},
]


class TestExtractPropertyType:
    @pytest.mark.parametrize(
        "title, expected",
        [
            ("Luxury Apartment Downtown", PropertyType.APARTMENT),
            ("2 BHK near Metro", PropertyType.APARTMENT),
            ("Sky Penthouse on the Strip", PropertyType.PENTHOUSE),
            ("Spacious Townhouse", PropertyType.TOWNHOUSE),
            ("Family House with Garden", PropertyType.HOUSE),
            ("Lakeside MANSION", PropertyType.MANSION),
            ("Quiet Retreat", PropertyType.OTHER),
        ],
    )
    def test_patterns(self, title, expected):
        assert extract_property_type(title) == expected

    def test_first_pattern_wins(self):
        assert extract_property_type("Condo Villa") == PropertyType.CONDO


class TestMerge:
    def test_merges_by_id(self):
        merged = merge_property_data(BASICS, CHARACTERISTICS, IMAGES)
        assert [m["id"] for m in merged] == [1, 2, 3]
        assert merged[1]["amenities"] == ["Pool", "Spa"]
        assert merged[1]["image_url"] == "https://img.example/2.jpg"

    def test_missing_characteristics_default(self):
        merged = merge_property_data(BASICS, CHARACTERISTICS, IMAGES)
        assert merged[2]["bedrooms"] == 0
        assert merged[2]["amenities"] == []


class TestGenerateDescription:
    def test_contains_all_fields(self):
        data = merge_property_data(BASICS, CHARACTERISTICS, IMAGES)[0]
        data["property_type"] = PropertyType.APARTMENT
        text = generate_description(data)
        assert text.startswith("3 BHK in Midtown - Atlanta, GA")
        assert "Price: $450,000" in text
        assert "3 bedrooms, 2 bathrooms" in text
        assert "Size: 1400 sqft" in text
        assert "Property Type: Apartment" in text
        assert "Amenities: Gym" in text


class TestCatalogSeeder:
    @pytest.mark.asyncio
    async def test_seed_from_directory(self, tmp_path):
        (tmp_path / "property_basics.json").write_text(json.dumps(BASICS))
        (tmp_path / "property_characteristics.json").write_text(json.dumps(CHARACTERISTICS))
        (tmp_path / "property_images.json").write_text(json.dumps(IMAGES))

        store = InMemoryListingStore()
        embedder = HashingEmbedder()
        stats = await CatalogSeeder(store, embedder).seed_from_directory(tmp_path)

        assert stats == {"total": 3, "inserted": 3, "errors": 0}
        listings = store.find_all()
        assert [l.property_type for l in listings] == ["Apartment", "Penthouse", "Other"]
        assert all(l.embedding and len(l.embedding) == 64 for l in listings)
        assert embedder.calls[0] == listings[0].description

    @pytest.mark.asyncio
    async def test_seed_replaces_existing_content(self, listings):
        store = InMemoryListingStore(listings)
        properties = merge_property_data(BASICS, CHARACTERISTICS, IMAGES)
        await CatalogSeeder(store, HashingEmbedder()).seed(properties)
        assert store.count() == 3

    @pytest.mark.asyncio
    async def test_invalid_record_is_counted_not_fatal(self):
        properties = merge_property_data(BASICS, CHARACTERISTICS, IMAGES)
        properties[0]["price"] = "not a price"
        store = InMemoryListingStore()
        stats = await CatalogSeeder(store, HashingEmbedder()).seed(properties)
        assert stats == {"total": 3, "inserted": 2, "errors": 1}
        assert [l.id for l in store.find_all()] == [2, 3]
