"""Tests for the non-semantic catalog operations and the in-memory store."""

import json

import pytest

from nido.database import InMemoryListingStore
from nido.search import PropertyCatalog


class TestPropertyCatalog:
    def test_pagination(self, store):
        catalog = PropertyCatalog(store)
        page = catalog.get_all(page=2, limit=5)
        assert [p["id"] for p in page["properties"]] == [6, 7, 8, 9, 10]
        assert page["pagination"] == {"page": 2, "limit": 5, "total": 12, "pages": 3}

    def test_last_partial_page(self, store):
        page = PropertyCatalog(store).get_all(page=3, limit=5)
        assert [p["id"] for p in page["properties"]] == [11, 12]

    def test_invalid_page(self, store):
        with pytest.raises(ValueError):
            PropertyCatalog(store).get_all(page=0)

    def test_get_by_id(self, store):
        catalog = PropertyCatalog(store)
        listing = catalog.get_by_id(3)
        assert listing["title"] == "Sky Penthouse on the Strip"
        assert "embedding" not in listing
        assert catalog.get_by_id(999) is None

    def test_compare_keeps_requested_order(self, store):
        result = PropertyCatalog(store).compare([9, 2, 999, 4])
        assert [p["id"] for p in result] == [9, 2, 4]

    def test_filter_metadata(self, store):
        metadata = PropertyCatalog(store).filter_metadata()
        assert metadata["locations"][0] == "Atlanta, GA"
        assert "Penthouse" in metadata["property_types"]
        assert metadata["bedrooms"] == [0, 1, 2, 3, 4, 5, 7]
        assert metadata["price_range"] == {"min": 280000, "max": 5400000}

    def test_filter_metadata_empty(self):
        metadata = PropertyCatalog(InMemoryListingStore()).filter_metadata()
        assert metadata["price_range"] == {"min": None, "max": None}
        assert metadata["locations"] == []


class TestInMemoryListingStore:
    def test_from_json(self, tmp_path, listings):
        path = tmp_path / "listings.json"
        path.write_text(json.dumps([l.model_dump() for l in reversed(listings)]))
        store = InMemoryListingStore.from_json(path)
        assert [l.id for l in store.find_all()] == list(range(1, 13))
        assert store.get_by_id(5).embedding == listings[4].embedding

    def test_replace_all(self, store, listings):
        assert store.replace_all(listings[:3]) == 3
        assert store.count() == 3
