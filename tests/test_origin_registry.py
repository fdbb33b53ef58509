"""
Tests for origin lookups and legacy id translation.
"""

import asyncio

from redirector_app.cache.strategies import NullCache
from redirector_app.item_types import ItemType
from redirector_app.models import ImportOrigin
from redirector_app.schemas.origin import Origin
from redirector_app.services.identifier_translator import IdentifierTranslator
from redirector_app.services.origin_registry import OriginRegistry
from tests.conftest import IMPORTED, NOT_MIGRATED_SITE_ID, ORIGIN_ID, SITE_ID


class TestOriginRegistry:
    """Test the cache-aside origin lookup"""

    def test_migrated_site(self, legacy_site, cache):
        registry = OriginRegistry(legacy_site, cache)

        origin = asyncio.run(registry.get_origin(SITE_ID))

        assert origin == Origin(origin_id=ORIGIN_ID, site_id=SITE_ID, product="vbulletin")

    def test_origin_is_cached(self, legacy_site, cache):
        registry = OriginRegistry(legacy_site, cache)

        asyncio.run(registry.get_origin(SITE_ID))

        cached = asyncio.run(cache.get(OriginRegistry.cache_key(SITE_ID)))
        assert Origin.model_validate_json(cached).origin_id == ORIGIN_ID

    def test_cache_hit_skips_database(self, db_session, cache):
        """Site 99 has no row: only the cache can answer"""
        origin = Origin(origin_id=3, site_id=99, product="vbulletin")
        asyncio.run(cache.set(OriginRegistry.cache_key(99), origin.model_dump_json(), ttl=60))

        registry = OriginRegistry(db_session, cache)

        assert asyncio.run(registry.get_origin(99)) == origin

    def test_unreadable_cache_entry_falls_back_to_database(self, legacy_site, cache):
        asyncio.run(cache.set(OriginRegistry.cache_key(SITE_ID), "not json", ttl=60))

        registry = OriginRegistry(legacy_site, cache)

        assert asyncio.run(registry.get_origin(SITE_ID)).origin_id == ORIGIN_ID

    def test_site_not_migrated(self, legacy_site, cache):
        registry = OriginRegistry(legacy_site, cache)

        assert asyncio.run(registry.get_origin(NOT_MIGRATED_SITE_ID)) is None
        assert asyncio.run(cache.get(OriginRegistry.cache_key(NOT_MIGRATED_SITE_ID))) is None

    def test_import_is_seen_without_waiting_for_ttl(self, legacy_site, cache):
        """No origin is never cached, so a fresh import shows up at once"""
        registry = OriginRegistry(legacy_site, cache)
        assert asyncio.run(registry.get_origin(NOT_MIGRATED_SITE_ID)) is None

        legacy_site.add(ImportOrigin(origin_id=20, site_id=NOT_MIGRATED_SITE_ID, product="vbulletin"))
        legacy_site.commit()

        assert asyncio.run(registry.get_origin(NOT_MIGRATED_SITE_ID)).origin_id == 20

    def test_works_without_cache(self, legacy_site):
        registry = OriginRegistry(legacy_site, NullCache())

        assert asyncio.run(registry.get_origin(SITE_ID)).product == "vbulletin"


class TestIdentifierTranslator:
    """Test legacy id translation"""

    def test_every_imported_item(self, legacy_site):
        translator = IdentifierTranslator(legacy_site)

        for item_type, old_id, item_id in IMPORTED:
            assert translator.get_new_id(ORIGIN_ID, item_type.id, int(old_id)) == item_id

    def test_unknown_id(self, legacy_site):
        translator = IdentifierTranslator(legacy_site)

        assert translator.get_new_id(ORIGIN_ID, ItemType.MICROCOSM.id, 38) == 0

    def test_wrong_item_type(self, legacy_site):
        translator = IdentifierTranslator(legacy_site)

        assert translator.get_new_id(ORIGIN_ID, ItemType.CONVERSATION.id, 37) == 0

    def test_ids_are_scoped_to_their_import(self, legacy_site):
        translator = IdentifierTranslator(legacy_site)

        assert translator.get_new_id(ORIGIN_ID, ItemType.MICROCOSM.id, 37) == 900
        assert translator.get_new_id(8, ItemType.MICROCOSM.id, 37) == 1900
        assert translator.get_new_id(99, ItemType.MICROCOSM.id, 37) == 0
