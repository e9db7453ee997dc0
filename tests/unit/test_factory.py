"""Tests for service wiring in the factory."""

from mundamanager.cache import TagCache, get_cache
from mundamanager.factory import create_all_services, create_gang_service


def test_empty_cache_is_kept(session):
    mine = TagCache()
    assert len(mine) == 0

    services = create_all_services(session, mine)

    assert all(service.cache is mine for service in services.values())
    assert create_gang_service(session, mine).cache is mine


def test_process_cache_used_by_default(session):
    assert create_gang_service(session).cache is get_cache()
