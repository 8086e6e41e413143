"""
Unit tests for DomainService and host name normalisation

Tests:
- extract_domain / extract_root_domain
- CRUD rules (duplicates, missing configs)
- Lookup with root domain fallback and caching
"""

import pytest
from unittest.mock import MagicMock

from domain_config.core.exceptions import ConflictError, NotFoundError
from domain_config.models import Config
from domain_config.services.cache_service import CacheService
from domain_config.services.domain_service import (
    DomainService,
    extract_domain,
    extract_root_domain
)


@pytest.fixture
def config(db_session):
    config = Config(title="Example", author="Jane", links={"blog": "https://blog.example.com"})
    db_session.add(config)
    db_session.commit()
    db_session.refresh(config)
    return config


@pytest.fixture
def cache():
    mock = MagicMock()
    mock.get.return_value = None
    return mock


@pytest.fixture
def service(db_session, cache):
    return DomainService(db_session, cache)


@pytest.mark.unit
class TestExtractDomain:

    @pytest.mark.parametrize("value,expected", [
        ("example.com", "example.com"),
        ("Example.COM", "example.com"),
        ("  example.com  ", "example.com"),
        ("https://www.example.com", "www.example.com"),
        ("http://www.example.com:8080/path?q=1#frag", "www.example.com"),
        ("www.example.com/path", "www.example.com"),
        ("example.com?x=1", "example.com"),
        ("localhost:3000", "localhost"),
    ])
    def test_extract_domain(self, value, expected):
        assert extract_domain(value) == expected

    @pytest.mark.parametrize("value,expected", [
        ("example.com", "example.com"),
        ("www.example.com", "example.com"),
        ("a.b.example.com", "example.com"),
        ("localhost", "localhost"),
    ])
    def test_extract_root_domain(self, value, expected):
        assert extract_root_domain(value) == expected


@pytest.mark.unit
class TestDomainServiceCrud:

    def test_create(self, service, config, cache):
        domain = service.create({"domain": "example.com", "config_id": config.id, "homepage": None})

        assert domain.id is not None
        assert domain.config.title == "Example"
        cache.invalidate_all.assert_called_once()

    def test_create_duplicate(self, service, config):
        service.create({"domain": "example.com", "config_id": config.id})

        with pytest.raises(ConflictError) as exc_info:
            service.create({"domain": "example.com", "config_id": config.id})

        assert exc_info.value.code == "DOMAIN_ALREADY_EXISTS"

    def test_create_missing_config(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            service.create({"domain": "example.com", "config_id": 9999})

        assert exc_info.value.code == "CONFIG_NOT_FOUND"

    def test_list(self, service, config):
        for name in ("a.com", "b.com", "c.com"):
            service.create({"domain": name, "config_id": config.id})

        domains, total = service.list(page=1, page_size=2)

        assert total == 3
        assert [d.domain for d in domains] == ["c.com", "b.com"]

    def test_update(self, service, config, db_session):
        other = Config(title="Other")
        db_session.add(other)
        db_session.commit()
        domain = service.create({"domain": "example.com", "config_id": config.id, "homepage": "https://example.com"})

        updated = service.update(domain.id, {"config_id": other.id, "homepage": None})

        assert updated.config_id == other.id
        assert updated.config.title == "Other"
        assert updated.homepage is None
        assert updated.domain == "example.com"

    def test_update_rename_conflict(self, service, config):
        service.create({"domain": "taken.com", "config_id": config.id})
        domain = service.create({"domain": "example.com", "config_id": config.id})

        with pytest.raises(ConflictError):
            service.update(domain.id, {"domain": "taken.com"})

    def test_update_missing_config(self, service, config):
        domain = service.create({"domain": "example.com", "config_id": config.id})

        with pytest.raises(NotFoundError) as exc_info:
            service.update(domain.id, {"config_id": 9999})

        assert exc_info.value.code == "CONFIG_NOT_FOUND"

    def test_update_missing_domain(self, service):
        assert service.update(9999, {"homepage": None}) is None

    def test_delete(self, service, config):
        domain = service.create({"domain": "example.com", "config_id": config.id})

        assert service.delete(domain.id) is True
        assert service.get_by_id(domain.id) is None

    def test_delete_missing(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            service.delete(9999)

        assert exc_info.value.code == "DOMAIN_NOT_FOUND"


@pytest.mark.unit
class TestDomainLookup:

    def test_exact_match(self, service, config):
        service.create({"domain": "www.example.com", "config_id": config.id, "homepage": "https://www.example.com"})

        lookup = service.get_by_domain("https://WWW.example.com/some/page")

        assert lookup.domain == "www.example.com"
        assert lookup.homepage == "https://www.example.com"
        assert lookup.config.title == "Example"
        assert lookup.config.links == {"blog": "https://blog.example.com"}

    def test_falls_back_to_root_domain(self, service, config):
        service.create({"domain": "example.com", "config_id": config.id})

        lookup = service.get_by_domain("shop.example.com")

        assert lookup.domain == "example.com"

    def test_exact_match_preferred_over_root(self, service, config, db_session):
        other = Config(title="Shop")
        db_session.add(other)
        db_session.commit()
        service.create({"domain": "example.com", "config_id": config.id})
        service.create({"domain": "shop.example.com", "config_id": other.id})

        assert service.get_by_domain("shop.example.com").config.title == "Shop"

    def test_not_found(self, service):
        assert service.get_by_domain("unknown.org") is None

    def test_lookup_config_has_no_ids(self, service, config):
        service.create({"domain": "example.com", "config_id": config.id})

        dumped = service.get_by_domain("example.com").model_dump(by_alias=True)

        assert "id" not in dumped["config"]
        assert "createdAt" not in dumped["config"]

    def test_result_is_cached(self, service, config, cache):
        service.create({"domain": "example.com", "config_id": config.id})

        service.get_by_domain("http://example.com/")

        cache.get.assert_called_with("example.com")
        key, value = cache.set.call_args[0]
        assert key == "example.com"
        assert value["config"]["title"] == "Example"

    def test_cache_hit_skips_database(self, db_session, cache):
        cache.get.return_value = {
            "domain": "cached.com",
            "homepage": None,
            "config": {"title": "From cache"},
        }
        service = DomainService(db_session, cache)

        lookup = service.get_by_domain("cached.com")

        assert lookup.config.title == "From cache"
        cache.set.assert_not_called()

    def test_works_with_disabled_cache(self, db_session, config, settings_factory):
        service = DomainService(db_session, CacheService(settings_factory(REDIS_ENABLED=False)))
        service.create({"domain": "example.com", "config_id": config.id})

        assert service.get_by_domain("example.com").domain == "example.com"
