"""Unit tests for AuthorService outcome mapping and patch semantics."""

from unittest.mock import Mock

import pytest

from authors_api.adapters.rate_limit.base import QuotaClass
from authors_api.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from authors_api.core.errors import NotFoundAppError, NotModifiedAppError, ValidationAppError
from authors_api.services.author_service import AuthorService
from authors_api.services.author_store import AuthorStore


@pytest.fixture
def service(store: AuthorStore, limiter: InMemoryFixedWindowRateLimiter) -> AuthorService:
    return AuthorService(store, limiter)


class TestReads:
    def test_list_returns_all_authors(self, service: AuthorService) -> None:
        assert len(service.list_authors()) == 2

    def test_get_missing_raises_not_found(self, service: AuthorService) -> None:
        with pytest.raises(NotFoundAppError) as exc_info:
            service.get_author(42)

        assert exc_info.value.code == "author_not_found"
        assert exc_info.value.details == {"author_id": 42}


class TestWrites:
    def test_create_validation_failure_propagates(self, service: AuthorService) -> None:
        with pytest.raises(ValidationAppError):
            service.create_author("Name", "bad")

    @pytest.mark.parametrize("method", ["replace_author", "delete_author"])
    def test_missing_id_raises_not_found(self, service: AuthorService, method: str) -> None:
        args = (42, "Name", "name@example.com") if method == "replace_author" else (42,)

        with pytest.raises(NotFoundAppError):
            getattr(service, method)(*args)

    def test_delete_returns_deleted_author(self, service: AuthorService) -> None:
        deleted = service.delete_author(1)

        assert deleted.id == 1
        with pytest.raises(NotFoundAppError):
            service.get_author(1)


class TestPatch:
    def test_patch_without_fields_is_not_modified(self, service: AuthorService, store: AuthorStore) -> None:
        before = store.get(1)

        with pytest.raises(NotModifiedAppError) as exc_info:
            service.patch_author(1)

        assert exc_info.value.code == "not_modified"
        assert store.get(1) == before

    def test_patch_name_only_keeps_email(self, service: AuthorService) -> None:
        patched = service.patch_author(1, name="Jacques Wright")

        assert patched.name == "Jacques Wright"
        assert patched.email == "jacwright@gmail.com"
        assert service.get_author(1).name == "Jacques Wright"

    def test_patch_email_only_keeps_name(self, service: AuthorService) -> None:
        patched = service.patch_author(2, email="arul@example.com")

        assert patched.name == "Arul Kumaran"
        assert patched.email == "arul@example.com"

    def test_patch_missing_id_is_not_found_even_without_fields(self, service: AuthorService) -> None:
        with pytest.raises(NotFoundAppError):
            service.patch_author(42)

    def test_patch_record_deleted_between_read_and_write(self, limiter: InMemoryFixedWindowRateLimiter) -> None:
        store = Mock(spec=AuthorStore)
        store.get.return_value = AuthorStore().get(1)
        store.update.return_value = None
        service = AuthorService(store, limiter)

        with pytest.raises(NotFoundAppError):
            service.patch_author(1, name="Gone")


def test_reset_clears_client_limits_and_data(service: AuthorService, limiter: InMemoryFixedWindowRateLimiter) -> None:
    quota = QuotaClass(name="default", unit="hour", usage_per_unit=1)
    limiter.consume("ip:testclient", quota)
    assert limiter.consume("ip:testclient", quota).allowed is False
    created = service.create_author("Temp", "temp@example.com")

    assert service.reset("ip:testclient") is True

    assert limiter.consume("ip:testclient", quota).allowed is True
    with pytest.raises(NotFoundAppError):
        service.get_author(created.id)
