from __future__ import annotations

import pytest
from memory_repos import InMemoryPreferenceRepository

from userhub.application.services.preferences import PreferenceService
from userhub.domain.exceptions import InvariantViolation
from userhub.domain.preferences.entities import PREFERENCE_VALUE_MAX
from userhub.domain.preferences.exceptions import PreferenceNotFoundError


@pytest.fixture()
def service() -> PreferenceService:
    return PreferenceService(preferences=InMemoryPreferenceRepository())


def test_set_then_get(service: PreferenceService) -> None:
    stored = service.set("u-1", "theme", "dark")
    assert (stored.key, stored.value) == ("theme", "dark")
    assert service.get("u-1", "theme").value == "dark"


def test_set_overwrites(service: PreferenceService) -> None:
    service.set("u-1", "theme", "dark")
    service.set("u-1", "theme", "light")
    assert service.list("u-1") == {"theme": "light"}


def test_preferences_are_per_user(service: PreferenceService) -> None:
    service.set("u-1", "theme", "dark")
    service.set("u-2", "lang", "en")
    assert service.list("u-1") == {"theme": "dark"}
    with pytest.raises(PreferenceNotFoundError):
        service.get("u-2", "theme")


def test_delete_twice(service: PreferenceService) -> None:
    service.set("u-1", "theme", "dark")
    service.delete("u-1", "theme")
    with pytest.raises(PreferenceNotFoundError) as exc_info:
        service.delete("u-1", "theme")
    assert exc_info.value.status == 404


@pytest.mark.parametrize("key", ["", "has space", "x" * 129, "semi;colon"])
def test_invalid_keys_are_rejected(service: PreferenceService, key: str) -> None:
    with pytest.raises(InvariantViolation):
        service.set("u-1", key, "v")


def test_value_bounds(service: PreferenceService) -> None:
    service.set("u-1", "big", "x" * PREFERENCE_VALUE_MAX)
    with pytest.raises(InvariantViolation):
        service.set("u-1", "big", "x" * (PREFERENCE_VALUE_MAX + 1))
    with pytest.raises(InvariantViolation):
        service.set("u-1", "num", 42)
