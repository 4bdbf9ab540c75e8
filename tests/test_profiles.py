"""Tests for the profile registry."""

from datetime import date

import pytest

from clickykids import InvalidPinError, ProfileNotFoundError, ProfileRegistry
from clickykids.profiles import (
    calculate_age,
    get_difficulty_settings,
    suggest_difficulty,
)


class TestHelpers:
    """Age and difficulty helpers."""

    @pytest.mark.parametrize(
        ("dob", "expected"),
        [
            (date(2019, 1, 1), 5),
            (date(2019, 1, 2), 4),
            (date(2018, 12, 31), 5),
            (None, 0),
            (date(2030, 1, 1), 0),
        ],
    )
    def test_calculate_age(self, dob, expected):
        assert calculate_age(dob, date(2024, 1, 1)) == expected

    @pytest.mark.parametrize(
        ("age", "expected"),
        [(3, "beginner"), (5, "beginner"), (6, "intermediate"), (7, "intermediate"), (8, "advanced")],
    )
    def test_suggest_difficulty(self, age, expected):
        assert suggest_difficulty(age) == expected

    def test_unknown_difficulty_falls_back_to_beginner(self):
        assert get_difficulty_settings("expert") == get_difficulty_settings("beginner")
        assert get_difficulty_settings("advanced")["time_limit"] is True


class TestRegistry:
    """Profile CRUD and active profile switching."""

    async def test_add_profile_suggests_difficulty(self, registry):
        profile = await registry.add_profile("Mia", date(2017, 6, 1))

        assert profile.difficulty == "intermediate"
        assert registry.profiles == [profile]

    async def test_explicit_difficulty_wins(self, registry):
        profile = await registry.add_profile("Leo", date(2021, 1, 1), difficulty="advanced")

        assert profile.difficulty == "advanced"

    async def test_profiles_persist(self, registry, store, clock):
        profile = await registry.add_profile("Mia")
        await registry.select_profile(profile.id)

        reloaded = ProfileRegistry(store, clock=clock)
        await reloaded.load()

        assert reloaded.active_profile == profile

    async def test_update_profile(self, registry):
        profile = await registry.add_profile("Mia")

        updated = await registry.update_profile(profile.id, name="Mia R", id="hijack")

        assert updated.id == profile.id
        assert registry.get_profile(profile.id).name == "Mia R"

    async def test_unknown_profile_raises(self, registry):
        with pytest.raises(ProfileNotFoundError):
            await registry.select_profile("missing")
        with pytest.raises(KeyError):
            await registry.update_profile("missing", name="x")

    async def test_select_awaits_listeners(self, registry):
        seen = []

        async def listener(profile_id):
            seen.append(profile_id)

        profile = await registry.add_profile("Mia")
        registry.subscribe(listener)
        await registry.select_profile(profile.id)

        assert seen == [profile.id]

    async def test_reselecting_active_profile_does_not_notify(self, registry):
        seen = []

        async def listener(profile_id):
            seen.append(profile_id)

        profile = await registry.add_profile("Mia")
        await registry.select_profile(profile.id)
        registry.subscribe(listener)

        await registry.select_profile(profile.id)

        assert seen == []

    async def test_unsubscribe_stops_notifications(self, registry):
        seen = []

        async def listener(profile_id):
            seen.append(profile_id)

        profile = await registry.add_profile("Mia")
        with registry.subscribe(listener):
            await registry.select_profile(profile.id)
        await registry.select_profile(None)

        assert seen == [profile.id]

    async def test_delete_active_profile_clears_selection(self, registry):
        seen = []

        async def listener(profile_id):
            seen.append(profile_id)

        profile = await registry.add_profile("Mia")
        await registry.select_profile(profile.id)
        registry.subscribe(listener)

        await registry.delete_profile(profile.id)

        assert registry.profiles == []
        assert registry.active_profile_id is None
        assert seen == [None]

    async def test_load_drops_dangling_active_id(self, backend, store, clock):
        await backend.set(
            "test:profiles:index", '{"profiles": [], "active_profile_id": "gone"}'
        )
        registry = ProfileRegistry(store, clock=clock)

        await registry.load()

        assert registry.active_profile_id is None

    async def test_active_age_and_settings(self, registry):
        assert registry.active_age() == 0
        assert registry.active_difficulty_settings()["repetitions"] == 3

        profile = await registry.add_profile("Ava", date(2015, 1, 1))
        await registry.select_profile(profile.id)

        assert registry.active_age() == 9
        assert registry.active_difficulty_settings()["repetitions"] == 7


class TestParentPin:
    """Parent PIN gate."""

    def test_default_pin(self, registry):
        assert registry.verify_parent_pin("1234")
        assert not registry.verify_parent_pin("0000")

    async def test_change_pin(self, registry):
        await registry.set_parent_pin("4321")

        assert registry.verify_parent_pin("4321")
        assert not registry.verify_parent_pin("1234")

    @pytest.mark.parametrize("pin", ["123", "12345", "abcd", ""])
    async def test_rejects_bad_pin(self, registry, pin):
        with pytest.raises(InvalidPinError):
            await registry.set_parent_pin(pin)
