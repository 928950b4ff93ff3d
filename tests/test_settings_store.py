"""Tests for the SQLite-backed settings store."""
import pytest

from localvoicemod.moderation.models import DEFAULT_MSG_MODERATE, ModerationSettings
from localvoicemod.services.settings_store import SettingsStore

USER = 123456789012345678


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "settings.sqlite3")


class TestSettingsStore:

    @pytest.mark.asyncio
    async def test_defaults_before_anything_is_stored(self, db_path):
        store = SettingsStore(db_path, ModerationSettings(target_volume=25))
        await store.init()
        assert store.current.target_volume == 25
        assert store.current.msg_moderate == DEFAULT_MSG_MODERATE
        assert store() is store.current

    @pytest.mark.asyncio
    async def test_updates_survive_a_restart(self, db_path):
        store = SettingsStore(db_path)
        await store.init()
        await store.update(target_volume=20, duration=0, skip_friends=False)

        reopened = SettingsStore(db_path)
        await reopened.init()
        assert reopened.current.target_volume == 20
        assert reopened.current.duration == 0
        assert reopened.current.skip_friends is False

    @pytest.mark.asyncio
    async def test_none_values_are_ignored(self, db_path):
        store = SettingsStore(db_path)
        await store.init()
        before = store.current
        assert await store.update(target_volume=None) is before

    @pytest.mark.asyncio
    async def test_values_are_clamped(self, db_path):
        store = SettingsStore(db_path)
        await store.init()
        settings = await store.update(target_volume=500, duration=-3)
        assert settings.target_volume == 200
        assert settings.duration == 0

    @pytest.mark.asyncio
    async def test_unknown_setting_is_rejected(self, db_path):
        store = SettingsStore(db_path)
        await store.init()
        with pytest.raises(KeyError):
            await store.update(volume_curve="linear")

    @pytest.mark.asyncio
    async def test_whitelist_add_is_deduplicated(self, db_path):
        store = SettingsStore(db_path)
        await store.init()

        assert await store.whitelist_add(USER)
        assert not await store.whitelist_add(USER)

        assert store.whitelist() == [USER]
        reopened = SettingsStore(db_path)
        await reopened.init()
        assert reopened.whitelist() == [USER]

    @pytest.mark.asyncio
    async def test_whitelist_remove(self, db_path):
        store = SettingsStore(db_path)
        await store.init()
        await store.whitelist_add(USER)

        assert await store.whitelist_remove(USER)
        assert not await store.whitelist_remove(USER)
        assert store.whitelist() == []

    @pytest.mark.asyncio
    async def test_friends(self, db_path):
        store = SettingsStore(db_path)
        await store.init()
        assert await store.friend_add(USER)
        assert store.friends() == [USER]
        assert await store.friend_remove(USER)
        assert store.friends() == []
