from __future__ import annotations

import logging
from typing import Optional

import discord
from discord.ext import commands

from .config import Settings
from .database import initialize_database
from .error_handlers import setup_error_handlers
from .interfaces import validate_volume_service
from .moderation.engine import ModerationEngine, stop_reason
from .moderation.exemptions import ExemptionPolicy
from .moderation.models import ModerationSettings
from .moderation.tracker import MembershipTracker
from .moderation.volume import build_scaler
from .services.notifier import ChannelNotifier
from .services.presence import DiscordPresence
from .services.scheduler import LoopScheduler
from .services.settings_store import SettingsStore
from .services.stats import RuntimeStats
from .services.task_queue import QueuePolicy, TaskQueue
from .services.volume_store import LocalVolumeStore

log = logging.getLogger("localvoicemod.bot")


class VoiceModBot(commands.Bot):
    def __init__(self, settings: Settings) -> None:
        intents = discord.Intents.default()
        intents.members = True
        intents.voice_states = True

        log.info("INTENTS: guilds=%s members=%s voice_states=%s", intents.guilds, intents.members, intents.voice_states)

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            allowed_mentions=discord.AllowedMentions.none(),
            help_command=None,
        )

        self.settings = settings
        self.operator_id = settings.operator_id
        self.stats = RuntimeStats()

        self.task_queue = TaskQueue(
            QueuePolicy(
                max_batch=settings.queue_max_batch,
                every_ms=settings.queue_every_ms,
                max_queue_size=settings.queue_max_size,
            ),
            stats=self.stats,
        )

        self.scaler = build_scaler(settings.volume_curve)
        self.settings_store = SettingsStore(
            settings.sqlite_path,
            ModerationSettings(
                target_volume=settings.default_target_volume,
                duration=settings.default_duration,
                ephemeral_messages_enabled=settings.default_messages_enabled,
            ),
        )
        self.volume_store = LocalVolumeStore(settings.sqlite_path, self.task_queue)
        self.presence = DiscordPresence(self, settings.operator_id, self.settings_store)

        self.engine = ModerationEngine(
            settings=self.settings_store,
            policy=ExemptionPolicy(identity=self.presence, relationships=self.presence, scaler=self.scaler),
            scaler=self.scaler,
            volumes=validate_volume_service(self.volume_store),
            notifier=ChannelNotifier(
                settings=self.settings_store,
                resolve_channel=self._notify_channel,
                queue=self.task_queue,
                stats=self.stats,
            ),
            scheduler=LoopScheduler(),
            stats=self.stats,
        )
        self.volume_store.subscribe(self.engine.on_volume_changed)

        self.tracker = MembershipTracker(
            engine=self.engine,
            identity=self.presence,
            presence=self.presence,
            settings=self.settings_store,
        )

    def _notify_channel(self) -> Optional[discord.abc.Messageable]:
        channel_id = self.settings.notify_channel_id
        if not channel_id:
            return None
        channel = self.get_channel(channel_id)
        if isinstance(channel, discord.abc.Messageable):
            return channel
        return None

    async def setup_hook(self) -> None:
        await initialize_database(self.settings.sqlite_path, [self.settings_store, self.volume_store])

        self.task_queue.start()
        await setup_error_handlers(self)

        loaded: list[str] = []
        failed: list[str] = []

        async def _load_cog(import_path: str, class_name: str) -> None:
            try:
                log.info("Loading cog: %s.%s", import_path, class_name)
                mod = __import__(import_path, fromlist=[class_name])
                cls = getattr(mod, class_name)
                await self.add_cog(cls(self))
                loaded.append(f"{import_path}.{class_name}")
            except Exception as e:
                log.exception("Failed to load cog: %s.%s", import_path, class_name)
                failed.append(f"{import_path}.{class_name} ({type(e).__name__})")

        await _load_cog("localvoicemod.cogs.voice_moderation", "VoiceModerationCog")
        await _load_cog("localvoicemod.cogs.volume_commands", "VolumeCommandsCog")

        log.info("Startup cog load summary: loaded=%d failed=%d", len(loaded), len(failed))
        for name in failed:
            log.warning("Startup cog failed: %s", name)

        if self.settings.sync_guild_id:
            guild = discord.Object(id=self.settings.sync_guild_id)
            self.tree.copy_global_to(guild=guild)
            await self.tree.sync(guild=guild)
            log.info("Commands synced to guild %d", self.settings.sync_guild_id)
        else:
            await self.tree.sync()
            log.info("Commands synced globally")

    def shutdown_moderation(self) -> int:
        """Release every override using the configured stop policy."""
        return self.tracker.stop(stop_reason(self.settings_store.current))

    async def close(self) -> None:
        try:
            released = self.shutdown_moderation()
            if released:
                log.info("Released %d overrides on shutdown", released)
            await self.task_queue.stop()
        finally:
            await super().close()
