"""
Queue display bot
discord.py 2.x with slash commands
"""

import asyncio
import logging

import discord
from discord.ext import commands

from queuebot.config import Settings, get_settings
from queuebot.core import setup_logging
from queuebot.display import (
    DisplaySynchronizer,
    DisplayTargetRegistry,
    DurationFormatter,
    PlatformClient,
    QueueDocumentBuilder,
    QueueValidator,
)
from shared.database import DatabaseManager, PoolConfig
from shared.migrations import MigrationRunner
from shared.repositories import (
    DisplayTargetRepository,
    GuildSettingsRepository,
    QueueRepository,
    RankSettingsRepository,
    ScheduleRepository,
)

logger = logging.getLogger("queuebot")


class QueueBot(commands.Bot):
    """Discord client that owns the database pool and the display engine"""

    queues: QueueRepository
    synchronizer: DisplaySynchronizer
    registry: DisplayTargetRegistry

    def __init__(self, settings: Settings):
        intents = discord.Intents.default()
        intents.members = True  # masked names and departed-member validation

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None,
        )

        self.settings = settings
        self.db = DatabaseManager(
            settings.database_url,
            PoolConfig.for_service("bot", ssl=settings.database_ssl),
        )
        self.platform = PlatformClient(self)
        self.initial_extensions = ["queuebot.cogs.queue_display"]

    async def setup_hook(self):
        """Connect the database, wire the display engine, load cogs"""
        await self.db.connect()
        pool = self.db.pool
        if self.settings.run_migrations:
            await MigrationRunner(pool).run_pending()

        self.queues = queues = QueueRepository(pool)
        ranks = RankSettingsRepository(pool)
        self.registry = DisplayTargetRegistry(DisplayTargetRepository(pool), self.platform)
        self.synchronizer = DisplaySynchronizer(
            self.platform,
            queues,
            self.registry,
            GuildSettingsRepository(pool),
            ranks,
            ScheduleRepository(pool),
            builder=QueueDocumentBuilder(DurationFormatter()),
            validator=QueueValidator(self.platform, queues, self.registry, ranks),
            validation_delay=self.settings.validation_delay,
        )

        for extension in self.initial_extensions:
            await self.load_extension(extension)
        logger.info(f"[green]Loaded extensions:[/green] {', '.join(self.initial_extensions)}")

        if self.settings.discord_guild_id:
            guild = discord.Object(id=self.settings.discord_guild_id)
            self.tree.copy_global_to(guild=guild)
            await self.tree.sync(guild=guild)
            logger.info(f"[magenta]Synced slash commands to guild {guild.id}[/magenta]")
        else:
            await self.tree.sync()
            logger.info("[magenta]Synced slash commands globally[/magenta]")

    async def on_ready(self):
        logger.info(
            f"[bold green]Bot ready:[/bold green] {self.user} [dim](ID: {self.user.id})[/dim] | "
            f"{len(self.guilds)} guild(s) | discord.py {discord.__version__}"
        )

    async def close(self):
        await super().close()
        await self.db.disconnect()


async def main():
    """Bot entry point"""
    settings = get_settings()
    setup_logging(settings.log_level)

    if not settings.discord_bot_token:
        logger.error("[bold red]DISCORD_BOT_TOKEN is not set[/bold red]")
        return
    if not settings.database_url:
        logger.error("[bold red]DATABASE_URL is not set[/bold red]")
        return

    async with QueueBot(settings) as bot:
        await bot.start(settings.discord_bot_token)


def run() -> None:
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("[yellow]Bot stopped[/yellow]")


if __name__ == "__main__":
    run()
