import logging

import discord
from discord import app_commands
from discord.ext import commands

from .config import Settings
from .handlers import TicketCommands
from .scheduler import ClosureScheduler
from .staff_log import StaffLog
from .views import TicketCloseView

log = logging.getLogger(__name__)


def register_commands(tree: app_commands.CommandTree, handlers: TicketCommands, guild: discord.abc.Snowflake):
    @tree.command(name="ticket", description="Create a new support ticket", guild=guild)
    async def ticket(interaction: discord.Interaction):
        await handlers.dispatch(interaction, "ticket")

    @tree.command(name="discount", description="Apply a discount code to your ticket", guild=guild)
    @app_commands.describe(code="The discount coupon code")
    async def discount(interaction: discord.Interaction, code: str):
        await handlers.dispatch(interaction, "discount", code=code)

    @tree.command(name="close", description="Close your ticket channel", guild=guild)
    async def close(interaction: discord.Interaction):
        await handlers.dispatch(interaction, "close")

    return [ticket, discount, close]


class TicketBot(commands.Bot):
    def __init__(self, settings: Settings):
        intents = discord.Intents.default()
        intents.guilds = True
        super().__init__(command_prefix=commands.when_mentioned, intents=intents)
        self.settings = settings
        self.scheduler = ClosureScheduler()
        self.handlers = TicketCommands(
            settings,
            scheduler=self.scheduler,
            staff_log=StaffLog(self.get_channel, settings.staff_log_channel_id),
        )
        self.tree.error(self.on_app_command_error)

    async def setup_hook(self):
        guild = discord.Object(id=self.settings.guild_id)
        register_commands(self.tree, self.handlers, guild)
        self.add_view(TicketCloseView(self.handlers))
        log.info("Started refreshing application (/) commands for guild %s", guild.id)
        try:
            synced = await self.tree.sync(guild=guild)
        except discord.HTTPException:
            log.exception("Failed to register application commands")
            return
        log.info("Registered %d application command(s)", len(synced))

    async def on_ready(self):
        log.info("Logged in as %s (%s)", self.user, self.user.id)

    async def on_guild_channel_delete(self, channel: discord.abc.GuildChannel):
        self.handlers.forget_channel(channel.id)

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        command = interaction.command.name if interaction.command else "unknown"
        log.error("Unhandled error in /%s", command, exc_info=error)

    async def close(self):
        self.scheduler.cancel_all()
        await super().close()
