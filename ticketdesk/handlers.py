import logging
from typing import Awaitable, Callable, Dict, Optional

import discord

from .config import Settings
from .discounts import DiscountValidator, normalize_code
from .registry import TicketRegistry
from .scheduler import ClosureScheduler
from .staff_log import StaffLog
from .tickets import (
    can_manage_ticket,
    find_support_role,
    ticket_channel_name,
    ticket_overwrites,
    ticket_topic,
)
from .views import TicketCloseView

log = logging.getLogger(__name__)

GUILD_ONLY = "Commands can only be used inside a server."
ALREADY_OPEN = "You already have an open ticket: {channel}"
CREATED = "Your ticket has been created: {channel}"
CREATE_FAILED = "Failed to create the ticket channel. Please contact support."
WELCOME = (
    "Hello {member}. Thank you for opening a ticket. "
    "Type /discount followed by your discount code to apply a coupon."
)
DISCOUNT_DENIED = "You can only use this command inside your own ticket channel."
DISCOUNT_VALID = "Discount code `{code}` is valid! Applying discount..."
DISCOUNT_INVALID = "Discount code `{code}` is invalid or expired. Please try again."
CLOSE_DENIED = "You can only close your own ticket channel."
CLOSE_PENDING = "This ticket is already closing."
CLOSING = "Closing this ticket channel in {delay:g} seconds..."
CLOSE_FAILED = "Failed to close the ticket channel."

Handler = Callable[..., Awaitable[None]]


class TicketCommands:
    def __init__(
        self,
        settings: Settings,
        scheduler: Optional[ClosureScheduler] = None,
        registry: Optional[TicketRegistry] = None,
        staff_log: Optional[StaffLog] = None,
    ):
        self.settings = settings
        self.validator = DiscountValidator(settings.discount_codes)
        self.scheduler = scheduler if scheduler is not None else ClosureScheduler()
        self.registry = registry if registry is not None else TicketRegistry()
        self.staff_log = staff_log if staff_log is not None else StaffLog(lambda channel_id: None, None)
        self.handlers: Dict[str, Handler] = {
            "ticket": self.create_ticket,
            "discount": self.redeem_discount,
            "close": self.close_ticket,
        }

    async def dispatch(self, interaction: discord.Interaction, command_name: str, **options):
        if interaction.guild is None:
            await interaction.response.send_message(GUILD_ONLY, ephemeral=True)
            return
        handler = self.handlers.get(command_name)
        if handler is None:
            log.debug("Ignoring unknown command %r from %s", command_name, interaction.user.id)
            return
        await handler(interaction, **options)

    def forget_channel(self, channel_id: int):
        self.registry.forget(channel_id)
        self.scheduler.cancel(channel_id)

    def support_role(self, guild: discord.Guild) -> Optional[discord.Role]:
        return find_support_role(guild, self.settings.support_role_name)

    async def create_ticket(self, interaction: discord.Interaction):
        guild = interaction.guild
        member = interaction.user
        async with self.registry.hold(guild.id, member.id):
            existing = self.registry.lookup(guild, member.id)
            if existing is not None:
                await interaction.response.send_message(ALREADY_OPEN.format(channel=existing.mention), ephemeral=True)
                return
            support_role = self.support_role(guild)
            try:
                channel = await guild.create_text_channel(
                    name=ticket_channel_name(member),
                    topic=ticket_topic(member),
                    overwrites=ticket_overwrites(guild, member, support_role),
                    reason=f"Ticket created by {member}",
                )
            except discord.HTTPException:
                log.exception("Failed to create a ticket channel for %s", member.id)
                try:
                    await interaction.response.send_message(CREATE_FAILED, ephemeral=True)
                except discord.HTTPException:
                    log.warning("Failed to report the ticket failure to %s", member.id, exc_info=True)
                return
            self.registry.remember(guild.id, member.id, channel)

        log.info("Opened ticket %s for %s", channel.id, member.id)
        try:
            await interaction.response.send_message(CREATED.format(channel=channel.mention), ephemeral=True)
        except discord.HTTPException:
            log.warning("Failed to confirm ticket %s to %s", channel.id, member.id, exc_info=True)
        try:
            await channel.send(WELCOME.format(member=member.mention), view=TicketCloseView(self))
        except discord.HTTPException:
            log.warning("Failed to post the welcome message in %s", channel.id, exc_info=True)
        await self.staff_log.record("ticket_created", member.id, channel.id)

    async def redeem_discount(self, interaction: discord.Interaction, code: str):
        member = interaction.user
        if not can_manage_ticket(interaction.channel, member, self.support_role(interaction.guild)):
            await interaction.response.send_message(DISCOUNT_DENIED, ephemeral=True)
            return
        normalized = normalize_code(code)
        if self.validator.is_valid(normalized):
            await interaction.response.send_message(DISCOUNT_VALID.format(code=normalized), ephemeral=False)
            return
        await interaction.response.send_message(DISCOUNT_INVALID.format(code=normalized), ephemeral=True)

    async def close_ticket(self, interaction: discord.Interaction):
        member = interaction.user
        channel = interaction.channel
        if not can_manage_ticket(channel, member, self.support_role(interaction.guild)):
            await interaction.response.send_message(CLOSE_DENIED, ephemeral=True)
            return
        if self.scheduler.is_pending(channel.id):
            await interaction.response.send_message(CLOSE_PENDING, ephemeral=True)
            return

        delay = self.settings.close_delay
        try:
            await interaction.response.send_message(CLOSING.format(delay=delay))
        except discord.HTTPException:
            log.exception("Failed to announce closure of %s", channel.id)
            try:
                await interaction.response.send_message(CLOSE_FAILED, ephemeral=True)
            except discord.HTTPException:
                log.warning("Failed to report the closure failure in %s", channel.id, exc_info=True)
            return

        self.scheduler.schedule(channel, delay)
        log.info("Ticket %s closing in %ss by %s", channel.id, delay, member.id)
        await self.staff_log.record("ticket_closed", member.id, channel.id)
