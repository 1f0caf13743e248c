import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

import discord

log = logging.getLogger(__name__)

FOOTER = "Ticketdesk • Support/Discounts"

COLOR_MAP = {
    "ticket_created": discord.Color.green(),
    "ticket_closed": discord.Color.dark_red(),
}

TITLE_MAP = {
    "ticket_created": "Ticket Created",
    "ticket_closed": "Ticket Closed",
}


def now_ts() -> int:
    return int(datetime.now(timezone.utc).timestamp())


def build_embed(kind: str, title: str, description: str, fields: List[Tuple[str, str, bool]]) -> discord.Embed:
    embed = discord.Embed(title=title, description=description, color=COLOR_MAP.get(kind, discord.Color.blurple()))
    for name, value, inline in fields:
        embed.add_field(name=name, value=value, inline=inline)
    embed.set_footer(text=FOOTER)
    return embed


class StaffLog:
    """Posts ticket lifecycle events to a staff channel, when one is configured."""

    def __init__(self, get_channel: Callable[[int], Optional[discord.abc.Messageable]], channel_id: Optional[int]):
        self.get_channel = get_channel
        self.channel_id = channel_id

    @property
    def enabled(self) -> bool:
        return self.channel_id is not None

    async def record(self, action: str, user_id: Optional[int], channel_id: Optional[int], details: str = "") -> bool:
        if self.channel_id is None:
            return False
        channel = self.get_channel(self.channel_id)
        if channel is None:
            log.warning("Staff log channel %s is not visible to the bot", self.channel_id)
            return False

        created_ts = now_ts()
        user_label = f"<@{user_id}> ({user_id})" if user_id else "Unknown"
        fields = [
            ("User", user_label, False),
            ("Channel", f"<#{channel_id}>" if channel_id else "Unknown", True),
            ("Time", f"<t:{created_ts}:R>", True),
        ]
        if details:
            fields.append(("Details", details[:500], False))
        embed = build_embed(action, TITLE_MAP.get(action, "Staff Log"), "", fields)
        try:
            await channel.send(embed=embed, allowed_mentions=discord.AllowedMentions.none())
        except discord.HTTPException:
            log.warning("Failed to post %s to the staff log", action, exc_info=True)
            return False
        return True
