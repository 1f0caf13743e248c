import re
from typing import Dict, Optional

import discord

TICKET_PREFIX = "ticket-"
OWNER_MARKER = "TicketOwnerID"

OWNER_MARKER_REGEX = re.compile(rf"{OWNER_MARKER}:(\d+)(?!\d)")


def owner_marker(user_id: int) -> str:
    return f"{OWNER_MARKER}:{user_id}"


def ticket_topic(member: discord.Member) -> str:
    return f"Support ticket for {member} | {owner_marker(member.id)}"


def ticket_channel_name(member: discord.Member) -> str:
    return f"{TICKET_PREFIX}{member.display_name.lower()}"


def ticket_owner_id(channel) -> Optional[int]:
    topic = getattr(channel, "topic", None)
    if not topic:
        return None
    match = OWNER_MARKER_REGEX.search(topic)
    if not match:
        return None
    return int(match.group(1))


def is_ticket_channel(channel, user_id: int) -> bool:
    if channel is None:
        return False
    return ticket_owner_id(channel) == user_id


def find_ticket_channel(guild: discord.Guild, user_id: int) -> Optional[discord.TextChannel]:
    for channel in guild.text_channels:
        if is_ticket_channel(channel, user_id):
            return channel
    return None


def find_support_role(guild: discord.Guild, role_name: str) -> Optional[discord.Role]:
    return discord.utils.get(guild.roles, name=role_name)


def has_support_role(member: discord.Member, support_role: Optional[discord.Role]) -> bool:
    if support_role is None:
        return False
    return any(role.id == support_role.id for role in member.roles)


def can_manage_ticket(channel, member: discord.Member, support_role: Optional[discord.Role]) -> bool:
    """Owners act on their own ticket; support role holders act on any channel."""
    if is_ticket_channel(channel, member.id):
        return True
    return has_support_role(member, support_role)


def ticket_overwrites(
    guild: discord.Guild,
    member: discord.Member,
    support_role: Optional[discord.Role],
) -> Dict[object, discord.PermissionOverwrite]:
    overwrites = {
        guild.default_role: discord.PermissionOverwrite(view_channel=False),
        member: discord.PermissionOverwrite(view_channel=True, send_messages=True, read_message_history=True),
    }
    if support_role is not None:
        overwrites[support_role] = discord.PermissionOverwrite(
            view_channel=True,
            send_messages=True,
            read_message_history=True,
        )
    return overwrites
