import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional, Tuple

import discord

from .tickets import find_ticket_channel, is_ticket_channel

OwnerKey = Tuple[int, int]


class TicketRegistry:
    """
    Answers "does this member already have a ticket?".

    The guild's channel topics stay the source of truth. Channels the bot
    has just created are remembered until their delete event arrives, so a
    lookup that races the gateway's channel-create event still finds them.
    Scan-then-create runs under a per-owner lock, dropped once no caller
    holds or waits on it.
    """

    def __init__(self):
        self._locks: Dict[OwnerKey, asyncio.Lock] = {}
        self._users: Dict[OwnerKey, int] = {}
        self._opened: Dict[OwnerKey, discord.abc.GuildChannel] = {}

    @property
    def lock_count(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, guild_id: int, user_id: int) -> AsyncIterator[None]:
        key = (guild_id, user_id)
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]

    def lookup(self, guild: discord.Guild, user_id: int) -> Optional[discord.abc.GuildChannel]:
        channel = find_ticket_channel(guild, user_id)
        if channel is not None:
            return channel
        return self._opened.get((guild.id, user_id))

    def remember(self, guild_id: int, user_id: int, channel: discord.abc.GuildChannel):
        if is_ticket_channel(channel, user_id):
            self._opened[(guild_id, user_id)] = channel

    def forget(self, channel_id: int) -> bool:
        stale = [key for key, channel in self._opened.items() if channel.id == channel_id]
        for key in stale:
            del self._opened[key]
        return bool(stale)
