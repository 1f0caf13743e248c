import asyncio
import logging
from typing import Dict, Optional

import discord

log = logging.getLogger(__name__)


class ClosureScheduler:
    """
    Deferred ticket-channel deletion.
    One pending task per channel id; tasks drop out of the table when they finish.
    """

    def __init__(self):
        self._tasks: Dict[int, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    def is_pending(self, channel_id: int) -> bool:
        return channel_id in self._tasks

    def get(self, channel_id: int) -> Optional[asyncio.Task]:
        return self._tasks.get(channel_id)

    def schedule(self, channel: discord.abc.GuildChannel, delay: float, reason: str = "Ticket closed") -> bool:
        if channel.id in self._tasks:
            return False
        task = asyncio.create_task(self._delete_later(channel, delay, reason))
        self._tasks[channel.id] = task
        task.add_done_callback(lambda finished, channel_id=channel.id: self._forget(channel_id, finished))
        return True

    def cancel(self, channel_id: int) -> bool:
        task = self._tasks.pop(channel_id, None)
        if task is None:
            return False
        task.cancel()
        return True

    def cancel_all(self) -> int:
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            log.info("Cancelled %d pending ticket deletion(s)", len(tasks))
        return len(tasks)

    def _forget(self, channel_id: int, task: asyncio.Task):
        if self._tasks.get(channel_id) is task:
            del self._tasks[channel_id]

    async def _delete_later(self, channel: discord.abc.GuildChannel, delay: float, reason: str):
        await asyncio.sleep(delay)
        try:
            await channel.delete(reason=reason)
        except discord.NotFound:
            log.debug("Ticket channel %s was already gone", channel.id)
            return
        except discord.HTTPException:
            log.warning("Failed to delete ticket channel %s", channel.id, exc_info=True)
            return
        log.info("Deleted ticket channel %s", channel.id)
