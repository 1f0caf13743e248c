"""Test doubles for the parts of discord.py the ticket handlers touch."""

import asyncio
from itertools import count
from types import SimpleNamespace
from typing import List, Optional

import discord
import pytest

from ticketdesk.config import Settings
from ticketdesk.handlers import TicketCommands
from ticketdesk.scheduler import ClosureScheduler
from ticketdesk.staff_log import StaffLog

_ids = count(1000)


def http_error(status: int = 500) -> discord.HTTPException:
    response = SimpleNamespace(status=status, reason="error")
    if status == 404:
        return discord.NotFound(response, "Unknown Channel")
    if status == 403:
        return discord.Forbidden(response, "Missing Permissions")
    return discord.HTTPException(response, "boom")


class FakeRole:
    def __init__(self, name: str, role_id: Optional[int] = None):
        self.id = role_id or next(_ids)
        self.name = name

    def __repr__(self):
        return f"<FakeRole {self.name}>"


class FakeMember:
    def __init__(self, user_id: int, name: str, display_name: Optional[str] = None, roles=None):
        self.id = user_id
        self.name = name
        self.display_name = display_name or name
        self.roles: List[FakeRole] = list(roles or [])

    @property
    def mention(self) -> str:
        return f"<@{self.id}>"

    def __str__(self):
        return self.name


class FakeChannel:
    def __init__(self, name: str, topic: Optional[str] = None, channel_id: Optional[int] = None):
        self.id = channel_id or next(_ids)
        self.name = name
        self.topic = topic
        self.overwrites = {}
        self.sent = []
        self.deleted_reason = None
        self.send_error: Optional[Exception] = None
        self.delete_error: Optional[Exception] = None

    @property
    def mention(self) -> str:
        return f"<#{self.id}>"

    async def send(self, content=None, **kwargs):
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(SimpleNamespace(content=content, **kwargs))

    async def delete(self, reason=None):
        if self.delete_error is not None:
            raise self.delete_error
        self.deleted_reason = reason


class FakeGuild:
    def __init__(self, guild_id: int = 1, roles=None, channels=None, cache_created: bool = True):
        self.id = guild_id
        self.default_role = FakeRole("@everyone", role_id=guild_id)
        self.roles: List[FakeRole] = [self.default_role, *(roles or [])]
        self.text_channels: List[FakeChannel] = list(channels or [])
        self.cache_created = cache_created
        self.create_error: Optional[Exception] = None
        self.created: List[FakeChannel] = []

    async def create_text_channel(self, name, topic=None, overwrites=None, reason=None):
        await asyncio.sleep(0)
        if self.create_error is not None:
            raise self.create_error
        channel = FakeChannel(name, topic=topic)
        channel.overwrites = overwrites or {}
        channel.reason = reason
        self.created.append(channel)
        if self.cache_created:
            self.text_channels.append(channel)
        return channel


class FakeResponse:
    def __init__(self):
        self.messages = []
        self.errors: List[Exception] = []

    async def send_message(self, content=None, *, ephemeral=False, **kwargs):
        if self.errors:
            raise self.errors.pop(0)
        self.messages.append(SimpleNamespace(content=content, ephemeral=ephemeral, **kwargs))

    @property
    def last(self):
        return self.messages[-1]


class FakeInteraction:
    def __init__(self, user, guild=None, channel=None):
        self.user = user
        self.guild = guild
        self.channel = channel
        self.channel_id = channel.id if channel is not None else None
        self.response = FakeResponse()
        self.command = None


class FakeStaffChannel:
    def __init__(self):
        self.embeds = []
        self.error: Optional[Exception] = None

    async def send(self, embed=None, **kwargs):
        if self.error is not None:
            raise self.error
        self.embeds.append(embed)


@pytest.fixture
def settings():
    return Settings(
        token="token",
        guild_id=1,
        support_role_name="Support",
        discount_codes=frozenset({"ILLEGAL10"}),
        close_delay=0.01,
    )


@pytest.fixture
def support_role():
    return FakeRole("Support")


@pytest.fixture
def guild(support_role):
    return FakeGuild(roles=[support_role])


@pytest.fixture
def staff_channel():
    return FakeStaffChannel()


@pytest.fixture
def handlers(settings, staff_channel):
    channels = {555: staff_channel}
    return TicketCommands(
        settings,
        scheduler=ClosureScheduler(),
        staff_log=StaffLog(channels.get, 555),
    )
