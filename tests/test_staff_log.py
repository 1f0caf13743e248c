import pytest
from conftest import FakeStaffChannel, http_error

from ticketdesk.staff_log import StaffLog, build_embed


def test_build_embed():
    embed = build_embed("ticket_created", "Ticket Created", "", [("User", "<@1>", False)])
    assert embed.title == "Ticket Created"
    assert embed.fields[0].name == "User"
    assert embed.footer.text


@pytest.mark.asyncio
async def test_disabled_without_channel_id():
    staff_log = StaffLog(lambda channel_id: None, None)
    assert not staff_log.enabled
    assert await staff_log.record("ticket_created", 1, 2) is False


@pytest.mark.asyncio
async def test_records_ticket_event():
    channel = FakeStaffChannel()
    staff_log = StaffLog({9: channel}.get, 9)

    assert await staff_log.record("ticket_closed", 111, 42, details="closed by owner")

    embed = channel.embeds[0]
    assert embed.title == "Ticket Closed"
    values = [field.value for field in embed.fields]
    assert "<@111> (111)" in values
    assert "<#42>" in values
    assert "closed by owner" in values


@pytest.mark.asyncio
async def test_missing_channel_is_ignored():
    staff_log = StaffLog({}.get, 9)
    assert await staff_log.record("ticket_created", 1, 2) is False


@pytest.mark.asyncio
async def test_send_failure_is_ignored():
    channel = FakeStaffChannel()
    channel.error = http_error(403)
    staff_log = StaffLog({9: channel}.get, 9)

    assert await staff_log.record("ticket_created", 1, 2) is False
