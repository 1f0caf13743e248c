import discord

CLOSE_BUTTON_ID = "ticketdesk:close"


class TicketCloseView(discord.ui.View):
    """
    Close button posted with the ticket welcome message.
    The custom id is shared by every ticket, so one persistent view registered
    at start-up serves buttons posted before a restart.
    """

    def __init__(self, handlers):
        super().__init__(timeout=None)
        self.handlers = handlers

    @discord.ui.button(
        label="Close Ticket",
        style=discord.ButtonStyle.danger,
        emoji="🔒",
        custom_id=CLOSE_BUTTON_ID,
    )
    async def close_ticket(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self.handlers.dispatch(interaction, "close")
