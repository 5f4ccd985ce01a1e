"""Canned instructions for ${project_name}."""

from bankr_app.services.gateway import AgentGateway

CHAIN = "${blockchain}"


async def portfolio_summary(gateway: AgentGateway) -> str:
    return await gateway.submit(
        f"show my complete portfolio on {CHAIN} including total value and individual token holdings"
    )


async def price_of(gateway: AgentGateway, token: str) -> str:
    return await gateway.submit(f"what is the current price of {token} on {CHAIN}?")
