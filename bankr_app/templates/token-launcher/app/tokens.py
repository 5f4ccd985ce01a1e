"""Token definitions for ${project_name}.

Edit MY_TOKEN, then call deploy() from your own script once you are sure.
"""

from bankr_app.models.schemas import TokenConfig
from bankr_app.services.token_launcher import TokenLauncher

MY_TOKEN = TokenConfig(
    name="MyToken",
    symbol="MTK",
    chain="${blockchain}",
    supply=1_000_000,
    vault_percentage=20,
    vesting_days=30,
)


async def deploy(launcher: TokenLauncher, token: TokenConfig = MY_TOKEN) -> str:
    return await launcher.deploy_token(token)
