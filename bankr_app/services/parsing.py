#  Bankr App Kit - Response Translation
#
#  Best-effort extraction of values from the agent's free-text answers.
#  Every function here may fail; callers decide what a miss means.
#
#  Depends on: exceptions.py
#  Used by:    services/trading_bot.py, services/token_launcher.py

import re

from bankr_app.exceptions import ResponseParseError

# "$1,234.56", "1234", "0.5": first match wins
_PRICE_RE = re.compile(r"\$?(\d[\d,]*(?:\.\d+)?|\.\d+)")


def parse_price(text: str) -> float:
    """Return the first number in text, ignoring a leading $ and thousands commas.

    Raises ResponseParseError if the text contains no number.
    """
    match = _PRICE_RE.search(text or "")
    if not match:
        raise ResponseParseError(f"No price found in response: {text[:80]!r}" if text else "Empty response")
    return float(match.group(1).replace(",", ""))
