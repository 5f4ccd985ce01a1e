#  Bankr App Kit - Agent Request Gateway
#
#  Mediates every outbound instruction to the Bankr agent endpoint.
#  Admission control (purge, size check, record) runs under an asyncio.Lock
#  so concurrent callers cannot both slip past the limit; the HTTP POST is
#  the only await outside the lock.
#
#  Depends on: models/schemas.py, services/ledger.py, exceptions.py,
#              logging_config.py
#  Used by:    container.py, services/trading_bot.py, services/token_launcher.py

import asyncio
import logging
from collections.abc import Callable

import httpx

from bankr_app.exceptions import (
    ConnectivityCheckFailed,
    GatewayError,
    MalformedUpstreamResponse,
    RateLimitExceeded,
    UpstreamRequestFailed,
    UpstreamUnavailable,
)
from bankr_app.logging_config import agent_request
from bankr_app.models.schemas import GatewayConfig, LedgerUsage
from bankr_app.services.ledger import RequestLedger, monotonic_ms

logger = logging.getLogger("bankr.gateway")

COMPLETIONS_PATH = "/v1/chat/completions"
PROBE_INSTRUCTION = "what is my wallet address?"
PROBE_MARKER = "wallet"


def _extract_content(resp: httpx.Response) -> str:
    """Pull choices[0].message.content out of a 2xx response body."""
    try:
        data = resp.json()
    except ValueError as e:
        raise MalformedUpstreamResponse("Response body is not valid JSON") from e
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedUpstreamResponse(
            "Response is missing choices[0].message.content"
        ) from e
    if not isinstance(content, str):
        raise MalformedUpstreamResponse(
            f"choices[0].message.content is {type(content).__name__}, expected str"
        )
    return content


class AgentGateway:
    """Rate-limited client for the agent chat-completions endpoint.

    One instance per process (or logical session). The ledger and the HTTP
    client belong to the gateway; a client passed in by the caller is used
    but not closed by aclose().

    Budget policy: an admitted request keeps its ledger slot even if the
    upstream call fails, unless config.charge_on_failure is False, in which
    case HTTP errors and transport failures hand the slot back. Cancellation
    never hands it back.
    """

    def __init__(
        self,
        config: GatewayConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], int] | None = None,
    ):
        self._config = config
        self._ledger = RequestLedger(config.window_duration_ms)
        self._lock = asyncio.Lock()
        self._clock = clock or monotonic_ms
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=config.request_timeout_s)

    @property
    def config(self) -> GatewayConfig:
        return self._config

    @property
    def url(self) -> str:
        return self._config.endpoint_base_url.rstrip("/") + COMPLETIONS_PATH

    async def __aenter__(self) -> "AgentGateway":
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    async def aclose(self):
        if self._owns_http:
            await self._http.aclose()

    # ------------------------------------------------------------------
    # Admission control
    # ------------------------------------------------------------------

    async def _admit(self) -> int:
        """Atomically purge, check and record. Returns the recorded timestamp."""
        limit = self._config.max_requests_per_window
        async with self._lock:
            now = self._clock()
            self._ledger.purge(now)
            if len(self._ledger) >= limit:
                retry_after = self._ledger.retry_after_ms(now)
                in_window = len(self._ledger)
                logger.warning(
                    "Rate limit exceeded: %d/%d requests in window, retry in %d ms",
                    in_window, limit, retry_after,
                    extra={"in_window": in_window, "limit": limit, "retry_after_ms": retry_after},
                )
                raise RateLimitExceeded(limit, self._config.window_duration_ms, retry_after)
            self._ledger.record(now)
            return now

    async def _refund(self, admitted_at: int):
        if self._config.charge_on_failure:
            return
        async with self._lock:
            self._ledger.discard(admitted_at)

    async def usage(self) -> LedgerUsage:
        """Snapshot of the current window (purges first)."""
        limit = self._config.max_requests_per_window
        async with self._lock:
            now = self._clock()
            self._ledger.purge(now)
            in_window = len(self._ledger)
            retry_after = self._ledger.retry_after_ms(now) if in_window >= limit else 0
        return LedgerUsage(
            in_window=in_window,
            limit=limit,
            remaining=max(0, limit - in_window),
            retry_after_ms=retry_after,
        )

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def submit(self, instruction: str) -> str:
        """Send one natural-language instruction and return the agent's text.

        Raises:
            ValueError: instruction is empty.
            RateLimitExceeded: window full; no request was made.
            UpstreamRequestFailed: non-2xx status.
            UpstreamUnavailable: connect error or timeout.
            MalformedUpstreamResponse: 2xx without a text response.
        """
        if not isinstance(instruction, str) or not instruction.strip():
            raise ValueError("instruction must be non-empty text")

        admitted_at = await self._admit()
        with agent_request():
            logger.debug("Submitting instruction (%d chars)", len(instruction))
            resp = await self._post(instruction, admitted_at)
            logger.debug(
                "Agent replied with %d", resp.status_code,
                extra={"status_code": resp.status_code, "elapsed_ms": self._clock() - admitted_at},
            )
            return _extract_content(resp)

    async def _post(self, instruction: str, admitted_at: int) -> httpx.Response:
        body = {
            "model": self._config.model,
            "messages": [{"role": "user", "content": instruction}],
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._config.auth_token}",
        }
        timeout = self._config.request_timeout_s
        try:
            resp = await self._http.post(self.url, json=body, headers=headers, timeout=timeout)
        except httpx.TimeoutException as e:
            await self._refund(admitted_at)
            logger.error("Agent request timed out after %ss", timeout)
            raise UpstreamUnavailable(f"Request timed out after {timeout}s") from e
        except httpx.TransportError as e:
            await self._refund(admitted_at)
            logger.error("Agent endpoint unreachable: %s", e)
            raise UpstreamUnavailable(f"Agent endpoint unreachable: {e}") from e

        if not resp.is_success:
            await self._refund(admitted_at)
            logger.warning(
                "Agent request failed: %d %s", resp.status_code, resp.reason_phrase,
                extra={"status_code": resp.status_code},
            )
            raise UpstreamRequestFailed(resp.status_code, resp.reason_phrase)
        return resp

    async def verify_connectivity(self):
        """Probe the endpoint once; raise ConnectivityCheckFailed on any problem."""
        try:
            text = await self.submit(PROBE_INSTRUCTION)
        except GatewayError as e:
            raise ConnectivityCheckFailed(f"Failed to connect to Bankr API: {e}") from e
        if PROBE_MARKER not in text.lower():
            raise ConnectivityCheckFailed("Failed to connect to Bankr API: Invalid API response")
        logger.info("Agent endpoint reachable at %s", self._config.endpoint_base_url)
