"""Base class for exchange adapters."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable

import aiohttp

from ..archive import RawResponseArchive
from ..models import ChainEntry, ExchangeEntry, TokenRecord
from .normalization import fallback_name
from .signing import Signer

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 15000


class ExchangeAPIError(Exception):
    """An exchange answered, but not with a usable success response."""

    def __init__(self, exchange: str, message: str):
        super().__init__(f"{exchange} API Error: {message}")
        self.exchange = exchange


class BaseExchangeAdapter(ABC):
    """Fetches one exchange's currency list and maps it to ``TokenRecord``s.

    Subclasses declare the endpoint and implement ``check_envelope`` and
    ``parse``. ``fetch`` never raises: any failure yields an empty list.
    """

    exchange_id: str = ""
    display_name: str = ""
    default_base_url: str = ""
    endpoint: str = ""
    method: str = "GET"

    def __init__(
        self,
        signer: Signer,
        *,
        archive: RawResponseArchive | None = None,
        base_url: str | None = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        proxy: str | None = None,
        params: dict[str, str] | None = None,
    ):
        """Initialize exchange adapter.

        Args:
            signer: Request signer holding the process credentials
            archive: Raw response archive, ``None`` disables archiving
            base_url: Override for the exchange REST host
            timeout_ms: Total request timeout in milliseconds
            proxy: Outbound HTTP proxy URL
            params: Extra query/body params for the currency endpoint
        """
        self.signer = signer
        self.archive = archive
        self.base_url = (base_url or self.default_base_url).rstrip("/")
        self.timeout_ms = timeout_ms
        self.proxy = proxy
        self.params = dict(params or {})
        self.session: aiohttp.ClientSession | None = None

    @property
    def name(self) -> str:
        return self.display_name

    def get_base_url(self) -> str:
        return self.base_url

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            connector = aiohttp.TCPConnector()
            self.session = aiohttp.ClientSession(connector=connector)
        return self.session

    async def _request(self) -> Any:
        """Issue the signed request and return the decoded JSON body.

        The raw body is handed to the archive before any validation.
        """
        session = await self._ensure_session()
        signed = self.signer.sign(self.exchange_id, self.method, self.endpoint, self.params)
        url = f"{self.get_base_url()}{self.endpoint}"

        kwargs: dict[str, Any] = {
            "headers": signed.headers,
            "timeout": aiohttp.ClientTimeout(total=self.timeout_ms / 1000),
        }
        if self.method == "GET":
            if signed.params:
                kwargs["params"] = signed.params
        elif signed.params:
            kwargs["json"] = signed.params
        if self.proxy:
            kwargs["proxy"] = self.proxy

        async with session.request(self.method, url, **kwargs) as resp:
            status = resp.status
            body = await resp.text()

        try:
            payload = json.loads(body)
        except ValueError as e:
            self._archive(body)
            raise ExchangeAPIError(self.display_name, f"non-JSON response (HTTP {status})") from e

        self._archive(payload)

        if status != 200:
            raise ExchangeAPIError(self.display_name, f"HTTP {status}: {_error_message(payload)}")
        return payload

    def _archive(self, payload: Any) -> None:
        if self.archive is None:
            return
        try:
            self.archive.submit(self.exchange_id, self.endpoint, payload)
        except Exception as e:
            logger.error("Could not archive %s response: %s", self.display_name, e)

    async def fetch(self) -> list[TokenRecord]:
        """Fetch and normalize this exchange's currencies, empty on any error."""
        try:
            payload = await self._request()
            self.check_envelope(payload)
            tokens = self.parse(payload)
        except Exception as e:
            logger.error("Error fetching %s data: %s", self.display_name, str(e) or type(e).__name__)
            return []

        logger.info("%s returned %d tokens", self.display_name, len(tokens))
        return tokens

    @abstractmethod
    def check_envelope(self, payload: Any) -> None:
        """Raise ``ExchangeAPIError`` unless ``payload`` is a success response."""
        ...

    @abstractmethod
    def parse(self, payload: Any) -> list[TokenRecord]:
        """Map a validated payload to token records, in response order."""
        ...

    def _token(self, tokens: dict[str, TokenRecord], symbol: str, name: Any) -> TokenRecord:
        token = tokens.get(symbol)
        if token is None:
            token = TokenRecord(symbol=symbol, name=fallback_name(name, symbol))
            tokens[symbol] = token
        return token

    def _append_chain(
        self,
        tokens: dict[str, TokenRecord],
        symbol: str,
        name: Any,
        chain: ChainEntry,
    ) -> None:
        """Add ``chain`` to this exchange's single entry for ``symbol``."""
        token = self._token(tokens, symbol, name)
        entry = token.exchange(self.display_name)
        if entry is None:
            entry = ExchangeEntry(name=self.display_name)
            token.exchanges.append(entry)
        entry.chains.append(chain)

    def _append_entry(
        self,
        tokens: dict[str, TokenRecord],
        symbol: str,
        name: Any,
        chains: Iterable[ChainEntry],
    ) -> None:
        """Add a new exchange entry for ``symbol`` holding ``chains``."""
        token = self._token(tokens, symbol, name)
        token.exchanges.append(ExchangeEntry(name=self.display_name, chains=list(chains)))

    async def close(self) -> None:
        """Close connections."""
        if self.session:
            await self.session.close()
            self.session = None


def _error_message(payload: Any) -> str:
    if isinstance(payload, dict):
        for key in ("msg", "retMsg", "message", "label"):
            if payload.get(key):
                return str(payload[key])
    return "unexpected response"


def iter_items(items: Any) -> Iterable[dict[str, Any]]:
    """Yield dict items of a list field, skipping anything malformed."""
    if not isinstance(items, list):
        return
    for item in items:
        if isinstance(item, dict):
            yield item
