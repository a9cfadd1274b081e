"""Per-exchange request signing.

Every signing function is pure: it only depends on the credentials, the
request being signed and the instant passed in. ``Signer`` binds the
configured credentials and a clock to the strategy table below.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping
from urllib.parse import urlencode

from pydantic import SecretStr

from ..settings import ExchangeCredentials

BYBIT_RECV_WINDOW = "5000"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True, slots=True)
class SignedRequest:
    """Authentication material for one request."""

    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)


SigningFunction = Callable[[ExchangeCredentials, str, str, Mapping[str, str], datetime], SignedRequest]


def generate_signature(secret: str, message: str, digest: str = "sha256", encoding: str = "hex") -> str:
    """HMAC ``message`` with ``secret``.

    Args:
        secret: Secret key, may be empty
        message: Message to sign
        digest: ``sha256`` or ``sha512``
        encoding: ``hex`` or ``base64``

    Returns:
        Encoded signature
    """
    if digest not in {"sha256", "sha512"}:
        raise ValueError(f"Unsupported digest: {digest}")
    mac = hmac.new(secret.encode(), message.encode(), getattr(hashlib, digest))
    if encoding == "hex":
        return mac.hexdigest()
    if encoding == "base64":
        return base64.b64encode(mac.digest()).decode()
    raise ValueError(f"Unsupported signature encoding: {encoding}")


def _epoch_millis(now: datetime) -> str:
    return str((now - EPOCH) // timedelta(milliseconds=1))


def _epoch_seconds(now: datetime) -> str:
    return str((now - EPOCH) // timedelta(seconds=1))


def _iso_millis(now: datetime) -> str:
    now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def _json_body(params: Mapping[str, str]) -> str:
    return json.dumps(dict(params), separators=(",", ":"))


def _secret(value: SecretStr | None) -> str:
    return value.get_secret_value() if value is not None else ""


def sign_okx(
    credentials: ExchangeCredentials,
    method: str,
    path: str,
    params: Mapping[str, str],
    now: datetime,
) -> SignedRequest:
    timestamp = _iso_millis(now)
    message = timestamp + method + path
    if method == "GET" and params:
        message += "?" + urlencode(params)

    headers = {
        "Content-Type": "application/json",
        "OK-ACCESS-KEY": _secret(credentials.api_key),
        "OK-ACCESS-SIGN": generate_signature(_secret(credentials.api_secret), message, "sha256", "base64"),
        "OK-ACCESS-TIMESTAMP": timestamp,
        "OK-ACCESS-PASSPHRASE": _secret(credentials.passphrase),
    }
    project = _secret(credentials.project)
    if project:
        headers["OK-ACCESS-PROJECT"] = project
    return SignedRequest(headers=headers, params=dict(params))


def sign_binance(
    credentials: ExchangeCredentials,
    method: str,
    path: str,
    params: Mapping[str, str],
    now: datetime,
) -> SignedRequest:
    """Binance signs the full query string and sends the signature as a param."""
    signed = dict(params)
    signed["timestamp"] = _epoch_millis(now)
    query_string = urlencode(signed)
    signed["signature"] = generate_signature(_secret(credentials.api_secret), query_string)
    return SignedRequest(
        headers={"X-MBX-APIKEY": _secret(credentials.api_key)},
        params=signed,
    )


def sign_bybit(
    credentials: ExchangeCredentials,
    method: str,
    path: str,
    params: Mapping[str, str],
    now: datetime,
) -> SignedRequest:
    timestamp = _epoch_millis(now)
    api_key = _secret(credentials.api_key)
    param_str = "&".join(f"{k}={v}" for k, v in sorted(params.items()))
    message = timestamp + api_key + BYBIT_RECV_WINDOW + param_str
    return SignedRequest(
        headers={
            "X-BAPI-API-KEY": api_key,
            "X-BAPI-SIGN": generate_signature(_secret(credentials.api_secret), message),
            "X-BAPI-TIMESTAMP": timestamp,
            "X-BAPI-RECV-WINDOW": BYBIT_RECV_WINDOW,
            "Content-Type": "application/json",
        },
        params=dict(params),
    )


def sign_gate(
    credentials: ExchangeCredentials,
    method: str,
    path: str,
    params: Mapping[str, str],
    now: datetime,
) -> SignedRequest:
    timestamp = _epoch_seconds(now)
    query_string = urlencode(params) if method == "GET" and params else ""
    body = _json_body(params) if method != "GET" and params else ""
    message = f"{method}\n{path}\n{query_string}\n{body}\n{timestamp}"
    return SignedRequest(
        headers={
            "Accept": "application/json",
            "Content-Type": "application/json",
            "KEY": _secret(credentials.api_key),
            "SIGN": generate_signature(_secret(credentials.api_secret), message, "sha512"),
            "Timestamp": timestamp,
        },
        params=dict(params),
    )


def sign_bitget(
    credentials: ExchangeCredentials,
    method: str,
    path: str,
    params: Mapping[str, str],
    now: datetime,
) -> SignedRequest:
    timestamp = _epoch_millis(now)
    body = _json_body(params) if params else ""
    message = timestamp + method + path + body
    return SignedRequest(
        headers={
            "ACCESS-KEY": _secret(credentials.api_key),
            "ACCESS-SIGN": generate_signature(_secret(credentials.api_secret), message, "sha256", "base64"),
            "ACCESS-TIMESTAMP": timestamp,
            "ACCESS-PASSPHRASE": _secret(credentials.passphrase),
            "Content-Type": "application/json",
        },
        params=dict(params),
    )


SIGNERS: dict[str, SigningFunction] = {
    "okx": sign_okx,
    "binance": sign_binance,
    "bybit": sign_bybit,
    "gate": sign_gate,
    "bitget": sign_bitget,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Signer:
    """Signs requests with the process-wide credentials.

    Missing credentials are not an error: the request is signed with empty
    key material and the exchange decides whether to serve it.
    """

    def __init__(
        self,
        credentials: Mapping[str, ExchangeCredentials] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._credentials = {k.lower(): v for k, v in (credentials or {}).items()}
        self._clock = clock or _utcnow

    def credentials_for(self, exchange_id: str) -> ExchangeCredentials:
        return self._credentials.get(exchange_id.lower()) or ExchangeCredentials()

    def sign(
        self,
        exchange_id: str,
        method: str,
        path: str,
        params: Mapping[str, str] | None = None,
    ) -> SignedRequest:
        """Produce headers and effective params for one request.

        Raises:
            ValueError: If no signing scheme is registered for the exchange
        """
        exchange_key = exchange_id.lower()
        signing_function = SIGNERS.get(exchange_key)
        if signing_function is None:
            supported = ", ".join(SIGNERS)
            raise ValueError(f"No signing scheme for exchange: {exchange_id}. Supported exchanges: {supported}")
        return signing_function(
            self.credentials_for(exchange_key),
            method.upper(),
            path,
            dict(params or {}),
            self._clock(),
        )
