"""Pytest configuration and fixtures."""

import asyncio
from datetime import datetime, timezone

import pytest
from pydantic import SecretStr

from chainstat.exchanges.signing import Signer
from chainstat.models import ChainEntry, ChainStatus, ExchangeEntry, TokenRecord
from chainstat.settings import ExchangeCredentials


FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


class StubAdapter:
    """In-memory adapter returning canned tokens."""

    def __init__(self, name, tokens=None, error=None, delay=0.0):
        self.exchange_id = name.lower()
        self._name = name
        self.tokens = tokens or []
        self.error = error
        self.delay = delay
        self.calls = 0
        self.closed = False

    @property
    def name(self):
        return self._name

    async def fetch(self):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return [token.model_copy(deep=True) for token in self.tokens]

    async def close(self):
        self.closed = True


def make_token(symbol, exchange, chains=("ETH",), name=None):
    """Build a token listed on one exchange with open chains."""
    return TokenRecord(
        symbol=symbol,
        name=symbol if name is None else name,
        exchanges=[
            ExchangeEntry(
                name=exchange,
                chains=[
                    ChainEntry(
                        chain=chain,
                        deposit_status=ChainStatus.OPEN,
                        withdraw_status=ChainStatus.OPEN,
                    )
                    for chain in chains
                ],
            )
        ],
    )


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def credentials():
    """Test credentials for every exchange."""
    creds = ExchangeCredentials(
        api_key=SecretStr("test_api_key_123456"),
        api_secret=SecretStr("test_api_secret_789012"),
        passphrase=SecretStr("test_passphrase_345678"),
    )
    return {name: creds for name in ("okx", "binance", "bybit", "gate", "bitget")}


@pytest.fixture
def signer(credentials):
    return Signer(credentials, clock=lambda: FIXED_NOW)


@pytest.fixture
def anonymous_signer():
    return Signer({}, clock=lambda: FIXED_NOW)


@pytest.fixture
def okx_response():
    """OKX /api/v5/asset/currencies sample."""
    return {
        "code": "0",
        "msg": "",
        "data": [
            {
                "ccy": "BTC",
                "name": "Bitcoin",
                "chain": "BTC-Bitcoin",
                "canDep": True,
                "canWd": False,
                "ctAddr": "",
                "minWd": "0.0005",
                "minFee": "0.0002",
            },
            {
                "ccy": "USDT",
                "name": "Tether",
                "chain": "USDT-ERC20",
                "canDep": True,
                "canWd": True,
                "ctAddr": "0xdac17f958d2ee523a2206206994597c13d831ec7",
                "minWd": "2",
                "minFee": "1.5",
            },
            {
                "ccy": "USDT",
                "name": "Tether",
                "chain": "USDT-TRC20",
                "canDep": False,
                "canWd": True,
                "ctAddr": "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t",
                "minWd": "1",
                "minFee": "0.8",
            },
        ],
    }


@pytest.fixture
def binance_response():
    """Binance /sapi/v1/capital/config/getall sample."""
    return [
        {
            "coin": "USDT",
            "name": "TetherUS",
            "networkList": [
                {
                    "network": "ETH",
                    "depositEnable": True,
                    "withdrawEnable": True,
                    "contractAddress": "0xdac17f958d2ee523a2206206994597c13d831ec7",
                    "withdrawMin": "10",
                    "withdrawFee": "4.5",
                },
                {
                    "network": "TRX",
                    "depositEnable": False,
                    "withdrawEnable": True,
                    "withdrawMin": "10",
                    "withdrawFee": "1",
                },
            ],
        },
        {"coin": "ETH", "name": "Ethereum", "networkList": []},
    ]


@pytest.fixture
def bybit_response():
    """Bybit /v5/asset/coin/query-info sample."""
    return {
        "retCode": 0,
        "retMsg": "success",
        "result": {
            "rows": [
                {
                    "coin": "USDT",
                    "name": "USDT",
                    "chains": [
                        {
                            "chain": "ETH",
                            "chainDeposit": "1",
                            "chainWithdraw": "0",
                            "withdrawMin": "10",
                            "withdrawFee": "3",
                        },
                        {
                            "chain": "TRX",
                            "chainDeposit": "1",
                            "chainWithdraw": "1",
                            "withdrawMin": "1",
                            "withdrawFee": "1",
                        },
                    ],
                }
            ]
        },
    }


@pytest.fixture
def gate_response():
    """Gate.io /api/v4/spot/currencies sample."""
    return [
        {
            "currency": "USDT",
            "name": "Tether",
            "chain": "ETH",
            "deposit_disabled": False,
            "withdraw_disabled": True,
            "min_withdraw_amount": "5",
            "withdraw_fee": "2",
        },
        {
            "currency": "USDT",
            "name": "Tether",
            "chain": "TRX",
            "deposit_disabled": False,
            "withdraw_disabled": False,
        },
        {"currency": "GT", "name": "GateToken", "chain": "GTEVM"},
    ]


@pytest.fixture
def bitget_response():
    """Bitget /api/v2/spot/public/coins sample."""
    return {
        "code": "00000",
        "msg": "success",
        "data": [
            {
                "coin": "USDT",
                "chains": [
                    {
                        "chain": "ERC20",
                        "rechargeable": "true",
                        "withdrawable": "false",
                        "contractAddress": "0xdac17f958d2ee523a2206206994597c13d831ec7",
                        "minWithdrawAmount": "10",
                        "withdrawFee": "2.5",
                    }
                ],
            }
        ],
    }
