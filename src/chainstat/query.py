"""Read-side helpers over a snapshot."""

from __future__ import annotations

from .models import Snapshot, TokenRecord


def find_token(snapshot: Snapshot, symbol: str) -> TokenRecord | None:
    """Case-insensitive symbol lookup; the first match wins."""
    wanted = symbol.strip().upper()
    for token in snapshot.tokens:
        if token.symbol.upper() == wanted:
            return token
    return None


def list_tokens(snapshot: Snapshot) -> list[tuple[str, str]]:
    return [(token.symbol, token.name) for token in snapshot.tokens]


def exchange_counts(snapshot: Snapshot) -> dict[str, int]:
    """Number of tokens listed per exchange name."""
    counts: dict[str, int] = {}
    for token in snapshot.tokens:
        for name in dict.fromkeys(entry.name for entry in token.exchanges):
            counts[name] = counts.get(name, 0) + 1
    return counts
