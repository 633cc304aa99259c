"""Status symbol to category mapping."""

from __future__ import annotations

import re

from taskchat.models import AppConfig

_TOKEN_NOISE = re.compile(r"[-\s]+")


def _normalize_token(token: str) -> str:
    return _TOKEN_NOISE.sub("", token.lower())


def clean_symbol(symbol: str | None) -> str:
    """Strip checkbox brackets and whitespace from a raw status marker."""
    if not symbol:
        return ""
    return symbol.replace("[", "").replace("]", "").strip()


class StatusService:
    """Maps raw status symbols onto the configured categories."""

    def __init__(self, config: AppConfig):
        self.config = config

    def category_for(self, symbol: str | None) -> str:
        """Return the category key for a raw symbol.

        A blank symbol is an open task; unknown symbols land in the fallback
        category.
        """
        cleaned = clean_symbol(symbol)
        for key, category in self.config.status_mapping.items():
            if cleaned in category.symbols or (
                cleaned == "" and any(s.strip() == "" for s in category.symbols)
            ):
                return key
        if cleaned == "" and "open" in self.config.status_mapping:
            return "open"
        return self.config.fallback_category()

    def category_for_token(self, token: str) -> str | None:
        """Find the category named by a key or alias such as 'in-progress'."""
        normalized = _normalize_token(token)
        if not normalized:
            return None
        for key, category in self.config.status_mapping.items():
            if normalized == _normalize_token(key):
                return key
            if any(normalized == _normalize_token(a) for a in category.aliases):
                return key
        return None

    def matches(self, symbol: str | None, token: str) -> bool:
        """Whether a record's symbol satisfies one status filter token.

        The token matches either as the exact symbol, or as a category
        key/alias whose configured symbols contain the record's symbol.
        """
        raw = symbol or ""
        if token == raw or (token.strip() and token.strip() == clean_symbol(raw)):
            return True

        key = self.category_for_token(token)
        if key is None:
            return False
        symbols = self.config.status_mapping[key].symbols
        if not symbols and key == self.config.fallback_category():
            return self.category_for(raw) == key
        return clean_symbol(raw) in symbols or raw in symbols

    def order_of(self, category: str) -> int:
        """Sort rank of a category; unknown or unordered categories go last."""
        status = self.config.status_mapping.get(category)
        if status is None or status.order is None:
            return len(self.config.status_mapping) + 1
        return status.order
