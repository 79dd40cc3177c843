"""Quote API fetching."""

import logging
from typing import Protocol

import requests
from pydantic import ValidationError

from mdsite.errors import SourceUnavailable
from mdsite.ingest.models import Record

logger = logging.getLogger(__name__)

USER_AGENT = "mdsite-ingest/1.0"


class Source(Protocol):
    def fetch(self) -> list[Record]: ...


class QuoteSource:
    """Fetch the latest daily quote for each tracked symbol from an Alpha Vantage style API.

    One GLOBAL_QUOTE request per symbol; the batch has exactly one record per
    symbol or the whole fetch fails with SourceUnavailable.
    """

    def __init__(self, url: str, symbols: list[str], api_key: str, timeout: float = 10.0):
        if not symbols:
            raise ValueError("QuoteSource needs at least one symbol")
        self.url = url
        self.symbols = symbols
        self.api_key = api_key
        self.timeout = timeout

    def fetch(self) -> list[Record]:
        records = [self._fetch_symbol(symbol) for symbol in self.symbols]
        logger.info(f"Fetched {len(records)} quotes from {self.url}")
        return records

    def _fetch_symbol(self, symbol: str) -> Record:
        try:
            response = requests.get(
                self.url,
                params={"function": "GLOBAL_QUOTE", "symbol": symbol, "apikey": self.api_key},
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise SourceUnavailable(f"Quote request for {symbol} failed: {e}") from e

        return parse_quote(symbol, payload)


def parse_quote(symbol: str, payload) -> Record:
    """Map a GLOBAL_QUOTE payload onto a Record. Raises SourceUnavailable on unusable payloads."""
    quote = payload.get("Global Quote") if isinstance(payload, dict) else None
    if not quote:
        # Rate limiting and bad keys come back as 200 with a "Note" or "Information" message
        detail = ""
        if isinstance(payload, dict):
            detail = payload.get("Note") or payload.get("Information") or payload.get("Error Message") or ""
        raise SourceUnavailable(f"No quote returned for {symbol}{': ' + detail if detail else ''}")

    try:
        return Record(
            date=quote["07. latest trading day"],
            key=quote.get("01. symbol") or symbol,
            value=quote["05. price"],
            volume=quote["06. volume"],
        )
    except (KeyError, ValidationError) as e:
        raise SourceUnavailable(f"Malformed quote for {symbol}: {e}") from e


def fetch_source(source: Source) -> list[Record]:
    """Fetch one batch from source. Any failure surfaces as SourceUnavailable."""
    try:
        return source.fetch()
    except SourceUnavailable:
        raise
    except Exception as e:
        raise SourceUnavailable(f"Source fetch failed: {e}") from e
