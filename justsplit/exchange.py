"""Currency exchange rates.

Rates come from a Frankfurter-compatible HTTP API. Lookups are cached per
currency pair; when the API cannot be reached an approximate fallback rate
is used and cached for a shorter time so it is retried sooner.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

import requests

from justsplit.dates import utc_now
from justsplit.domain.models import CurrencyCode

DEFAULT_API_URL = "https://api.frankfurter.app"

CACHE_VALIDITY = timedelta(hours=1)

REQUEST_TIMEOUT = 10

SUPPORTED_CURRENCIES: dict[str, tuple[str, str]] = {
    "USD": ("$", "US Dollar"),
    "EUR": ("€", "Euro"),
    "GBP": ("£", "British Pound"),
    "JPY": ("¥", "Japanese Yen"),
    "CAD": ("C$", "Canadian Dollar"),
    "AUD": ("A$", "Australian Dollar"),
    "CHF": ("Fr", "Swiss Franc"),
    "CNY": ("¥", "Chinese Yuan"),
    "INR": ("₹", "Indian Rupee"),
    "MXN": ("Mex$", "Mexican Peso"),
    "BRL": ("R$", "Brazilian Real"),
    "RUB": ("₽", "Russian Ruble"),
    "KRW": ("₩", "South Korean Won"),
    "SGD": ("S$", "Singapore Dollar"),
    "NZD": ("NZ$", "New Zealand Dollar"),
    "HKD": ("HK$", "Hong Kong Dollar"),
}

# Approximate rates, only used while the API is unavailable
FALLBACK_RATES: dict[str, dict[str, float]] = {
    "USD": {"EUR": 0.85, "GBP": 0.75, "JPY": 110, "CAD": 1.25},
    "EUR": {"USD": 1.17, "GBP": 0.88, "JPY": 130, "CAD": 1.47},
    "GBP": {"USD": 1.33, "EUR": 1.13, "JPY": 147, "CAD": 1.67},
    "JPY": {"USD": 0.009, "EUR": 0.0077, "GBP": 0.0068, "CAD": 0.011},
    "CAD": {"USD": 0.8, "EUR": 0.68, "GBP": 0.6, "JPY": 88},
}


def currency_symbol(code: CurrencyCode) -> str:
    """Get the display symbol for a currency, or the code itself if unknown."""
    entry = SUPPORTED_CURRENCIES.get(code)
    return entry[0] if entry else f"{code} "


def format_amount(amount: float, code: CurrencyCode) -> str:
    """Format an amount with its currency symbol (e.g., "$1,234.50")."""
    return f"{currency_symbol(code)}{amount:,.2f}"


def get_fallback_rate(from_currency: CurrencyCode, to_currency: CurrencyCode) -> float:
    """Get an approximate exchange rate.

    Args:
        from_currency: Currency to convert from.
        to_currency: Currency to convert to.

    Returns:
        Direct rate if known, else the inverse of the reverse rate, else 1.
    """
    if from_currency == to_currency:
        return 1.0

    direct = FALLBACK_RATES.get(from_currency, {}).get(to_currency)
    if direct:
        return float(direct)

    inverse = FALLBACK_RATES.get(to_currency, {}).get(from_currency)
    if inverse:
        return 1 / inverse

    return 1.0


def fetch_exchange_rate(
    from_currency: CurrencyCode,
    to_currency: CurrencyCode,
    api_url: str = DEFAULT_API_URL,
) -> float:
    """Fetch the latest exchange rate from the rates API.

    Args:
        from_currency: Currency to convert from.
        to_currency: Currency to convert to.
        api_url: Base URL of a Frankfurter-compatible API.

    Returns:
        Units of to_currency per unit of from_currency.

    Raises:
        requests.RequestException: If API request fails.
        KeyError: If the response has no rate for to_currency.
    """
    headers = {"Accept": "application/json"}
    params = {"from": from_currency, "to": to_currency}

    response = requests.get(f"{api_url}/latest", headers=headers, params=params, timeout=REQUEST_TIMEOUT)
    response.raise_for_status()
    return float(response.json()["rates"][to_currency])


@dataclass
class CachedRate:
    """Exchange rate and the time it was stored."""

    rate: float
    fetched_at: datetime


@dataclass
class ExchangeRateCache:
    """Per-pair exchange rate cache with fallback rates.

    Attributes:
        api_url: Base URL of the rates API.
        offline: Skip the API and use fallback rates only.
        fetch: Function used to fetch live rates.
        now: Clock used for cache expiry.
    """

    api_url: str = DEFAULT_API_URL
    offline: bool = False
    fetch: Callable[[CurrencyCode, CurrencyCode, str], float] = fetch_exchange_rate
    now: Callable[[], datetime] = utc_now
    entries: dict[tuple[str, str], CachedRate] = field(default_factory=dict)

    def get_rate(self, from_currency: CurrencyCode, to_currency: CurrencyCode) -> float:
        """Get the exchange rate between two currencies.

        Args:
            from_currency: Currency to convert from.
            to_currency: Currency to convert to.

        Returns:
            Exchange rate, from cache when fresh.

        Raises:
            ValueError: If either currency code is empty.
        """
        if not from_currency or not to_currency:
            raise ValueError(f"Invalid currency pair: {from_currency!r} -> {to_currency!r}")

        if from_currency == to_currency:
            return 1.0

        key = (from_currency, to_currency)
        cached = self.entries.get(key)
        if cached and self.now() - cached.fetched_at < CACHE_VALIDITY:
            return cached.rate

        if self.offline:
            rate = get_fallback_rate(from_currency, to_currency)
            self.entries[key] = CachedRate(rate, self.now())
            return rate

        try:
            rate = self.fetch(from_currency, to_currency, self.api_url)
        except (requests.RequestException, KeyError, ValueError):
            rate = get_fallback_rate(from_currency, to_currency)
            # Backdate fallbacks so they expire after half the usual window
            self.entries[key] = CachedRate(rate, self.now() - CACHE_VALIDITY / 2)
            return rate

        self.entries[key] = CachedRate(rate, self.now())
        return rate

    def convert(self, amount: float, from_currency: CurrencyCode, to_currency: CurrencyCode) -> float:
        """Convert an amount between currencies."""
        return convert_currency(amount, from_currency, to_currency, self)


def convert_currency(
    amount: float,
    from_currency: CurrencyCode,
    to_currency: CurrencyCode,
    rates: ExchangeRateCache,
) -> float:
    """Convert an amount from one currency to another.

    Args:
        amount: Amount in from_currency.
        from_currency: Currency of the amount.
        to_currency: Target currency.
        rates: Rate cache to look rates up in.

    Returns:
        Amount in to_currency.
    """
    if from_currency == to_currency:
        return amount
    return amount * rates.get_rate(from_currency, to_currency)
