"""Tests for justsplit.exchange."""

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
import requests

from justsplit import exchange
from justsplit.domain.models import CurrencyCode
from justsplit.exchange import (
    ExchangeRateCache,
    convert_currency,
    fetch_exchange_rate,
    format_amount,
    get_fallback_rate,
)

USD = CurrencyCode("USD")
EUR = CurrencyCode("EUR")


class FakeClock:
    def __init__(self) -> None:
        self.current = datetime(2023, 6, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


class CountingFetch:
    def __init__(self, rate: float = 0.9, error: Exception | None = None) -> None:
        self.rate = rate
        self.error = error
        self.calls: list[tuple[str, str, str]] = []

    def __call__(self, from_currency: str, to_currency: str, api_url: str) -> float:
        self.calls.append((from_currency, to_currency, api_url))
        if self.error is not None:
            raise self.error
        return self.rate


class TestFallbackRates:
    """Tests for get_fallback_rate."""

    def test_same_currency(self) -> None:
        """Should return 1 for identical currencies."""
        assert get_fallback_rate(USD, USD) == 1

    def test_direct_lookup(self) -> None:
        """Should use the direct rate when present."""
        assert get_fallback_rate(USD, EUR) == 0.85

    def test_inverse_lookup(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should invert the reverse rate when only that is known."""
        monkeypatch.setitem(exchange.FALLBACK_RATES, "SGD", {"HKD": 5.0})

        assert get_fallback_rate(CurrencyCode("HKD"), CurrencyCode("SGD")) == pytest.approx(0.2)

    def test_unknown_pair(self) -> None:
        """Should default to 1 for unknown pairs."""
        assert get_fallback_rate(CurrencyCode("CHF"), CurrencyCode("INR")) == 1


class TestFetchExchangeRate:
    """Tests for fetch_exchange_rate."""

    def test_reads_rate_from_response(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should request the pair and return the rate."""
        seen: dict[str, Any] = {}

        class FakeResponse:
            def raise_for_status(self) -> None:
                return None

            def json(self) -> dict[str, Any]:
                return {"base": "USD", "rates": {"EUR": 0.92}}

        def fake_get(url: str, **kwargs: Any) -> FakeResponse:
            seen["url"] = url
            seen.update(kwargs)
            return FakeResponse()

        monkeypatch.setattr("requests.get", fake_get)

        assert fetch_exchange_rate(USD, EUR, "https://rates.example") == 0.92
        assert seen["url"] == "https://rates.example/latest"
        assert seen["params"] == {"from": "USD", "to": "EUR"}

    def test_http_error_propagates(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should raise the HTTP error from raise_for_status."""

        class FakeResponse:
            def raise_for_status(self) -> None:
                raise requests.HTTPError("429 Too Many Requests")

        monkeypatch.setattr("requests.get", lambda url, **kwargs: FakeResponse())

        with pytest.raises(requests.HTTPError):
            fetch_exchange_rate(USD, EUR)


class TestExchangeRateCache:
    """Tests for ExchangeRateCache."""

    def test_same_currency_skips_fetch(self) -> None:
        """Should not call the API for a same-currency pair."""
        fetch = CountingFetch()
        cache = ExchangeRateCache(fetch=fetch)

        assert cache.get_rate(USD, USD) == 1
        assert fetch.calls == []

    def test_empty_currency_raises(self) -> None:
        """Should reject empty currency codes."""
        with pytest.raises(ValueError):
            ExchangeRateCache(fetch=CountingFetch()).get_rate(CurrencyCode(""), EUR)

    def test_caches_within_validity_window(self) -> None:
        """Should reuse a fresh rate and refetch after an hour."""
        fetch = CountingFetch(rate=0.9)
        clock = FakeClock()
        cache = ExchangeRateCache(api_url="https://rates.example", fetch=fetch, now=clock)

        assert cache.get_rate(USD, EUR) == 0.9
        clock.advance(minutes=59)
        assert cache.get_rate(USD, EUR) == 0.9
        assert len(fetch.calls) == 1

        clock.advance(minutes=2)
        cache.get_rate(USD, EUR)
        assert len(fetch.calls) == 2
        assert fetch.calls[0] == ("USD", "EUR", "https://rates.example")

    def test_falls_back_on_network_error(self) -> None:
        """Should use the fallback rate when the API fails."""
        fetch = CountingFetch(error=requests.ConnectionError("offline"))
        cache = ExchangeRateCache(fetch=fetch, now=FakeClock())

        assert cache.get_rate(USD, EUR) == 0.85

    def test_fallback_retried_sooner(self) -> None:
        """Should retry a fallback rate after half the validity window."""
        fetch = CountingFetch(error=KeyError("EUR"))
        clock = FakeClock()
        cache = ExchangeRateCache(fetch=fetch, now=clock)

        cache.get_rate(USD, EUR)
        clock.advance(minutes=29)
        cache.get_rate(USD, EUR)
        assert len(fetch.calls) == 1

        clock.advance(minutes=2)
        cache.get_rate(USD, EUR)
        assert len(fetch.calls) == 2

    def test_offline_uses_fallback_only(self) -> None:
        """Should never call the API when offline."""
        fetch = CountingFetch()
        cache = ExchangeRateCache(offline=True, fetch=fetch, now=FakeClock())

        assert cache.get_rate(EUR, USD) == 1.17
        assert fetch.calls == []

    def test_convert(self) -> None:
        """Should multiply by the looked-up rate."""
        cache = ExchangeRateCache(fetch=CountingFetch(rate=2.0), now=FakeClock())

        assert cache.convert(10, USD, EUR) == 20


class TestConvertCurrency:
    """Tests for convert_currency."""

    def test_same_currency_unchanged(self) -> None:
        """Should return the amount untouched for the same currency."""
        cache = ExchangeRateCache(fetch=CountingFetch(rate=2.0))

        assert convert_currency(12.5, EUR, EUR, cache) == 12.5


class TestFormatAmount:
    """Tests for format_amount."""

    def test_known_symbol(self) -> None:
        """Should prefix the currency symbol."""
        assert format_amount(1234.5, USD) == "$1,234.50"

    def test_unknown_currency_uses_code(self) -> None:
        """Should fall back to the code for unknown currencies."""
        assert format_amount(3, CurrencyCode("XYZ")) == "XYZ 3.00"
