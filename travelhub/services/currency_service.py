"""Currency conversion with cached exchange rates."""

import time
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

import httpx

from travelhub.config import get_settings
from travelhub.utils.logger import get_logger

logger = get_logger(__name__)


# =============================================================================
# Currencies
# =============================================================================


@dataclass(frozen=True)
class CurrencyInfo:
    """Supported currency."""

    code: str
    name: str
    symbol: str


SUPPORTED_CURRENCIES: list[CurrencyInfo] = [
    CurrencyInfo("USD", "US Dollar", "$"),
    CurrencyInfo("EUR", "Euro", "€"),
    CurrencyInfo("GBP", "British Pound", "£"),
    CurrencyInfo("JPY", "Japanese Yen", "¥"),
    CurrencyInfo("CNY", "Chinese Yuan", "¥"),
    CurrencyInfo("AUD", "Australian Dollar", "A$"),
    CurrencyInfo("CAD", "Canadian Dollar", "C$"),
    CurrencyInfo("CHF", "Swiss Franc", "CHF"),
    CurrencyInfo("INR", "Indian Rupee", "₹"),
    CurrencyInfo("MXN", "Mexican Peso", "MX$"),
    CurrencyInfo("BRL", "Brazilian Real", "R$"),
    CurrencyInfo("ZAR", "South African Rand", "R"),
    CurrencyInfo("KRW", "South Korean Won", "₩"),
    CurrencyInfo("SGD", "Singapore Dollar", "S$"),
    CurrencyInfo("NZD", "New Zealand Dollar", "NZ$"),
    CurrencyInfo("HKD", "Hong Kong Dollar", "HK$"),
    CurrencyInfo("NOK", "Norwegian Krone", "kr"),
    CurrencyInfo("SEK", "Swedish Krona", "kr"),
    CurrencyInfo("DKK", "Danish Krone", "kr"),
    CurrencyInfo("AED", "UAE Dirham", "AED"),
]

_CURRENCIES_BY_CODE = {c.code: c for c in SUPPORTED_CURRENCIES}

BASE_CURRENCY = "USD"


def get_currency_symbol(currency: str) -> str:
    info = _CURRENCIES_BY_CODE.get(currency)
    return info.symbol if info else currency


def get_currency_name(currency: str) -> str:
    info = _CURRENCIES_BY_CODE.get(currency)
    return info.name if info else currency


def is_currency_supported(currency: str) -> bool:
    return currency in _CURRENCIES_BY_CODE


def format_amount(amount: Decimal, currency: str) -> str:
    """Format an amount with its currency symbol, e.g. ``$1,234.50``."""
    return f"{get_currency_symbol(currency)}{amount:,.2f}"


# =============================================================================
# Exchange Rates
# =============================================================================


@dataclass
class ExchangeRates:
    """Rates relative to a base currency."""

    base: str
    rates: dict[str, Decimal] = field(default_factory=dict)
    fetched_at: float = field(default_factory=time.monotonic)

    def rate_for(self, currency: str) -> Decimal:
        # Unknown currencies convert 1:1
        return self.rates.get(currency) or Decimal("1")


class CurrencyService:
    """
    Async exchange rate client with an in-memory cache.

    Usage:
        async with CurrencyService() as service:
            eur = await service.convert(Decimal("100"), "USD", "EUR")

    When the rate API fails, an expired cache entry is used, and without one
    all rates fall back to 1:1.
    """

    def __init__(
        self,
        api_url: str | None = None,
        cache_seconds: int | None = None,
        timeout: int | None = None,
    ):
        settings = get_settings().currency
        self.api_url = api_url or settings.api_url
        self.cache_seconds = cache_seconds if cache_seconds is not None else settings.cache_seconds
        self.timeout = timeout or settings.timeout_seconds
        self._client: httpx.AsyncClient | None = None
        self._cache: ExchangeRates | None = None

    async def __aenter__(self) -> "CurrencyService":
        """Async context manager entry."""
        self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get HTTP client, raise if not initialized."""
        if self._client is None:
            raise RuntimeError("Client not initialized. Use 'async with CurrencyService()' context.")
        return self._client

    def _is_fresh(self, rates: ExchangeRates) -> bool:
        return time.monotonic() - rates.fetched_at < self.cache_seconds

    async def get_exchange_rates(self) -> ExchangeRates:
        """
        Get USD-based exchange rates (cached).

        Returns:
            Fresh rates, else stale cached rates, else 1:1 fallback rates
        """
        cached = self._cache
        if cached is not None and self._is_fresh(cached):
            return cached

        try:
            response = await self.client.get(self.api_url)
            response.raise_for_status()
            data = response.json()

            rates = ExchangeRates(
                base=BASE_CURRENCY,
                rates={code: Decimal(str(value)) for code, value in data["rates"].items()},
            )
            self._cache = rates
            logger.info("exchange_rates_fetched", count=len(rates.rates))
            return rates

        except (httpx.HTTPError, KeyError, ValueError, InvalidOperation) as e:
            logger.error("exchange_rates_fetch_error", error=str(e))

            if cached is not None:
                logger.warning("using_expired_exchange_rates")
                return cached

            logger.warning("using_fallback_exchange_rates")
            return self.fallback_rates()

    @staticmethod
    def fallback_rates() -> ExchangeRates:
        """1:1 rates for every supported currency."""
        return ExchangeRates(
            base=BASE_CURRENCY,
            rates={c.code: Decimal("1") for c in SUPPORTED_CURRENCIES},
        )

    async def convert(self, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
        """
        Convert an amount between currencies via USD.

        Returns:
            Converted amount rounded to 2 decimals
        """
        if from_currency == to_currency:
            return amount

        rates = await self.get_exchange_rates()

        usd_amount = amount if from_currency == BASE_CURRENCY else amount / rates.rate_for(from_currency)
        target = usd_amount if to_currency == BASE_CURRENCY else usd_amount * rates.rate_for(to_currency)

        return target.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    async def get_rate(self, from_currency: str, to_currency: str) -> Decimal:
        """Cross rate between two currencies."""
        if from_currency == to_currency:
            return Decimal("1")

        rates = await self.get_exchange_rates()
        return rates.rate_for(to_currency) / rates.rate_for(from_currency)
