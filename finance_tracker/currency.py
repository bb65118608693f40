"""Display currencies and amount formatting.

The selected currency only changes how an amount is shown.  No conversion
is ever applied: every stored amount is in the user's single home currency.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Union

from .config import DEFAULT_CURRENCY


@dataclass(frozen=True)
class Currency:
    code: str
    name: str
    symbol: str
    locale: str


SUPPORTED_CURRENCIES: List[Currency] = [
    Currency('USD', 'US Dollar', '$', 'en-US'),
    Currency('EUR', 'Euro', '€', 'de-DE'),
    Currency('GBP', 'British Pound', '£', 'en-GB'),
    Currency('JPY', 'Japanese Yen', '¥', 'ja-JP'),
    Currency('CAD', 'Canadian Dollar', 'C$', 'en-CA'),
    Currency('AUD', 'Australian Dollar', 'A$', 'en-AU'),
    Currency('CHF', 'Swiss Franc', 'CHF', 'de-CH'),
    Currency('CNY', 'Chinese Yuan', '¥', 'zh-CN'),
    Currency('INR', 'Indian Rupee', '₹', 'en-IN'),
    Currency('BRL', 'Brazilian Real', 'R$', 'pt-BR'),
    Currency('KRW', 'South Korean Won', '₩', 'ko-KR'),
    Currency('MXN', 'Mexican Peso', '$', 'es-MX'),
    Currency('SGD', 'Singapore Dollar', 'S$', 'en-SG'),
    Currency('HKD', 'Hong Kong Dollar', 'HK$', 'en-HK'),
    Currency('NOK', 'Norwegian Krone', 'kr', 'nb-NO'),
    Currency('SEK', 'Swedish Krona', 'kr', 'sv-SE'),
    Currency('DKK', 'Danish Krone', 'kr', 'da-DK'),
    Currency('PLN', 'Polish Złoty', 'zł', 'pl-PL'),
    Currency('RUB', 'Russian Ruble', '₽', 'ru-RU'),
    Currency('ZAR', 'South African Rand', 'R', 'en-ZA'),
    Currency('TRY', 'Turkish Lira', '₺', 'tr-TR'),
    Currency('NZD', 'New Zealand Dollar', 'NZ$', 'en-NZ'),
    Currency('THB', 'Thai Baht', '฿', 'th-TH'),
    Currency('MYR', 'Malaysian Ringgit', 'RM', 'ms-MY'),
    Currency('IDR', 'Indonesian Rupiah', 'Rp', 'id-ID'),
    Currency('PHP', 'Philippine Peso', '₱', 'en-PH'),
    Currency('VND', 'Vietnamese Dong', '₫', 'vi-VN'),
    Currency('AED', 'UAE Dirham', 'د.إ', 'ar-AE'),
    Currency('SAR', 'Saudi Riyal', '﷼', 'ar-SA'),
    Currency('EGP', 'Egyptian Pound', '£', 'ar-EG'),
    Currency('ILS', 'Israeli Shekel', '₪', 'he-IL'),
]

_BY_CODE: Dict[str, Currency] = {currency.code: currency for currency in SUPPORTED_CURRENCIES}

# Currencies displayed without minor units
ZERO_DECIMAL_CURRENCIES = {'JPY', 'KRW', 'VND'}


def get_currency(currency_code: str) -> Currency:
    """Look up a supported currency, falling back to US dollars."""
    return _BY_CODE.get(currency_code) or _BY_CODE['USD']


def format_currency(amount: Union[float, int], currency_code: str = DEFAULT_CURRENCY) -> str:
    """Format an amount for display in the given currency.

    Args:
        amount: The amount to format
        currency_code: ISO code of the display currency; unknown codes use USD

    Returns:
        Formatted currency string with the symbol first

    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(-1234.5, 'EUR')
        '-€1,234.50'
        >>> format_currency(1234.56, 'JPY')
        '¥1,235'
    """
    currency = get_currency(currency_code)
    digits = 0 if currency.code in ZERO_DECIMAL_CURRENCIES else 2
    formatted = f"{abs(amount):,.{digits}f}"
    sign = '-' if amount < 0 else ''
    return f"{sign}{currency.symbol}{formatted}"


def get_currency_symbol(currency_code: str) -> str:
    currency = _BY_CODE.get(currency_code)
    return currency.symbol if currency else '$'


def get_currency_name(currency_code: str) -> str:
    currency = _BY_CODE.get(currency_code)
    return currency.name if currency else 'US Dollar'
