from datetime import datetime
from babel.numbers import format_currency as babel_format_currency
from babel.dates import format_datetime as babel_format_datetime

def format_currency(value: float, currency: str = 'USD', locale_str: str = 'en_US') -> str:
    return babel_format_currency(value, currency, locale=locale_str)

def format_order_date(date: datetime, locale_str: str = 'en_US') -> str:
    return babel_format_datetime(date, "MM/dd/yyyy HH:mm", locale=locale_str)
