import logging
import math
import os
import re

from earnings import CalculationInput, compute

logger = logging.getLogger(__name__)

# --- Config ---
DEFAULT_SOURCE_CURRENCY = "USD"
DEFAULT_DESTINATION_CURRENCY = "INR"
CURRENCIES = ("USD", "EUR", "GBP", "INR", "AUD", "CAD", "SGD", "AED", "JPY", "PHP")

RATE_HELP_URL = os.environ.get(
    "EARNINGS_RATE_HELP_URL", "https://www.xe.com/currencyconverter/"
)

# (name, label, placeholder) in display order
FIELDS = [
    ("total_earnings", "Total Earnings", "e.g., 750"),
    ("service_fee_percentage", "Service Fee (%)", "e.g., 10"),
    ("gst_percentage", "GST (%)", "e.g., 18"),
    ("withholding_tax_percentage", "Withholding Tax (%)", "e.g., 1"),
    ("withdrawal_fee", "Withdrawal Fee", "e.g., 1"),
    ("exchange_rate", "Exchange Rate", "e.g., 81"),
]
FIELD_NAMES = [name for name, _, _ in FIELDS]
FIELD_LABELS = {name: label for name, label, _ in FIELDS}

ACCEPTED_TEXT = re.compile(r"\d*\.?\d*")
# At least one digit, so a lone "." is rejected at parse time
AMOUNT = re.compile(r"\d+\.?\d*|\.\d+")

FALLBACK_EXCHANGE_RATE = "81"


def default_exchange_rate(value):
    value = value.strip()
    if ACCEPTED_TEXT.fullmatch(value) is None:
        logger.warning("Ignoring default exchange rate %r, using %s", value, FALLBACK_EXCHANGE_RATE)
        return FALLBACK_EXCHANGE_RATE
    return value


# Blank exchange rate means the user has to look one up before calculating
DEFAULT_FIELDS = {
    "total_earnings": "750",
    "service_fee_percentage": "10",
    "gst_percentage": "18",
    "withholding_tax_percentage": "1",
    "withdrawal_fee": "1",
    "exchange_rate": default_exchange_rate(
        os.environ.get("EARNINGS_DEFAULT_EXCHANGE_RATE", FALLBACK_EXCHANGE_RATE)
    ),
}


class FieldError(ValueError):
    def __init__(self, field, message):
        super().__init__(message)
        self.field = field


class MissingExchangeRateError(FieldError):
    pass


class InvalidAmountError(FieldError):
    pass


def accepts_text(text):
    """Keystroke filter: empty, or digits with at most one decimal point."""
    return ACCEPTED_TEXT.fullmatch(text) is not None


def parse_amount(field, text):
    text = (text or "").strip()
    if field == "exchange_rate" and not text:
        raise MissingExchangeRateError(field, "Please enter the exchange rate.")
    label = FIELD_LABELS[field]
    if not text:
        raise InvalidAmountError(field, f"{label} is required.")
    if not AMOUNT.fullmatch(text):
        raise InvalidAmountError(field, f"{label} must be a non-negative number, got {text!r}.")
    amount = float(text)
    if not math.isfinite(amount):
        raise InvalidAmountError(field, f"{label} is too large.")
    return amount


def parse_fields(fields):
    """Build a fresh CalculationInput from raw form text.

    Raises MissingExchangeRateError when the rate is blank and
    InvalidAmountError for any other blank or malformed field.
    """
    values = {}
    for name in FIELD_NAMES:
        try:
            values[name] = parse_amount(name, fields.get(name))
        except FieldError as e:
            logger.info("Rejected %s: %s", name, e)
            raise
    return CalculationInput(**values)


def calculate(fields):
    values = parse_fields(fields)
    result = compute(values)
    logger.debug("Calculated %s -> %s", values, result)
    if not result.is_finite:
        # Finite inputs can still overflow once multiplied
        logger.info("Non-finite result for %s", values)
        raise InvalidAmountError(None, "These amounts are too large to calculate.")
    return result


def resolve_currency(code, default):
    code = (code or "").strip().upper()
    if code in CURRENCIES:
        return code
    logger.warning("Unknown currency %r, using %s", code, default)
    return default
