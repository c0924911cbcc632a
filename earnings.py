import math
from dataclasses import dataclass


@dataclass(frozen=True)
class CalculationInput:
    total_earnings: float
    service_fee_percentage: float
    gst_percentage: float
    withholding_tax_percentage: float
    withdrawal_fee: float
    exchange_rate: float


@dataclass(frozen=True)
class CalculationResult:
    """Line items for one calculation. Amounts are unrounded."""

    total_earnings: float
    service_fee: float
    gst_on_service_fee: float
    withholding_tax: float
    withdrawal_fee_charge: float
    total_deductions: float
    exchange_rate: float
    net_earnings: float

    @property
    def net_before_conversion(self):
        return self.total_earnings - self.total_deductions

    @property
    def is_finite(self):
        return math.isfinite(self.net_earnings)

    def line_items(self):
        # Source currency, in display order
        yield "Total earnings", self.total_earnings
        yield "Service fee", self.service_fee
        yield "GST on service fee", self.gst_on_service_fee
        yield "Withholding tax", self.withholding_tax
        yield "Withdrawal fee", self.withdrawal_fee_charge
        yield "Total deductions", self.total_deductions
        yield "Net before conversion", self.net_before_conversion


def compute(values: CalculationInput) -> CalculationResult:
    service_fee = values.total_earnings * values.service_fee_percentage / 100
    gst_on_service_fee = service_fee * values.gst_percentage / 100
    withholding_tax = values.total_earnings * values.withholding_tax_percentage / 100
    total_deductions = service_fee + gst_on_service_fee + withholding_tax + values.withdrawal_fee
    net_earnings = (values.total_earnings - total_deductions) * values.exchange_rate
    return CalculationResult(
        total_earnings=values.total_earnings,
        service_fee=service_fee,
        gst_on_service_fee=gst_on_service_fee,
        withholding_tax=withholding_tax,
        withdrawal_fee_charge=values.withdrawal_fee,
        total_deductions=total_deductions,
        exchange_rate=values.exchange_rate,
        net_earnings=net_earnings,
    )


def format_amount(value, currency):
    return f"{currency} {value:,.2f}"
