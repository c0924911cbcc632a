import math

import pytest

from earnings import CalculationInput, compute, format_amount


def make_input(**overrides):
    values = dict(
        total_earnings=750.0,
        service_fee_percentage=10.0,
        gst_percentage=18.0,
        withholding_tax_percentage=1.0,
        withdrawal_fee=1.0,
        exchange_rate=81.0,
    )
    values.update(overrides)
    return CalculationInput(**values)


def test_default_scenario():
    result = compute(make_input())
    assert result.service_fee == 75
    assert result.gst_on_service_fee == 13.5
    assert result.withholding_tax == 7.5
    assert result.withdrawal_fee_charge == 1
    assert result.total_deductions == 97
    assert result.net_earnings == 52893


def test_zero_fees():
    result = compute(CalculationInput(1000.0, 0.0, 0.0, 0.0, 0.0, 1.0))
    assert result.total_deductions == 0
    assert result.net_earnings == 1000


def test_no_deductions_is_plain_conversion():
    result = compute(make_input(service_fee_percentage=0.0, gst_percentage=0.0,
                                withholding_tax_percentage=0.0, withdrawal_fee=0.0,
                                total_earnings=1234.56, exchange_rate=0.92))
    assert result.net_earnings == 1234.56 * 0.92


def test_gst_applies_to_service_fee_not_gross():
    result = compute(make_input(service_fee_percentage=0.0))
    assert result.gst_on_service_fee == 0


def test_withdrawal_fee_is_not_converted():
    with_fee = compute(make_input(withdrawal_fee=1.0))
    without_fee = compute(make_input(withdrawal_fee=0.0))
    assert without_fee.net_earnings - with_fee.net_earnings == pytest.approx(81.0)


def test_doubling_earnings_doubles_net():
    single = compute(make_input(withdrawal_fee=0.0))
    double = compute(make_input(withdrawal_fee=0.0, total_earnings=1500.0))
    assert double.net_earnings == pytest.approx(2 * single.net_earnings)


def test_net_is_linear_in_exchange_rate():
    base = compute(make_input(exchange_rate=1.0))
    for rate in (0.5, 2.0, 81.0, 133.7):
        result = compute(make_input(exchange_rate=rate))
        assert result.total_deductions == base.total_deductions
        assert result.net_earnings == pytest.approx(base.net_earnings * rate)


@pytest.mark.parametrize("field", [
    "service_fee_percentage",
    "gst_percentage",
    "withholding_tax_percentage",
    "withdrawal_fee",
])
def test_deductions_non_negative_and_non_decreasing(field):
    previous = None
    for value in (0.0, 0.5, 1.0, 10.0, 50.0, 100.0):
        result = compute(make_input(**{field: value}))
        assert result.total_deductions >= 0
        if previous is not None:
            assert result.total_deductions >= previous
        previous = result.total_deductions


def test_each_call_is_independent():
    first = compute(make_input(total_earnings=100.0))
    compute(make_input(total_earnings=99999.0))
    again = compute(make_input(total_earnings=100.0))
    assert first == again


def test_line_items_order():
    result = compute(make_input())
    items = list(result.line_items())
    assert [label for label, _ in items] == [
        "Total earnings",
        "Service fee",
        "GST on service fee",
        "Withholding tax",
        "Withdrawal fee",
        "Total deductions",
        "Net before conversion",
    ]
    assert items[-1][1] == 653


def test_nan_input_gives_non_finite_result():
    result = compute(make_input(total_earnings=math.nan))
    assert not result.is_finite
    assert compute(make_input()).is_finite


def test_format_amount_rounds_for_display_only():
    result = compute(make_input(total_earnings=100.0, service_fee_percentage=3.333,
                                gst_percentage=0.0, withholding_tax_percentage=0.0,
                                withdrawal_fee=0.0, exchange_rate=1.0))
    assert result.service_fee == pytest.approx(3.333)
    assert format_amount(result.service_fee, "USD") == "USD 3.33"
    assert format_amount(52893, "INR") == "INR 52,893.00"
