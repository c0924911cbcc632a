import logging
from typing import NamedTuple, Optional

import pandas as pd
from shiny import App, Inputs, Outputs, Session, reactive, render, req, ui

from earnings import CalculationResult, format_amount
from fields import (
    CURRENCIES,
    DEFAULT_DESTINATION_CURRENCY,
    DEFAULT_FIELDS,
    DEFAULT_SOURCE_CURRENCY,
    FIELD_NAMES,
    FIELDS,
    RATE_HELP_URL,
    FieldError,
    MissingExchangeRateError,
    accepts_text,
    calculate,
)

logger = logging.getLogger(__name__)


def breakdown_frame(result, source, destination):
    rows = [{"Item": label, "Amount": format_amount(amount, source)} for label, amount in result.line_items()]
    rows.append({"Item": "Exchange rate", "Amount": f"1 {source} = {result.exchange_rate:g} {destination}"})
    rows.append({"Item": "Net deposited", "Amount": format_amount(result.net_earnings, destination)})
    return pd.DataFrame(rows)


class CalculationOutcome(NamedTuple):
    result: Optional[CalculationResult] = None
    error: Optional[str] = None
    prompt: Optional[str] = None


def echo_keystroke(accepted, name, text):
    """New accepted snapshot, or None when the keystroke is dropped."""
    if not accepts_text(text):
        return None
    return {**accepted, name: text}


def run_calculation(fields):
    # A missing rate blocks with a prompt; other field errors show inline
    try:
        return CalculationOutcome(result=calculate(fields))
    except MissingExchangeRateError as e:
        return CalculationOutcome(prompt=str(e))
    except FieldError as e:
        return CalculationOutcome(error=str(e))


def reset_values():
    return dict(DEFAULT_FIELDS), DEFAULT_SOURCE_CURRENCY, DEFAULT_DESTINATION_CURRENCY


def field_input(name, label, placeholder):
    control = ui.input_text(name, label, value=DEFAULT_FIELDS[name], placeholder=placeholder, width="100%")
    if name != "exchange_rate":
        return control
    return ui.div(
        control,
        ui.a("Look up today's exchange rate", href=RATE_HELP_URL, target="_blank", rel="noopener"),
        class_="mb-3",
    )


# --- UI ---
app_ui = ui.page_fluid(
    ui.h2("Freelance Earnings Calculator"),
    ui.layout_columns(
        ui.input_select("source_currency", "From", choices=list(CURRENCIES), selected=DEFAULT_SOURCE_CURRENCY),
        ui.input_select("destination_currency", "To", choices=list(CURRENCIES), selected=DEFAULT_DESTINATION_CURRENCY),
    ),
    *[field_input(name, label, placeholder) for name, label, placeholder in FIELDS],
    ui.layout_columns(
        ui.input_action_button("calculate", "Calculate", class_="btn-primary w-100"),
        ui.input_action_button("reset", "Reset", class_="w-100"),
    ),
    ui.output_ui("error"),
    ui.output_ui("net_result"),
    ui.accordion(
        ui.accordion_panel("Show breakdown", ui.output_table("breakdown")),
        id="details",
        open=False,
    ),
)


# --- Server ---
def server(input: Inputs, output: Outputs, session: Session):
    accepted = reactive.value(dict(DEFAULT_FIELDS))
    result = reactive.value(None)
    error_msg = reactive.value(None)

    def echo(name):
        @reactive.effect
        @reactive.event(input[name], ignore_init=True)
        def _():
            current = accepted()
            updated = echo_keystroke(current, name, input[name]())
            if updated is None:
                # Drop the keystroke
                ui.update_text(name, value=current[name])
            else:
                accepted.set(updated)

    for name in FIELD_NAMES:
        echo(name)

    @reactive.effect
    @reactive.event(input.calculate)
    def _():
        outcome = run_calculation(accepted())
        result.set(outcome.result)
        error_msg.set(outcome.error)
        if outcome.prompt is not None:
            ui.modal_show(ui.modal(outcome.prompt, title="Exchange rate required", easy_close=True))

    @reactive.effect
    @reactive.event(input.reset)
    def _():
        values, source, destination = reset_values()
        accepted.set(values)
        for name in FIELD_NAMES:
            ui.update_text(name, value=values[name])
        ui.update_select("source_currency", selected=source)
        ui.update_select("destination_currency", selected=destination)
        result.set(None)
        error_msg.set(None)

    @render.ui
    def error():
        msg = error_msg()
        if msg is None:
            return None
        return ui.p(msg, class_="text-danger")

    @render.ui
    def net_result():
        outcome = result()
        if outcome is None:
            return None
        if not outcome.is_finite:
            logger.warning("Non-finite result: %s", outcome)
            return ui.p("Could not calculate with these values.", class_="text-danger")
        amount = format_amount(outcome.net_earnings, input.destination_currency())
        return ui.p(f"Net amount deposited in your bank account: {amount}", class_="lead mt-3")

    @render.table
    def breakdown():
        outcome = result()
        req(outcome is not None and outcome.is_finite)
        return breakdown_frame(outcome, input.source_currency(), input.destination_currency())


# --- App ---
app = App(app_ui, server)
