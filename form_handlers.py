import logging

from flask import Flask, render_template, request

from earnings import format_amount
from fields import (
    CURRENCIES,
    DEFAULT_DESTINATION_CURRENCY,
    DEFAULT_FIELDS,
    DEFAULT_SOURCE_CURRENCY,
    FIELD_NAMES,
    FIELDS,
    RATE_HELP_URL,
    FieldError,
    calculate,
    resolve_currency,
)

logger = logging.getLogger(__name__)

app = Flask(__name__)


def render_form(values, source, destination, result=None, error=None):
    return render_template(
        'index.html',
        fields=FIELDS,
        values=values,
        currencies=CURRENCIES,
        source=source,
        destination=destination,
        rate_help_url=RATE_HELP_URL,
        result=result,
        error=error,
        format_amount=format_amount,
    )


@app.route('/', methods=['GET'])
def index():
    return render_form(dict(DEFAULT_FIELDS), DEFAULT_SOURCE_CURRENCY, DEFAULT_DESTINATION_CURRENCY)


@app.route('/calculate', methods=['POST'])
def calculate_earnings():
    values = {name: request.form.get(name, '') for name in FIELD_NAMES}
    source = resolve_currency(request.form.get('source_currency'), DEFAULT_SOURCE_CURRENCY)
    destination = resolve_currency(request.form.get('destination_currency'), DEFAULT_DESTINATION_CURRENCY)
    try:
        result = calculate(values)
    except FieldError as e:
        return render_form(values, source, destination, error=str(e)), 400
    return render_form(values, source, destination, result=result)


if __name__ == '__main__':
    app.run(debug=True)
