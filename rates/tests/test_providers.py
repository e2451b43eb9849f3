from decimal import Decimal
from unittest import mock

import requests
from django.test import SimpleTestCase, override_settings

from rates import providers


class ParseQuotesTestCase(SimpleTestCase):

    def test_json_flat_and_nested(self):
        self.assertEqual(
            providers.parse_json_quotes({"USD": "390", "EUR": 420}),
            {"USD": Decimal("390"), "EUR": Decimal("420")},
        )
        self.assertEqual(
            providers.parse_json_quotes({"tasas": {"MLC": "250"}}),
            {"MLC": Decimal("250")},
        )

    def test_json_implausible_values_dropped(self):
        quotes = providers.parse_json_quotes({"USD": "39", "EUR": "abc", "MLC": "250"})

        self.assertEqual(quotes, {"MLC": Decimal("250")})

    def test_html_patterns(self):
        html = "<p>Hoy 1 USD = 395 CUP, 1 EUR = 410,5 CUP y MLC: 260 CUP</p>"

        self.assertEqual(
            providers.parse_html_quotes(html),
            {"USD": Decimal("395"), "EUR": Decimal("410.5"), "MLC": Decimal("260")},
        )


@override_settings(RATE_PROVIDERS={
    "PRIMARY_URL": "https://rates.example/api",
    "PRIMARY_TOKEN": "secret",
    "SECONDARY_URL": "https://news.example/economia",
    "TIMEOUT": 5,
})
class FetchTestCase(SimpleTestCase):

    @mock.patch("rates.providers.requests.get")
    def test_primary_sends_bearer_token(self, get):
        get.return_value = mock.Mock(status_code=200, json=lambda: {"USD": "400"})

        self.assertEqual(providers.fetch_primary(), {"USD": Decimal("400")})
        self.assertEqual(get.call_args.kwargs["headers"]["Authorization"], "Bearer secret")

    @mock.patch("rates.providers.requests.get", side_effect=requests.Timeout("lent"))
    def test_network_failure_returns_empty(self, get):
        self.assertEqual(providers.fetch_primary(), {})
        self.assertEqual(providers.fetch_secondary(), {})

    @mock.patch("rates.providers.requests.get")
    def test_http_error_returns_empty(self, get):
        get.return_value = mock.Mock(status_code=502, text="")

        self.assertEqual(providers.fetch_secondary(), {})

    @override_settings(RATE_PROVIDERS={"PRIMARY_URL": "x", "PRIMARY_TOKEN": "", "TIMEOUT": 5})
    @mock.patch("rates.providers.requests.get")
    def test_primary_skipped_without_token(self, get):
        self.assertEqual(providers.fetch_primary(), {})
        get.assert_not_called()
