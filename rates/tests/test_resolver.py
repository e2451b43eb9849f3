from decimal import Decimal
from unittest import mock

import pytest

from core.exceptions import RateUnavailable
from rates.models import ExchangeRate, ExchangeRateHistory, RateSource
from rates.services import refresh
from rates.services.refresh import clear_rate, refresh_rates, set_rate
from rates.services.resolver import FALLBACK_SOURCE, resolve, resolve_rate


def test_manual_rate_wins_over_external(db):
    set_rate("USD", "CUP", "400", source=RateSource.PRIMARY)
    set_rate("USD", "CUP", "390", source=RateSource.SECONDARY)
    set_rate("USD", "CUP", "435", source=RateSource.MANUAL)

    resolved = resolve("USD", "CUP")

    assert resolved.rate == Decimal("435")
    assert resolved.source == RateSource.MANUAL


def test_primary_before_secondary(db):
    set_rate("USD", "CUP", "390", source=RateSource.SECONDARY)
    set_rate("USD", "CUP", "400", source=RateSource.PRIMARY)

    assert resolve_rate("USD", "CUP") == Decimal("400")


def test_clearing_manual_falls_back_to_next_source(db):
    set_rate("USD", "CUP", "435", source=RateSource.MANUAL)
    set_rate("USD", "CUP", "400", source=RateSource.PRIMARY)

    assert clear_rate("USD", "CUP", source=RateSource.MANUAL) == 1
    assert resolve_rate("USD", "CUP") == Decimal("400")


def test_non_usd_base_uses_multiplier_when_missing(db):
    set_rate("USD", "CUP", "400", source=RateSource.MANUAL)

    resolved = resolve("EUR", "CUP")

    assert resolved.rate == Decimal("420.0000")
    assert resolved.source == FALLBACK_SOURCE


def test_usd_has_no_fallback(db):
    with pytest.raises(RateUnavailable) as exc:
        resolve("USD", "CUP")

    assert exc.value.status_code == 503
    assert exc.value.detail["currency_pair"] == "USD/CUP"


def test_resolution_is_read_only(db):
    set_rate("USD", "CUP", "400", source=RateSource.MANUAL)
    before = ExchangeRate.objects.count()

    resolve("MLC", "CUP")

    assert ExchangeRate.objects.count() == before
    assert ExchangeRateHistory.objects.count() == 0


def test_rate_change_writes_history(db, staff_admin):
    set_rate("USD", "CUP", "430", actor=staff_admin)
    set_rate("USD", "CUP", "435", actor=staff_admin)

    history = ExchangeRateHistory.objects.get()
    assert history.previous_rate == Decimal("430")
    assert history.new_rate == Decimal("435")
    assert history.changed_by == staff_admin


def test_same_value_writes_no_history(db):
    set_rate("USD", "CUP", "430")
    set_rate("USD", "CUP", "430.0000")

    assert ExchangeRateHistory.objects.count() == 0


def test_history_is_append_only(db):
    from django.core.exceptions import ValidationError

    set_rate("USD", "CUP", "430")
    set_rate("USD", "CUP", "431")
    history = ExchangeRateHistory.objects.get()

    with pytest.raises(ValidationError):
        history.delete()
    with pytest.raises(ValidationError):
        ExchangeRateHistory.objects.update(new_rate=Decimal("1"))


def test_refresh_rejects_whole_batch_on_bad_quote(db):
    from rest_framework.exceptions import ValidationError

    with pytest.raises(ValidationError):
        refresh_rates({"USD": "400", "EUR": "-3"}, source=RateSource.PRIMARY)

    assert ExchangeRate.objects.count() == 0


def test_refresh_rejects_manual_source(db):
    from rest_framework.exceptions import ValidationError

    with pytest.raises(ValidationError):
        refresh_rates({"USD": "400"}, source=RateSource.MANUAL)


def test_refresh_persists_quotes(db):
    rates = refresh_rates({"USD": Decimal("400"), "EUR": "450"}, source=RateSource.PRIMARY)

    assert set(rates) == {"USD", "EUR"}
    assert resolve_rate("EUR", "CUP") == Decimal("450")


def test_concurrent_first_write_updates_winning_row(db):
    """Deux premières écritures simultanées : la perdante met à jour la gagnante."""
    set_rate("USD", "CUP", "430")
    real_lookup = refresh._locked_active
    calls = []

    def lookup(*args):
        calls.append(args)
        # premier appel : la ligne concurrente n'est pas encore visible
        return None if len(calls) == 1 else real_lookup(*args)

    with mock.patch.object(refresh, "_locked_active", side_effect=lookup):
        rate = set_rate("USD", "CUP", "440")

    assert len(calls) == 2
    assert ExchangeRate.objects.filter(base_currency="USD", source=RateSource.MANUAL).count() == 1
    assert rate.rate == Decimal("440.0000")
    history = ExchangeRateHistory.objects.get()
    assert history.previous_rate == Decimal("430.0000")
    assert history.new_rate == Decimal("440.0000")
