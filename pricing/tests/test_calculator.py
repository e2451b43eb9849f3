from decimal import Decimal
from types import SimpleNamespace

import pytest
from rest_framework.exceptions import ValidationError

from core.exceptions import NoTierForAmount
from pricing.calculator import calculate, select_tier
from pricing.config import PricingConfig

CONFIG = PricingConfig(
    local_discount_per_unit=Decimal("15"),
    hard_currency_fee_percent=Decimal("5"),
    default_reseller_rate=Decimal("2"),
    min_amount=Decimal("10"),
    max_amount=Decimal("10000"),
)


def make_tier(name, range_min, range_max, percentage, fixed_fee, active=True):
    return SimpleNamespace(
        name=name,
        range_min=Decimal(range_min),
        range_max=Decimal(range_max) if range_max is not None else None,
        percentage=Decimal(percentage),
        fixed_fee=Decimal(fixed_fee),
        active=active,
    )


OPEN_TIER = [make_tier("Standard", "0", None, "3", "2")]


def test_local_delivery_amounts():
    quote = calculate(Decimal("100"), "LOCAL", OPEN_TIER, Decimal("435"), CONFIG)

    assert quote.total_commission == Decimal("5.00")
    assert quote.total_charged == Decimal("105.00")
    assert quote.delivery_amount == Decimal("42000.00")
    assert quote.delivery_currency == "CUP"
    assert quote.exchange_rate == Decimal("435")
    assert quote.platform_commission is None
    assert quote.reseller_commission is None


def test_hard_delivery_uses_flat_fee_without_tiers():
    quote = calculate(Decimal("200"), "HARD", [], Decimal("435"), CONFIG)

    assert quote.delivery_amount == Decimal("200.00")
    assert quote.delivery_currency == "USD"
    assert quote.commission_percentage == Decimal("5.00")
    assert quote.commission_fixed == Decimal("0.00")
    assert quote.total_commission == Decimal("10.00")
    assert quote.total_charged == Decimal("210.00")


def test_reseller_split_takes_share_of_commission():
    quote = calculate(
        Decimal("100"), "LOCAL", OPEN_TIER, Decimal("435"), CONFIG,
        reseller_rate=Decimal("2"),
    )

    assert quote.reseller_commission == Decimal("2.00")
    assert quote.platform_commission == Decimal("3.00")
    # Le client ne paie pas deux fois
    assert quote.total_charged == Decimal("105.00")
    assert quote.reseller_commission + quote.platform_commission == quote.total_commission


def test_reseller_share_capped_at_total_commission():
    quote = calculate(
        Decimal("100"), "LOCAL", OPEN_TIER, Decimal("435"), CONFIG,
        reseller_rate=Decimal("10"),
    )

    assert quote.reseller_commission == Decimal("5.00")
    assert quote.platform_commission == Decimal("0.00")


def test_tier_upper_bound_is_exclusive():
    tiers = [
        make_tier("Petit", "0", "100", "5", "0"),
        make_tier("Grand", "100", None, "2", "1"),
    ]

    assert select_tier(Decimal("99.99"), tiers).name == "Petit"
    assert select_tier(Decimal("100"), tiers).name == "Grand"


def test_inactive_tiers_are_ignored():
    tiers = [
        make_tier("Ancienne", "0", None, "9", "9", active=False),
        make_tier("Actuelle", "0", None, "3", "2"),
    ]

    assert select_tier(Decimal("50"), tiers).name == "Actuelle"


def test_no_tier_for_amount():
    tiers = [make_tier("Petit", "0", "50", "5", "0")]

    with pytest.raises(NoTierForAmount):
        calculate(Decimal("100"), "LOCAL", tiers, Decimal("435"), CONFIG)


def test_overlapping_tiers_are_rejected_with_names():
    tiers = [
        make_tier("A", "0", "200", "3", "2"),
        make_tier("B", "50", None, "2", "1"),
    ]

    with pytest.raises(NoTierForAmount) as exc:
        calculate(Decimal("100"), "LOCAL", tiers, Decimal("435"), CONFIG)

    assert exc.value.context["tiers"] == ["A", "B"]
    assert exc.value.detail["kind"] == "NoTierForAmount"


@pytest.mark.parametrize("amount", ["0", "-5", "9.99", "10000.01"])
def test_amount_outside_limits(amount):
    with pytest.raises(ValidationError):
        calculate(Decimal(amount), "LOCAL", OPEN_TIER, Decimal("435"), CONFIG)


def test_non_positive_delivery_amount_rejected():
    # 100 × 15 − 15 × 100 = 0
    with pytest.raises(ValidationError):
        calculate(Decimal("100"), "LOCAL", OPEN_TIER, Decimal("15"), CONFIG)


def test_unknown_delivery_type():
    with pytest.raises(ValidationError):
        calculate(Decimal("100"), "CRYPTO", OPEN_TIER, Decimal("435"), CONFIG)


def test_rounding_half_up():
    tiers = [make_tier("Standard", "0", None, "2.5", "0")]

    quote = calculate(Decimal("10.10"), "LOCAL", tiers, Decimal("435"), CONFIG)

    # 10.10 × 2.5 % = 0.2525 → 0.25 ; 10.30 × 2.5 % = 0.2575 → 0.26
    assert quote.total_commission == Decimal("0.25")
    quote = calculate(Decimal("10.30"), "LOCAL", tiers, Decimal("435"), CONFIG)
    assert quote.total_commission == Decimal("0.26")


def test_same_inputs_same_quote():
    args = (Decimal("250"), "LOCAL", OPEN_TIER, Decimal("410.5"), CONFIG)
    first = calculate(*args, reseller_rate=Decimal("1.5"))

    for _ in range(1000):
        assert calculate(*args, reseller_rate=Decimal("1.5")) == first
    assert first.as_dict() == calculate(*args, reseller_rate=Decimal("1.5")).as_dict()
