from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from accounts.constants import UserRole
from accounts.models import User
from pricing.models import CommissionTier
from rates.models import ExchangeRate, RateSource


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def staff_admin(db):
    return User.objects.create_user(
        username="admin",
        email="admin@test.com",
        password="pass1234",
        role=UserRole.ADMIN,
    )


@pytest.fixture
def courier(db):
    return User.objects.create_user(
        username="livreur1",
        password="pass1234",
        role=UserRole.COURIER,
    )


@pytest.fixture
def other_courier(db):
    return User.objects.create_user(
        username="livreur2",
        password="pass1234",
        role=UserRole.COURIER,
    )


@pytest.fixture
def reseller(db):
    return User.objects.create_user(
        username="revendeur1",
        password="pass1234",
        role=UserRole.RESELLER,
        commission_rate=Decimal("2.00"),
        uses_logistics=True,
    )


@pytest.fixture
def usd_rate(db):
    return ExchangeRate.objects.create(
        base_currency="USD",
        quote_currency="CUP",
        rate=Decimal("435"),
        source=RateSource.MANUAL,
    )


@pytest.fixture
def tier(db):
    return CommissionTier.objects.create(
        name="Standard",
        range_min=Decimal("0"),
        range_max=None,
        percentage=Decimal("3"),
        fixed_fee=Decimal("2"),
    )


@pytest.fixture
def remittance_data():
    return {
        "sender_name": "Ana Pérez",
        "sender_phone": "+13055550101",
        "beneficiary_name": "Luis Pérez",
        "beneficiary_phone": "+5355550101",
        "beneficiary_address": "Calle 23 #456, Vedado",
        "province": "La Habana",
        "municipality": "Plaza de la Revolución",
        "amount_sent": Decimal("100"),
        "delivery_type": "LOCAL",
    }
