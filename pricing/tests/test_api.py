from decimal import Decimal

from pricing.models import CommissionTier


def test_admin_creates_tier(api_client, staff_admin):
    api_client.force_authenticate(user=staff_admin)

    resp = api_client.post(
        "/api/v1/commission-tiers/",
        {"name": "Base", "range_min": "0", "range_max": "500", "percentage": "4", "fixed_fee": "1"},
        format="json",
    )

    assert resp.status_code == 201
    assert CommissionTier.objects.filter(name="Base", active=True).exists()


def test_overlapping_tier_rejected(api_client, staff_admin, tier):
    api_client.force_authenticate(user=staff_admin)

    resp = api_client.post(
        "/api/v1/commission-tiers/",
        {"name": "Doublon", "range_min": "100", "percentage": "2", "fixed_fee": "0"},
        format="json",
    )

    assert resp.status_code == 400


def test_delete_deactivates_tier(api_client, staff_admin, tier):
    api_client.force_authenticate(user=staff_admin)

    resp = api_client.delete(f"/api/v1/commission-tiers/{tier.id}/")

    assert resp.status_code == 204
    tier.refresh_from_db()
    assert tier.active is False


def test_courier_cannot_edit_tiers(api_client, courier, tier):
    api_client.force_authenticate(user=courier)

    assert api_client.get("/api/v1/commission-tiers/").status_code == 200
    resp = api_client.patch(
        f"/api/v1/commission-tiers/{tier.id}/",
        {"percentage": "1"},
        format="json",
    )
    assert resp.status_code == 403


def test_quote_endpoint(api_client, courier, tier, usd_rate):
    api_client.force_authenticate(user=courier)

    resp = api_client.post(
        "/api/v1/remittances/quote/",
        {"amount_sent": "100", "delivery_type": "LOCAL"},
        format="json",
    )

    assert resp.status_code == 200
    assert Decimal(resp.data["delivery_amount"]) == Decimal("42000.00")
    assert Decimal(resp.data["total_charged"]) == Decimal("105.00")


def test_business_setting_unknown_key_rejected(api_client, staff_admin):
    api_client.force_authenticate(user=staff_admin)

    resp = api_client.post(
        "/api/v1/business-settings/",
        {"key": "NOPE", "value": "1"},
        format="json",
    )

    assert resp.status_code == 400
