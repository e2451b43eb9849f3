from decimal import Decimal

from django.test import TestCase, override_settings

from pricing.config import load_pricing_config
from pricing.models import BusinessSetting

PRICING = {
    "LOCAL_DISCOUNT_PER_UNIT": "15",
    "HARD_CURRENCY_FEE_PERCENT": "5",
    "DEFAULT_RESELLER_RATE": "2",
    "MIN_AMOUNT": "10",
    "MAX_AMOUNT": "10000",
}


@override_settings(REMITTANCE_PRICING=PRICING)
class PricingConfigTestCase(TestCase):

    def test_defaults_from_settings(self):
        config = load_pricing_config()

        self.assertEqual(config.local_discount_per_unit, Decimal("15"))
        self.assertEqual(config.hard_currency_fee_percent, Decimal("5"))
        self.assertEqual(config.max_amount, Decimal("10000"))

    def test_business_setting_overrides_default(self):
        BusinessSetting.objects.create(key="LOCAL_DISCOUNT_PER_UNIT", value="20")

        config = load_pricing_config()

        self.assertEqual(config.local_discount_per_unit, Decimal("20"))
        self.assertEqual(config.min_amount, Decimal("10"))

    def test_unreadable_override_is_ignored(self):
        BusinessSetting.objects.create(key="MAX_AMOUNT", value="beaucoup")

        config = load_pricing_config()

        self.assertEqual(config.max_amount, Decimal("10000"))
