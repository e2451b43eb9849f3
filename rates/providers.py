# rates/providers.py
"""
Collecteurs de cotations externes.

Aucun accès base de données ici : chaque fournisseur retourne
{devise: Decimal} (CUP par unité) ou {} si la source est indisponible.
La persistance passe par rates.services.refresh.refresh_rates.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

import requests
from django.conf import settings

from rates.models import RateSource

logger = logging.getLogger(__name__)

HTML_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept": "text/html,application/xhtml+xml",
    "Accept-Language": "es-ES,es;q=0.9,en;q=0.8",
}

HTML_PATTERNS = {
    "USD": [
        r"1\s*USD\s*=?\s*(\d+(?:[.,]\d+)?)\s*CUP",
        r"d[oó]lar[:\s]+(\d+(?:[.,]\d+)?)\s*CUP",
        r"USD[:\s]+(\d+(?:[.,]\d+)?)",
    ],
    "EUR": [
        r"1\s*EUR\s*=?\s*(\d+(?:[.,]\d+)?)\s*CUP",
        r"euro[:\s]+(\d+(?:[.,]\d+)?)\s*CUP",
        r"EUR[:\s]+(\d+(?:[.,]\d+)?)",
    ],
    "MLC": [
        r"1\s*MLC\s*=?\s*(\d+(?:[.,]\d+)?)\s*CUP",
        r"MLC[:\s]+(\d+(?:[.,]\d+)?)\s*CUP",
        r"MLC[:\s]+(\d+(?:[.,]\d+)?)",
    ],
}


def _to_decimal(value) -> Optional[Decimal]:
    try:
        number = Decimal(str(value).replace(",", "."))
    except (InvalidOperation, TypeError, ValueError):
        return None
    return number if number.is_finite() and number > 0 else None


def plausible(code: str, rate: Decimal) -> bool:
    ranges = settings.EXCHANGE_RATES.get("PLAUSIBLE_RANGES", {})
    bounds = ranges.get(code)
    if not bounds:
        return True
    low, high = (Decimal(str(b)) for b in bounds)
    return low <= rate <= high


def parse_json_quotes(payload) -> Dict[str, Decimal]:
    """Cotations d'une réponse JSON : {"USD": "390"} ou {"tasas": {...}}."""

    if not isinstance(payload, dict):
        return {}
    rates = payload.get("tasas", payload)
    if not isinstance(rates, dict):
        return {}

    out: Dict[str, Decimal] = {}
    for code in HTML_PATTERNS:
        rate = _to_decimal(rates.get(code))
        if rate is not None and plausible(code, rate):
            out[code] = rate
    return out


def parse_html_quotes(html: str) -> Dict[str, Decimal]:
    """Première valeur plausible de chaque devise dans la page."""

    out: Dict[str, Decimal] = {}
    for code, patterns in HTML_PATTERNS.items():
        for pattern in patterns:
            match = re.search(pattern, html, re.IGNORECASE)
            if not match:
                continue
            rate = _to_decimal(match.group(1))
            if rate is not None and plausible(code, rate):
                out[code] = rate
                break
    return out


def fetch_primary(timeout: Optional[int] = None) -> Dict[str, Decimal]:
    config = settings.RATE_PROVIDERS
    token = config.get("PRIMARY_TOKEN")
    if not token:
        return {}

    try:
        r = requests.get(
            config["PRIMARY_URL"],
            timeout=timeout or config.get("TIMEOUT", 15),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
            },
        )
        if r.status_code != 200:
            logger.warning("Source principale : HTTP %s", r.status_code)
            return {}
        return parse_json_quotes(r.json())
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Source principale indisponible : %s", exc)
        return {}


def fetch_secondary(timeout: Optional[int] = None) -> Dict[str, Decimal]:
    config = settings.RATE_PROVIDERS

    try:
        r = requests.get(
            config["SECONDARY_URL"],
            timeout=timeout or config.get("TIMEOUT", 15),
            headers=HTML_HEADERS,
        )
        if r.status_code != 200:
            logger.warning("Source secondaire : HTTP %s", r.status_code)
            return {}
        return parse_html_quotes(r.text)
    except requests.RequestException as exc:
        logger.warning("Source secondaire indisponible : %s", exc)
        return {}


PROVIDERS = {
    RateSource.PRIMARY: fetch_primary,
    RateSource.SECONDARY: fetch_secondary,
}
