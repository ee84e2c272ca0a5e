"""Shared helpers for money, phone numbers and public identifiers.

All amounts are integers in paise (1/100 rupee). Phone numbers are stored as
international digits without a leading '+', e.g. ``919876543210``.
"""

import random
import re
import secrets
import string
from decimal import Decimal
from urllib.parse import quote

from django.utils import timezone

INDIA_COUNTRY_CODE = "91"
ORDER_ID_PREFIX = "CB"
SHORT_SLUG_LENGTH = 8

_PHONE_RE = re.compile(r"^\d{10,15}$")
_SLUG_ALPHABET = string.ascii_letters + string.digits


# ----------------------------------- money -----------------------------------

def _group_indian(digits: str) -> str:
    """Group an integer string the Indian way: 1,00,000."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(paise) -> str:
    """Format paise as rupees, e.g. 150050 -> '₹1,500.5'."""
    amount = Decimal(int(paise or 0)) / 100
    sign = "-" if amount < 0 else ""
    amount = abs(amount)
    whole = int(amount)
    fraction = (amount - whole).quantize(Decimal("0.01"))
    text = _group_indian(str(whole))
    if fraction:
        text += str(fraction)[1:].rstrip("0")
    return f"{sign}₹{text}"


def paise_to_rupees(paise):
    value = Decimal(int(paise or 0)) / 100
    return int(value) if value == value.to_integral_value() else float(value)


# ---------------------------------- phones -----------------------------------

def is_valid_phone_number(phone: str) -> bool:
    """10 to 15 digits, nothing else (no '+', no spaces)."""
    return bool(phone) and bool(_PHONE_RE.match(phone))


def normalize_intl_phone(phone) -> str:
    """Strip non-digits and add the Indian country code to bare 10-digit numbers."""
    if not phone:
        return ""
    digits = re.sub(r"\D", "", str(phone))
    if len(digits) == 10:
        return INDIA_COUNTRY_CODE + digits
    return digits


def format_phone_number(phone_digits_intl: str) -> str:
    digits = phone_digits_intl or ""
    if digits.startswith(INDIA_COUNTRY_CODE) and len(digits) == 12:
        return f"+91 {digits[2:7]} {digits[7:]}"
    return f"+{digits}"


# -------------------------------- identifiers --------------------------------

def generate_order_id(now=None) -> str:
    """CB + YYMMDDHHMM + two random digits (14 characters)."""
    now = now or timezone.localtime()
    return f"{ORDER_ID_PREFIX}{now:%y%m%d%H%M}{random.randint(0, 99):02d}"


def generate_short_slug(length: int = SHORT_SLUG_LENGTH) -> str:
    return "".join(secrets.choice(_SLUG_ALPHABET) for _ in range(length))


def order_public_url(base_url: str, short_slug: str) -> str:
    return f"{base_url.rstrip('/')}/o/{short_slug}"


# --------------------------------- whatsapp ----------------------------------

def generate_whatsapp_url(phone_digits_intl: str, message: str) -> str:
    return f"https://wa.me/{phone_digits_intl}?text={quote(message, safe='')}"


def generate_whatsapp_message(customer_name: str, bike_name: str, order_id: str, order_url: str) -> str:
    first_name = (customer_name or "").strip().split(" ")[0]
    return (
        f"Hello *{first_name}*!\n\n"
        f"Your service estimate for *{bike_name}* is ready.\n"
        f"Order ID: {order_id}\n\n"
        f"Review and confirm the services here:\n{order_url}\n\n"
        f"Thank you for choosing *CycleBees*!"
    )
