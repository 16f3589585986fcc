"""Commuter payment link encoded in each vehicle's QR code."""

from __future__ import annotations

from .errors import ValidationError

PAY_URL_TEMPLATE = "https://naulify.com/pay/{vehicle_id}"


def payment_url(vehicle_id: str) -> str:
    cleaned = str(vehicle_id or "").strip()
    if not cleaned:
        raise ValidationError("vehicle_id", "Vehicle id is required for a payment link")
    return PAY_URL_TEMPLATE.format(vehicle_id=cleaned)


__all__ = ["PAY_URL_TEMPLATE", "payment_url"]
