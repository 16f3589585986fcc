from __future__ import annotations

import pytest

from naulify.domain.errors import ValidationError
from naulify.domain.payment import payment_url


def test_payment_url_embeds_vehicle_id() -> None:
    assert payment_url("veh-000001") == "https://naulify.com/pay/veh-000001"
    assert payment_url("  abc ") == "https://naulify.com/pay/abc"


def test_payment_url_requires_vehicle_id() -> None:
    with pytest.raises(ValidationError):
        payment_url("")
