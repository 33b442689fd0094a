"""Plan identifier resolution.

Order: ``id`` query parameter -> plan cookie -> freshly generated id. The
resolved id is always written back to the cookie by the page handlers.
"""
import random
import re
from typing import Optional

from kondate.utilities.config import PLAN_ID_LENGTH
from kondate.utilities.constants import PLAN_ID_ALPHABET

_VALID_ID = re.compile(r'^[0-9A-Za-z_-]{1,64}$')


def generate_plan_id(length: int = PLAN_ID_LENGTH) -> str:
    return ''.join(random.choice(PLAN_ID_ALPHABET) for _ in range(length))


def is_valid_plan_id(value: Optional[str]) -> bool:
    return bool(value) and bool(_VALID_ID.match(value))


def resolve_plan_id(query_id: Optional[str], cookie_id: Optional[str]) -> tuple[str, bool]:
    """Return (plan_id, generated) where generated tells whether a new id was minted."""
    for candidate in (query_id, cookie_id):
        if is_valid_plan_id(candidate):
            return candidate, False
    return generate_plan_id(), True


def share_url(base_url: str, plan_id: str) -> str:
    return f"{base_url.rstrip('/')}/?id={plan_id}"
