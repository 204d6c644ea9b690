"""Helpers shared by the repositories."""
from typing import Optional


def capped_limit(limit: Optional[int], cap: int) -> int:
    """Row limit for a list query: missing, zero or negative means the cap."""
    if not limit or limit < 0:
        return cap
    return min(limit, cap)
