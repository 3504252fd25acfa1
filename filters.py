# Filename: filters.py

from typing import Optional

from loguru import logger

from models import FilterConfig, TokenInfo, RANGE_FIELDS


def rejection_reason(token: TokenInfo, filters: FilterConfig) -> Optional[str]:
    """
    Returns the name of the first failing check, or None when the token passes.
    Pure: reads the filters, never mutates anything.
    """
    for name in RANGE_FIELDS:
        if getattr(token, name) is None:
            return f"missing {name}"

    for name in RANGE_FIELDS:
        value = getattr(token, name)
        if not getattr(filters, name).contains(value):
            return name

    # a configured False means "don't care", never "must not be revoked"
    if filters.mint_auth_revoked and not token.mint_auth_revoked:
        return "mint_auth_revoked"
    if filters.freeze_auth_revoked and not token.freeze_auth_revoked:
        return "freeze_auth_revoked"

    return None


def passes(token: TokenInfo, filters: FilterConfig) -> bool:
    reason = rejection_reason(token, filters)
    if reason is not None:
        logger.debug(f"[FILTER ❌] {token.name} ({token.address}): {reason}")
        return False
    return True
