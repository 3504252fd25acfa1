# Filename: event_classifier.py

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger("EventClassifier")

MINT_EVENT_TYPE = "TOKEN_MINT"
MIN_ADDRESS_LENGTH = 32
MAX_ADDRESS_LENGTH = 45


def is_plausible_address(value: Any) -> bool:
    return isinstance(value, str) and MIN_ADDRESS_LENGTH <= len(value) <= MAX_ADDRESS_LENGTH


def is_program_event(event: Dict[str, Any], program_id: str) -> bool:
    accounts = event.get("accounts") or []
    return event.get("programId") == program_id or program_id in accounts


def _balance_change_mint(event: Dict[str, Any]) -> Optional[str]:
    for account in event.get("accountData") or []:
        for change in (account or {}).get("tokenBalanceChanges") or []:
            mint = (change or {}).get("mint")
            if is_plausible_address(mint):
                return mint
    return None


def extract_candidate_address(event: Dict[str, Any]) -> Optional[str]:
    accounts = event.get("accounts") or []
    return (
        event.get("tokenMint")
        or _balance_change_mint(event)
        or (accounts[0] if accounts else None)
    )


def classify_event(event: Dict[str, Any], program_id: str) -> Optional[str]:
    """
    Decides whether a raw webhook event is a mint from the tracked program.

    Returns:
        The candidate token address, or None when the event must be skipped
    """
    if not isinstance(event, dict):
        logger.info(f"Skipping malformed event: {event!r}")
        return None

    event_type = event.get("type")
    if event_type != MINT_EVENT_TYPE:
        logger.info(f"Skipping non-{MINT_EVENT_TYPE} event: {event_type}")
        return None

    if not is_program_event(event, program_id):
        logger.info(f"Skipping event from other program: {event.get('programId')}")
        return None

    address = extract_candidate_address(event)
    if not is_plausible_address(address):
        logger.info(f"Invalid token address, skipping: {address}")
        return None

    return address
