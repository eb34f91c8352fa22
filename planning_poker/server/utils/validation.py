"""Reusable payload validation helpers."""

import logging
from typing import Any, Iterable, List, Mapping

logger = logging.getLogger(__name__)

# Length limits
MAX_NAME_LENGTH = 100
MAX_VOTE_LENGTH = 20
MAX_SEQUENCE_LENGTH = 50


def validate_required_fields(data: Mapping[str, Any], required_fields: Iterable[str]):
    """Ensure all required_fields are present and not empty in data."""

    missing = [field for field in required_fields if data.get(field) in (None, "")]
    if missing:
        logger.warning("missing_required_fields fields=%s", ", ".join(missing))
        raise ValueError(f"Missing required fields: {', '.join(missing)}")
    return data


def validate_text(value: Any, field: str, max_length: int = MAX_NAME_LENGTH) -> str:
    """Return ``value`` stripped, requiring a non-empty string."""

    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string")
    value = value.strip()
    if not value:
        raise ValueError(f"{field} must not be blank")
    if len(value) > max_length:
        raise ValueError(f"{field} must be at most {max_length} characters")
    return value


def validate_room_id(value: Any) -> str:
    """Room ids are matched case-insensitively; they are stored uppercase."""

    return validate_text(value, "roomId").upper()


def validate_card(value: Any, field: str = "vote") -> str:
    """Cards and votes are strings or plain numbers, stored as text."""

    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ValueError(f"{field} must be a string or a number")
    return validate_text(str(value), field, max_length=MAX_VOTE_LENGTH)


def validate_sequence(value: Any) -> List[str]:
    """Validate the card deck of a new room."""

    if not isinstance(value, list) or not value:
        raise ValueError("sequence must be a non-empty list")
    if len(value) > MAX_SEQUENCE_LENGTH:
        raise ValueError(f"sequence must have at most {MAX_SEQUENCE_LENGTH} cards")
    return [validate_card(card, "sequence") for card in value]
