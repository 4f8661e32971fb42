import logging
from typing import Sequence
from ride_ledger.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)


def ensure_participant(name: str, participants: Sequence[str], role: str = "participant") -> str:
    """Check that a driver/payer is one of the configured participants"""
    if name not in participants:
        logger.warning(f"Rejected unknown {role}: {name!r}")
        raise ValidationError(
            f"Unknown {role} '{name}'. Expected one of: {', '.join(participants)}"
        )
    return name
