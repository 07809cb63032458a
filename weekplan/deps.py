import logging
from typing import List
from fastapi import HTTPException, status
from .database import SessionLocal
from .schemas import BlockSetOutcome, MealBlock, OutcomeStatus

logger = logging.getLogger(__name__)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def settle(outcome: BlockSetOutcome, confirm: bool) -> List[MealBlock] | None:
    """Turn an engine outcome into the block set to commit.

    Returns None when there is nothing to write. Rejections become 400s and
    unconfirmed conflicts become 409s carrying the proposed set.
    """
    if outcome.status == OutcomeStatus.REJECTED:
        logger.debug("rejected: %s", outcome.reason)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=outcome.reason)
    if not outcome.committable:
        return None
    if outcome.status == OutcomeStatus.NEEDS_CONFIRMATION and not confirm:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": "This meal overlaps with existing meals. Confirm to replace them.",
                "conflicts": [b.model_dump() for b in outcome.conflicts],
                "proposed_blocks": [b.model_dump() for b in outcome.blocks],
            },
        )
    return outcome.blocks
