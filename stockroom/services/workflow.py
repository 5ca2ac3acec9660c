"""
Pick-list status state machine and progress aggregation

Pure functions with no database access; the pick-list service applies
them inside its transactions.
"""

from typing import Iterable, List

from stockroom.models.enums import PickListStatus
from stockroom.services.errors import InvalidTransition

STATUS_TRANSITIONS = {
    PickListStatus.DRAFT: (PickListStatus.READY_TO_PICK,),
    PickListStatus.READY_TO_PICK: (PickListStatus.IN_PROGRESS, PickListStatus.DRAFT),
    PickListStatus.IN_PROGRESS: (PickListStatus.PARTIALLY_COMPLETE, PickListStatus.COMPLETE),
    PickListStatus.PARTIALLY_COMPLETE: (PickListStatus.IN_PROGRESS, PickListStatus.COMPLETE),
    PickListStatus.COMPLETE: (),
}


def coerce_status(value) -> PickListStatus:
    """Accept an enum member or its string value"""
    if isinstance(value, PickListStatus):
        return value
    try:
        return PickListStatus(value)
    except ValueError:
        raise InvalidTransition(f"Unknown pick list status: {value!r}", target=str(value))


def allowed_targets(status) -> List[PickListStatus]:
    return list(STATUS_TRANSITIONS[coerce_status(status)])


def can_transition(current, target) -> bool:
    try:
        return coerce_status(target) in STATUS_TRANSITIONS[coerce_status(current)]
    except InvalidTransition:
        return False


def validate_transition(current, target) -> PickListStatus:
    """
    Check a status change against the transition table

    Returns:
        The target status as an enum member

    Raises:
        InvalidTransition: if the edge is not in the table
    """
    current = coerce_status(current)
    target = coerce_status(target)
    if target not in STATUS_TRANSITIONS[current]:
        raise InvalidTransition(
            f"Cannot move pick list from {current.value} to {target.value}",
            current=current.value,
            target=target.value,
            allowed=[s.value for s in STATUS_TRANSITIONS[current]]
        )
    return target


def progress(lines: Iterable) -> float:
    """Fraction of lines fully picked, 0.0 for an empty list"""
    lines = list(lines)
    if not lines:
        return 0.0
    picked = sum(1 for line in lines if line.quantity_picked >= line.quantity_requested)
    return picked / len(lines)


def progress_summary(lines: Iterable) -> dict:
    lines = list(lines)
    picked = sum(1 for line in lines if line.quantity_picked >= line.quantity_requested)
    return {
        'picked_count': picked,
        'total_count': len(lines),
        'progress': progress(lines),
        'is_fully_picked': bool(lines) and picked == len(lines)
    }
