"""The operation status state machine.

This module is pure: it decides whether an action may run from the
current status and what status and hold flag result.  Persisting the
outcome is the job of ``jobs.services``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from .exceptions import InvalidInput, StatusConflict
from .models import OperationStatus, status_label

S = OperationStatus

ALL_STATUSES: FrozenSet[int] = frozenset(S.values)

# Statuses that stash the previous working status in ``hold_flag``
HELD_STATUSES: FrozenSet[int] = frozenset({S.PAUSED, S.BREAKDOWN, S.QC_CHECK})

# Marker target for Resume: go back to whatever ``hold_flag`` names
RESTORE = object()


@dataclass(frozen=True)
class Transition:
    action: str
    allowed_from: FrozenSet[int]
    target: object  # an OperationStatus, RESTORE, or None for "unchanged"
    expected: str
    holds: bool = False

    def permits(self, status) -> bool:
        return status in self.allowed_from


TRANSITIONS = {
    t.action: t
    for t in (
        Transition('setup', frozenset({S.NEW, S.ASSIGNED}), S.SETUP, 'New or Assigned'),
        Transition('fpqc', frozenset({S.SETUP}), S.FPQC, 'Setup'),
        Transition('pause', ALL_STATUSES - {S.PAUSED, S.COMPLETE}, S.PAUSED, 'Active status', holds=True),
        Transition('resume', HELD_STATUSES, RESTORE, 'Paused, Breakdown or QC Check'),
        Transition('breakdown', ALL_STATUSES - {S.BREAKDOWN, S.COMPLETE}, S.BREAKDOWN, 'Active status', holds=True),
        Transition('complete', ALL_STATUSES - {S.COMPLETE}, S.COMPLETE, 'Active status'),
        Transition('qc_check', ALL_STATUSES, S.QC_CHECK, 'Any status', holds=True),
        Transition('test', ALL_STATUSES, None, 'Any status'),
        Transition('alert', ALL_STATUSES, None, 'Any status'),
        Transition('contact', ALL_STATUSES, None, 'Any status'),
    )
}

ACTIONS = tuple(TRANSITIONS)


def get_transition(action: str) -> Transition:
    try:
        return TRANSITIONS[action]
    except KeyError:
        raise InvalidInput(f'Unknown action: {action}', details={'action': 'unknown'})


def check_transition(action: str, current_status, *, allow_breakdown_while_paused: bool = False) -> Transition:
    """Return the transition for ``action`` or raise ``StatusConflict``.

    Breakdown on a paused operation would overwrite the hold flag with the
    working status it should restore, so it is refused unless explicitly
    allowed.
    """
    transition = get_transition(action)
    permitted = transition.permits(current_status)
    if permitted and action == 'breakdown' and current_status == S.PAUSED:
        permitted = allow_breakdown_while_paused
    if not permitted:
        raise StatusConflict(status_label(current_status), transition.expected)
    return transition


def apply_transition(transition: Transition, status, hold_flag) -> Tuple[int, Optional[int]]:
    """Return ``(new_status, new_hold_flag)`` for a permitted transition."""
    if transition.target is None:
        return status, hold_flag
    if transition.target is RESTORE:
        return (hold_flag or S.IN_PROCESS), None
    if transition.holds:
        # Already held: keep naming the last working status
        new_hold = hold_flag if status in HELD_STATUSES else status
        return transition.target, (new_hold or None)
    if transition.target == S.COMPLETE:
        return transition.target, None
    return transition.target, hold_flag


def allowed_actions(status, *, allow_breakdown_while_paused: bool = False) -> list:
    """Actions an operation in ``status`` accepts, in table order."""
    result = []
    for action in ACTIONS:
        try:
            check_transition(action, status, allow_breakdown_while_paused=allow_breakdown_while_paused)
        except StatusConflict:
            continue
        result.append(action)
    return result
