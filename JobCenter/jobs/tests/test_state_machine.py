import pytest

from jobs.exceptions import InvalidInput, StatusConflict
from jobs.models import OperationStatus as S
from jobs.state_machine import (
    ACTIONS,
    ALL_STATUSES,
    HELD_STATUSES,
    TRANSITIONS,
    allowed_actions,
    apply_transition,
    check_transition,
)

VALID_FROM = {
    'setup': {S.NEW, S.ASSIGNED},
    'fpqc': {S.SETUP},
    'pause': ALL_STATUSES - {S.PAUSED, S.COMPLETE},
    'resume': {S.PAUSED, S.BREAKDOWN, S.QC_CHECK},
    'breakdown': ALL_STATUSES - {S.BREAKDOWN, S.COMPLETE, S.PAUSED},
    'complete': ALL_STATUSES - {S.COMPLETE},
    'qc_check': ALL_STATUSES,
    'test': ALL_STATUSES,
    'alert': ALL_STATUSES,
    'contact': ALL_STATUSES,
}


@pytest.mark.parametrize('action', ACTIONS)
@pytest.mark.parametrize('status', sorted(ALL_STATUSES))
def test_transition_table(action, status):
    if status in VALID_FROM[action]:
        assert check_transition(action, status).action == action
    else:
        with pytest.raises(StatusConflict):
            check_transition(action, status)


def test_conflict_names_current_and_expected_state():
    with pytest.raises(StatusConflict) as excinfo:
        check_transition('pause', S.COMPLETE)
    assert excinfo.value.current == 'Complete'
    assert excinfo.value.expected == 'Active status'
    assert excinfo.value.details == {'current': 'Complete', 'expected': 'Active status'}


def test_breakdown_while_paused_needs_opt_in():
    with pytest.raises(StatusConflict):
        check_transition('breakdown', S.PAUSED)
    assert check_transition('breakdown', S.PAUSED, allow_breakdown_while_paused=True).action == 'breakdown'


def test_unknown_action_is_invalid_input():
    with pytest.raises(InvalidInput):
        check_transition('teleport', S.NEW)


def test_reserved_status_code_is_not_a_state():
    assert 11 not in ALL_STATUSES
    with pytest.raises(StatusConflict) as excinfo:
        check_transition('complete', 11)
    assert excinfo.value.current == 'Unknown (11)'


def test_pause_stashes_working_status():
    assert apply_transition(TRANSITIONS['pause'], S.IN_PROCESS, None) == (S.PAUSED, S.IN_PROCESS)


def test_breakdown_from_fpqc_stashes_fpqc():
    assert apply_transition(TRANSITIONS['breakdown'], S.FPQC, None) == (S.BREAKDOWN, S.FPQC)


def test_holding_from_held_status_keeps_existing_flag():
    # QC check while paused must still remember the pre-pause status
    assert apply_transition(TRANSITIONS['qc_check'], S.PAUSED, S.SETUP) == (S.QC_CHECK, S.SETUP)
    assert apply_transition(TRANSITIONS['breakdown'], S.PAUSED, S.IN_PROCESS) == (S.BREAKDOWN, S.IN_PROCESS)


def test_resume_restores_flag_and_clears_it():
    assert apply_transition(TRANSITIONS['resume'], S.PAUSED, S.LPQC) == (S.LPQC, None)


@pytest.mark.parametrize('flag', [None, 0])
def test_resume_without_flag_defaults_to_in_process(flag):
    assert apply_transition(TRANSITIONS['resume'], S.PAUSED, flag) == (S.IN_PROCESS, None)


def test_complete_clears_hold_flag():
    assert apply_transition(TRANSITIONS['complete'], S.BREAKDOWN, S.FPQC) == (S.COMPLETE, None)


@pytest.mark.parametrize('action', ['test', 'alert', 'contact'])
def test_record_only_actions_leave_status_alone(action):
    assert apply_transition(TRANSITIONS[action], S.PAUSED, S.SETUP) == (S.PAUSED, S.SETUP)


@pytest.mark.parametrize('status', sorted(ALL_STATUSES))
@pytest.mark.parametrize('action', ['pause', 'breakdown', 'qc_check', 'resume', 'complete'])
def test_hold_flag_set_exactly_when_held(status, action):
    flag = S.IN_PROCESS if status in HELD_STATUSES else None
    try:
        transition = check_transition(action, status)
    except StatusConflict:
        return
    new_status, new_flag = apply_transition(transition, status, flag)
    assert (new_flag is not None) == (new_status in HELD_STATUSES)


def test_allowed_actions_for_complete():
    assert allowed_actions(S.COMPLETE) == ['qc_check', 'test', 'alert', 'contact']
