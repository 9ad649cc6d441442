import pytest

from bindery.exceptions import BinderyError
from bindery.state import TRANSITIONS, ExecutionState, StateTrace


def test_trace_starts_at_start():
    trace = StateTrace()
    assert trace.current is ExecutionState.START
    assert trace.states == [ExecutionState.START]


def test_legal_path():
    trace = StateTrace()
    for state in (
        ExecutionState.PARSING,
        ExecutionState.READY,
        ExecutionState.EXECUTING,
        ExecutionState.BUSINESS_ERROR,
        ExecutionState.DONE,
    ):
        trace.move(state)
    assert trace.current is ExecutionState.DONE


@pytest.mark.parametrize(
    "path",
    [
        [ExecutionState.EXECUTING],
        [ExecutionState.PARSING, ExecutionState.EXECUTING],
        [ExecutionState.PARSING, ExecutionState.HELP_REQUESTED, ExecutionState.READY],
        [ExecutionState.PARSING, ExecutionState.VALIDATION_FAILED, ExecutionState.DONE, ExecutionState.START],
    ],
)
def test_illegal_transitions(path):
    trace = StateTrace()
    *legal, illegal = path
    for state in legal:
        trace.move(state)
    with pytest.raises(BinderyError):
        trace.move(illegal)


def test_done_is_terminal():
    assert TRANSITIONS[ExecutionState.DONE] == frozenset()
    assert all(state in TRANSITIONS for state in ExecutionState)
