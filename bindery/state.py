# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `ExecutionState`, the states of the `CommandLine` execution driver, and
the legal transitions between them.

    START -> PARSING -> {HELP_REQUESTED, VERSION_REQUESTED, VALIDATION_FAILED, READY}
    READY -> EXECUTING -> {SUCCESS, BUSINESS_ERROR}
    HELP_REQUESTED | VERSION_REQUESTED | VALIDATION_FAILED | SUCCESS | BUSINESS_ERROR -> DONE
"""
from __future__ import annotations

from enum import Enum

from bindery.exceptions import BinderyError
from bindery.logger import logger


class ExecutionState(Enum):
    START = "start"
    PARSING = "parsing"
    HELP_REQUESTED = "help_requested"
    VERSION_REQUESTED = "version_requested"
    VALIDATION_FAILED = "validation_failed"
    READY = "ready"
    EXECUTING = "executing"
    SUCCESS = "success"
    BUSINESS_ERROR = "business_error"
    DONE = "done"


TRANSITIONS: dict[ExecutionState, frozenset[ExecutionState]] = {
    ExecutionState.START: frozenset({ExecutionState.PARSING}),
    ExecutionState.PARSING: frozenset(
        {
            ExecutionState.HELP_REQUESTED,
            ExecutionState.VERSION_REQUESTED,
            ExecutionState.VALIDATION_FAILED,
            ExecutionState.READY,
        }
    ),
    ExecutionState.READY: frozenset({ExecutionState.EXECUTING}),
    ExecutionState.EXECUTING: frozenset(
        {ExecutionState.SUCCESS, ExecutionState.BUSINESS_ERROR}
    ),
    ExecutionState.HELP_REQUESTED: frozenset({ExecutionState.DONE}),
    ExecutionState.VERSION_REQUESTED: frozenset({ExecutionState.DONE}),
    ExecutionState.VALIDATION_FAILED: frozenset({ExecutionState.DONE}),
    ExecutionState.SUCCESS: frozenset({ExecutionState.DONE}),
    ExecutionState.BUSINESS_ERROR: frozenset({ExecutionState.DONE}),
    ExecutionState.DONE: frozenset(),
}


class StateTrace:
    """Records the states one invocation passes through, rejecting illegal moves."""

    def __init__(self) -> None:
        self.states: list[ExecutionState] = [ExecutionState.START]

    @property
    def current(self) -> ExecutionState:
        return self.states[-1]

    def move(self, state: ExecutionState) -> None:
        if state not in TRANSITIONS[self.current]:
            raise BinderyError(
                f"Illegal execution transition: {self.current.name} -> {state.name}"
            )
        logger.debug("Execution state %s -> %s", self.current.name, state.name)
        self.states.append(state)
