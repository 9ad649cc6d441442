# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `CommandLine`, the execution driver that turns an argument vector into
a process exit code.

`CommandLine` parses with a `Binder`, short-circuits on help and version
requests, reports parse errors together with usage help, and otherwise calls the
business handler of the deepest command level that declares one. Every
invocation walks the `ExecutionState` machine and the visited states are
returned in the `ExecutionResult`.

Output routing:
- Help and version text go to `out` (stdout by default).
- Parse errors, usage after errors, and business errors go to `err` (stderr).

Example:
    spec = CommandSpec("tree", "List contents of directories", handler=tree)
    spec.option("-L", "--level", type=int, help="Max display depth")
    spec.positional("directory", arity="*")
    CommandLine(spec).run()
"""
from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass, field
from typing import Any, Iterable

from rich.console import Console
from rich.markup import escape
from rich.text import Text
from rich.traceback import Traceback

from bindery.console import console, error_console
from bindery.exceptions import BusinessError
from bindery.help import render_usage, render_version
from bindery.logger import logger
from bindery.parser.binder import Binder
from bindery.parser.command_spec import CommandSpec
from bindery.parser.converters import ConverterRegistry
from bindery.parser.parse_result import (
    HelpRequested,
    ParseFailed,
    ParseOutcome,
    ParseResult,
    VersionRequested,
)
from bindery.settings import ExitCodes, ParserSettings
from bindery.state import ExecutionState, StateTrace
from bindery.themes import OneColors
from bindery.utils import ensure_async


@dataclass
class ExecutionResult:
    """
    Outcome of one `CommandLine` invocation.

    Attributes:
        exit_code (int): Process exit code.
        state (ExecutionState): The terminal state reached before DONE.
        states (tuple[ExecutionState, ...]): Every state visited, START to DONE.
        outcome (ParseOutcome): The parse outcome.
        error (BusinessError | None): The wrapped handler failure, if any.
        returned (Any): The handler's return value, if it ran.
    """

    exit_code: int
    state: ExecutionState
    states: tuple[ExecutionState, ...] = field(default=())
    outcome: ParseOutcome | None = None
    error: BusinessError | None = None
    returned: Any = None


class CommandLine:
    """
    Parses, validates, and executes one command tree.

    A `CommandLine` keeps no per-invocation state and can be invoked repeatedly.

    Args:
        spec (CommandSpec): The root command. It is validated on construction.
        settings (ParserSettings | None): Matching and reporting switches.
        exit_codes (ExitCodes | None): Exit codes for ok, software, and usage.
        registry (ConverterRegistry | None): Converters for option and positional types.
        out (Console): Console for help and version output.
        err (Console): Console for errors and usage after errors.
    """

    def __init__(
        self,
        spec: CommandSpec,
        *,
        settings: ParserSettings | None = None,
        exit_codes: ExitCodes | None = None,
        registry: ConverterRegistry | None = None,
        out: Console = console,
        err: Console = error_console,
    ) -> None:
        self.settings: ParserSettings = settings or ParserSettings()
        self.exit_codes: ExitCodes = exit_codes or ExitCodes()
        self.binder: Binder = Binder(spec, registry=registry, settings=self.settings)
        self.spec: CommandSpec = self.binder.spec
        self.out: Console = out
        self.err: Console = err

    def parse(self, args: Iterable[str]) -> ParseOutcome:
        """Parse without executing anything."""
        return self.binder.parse(args)

    def _print_usage(self, target: Console, level: ParseResult) -> None:
        text = render_usage(
            level.spec,
            width=target.width,
            ansi=target.is_terminal,
            command_path=level.command_path,
        )
        target.print(Text.from_ansi(text), soft_wrap=True)

    def _report_errors(self, outcome: ParseFailed) -> None:
        errors = outcome.errors
        if not self.settings.report_all_errors:
            errors = errors[:1]
        for error in errors:
            self.err.print(
                f"[{OneColors.DARK_RED}]❌ {escape(error.message)}", soft_wrap=True
            )
        level = outcome.result.leaf
        for candidate in outcome.result.levels():
            if candidate.command_path == outcome.errors[0].command_path:
                level = candidate
                break
        self._print_usage(self.err, level)

    def _report_business_error(self, error: BusinessError) -> None:
        self.err.print(f"[{OneColors.DARK_RED}]❌ {escape(str(error))}", soft_wrap=True)
        if self.settings.show_traceback:
            cause = error.cause
            self.err.print(
                Traceback.from_exception(type(cause), cause, cause.__traceback__)
            )

    def _handler_level(self, result: ParseResult) -> ParseResult | None:
        for level in reversed(result.levels()):
            if level.spec.handler is not None:
                return level
        return None

    async def invoke_async(self, args: Iterable[str]) -> ExecutionResult:
        """
        Parse `args` and run the matching handler, awaiting async handlers.

        Returns:
            ExecutionResult: The exit code, visited states, and handler outcome.
        """
        trace = StateTrace()
        trace.move(ExecutionState.PARSING)
        outcome = self.binder.parse(args)

        if isinstance(outcome, HelpRequested):
            trace.move(ExecutionState.HELP_REQUESTED)
            self._print_usage(self.out, outcome.level)
            return self._finish(trace, outcome, self.exit_codes.ok)

        if isinstance(outcome, VersionRequested):
            trace.move(ExecutionState.VERSION_REQUESTED)
            self.out.print(
                Text(render_version(outcome.level.spec), style=OneColors.GREEN),
                soft_wrap=True,
            )
            return self._finish(trace, outcome, self.exit_codes.ok)

        if isinstance(outcome, ParseFailed):
            trace.move(ExecutionState.VALIDATION_FAILED)
            self._report_errors(outcome)
            return self._finish(trace, outcome, self.exit_codes.usage)

        trace.move(ExecutionState.READY)
        trace.move(ExecutionState.EXECUTING)
        level = self._handler_level(outcome.result)
        if level is None:
            logger.debug("No handler for '%s'; nothing to execute", outcome.result.leaf.command_path)
            trace.move(ExecutionState.SUCCESS)
            return self._finish(trace, outcome, self.exit_codes.ok)

        try:
            handler = ensure_async(level.spec.handler)
            returned = await handler(**level.as_kwargs())
        except Exception as cause:
            error = BusinessError(level.command_path, cause)
            logger.debug("Handler for '%s' failed: %s", level.command_path, cause)
            trace.move(ExecutionState.BUSINESS_ERROR)
            self._report_business_error(error)
            return self._finish(
                trace, outcome, self.exit_codes.software, error=error
            )

        trace.move(ExecutionState.SUCCESS)
        exit_code = self.exit_codes.ok
        if isinstance(returned, int) and not isinstance(returned, bool):
            exit_code = returned
            if not 0 <= returned <= 255:
                logger.warning(
                    "Handler for '%s' returned exit code %d outside 0..255; using %d",
                    level.command_path,
                    returned,
                    self.exit_codes.software,
                )
                exit_code = self.exit_codes.software
        return self._finish(trace, outcome, exit_code, returned=returned)

    def _finish(
        self,
        trace: StateTrace,
        outcome: ParseOutcome,
        exit_code: int,
        error: BusinessError | None = None,
        returned: Any = None,
    ) -> ExecutionResult:
        state = trace.current
        trace.move(ExecutionState.DONE)
        return ExecutionResult(
            exit_code=exit_code,
            state=state,
            states=tuple(trace.states),
            outcome=outcome,
            error=error,
            returned=returned,
        )

    def invoke(self, args: Iterable[str]) -> ExecutionResult:
        """Synchronous `invoke_async`; must not be called from a running event loop."""
        return asyncio.run(self.invoke_async(args))

    def execute(self, args: Iterable[str]) -> int:
        """Invoke and return only the exit code."""
        return self.invoke(args).exit_code

    def run(self, args: list[str] | None = None) -> None:
        """
        Invoke with `args` (default: `sys.argv[1:]`) and exit the process with
        the resulting exit code.
        """
        try:
            exit_code = self.execute(sys.argv[1:] if args is None else args)
        except KeyboardInterrupt:
            self.err.print(f"[{OneColors.DARK_RED}]❌ Cancelled by user.")
            sys.exit(130)
        sys.exit(exit_code)
