"""
Bindery CLI Framework

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .command_line import CommandLine, ExecutionResult
from .logger import logger
from .parser.command_spec import CommandSpec
from .settings import ExitCodes, ParserSettings
from .state import ExecutionState


__all__ = [
    "CommandLine",
    "CommandSpec",
    "ExecutionResult",
    "ExecutionState",
    "ExitCodes",
    "ParserSettings",
    "logger",
]
