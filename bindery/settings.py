# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Runtime configuration models for parsing and execution.

Both models are frozen pydantic models, so a configured `CommandLine` can be
shared safely and invalid values are rejected when the model is built.

- `ParserSettings`: Matching behavior of the `Binder` and reporting behavior of
  `CommandLine`.
- `ExitCodes`: Process exit codes for success, business errors, and usage errors.

Example:
    settings = ParserSettings(abbreviated_options=True, allow_unmatched=True)
    exit_codes = ExitCodes(usage=64, software=70)
"""
from pydantic import BaseModel, ConfigDict, Field


class ParserSettings(BaseModel):
    """
    Matching and reporting switches.

    Attributes:
        abbreviated_options (bool): Accept unique prefixes of long option names.
        allow_unmatched (bool): Keep unknown options and surplus positionals as
            leftovers instead of reporting them as errors.
        posix_clustering (bool): Expand bundled short flags such as `-abc`.
        report_all_errors (bool): Print every parse error instead of the first.
        show_traceback (bool): Print a traceback for business errors.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    abbreviated_options: bool = False
    allow_unmatched: bool = False
    posix_clustering: bool = True
    report_all_errors: bool = False
    show_traceback: bool = False


class ExitCodes(BaseModel):
    """Exit codes used by `CommandLine`."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ok: int = Field(default=0, ge=0, le=255)
    software: int = Field(default=1, ge=0, le=255)
    usage: int = Field(default=2, ge=0, le=255)
