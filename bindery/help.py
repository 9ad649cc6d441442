# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Usage help rendering for `CommandSpec`s.

`render_usage()` is a pure function of a validated spec and a display width: it
lays the help out with Rich into an in-memory console and returns the text, so the
same spec and width always produce the same output.

Layout:
    Usage: <command path> <required options> [<optional options>] [--] <positionals> [COMMAND]
    <description>

    Positional parameters:
      <label>            help
    Options:
      -f, --file=<file>  help
    Commands:
      name, alias        description
    <epilog>

Option, positional, and command descriptions may contain Rich console markup
(`[bold]...[/bold]`). It is rendered as ANSI styling when `ansi=True` (the driver
passes `console.is_terminal`) and stripped otherwise.
"""
from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.padding import Padding
from rich.table import Table
from rich.text import Text

from bindery.parser.command_spec import CommandSpec
from bindery.parser.option_spec import OptionSpec
from bindery.parser.positional_spec import PositionalParamSpec
from bindery.themes import get_bindery_theme

DEFAULT_WIDTH = 80


def _value_text(option: OptionSpec) -> str:
    """The `=<label>` part of an option, shaped by its arity."""
    arity = option.arity
    label = option.label
    if option.is_flag:
        return ""
    if arity.is_fixed:
        return f"={label}" + f" {label}" * (arity.min - 1)
    if arity.min == 0 and arity.max == 1:
        return f"[={label}]"
    if arity.min == 0:
        return f"[={label}...]"
    return f"={label}..."


def _option_name(option: OptionSpec) -> str:
    name = option.names[0]
    if option.negatable and name.startswith("--"):
        return f"--[no-]{name[2:]}"
    return name


def option_synopsis(option: OptionSpec) -> str:
    text = f"{_option_name(option)}{_value_text(option)}"
    repeated = option.value_type.is_collection and option.arity.is_fixed
    if option.required:
        return f"{text}..." if repeated else text
    return f"[{text}]..." if repeated else f"[{text}]"


def positional_synopsis(positional: PositionalParamSpec) -> str:
    label = positional.display_label
    arity = positional.arity
    repeated = arity.max is None or arity.max > 1
    if arity.min >= 1:
        return f"{label}..." if repeated else label
    return f"[{label}...]" if repeated else f"[{label}]"


def _is_clusterable(option: OptionSpec) -> bool:
    return (
        option.is_flag
        and not option.required
        and not option.negatable
        and any(len(name) == 2 for name in option.names)
    )


def synopsis(spec: CommandSpec, command_path: str | None = None) -> Text:
    """
    The one-line usage synopsis.

    Order: command path, required options, optional options (short flags
    clustered as `[-abc]`), `[--]` when positionals exist, positional labels
    with cardinality, then `[COMMAND]` when subcommands exist.
    """
    visible = [option for option in spec.options if not option.hidden]
    required = [option for option in visible if option.required]
    optional = [option for option in visible if not option.required]
    clustered = [option for option in optional if _is_clusterable(option)]

    parts: list[Text] = [Text(command_path or spec.name, style="command")]
    parts.extend(Text(option_synopsis(option), style="option") for option in required)
    if clustered:
        letters = "".join(
            next(name[1] for name in option.names if len(name) == 2)
            for option in clustered
        )
        parts.append(Text(f"[-{letters}]", style="option"))
    parts.extend(
        Text(option_synopsis(option), style="option")
        for option in optional
        if option not in clustered
    )
    if spec.positionals:
        parts.append(Text("[--]"))
        ordered = sorted(spec.positionals, key=lambda p: p.index.start)
        parts.extend(
            Text(positional_synopsis(positional), style="parameter")
            for positional in ordered
        )
    if spec.subcommands:
        parts.append(Text("[COMMAND]", style="command"))
    return Text(" ").join(parts)


def _option_names_text(option: OptionSpec) -> Text:
    names = [
        f"--[no-]{name[2:]}" if option.negatable and name.startswith("--") else name
        for name in option.names
    ]
    return Text(", ".join(names) + _value_text(option), style="option")


def _listing() -> Table:
    table = Table.grid(padding=(0, 2))
    table.add_column(no_wrap=True)
    table.add_column(overflow="fold")
    return table


def _build_sections(spec: CommandSpec, command_path: str | None) -> list:
    renderables: list = []
    renderables.append(Text.assemble(("Usage: ", "usage"), synopsis(spec, command_path)))
    if spec.description:
        renderables.append(Text.from_markup(spec.description))

    if spec.positionals:
        renderables.append(Text(""))
        renderables.append(Text("Positional parameters:", style="heading"))
        table = _listing()
        for positional in sorted(spec.positionals, key=lambda p: p.index.start):
            table.add_row(
                Text(positional.display_label, style="parameter"),
                Text.from_markup(positional.help),
            )
        renderables.append(Padding.indent(table, 2))

    visible = [option for option in spec.options if not option.hidden]
    if visible:
        if not spec.positionals:
            renderables.append(Text(""))
        renderables.append(Text("Options:", style="heading"))
        table = _listing()
        for option in visible:
            table.add_row(_option_names_text(option), Text.from_markup(option.help))
        renderables.append(Padding.indent(table, 2))

    if spec.subcommands:
        renderables.append(Text("Commands:", style="heading"))
        table = _listing()
        for name, subcommand in spec.subcommands.items():
            table.add_row(
                Text(", ".join((name, *subcommand.aliases)), style="command"),
                Text.from_markup(subcommand.description.split("\n")[0]),
            )
        renderables.append(Padding.indent(table, 2))

    if spec.help_epilog:
        renderables.append(Text(""))
        renderables.append(Text.from_markup(spec.help_epilog))
    return renderables


def _render(renderables: list, width: int, ansi: bool) -> str:
    console = Console(
        file=StringIO(),
        width=width,
        force_terminal=ansi,
        color_system="standard" if ansi else None,
        highlight=False,
        emoji=False,
        theme=get_bindery_theme(),
    )
    for renderable in renderables:
        console.print(renderable)
    output = console.file.getvalue()  # type: ignore[attr-defined]
    return "\n".join(line.rstrip() for line in output.split("\n"))


def render_usage(
    spec: CommandSpec,
    width: int = DEFAULT_WIDTH,
    *,
    ansi: bool = False,
    command_path: str | None = None,
) -> str:
    """
    Render usage help for a command level.

    Args:
        spec (CommandSpec): The validated command to describe.
        width (int): Display width; descriptions wrap to fit.
        ansi (bool): Emit ANSI styling for markup instead of stripping it.
        command_path (str | None): Full command path shown in the synopsis,
            e.g. "git remote add". Defaults to the command's own name.

    Returns:
        str: The formatted help text.
    """
    return _render(_build_sections(spec, command_path), max(width, 20), ansi)


def render_version(spec: CommandSpec) -> str:
    """Version text for a command: its version lines joined by newlines."""
    if not spec.version:
        return f"{spec.name}: no version information available"
    return "\n".join(spec.version)
