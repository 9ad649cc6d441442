from pathlib import Path

import pytest
from rich.style import Style

from bindery.help import option_synopsis, positional_synopsis, render_usage, render_version
from bindery.parser import CommandSpec
from bindery.themes import OneColors, get_bindery_theme


@pytest.fixture
def tree():
    spec = CommandSpec(
        "tree",
        "List contents of directories in a tree-like format.",
        version="tree 2.1.0",
        help_epilog="Report bugs to <bugs@example.com>.",
    )
    spec.option("-a", "--all", type=bool, help="All files are listed.")
    spec.option("-d", "--dirs-only", type=bool, help="List directories only.")
    spec.option("-L", "--level", type=int, help="Descend only level directories deep.")
    spec.option("-P", "--pattern", type=list[str], help="List only matching files.")
    spec.option("--secret", type=bool, hidden=True, help="Never shown.")
    spec.positional("directory", type=Path, arity="*", help="Directories to list.")
    return spec.validate()


def test_synopsis_line(tree):
    lines = render_usage(tree).splitlines()
    assert lines[0] == (
        "Usage: tree [-hVad] [-L=<level>] [-P=<pattern>]... [--] [<directory>...]"
    )
    assert lines[1] == "List contents of directories in a tree-like format."


def test_sections_and_rows(tree):
    text = render_usage(tree)
    assert "Positional parameters:" in text
    assert "Options:" in text
    assert "Commands:" not in text
    assert "  <directory>  Directories to list." in text
    assert "-L, --level=<level>" in text
    assert "-h, --help" in text
    assert text.rstrip().endswith("Report bugs to <bugs@example.com>.")


def test_hidden_options_are_omitted(tree):
    assert "--secret" not in render_usage(tree)


def test_rendering_is_deterministic(tree):
    assert render_usage(tree, width=60) == render_usage(tree, width=60)


def test_wraps_to_width(tree):
    text = render_usage(tree, width=40)
    assert all(len(line) <= 40 for line in text.splitlines())
    assert "Descend only level directories deep." not in text


def test_markup_is_stripped_without_ansi():
    spec = CommandSpec("demo", "[bold]Loud[/bold] description.")
    spec.option("--mode", help="Pick a [italic]mode[/italic].")
    text = render_usage(spec.validate())
    assert "Loud description." in text
    assert "Pick a mode." in text
    assert "\x1b[" not in text


def test_markup_renders_with_ansi():
    spec = CommandSpec("demo", "[bold]Loud[/bold] description.").validate()
    assert "\x1b[" in render_usage(spec, ansi=True)


def test_required_options_come_first():
    spec = CommandSpec("cat")
    spec.option("-n", "--number", type=bool)
    spec.option("-f", "--file", required=True)
    lines = render_usage(spec.validate()).splitlines()
    assert lines[0] == "Usage: cat -f=<file> [-hn]"


def test_subcommands_are_listed():
    git = CommandSpec("git", "The stupid content tracker.")
    git.add_subcommand("commit", CommandSpec("commit", "Record changes.\nMore.", aliases=["ci"]))
    text = render_usage(git.validate())
    assert text.splitlines()[0] == "Usage: git [-h] [COMMAND]"
    assert "Commands:" in text
    assert "commit, ci  Record changes." in text
    assert "More." not in text


def test_command_path_in_synopsis():
    git = CommandSpec("git")
    commit = git.add_subcommand("commit", CommandSpec("commit"))
    git.validate()
    assert render_usage(commit, command_path="git commit").startswith("Usage: git commit [-h]")


def test_option_synopsis_shapes():
    spec = CommandSpec("demo")
    pair = spec.option("--pair", type=list[str], arity=2)
    maybe = spec.option("--color", arity="?")
    many = spec.option("--files", type=list[str], arity="+", required=True)
    toggle = spec.option("--cache", type=bool, negatable=True)
    spec.validate()
    assert option_synopsis(pair) == "[--pair=<pair> <pair>]..."
    assert option_synopsis(maybe) == "[--color[=<color>]]"
    assert option_synopsis(many) == "--files=<files>..."
    assert option_synopsis(toggle) == "[--[no-]cache]"


def test_positional_synopsis_shapes():
    spec = CommandSpec("cp")
    src = spec.positional("src")
    dst = spec.positional("dst", required=False)
    spec.validate()
    assert positional_synopsis(src) == "<src>"
    assert positional_synopsis(dst) == "[<dst>]"

    tail = CommandSpec("ls")
    required_tail = tail.positional("files", arity="+")
    assert positional_synopsis(required_tail) == "<files>..."

    optional = CommandSpec("ls")
    optional_tail = optional.positional("files", arity="*")
    assert positional_synopsis(optional_tail) == "[<files>...]"


def test_render_version(tree):
    assert render_version(tree) == "tree 2.1.0"
    assert render_version(CommandSpec("x", version=["x 1.0", "built today"])) == (
        "x 1.0\nbuilt today"
    )
    assert render_version(CommandSpec("x")) == "x: no version information available"


def test_theme_defines_help_styles():
    styles = get_bindery_theme().styles
    for name in ("usage", "heading", "option", "parameter", "command"):
        assert name in styles
    assert styles["heading"] == Style.parse(f"bold {OneColors.BLUE}")
    assert styles["parameter"] == Style.parse(OneColors.LIGHT_YELLOW)
