from datetime import timedelta
from enum import Enum
from pathlib import Path

from bindery import CommandLine, CommandSpec, ParserSettings
from bindery.version import __version__


class Sort(Enum):
    NAME = "name"
    SIZE = "size"
    MTIME = "mtime"


def tree(
    all: bool,
    dirs_only: bool,
    level: int | None,
    pattern: list[str],
    sort: Sort,
    color: bool,
    timeout: timedelta | None,
    directory: list[Path],
) -> int:
    roots = directory or [Path(".")]
    for root in roots:
        if not root.is_dir():
            raise NotADirectoryError(f"{root} is not a directory")
        print(root)
        _walk(root, "", 1, level, all, dirs_only, pattern, sort)
    return 0


def _walk(path, prefix, depth, level, show_all, dirs_only, patterns, sort):
    if level is not None and depth > level:
        return
    key = {
        Sort.NAME: lambda entry: entry.name,
        Sort.SIZE: lambda entry: entry.stat().st_size,
        Sort.MTIME: lambda entry: entry.stat().st_mtime,
    }[sort]
    entries = sorted(path.iterdir(), key=key)
    entries = [
        entry
        for entry in entries
        if (show_all or not entry.name.startswith("."))
        and (not dirs_only or entry.is_dir())
        and (not patterns or entry.is_dir() or any(entry.match(p) for p in patterns))
    ]
    for index, entry in enumerate(entries):
        last = index == len(entries) - 1
        print(f"{prefix}{'└── ' if last else '├── '}{entry.name}")
        if entry.is_dir():
            _walk(
                entry,
                prefix + ("    " if last else "│   "),
                depth + 1,
                level,
                show_all,
                dirs_only,
                patterns,
                sort,
            )


spec = CommandSpec(
    "tree",
    "List contents of directories in a [bold]tree-like[/bold] format.",
    version=f"tree (bindery {__version__})",
    handler=tree,
    help_epilog="Exit status is 0 on success, 1 on errors, 2 on usage errors.",
)
spec.option("-a", "--all", type=bool, help="All files are listed.")
spec.option("-d", "--dirs-only", type=bool, help="List directories only.")
spec.option("-L", "--level", type=int, help="Descend only level directories deep.")
spec.option(
    "-P", "--pattern", type=list[str], help="List only files that match the pattern."
)
spec.option("--sort", type=Sort, default=Sort.NAME, help="Sort entries by NAME, SIZE or MTIME.")
spec.option("--color", type=bool, negatable=True, default=True, help="Colorize output.")
spec.option("--timeout", type=timedelta, help="Give up after a duration such as 1m30s.")
spec.positional("directory", type=Path, arity="*", help="Directories to list.")

if __name__ == "__main__":
    CommandLine(spec, settings=ParserSettings(abbreviated_options=True)).run()
