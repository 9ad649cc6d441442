import asyncio
import logging

from bindery import CommandLine, CommandSpec
from bindery.utils import setup_logging

logger = logging.getLogger("git-example")


def git(verbose: bool) -> None:
    print("usage: git [-v] <command>")


async def commit(message: str, all: bool, amend: bool) -> int:
    logger.info("Committing (all=%s, amend=%s)", all, amend)
    await asyncio.sleep(0.1)
    print(f"[main 1a2b3c4] {message}")
    return 0


async def push(remote: str, refspec: list[str], force: bool) -> None:
    if force and remote == "origin":
        raise PermissionError("force-pushing to origin is disabled")
    await asyncio.sleep(0.1)
    print(f"Pushed {', '.join(refspec) or 'HEAD'} to {remote}")


git_spec = CommandSpec("git", "The stupid content tracker.", version="git 2.43.0", handler=git)
git_spec.option("-v", "--verbose", type=bool, help="Be more verbose.")

commit_spec = CommandSpec("commit", "Record changes to the repository.", aliases=["ci"], handler=commit)
commit_spec.option("-m", "--message", required=True, help="Use the given message.")
commit_spec.option("-a", "--all", type=bool, help="Stage modified files first.")
commit_spec.option("--amend", type=bool, help="Replace the tip of the current branch.")
git_spec.add_subcommand("commit", commit_spec)

push_spec = CommandSpec("push", "Update remote refs.", handler=push)
push_spec.option("-f", "--force", type=bool, help="Force updates.")
push_spec.positional("remote", required=False, default="origin", help="The remote.")
push_spec.positional("refspec", arity="*", help="Refs to push.")
git_spec.add_subcommand("push", push_spec)

if __name__ == "__main__":
    setup_logging(console_log_level=logging.INFO)
    CommandLine(git_spec).run()
