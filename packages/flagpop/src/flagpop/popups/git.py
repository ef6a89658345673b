"""Git popups - log, commit, fetch, push and rebase.

Switches use "- x" chords and options "= x" chords, so every letter stays
free for actions. Handlers run git with the popup's current arguments and
return its combined output.

PUBLIC API:
  - run_git: Execute a git command and return result
  - rebase_in_progress: Check for an interrupted rebase
  - register_git_popups: Define the git popups in a registry
"""

import logging
import subprocess
from pathlib import Path

from ..context import current_args, current_invocation
from ..definition import ActionSpec, OptionSpec, SwitchSpec
from ..registry import PopupRegistry

__all__ = ["run_git", "rebase_in_progress", "register_git_popups"]

logger = logging.getLogger(__name__)


def run_git(args: list[str]) -> tuple[int, str, str]:
    """Run git command, return (returncode, stdout, stderr)."""
    cmd = ["git"] + args
    logger.info(f"Running {' '.join(cmd)}")
    result = subprocess.run(cmd, capture_output=True, text=True)
    if result.returncode != 0:
        logger.warning(f"git {args[0]} exited with {result.returncode}: {result.stderr.strip()}")
    return result.returncode, result.stdout, result.stderr


def _output(result: tuple[int, str, str]) -> str:
    _, out, err = result
    return out + err


def _git(command: str, *extra: str) -> str:
    return _output(run_git([command, *current_args(), *extra]))


def _has_message() -> bool:
    return any(arg.startswith("--message=") for arg in current_args())


def rebase_in_progress() -> bool:
    """Check if the current repository has a rebase stopped midway."""
    code, out, _ = run_git(["rev-parse", "--git-dir"])
    if code != 0:
        return False
    git_dir = Path(out.strip())
    return (git_dir / "rebase-merge").exists() or (git_dir / "rebase-apply").exists()


# Log


def log_current() -> str:
    """Show the log of the current branch."""
    return _git("log")


def log_all() -> str:
    """Show the log of all references."""
    return _git("log", "--all")


def log_head() -> str:
    """Show the log of HEAD only, capped by a numeric prefix argument."""
    invocation = current_invocation()
    if invocation and invocation.prefix_arg and not invocation.prefix_arg.universal:
        return _git("log", "-n", str(invocation.prefix_arg.value), "HEAD")
    return _git("log", "HEAD")


# Commit


def commit_create() -> str:
    """Record the staged changes as a new commit.

    Needs a message set with "= m"; git cannot open an editor while the
    popup owns the terminal.
    """
    if not _has_message():
        logger.warning("Commit aborted: no --message= set")
        return "Commit aborted: set a message with =m first.\n"
    return _git("commit")


def commit_amend() -> str:
    """Amend the last commit, keeping its message unless one is set."""
    if _has_message():
        return _git("commit", "--amend")
    return _git("commit", "--amend", "--no-edit")


def commit_fixup() -> str:
    """Create a fixup commit for HEAD."""
    return _git("commit", "--fixup=HEAD")


# Fetch


def fetch_upstream() -> str:
    """Fetch from the upstream of the current branch."""
    return _git("fetch")


def fetch_all() -> str:
    """Fetch from every remote."""
    return _git("fetch", "--all")


# Push


def push_upstream() -> str:
    """Push the current branch to its upstream."""
    return _git("push")


def push_tags() -> str:
    """Push all tags."""
    return _git("push", "--tags")


# Rebase


def rebase_onto_upstream() -> str:
    """Rebase the current branch onto its upstream."""
    return _git("rebase")


def rebase_continue() -> str:
    """Continue the stopped rebase."""
    return _output(run_git(["rebase", "--continue"]))


def rebase_skip() -> str:
    """Skip the current patch and continue the stopped rebase."""
    return _output(run_git(["rebase", "--skip"]))


def rebase_abort() -> str:
    """Abort the stopped rebase and restore the original branch."""
    return _output(run_git(["rebase", "--abort"]))


def register_git_popups(registry: PopupRegistry) -> None:
    """Define the git popups.

    Args:
        registry: Registry to define them in.
    """
    registry.define(
        "log",
        man_page="git-log",
        switches=[
            SwitchSpec("- g", "Show graph", "--graph", enabled=True),
            SwitchSpec("- d", "Show refnames", "--decorate", enabled=True),
            SwitchSpec("- o", "One line per commit", "--oneline"),
            SwitchSpec("- m", "Omit merges", "--no-merges"),
            SwitchSpec("- r", "Reverse order", "--reverse"),
        ],
        options=[
            OptionSpec("= n", "Limit number of commits", "-n", default="256"),
            OptionSpec("= a", "Limit to author", "--author="),
            OptionSpec("= g", "Search messages", "--grep="),
            OptionSpec("= s", "Since date", "--since="),
        ],
        actions=[
            ActionSpec("l", "Log current", log_current),
            ActionSpec("a", "Log all references", log_all),
            ActionSpec("h", "Log HEAD", log_head),
        ],
        default_action=log_current,
        max_action_columns=2,
    )

    registry.define(
        "commit",
        man_page="git-commit",
        serialization="structured",
        switches=[
            SwitchSpec("- a", "Stage all modified and deleted files", "--all"),
            SwitchSpec("- e", "Allow empty commit", "--allow-empty"),
            SwitchSpec("- v", "Show diff of changes to be committed", "--verbose"),
            SwitchSpec("- n", "Disable hooks", "--no-verify"),
            SwitchSpec("- s", "Add Signed-off-by line", "--signoff"),
        ],
        options=[
            OptionSpec("= A", "Override the author", "--author="),
            OptionSpec("= m", "Commit message", "--message="),
        ],
        actions=[
            ActionSpec("c", "Commit", commit_create),
            ActionSpec("e", "Amend", commit_amend),
            ActionSpec("f", "Fixup", commit_fixup),
        ],
    )

    registry.define(
        "fetch",
        man_page="git-fetch",
        use_prefix="popup",
        switches=[
            SwitchSpec("- p", "Prune deleted branches", "--prune"),
            SwitchSpec("- t", "Fetch all tags", "--tags"),
        ],
        options=[
            OptionSpec("= d", "Deepen history by", "--deepen="),
        ],
        actions=[
            ActionSpec("u", "Fetch upstream", fetch_upstream),
            ActionSpec("a", "Fetch all remotes", fetch_all),
        ],
        default_action=fetch_upstream,
    )

    registry.define(
        "push",
        man_page="git-push",
        use_prefix="disabled",
        switches=[
            SwitchSpec("- f", "Force with lease", "--force-with-lease"),
            SwitchSpec("- n", "Dry run", "--dry-run"),
            SwitchSpec("- u", "Set upstream", "--set-upstream"),
        ],
        actions=[
            ActionSpec("p", "Push to upstream", push_upstream),
            ActionSpec("t", "Push tags", push_tags),
        ],
    )

    registry.define(
        "rebase",
        man_page="git-rebase",
        switches=[
            SwitchSpec("- k", "Keep empty commits", "--keep-empty"),
            SwitchSpec("- a", "Autosquash", "--autosquash"),
            SwitchSpec("- s", "Autostash", "--autostash"),
        ],
        actions=[
            ActionSpec("e", "Rebase onto upstream", rebase_onto_upstream),
        ],
        sequence_predicate=rebase_in_progress,
        sequence_actions=[
            ActionSpec("r", "Continue", rebase_continue),
            ActionSpec("s", "Skip", rebase_skip),
            ActionSpec("a", "Abort", rebase_abort),
        ],
    )
