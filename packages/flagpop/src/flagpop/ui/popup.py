"""tmux integration - run a flagpop popup in a tmux popup window.

PUBLIC API:
  - show_popup: Launch a popup in tmux
"""

import logging
import math
import shlex
import subprocess
from typing import Optional

from ..errors import PopupError
from ..types import PrefixArg

__all__ = ["show_popup"]

logger = logging.getLogger(__name__)


def run_tmux(args: list[str]) -> tuple[int, str, str]:
    """Run tmux command, return (returncode, stdout, stderr)."""
    cmd = ["tmux"] + args
    result = subprocess.run(cmd, capture_output=True, text=True)
    return result.returncode, result.stdout, result.stderr


def popup_command(popup: str, prefix_arg: Optional[PrefixArg] = None) -> str:
    """Build the shell command tmux runs inside the popup window."""
    parts = ["flagpop", popup]
    if prefix_arg is not None and prefix_arg.universal:
        presses = max(1, round(math.log(prefix_arg.value, 4)))
        parts.append("-" + "u" * presses)
    elif prefix_arg is not None:
        parts += ["--prefix", str(prefix_arg.value)]
    return shlex.join(parts)


def show_popup(popup: str, session: Optional[str] = None, prefix_arg: Optional[PrefixArg] = None) -> None:
    """Launch a flagpop popup in a tmux popup window.

    Args:
        popup: Popup name.
        session: Session to show the popup in. Uses current if None.
        prefix_arg: Prefix argument to pass through.

    Raises:
        PopupError: If tmux refuses to open the popup.
    """
    cmd = ["display-popup", "-E", popup_command(popup, prefix_arg)]

    if session:
        cmd.insert(1, "-t")
        cmd.insert(2, session)

    code, _, err = run_tmux(cmd)
    if code != 0:
        logger.error(f"tmux display-popup failed: {err.strip()}")
        raise PopupError(f"Cannot open tmux popup: {err.strip() or 'tmux failed'}")
