"""Git branch lookup for cctop."""

import subprocess
from pathlib import Path

from cctop.core.session import UNKNOWN_BRANCH


def get_current_branch(cwd: Path) -> str:
    """Get the checked-out branch of the repository containing cwd.

    Returns "unknown" when cwd is not a repository, git is missing, HEAD is
    detached, or the lookup times out.
    """
    try:
        result = subprocess.run(
            ["git", "branch", "--show-current"],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=2,
        )
    except (subprocess.TimeoutExpired, OSError):
        return UNKNOWN_BRANCH

    branch = result.stdout.strip()
    if result.returncode != 0 or not branch:
        return UNKNOWN_BRANCH
    return branch
