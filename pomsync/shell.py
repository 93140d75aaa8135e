"""Terminal output and subprocess utilities.

Provides the small set of helpers every pipeline step uses to report progress,
plus a thin wrapper around subprocess for the external commands the release
runs (lockfile refresh).
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path


def run(
    *args: str, cwd: Path | None = None, check: bool = True
) -> subprocess.CompletedProcess[bytes]:
    """Run an external command.

    Output is not captured - it streams directly to the terminal so users
    can follow long-running commands like ``npm install``.

    Args:
        *args: Command and arguments (e.g., "npm", "install").
        cwd: Directory to run the command in.
        check: If True (default), raise on non-zero exit.

    Returns:
        CompletedProcess with returncode for checking success.
    """
    return subprocess.run(args, cwd=cwd, check=check)


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate major phases of the release pipeline in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def info(msg: str) -> None:
    print(f"  {msg}")


def warn(msg: str) -> None:
    print(f"  Warning: {msg}", file=sys.stderr)
