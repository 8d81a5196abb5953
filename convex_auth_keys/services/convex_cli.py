"""
Running the Convex CLI as a subprocess.
"""
import subprocess
import sys
from pathlib import Path
from typing import Callable, List

from pydantic import BaseModel

from convex_auth_keys.logging_config import get_logger

logger = get_logger(__name__)


class CommandResult(BaseModel):
    """Outcome of one finished subprocess."""
    exit_code: int
    stdout: str = ""
    stderr: str = ""


CommandRunner = Callable[[List[str]], CommandResult]


def build_env_set_command(local_bin: Path, key: str, value: str) -> List[str]:
    """
    Build argv for `convex env set KEY VALUE`.

    Uses the project's node_modules/.bin/convex when installed, npx otherwise.

    Args:
        local_bin: Path of the locally installed Convex CLI
        key: Variable name
        value: Variable value

    Returns:
        Command line as a list
    """
    if local_bin.exists():
        return [str(local_bin), "env", "set", key, value]
    npx = "npx.cmd" if sys.platform == "win32" else "npx"
    return [npx, "convex", "env", "set", key, value]


def run_command(argv: List[str]) -> CommandResult:
    """
    Run a command to completion and capture its output.

    Raises:
        OSError: If the executable cannot be started
    """
    # .cmd shims only run through the shell on Windows
    use_shell = sys.platform == "win32" and argv[0].lower().endswith(".cmd")
    logger.debug("running_command", executable=argv[0], args=argv[1:4])
    completed = subprocess.run(
        subprocess.list2cmdline(argv) if use_shell else argv,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        shell=use_shell,
    )
    return CommandResult(
        exit_code=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
