"""
Subprocess execution for ``xcrun simctl``.

Every failure mode (missing tool, non-zero exit, timeout) is surfaced as a
BridgeError carrying the command and its stderr.
"""

import logging
import subprocess
from typing import List, Optional, Sequence

from ..core.exceptions import BridgeError

logger = logging.getLogger(__name__)


def run_command(
    cmd: Sequence[str],
    timeout: Optional[float] = None,
    check: bool = True,
) -> subprocess.CompletedProcess:
    """Run ``cmd`` and return the completed process.

    Raises:
        BridgeError: if the executable is missing, the command times out, or
            (with ``check``) exits non-zero.
    """
    args: List[str] = list(cmd)
    logger.debug(f"exec: {' '.join(args)}")

    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=timeout if timeout and timeout > 0 else None,
            check=False,
        )
    except FileNotFoundError as e:
        raise BridgeError(
            f"Command not found: {args[0]}", command=args
        ) from e
    except subprocess.TimeoutExpired as e:
        raise BridgeError(
            f"Command timed out after {timeout}s: {' '.join(args)}", command=args
        ) from e

    if check and result.returncode != 0:
        stderr_msg = result.stderr.strip() if result.stderr else ""
        message = f"Command failed (exit code {result.returncode}): {' '.join(args)}"
        if stderr_msg:
            message += f": {stderr_msg.splitlines()[-1]}"
        raise BridgeError(
            message,
            command=args,
            returncode=result.returncode,
            stderr=stderr_msg,
        )
    return result


def simctl_command(xcrun: str, *args: str) -> List[str]:
    """Build an ``xcrun simctl`` argument vector."""
    return [xcrun, "simctl", *args]
