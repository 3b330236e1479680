"""Output sinks for rendered tables.

A file sink replaces the target as a unit: lines go to a temporary file
in the same directory, which is renamed over the target only after every
line has been written and flushed.
"""

from __future__ import annotations

import os
import stat
import sys
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import structlog

from tabula.core.exceptions import OutputError

if TYPE_CHECKING:
    from collections.abc import Iterable

STDOUT_TARGET = "-"


def _target_mode(target: Path) -> int:
    """Permission bits the target should end up with.

    An existing target keeps its mode; a new one gets the usual umask default.
    """
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_lines(lines: Iterable[str], path: str | Path) -> int:
    """Write lines to path, replacing any previous content.

    Returns the number of lines written. Raises OutputError if the
    target cannot be written; the previous content is left untouched.
    """
    log = structlog.get_logger()
    target = Path(path)

    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
    except OSError as e:
        msg = f"Cannot write output to {target}: {e.strerror or e}"
        raise OutputError(msg) from e

    count = 0
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            for line in lines:
                f.write(line + "\n")
                count += 1
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, _target_mode(target))
        os.replace(tmp_name, target)
    except OSError as e:
        Path(tmp_name).unlink(missing_ok=True)
        msg = f"Cannot write output to {target}: {e.strerror or e}"
        raise OutputError(msg) from e
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    log.debug("output written", path=str(target), lines=count)
    return count


def write_stream(lines: Iterable[str], stream: TextIO | None = None) -> int:
    """Write lines to a text stream, stdout by default."""
    out = stream if stream is not None else sys.stdout
    count = 0
    try:
        for line in lines:
            out.write(line + "\n")
            count += 1
        out.flush()
    except OSError as e:
        raise OutputError(f"Cannot write output: {e}") from e
    return count


def deliver(lines: Iterable[str], target: str) -> int:
    """Send lines to target: a file path, or '-' for stdout."""
    if target == STDOUT_TARGET:
        return write_stream(lines)
    return write_lines(lines, target)
