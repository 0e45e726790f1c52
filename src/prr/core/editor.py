"""Invoke $EDITOR on the commit message file."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Mapping
from pathlib import Path

from .exceptions import EditorError

logger = logging.getLogger(__name__)

DEFAULT_EDITOR = "vi"


def editor_command(path: Path, environ: Mapping[str, str] | None = None) -> list[str]:
    """Build the editor argv: $EDITOR (with its own arguments) plus the path."""
    environ = os.environ if environ is None else environ
    editor = environ.get("EDITOR") or DEFAULT_EDITOR
    return [*shlex.split(editor), str(path)]


def edit_file(path: Path, environ: Mapping[str, str] | None = None) -> None:
    """Run the editor on path and wait for it to exit.

    The editor inherits the terminal. Only its exit status matters.

    Raises:
        EditorError: If the editor cannot be started or exits non-zero.
    """
    cmd = editor_command(path, environ)
    logger.debug("running editor: %s", cmd)
    try:
        result = subprocess.run(cmd, check=False)
    except OSError as e:
        raise EditorError(cmd[0], f"Unable to start editor '{cmd[0]}': {e}") from e

    if result.returncode != 0:
        raise EditorError(
            cmd[0],
            f"Editor '{cmd[0]}' exited with status {result.returncode}",
            exit_code=result.returncode,
        )
