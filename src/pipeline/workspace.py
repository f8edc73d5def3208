from __future__ import annotations

import hashlib
import logging
import shutil
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger("invoice_ocr.workspace")


def _workspace_name(input_file: Path) -> str:
    digest = hashlib.md5(f"{input_file}{time.time_ns()}".encode("utf-8")).hexdigest()
    return f".tmp_{digest}"


def _remove_workspace(workspace: Path) -> None:
    # Best-effort: a cleanup failure must not change the run's outcome.
    try:
        shutil.rmtree(workspace)
    except FileNotFoundError:
        return
    except OSError as e:
        logger.warning("Failed to remove scratch workspace %s: %s", workspace, e)


@contextmanager
def scratch_workspace(*, input_file: Path, parent: Path | None = None) -> Iterator[Path]:
    """
    Create a private, uniquely named scratch directory for one run.

    The directory and everything written into it is removed when the block
    exits, whether it finished normally or raised.
    """

    base = parent if parent is not None else Path(tempfile.gettempdir())
    base.mkdir(parents=True, exist_ok=True)
    workspace = base / _workspace_name(input_file)
    workspace.mkdir(mode=0o700)
    logger.debug("Created scratch workspace %s", workspace)
    try:
        yield workspace
    finally:
        _remove_workspace(workspace)
        logger.debug("Removed scratch workspace %s", workspace)
