from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger("slugswap")


def read_bytes(path: Path) -> bytes:
    with open(path, "rb") as handle:
        return handle.read()


def write_bytes_atomic(path: Path, content: bytes) -> None:
    """Overwrite ``path`` with ``content`` without leaving a half-written file.

    The data goes to a temporary file next to the real target, which then
    replaces it with the target's mode and ownership. Symlinks are resolved
    first so the link itself survives. Hard-linked files, and targets whose
    directory refuses the temporary file, are overwritten in place instead
    so every name keeps pointing at the same inode.
    """
    target = Path(os.path.realpath(path))
    st = os.stat(target)
    if st.st_nlink > 1:
        logger.debug("%s has %d links, writing in place", target, st.st_nlink)
        _write_in_place(target, content)
        return
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
    except OSError as exc:
        logger.debug("Cannot stage %s (%s), writing in place", target, exc)
        _write_in_place(target, content)
        return

    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        shutil.copymode(target, tmp_name)
        _copy_owner(st, tmp_name)
        os.replace(tmp_name, target)
    except BaseException:
        _remove_quietly(tmp_name)
        raise


def _copy_owner(st: os.stat_result, name: str) -> None:
    if not hasattr(os, "chown"):
        return
    try:
        os.chown(name, st.st_uid, st.st_gid)
    except PermissionError:
        # Only a privileged user can hand a file to another owner
        logger.debug("Cannot keep owner %d:%d on %s", st.st_uid, st.st_gid, name)


def _write_in_place(path: Path, content: bytes) -> None:
    with open(path, "r+b") as handle:
        handle.write(content)
        handle.truncate()


def _remove_quietly(name: str) -> None:
    try:
        os.unlink(name)
    except FileNotFoundError:
        pass


def display_path(path: Path, root: Optional[Path]) -> str:
    if root is None:
        return str(path)
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


def to_json(data: Dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=True)
