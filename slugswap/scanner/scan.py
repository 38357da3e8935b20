from __future__ import annotations

import logging
import os
from collections import deque
from pathlib import Path
from typing import Callable, Deque, FrozenSet, Iterable, List, Optional, Set, Tuple

from slugswap.errors import DirectoryError, DirectoryErrorReason
from slugswap.models import ScanRequest, ScanResult, TraversalWarning
from slugswap.scanner.policy import ScanPolicy

logger = logging.getLogger("slugswap")


class DirectoryWalker:
    """Collect the files under a root that a replacement pass may touch.

    Subdirectories named in the policy's ignore list are pruned together with
    everything beneath them. Symbolic links are followed once the real tree
    has been walked; a link leading to a directory that was already entered
    (a cycle, or a second name for the same place) is not entered again.
    """

    def __init__(self, policy: Optional[ScanPolicy] = None) -> None:
        self.policy = policy or ScanPolicy.load_default()

    def scan(self, root: Path) -> ScanResult:
        return self.scan_request(self.policy.request_for(Path(root)))

    def scan_request(self, request: ScanRequest) -> ScanResult:
        root = request.root
        self.check_root(root)

        warnings: List[TraversalWarning] = []
        files = tuple(sorted(self._iter_files(request, warnings)))
        logger.debug("Scan of %s found %d candidate files", root, len(files))
        return ScanResult(root=root, files=files, warnings=warnings)

    @staticmethod
    def check_root(root: Path) -> None:
        if not root.exists():
            raise DirectoryError(root, DirectoryErrorReason.NOT_FOUND)
        if not root.is_dir():
            raise DirectoryError(root, DirectoryErrorReason.NOT_A_DIRECTORY)
        if not os.access(root, os.R_OK | os.X_OK):
            raise DirectoryError(root, DirectoryErrorReason.NOT_READABLE)

    def _iter_files(
        self, request: ScanRequest, warnings: List[TraversalWarning]
    ) -> Iterable[Path]:
        # Real directories are walked first and always win; linked directories
        # are entered afterwards, only if they lead somewhere not yet visited.
        visited: Set[Tuple[int, int]] = {self._dir_key(request.root)}
        links: Deque[Path] = deque()

        def _warn(path: Path, message: str) -> None:
            logger.warning("%s: %s", path, message)
            warnings.append(TraversalWarning(path=path, message=message))

        yield from self._walk(request.root, request, visited, links, _warn)

        while links:
            link = links.popleft()
            try:
                key = self._dir_key(link)
            except OSError as exc:
                _warn(link, f"cannot enter directory ({exc.strerror or exc})")
                continue
            if key in visited:
                _warn(link, "already visited, not following link again")
                continue
            visited.add(key)
            yield from self._walk(link, request, visited, links, _warn)

    def _walk(
        self,
        top: Path,
        request: ScanRequest,
        visited: Set[Tuple[int, int]],
        links: Deque[Path],
        warn: Callable[[Path, str], None],
    ) -> Iterable[Path]:
        def _on_error(exc: OSError) -> None:
            path = Path(exc.filename) if exc.filename else top
            warn(path, f"cannot enter directory ({exc.strerror or exc})")

        for dirpath, dirnames, filenames in os.walk(top, onerror=_on_error):
            base = Path(dirpath)

            # Pruning dirnames in place keeps os.walk out of these subtrees
            kept = []
            for name in sorted(dirnames):
                child = base / name
                if name in request.ignored_dirs:
                    logger.debug("Pruned ignored directory %s", child)
                    continue
                if os.path.islink(child):
                    links.append(child)
                    continue
                try:
                    key = self._dir_key(child)
                except OSError as exc:
                    warn(child, f"cannot enter directory ({exc.strerror or exc})")
                    continue
                if key in visited:
                    warn(child, "already visited through another link")
                    continue
                visited.add(key)
                kept.append(name)
            dirnames[:] = kept

            for name in filenames:
                path = base / name
                if self._is_candidate(path, request.allowed_extensions):
                    yield path

    @staticmethod
    def _dir_key(path: Path) -> Tuple[int, int]:
        st = os.stat(path)
        return st.st_dev, st.st_ino

    @staticmethod
    def _is_candidate(path: Path, allowed_extensions: FrozenSet[str]) -> bool:
        suffix = path.suffix
        if not suffix or suffix[1:] not in allowed_extensions:
            return False
        return os.path.isfile(path)
