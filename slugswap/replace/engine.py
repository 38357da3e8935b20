from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from slugswap.errors import ArgumentError
from slugswap.models import FileOutcome, OutcomeKind, ReplaceJob, ReplaceReport
from slugswap.utils import read_bytes, write_bytes_atomic

logger = logging.getLogger("slugswap")


def validate_job(job: ReplaceJob) -> None:
    if not job.search or not job.replace:
        raise ArgumentError("Search and replace strings cannot be empty.")


class ReplaceEngine:
    """Rewrite a literal token in each candidate file.

    Matching works on raw bytes, so files are never decoded or normalized
    and any encoding that embeds UTF-8 text unchanged is rewritten exactly.
    Per-file problems become skipped outcomes; the batch always completes.
    """

    encoding = "utf-8"

    def apply(
        self,
        files: Sequence[Path],
        job: ReplaceJob,
        root: Optional[Path] = None,
    ) -> ReplaceReport:
        validate_job(job)
        search = job.search.encode(self.encoding)
        replace = job.replace.encode(self.encoding)

        report = ReplaceReport(job=job, root=root, files_scanned=len(files))
        for path in files:
            outcome = self._process(path, search, replace, job.dry_run)
            logger.debug("%s: %s", path, outcome.kind.value)
            report.add(outcome)
        return report

    def _process(
        self, path: Path, search: bytes, replace: bytes, dry_run: bool
    ) -> FileOutcome:
        if not os.access(path, os.R_OK):
            logger.warning("Cannot read %s: not readable", path)
            return FileOutcome(path, OutcomeKind.SKIPPED_UNREADABLE)
        try:
            original = read_bytes(path)
        except OSError as exc:
            logger.warning("Cannot read %s: %s", path, exc)
            return FileOutcome(path, OutcomeKind.SKIPPED_READ_FAILED)

        occurrences = original.count(search)
        updated = original.replace(search, replace)
        if updated == original:
            return FileOutcome(path, OutcomeKind.UNCHANGED)

        if dry_run:
            return FileOutcome(path, OutcomeKind.WOULD_MODIFY, occurrences)

        if not os.access(path, os.W_OK):
            logger.warning("Cannot write %s: not writable", path)
            return FileOutcome(path, OutcomeKind.SKIPPED_UNWRITABLE, occurrences)
        try:
            write_bytes_atomic(path, updated)
        except OSError as exc:
            logger.warning("Cannot write %s: %s", path, exc)
            return FileOutcome(path, OutcomeKind.SKIPPED_WRITE_FAILED, occurrences)

        logger.info("Replaced in file: %s", path)
        return FileOutcome(path, OutcomeKind.MODIFIED, occurrences)
