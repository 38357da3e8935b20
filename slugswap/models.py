from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import FrozenSet, List, Optional, Tuple


@dataclass(frozen=True)
class ScanRequest:
    root: Path
    ignored_dirs: FrozenSet[str]
    allowed_extensions: FrozenSet[str]


@dataclass(frozen=True)
class TraversalWarning:
    path: Path
    message: str


@dataclass
class ScanResult:
    root: Path
    files: Tuple[Path, ...] = ()
    warnings: List[TraversalWarning] = field(default_factory=list)


@dataclass(frozen=True)
class ReplaceJob:
    search: str
    replace: str
    dry_run: bool = False


class OutcomeKind(str, Enum):
    MODIFIED = "modified"
    WOULD_MODIFY = "would_modify"
    UNCHANGED = "unchanged"
    SKIPPED_UNREADABLE = "skipped_unreadable"
    SKIPPED_READ_FAILED = "skipped_read_failed"
    SKIPPED_UNWRITABLE = "skipped_unwritable"
    SKIPPED_WRITE_FAILED = "skipped_write_failed"

    @property
    def is_skip(self) -> bool:
        return self.value.startswith("skipped_")

    @property
    def reason(self) -> Optional[str]:
        return SKIP_REASONS.get(self)


SKIP_REASONS = {
    OutcomeKind.SKIPPED_UNREADABLE: "not readable",
    OutcomeKind.SKIPPED_READ_FAILED: "could not read contents",
    OutcomeKind.SKIPPED_UNWRITABLE: "not writable",
    OutcomeKind.SKIPPED_WRITE_FAILED: "failed to write",
}


@dataclass(frozen=True)
class FileOutcome:
    path: Path
    kind: OutcomeKind
    occurrences: int = 0


@dataclass
class ReplaceReport:
    """Everything the engine decided for one pass over the candidate files.

    Outcomes are appended in processing order; the counts are derived from
    them so the report can never disagree with itself.
    """

    job: ReplaceJob
    root: Optional[Path] = None
    files_scanned: int = 0
    outcomes: List[FileOutcome] = field(default_factory=list)
    warnings: List[TraversalWarning] = field(default_factory=list)

    def add(self, outcome: FileOutcome) -> None:
        self.outcomes.append(outcome)

    def _of_kind(self, kind: OutcomeKind) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.kind is kind]

    @property
    def modified(self) -> List[FileOutcome]:
        return self._of_kind(OutcomeKind.MODIFIED)

    @property
    def would_modify(self) -> List[FileOutcome]:
        return self._of_kind(OutcomeKind.WOULD_MODIFY)

    @property
    def unchanged(self) -> List[FileOutcome]:
        return self._of_kind(OutcomeKind.UNCHANGED)

    @property
    def skipped(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.kind.is_skip]

    @property
    def modified_count(self) -> int:
        return len(self.modified)

    @property
    def would_modify_count(self) -> int:
        return len(self.would_modify)

    @property
    def changed_count(self) -> int:
        if self.job.dry_run:
            return self.would_modify_count
        return self.modified_count

    @property
    def changed(self) -> List[FileOutcome]:
        if self.job.dry_run:
            return self.would_modify
        return self.modified
