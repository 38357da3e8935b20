from __future__ import annotations

from pathlib import Path
from typing import Optional

from slugswap.models import ReplaceJob, ReplaceReport, ScanResult
from slugswap.replace import ReplaceEngine, validate_job
from slugswap.scanner import DirectoryWalker, ScanPolicy


class ReplaceRunner:
    def __init__(
        self,
        policy: Optional[ScanPolicy] = None,
        engine: Optional[ReplaceEngine] = None,
    ) -> None:
        self.walker = DirectoryWalker(policy)
        self.engine = engine or ReplaceEngine()

    @property
    def policy(self) -> ScanPolicy:
        return self.walker.policy

    def scan(self, root: Path) -> ScanResult:
        return self.walker.scan(root)

    def prepare(self, root: Path, job: ReplaceJob) -> ScanResult:
        # Both checks happen before the tree is touched
        validate_job(job)
        return self.walker.scan(root)

    def run(self, root: Path, job: ReplaceJob) -> ReplaceReport:
        return self.apply(self.prepare(root, job), job)

    def apply(self, scan: ScanResult, job: ReplaceJob) -> ReplaceReport:
        report = self.engine.apply(scan.files, job, root=scan.root)
        report.warnings.extend(scan.warnings)
        return report
