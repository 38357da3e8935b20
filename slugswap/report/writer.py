from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from slugswap.models import FileOutcome, ReplaceReport
from slugswap.utils import display_path, to_json


class ReportWriter:
    FORMATS = ("text", "md", "json")

    def render(self, report: ReplaceReport, format: str = "text") -> str:
        if format == "json":
            return self.to_json(report)
        if format == "md":
            return self.to_markdown(report)
        if format == "text":
            return self.to_text(report)
        raise ValueError(f"format must be one of: {', '.join(self.FORMATS)}")

    def summary(self, report: ReplaceReport) -> str:
        if report.job.dry_run:
            return f"{report.would_modify_count} file(s) would be modified."
        return f"{report.modified_count} file(s) modified."

    def to_text(self, report: ReplaceReport) -> str:
        lines: List[str] = []
        changed = report.changed

        if report.job.dry_run:
            if changed:
                lines.append("Files that would be modified:")
                lines.extend(f"- {self._path(o, report)}" for o in changed)
                lines.append("")
            lines.append(f"Success: Dry run completed. {self.summary(report)}")
        else:
            for o in changed:
                lines.append(f"Replaced in file: {self._path(o, report)}")
            if changed:
                lines.append("")
            lines.append(f"Success: {self.summary(report)}")

        if report.skipped:
            lines.append("")
            lines.append("Skipped files:")
            for o in report.skipped:
                lines.append(f"- {self._path(o, report)} (Reason: {o.kind.reason})")

        if report.warnings:
            lines.append("")
            lines.append("Warnings:")
            for w in report.warnings:
                lines.append(f"- {display_path(w.path, report.root)}: {w.message}")

        return "\n".join(lines)

    def to_markdown(self, report: ReplaceReport) -> str:
        job = report.job
        mode = "dry run" if job.dry_run else "live"
        lines = ["# Replace Report", ""]
        lines.append(f"**Search:** `{job.search}`")
        lines.append(f"**Replace:** `{job.replace}`")
        lines.append(f"**Mode:** {mode}")
        lines.append(f"**Files scanned:** {report.files_scanned}")
        lines.append("")

        heading = "Would Modify" if job.dry_run else "Modified"
        changed = report.changed
        if changed:
            lines.append(f"## {heading} ({len(changed)})")
            lines.append("")
            for o in changed:
                lines.append(f"- `{self._path(o, report)}` ({o.occurrences} occurrence(s))")
            lines.append("")
        else:
            lines.append(f"## {heading}\n\nNo files.\n")

        if report.skipped:
            lines.append(f"## Skipped ({len(report.skipped)})")
            lines.append("")
            for o in report.skipped:
                lines.append(f"- `{self._path(o, report)}`: {o.kind.reason}")
            lines.append("")

        if report.warnings:
            lines.append(f"## Warnings ({len(report.warnings)})")
            lines.append("")
            for w in report.warnings:
                lines.append(f"- `{display_path(w.path, report.root)}`: {w.message}")
            lines.append("")

        lines.append(self.summary(report))
        return "\n".join(lines)

    def to_json(self, report: ReplaceReport) -> str:
        return to_json(self.to_dict(report))

    def to_dict(self, report: ReplaceReport) -> Dict[str, Any]:
        return {
            "search": report.job.search,
            "replace": report.job.replace,
            "dry_run": report.job.dry_run,
            "root": str(report.root) if report.root is not None else None,
            "files_scanned": report.files_scanned,
            "changed_count": report.changed_count,
            "outcomes": [
                {
                    "path": self._path(o, report),
                    "outcome": o.kind.value,
                    "occurrences": o.occurrences,
                    "reason": o.kind.reason,
                }
                for o in report.outcomes
            ],
            "warnings": [
                {"path": display_path(w.path, report.root), "message": w.message}
                for w in report.warnings
            ],
        }

    def _path(self, outcome: FileOutcome, report: ReplaceReport) -> str:
        return display_path(outcome.path, report.root)

    def write(self, path: Path, content: str) -> None:
        path.write_text(content, encoding="utf-8")
