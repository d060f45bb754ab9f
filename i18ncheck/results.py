from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Dict, Iterator, List

from .console import RichLogger
from .models import FileKind, Finding, FindingKind


class ScanResults:
    """Findings and file counters for one module."""

    def __init__(self, name: str):
        self.name = name
        self.findings: Dict[FindingKind, List[Finding]] = {}
        self.file_counts: Dict[FileKind, int] = {}

    def add(self, kind: FindingKind, file: str, line: int, message: str) -> Finding:
        finding = Finding(kind, file, line, message)
        self.findings.setdefault(kind, []).append(finding)
        return finding

    def increment_file_counter(self, kind: FileKind) -> None:
        self.file_counts[kind] = self.file_counts.get(kind, 0) + 1

    def file_count(self, kind: FileKind) -> int:
        return self.file_counts.get(kind, 0)

    def count(self, kind: FindingKind) -> int:
        return len(self.findings.get(kind, []))

    @property
    def problems_count(self) -> int:
        return sum(len(items) for items in self.findings.values())

    def iter_findings(self) -> Iterator[Finding]:
        for kind in FindingKind:
            yield from self.findings.get(kind, [])

    def of_kind(self, kind: FindingKind) -> List[Finding]:
        return list(self.findings.get(kind, []))

    def summary_line(self) -> str:
        secondary = self.file_count(FileKind.SECONDARY_CATALOG)
        bundles = f"{self.file_count(FileKind.PRIMARY_CATALOG)} primary"
        if secondary:
            bundles += f", {secondary} secondary"
        return (
            f"Scanned {self.file_count(FileKind.SOURCE)} sources, {bundles} and "
            f"{self.file_count(FileKind.TRANSLATED_CATALOG)} translated resource bundles. "
            f"Found {self.problems_count} potential problems."
        )

    def render(self, details: bool = True) -> List[str]:
        lines = [self.summary_line()]
        if not details:
            return lines
        for kind in FindingKind:
            items = self.findings.get(kind)
            if not items:
                continue
            lines.append(kind.description)
            lines.extend(f.render() for f in items)
        return lines

    def summary(self) -> Dict[str, object]:
        return {
            "module": self.name,
            "problems": self.problems_count,
            "files": {k.value: v for k, v in sorted(self.file_counts.items(), key=lambda kv: kv[0].value)},
            "findings": {k.name: len(v) for k, v in self.findings.items() if v},
        }


class ResultStore:
    def __init__(self):
        self._lock = threading.Lock()
        self.modules: Dict[str, ScanResults] = {}

    def add(self, results: ScanResults) -> None:
        with self._lock:
            existing = self.modules.get(results.name)
            if existing is None:
                self.modules[results.name] = results
                return
            for finding in results.iter_findings():
                existing.add(finding.kind, finding.file, finding.line, finding.message)
            for kind, value in results.file_counts.items():
                existing.file_counts[kind] = existing.file_counts.get(kind, 0) + value

    def ordered(self) -> List[ScanResults]:
        with self._lock:
            return [self.modules[name] for name in sorted(self.modules)]

    def get(self, name: str) -> ScanResults | None:
        with self._lock:
            return self.modules.get(name)

    @property
    def total_problems(self) -> int:
        with self._lock:
            return sum(r.problems_count for r in self.modules.values())

    def count_by_kind(self) -> Dict[FindingKind, int]:
        totals = {kind: 0 for kind in FindingKind}
        for results in self.ordered():
            for kind in FindingKind:
                totals[kind] += results.count(kind)
        return totals

    def summary(self) -> Dict[str, object]:
        modules = self.ordered()
        return {
            "total_problems": sum(r.problems_count for r in modules),
            "kinds": {k.name: v for k, v in self.count_by_kind().items() if v},
            "modules": [r.summary() for r in modules],
        }


class ResultWriter:
    def __init__(self, out_dir: Path, logger: RichLogger):
        self.out_dir = out_dir
        self.logger = logger
        self.out_dir.mkdir(parents=True, exist_ok=True)

    def write_all(self, store: ResultStore, run_metadata: Dict[str, object]) -> None:
        with open(self.out_dir / "findings.jsonl", "w", encoding="utf-8") as f:
            for results in store.ordered():
                for finding in results.iter_findings():
                    payload = {
                        "module": results.name,
                        "kind": finding.kind.name,
                        "file": finding.file,
                        "line": finding.line,
                        "message": finding.message,
                    }
                    f.write(json.dumps(payload, ensure_ascii=False) + "\n")

        with open(self.out_dir / "summary.json", "w", encoding="utf-8") as f:
            json.dump(store.summary(), f, indent=2)

        with open(self.out_dir / "run_metadata.json", "w", encoding="utf-8") as f:
            json.dump(run_metadata, f, indent=2)

        self.logger.done(f"Results written to: {self.out_dir}")
