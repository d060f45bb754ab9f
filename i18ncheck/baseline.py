from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from .catalog import parse_catalog_lines
from .console import RichLogger
from .input_sources import read_text_lines
from .results import ResultStore


def load_baseline(path: str | Path, logger: Optional[RichLogger] = None) -> Dict[str, int]:
    baseline: Dict[str, int] = {}
    for key, entry in parse_catalog_lines(read_text_lines(path), str(path), logger=logger).items():
        try:
            baseline[key] = int(entry.value.strip())
        except ValueError:
            if logger is not None:
                logger.warn(f"{path}:{entry.line}: ignoring non-numeric baseline for {key}: {entry.value}")
    return baseline


def check_against_baseline(store: ResultStore, baseline: Dict[str, int]) -> List[str]:
    errors: List[str] = []
    for results in store.ordered():
        expected = baseline.get(results.name, 0)
        actual = results.problems_count
        if actual > expected:
            errors.append(f"Module {results.name}: Found {actual} errors in I18N (expected <= {expected}).")
    return errors
