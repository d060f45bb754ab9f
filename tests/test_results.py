from __future__ import annotations

import json

from i18ncheck.baseline import check_against_baseline, load_baseline
from i18ncheck.models import FileKind, FindingKind
from i18ncheck.results import ResultStore, ResultWriter, ScanResults

from conftest import write


def _results(name: str, problems: int) -> ScanResults:
    results = ScanResults(name)
    for i in range(problems):
        results.add(FindingKind.MISSING_NOI18N_OR_KEY, f"{name}/A.java", i + 1, f"text {i}")
    return results


def test_findings_iterate_in_kind_order():
    results = ScanResults("mod")
    results.add(FindingKind.REDUNDANT_SUPPRESSION_MARKER, "A.java", 9, "r")
    results.add(FindingKind.POSSIBLY_UNUSED_ENTRY, "Bundle.properties", 2, "Unused")
    results.add(FindingKind.MISSING_KEY_IN_BUNDLE, "A.java", 4, "Key")

    assert [f.kind for f in results.iter_findings()] == [
        FindingKind.MISSING_KEY_IN_BUNDLE,
        FindingKind.POSSIBLY_UNUSED_ENTRY,
        FindingKind.REDUNDANT_SUPPRESSION_MARKER,
    ]
    lines = results.render()
    assert lines[1] == FindingKind.MISSING_KEY_IN_BUNDLE.description
    assert lines[2] == "A.java:4: Key"


def test_summary_line_counts_files():
    results = _results("mod", 2)
    results.increment_file_counter(FileKind.SOURCE)
    results.increment_file_counter(FileKind.PRIMARY_CATALOG)

    assert results.summary_line() == (
        "Scanned 1 sources, 1 primary and 0 translated resource bundles. Found 2 potential problems."
    )
    results.increment_file_counter(FileKind.SECONDARY_CATALOG)
    assert "1 primary, 1 secondary and" in results.summary_line()
    assert results.render(details=False) == [results.summary_line()]


def test_store_orders_by_identity():
    store = ResultStore()
    store.add(_results("zeta", 1))
    store.add(_results("alpha", 2))
    store.add(_results("alpha", 1))

    assert [r.name for r in store.ordered()] == ["alpha", "zeta"]
    assert store.get("alpha").problems_count == 3
    assert store.total_problems == 4
    assert store.count_by_kind()[FindingKind.MISSING_NOI18N_OR_KEY] == 4


def test_writer_outputs(tmp_path, logger):
    store = ResultStore()
    store.add(_results("mod", 2))
    ResultWriter(tmp_path / "out", logger).write_all(store, {"root": "x"})

    findings = (tmp_path / "out" / "findings.jsonl").read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["line"] for line in findings] == [1, 2]
    summary = json.loads((tmp_path / "out" / "summary.json").read_text(encoding="utf-8"))
    assert summary["total_problems"] == 2
    assert summary["modules"][0]["findings"] == {"MISSING_NOI18N_OR_KEY": 2}


def test_baseline_regression(tmp_path, logger):
    path = write(tmp_path / "baseline.properties", "# expected problem counts", "mod/a=1", "mod/b=3", "mod/c=lots")
    baseline = load_baseline(path, logger)
    assert baseline == {"mod/a": 1, "mod/b": 3}

    store = ResultStore()
    store.add(_results("mod/a", 2))
    store.add(_results("mod/b", 3))
    store.add(_results("mod/new", 1))

    assert check_against_baseline(store, baseline) == [
        "Module mod/a: Found 2 errors in I18N (expected <= 1).",
        "Module mod/new: Found 1 errors in I18N (expected <= 0).",
    ]
