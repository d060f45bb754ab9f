from __future__ import annotations

import pytest

from i18ncheck.catalog import Catalog, catalog_language, parse_catalog_lines
from i18ncheck.models import FileKind, FindingKind
from i18ncheck.results import ScanResults

from conftest import write


def test_value_spanning_three_lines():
    entries = parse_catalog_lines(["Key=first \\", "    second \\", "    third", "Next=1"], "b.properties")

    assert entries["Key"].value == "first second third"
    assert entries["Key"].line == 1
    assert entries["Next"].line == 4


def test_even_backslashes_do_not_continue():
    entries = parse_catalog_lines(["Path=C:\\\\", "Other=x"], "b.properties")

    assert entries["Path"].value == "C:\\\\"
    assert entries["Other"].value == "x"


def test_key_is_trimmed_value_is_not():
    entries = parse_catalog_lines(["  Label =  Hello"], "b.properties")
    assert entries["Label"].value == "  Hello"


def test_intentional_marker_applies_to_next_entry_only():
    entries = parse_catalog_lines(["# YESI18N", "", "A=1", "B=2"], "b.properties")

    assert entries["A"].intentional
    assert not entries["B"].intentional
    assert not entries["A"].possibly_unused
    assert entries["B"].possibly_unused


def test_malformed_lines_warn_and_are_skipped(logger):
    warnings = []
    entries = parse_catalog_lines(["=oops", "noequals", "C=3"], "f.properties", logger=logger, warnings=warnings)

    assert list(entries) == ["C"]
    assert warnings == [
        "f.properties:1: WARNING: incorrect key: =oops",
        "f.properties:2: WARNING: incorrect key: noequals",
    ]
    assert "incorrect key" in logger.console.file.getvalue()


def test_duplicate_key_last_write_wins():
    entries = parse_catalog_lines(["A=1", "B=2", "A=3"], "b.properties")

    assert list(entries) == ["B", "A"]
    assert entries["A"].value == "3"
    assert entries["A"].line == 3


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Bundle_ja.properties", "ja"),
        ("Bundle_pt_BR.properties", "pt_BR"),
        ("Bundle.properties", None),
        ("Bundle_ja.txt", None),
    ],
)
def test_catalog_language(name, expected):
    assert catalog_language(name) == expected


def test_catalog_usage_and_unused_report(tmp_path):
    path = write(tmp_path / "Bundle.properties", "Key_correct=Correct", "Key_unused=Unused", "# YESI18N", "Kept=k")
    catalog = Catalog(str(path), FileKind.PRIMARY_CATALOG)
    catalog.parse()

    assert catalog.mark_used("Key_correct")
    assert catalog.mark_used("Key_correct")
    assert not catalog.mark_used("Missing")
    assert catalog.get("Key_correct").usage_count == 2

    results = ScanResults("mod")
    catalog.report(results)
    unused = results.of_kind(FindingKind.POSSIBLY_UNUSED_ENTRY)

    assert [(f.message, f.line) for f in unused] == [("Key_unused", 2)]
    assert results.file_count(FileKind.PRIMARY_CATALOG) == 1


def test_translated_catalog_never_reports_unused(tmp_path):
    path = write(tmp_path / "Bundle_de.properties", "A=a")
    catalog = Catalog(str(path), FileKind.TRANSLATED_CATALOG)
    catalog.parse()
    results = ScanResults("mod")
    catalog.report(results)

    assert catalog.language == "de"
    assert results.problems_count == 0
    assert results.file_count(FileKind.TRANSLATED_CATALOG) == 1
