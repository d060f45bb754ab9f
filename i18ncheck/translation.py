"""Translation round trip: catalog entries to table rows and back to catalogs.

Rows always carry five columns in ``TableColumn`` order. Export produces
one row per primary catalog entry, with any existing translation filled in.
Import regenerates whole translated catalogs from the table, sorted by key,
so repeated export/import cycles converge on the same files. Rows hold
plain text; quote escaping happens in the csv writer and reader.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from .catalog import Catalog
from .input_sources import write_text, write_text_lines
from .text_utils import decode_unicode_escapes, encode_non_ascii


class TranslationTableError(RuntimeError):
    pass


class TableColumn(Enum):
    KEY = (0, "Variable name")
    PRIMARY = (1, "English")
    TRANSLATED = (2, "Translation")
    MODULE = (3, "Module name")
    PACKAGE = (4, "Package")

    @property
    def index(self) -> int:
        return self.value[0]

    @property
    def header(self) -> str:
        return self.value[1]


COLUMN_COUNT = len(TableColumn)
TABLE_HEADER = [c.header for c in sorted(TableColumn, key=lambda c: c.index)]


def make_row(key: str, primary: str, translated: str, module: str, package: str) -> List[str]:
    row = [""] * COLUMN_COUNT
    row[TableColumn.KEY.index] = key
    row[TableColumn.PRIMARY.index] = primary
    row[TableColumn.TRANSLATED.index] = translated
    row[TableColumn.MODULE.index] = module
    row[TableColumn.PACKAGE.index] = package
    return row


def export_catalog_rows(
    primary: Catalog,
    translated: Optional[Catalog],
    module: str,
    package: str,
) -> List[List[str]]:
    rows: List[List[str]] = []
    for key, entry in primary.entries.items():
        text = ""
        if translated is not None:
            existing = translated.get(key)
            if existing is not None:
                text = decode_unicode_escapes(existing.value)
        rows.append(make_row(key, entry.value, text, module, package))
    return rows


class TranslationTable:
    """Translated text keyed by module, then package, then catalog key."""

    def __init__(self):
        self.data: Dict[str, Dict[str, Dict[str, str]]] = {}

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[str]], source: str = "<rows>") -> "TranslationTable":
        table = cls()
        for row_no, row in enumerate(rows, start=1):
            if len(row) != COLUMN_COUNT:
                raise TranslationTableError(
                    f"{source}:{row_no}: row has wrong number of values "
                    f"({len(row)} instead of {COLUMN_COUNT}): {list(row)}"
                )
            if list(row) == TABLE_HEADER:
                continue
            translated = row[TableColumn.TRANSLATED.index]
            # Untranslated rows are dropped, except for entries whose primary text is empty too.
            if not translated.strip() and row[TableColumn.PRIMARY.index].strip():
                continue
            table.add(
                row[TableColumn.MODULE.index],
                row[TableColumn.PACKAGE.index],
                row[TableColumn.KEY.index],
                decode_unicode_escapes(translated),
            )
        return table

    def add(self, module: str, package: str, key: str, text: str) -> None:
        self.data.setdefault(module, {}).setdefault(package, {})[key] = text

    def for_module(self, module: str) -> Dict[str, Dict[str, str]]:
        return self.data.get(module, {})

    def get(self, module: str, package: str, key: str) -> Optional[str]:
        return self.data.get(module, {}).get(package, {}).get(key)

    def __len__(self) -> int:
        return sum(len(keys) for packages in self.data.values() for keys in packages.values())


def render_translated_catalog(
    header: Sequence[str],
    translations: Dict[str, str],
    escape_non_ascii: bool = True,
) -> List[str]:
    lines = list(header)
    for key in sorted(translations):
        value = translations[key]
        if escape_non_ascii:
            value = encode_non_ascii(value)
        lines.append(f"{key}={value}")
    return lines


def default_header(table_name: str, tool: str = "i18ncheck") -> List[str]:
    return [
        f"# Generated by {tool} from {table_name}",
        "# Do not edit: changes are overwritten by the next import.",
    ]


@dataclass(frozen=True)
class GeneratedCatalog:
    module: str
    package: str
    path: str
    lines: List[str]

    def write(self) -> None:
        write_text_lines(self.path, self.lines)


def read_table(path: str | Path) -> List[List[str]]:
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        return [row for row in csv.reader(f, dialect="excel") if row]


def write_table(path: str | Path, rows: Iterable[Sequence[str]], header: bool = True) -> int:
    buffer = io.StringIO()
    writer = csv.writer(buffer, dialect="excel", quoting=csv.QUOTE_ALL, lineterminator="\n")
    count = 0
    if header:
        writer.writerow(TABLE_HEADER)
        count += 1
    for row in rows:
        writer.writerow(row)
        count += 1
    write_text(path, buffer.getvalue())
    return count
