"""Line-oriented parsing of ``key=value`` resource bundles."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional

from .config import DEFAULT_CONFIG, ScanConfig
from .console import RichLogger
from .input_sources import read_text_lines
from .models import CatalogEntry, FileKind, FindingKind
from .text_utils import ends_with_continuation, strip_continuation

LANGUAGE_SUFFIX_RX = re.compile(r"_(?P<lang>[a-z]{2,3}(?:_[A-Z]{2})?)$")


def catalog_language(file_name: str, suffix: str = ".properties") -> Optional[str]:
    if not file_name.endswith(suffix):
        return None
    match = LANGUAGE_SUFFIX_RX.search(file_name[: -len(suffix)])
    return match.group("lang") if match else None


def parse_catalog_lines(
    lines: Iterable[str],
    file_name: str,
    intentional_marker: str = DEFAULT_CONFIG.intentional_marker,
    logger: Optional[RichLogger] = None,
    warnings: Optional[List[str]] = None,
) -> Dict[str, CatalogEntry]:
    entries: Dict[str, CatalogEntry] = {}
    pending_intentional = False
    in_continuation = False
    active: Optional[CatalogEntry] = None

    for line_no, raw in enumerate(lines, start=1):
        raw = raw.rstrip("\r\n")
        if in_continuation:
            if not ends_with_continuation(raw):
                in_continuation = False
            if active is not None:
                active.append_line(strip_continuation(raw.lstrip()))
            continue

        line = raw.strip()
        if not line:
            continue
        if line.startswith("#"):
            if intentional_marker in line[1:]:
                pending_intentional = True
            continue

        continues = ends_with_continuation(line)
        index = line.find("=")
        if index <= 0:
            msg = f"{file_name}:{line_no}: WARNING: incorrect key: {line}"
            if warnings is not None:
                warnings.append(msg)
            if logger is not None:
                logger.warn(msg)
            pending_intentional = False
            active = None
        else:
            key = line[:index].strip()
            value = line[index + 1:]
            if continues:
                value = strip_continuation(value)
            active = CatalogEntry(key=key, value=value, line=line_no, intentional=pending_intentional)
            pending_intentional = False
            # Last definition wins and takes the position of its line.
            entries.pop(key, None)
            entries[key] = active
        in_continuation = continues

    return entries


class Catalog:
    def __init__(self, path: str, kind: FileKind, config: ScanConfig = DEFAULT_CONFIG):
        self.path = path
        self.kind = kind
        self.config = config
        self.entries: Dict[str, CatalogEntry] = {}
        self.warnings: List[str] = []

    @property
    def language(self) -> Optional[str]:
        if self.kind is not FileKind.TRANSLATED_CATALOG:
            return None
        name = self.path.replace("\\", "/").rsplit("/", 1)[-1]
        return catalog_language(name, self.config.catalog_suffix)

    def parse(self, logger: Optional[RichLogger] = None) -> None:
        self.warnings = []
        self.entries = parse_catalog_lines(
            read_text_lines(self.path),
            self.path,
            intentional_marker=self.config.intentional_marker,
            logger=logger,
            warnings=self.warnings,
        )

    def mark_used(self, key: str) -> bool:
        entry = self.entries.get(key)
        if entry is None:
            return False
        entry.usage_count += 1
        return True

    def get(self, key: str) -> Optional[CatalogEntry]:
        return self.entries.get(key)

    def report(self, results) -> None:
        results.increment_file_counter(self.kind)
        if self.kind is FileKind.TRANSLATED_CATALOG:
            return
        for key, entry in self.entries.items():
            if entry.possibly_unused:
                results.add(FindingKind.POSSIBLY_UNUSED_ENTRY, self.path, entry.line, key)
