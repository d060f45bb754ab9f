from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class FileKind(Enum):
    PRIMARY_CATALOG = "primary_catalog"
    TRANSLATED_CATALOG = "translated_catalog"
    SECONDARY_CATALOG = "secondary_catalog"
    SOURCE = "source"


class FindingKind(Enum):
    MISSING_KEY_IN_BUNDLE = "Very likely missing key in resource bundle"
    MISSING_NOI18N_OR_KEY = (
        "Probably missing key in resource bundle or string should be marked with // NOI18N"
    )
    POSSIBLY_UNUSED_ENTRY = "Probably unused resource bundle key"
    MODULE_MANIFEST_BUNDLE = "Module's resource bundle specified in manifest.mf"
    MODULE_LAYER_DEFINITION = "Resource bundle keys referenced from the module layer"
    REDUNDANT_SUPPRESSION_MARKER = (
        "It is redundant to use NOI18N when String actually is in resource bundle"
    )
    UNREADABLE_FILE = "Files which could not be read"

    @property
    def description(self) -> str:
        return self.value


@dataclass
class StringOccurrence:
    text: str
    line: int
    near_marker_identifier: bool = False
    is_suppressed: bool = False
    is_annotation_argument: bool = False
    is_assert_message: bool = False
    found_in_catalog: bool = False


@dataclass
class CatalogEntry:
    key: str
    value: str
    line: int
    intentional: bool = False
    usage_count: int = 0

    def append_line(self, text: str) -> None:
        self.value += text

    @property
    def possibly_unused(self) -> bool:
        return self.usage_count == 0 and not self.intentional


@dataclass(frozen=True)
class Finding:
    kind: FindingKind
    file: str
    line: int
    message: str

    def render(self) -> str:
        return f"{self.file}:{self.line}: {self.message}"


@dataclass(frozen=True)
class ModuleFile:
    package: str
    path: str
    kind: FileKind


@dataclass
class ModuleInput:
    identity: str
    root: str
    source_root: str
    files: list[ModuleFile] = field(default_factory=list)
    manifest: str | None = None
