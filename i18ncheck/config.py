from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

DEFAULT_KNOWN_FONTS = ("Tahoma", "Courier", "Arial", "Dialog")
DEFAULT_MANDATORY_MODULE_KEYS = ("OpenIDE-Module-Display-Category", "OpenIDE-Module-Name")
DEFAULT_OPTIONAL_MODULE_KEYS = ("OpenIDE-Module-Long-Description", "OpenIDE-Module-Short-Description")


@dataclass(frozen=True)
class ScanConfig:
    """Markers, heuristics and file naming used by a scan.

    suppression_marker: line-comment text that exempts the literals on its line.
    intentional_marker: catalog comment text that exempts the next entry from
        the unused-key check.
    bundle_lookup_identifier: identifier whose line marks literals as catalog keys.
    font_identifier / known_fonts: literals on a line mentioning the font
        identifier are dropped when they name one of the known fonts.
    skip_trivial: drop literals whose stripped text has at most one character.
    skip_annotation_arguments / skip_assert_messages: drop literals sharing a
        line with an annotation mark or an assert keyword. When off they are
        kept and flagged instead.
    scan_secondary_catalogs: also match sources against the package's other
        catalogs, not only the primary one.
    escape_non_ascii: write non-ASCII characters as \\uXXXX on import.
    """

    suppression_marker: str = "NOI18N"
    intentional_marker: str = "YESI18N"
    bundle_lookup_identifier: str = "NbBundle"
    font_identifier: str = "Font"
    known_fonts: Tuple[str, ...] = DEFAULT_KNOWN_FONTS
    skip_trivial: bool = True
    skip_annotation_arguments: bool = True
    skip_assert_messages: bool = True
    primary_catalog_name: str = "Bundle.properties"
    catalog_suffix: str = ".properties"
    source_suffixes: Tuple[str, ...] = (".java",)
    form_suffix: str = ".form"
    scan_secondary_catalogs: bool = False
    module_bundle_mandatory_keys: Tuple[str, ...] = DEFAULT_MANDATORY_MODULE_KEYS
    module_bundle_optional_keys: Tuple[str, ...] = DEFAULT_OPTIONAL_MODULE_KEYS
    escape_non_ascii: bool = True

    def with_overrides(self, **changes) -> "ScanConfig":
        cleaned = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **cleaned)


DEFAULT_CONFIG = ScanConfig()
