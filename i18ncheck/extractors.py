from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Iterable, List, Optional

from .catalog import Catalog
from .config import DEFAULT_CONFIG, ScanConfig
from .input_sources import read_text
from .models import FileKind, FindingKind, StringOccurrence
from .tokenizers import Token, TokenKind, Tokenizer, strip_delimiters, tokenizer_for


def extract_occurrences(tokens: Iterable[Token], config: ScanConfig = DEFAULT_CONFIG) -> List[StringOccurrence]:
    """Collect localizable string literals from a token stream in one pass.

    The scan remembers the last line holding a bundle lookup, an annotation,
    an assert and a font identifier. A literal on one of those lines is
    flagged or dropped accordingly. A line comment carrying the suppression
    marker flags the literals already seen on its own line.
    """
    occurrences: List[StringOccurrence] = []
    last_lookup_line = -1
    last_annotation_line = -1
    last_assert_line = -1
    last_font_line = -1

    for token in tokens:
        line = token.line
        if token.kind is TokenKind.STRING:
            text = strip_delimiters(token.text)
            if config.skip_trivial and len(text.strip()) <= 1:
                continue
            in_annotation = line == last_annotation_line
            if in_annotation and config.skip_annotation_arguments:
                continue
            in_assert = line == last_assert_line
            if in_assert and config.skip_assert_messages:
                continue
            # Font family names next to a Font constructor.
            if line == last_font_line and text in config.known_fonts:
                continue
            occurrences.append(
                StringOccurrence(
                    text=text,
                    line=line,
                    near_marker_identifier=line == last_lookup_line,
                    is_annotation_argument=in_annotation,
                    is_assert_message=in_assert,
                )
            )
        elif token.kind is TokenKind.LINE_COMMENT:
            if config.suppression_marker in token.text:
                for occurrence in reversed(occurrences):
                    if occurrence.line != line:
                        break
                    occurrence.is_suppressed = True
        elif token.kind is TokenKind.IDENTIFIER:
            if token.text == config.bundle_lookup_identifier:
                last_lookup_line = line
            elif token.text == config.font_identifier:
                last_font_line = line
        elif token.kind is TokenKind.ANNOTATION_MARK:
            last_annotation_line = line
        elif token.kind is TokenKind.ASSERT_KEYWORD:
            last_assert_line = line

    return occurrences


class SourceModel:
    def __init__(self, path: str, config: ScanConfig = DEFAULT_CONFIG):
        self.path = path
        self.config = config
        self.occurrences: List[StringOccurrence] = []

    def parse(self, tokenizer: Optional[Tokenizer] = None) -> None:
        text = read_text(self.path)
        tokenizer = tokenizer or tokenizer_for(self.path)
        self.occurrences = extract_occurrences(tokenizer.tokenize(text), self.config)

    def verify(self, catalog: Optional[Catalog]) -> None:
        if catalog is None:
            return
        for occurrence in self.occurrences:
            if catalog.mark_used(occurrence.text):
                occurrence.found_in_catalog = True

    def has_form(self) -> bool:
        return Path(self.path).with_suffix(self.config.form_suffix).exists()

    def report(self, results) -> None:
        results.increment_file_counter(FileKind.SOURCE)
        per_line = Counter(o.line for o in self.occurrences)
        for occurrence in self.occurrences:
            if occurrence.found_in_catalog or occurrence.is_suppressed:
                continue
            if occurrence.near_marker_identifier:
                kind = FindingKind.MISSING_KEY_IN_BUNDLE
            else:
                kind = FindingKind.MISSING_NOI18N_OR_KEY
            results.add(kind, self.path, occurrence.line, occurrence.text)

        # Sources backed by a form file are generated.
        if self.has_form():
            return
        for occurrence in self.occurrences:
            if occurrence.found_in_catalog and occurrence.is_suppressed and per_line[occurrence.line] == 1:
                results.add(FindingKind.REDUNDANT_SUPPRESSION_MARKER, self.path, occurrence.line, occurrence.text)
