from __future__ import annotations

import pytest

from i18ncheck.config import DEFAULT_CONFIG
from i18ncheck.extractors import extract_occurrences
from i18ncheck.tokenizers import JavaTokenizer


def extract(src: str, config=DEFAULT_CONFIG):
    return extract_occurrences(JavaTokenizer().tokenize(src), config)


@pytest.mark.parametrize("literal", ['""', '" "', '"x"', '"  y  "', '"\t"'])
def test_trivial_literals_are_dropped(literal):
    assert extract(f"String s = {literal};\n") == []


def test_suppression_marker_only_affects_its_own_line():
    src = (
        'String a = "one"; String b = "two"; // NOI18N\n'
        'String c = "three";\n'
        "// NOI18N\n"
        'String d = "four";\n'
    )
    occurrences = {o.text: o for o in extract(src)}

    assert occurrences["one"].is_suppressed
    assert occurrences["two"].is_suppressed
    assert not occurrences["three"].is_suppressed
    assert not occurrences["four"].is_suppressed


def test_bundle_lookup_line_flags_occurrence():
    src = 'String t = NbBundle.getMessage(A.class, "Key");\nString u = "Other";\n'
    occurrences = extract(src)

    assert [(o.text, o.line, o.near_marker_identifier) for o in occurrences] == [
        ("Key", 1, True),
        ("Other", 2, False),
    ]


def test_annotation_arguments_dropped_by_default():
    src = '@SuppressWarnings("unchecked")\nString a = "kept";\n'
    assert [o.text for o in extract(src)] == ["kept"]


def test_annotation_arguments_kept_when_configured():
    config = DEFAULT_CONFIG.with_overrides(skip_annotation_arguments=False)
    occurrences = extract('@SuppressWarnings("unchecked")\n', config)

    assert len(occurrences) == 1
    assert occurrences[0].is_annotation_argument


def test_assert_messages_dropped():
    src = 'assert x != null : "x must be set";\n'
    assert extract(src) == []
    config = DEFAULT_CONFIG.with_overrides(skip_assert_messages=False)
    assert [o.is_assert_message for o in extract(src, config)] == [True]


def test_known_fonts_dropped_only_next_to_font():
    src = (
        'label.setFont(new Font("Tahoma", Font.PLAIN, 11));\n'
        'label.setFont(new Font("Helvetica", Font.PLAIN, 11));\n'
        'String family = "Tahoma";\n'
    )
    assert [(o.text, o.line) for o in extract(src)] == [("Helvetica", 2), ("Tahoma", 3)]


def test_custom_suppression_marker():
    config = DEFAULT_CONFIG.with_overrides(suppression_marker="NOLOC")
    occurrences = extract('String a = "skip me"; // NOLOC\nString b = "me too"; // NOI18N\n', config)

    assert [o.is_suppressed for o in occurrences] == [True, False]
