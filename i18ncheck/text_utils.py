from __future__ import annotations

import re

UNICODE_ESCAPE_RX = re.compile(r"\\u([0-9a-fA-F]{4})")
CONTINUATION_RX = re.compile(r"(\\+)$")


def decode_unicode_escapes(text: str) -> str:
    if "\\u" not in text:
        return text
    decoded = UNICODE_ESCAPE_RX.sub(lambda m: chr(int(m.group(1), 16)), text)
    # Rejoin surrogate pairs written by encode_non_ascii.
    return decoded.encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")


def encode_non_ascii(text: str) -> str:
    if text.isascii():
        return text
    out = []
    for ch in text:
        code = ord(ch)
        if code < 0x80:
            out.append(ch)
        elif code > 0xFFFF:
            # Astral characters become a UTF-16 surrogate pair.
            code -= 0x10000
            out.append(f"\\u{0xD800 + (code >> 10):04x}\\u{0xDC00 + (code & 0x3FF):04x}")
        else:
            out.append(f"\\u{code:04x}")
    return "".join(out)


def ends_with_continuation(line: str) -> bool:
    match = CONTINUATION_RX.search(line.rstrip())
    return bool(match) and len(match.group(1)) % 2 == 1


def strip_continuation(line: str) -> str:
    stripped = line.rstrip()
    if ends_with_continuation(stripped):
        return stripped[:-1]
    return line
