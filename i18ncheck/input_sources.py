from __future__ import annotations

from pathlib import Path
from typing import List


def detect_text_encoding(sample: bytes) -> str:
    if sample.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"
    if sample.startswith(b"\xff\xfe") or sample.startswith(b"\xfe\xff"):
        return "utf-16"
    return "utf-8"


def read_bytes(path: str | Path) -> bytes:
    with open(path, "rb") as handle:
        return handle.read()


def read_text(path: str | Path) -> str:
    data = read_bytes(path)
    return data.decode(detect_text_encoding(data[:4]), errors="replace")


def read_text_lines(path: str | Path) -> List[str]:
    return read_text(path).splitlines()


def write_text(path: str | Path, text: str) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = target.with_suffix(target.suffix + ".tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        tmp_path.replace(target)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise


def write_text_lines(path: str | Path, lines: List[str]) -> None:
    write_text(path, "".join(line + "\n" for line in lines))
