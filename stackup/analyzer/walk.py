from __future__ import annotations

import codecs
from pathlib import Path
from typing import List


def read_bytes(path: str | Path, limit_bytes: int = 1_000_000) -> bytes:
    p = Path(path)
    try:
        if not p.is_file() or p.stat().st_size > limit_bytes:
            return b""  # missing or too large, skip content
        return p.read_bytes()
    except OSError:
        return b""


def decode_text(data: bytes) -> str:
    """
    Decode file content written by any common editor: UTF-16 (either byte
    order, with or without BOM), UTF-8 (with or without BOM), else latin-1.
    """
    if data.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return data.decode("utf-16", errors="ignore")
    if data.startswith(codecs.BOM_UTF8):
        return data[len(codecs.BOM_UTF8):].decode("utf-8", errors="ignore")
    # BOM-less UTF-16 of ASCII text has a NUL in every other byte
    if len(data) >= 2 and b"\x00" in data[:64]:
        if data[1:2] == b"\x00":
            return data.decode("utf-16-le", errors="ignore")
        if data[0:1] == b"\x00":
            return data.decode("utf-16-be", errors="ignore")
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def read_text(path: str | Path, limit_bytes: int = 1_000_000) -> str:
    return decode_text(read_bytes(path, limit_bytes))


def normalize_text(text: str) -> str:
    """Strip carriage returns and NULs, trim, and lower-case."""
    return text.replace("\r", "").replace("\x00", "").strip().lower()


def list_files(directory: str | Path) -> List[str]:
    """Sorted names of regular files directly inside directory."""
    d = Path(directory)
    if not d.is_dir():
        return []
    return sorted(p.name for p in d.iterdir() if p.is_file())


def first_existing(directory: str | Path, names: List[str]) -> str | None:
    d = Path(directory)
    for name in names:
        if (d / name).is_file():
            return name
    return None
