#!/usr/bin/env python3
import re
from pathlib import Path

PROPERTIES_SUFFIX = ".properties"

# Some bundles ship Arabic as "ar_ar" (Arabic, Argentina).
LOCALE_CORRECTIONS = {
    "ar_ar": "ar_SA",
}

RTL_LANGUAGES = ("ar",)

ESCAPES = {
    "t": "\t",
    "n": "\n",
    "r": "\r",
    "f": "\f",
}

KEY_TERMINATORS = "=: \t\f"

# \f, NEL and U+2028 are not line breaks in a properties file
LINE_BREAK = re.compile(r"\r\n|\r|\n")

ARABIC_BLOCK = ("\u0600", "\u06ff")


def read_lines(path: Path):
    text = path.read_bytes().decode("utf-8-sig")
    lines = LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _continues(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def logical_lines(lines):
    """Join continuation lines, dropping comments and blank lines."""
    pending = None
    for raw in lines:
        if pending is None:
            line = raw.lstrip(" \t\f")
            if not line or line.startswith("#") or line.startswith("!"):
                continue
        else:
            line = pending + raw.lstrip(" \t\f")
        if _continues(line):
            pending = line[:-1]
            continue
        pending = None
        yield line
    if pending is not None:
        yield pending


def unescape(text: str) -> str:
    out = []
    idx = 0
    while idx < len(text):
        ch = text[idx]
        if ch != "\\" or idx + 1 == len(text):
            out.append(ch)
            idx += 1
            continue
        nxt = text[idx + 1]
        if nxt == "u":
            digits = text[idx + 2 : idx + 6]
            if len(digits) != 4 or not re.fullmatch(r"[0-9A-Fa-f]{4}", digits):
                raise ValueError(f"Malformed \\uXXXX escape: {text[idx:idx + 6]!r}")
            out.append(chr(int(digits, 16)))
            idx += 6
            continue
        out.append(ESCAPES.get(nxt, nxt))
        idx += 2
    return "".join(out)


def split_key_value(line: str):
    end = 0
    while end < len(line):
        ch = line[end]
        if ch == "\\":
            end += 2
            continue
        if ch in KEY_TERMINATORS:
            break
        end += 1
    key = line[:end]
    rest = line[end:].lstrip(" \t\f")
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(" \t\f")
    return unescape(key), unescape(rest)


def parse_properties(lines):
    data = {}
    for line in logical_lines(lines):
        key, value = split_key_value(line)
        data[key] = value
    return data


def read_properties(path: Path):
    return parse_properties(read_lines(path))


def locale_fragment(filename: str, bundle_name: str):
    pattern = re.escape(bundle_name) + r"_([A-Za-z]+_[A-Za-z]+)" + re.escape(PROPERTIES_SUFFIX)
    match = re.fullmatch(pattern, filename)
    if not match:
        return None
    return match.group(1)


def normalize_locale_tag(fragment: str) -> str:
    fragment = LOCALE_CORRECTIONS.get(fragment.lower(), fragment)
    parts = [p for p in re.split(r"[-_]", fragment) if p]
    if not parts:
        return fragment
    language = parts[0].lower()
    normalized = [language]
    for part in parts[1:]:
        if len(part) == 4:
            normalized.append(part.title())
        else:
            normalized.append(part.upper())
    return "-".join(normalized)


def is_right_to_left(value: str, locale_tag: str) -> bool:
    language = locale_tag.split("-", 1)[0].lower()
    if language not in RTL_LANGUAGES:
        return False
    # only the basic Arabic block is recognised
    low, high = ARABIC_BLOCK
    return any(low <= ch <= high for ch in value)
