"""
Option file intake.

Decodes uploaded my.cnf bytes and hands the text to configparser; the result
is a plain section -> {key: value or None} mapping.
"""

from __future__ import annotations

import configparser
import logging
from typing import Any, Dict, Optional, Tuple

from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)

Sections = Dict[str, Dict[str, Optional[str]]]


class OptionFileError(ValueError):
    pass


def decode_option_file(raw: bytes) -> Tuple[str, Dict[str, Any]]:
    """
    Decode option file bytes to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer, utf-8 when undetected.
    - If decode fails, retry as utf-8, then decode with replacement characters.
    - A leading UTF-8 BOM is dropped.
    """
    detected = None
    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or "utf-8"
    decode_fallback = False

    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        decode_fallback = True
        try:
            text = raw.decode("utf-8")
            decode_used = "utf-8"
        except UnicodeDecodeError:
            text = raw.decode("utf-8", errors="replace")
            decode_used = "utf-8"

    text = text.lstrip("\ufeff")

    report = {
        "detected": detected,
        "decode_used": decode_used,
        "decode_fallback": decode_fallback,
    }
    return text, report


def parse_option_text(text: str) -> Sections:
    parser = configparser.ConfigParser(
        allow_no_value=True,
        strict=False,
        interpolation=None,
        comment_prefixes=("#", ";"),
        inline_comment_prefixes=("#",),
        default_section="\x00",
    )
    parser.optionxform = str  # keep keys as written, normalization happens later

    try:
        parser.read_string(text)
    except configparser.Error as exc:
        raise OptionFileError(f"Unreadable option file: {exc}") from exc

    # Group names are case-insensitive; repeated groups merge, later keys win.
    sections: Sections = {}
    for name in parser.sections():
        sections.setdefault(name.lower(), {}).update(parser.items(name, raw=True))
    return sections


def read_option_sections(raw: bytes) -> Tuple[Sections, Dict[str, Any]]:
    text, report = decode_option_file(raw)
    sections = parse_option_text(text)
    logger.debug("Option file sections: %s", sorted(sections))
    report["sections"] = sorted(sections)
    return sections, report
