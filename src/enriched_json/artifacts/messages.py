from __future__ import annotations

import re
from typing import Any

from enriched_json.expectations.handler import DIFF_MARKER

_EXCEPTION_DETECTOR = re.compile(r"(Exception|Error|Traceback)")
_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[mGKHF]")
_PATH_AND_LINE_NUMBER = re.compile(r"(?P<path>[^\s:\"']+\.py):(?P<line_number>\d+)")
_TRACEBACK_FRAME = re.compile(r"File \"(?P<path>[^\"]+)\", line (?P<line_number>\d+)")
_EXCEPTION_CLASS_AND_MESSAGE = re.compile(
    r"^(?:E\s+)?(?P<exception_class>(?:[A-Za-z_]\w*\.)*[A-Z]\w*(?:Error|Exception)):[ \t]*(?P<exception_message>.*)$",
    re.MULTILINE,
)


def strip_diff(message: str) -> str:
    """Drop the textual diff the host appends after ``DIFF_MARKER``."""
    return message.split(DIFF_MARKER, 1)[0].rstrip()


def strip_ansi(text: str) -> str:
    return _ANSI_ESCAPE.sub("", text)


def _first_location(text: str) -> re.Match[str] | None:
    matches = [m for m in (_PATH_AND_LINE_NUMBER.search(text), _TRACEBACK_FRAME.search(text)) if m]
    if not matches:
        return None
    return min(matches, key=lambda m: m.start())


def extract_error_info(text: str) -> dict[str, Any] | None:
    """Describe an error reported outside of any test, or None if ``text`` is not one.

    The innermost exception line wins when a traceback chains several.
    """
    if not _EXCEPTION_DETECTOR.search(text):
        return None
    clean = strip_ansi(text)
    info: dict[str, Any] = {"message": clean}

    location = _first_location(clean)
    if location is not None:
        info["path"] = location.group("path")
        info["line_number"] = int(location.group("line_number"))

    exceptions = list(_EXCEPTION_CLASS_AND_MESSAGE.finditer(clean))
    if exceptions:
        last = exceptions[-1]
        info["exception_class"] = last.group("exception_class")
        info["exception_message"] = last.group("exception_message").strip()
    return info
