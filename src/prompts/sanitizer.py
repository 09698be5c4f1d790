import re
from typing import Any

# Control characters except tab and newline
CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")


def sanitize_for_ai(text: Any, max_length: int) -> str:
    """
    Makes user supplied text safe to interpolate into a prompt: coerces it to
    a string, strips control characters, trims surrounding whitespace and
    truncates to max_length characters.
    """
    if text is None:
        return ""
    cleaned = CONTROL_CHARS_RE.sub("", str(text)).strip()
    if max_length >= 0:
        cleaned = cleaned[:max_length]
    return cleaned
