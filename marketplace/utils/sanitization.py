import html
import re
from typing import Optional

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


def sanitize_text(value: Optional[str], max_length: int = 5000) -> Optional[str]:
    """
    Strip, length-check and escape free text (titles, cover letters, comments)
    to prevent stored XSS. Returns None if input is None.

    Raises:
        ValueError: If input exceeds max_length
    """
    if value is None:
        return None

    value = str(value).strip()

    if len(value) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    value = html.escape(value, quote=True)

    return _CONTROL_CHARS.sub("", value)
