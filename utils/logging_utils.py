"""
Logging helpers for user-provided text.
"""

from typing import Optional


def safe_log_text(text: Optional[str], max_length: int = 80) -> Optional[str]:
    """
    Make channel handles and titles safe to write to any log handler.

    Non-ASCII characters are replaced with '?' and long text is cut to
    ``max_length`` characters.
    """
    if not text:
        return text
    text = text.encode('ascii', 'replace').decode('ascii')
    if len(text) > max_length:
        text = text[:max_length - 3] + "..."
    return text
