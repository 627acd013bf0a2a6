"""
Utility functions for the YouTube dashboard.
"""

from .logging_utils import safe_log_text
from .error_utils import create_result_dict
from .formatting import format_compact

__all__ = ["safe_log_text", "create_result_dict", "format_compact"]
