"""
Result dictionaries for user-facing operations.
"""

from typing import Any, Dict, List, Optional


def create_result_dict(success: bool, errors: Optional[List[str]] = None, **kwargs) -> Dict[str, Any]:
    """
    Create a standardized result dictionary.

    Args:
        success: Whether the operation was successful
        errors: User-facing error messages; blank entries are dropped
        **kwargs: Additional fields to include in the result

    Returns:
        Standardized result dictionary
    """
    return {
        "success": success,
        "errors": [error for error in (errors or []) if error],
        **kwargs
    }
