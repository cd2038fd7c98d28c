"""
Security utilities - never log or return secrets.
"""

from typing import Any, Dict


SENSITIVE_KEYS = [
    'api_key',
    'catalog_api_key',
    'password',
    'secret',
    'token',
    'authorization',
]


def sanitize_dict_for_logging(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Remove sensitive fields from dict for logging.

    Args:
        data: Dictionary that may contain secrets.

    Returns:
        Sanitized copy with secrets replaced.
    """
    result = data.copy()
    for key in list(result.keys()):
        if str(key).lower() in SENSITIVE_KEYS:
            result[key] = '***REDACTED***'

    # Also check nested dicts
    for k, v in result.items():
        if isinstance(v, dict):
            result[k] = sanitize_dict_for_logging(v)
        elif isinstance(v, list):
            result[k] = [
                sanitize_dict_for_logging(item) if isinstance(item, dict) else item
                for item in v
            ]

    return result
