"""
Option value normalization and XML-safe field names.
"""

import re
from typing import Dict, List

from .models import FeedMode, OptionValue


MERCHANT_PREFIX = 'g:'

_DANISH_LETTERS = (('æ', 'ae'), ('ø', 'oe'), ('å', 'aa'))
_INVALID_CHARS = re.compile(r'[^a-z0-9_]')
_VALID_START = re.compile(r'^[a-z_]')


def sanitize_name(label: str) -> str:
    """
    Convert a display label into a safe XML tag / field name.

    Always returns a string matching ``^[a-z_][a-z0-9_]*$``.
    """
    name = label.lower()
    for letter, replacement in _DANISH_LETTERS:
        name = name.replace(letter, replacement)
    name = _INVALID_CHARS.sub('_', name)
    if not _VALID_START.match(name):
        name = 'opt_' + name
    return name


def is_default_value(value: str) -> bool:
    """Placeholder option values ("Default Title", "default") carry no attribute."""
    return 'Default' in value or 'default' in value


def normalize_options(
    options: List[OptionValue],
    mode: FeedMode = "json",
    namespace_prefix: bool = False
) -> Dict[str, str]:
    """
    Flatten a variant's option values into {field name: value}.

    XML mode sanitizes option titles (optionally adding the ``g:`` prefix);
    JSON mode only lowercases them. Later options win on key collisions.
    """
    result: Dict[str, str] = {}
    for option in options or []:
        if not option.value or not option.option_title:
            continue
        if is_default_value(option.value):
            continue

        if mode == "xml":
            key = sanitize_name(option.option_title)
            if namespace_prefix:
                key = MERCHANT_PREFIX + key
        else:
            key = option.option_title.lower()
        result[key] = option.value
    return result
