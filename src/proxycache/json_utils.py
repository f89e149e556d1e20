"""
JSON Utilities
==============

Thin wrappers around orjson used to read and write proxy cache configuration.
orjson returns bytes; these helpers work with ``str`` for compatibility with
the standard ``json`` interface.
"""

import logging
from typing import Any, Union

import orjson

logger = logging.getLogger(__name__)

JSONDecodeError = orjson.JSONDecodeError


def dumps(obj: Any, sort_keys: bool = False, indent: bool = False) -> str:
    """
    Serialize object to JSON string using orjson.

    Args:
        obj: Object to serialize
        sort_keys: Whether to sort dictionary keys
        indent: Pretty-print with two-space indentation

    Returns:
        JSON string
    """
    option = 0
    if sort_keys:
        option |= orjson.OPT_SORT_KEYS
    if indent:
        option |= orjson.OPT_INDENT_2

    return orjson.dumps(obj, option=option).decode("utf-8")


def loads(s: Union[str, bytes]) -> Any:
    """
    Deserialize JSON string using orjson.

    Raises:
        JSONDecodeError: If the input is not valid JSON
    """
    return orjson.loads(s)
