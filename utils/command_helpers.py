"""
Wrapper that turns store calls into explicit command results.

Every handler goes through run_command so the UI layer only ever sees:

    {'ok': True, 'data': <return value>}
    {'ok': False, 'error': <message to show verbatim>}

Known store errors and SQLite failures become error results. Anything else
is a bug and propagates.
"""

import logging
import sqlite3
from typing import Any, Callable

from database.errors import CardStoreError

logger = logging.getLogger(__name__)


def ok(data: Any = None) -> dict[str, Any]:
    return {'ok': True, 'data': data}


def error(message: str) -> dict[str, Any]:
    return {'ok': False, 'error': message}


def run_command(func: Callable[..., Any], *args: Any, **kwargs: Any) -> dict[str, Any]:
    try:
        return ok(func(*args, **kwargs))
    except CardStoreError as e:
        logger.warning(f"{func.__name__} failed: {e}")
        return error(e.message)
    except sqlite3.Error as e:
        logger.warning(f"{func.__name__} storage error: {e}")
        return error(str(e))
