"""Invoke helpers — call sync or async capabilities uniformly.

Engines, readers, and error callbacks can be ``def`` or ``async def``.
Any code that calls a user-provided capability must handle both cases.
This module keeps the sync/async check in exactly one place.

Usage::

    from quill._internal.invoke import invoke

    html = await invoke(engine.render, source, params)
"""

import inspect
from typing import Any


async def invoke(fn: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *fn* and await the result if it's awaitable."""
    result = fn(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
