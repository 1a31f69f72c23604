"""Cache-invalidation hooks fired after profile writes.

The rendering layer registers a hook; the repository calls
``revalidate_path`` when a write happened on a page whose cached output must
be rebuilt.
"""

from __future__ import annotations

import inspect
from typing import Awaitable, Callable, List, Optional, Union

from loguru import logger

PROFILE_EDIT_PATH = "/profile/edit"

RevalidationHook = Callable[[str], Union[Awaitable[None], None]]

_hooks: List[RevalidationHook] = []


def register_revalidation_hook(hook: RevalidationHook) -> None:
    if hook not in _hooks:
        _hooks.append(hook)


def clear_revalidation_hooks() -> None:
    _hooks.clear()


async def revalidate_path(path: str) -> None:
    """Notify every registered hook, in registration order, that ``path`` is stale.

    A hook that raises is logged and the remaining hooks still run.
    """

    logger.debug("Revalidating {path} ({count} hooks)", path=path, count=len(_hooks))
    for hook in list(_hooks):
        try:
            result = hook(path)
            if inspect.isawaitable(result):
                await result
        except Exception:
            # The write that triggered the revalidation is already committed.
            logger.exception("Revalidation hook {hook!r} failed for {path}", hook=hook, path=path)


async def revalidate_after_profile_write(path: Optional[str]) -> None:
    # Only the profile edit page caches the profile it just saved.
    if path == PROFILE_EDIT_PATH:
        await revalidate_path(path)
