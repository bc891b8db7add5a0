from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable

from app.core.exceptions import GroupIdAllocationError
from app.models.time_slot import GroupType

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


def allocate_group_id(
    group_type: GroupType,
    existing_group_ids: Iterable[str | None],
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    factory: Callable[[], uuid.UUID] = uuid.uuid4,
) -> str:
    """Draw a group id that no current joint or split group uses."""
    if group_type == GroupType.regular:
        raise ValueError("Regular slots do not carry a group id")
    taken = {item for item in existing_group_ids if item}
    for attempt in range(1, max_attempts + 1):
        candidate = f"{group_type.value}-{factory().hex}"
        if candidate not in taken:
            return candidate
        logger.warning("Group id collision on attempt %d for %s", attempt, candidate)
    raise GroupIdAllocationError(group_type.value, max_attempts)
