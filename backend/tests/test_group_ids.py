import uuid

import pytest

from app.core.exceptions import GroupIdAllocationError
from app.models.time_slot import GroupType
from app.services.group_ids import allocate_group_id

FIXED = [
    uuid.UUID("00000000-0000-0000-0000-000000000001"),
    uuid.UUID("00000000-0000-0000-0000-000000000002"),
]


def test_group_id_is_prefixed_with_the_group_type():
    group_id = allocate_group_id(GroupType.split, [], factory=lambda: FIXED[0])

    assert group_id == f"split-{FIXED[0].hex}"


def test_colliding_draws_are_retried():
    draws = iter(FIXED)

    group_id = allocate_group_id(GroupType.joint, [f"joint-{FIXED[0].hex}", None], factory=lambda: next(draws))

    assert group_id == f"joint-{FIXED[1].hex}"


def test_exhausted_attempts_raise():
    taken = [f"joint-{FIXED[0].hex}"]

    with pytest.raises(GroupIdAllocationError) as excinfo:
        allocate_group_id(GroupType.joint, taken, max_attempts=3, factory=lambda: FIXED[0])

    assert excinfo.value.details == {"group_type": "joint", "attempts": 3}


def test_regular_slots_have_no_group_id():
    with pytest.raises(ValueError):
        allocate_group_id(GroupType.regular, [])


def test_default_factory_produces_distinct_ids():
    first = allocate_group_id(GroupType.joint, [])
    second = allocate_group_id(GroupType.joint, [first])

    assert first != second
    assert first.startswith("joint-")
