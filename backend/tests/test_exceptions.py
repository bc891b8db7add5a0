from app.core.exceptions import AppError, GroupIdAllocationError, SchedulingBlockedError


def test_scheduling_blocked_error_structure():
    err = SchedulingBlockedError("Cannot create time slot", details={"canProceed": False})
    assert err.status_code == 409
    assert err.message == "Cannot create time slot"
    assert err.details == {"canProceed": False}
    assert isinstance(err, AppError)


def test_app_error_defaults():
    err = AppError("Generic error")
    assert err.status_code == 500
    assert err.details == {}


def test_group_id_allocation_error_reports_attempts():
    err = GroupIdAllocationError("joint", 5)
    assert err.status_code == 500
    assert err.details == {"group_type": "joint", "attempts": 5}
