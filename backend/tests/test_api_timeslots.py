import pytest
from sqlalchemy import select

from app.models.conflict import ConflictRecord, ConflictType
from app.models.room import Room


def slot_payload(**overrides):
    payload = {
        "courseId": "COMP101",
        "facultyId": "F1",
        "roomId": "CS-Lab-1",
        "departmentId": "CS",
        "dayOfWeek": 1,
        "startTime": "08:00",
        "endTime": "10:00",
        "yearLevel": 1,
        "academicYear": "2026-2027",
        "semester": 1,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def booked(client):
    response = client.post("/api/timeslots/", json=slot_payload())
    assert response.status_code == 201
    return response.json()


def test_create_and_list_time_slots(client, booked):
    assert booked["id"]
    assert booked["isActive"] is True
    assert booked["startTime"] == "08:00"

    listed = client.get("/api/timeslots/", params={"academicYear": "2026-2027", "semester": 1})
    assert listed.status_code == 200
    assert [item["id"] for item in listed.json()] == [booked["id"]]


def test_blocking_conflict_refuses_the_write(client, booked):
    response = client.post(
        "/api/timeslots/",
        json=slot_payload(roomId="CS-Lab-2", facultyId="F1", courseId="COMP103", startTime="09:00", endTime="11:00"),
    )

    assert response.status_code == 409
    body = response.json()
    assert body["message"].startswith("Cannot create time slot")
    assert body["details"]["canProceed"] is False
    assert {conflict["type"] for conflict in body["details"]["conflicts"]} == {"faculty", "student_group"}
    assert len(client.get("/api/timeslots/").json()) == 1


def test_warnings_do_not_refuse_the_write(client, booked):
    response = client.post(
        "/api/timeslots/",
        json=slot_payload(roomId="R2", facultyId="F2", courseId="COMP104", startTime="12:00", endTime="12:15"),
    )

    assert response.status_code == 201


def test_invalid_times_are_rejected(client):
    response = client.post("/api/timeslots/", json=slot_payload(startTime="10:00", endTime="09:00"))
    assert response.status_code == 422

    response = client.post("/api/timeslots/", json=slot_payload(startTime="9.00"))
    assert response.status_code == 422


def test_time_format_is_normalized(client):
    response = client.post("/api/timeslots/", json=slot_payload(startTime="8:00", endTime="9:30"))

    assert response.status_code == 201
    assert response.json()["startTime"] == "08:00"


def test_update_does_not_conflict_with_its_own_previous_state(client, booked):
    response = client.put(f"/api/timeslots/{booked['id']}", json=slot_payload(startTime="08:30", endTime="10:30"))

    assert response.status_code == 200
    assert response.json()["startTime"] == "08:30"


def test_update_into_a_clash_is_refused(client, booked):
    other = client.post("/api/timeslots/", json=slot_payload(roomId="R2", facultyId="F2", courseId="COMP201", yearLevel=2,
                                                              startTime="11:00", endTime="12:00")).json()

    response = client.put(
        f"/api/timeslots/{other['id']}",
        json=slot_payload(roomId="CS-Lab-1", facultyId="F2", courseId="COMP201", yearLevel=2),
    )

    assert response.status_code == 409
    assert response.json()["details"]["conflicts"][0]["affectedSlots"] == [booked["id"]]


def test_unknown_slot_returns_404(client):
    assert client.put("/api/timeslots/missing", json=slot_payload()).status_code == 404
    assert client.delete("/api/timeslots/missing").status_code == 404


def test_update_and_delete_invalidate_persisted_conflicts(client, session_factory, booked):
    with session_factory() as db:
        db.add(
            ConflictRecord(
                academic_year="2026-2027",
                semester=1,
                type=ConflictType.room,
                description="Room conflict",
                affected_slots=[booked["id"], "other"],
            )
        )
        db.add(
            ConflictRecord(
                academic_year="2026-2027",
                semester=1,
                type=ConflictType.room,
                description="Unrelated",
                affected_slots=["x", "y"],
            )
        )
        db.commit()

    assert client.delete(f"/api/timeslots/{booked['id']}").json() == {"success": True}

    with session_factory() as db:
        remaining = db.execute(select(ConflictRecord)).scalars().all()
    assert [record.description for record in remaining] == ["Unrelated"]
    assert client.get("/api/timeslots/").json() == []


def test_batch_creates_a_joint_session_with_a_fresh_group_id(client):
    response = client.post(
        "/api/timeslots/batch",
        json={
            "groupType": "joint",
            "slots": [
                slot_payload(courseId="COMP201", yearLevel=2, roomId="LT-1", facultyId="F3"),
                slot_payload(courseId="MATH201", yearLevel=2, roomId="LT-1", facultyId="F3"),
            ],
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["groupId"].startswith("joint-")
    assert {slot["groupId"] for slot in body["slots"]} == {body["groupId"]}
    assert {slot["groupType"] for slot in body["slots"]} == {"joint"}
    assert body["removedIds"] == []


def test_batch_with_a_clash_inside_it_writes_nothing(client):
    response = client.post(
        "/api/timeslots/batch",
        json={
            "slots": [
                slot_payload(courseId="C1", roomId="LT-1", facultyId="F3"),
                slot_payload(courseId="C2", roomId="LT-1", facultyId="F4", yearLevel=2),
            ],
        },
    )

    assert response.status_code == 409
    assert client.get("/api/timeslots/").json() == []


def test_batch_can_replace_existing_slots(client, booked):
    response = client.post(
        "/api/timeslots/batch",
        json={
            "groupType": "split",
            "removeIds": [booked["id"]],
            "slots": [
                slot_payload(groupName="Group A"),
                slot_payload(groupName="Group B", roomId="CS-Lab-2", facultyId="F2"),
            ],
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["removedIds"] == [booked["id"]]
    listed = client.get("/api/timeslots/").json()
    assert sorted(slot["groupName"] for slot in listed) == ["Group A", "Group B"]


def test_batch_refreshes_persisted_conflicts(client, session_factory):
    with session_factory() as db:
        db.add(Room(id="CS-Lab-1", name="CS Lab 1", capacity=10))
        db.commit()

    response = client.post(
        "/api/timeslots/batch",
        json={"slots": [slot_payload(maxStudents=40)]},
    )

    assert response.status_code == 201
    conflicts = client.get("/api/conflicts/", params={"academicYear": "2026-2027", "semester": 1}).json()
    assert [(item["type"], item["severity"]) for item in conflicts] == [("capacity", "warning")]


def test_batch_rejects_unknown_removals(client):
    response = client.post("/api/timeslots/batch", json={"removeIds": ["ghost"], "slots": [slot_payload()]})

    assert response.status_code == 404
