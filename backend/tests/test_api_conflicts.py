from app.models.course import Course
from app.models.faculty import Faculty
from app.models.room import Room
from app.models.time_slot import TimeSlot


def seed(session_factory, *slots):
    with session_factory() as db:
        db.add_all(
            [
                Faculty(id="F1", first_name="Ada", last_name="Lovelace", department_id="CS"),
                Room(id="CS-Lab-1", name="CS Lab 1", capacity=30),
                Course(id="COMP101", code="COMP101", name="Programming I", department_id="CS", year_level=1),
                Course(id="COMP201", code="COMP201", name="Algorithms", department_id="CS", year_level=2),
                Course(id="MATH201", code="MATH201", name="Linear Algebra", department_id="MATH", year_level=2),
            ]
        )
        db.add_all(slots)
        db.commit()


def time_slot(slot_id, **overrides):
    values = {
        "id": slot_id,
        "course_id": "COMP101",
        "faculty_id": "F1",
        "room_id": "CS-Lab-1",
        "department_id": "CS",
        "day_of_week": 1,
        "start_time": "08:00",
        "end_time": "10:00",
        "year_level": 1,
        "academic_year": "2026-2027",
        "semester": 1,
    }
    values.update(overrides)
    return TimeSlot(**values)


def draft(**overrides):
    values = {
        "courseId": "COMP102",
        "facultyId": "F2",
        "roomId": "CS-Lab-1",
        "dayOfWeek": 1,
        "startTime": "09:00",
        "endTime": "11:00",
        "yearLevel": 2,
        "academicYear": "2026-2027",
        "semester": 1,
    }
    values.update(overrides)
    return values


def test_check_reports_labelled_room_conflict(client, session_factory):
    seed(session_factory, time_slot("s1"))

    response = client.post("/api/conflicts/check", json={"slot": draft()})

    assert response.status_code == 200
    body = response.json()
    assert body["hasConflicts"] is True
    assert body["canProceed"] is False
    assert body["conflicts"][0]["type"] == "room"
    assert body["conflicts"][0]["affectedSlots"] == ["s1"]
    assert "CS Lab 1" in body["conflicts"][0]["description"]


def test_check_with_exclude_id_ignores_the_edited_slot(client, session_factory):
    seed(session_factory, time_slot("s1"))

    response = client.post("/api/conflicts/check", json={"slot": draft(), "excludeId": "s1"})

    assert response.json()["conflicts"] == []


def test_check_tolerates_incomplete_drafts(client):
    response = client.post("/api/conflicts/check", json={"slot": {"roomId": "CS-Lab-1", "dayOfWeek": 1}})

    assert response.status_code == 200
    assert response.json()["canProceed"] is True


def test_check_joint(client, session_factory):
    seed(session_factory, time_slot("s1"))

    response = client.post(
        "/api/conflicts/check-joint",
        json={
            "courseIds": ["COMP201", "MATH201"],
            "facultyId": "F1",
            "roomId": "LT-1",
            "dayOfWeek": 1,
            "startTime": "09:00",
            "endTime": "10:00",
            "yearLevel": 2,
            "academicYear": "2026-2027",
            "semester": 1,
        },
    )

    body = response.json()
    assert response.status_code == 200
    assert [conflict["type"] for conflict in body["conflicts"] if conflict["affectedSlots"]] == ["faculty"]
    assert "Ada Lovelace" in body["conflicts"][0]["description"]


def test_check_joint_requires_two_courses(client):
    response = client.post(
        "/api/conflicts/check-joint",
        json={"courseIds": ["COMP201"], "facultyId": "F1", "roomId": "LT-1"},
    )

    assert response.status_code == 422


def test_check_split(client, session_factory):
    seed(session_factory)

    response = client.post(
        "/api/conflicts/check-split",
        json={
            "courseId": "COMP101",
            "facultyId": "F1",
            "dayOfWeek": 1,
            "startTime": "13:00",
            "endTime": "15:00",
            "yearLevel": 1,
            "academicYear": "2026-2027",
            "semester": 1,
            "groups": [{"name": "Group A", "roomId": "CS-Lab-1"}, {"name": "Group B", "roomId": "CS-Lab-1", "facultyId": "F2"}],
        },
    )

    body = response.json()
    assert [conflict["type"] for conflict in body["conflicts"]] == ["room"]
    assert body["canProceed"] is False


def test_check_batch(client, session_factory):
    seed(session_factory, time_slot("s1"))

    response = client.post(
        "/api/conflicts/check-batch",
        json={"slots": [draft(roomId="R2"), draft(roomId="R2", courseId="COMP201", facultyId="F9")], "removeIds": ["s1"]},
    )

    body = response.json()
    assert [conflict["type"] for conflict in body["conflicts"]] == ["room", "student_group"]
    assert all(conflict["affectedSlots"] == [] for conflict in body["conflicts"])


def test_recompute_list_and_resolve(client, session_factory):
    seed(session_factory, time_slot("s1"), time_slot("s2", faculty_id="F2", course_id="COMP103"))

    recomputed = client.post("/api/conflicts/recompute", json={"academicYear": "2026-2027", "semester": 1})
    assert recomputed.status_code == 200
    body = recomputed.json()
    assert body["total"] == 2
    assert body["blocking"] == 2
    assert [conflict["type"] for conflict in body["conflicts"]] == ["room", "student_group"]

    conflict_id = body["conflicts"][0]["id"]
    resolved = client.put(
        f"/api/conflicts/{conflict_id}/resolve",
        json={"resolvedBy": "admin-1", "resolutionNotes": "Moved to Lab 2"},
    )
    assert resolved.status_code == 200
    assert resolved.json()["resolved"] is True
    assert resolved.json()["resolutionNotes"] == "Moved to Lab 2"

    open_only = client.get("/api/conflicts/", params={"academicYear": "2026-2027", "includeResolved": False}).json()
    assert [item["type"] for item in open_only] == ["student_group"]
    assert len(client.get("/api/conflicts/").json()) == 2


def test_recompute_replaces_the_previous_set(client, session_factory):
    seed(session_factory, time_slot("s1"), time_slot("s2", faculty_id="F2", course_id="COMP103"))
    scope = {"academicYear": "2026-2027", "semester": 1}
    client.post("/api/conflicts/recompute", json=scope)

    client.delete("/api/timeslots/s2")
    again = client.post("/api/conflicts/recompute", json=scope).json()

    assert again["total"] == 0
    assert client.get("/api/conflicts/").json() == []


def test_resolve_unknown_conflict_returns_404(client):
    assert client.put("/api/conflicts/nope/resolve", json={}).status_code == 404


def test_availability_endpoint(client, session_factory):
    seed(session_factory, time_slot("s1"), time_slot("s2", room_id="R2", faculty_id="F2", start_time="14:00", end_time="15:00"))

    response = client.get("/api/availability/", params={"day": 1, "academicYear": "2026-2027", "semester": 1})

    assert response.status_code == 200
    assert response.json() == [{"start": "10:00", "end": "14:00"}, {"start": "15:00", "end": "18:00"}]

    shorter = client.get(
        "/api/availability/",
        params={"day": 1, "academicYear": "2026-2027", "semester": 1, "yearLevel": 2, "minDuration": 30},
    )
    assert shorter.json() == [{"start": "08:00", "end": "18:00"}]


def test_availability_validates_the_day(client):
    response = client.get("/api/availability/", params={"day": 8, "academicYear": "2026-2027", "semester": 1})

    assert response.status_code == 422
