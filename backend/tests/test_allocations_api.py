import pytest


@pytest.fixture()
def setup(client):
    """Two teachers, two theory rooms, one lab and three CSE/EEE courses created over the API."""

    def post(path, payload):
        response = client.post(path, json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return {
        "alice": post("/api/teachers/", {"name": "Alice Rahman", "email": "alice@univ.edu"}),
        "bob": post("/api/teachers/", {"name": "Bob Karim", "email": "bob@univ.edu"}),
        "r101": post("/api/rooms/", {"room_number": "101", "capacity": 40}),
        "r102": post("/api/rooms/", {"room_number": "102", "capacity": 40}),
        "lab1": post("/api/rooms/", {"room_number": "LAB-1", "capacity": 30, "is_lab": True}),
        "cse101": post(
            "/api/courses/",
            {"code": "CSE101", "name": "Structured Programming", "credit_hours": 3.0, "program": "CSE", "type": "Theory"},
        ),
        "cse102": post(
            "/api/courses/",
            {"code": "CSE102", "name": "Programming Lab", "credit_hours": 1.5, "program": "CSE", "type": "Lab"},
        ),
        "eee201": post(
            "/api/courses/",
            {"code": "EEE201", "name": "Electrical Circuits", "credit_hours": 3.0, "program": "EEE", "type": "Theory"},
        ),
    }


def allocate(client, setup, *, teacher="alice", course="cse101", room="r101", day_id=1, slot_id=1, section=1, program=None, headers=None):
    return client.post(
        "/api/allocations/",
        json={
            "teacher_id": setup[teacher]["id"],
            "course_id": setup[course]["id"],
            "room_id": setup[room]["id"],
            "day_id": day_id,
            "slot_id": slot_id,
            "program": program or setup[course]["program"],
            "section": section,
        },
        headers=headers,
    )


def availability(client, setup, course="cse101"):
    return client.get(f"/api/courses/{setup[course]['id']}/availability").json()["allocation_availability"]


def test_admission_updates_counter_and_sections(client, setup):
    assert availability(client, setup) == 8

    response = allocate(client, setup)

    assert response.status_code == 201
    body = response.json()
    assert body["teacher_name"] == "Alice Rahman"
    assert body["course_type"] == "Theory"
    assert body["room_number"] == "101"
    assert body["day_name"] == "Monday"
    assert body["start_time"] == "08:00:00"
    assert body["end_time"] == "09:15:00"
    assert availability(client, setup) == 7

    sections = client.get(f"/api/courses/{setup['cse101']['id']}/available-sections").json()
    assert sections == [
        {"section": 1, "max_allocations": 4, "allocated": 1, "remaining": 3},
        {"section": 2, "max_allocations": 4, "allocated": 0, "remaining": 4},
    ]


def test_room_double_booking_returns_conflict(client, setup):
    allocate(client, setup)

    response = allocate(client, setup, teacher="bob")

    assert response.status_code == 409
    assert response.json()["details"]["rule"] == "room_booking"
    assert availability(client, setup) == 7
    assert len(client.get("/api/allocations/").json()) == 1


def test_daily_ceiling_returns_constraint_error(client, setup, settings):
    settings.teacher_daily_hour_limit = 2.5
    assert allocate(client, setup, slot_id=1).status_code == 201
    assert allocate(client, setup, slot_id=2, section=2).status_code == 201

    response = allocate(client, setup, course="eee201", slot_id=3)

    assert response.status_code == 422
    body = response.json()
    assert body["details"]["rule"] == "teacher_daily_hours"
    assert body["details"]["limit"] == 2.5
    assert "limit 2.5 h" in body["message"]
    assert len(client.get("/api/allocations/").json()) == 2
    assert availability(client, setup, "eee201") == 12


def test_delete_allocation_restores_counter_and_routine(client, setup):
    created = allocate(client, setup).json()
    routine = client.get("/api/routine", params={"program": "CSE", "section": 1}).json()
    assert routine["Monday"]["08:00 - 09:15"]["course_code"] == "CSE101"

    deleted = client.delete(f"/api/allocations/{created['id']}")

    assert deleted.status_code == 200
    assert deleted.json()["success"] is True
    assert availability(client, setup) == 8
    assert client.get("/api/routine", params={"program": "CSE", "section": 1}).json() == {}
    assert client.delete(f"/api/allocations/{created['id']}").status_code == 404


def test_lab_course_in_theory_room_is_rejected(client, setup):
    response = allocate(client, setup, course="cse102", room="r101", slot_id=5)

    assert response.status_code == 400
    assert response.json()["message"] == "Lab courses must use Lab rooms."
    assert client.get("/api/allocations/").json() == []
    assert availability(client, setup, "cse102") == 4


def test_missing_fields_are_a_bad_request_listing_each_field(client, setup):
    response = client.post("/api/allocations/", json={"teacher_id": setup["alice"]["id"]})

    assert response.status_code == 400
    body = response.json()
    assert body["message"].startswith("All fields are required")
    assert body["details"]["missing"] == ["course_id", "room_id", "day_id", "slot_id", "program", "section"]
    assert client.get("/api/allocations/").json() == []


def test_blank_program_and_zero_section_are_bad_requests(client, setup):
    blank = allocate(client, setup, program="  ")
    assert blank.status_code == 400
    assert blank.json()["details"]["missing"] == ["program"]

    zero = allocate(client, setup, section=0)
    assert zero.status_code == 400
    assert zero.json()["details"]["section"] == 0


def test_invalid_reference_is_a_bad_request(client, setup):
    response = allocate(client, setup, day_id=12)

    assert response.status_code == 400
    assert response.json()["details"] == {"resource_type": "day", "resource_id": "12"}


def test_teacher_clash_returns_conflict(client, setup):
    allocate(client, setup, course="cse102", room="lab1", slot_id=5)

    response = allocate(client, setup, course="eee201", room="r102", slot_id=1)

    assert response.status_code == 409
    assert response.json()["details"]["rule"] == "teacher_booking"


def test_availability_endpoints_follow_allocations(client, setup):
    allocate(client, setup, course="cse102", room="lab1", slot_id=5)
    course_id = setup["cse102"]["id"]

    days = client.get("/api/availability/days", params={"course_id": course_id, "section": 1}).json()
    assert [day["name"] for day in days] == ["Tuesday", "Wednesday", "Thursday", "Friday"]

    slots = client.get(
        "/api/availability/time-slots",
        params={"day_id": 1, "section": 1, "program": "CSE", "course_id": setup["cse101"]["id"]},
    ).json()
    assert [slot["label"] for slot in slots] == ["10:30 - 11:45", "11:45 - 13:00"]

    labs = client.get("/api/availability/rooms", params={"day_id": 1, "slot_id": 5, "course_type": "Lab"}).json()
    assert labs == []
    theory_rooms = client.get("/api/availability/rooms", params={"day_id": 1, "slot_id": 1}).json()
    assert [room["room_number"] for room in theory_rooms] == ["101", "102"]

    missing = client.get("/api/availability/rooms", params={"day_id": 1, "slot_id": 99})
    assert missing.status_code == 400


def test_time_slots_validate_program_and_section(client, setup):
    params = {"day_id": 1, "course_id": setup["cse101"]["id"]}

    unknown = client.get("/api/availability/time-slots", params={**params, "section": 1, "program": "XYZ"})
    assert unknown.status_code == 400
    assert unknown.json()["details"]["resource_type"] == "program"

    out_of_range = client.get("/api/availability/time-slots", params={**params, "section": 3, "program": "cse"})
    assert out_of_range.status_code == 400
    assert out_of_range.json()["details"] == {"section": 3, "section_count": 2, "program": "CSE"}


def test_teacher_views(client, setup):
    allocate(client, setup)
    allocate(client, setup, teacher="bob", course="eee201", room="r102", day_id=2)

    with_allocations = client.get("/api/teachers/with-allocations").json()
    assert [teacher["name"] for teacher in with_allocations] == ["Alice Rahman", "Bob Karim"]

    owner = client.get(f"/api/courses/{setup['cse101']['id']}/teacher").json()
    assert owner == {"course_id": setup["cse101"]["id"], "teacher_id": setup["alice"]["id"], "teacher_name": "Alice Rahman"}
    nobody = client.get(f"/api/courses/{setup['cse102']['id']}/teacher").json()
    assert nobody["teacher_id"] is None

    routine = client.get(f"/api/teachers/{setup['bob']['id']}/routine").json()
    assert [(entry["day"], entry["course_code"]) for entry in routine] == [("Tuesday", "EEE201")]


def test_available_only_hides_exhausted_courses(client, setup):
    allocate(client, setup, course="cse102", room="lab1", slot_id=5, day_id=1)
    allocate(client, setup, course="cse102", room="lab1", slot_id=5, day_id=2)
    allocate(client, setup, course="cse102", room="lab1", slot_id=5, day_id=3, section=2)
    allocate(client, setup, course="cse102", room="lab1", slot_id=5, day_id=4, section=2)

    codes = [course["code"] for course in client.get("/api/courses/", params={"available_only": True}).json()]
    assert codes == ["CSE101", "EEE201"]
    assert len(client.get("/api/courses/").json()) == 3


def test_deleting_teacher_over_api_cascades(client, setup):
    allocate(client, setup)
    allocate(client, setup, day_id=2)

    check = client.get(f"/api/teachers/{setup['alice']['id']}/delete-check").json()
    assert check["allocation_count"] == 2

    response = client.delete(f"/api/teachers/{setup['alice']['id']}", headers={"X-Actor": "registrar"})

    assert response.json() == {"success": True, "allocations_removed": 2}
    assert client.get("/api/allocations/").json() == []
    assert availability(client, setup) == 8
    logs = client.get("/api/activity/logs", params={"entity_type": "teacher"}).json()
    assert logs[0]["actor"] == "registrar"
    assert logs[0]["details"]["allocations_removed"] == 2


def test_deleting_course_over_api_cascades(client, setup):
    allocate(client, setup)

    response = client.delete(f"/api/courses/{setup['cse101']['id']}")

    assert response.json() == {"success": True, "allocations_removed": 1}
    assert client.get("/api/allocations/").json() == []
    assert client.get(f"/api/courses/{setup['cse101']['id']}").status_code == 404


def test_routine_requires_program_and_section(client):
    assert client.get("/api/routine", params={"program": "CSE"}).status_code == 422
