import pytest
from sqlalchemy import select, update

from app.core.exceptions import NotFoundError
from app.models.course import Course
from app.schemas.allocation import AllocationCreate
from app.services.allocation import admit_allocation, reconcile_course_availability, revoke_allocation


def admit(db, catalog, settings, course="cse101", day=1):
    target = catalog.courses[course]
    return admit_allocation(
        db,
        AllocationCreate(
            teacher_id=catalog.teachers["alice"].id,
            course_id=target.id,
            room_id=catalog.rooms["r101"].id,
            day_id=day,
            slot_id=1,
            program=target.program,
            section=1,
        ),
        settings=settings,
    )


def corrupt(db, course, value):
    db.execute(update(Course).where(Course.id == course.id).values(allocation_availability=value))
    db.commit()
    db.expire_all()


def test_consistent_counters_report_nothing(db_session, catalog, settings):
    admit(db_session, catalog, settings)

    assert reconcile_course_availability(db_session) == []


def test_drift_is_reported_then_repaired(db_session, catalog, settings):
    admit(db_session, catalog, settings, day=1)
    admit(db_session, catalog, settings, day=2)
    cse101 = catalog.courses["cse101"]
    corrupt(db_session, cse101, 8)

    drifts = reconcile_course_availability(db_session)
    assert len(drifts) == 1
    drift = drifts[0]
    assert drift.course_code == "CSE101"
    assert (drift.allocated, drift.cached_availability, drift.expected_availability) == (2, 8, 6)
    assert drift.repaired is False

    repaired = reconcile_course_availability(db_session, course_id=cse101.id, apply=True)
    assert repaired[0].repaired is True
    stored = db_session.execute(select(Course.allocation_availability).where(Course.id == cse101.id)).scalar_one()
    assert stored == 6
    assert reconcile_course_availability(db_session) == []


def test_reconcile_unknown_course(db_session, catalog):
    with pytest.raises(NotFoundError):
        reconcile_course_availability(db_session, course_id="missing")


def test_reconcile_endpoint(client):
    course = client.post(
        "/api/courses/",
        json={"code": "SWE101", "name": "Software Design", "credit_hours": 1.5, "program": "SWE", "type": "Theory"},
    ).json()

    response = client.post("/api/allocations/reconcile", params={"apply": True})

    assert response.status_code == 200
    assert response.json() == []
    assert client.post("/api/allocations/reconcile", params={"course_id": course["id"]}).json() == []
    assert client.post("/api/allocations/reconcile", params={"course_id": "missing"}).status_code == 404


def test_admission_rewrites_a_drifted_counter_from_live_rows(db_session, catalog, settings):
    cse101 = catalog.courses["cse101"]
    corrupt(db_session, cse101, 0)

    detail = admit(db_session, catalog, settings)

    assert detail.course_code == "CSE101"
    stored = db_session.execute(select(Course.allocation_availability).where(Course.id == cse101.id)).scalar_one()
    assert stored == 7
    assert reconcile_course_availability(db_session) == []


def test_revocation_rewrites_a_drifted_counter_from_live_rows(db_session, catalog, settings):
    cse101 = catalog.courses["cse101"]
    first = admit(db_session, catalog, settings, day=1)
    admit(db_session, catalog, settings, day=2)
    corrupt(db_session, cse101, 8)

    revoke_allocation(db_session, first.id)

    stored = db_session.execute(select(Course.allocation_availability).where(Course.id == cse101.id)).scalar_one()
    assert stored == 7
    assert reconcile_course_availability(db_session) == []
