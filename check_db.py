from app.db.session import SessionLocal
from app.services.allocation import list_allocations, reconcile_course_availability

db = SessionLocal()
try:
    allocations = list_allocations(db)
    print(f"Allocations: {len(allocations)}")
    for item in allocations[:5]:
        print(f"  - {item.day_name} {item.start_time:%H:%M} {item.course_code} {item.program}-{item.section} ({item.room_number})")

    drifts = reconcile_course_availability(db)
    print(f"Courses with drifting availability: {len(drifts)}")
    for drift in drifts:
        print(f"  - {drift.course_code}: cached {drift.cached_availability}, expected {drift.expected_availability}")
finally:
    db.close()
