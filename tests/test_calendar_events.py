from datetime import datetime

from config import DEFAULT_EVENT_TYPE
from models.calendar_event import CalendarEventModel


def event_body(**overrides):
    body = {
        "title": "Sports day",
        "startDate": "2025-05-02T00:00:00Z",
        "endDate": "2025-05-02T00:00:00Z",
        "eventType": "행사",
        "scope": "school",
        "gradeLevels": ["1", "2"],
    }
    body.update(overrides)
    return body


def create_event(client, headers, **overrides):
    response = client.post("/api/calendar-events", json=event_body(**overrides), headers=headers)
    assert response.status_code == 201
    return response.json()["event"]


def test_create_school_event(client, teacher, headers_for):
    event = create_event(client, headers_for(teacher))

    assert event["allDay"] is True
    assert event["extendedProps"]["school"] == teacher.school
    assert event["extendedProps"]["eventType"] == "행사"
    assert event["extendedProps"]["gradeLevels"] == ["1", "2"]
    assert event["extendedProps"]["createdBy"] == teacher.id


def test_multi_day_event_is_not_all_day(client, teacher, headers_for):
    event = create_event(client, headers_for(teacher), endDate="2025-05-04T00:00:00Z")
    assert event["allDay"] is False


def test_school_event_requires_school(client, make_user, headers_for):
    drifter = make_user(role="teacher", school=None)

    response = client.post("/api/calendar-events", json=event_body(), headers=headers_for(drifter))

    assert response.status_code == 400


def test_create_event_validation(client, teacher, headers_for):
    headers = headers_for(teacher)
    backwards = client.post(
        "/api/calendar-events",
        json=event_body(startDate="2025-05-03T00:00:00Z", endDate="2025-05-01T00:00:00Z"),
        headers=headers,
    )
    unknown_type = client.post("/api/calendar-events", json=event_body(eventType="party"), headers=headers)

    assert backwards.status_code == 400
    assert unknown_type.status_code == 400


def test_only_teachers_create_events(client, student, headers_for):
    response = client.post("/api/calendar-events", json=event_body(), headers=headers_for(student))
    assert response.status_code == 403


def test_visibility_by_role_and_scope(client, make_user, headers_for):
    teacher = make_user(role="teacher")
    colleague = make_user(role="teacher")
    student = make_user(role="student")
    outsider = make_user(role="teacher", school="Other High")

    create_event(client, headers_for(teacher), title="School wide")
    create_event(client, headers_for(teacher), title="Dentist", scope="personal", eventType="개인일정")
    create_event(client, headers_for(outsider), title="Elsewhere")

    def titles(user, **params):
        response = client.get("/api/calendar-events", params=params, headers=headers_for(user))
        assert response.status_code == 200
        return sorted(e["title"] for e in response.json()["events"])

    assert titles(teacher) == ["Dentist", "School wide"]
    assert titles(teacher, scope="personal") == ["Dentist"]
    assert titles(teacher, scope="school") == ["School wide"]
    assert titles(colleague) == ["School wide"]
    assert titles(student) == ["School wide"]


def test_list_events_in_range(client, teacher, headers_for):
    headers = headers_for(teacher)
    create_event(client, headers, title="May", startDate="2025-05-02T00:00:00Z", endDate=None)
    create_event(client, headers, title="June", startDate="2025-06-02T00:00:00Z", endDate=None)

    response = client.get(
        "/api/calendar-events",
        params={"start": "2025-05-01T00:00:00Z", "end": "2025-05-31T23:59:59Z"},
        headers=headers,
    )

    assert [e["title"] for e in response.json()["events"]] == ["May"]


def test_update_and_delete_permissions(client, make_user, headers_for):
    owner = make_user(role="teacher")
    colleague = make_user(role="teacher")
    personal = create_event(client, headers_for(owner), scope="personal", eventType="개인일정")
    school = create_event(client, headers_for(owner))

    forbidden = client.patch(
        f"/api/calendar-events/{personal['id']}",
        json={"title": "Mine now"},
        headers=headers_for(colleague),
    )
    shared = client.patch(
        f"/api/calendar-events/{school['id']}",
        json={"title": "Sports day (rain date)"},
        headers=headers_for(colleague),
    )
    missing = client.delete("/api/calendar-events/missing", headers=headers_for(owner))

    assert forbidden.status_code == 403
    assert shared.status_code == 200
    assert shared.json()["event"]["title"] == "Sports day (rain date)"
    assert missing.status_code == 404
    assert client.delete(f"/api/calendar-events/{personal['id']}", headers=headers_for(colleague)).status_code == 403
    assert client.delete(f"/api/calendar-events/{personal['id']}", headers=headers_for(owner)).status_code == 200


def test_update_rejects_end_before_start(client, teacher, headers_for):
    headers = headers_for(teacher)
    event = create_event(client, headers)

    response = client.patch(
        f"/api/calendar-events/{event['id']}",
        json={"endDate": "2025-04-01T00:00:00Z"},
        headers=headers,
    )

    assert response.status_code == 400


def test_event_type_is_never_stored_empty(client, db, teacher, headers_for):
    headers = headers_for(teacher)
    response = client.post(
        "/api/calendar-events",
        json={"title": "Staff meeting", "startDate": "2025-05-02T00:00:00Z", "scope": "school"},
        headers=headers,
    )
    assert response.status_code == 201
    event = response.json()["event"]
    assert event["extendedProps"]["eventType"] == DEFAULT_EVENT_TYPE

    typed = create_event(client, headers)
    cleared = client.patch(
        f"/api/calendar-events/{typed['id']}",
        json={"eventType": None, "title": "Sports day (moved)"},
        headers=headers,
    )

    assert cleared.status_code == 200
    assert cleared.json()["event"]["extendedProps"]["eventType"] == "행사"
    assert cleared.json()["event"]["title"] == "Sports day (moved)"
    assert db.query(CalendarEventModel).filter(CalendarEventModel.event_type.is_(None)).count() == 0


def test_fix_calendar_events_backfills_type(client, db, teacher, admin, headers_for):
    headers = headers_for(teacher)
    # Rows stored before a category was required
    db.add(
        CalendarEventModel(
            title="Untyped",
            start_date=datetime(2025, 5, 2),
            scope="school",
            school=teacher.school,
            created_by=teacher.id,
        )
    )
    db.commit()
    create_event(client, headers, title="Typed")

    response = client.post("/api/admin/fix-calendar-events", headers=headers_for(admin))

    assert response.status_code == 200
    data = response.json()
    assert data["updatedCount"] == 1
    assert data["affectedEvents"][0]["title"] == "Untyped"
    assert db.query(CalendarEventModel).filter(CalendarEventModel.event_type.is_(None)).count() == 0
    assert client.post("/api/admin/fix-calendar-events", headers=headers).status_code == 403
