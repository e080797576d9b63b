from models.attendance import AttendanceModel
from models.class_group import ClassGroupModel
from models.course import CourseEnrollmentModel, CourseModel

COURSE_BODY = {
    "academicYear": "2025",
    "semester": "1",
    "subjectGroup": "Science",
    "subjectArea": "Physics",
    "careerTrack": "General",
    "subject": "Physics I",
    "grade": "2",
    "classroom": "Lab 3",
    "description": "Mechanics and waves",
}

DATE = "2025-03-04T00:00:00Z"


def create_course(client, headers, **overrides):
    body = dict(COURSE_BODY, **overrides)
    response = client.post("/api/classes", json=body, headers=headers)
    assert response.status_code == 201
    return response.json()["course"]


def create_class_group(client, headers, course_id, **overrides):
    body = {"name": "2-1", "schedules": [{"day": "Mon", "period": "3"}], "studentIds": ["s1", "s2", "s1"]}
    body.update(overrides)
    response = client.post(f"/api/courses/{course_id}/class-groups", json=body, headers=headers)
    assert response.status_code == 201
    return response.json()["classGroup"]


def test_create_course_defaults_instructor_and_join_code(client, teacher, headers_for):
    course = create_course(client, headers_for(teacher))

    assert course["instructor"] == teacher.name
    assert len(course["joinCode"]) == 6
    assert course["teacherId"] == teacher.id


def test_create_course_validates_fields(client, teacher, headers_for):
    response = client.post(
        "/api/classes",
        json=dict(COURSE_BODY, subject="   "),
        headers=headers_for(teacher),
    )
    assert response.status_code == 400


def test_course_routes_check_role(client, student, headers_for):
    assert client.post("/api/classes", json=COURSE_BODY).status_code == 401
    assert client.post("/api/classes", json=COURSE_BODY, headers=headers_for(student)).status_code == 403


def test_update_course_only_by_owner(client, make_user, headers_for):
    owner = make_user(role="teacher")
    other = make_user(role="teacher")
    course = create_course(client, headers_for(owner))

    foreign = client.put(
        f"/api/courses/{course['id']}",
        json=dict(COURSE_BODY, subject="Hijacked"),
        headers=headers_for(other),
    )
    own = client.put(
        f"/api/courses/{course['id']}",
        json=dict(COURSE_BODY, subject="Physics II"),
        headers=headers_for(owner),
    )

    assert foreign.status_code == 404
    assert own.status_code == 200
    assert own.json()["course"]["subject"] == "Physics II"
    assert own.json()["course"]["joinCode"] == course["joinCode"]


def test_list_own_courses(client, make_user, headers_for):
    owner = make_user(role="teacher")
    other = make_user(role="teacher")
    create_course(client, headers_for(owner))
    create_course(client, headers_for(other))

    response = client.get("/api/classes", headers=headers_for(owner))

    assert [c["teacherId"] for c in response.json()["courses"]] == [owner.id]


def test_delete_course_cascades_to_groups_and_attendance(client, db, teacher, headers_for):
    headers = headers_for(teacher)
    course = create_course(client, headers)
    group = create_class_group(client, headers, course["id"])
    client.post(
        f"/api/courses/{course['id']}/class-groups/{group['id']}/attendance",
        json={"date": DATE, "attendances": [{"studentId": "s1", "status": "present"}]},
        headers=headers,
    )
    assert db.query(AttendanceModel).count() == 1

    response = client.delete(f"/api/classes/{course['id']}", headers=headers)

    assert response.status_code == 200
    assert db.query(CourseModel).count() == 0
    assert db.query(ClassGroupModel).count() == 0
    assert db.query(AttendanceModel).count() == 0


def test_join_course_by_code(client, db, teacher, student, headers_for):
    course = create_course(client, headers_for(teacher))
    headers = headers_for(student)

    joined = client.post("/api/courses/join", json={"joinCode": course["joinCode"].lower()}, headers=headers)
    again = client.post("/api/courses/join", json={"joinCode": course["joinCode"]}, headers=headers)
    unknown = client.post("/api/courses/join", json={"joinCode": "ZZZZZZ"}, headers=headers)

    assert joined.status_code == 200
    assert again.status_code == 400
    assert unknown.status_code == 404
    assert db.query(CourseEnrollmentModel).filter_by(student_id=student.id).count() == 1

    enrolled = client.get("/api/courses/enrolled", headers=headers)
    assert [c["id"] for c in enrolled.json()["courses"]] == [course["id"]]


def test_class_group_crud(client, teacher, headers_for):
    headers = headers_for(teacher)
    course = create_course(client, headers)
    group = create_class_group(client, headers, course["id"])

    assert group["studentIds"] == ["s1", "s2"]
    assert group["schedules"] == [{"day": "Mon", "period": "3"}]

    updated = client.put(
        f"/api/courses/{course['id']}/class-groups/{group['id']}",
        json={"name": "2-2", "studentIds": ["s3"]},
        headers=headers,
    )
    assert updated.status_code == 200
    assert updated.json()["classGroup"]["name"] == "2-2"

    listed = client.get(f"/api/courses/{course['id']}/class-groups", headers=headers)
    assert len(listed.json()["classGroups"]) == 1

    deleted = client.delete(f"/api/courses/{course['id']}/class-groups/{group['id']}", headers=headers)
    assert deleted.status_code == 200
    missing = client.delete(f"/api/courses/{course['id']}/class-groups/{group['id']}", headers=headers)
    assert missing.status_code == 404


def test_class_groups_of_foreign_course_are_hidden(client, make_user, headers_for):
    owner = make_user(role="teacher")
    other = make_user(role="teacher")
    course = create_course(client, headers_for(owner))

    response = client.get(f"/api/courses/{course['id']}/class-groups", headers=headers_for(other))

    assert response.status_code == 404


def test_attendance_upsert_keeps_single_row_with_latest_status(client, db, teacher, headers_for):
    headers = headers_for(teacher)
    course = create_course(client, headers)
    group = create_class_group(client, headers, course["id"])
    url = f"/api/courses/{course['id']}/class-groups/{group['id']}/attendance"

    first = client.post(
        url,
        json={"date": DATE, "attendances": [{"studentId": "s1", "status": "present"}]},
        headers=headers,
    )
    second = client.post(
        url,
        json={"date": DATE, "attendances": [{"studentId": "s1", "status": "late"}]},
        headers=headers,
    )

    assert first.status_code == 200
    assert second.status_code == 200
    rows = db.query(AttendanceModel).filter_by(student_id="s1").all()
    assert len(rows) == 1
    assert rows[0].status == "late"

    listed = client.get(url, params={"date": DATE}, headers=headers)
    assert listed.status_code == 200
    assert [(a["studentId"], a["status"]) for a in listed.json()["attendances"]] == [("s1", "late")]


def test_attendance_duplicate_entries_in_one_request(client, db, teacher, headers_for):
    headers = headers_for(teacher)
    course = create_course(client, headers)
    group = create_class_group(client, headers, course["id"])

    response = client.post(
        f"/api/courses/{course['id']}/class-groups/{group['id']}/attendance",
        json={
            "date": DATE,
            "attendances": [
                {"studentId": "s1", "status": "present"},
                {"studentId": "s2", "status": "excused"},
                {"studentId": "s1", "status": "sick_leave"},
            ],
        },
        headers=headers,
    )

    assert response.json()["count"] == 2
    assert db.query(AttendanceModel).filter_by(student_id="s1").one().status == "sick_leave"


def test_attendance_requires_date_and_valid_status(client, teacher, headers_for):
    headers = headers_for(teacher)
    course = create_course(client, headers)
    group = create_class_group(client, headers, course["id"])
    url = f"/api/courses/{course['id']}/class-groups/{group['id']}/attendance"

    assert client.get(url, headers=headers).status_code == 400
    bad_status = client.post(
        url,
        json={"date": DATE, "attendances": [{"studentId": "s1", "status": "asleep"}]},
        headers=headers,
    )
    assert bad_status.status_code == 400
