from config import UPLOADS_DIR
from models.assignment import AssignmentAttachmentModel, AssignmentModel

from test_courses import create_course


def pdf(name="notes.pdf", content=b"%PDF-1.4 test"):
    return ("files", (name, content, "application/pdf"))


def create_assignment(client, headers, course_id, files=None, **fields):
    data = {"title": "Lab report", "description": "Write up the pendulum lab", "dueDate": "2025-03-10T09:00:00Z"}
    data.update(fields)
    return client.post(
        f"/api/courses/{course_id}/assignments",
        data=data,
        files=files or [pdf()],
        headers=headers,
    )


def test_create_assignment_stores_files(client, teacher, headers_for):
    headers = headers_for(teacher)
    course = create_course(client, headers)

    response = create_assignment(client, headers, course["id"], files=[pdf(), pdf("slides.pptx")])

    assert response.status_code == 201
    assignment = response.json()["assignment"]
    assert assignment["title"] == "Lab report"
    assert assignment["dueDate"].startswith("2025-03-10T09:00:00")
    assert sorted(a["originalFileName"] for a in assignment["attachments"]) == ["notes.pdf", "slides.pptx"]
    for attachment in assignment["attachments"]:
        assert attachment["filePath"].startswith("assignments/")
        assert (UPLOADS_DIR / attachment["filePath"]).exists()


def test_same_named_uploads_keep_separate_files(client, teacher, headers_for):
    headers = headers_for(teacher)
    course = create_course(client, headers)

    response = create_assignment(
        client,
        headers,
        course["id"],
        files=[pdf(content=b"AAAA"), pdf(content=b"BBBBBBBB")],
    )

    assert response.status_code == 201
    attachments = response.json()["assignment"]["attachments"]
    paths = {a["filePath"] for a in attachments}
    assert len(paths) == 2
    contents = sorted((UPLOADS_DIR / path).read_bytes() for path in paths)
    assert contents == [b"AAAA", b"BBBBBBBB"]

    first = attachments[0]
    other = UPLOADS_DIR / attachments[1]["filePath"]
    client.delete(
        f"/api/courses/{course['id']}/assignments/{response.json()['assignment']['id']}/attachments/{first['id']}",
        headers=headers,
    )
    assert other.exists()


def test_create_assignment_rejects_bad_uploads(client, db, teacher, headers_for):
    headers = headers_for(teacher)
    course = create_course(client, headers)

    bad_type = create_assignment(client, headers, course["id"], files=[("files", ("run.exe", b"MZ", "application/octet-stream"))])
    long_title = create_assignment(client, headers, course["id"], title="x" * 201)

    assert bad_type.status_code == 400
    assert long_title.status_code == 400
    assert db.query(AssignmentModel).count() == 0


def test_list_assignments_by_role(client, make_user, teacher, student, headers_for):
    headers = headers_for(teacher)
    course = create_course(client, headers)
    create_assignment(client, headers, course["id"])
    other_teacher = make_user(role="teacher")

    own = client.get(f"/api/courses/{course['id']}/assignments", headers=headers)
    as_student = client.get(f"/api/courses/{course['id']}/assignments", headers=headers_for(student))
    foreign = client.get(f"/api/courses/{course['id']}/assignments", headers=headers_for(other_teacher))
    anonymous = client.get(f"/api/courses/{course['id']}/assignments")

    assert len(own.json()["assignments"]) == 1
    assert len(as_student.json()["assignments"]) == 1
    assert foreign.status_code == 404
    assert anonymous.status_code == 401


def test_update_assignment_replaces_files(client, db, teacher, headers_for):
    headers = headers_for(teacher)
    course = create_course(client, headers)
    created = create_assignment(client, headers, course["id"]).json()["assignment"]
    old_path = UPLOADS_DIR / created["attachments"][0]["filePath"]

    response = client.put(
        f"/api/courses/{course['id']}/assignments/{created['id']}",
        data={"title": "Lab report v2", "removeFile": "true"},
        files=[pdf("v2.pdf")],
        headers=headers,
    )

    assert response.status_code == 200
    assignment = response.json()["assignment"]
    assert assignment["title"] == "Lab report v2"
    assert assignment["dueDate"] is None
    assert [a["originalFileName"] for a in assignment["attachments"]] == ["v2.pdf"]
    assert not old_path.exists()


def test_update_assignment_appends_files(client, teacher, headers_for):
    headers = headers_for(teacher)
    course = create_course(client, headers)
    created = create_assignment(client, headers, course["id"]).json()["assignment"]

    response = client.put(
        f"/api/courses/{course['id']}/assignments/{created['id']}",
        data={"title": "Lab report"},
        files=[pdf("extra.pdf")],
        headers=headers,
    )

    assert len(response.json()["assignment"]["attachments"]) == 2


def test_delete_attachment_tolerates_missing_file(client, db, teacher, headers_for):
    headers = headers_for(teacher)
    course = create_course(client, headers)
    created = create_assignment(client, headers, course["id"]).json()["assignment"]
    attachment = created["attachments"][0]
    (UPLOADS_DIR / attachment["filePath"]).unlink()

    response = client.delete(
        f"/api/courses/{course['id']}/assignments/{created['id']}/attachments/{attachment['id']}",
        headers=headers,
    )

    assert response.status_code == 200
    assert db.query(AssignmentAttachmentModel).count() == 0


def test_delete_assignment_removes_files(client, db, teacher, headers_for):
    headers = headers_for(teacher)
    course = create_course(client, headers)
    created = create_assignment(client, headers, course["id"]).json()["assignment"]
    path = UPLOADS_DIR / created["attachments"][0]["filePath"]

    response = client.delete(f"/api/courses/{course['id']}/assignments/{created['id']}", headers=headers)

    assert response.status_code == 200
    assert not path.exists()
    assert db.query(AssignmentModel).count() == 0
    assert db.query(AssignmentAttachmentModel).count() == 0


def test_delete_course_removes_assignment_files(client, teacher, headers_for):
    headers = headers_for(teacher)
    course = create_course(client, headers)
    created = create_assignment(client, headers, course["id"]).json()["assignment"]
    path = UPLOADS_DIR / created["attachments"][0]["filePath"]

    client.delete(f"/api/classes/{course['id']}", headers=headers)

    assert not path.exists()
