from models.profiles import StudentProfileModel


def test_profile_is_empty_until_saved(client, student, headers_for):
    response = client.get("/api/student/profile", headers=headers_for(student))

    assert response.status_code == 200
    assert response.json()["user"]["email"] == student.email
    assert response.json()["profile"] is None


def test_update_profile_writes_user_and_profile(client, db, student, headers_for):
    headers = headers_for(student)

    response = client.put(
        "/api/student/profile",
        json={
            "name": "Lee Minji",
            "region": "Seoul",
            "studentId": "20315",
            "grade": "2",
            "classLabel": "3",
            "electiveSubjects": ["Physics", "Chemistry"],
        },
        headers=headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["user"]["name"] == "Lee Minji"
    assert data["profile"]["studentId"] == "20315"
    assert data["profile"]["electiveSubjects"] == ["Physics", "Chemistry"]

    # Fields left out of a later update are kept
    client.put("/api/student/profile", json={"club": "Robotics"}, headers=headers)
    db.expire_all()
    profile = db.query(StudentProfileModel).filter_by(user_id=student.id).one()
    assert profile.club == "Robotics"
    assert profile.grade == "2"
    assert profile.elective_subjects == ["Physics", "Chemistry"]


def test_profile_field_lengths_are_checked(client, db, student, headers_for):
    response = client.put(
        "/api/student/profile",
        json={"studentId": "x" * 51},
        headers=headers_for(student),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request data"
    assert db.query(StudentProfileModel).count() == 0


def test_profile_is_for_students_only(client, teacher, headers_for):
    assert client.get("/api/student/profile").status_code == 401
    assert client.get("/api/student/profile", headers=headers_for(teacher)).status_code == 403
    assert client.put("/api/student/profile", json={}, headers=headers_for(teacher)).status_code == 403
