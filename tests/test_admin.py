from models.profiles import AdminProfileModel
from models.school import SchoolModel
from models.user import UserModel


def admin_body(**overrides):
    body = {
        "adminEmail": "principal@hanbit.example.com",
        "adminPassword": "Admin1234!",
        "adminName": "Hanbit Admin",
        "schoolName": "Hanbit High",
        "schoolType": "high",
        "contactName": "Kim",
        "contactPhone": "010-0000-0000",
        "gradeInfo": [
            {"grade": "1", "classCount": 8, "studentCount": 240},
            {"grade": "2", "classCount": 7, "studentCount": 210},
        ],
        "notes": "pilot school",
    }
    body.update(overrides)
    return body


def test_create_admin_creates_user_school_and_profile(client, db, superadmin, headers_for):
    response = client.post("/api/admin/create-admin", json=admin_body(), headers=headers_for(superadmin))

    assert response.status_code == 201
    data = response.json()["data"]
    user = db.query(UserModel).filter_by(id=data["userId"]).one()
    assert user.role == "admin"
    assert user.email_verified is not None

    school = db.query(SchoolModel).filter_by(id=data["schoolId"]).one()
    assert school.admin_user_id == user.id
    assert school.created_by == superadmin.id
    assert school.total_classes == 15
    assert school.total_students == 450
    assert school.status == "active"
    assert db.query(AdminProfileModel).filter_by(user_id=user.id, school_id=school.id).count() == 1


def test_create_admin_rejects_duplicates_without_partial_writes(client, db, superadmin, headers_for):
    headers = headers_for(superadmin)
    assert client.post("/api/admin/create-admin", json=admin_body(), headers=headers).status_code == 201

    same_school = client.post(
        "/api/admin/create-admin",
        json=admin_body(adminEmail="other@example.com", adminName="Other"),
        headers=headers,
    )
    same_email = client.post(
        "/api/admin/create-admin",
        json=admin_body(adminName="Other", schoolName="Other High"),
        headers=headers,
    )

    assert same_school.status_code == 400
    assert same_email.status_code == 400
    assert db.query(UserModel).filter_by(role="admin").count() == 1
    assert db.query(SchoolModel).count() == 1


def test_create_admin_requires_superadmin(client, admin, headers_for):
    assert client.post("/api/admin/create-admin", json=admin_body()).status_code == 401
    response = client.post("/api/admin/create-admin", json=admin_body(), headers=headers_for(admin))
    assert response.status_code == 403


def test_update_admin_keeps_password_when_blank(client, db, superadmin, headers_for):
    headers = headers_for(superadmin)
    created = client.post("/api/admin/create-admin", json=admin_body(), headers=headers).json()
    admin_id = created["data"]["userId"]
    old_hash = db.query(UserModel).filter_by(id=admin_id).one().password_hash

    response = client.put(
        "/api/admin/update-admin",
        json=admin_body(
            adminId=admin_id,
            adminPassword="",
            schoolName="Hanbit Girls High",
            gradeInfo=[{"grade": "1", "classCount": 2, "studentCount": 50}],
            status="inactive",
        ),
        headers=headers,
    )

    assert response.status_code == 200
    db.expire_all()
    user = db.query(UserModel).filter_by(id=admin_id).one()
    assert user.password_hash == old_hash
    assert user.school == "Hanbit Girls High"
    school = db.query(SchoolModel).filter_by(admin_user_id=admin_id).one()
    assert school.name == "Hanbit Girls High"
    assert school.total_students == 50
    assert school.status == "inactive"


def test_update_admin_unknown_id_is_404(client, superadmin, headers_for):
    response = client.put(
        "/api/admin/update-admin",
        json=admin_body(adminId="missing"),
        headers=headers_for(superadmin),
    )
    assert response.status_code == 404


def test_delete_admin_cascades(client, db, superadmin, headers_for):
    headers = headers_for(superadmin)
    admin_id = client.post("/api/admin/create-admin", json=admin_body(), headers=headers).json()["data"]["userId"]

    response = client.request("DELETE", "/api/admin/delete-admin", json={"adminId": admin_id}, headers=headers)

    assert response.status_code == 200
    assert db.query(UserModel).filter_by(id=admin_id).count() == 0
    assert db.query(SchoolModel).count() == 0
    assert db.query(AdminProfileModel).count() == 0


def test_delete_admin_refuses_non_admin(client, superadmin, teacher, headers_for):
    response = client.request(
        "DELETE",
        "/api/admin/delete-admin",
        json={"adminId": teacher.id},
        headers=headers_for(superadmin),
    )
    assert response.status_code == 404


def test_superadmin_overview(client, superadmin, make_user, headers_for):
    headers = headers_for(superadmin)
    client.post("/api/admin/create-admin", json=admin_body(), headers=headers)
    make_user(role="teacher")
    make_user(role="student")
    make_user(role="student")

    response = client.get("/api/admin/overview", headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["stats"] == {
        "totalAdmins": 1,
        "activeSchools": 1,
        "totalTeachers": 1,
        "totalStudents": 2,
    }
    assert data["admins"][0]["school"]["name"] == "Hanbit High"
    assert data["admins"][0]["profile"]["phoneNumber"] == "010-0000-0000"
