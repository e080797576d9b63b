from datetime import datetime, timedelta, timezone

from models.announcement import AnnouncementModel


def future(days=3):
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def announce(client, headers, **overrides):
    body = {"title": "Field trip", "content": "Bring lunch.", "audience": "all"}
    body.update(overrides)
    return client.post("/api/announcements", json=body, headers=headers)


def titles(client, headers, **params):
    response = client.get("/api/announcements", params=params, headers=headers)
    assert response.status_code == 200
    return sorted(a["title"] for a in response.json()["announcements"])


def test_create_published_now(client, teacher, headers_for):
    response = announce(client, headers_for(teacher))

    assert response.status_code == 201
    announcement = response.json()["announcement"]
    assert announcement["publishedAt"] is not None
    assert announcement["author"] == teacher.name
    assert announcement["authorId"] == teacher.id
    assert announcement["school"] == teacher.school


def test_create_scheduled(client, teacher, headers_for):
    response = announce(client, headers_for(teacher), isScheduled=True, publishAt=future(), author="Office")

    assert response.status_code == 201
    announcement = response.json()["announcement"]
    assert announcement["isScheduled"] is True
    assert announcement["publishedAt"] is None
    assert announcement["author"] == "Office"


def test_schedule_validation(client, db, teacher, headers_for):
    headers = headers_for(teacher)
    past = (datetime.now(timezone.utc) - timedelta(hours=1)).isoformat()

    assert announce(client, headers, isScheduled=True).status_code == 400
    assert announce(client, headers, isScheduled=True, publishAt=past).status_code == 400
    assert announce(client, headers, audience="aliens").status_code == 400
    assert announce(client, headers, title="").status_code == 400
    assert db.query(AnnouncementModel).count() == 0


def test_only_teachers_announce(client, student, headers_for):
    assert announce(client, headers_for(student)).status_code == 403


def test_list_hides_scheduled_unless_requested(client, teacher, headers_for):
    headers = headers_for(teacher)
    announce(client, headers, title="Now")
    announce(client, headers, title="Later", isScheduled=True, publishAt=future())

    assert titles(client, headers) == ["Now"]
    assert titles(client, headers, includeScheduled="true") == ["Later", "Now"]


def test_audience_filtering(client, teacher, student, headers_for):
    headers = headers_for(teacher)
    announce(client, headers, title="Everyone")
    announce(client, headers, title="Seniors", audience="grade-3")
    announce(client, headers, title="Staff", audience="teachers")

    assert titles(client, headers) == ["Everyone", "Seniors", "Staff"]
    assert titles(client, headers, audience="grade-3") == ["Everyone", "Seniors"]
    assert titles(client, headers_for(student)) == ["Everyone"]
    assert titles(client, headers_for(student), audience="teachers") == ["Everyone"]


def test_announcements_stay_within_school(client, make_user, headers_for):
    author = make_user(role="teacher")
    outsider = make_user(role="teacher", school="Other High")
    created = announce(client, headers_for(author)).json()["announcement"]

    assert titles(client, headers_for(outsider)) == []
    response = client.get(f"/api/announcements/{created['id']}", headers=headers_for(outsider))
    assert response.status_code == 403
    assert client.get("/api/announcements/missing", headers=headers_for(author)).status_code == 404


def test_only_author_can_modify(client, make_user, headers_for):
    author = make_user(role="teacher")
    colleague = make_user(role="teacher")
    created = announce(client, headers_for(author)).json()["announcement"]
    url = f"/api/announcements/{created['id']}"
    body = {"title": "Field trip moved", "content": "Now on Friday.", "audience": "all"}

    assert client.put(url, json=body, headers=headers_for(colleague)).status_code == 403
    assert client.delete(url, headers=headers_for(colleague)).status_code == 403

    updated = client.put(url, json=body, headers=headers_for(author))
    assert updated.status_code == 200
    assert updated.json()["announcement"]["title"] == "Field trip moved"
    assert updated.json()["announcement"]["publishedAt"] == created["publishedAt"]

    assert client.delete(url, headers=headers_for(author)).status_code == 200
    assert client.get(url, headers=headers_for(author)).status_code == 404
