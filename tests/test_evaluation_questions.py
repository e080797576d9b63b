from models.evaluation_question import EvaluationQuestionModel

from test_courses import create_course

QUESTION_SET = {
    "unit": "Kinematics",
    "questionNumber": "Q1",
    "questions": [
        {
            "questionType": "객관식",
            "questionText": "Which quantity is a vector?",
            "points": 5,
            "options": [{"text": "Speed"}, {"text": "Velocity"}],
            "correctAnswer": 1,
        },
        {
            "questionType": "서술형",
            "questionText": "Explain free fall.",
            "points": 10,
            "modelAnswer": "Constant acceleration under gravity.",
        },
    ],
}


def url_for(course_id, question_id=None):
    url = f"/api/courses/{course_id}/evaluation-questions"
    return f"{url}/{question_id}" if question_id else url


def test_question_set_crud(client, teacher, headers_for):
    headers = headers_for(teacher)
    course = create_course(client, headers)

    created = client.post(url_for(course["id"]), json=QUESTION_SET, headers=headers)
    assert created.status_code == 201
    question = created.json()["evaluationQuestion"]
    assert question["questions"][0]["options"][1]["text"] == "Velocity"
    assert question["questions"][1]["modelAnswer"].startswith("Constant")

    fetched = client.get(url_for(course["id"], question["id"]), headers=headers)
    assert fetched.json()["evaluationQuestion"]["unit"] == "Kinematics"

    changed = dict(QUESTION_SET, unit="Dynamics", questions=QUESTION_SET["questions"][:1])
    updated = client.put(url_for(course["id"], question["id"]), json=changed, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["evaluationQuestion"]["unit"] == "Dynamics"
    assert len(updated.json()["evaluationQuestion"]["questions"]) == 1

    listed = client.get(url_for(course["id"]), headers=headers)
    assert len(listed.json()["evaluationQuestions"]) == 1

    assert client.delete(url_for(course["id"], question["id"]), headers=headers).status_code == 200
    assert client.get(url_for(course["id"], question["id"]), headers=headers).status_code == 404


def test_question_set_validation(client, teacher, headers_for):
    headers = headers_for(teacher)
    course = create_course(client, headers)
    item = QUESTION_SET["questions"][0]

    no_questions = dict(QUESTION_SET, questions=[])
    too_many_points = dict(QUESTION_SET, questions=[dict(item, points=101)])
    unknown_type = dict(QUESTION_SET, questions=[dict(item, questionType="essay")])

    for body in (no_questions, too_many_points, unknown_type):
        assert client.post(url_for(course["id"]), json=body, headers=headers).status_code == 400


def test_question_sets_need_owned_course(client, make_user, headers_for):
    owner = make_user(role="teacher")
    other = make_user(role="teacher")
    course = create_course(client, headers_for(owner))

    assert client.post(url_for(course["id"]), json=QUESTION_SET, headers=headers_for(other)).status_code == 404
    assert client.get(url_for(course["id"]), headers=headers_for(other)).status_code == 404
    assert client.get(url_for("missing"), headers=headers_for(owner)).status_code == 404


def test_corrupt_stored_questions_read_as_empty(client, db, teacher, headers_for):
    headers = headers_for(teacher)
    course = create_course(client, headers)
    question = client.post(url_for(course["id"]), json=QUESTION_SET, headers=headers).json()["evaluationQuestion"]
    db.query(EvaluationQuestionModel).filter_by(id=question["id"]).update({"questions": "{not json"})
    db.commit()

    response = client.get(url_for(course["id"], question["id"]), headers=headers)

    assert response.status_code == 200
    assert response.json()["evaluationQuestion"]["questions"] == []
