from mathprep.core.exceptions import GeneratorError
from mathprep.db.models import Question

from conftest import fenced, mcq


def algebra(n, difficulty="medium"):
    return {
        "topic": "Algebra",
        "question": f"Solve x + {n} = {n * 2}",
        "correct_answer": str(n),
        "wrong_options": [str(n + 1), str(n + 2), str(n + 3)],
        "difficulty": difficulty,
        "pattern": "x + a = b",
    }


def assert_options_match(q):
    assert sorted(q["options"]) == sorted(q["wrong_options"] + [q["correct_answer"]])


def test_database_mode_never_calls_generator(client, gemini, seed):
    seed(*(algebra(n) for n in range(1, 5)))

    resp = client.post("/generate-quiz", json={"topic": "Algebra", "numQuestions": 3, "mode": "database"})

    assert resp.status_code == 200
    questions = resp.json()
    assert len(questions) == 3
    assert gemini.prompts == []
    for q in questions:
        assert q["topic"] == "Algebra"
        assert_options_match(q)


def test_database_mode_shortfall_is_not_filled(client, gemini, seed):
    seed(algebra(1))

    resp = client.post("/generate-quiz", json={"topic": "Algebra", "numQuestions": 5, "source": "db"})

    assert resp.status_code == 200
    assert len(resp.json()) == 1
    assert gemini.prompts == []


def test_auto_mode_generates_exactly_the_remainder(client, gemini, seed, db):
    seed(algebra(1), algebra(2))
    # the model over-delivers; only the remainder is kept
    gemini.queue(fenced([mcq(f"Solve 2x = {2 * n}", str(n)) for n in range(10, 14)]))

    resp = client.post("/generate-quiz", json={"topic": "Algebra", "numQuestions": 5, "mode": "auto"})

    assert resp.status_code == 200
    questions = resp.json()
    assert len(questions) == 5
    assert len(gemini.prompts) == 1
    assert "Generate 3 math" in gemini.prompts[0]

    generated = [q for q in questions if q["question"].startswith("Solve 2x")]
    assert len(generated) == 3
    assert all(q["id"] for q in generated)
    assert db.query(Question).count() == 5
    for q in questions:
        assert_options_match(q)


def test_auto_mode_with_enough_stored_questions_skips_generator(client, gemini, seed):
    seed(*(algebra(n) for n in range(1, 4)))

    resp = client.post("/generate-quiz", json={"topic": "Algebra", "numQuestions": 3})

    assert resp.status_code == 200
    assert len(resp.json()) == 3
    assert gemini.prompts == []


def test_generator_mode_persists_full_request(client, gemini, seed, db):
    seed(algebra(1))
    gemini.queue(fenced([mcq("Area of a 2 by 3 rectangle?", "6"), mcq("Area of a 4 by 5 rectangle?", "20")]))

    resp = client.post(
        "/generate-quiz",
        json={"topic": "Geometry", "numQuestions": 2, "difficulty": "easy", "mode": "gemini"},
    )

    assert resp.status_code == 200
    assert [q["question"] for q in resp.json()] == ["Area of a 2 by 3 rectangle?", "Area of a 4 by 5 rectangle?"]
    stored = db.query(Question).filter(Question.topic == "Geometry").all()
    assert len(stored) == 2
    assert {q.difficulty for q in stored} == {"easy"}


def test_integer_difficulty_filters_stored_questions(client, seed):
    seed(algebra(1, "easy"), algebra(2, "hard"), algebra(3, "hard"))

    resp = client.post(
        "/generate-quiz", json={"topic": "Algebra", "numQuestions": 5, "difficulty": 3, "mode": "database"}
    )

    assert resp.status_code == 200
    assert {q["difficulty"] for q in resp.json()} == {"hard"}
    assert len(resp.json()) == 2


def test_missing_topic_is_rejected_before_generation(client, gemini):
    resp = client.post("/generate-quiz", json={"numQuestions": 3, "mode": "generator"})
    blank = client.post("/generate-quiz", json={"topic": "  ", "mode": "generator"})

    assert resp.status_code == 400
    assert blank.status_code == 400
    assert gemini.prompts == []


def test_bad_mode_and_count_are_client_errors(client, gemini):
    assert client.post("/generate-quiz", json={"topic": "Algebra", "mode": "magic"}).status_code == 400
    assert client.post("/generate-quiz", json={"topic": "Algebra", "numQuestions": 0}).status_code == 400
    assert client.post("/generate-quiz", json={"topic": "Algebra", "difficulty": "brutal"}).status_code == 400
    assert gemini.prompts == []


def test_malformed_generator_reply_is_500_and_stores_nothing(client, gemini, db):
    gemini.queue("```json\n[{\"question\": \"Solve x\", \"correct_answer\": \"1\"},\n```")

    resp = client.post("/generate-quiz", json={"topic": "Algebra", "numQuestions": 2, "mode": "generator"})

    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "Failed to parse generated questions"
    assert "rawText" in body["details"]
    assert db.query(Question).count() == 0


def test_generator_outage_is_500(client, gemini, db):
    gemini.queue(GeneratorError("Gemini API call failed", details="503 Service Unavailable"))

    resp = client.post("/generate-quiz", json={"topic": "Algebra", "numQuestions": 2, "mode": "generator"})

    assert resp.status_code == 500
    assert resp.json()["error"] == "Gemini API call failed"
    assert db.query(Question).count() == 0


def test_details_hidden_in_production(settings, gemini):
    from fastapi.testclient import TestClient

    from mathprep.main import create_app
    from mathprep.services.quiz_generator import QuestionGenerator

    prod = settings.model_copy(update={"ENVIRONMENT": "production"})
    gemini.queue("nope")
    with TestClient(create_app(prod, generator=QuestionGenerator(gemini))) as c:
        resp = c.post("/generate-quiz", json={"topic": "Algebra", "mode": "generator"})

    assert resp.status_code == 500
    assert "details" not in resp.json()


def test_generator_shortfall_returns_what_it_got(client, gemini, db, caplog):
    gemini.queue(fenced([mcq("Solve 2x = 8", "4")]))

    with caplog.at_level("WARNING", logger="mathprep.services.question_source"):
        resp = client.post("/generate-quiz", json={"topic": "Algebra", "numQuestions": 3, "mode": "generator"})

    assert resp.status_code == 200
    assert len(resp.json()) == 1
    assert db.query(Question).count() == 1
    assert "returned 1 of 3" in caplog.text


def test_mistyped_body_fields_are_400(client, gemini):
    resp = client.post("/generate-quiz", json={"topic": "Algebra", "numQuestions": "lots"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request"
    assert resp.json()["details"][0]["loc"][-1] == "numQuestions"

    resp = client.post("/submit-answer", json={"questionId": "first", "isCorrect": True})
    assert resp.status_code == 400
    assert gemini.prompts == []
