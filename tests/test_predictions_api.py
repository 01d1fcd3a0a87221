import uuid

BASE = "/api/v1/predictions"


async def test_health(client):
    response = await client.get("/health/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"

    response = await client.get("/health/db")
    assert response.json() == {"status": "healthy", "database": "sqlite"}


async def test_health_has_no_session_debug_route(client):
    response = await client.get("/health/db-session-test")

    assert response.status_code == 404


async def test_calculate_prediction(client, make_student):
    student = await make_student(grades=[3, 3], credits=[True, False])

    response = await client.post(f"{BASE}/calculate/{student.id}")

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "calculated"
    prediction = body["prediction"]
    assert prediction["student_id"] == str(student.id)
    assert prediction["predicted_exam_grade"] == "3.00"
    assert prediction["predicted_credit_pass_rate"] == "50.00"
    assert prediction["overall_performance_score"] == "38.33"


async def test_calculate_with_insufficient_data(client, make_student):
    student = await make_student()

    response = await client.post(f"{BASE}/calculate/{student.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "insufficient_data"
    assert body["prediction"] is None

    response = await client.get(f"{BASE}/student/{student.id}")
    assert response.status_code == 404


async def test_calculate_unknown_student(client):
    response = await client.post(f"{BASE}/calculate/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["type"] == "StudentNotFoundError"


async def test_calculate_rejects_bad_identifier(client):
    response = await client.post(f"{BASE}/calculate/not-a-uuid")

    assert response.status_code == 422


async def test_get_student_prediction(client, make_student):
    student = await make_student(grades=[5, 5, 4])

    response = await client.get(f"{BASE}/student/{student.id}")
    assert response.status_code == 404
    assert response.json()["type"] == "PredictionNotFoundError"

    await client.post(f"{BASE}/calculate/{student.id}")
    response = await client.get(f"{BASE}/student/{student.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["predicted_exam_grade"] == "4.67"
    assert body["predicted_credit_pass_rate"] is None
    assert body["overall_performance_score"] == "89.00"


async def test_recalculate_all_and_list(client, make_student):
    await make_student(grades=[5], group_name="IS-21", full_name="Petrova Anna")
    await make_student(credits=[True, True, False, True], group_name="PI-22")
    await make_student(group_name="PI-22")

    response = await client.post(f"{BASE}/recalculate")
    assert response.status_code == 200
    assert response.json() == {"processed": 3, "updated": 2, "cleared": 1}

    response = await client.get(f"{BASE}/")
    body = response.json()
    assert body["total"] == 2
    assert body["page"] == 1
    assert body["has_next"] is False

    response = await client.get(f"{BASE}/", params={"group": "IS-21"})
    items = response.json()["items"]
    assert len(items) == 1
    assert items[0]["full_name"] == "Petrova Anna"
    assert items[0]["overall_performance_score"] == "100.00"

    response = await client.get(f"{BASE}/", params={"max_score": 80})
    items = response.json()["items"]
    assert [item["group_name"] for item in items] == ["PI-22"]
    assert items[0]["overall_performance_score"] == "75.00"


async def test_list_rejects_out_of_range_score(client):
    response = await client.get(f"{BASE}/", params={"min_score": 150})

    assert response.status_code == 422


async def test_group_statistics(client, make_student):
    await make_student(grades=[4], group_name="IS-21")
    await make_student(group_name="KB-21")
    await client.post(f"{BASE}/recalculate")

    response = await client.get(f"{BASE}/statistics/groups")

    assert response.status_code == 200
    statistics = response.json()
    assert [row["group_name"] for row in statistics] == ["IS-21", "KB-21"]
    assert statistics[0]["students_with_predictions"] == 1
    assert statistics[0]["avg_exam_grade"] == "4.00"
    assert statistics[1]["total_students"] == 1
    assert statistics[1]["avg_performance_score"] is None


async def test_delete_prediction(client, make_student):
    student = await make_student(grades=[4])
    response = await client.post(f"{BASE}/calculate/{student.id}")
    prediction_id = response.json()["prediction"]["id"]

    response = await client.delete(f"{BASE}/{prediction_id}")
    assert response.status_code == 200

    response = await client.delete(f"{BASE}/{prediction_id}")
    assert response.status_code == 404

    response = await client.get(f"{BASE}/student/{student.id}")
    assert response.status_code == 404
