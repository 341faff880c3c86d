"""AI Routes — generate, rate, next-mode, stats over HTTP.

Invariants:
    - Generated responses are logged on the problem only when problemId is given
    - Invalid promptType → 400 and the generator is never called
    - Generation failure → 503 AI_SERVICE_ERROR and nothing is appended
    - Another participant's problem, or an abandoned one → 404 before generation
"""

from app.core.errors import GenerationServiceError

STATEMENT = "Predict hospital readmission risk from EHR data"
RATING = {"usefulness": 4, "cognitiveLoad": 2, "satisfaction": 5}


async def _generate(client, auth, problem_id=None, prompt_type="editor", **extra):
    body = {"problemStatement": STATEMENT, "promptType": prompt_type, **extra}
    if problem_id:
        body["problemId"] = problem_id
    return await client.post("/api/v1/ai/generate", json=body, headers=auth)


async def _detail(client, auth, problem_id):
    res = await client.get(f"/api/v1/problems/{problem_id}", headers=auth)
    assert res.status_code == 200
    return res.json()


async def test_generate_without_problem_logs_nothing(client, auth, stub_generator):
    res = await _generate(client, auth)
    assert res.status_code == 200
    body = res.json()
    assert body["response"] == "Refined statement."
    assert body["promptType"] == "editor"
    assert body["model"] == "stub-model"
    assert body["interactionId"] is None
    assert len(stub_generator.calls) == 1


async def test_generate_appends_then_rate(client, auth, problem):
    pid = problem["problemId"]
    assert problem["status"] == "in-progress"
    assert problem["interactionCount"] == 0

    res = await _generate(client, auth, pid)
    assert res.status_code == 200
    iid = res.json()["interactionId"]

    detail = await _detail(client, auth, pid)
    assert len(detail["interactions"]) == 1
    record = detail["interactions"][0]
    assert record["interactionId"] == iid
    assert record["promptType"] == "editor"
    assert record["userInput"] is None
    assert record["rating"] is None

    res = await client.post(
        "/api/v1/ai/rate",
        json={"interactionId": iid, "ratings": RATING},
        headers=auth,
    )
    assert res.status_code == 200
    assert res.json()["message"] == "Rating saved successfully"

    record = (await _detail(client, auth, pid))["interactions"][0]
    assert record["rating"] == RATING
    assert record["feedbackText"] == ""


async def test_rating_overwrites_previous(client, auth, problem):
    pid = problem["problemId"]
    iid = (await _generate(client, auth, pid)).json()["interactionId"]
    await client.post(
        "/api/v1/ai/rate",
        json={"interactionId": iid, "ratings": RATING, "feedback": "nice", "wasAccepted": True},
        headers=auth,
    )
    second = {"usefulness": 1, "cognitiveLoad": 5, "satisfaction": 2}
    await client.post(
        "/api/v1/ai/rate",
        json={"interactionId": iid, "ratings": second},
        headers=auth,
    )
    record = (await _detail(client, auth, pid))["interactions"][0]
    assert record["rating"] == second
    assert record["wasAccepted"] is False


async def test_invalid_prompt_type_rejected_without_call(client, auth, problem, stub_generator):
    res = await _generate(client, auth, problem["problemId"], prompt_type="invalid")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    assert stub_generator.calls == []
    detail = await _detail(client, auth, problem["problemId"])
    assert detail["interactions"] == []


async def test_generation_failure_returns_503_and_appends_nothing(
    client, auth, problem, stub_generator,
):
    stub_generator.queue(GenerationServiceError("overloaded", "http_529"))
    res = await _generate(client, auth, problem["problemId"])
    assert res.status_code == 503
    error = res.json()["error"]
    assert error["code"] == "AI_SERVICE_ERROR"
    assert error["message"] == "AI service error, please try again"
    detail = await _detail(client, auth, problem["problemId"])
    assert detail["interactions"] == []


async def test_generate_for_foreign_problem_is_404(
    client, other_auth, problem, stub_generator,
):
    res = await _generate(client, other_auth, problem["problemId"])
    assert res.status_code == 404
    assert stub_generator.calls == []


async def test_generate_for_abandoned_problem_is_404(client, auth, problem, stub_generator):
    pid = problem["problemId"]
    await client.post(f"/api/v1/problems/{pid}/abandon", json={}, headers=auth)
    res = await _generate(client, auth, pid)
    assert res.status_code == 404
    assert stub_generator.calls == []


async def test_generate_after_completion_is_logged(client, auth, problem):
    pid = problem["problemId"]
    res = await client.post(
        f"/api/v1/problems/{pid}/complete",
        json={
            "finalProblem": "Predict 30-day readmission with AUC above 0.75",
            "reasoning": "AUC is interpretable for clinical triage staff",
        },
        headers=auth,
    )
    assert res.status_code == 200
    res = await _generate(client, auth, pid, prompt_type="challenger")
    assert res.status_code == 200
    assert len((await _detail(client, auth, pid))["interactions"]) == 1


async def test_rate_unknown_interaction_is_404(client, auth, problem):
    res = await client.post(
        "/api/v1/ai/rate",
        json={"interactionId": "missing", "ratings": RATING},
        headers=auth,
    )
    assert res.status_code == 404


async def test_rate_out_of_range_is_400(client, auth, problem):
    res = await client.post(
        "/api/v1/ai/rate",
        json={"interactionId": "x", "ratings": {**RATING, "usefulness": 7}},
        headers=auth,
    )
    assert res.status_code == 400


async def test_next_mode_alternates(client, auth, problem):
    pid = problem["problemId"]
    res = await client.get(f"/api/v1/ai/next-mode?problemId={pid}", headers=auth)
    assert res.json()["suggestedMode"] == "editor"

    await _generate(client, auth, pid, prompt_type="editor")
    res = await client.get(f"/api/v1/ai/next-mode?problemId={pid}", headers=auth)
    body = res.json()
    assert body["suggestedMode"] == "challenger"
    assert body["studyGroup"] == "editor-first"
    assert body["editorCount"] == 1
    assert body["challengerCount"] == 0


async def test_stats_counts_callers_usage(client, auth, problem):
    pid = problem["problemId"]
    await _generate(client, auth, pid, prompt_type="editor")
    await _generate(client, auth, pid, prompt_type="challenger")
    await _generate(client, auth, pid, prompt_type="challenger")
    res = await client.get("/api/v1/ai/stats", headers=auth)
    body = res.json()
    assert body["availableTypes"] == ["editor", "challenger"]
    assert body["usageStats"] == {"editor": 1, "challenger": 2}


async def test_generate_requires_token(client):
    res = await client.post(
        "/api/v1/ai/generate",
        json={"problemStatement": STATEMENT, "promptType": "editor"},
    )
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "AUTHENTICATION_FAILED"


async def test_unknown_token_rejected(client):
    res = await client.get(
        "/api/v1/ai/stats", headers={"Authorization": "Bearer P0000nobody"},
    )
    assert res.status_code == 401
