"""Participant Routes — registration, sessions, withdrawal."""

FINAL = "Predict 30-day readmission with AUC above 0.75"
REASONING = "AUC is interpretable for clinical triage staff"


def _registration(email="ada@example.com", study_group="challenger-first"):
    return {
        "username": "ada",
        "email": email,
        "studyGroup": study_group,
        "demographicData": {
            "academicLevel": "graduate", "dataScienceExperience": "intermediate",
        },
    }


async def _register(client, **kwargs):
    res = await client.post("/api/v1/participants/register", json=_registration(**kwargs))
    assert res.status_code == 201
    return res.json()


async def test_register_returns_token(client):
    body = await _register(client)
    assert body["participantId"].startswith("P")
    assert body["token"] == body["participantId"]
    assert body["studyGroup"] == "challenger-first"


async def test_registered_token_authenticates(client):
    body = await _register(client)
    headers = {"Authorization": f"Bearer {body['token']}"}
    res = await client.get("/api/v1/participants/me", headers=headers)
    assert res.status_code == 200
    me = res.json()
    assert me["consentGiven"] is True
    assert me["isActive"] is True
    assert me["sessions"] == []

    res = await client.get("/api/v1/ai/next-mode", headers=headers)
    assert res.json()["suggestedMode"] == "challenger"


async def test_duplicate_email_is_409(client):
    await _register(client)
    res = await client.post(
        "/api/v1/participants/register",
        json=_registration(email="ADA@example.com"),
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DUPLICATE_RESOURCE"


async def test_register_rejects_bad_study_group(client):
    res = await client.post(
        "/api/v1/participants/register",
        json=_registration(study_group="both"),
    )
    assert res.status_code == 400


async def test_session_counts_completed_tasks(client, auth, problem):
    res = await client.post("/api/v1/participants/me/sessions/start", headers=auth)
    assert res.status_code == 200
    session_id = res.json()["sessionId"]

    await client.post(
        f"/api/v1/problems/{problem['problemId']}/complete",
        json={"finalProblem": FINAL, "reasoning": REASONING},
        headers=auth,
    )
    await client.post("/api/v1/participants/me/sessions/end", headers=auth)

    me = (await client.get("/api/v1/participants/me", headers=auth)).json()
    assert len(me["sessions"]) == 1
    session = me["sessions"][0]
    assert session["sessionId"] == session_id
    assert session["tasksCompletedCount"] == 1
    assert session["endedAt"] is not None
    assert session["durationMinutes"] == 0


async def test_end_without_open_session_is_ok(client, auth):
    res = await client.post("/api/v1/participants/me/sessions/end", headers=auth)
    assert res.status_code == 200


async def test_withdraw_deactivates(client, auth):
    res = await client.post(
        "/api/v1/participants/me/withdraw", json={"reason": "No time"}, headers=auth,
    )
    assert res.status_code == 200
    res = await client.get("/api/v1/participants/me", headers=auth)
    assert res.status_code == 401
    assert res.json()["error"]["message"] == "Account is inactive."
