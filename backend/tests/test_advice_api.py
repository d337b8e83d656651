ONBOARDING = {
    "income": 5000,
    "expenses": 3000,
    "goals": "retirement",
    "literacy": "beginner",
    "language": "en",
}


def test_anonymous_onboarding_creates_session(client, fake_adapter):
    response = client.post("/advice/onboarding", json=ONBOARDING)

    assert response.status_code == 201
    body = response.json()
    assert body["user_id"] is None
    assert body["prompt_key"] == "onboarding"
    assert body["language"] == "en"
    assert body["form_data"] == {
        "income": 5000,
        "expenses": 3000,
        "goals": "retirement",
        "literacy": "beginner",
    }
    assert body["income"] == 5000
    assert body["expenses"] == 3000
    assert body["generated_advice"]
    assert fake_adapter.calls[0][0] == "generate_advice"


def test_onboarding_validation_errors_skip_the_model(client, fake_adapter):
    response = client.post(
        "/advice/onboarding", json={**ONBOARDING, "income": -1, "literacy": "guru"}
    )

    assert response.status_code == 422
    assert set(response.json()["detail"]["errors"]) == {"income", "literacy"}
    assert fake_adapter.calls == []


def test_onboarding_requires_supported_language(client):
    response = client.post("/advice/onboarding", json={**ONBOARDING, "language": "fr"})

    assert response.status_code == 422
    assert "language" in response.json()["detail"]["errors"]


def test_register_claims_onboarding_session(client):
    session = client.post("/advice/onboarding", json=ONBOARDING).json()
    session_id = session["id"]

    tokens = client.post(
        "/auth/register",
        json={
            "full_name": "Amit Kumar",
            "phone": "8765432109",
            "age": 28,
            "city": "Pune",
            "country": "India",
            "gender": "male",
            "advice_session_id": session_id,
            "advice_session_token": session["claim_token"],
        },
    ).json()
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    latest = client.get("/advice/sessions/latest", headers=headers).json()
    assert latest["id"] == session_id
    assert latest["user_id"] is not None
    assert [item["id"] for item in client.get("/advice/sessions", headers=headers).json()] == [session_id]


def test_claiming_someone_elses_session_conflicts(client, make_user, customer, auth_headers):
    other = make_user(full_name="Sunita Patil", email="sunita@example.com")
    session_id = client.post(
        "/advice/onboarding", json=ONBOARDING, headers=auth_headers(customer)
    ).json()["id"]

    conflict = client.post(f"/advice/sessions/{session_id}/claim", headers=auth_headers(other))
    missing = client.post("/advice/sessions/999/claim", headers=auth_headers(other))
    own = client.post(f"/advice/sessions/{session_id}/claim", headers=auth_headers(customer))

    assert conflict.status_code == 409
    assert missing.status_code == 404
    assert own.status_code == 200


def test_anonymous_session_needs_its_claim_token(client, customer, auth_headers):
    session = client.post("/advice/onboarding", json=ONBOARDING).json()
    assert session["claim_token"]
    url = f"/advice/sessions/{session['id']}/claim"
    headers = auth_headers(customer)

    assert client.post(url, headers=headers).status_code == 403
    assert client.post(url, json={"claim_token": "guessed"}, headers=headers).status_code == 403

    claimed = client.post(url, json={"claim_token": session["claim_token"]}, headers=headers)
    assert claimed.status_code == 200
    assert claimed.json()["user_id"] == customer.id
    assert claimed.json()["claim_token"] is None


def test_owned_sessions_have_no_claim_token(client, customer, auth_headers):
    session = client.post("/advice/onboarding", json=ONBOARDING, headers=auth_headers(customer)).json()

    assert session["user_id"] == customer.id
    assert session["claim_token"] is None


def test_latest_session_is_null_without_history(client, customer, auth_headers):
    response = client.get("/advice/sessions/latest", headers=auth_headers(customer))

    assert response.status_code == 200
    assert response.json() is None


def test_topic_navigation_and_prompt_detail(client):
    top = client.get("/advice/prompts", params={"language": "hi"}).json()
    assert top[1] == {"key": "saving", "title": "बचत", "is_prompt": False}

    children = client.get("/advice/prompts", params={"path": ["investing"]}).json()
    assert [item["key"] for item in children] == ["start_investing", "retirement_planning"]
    assert all(item["is_prompt"] for item in children)

    assert client.get("/advice/prompts", params={"path": ["nowhere"]}).status_code == 422

    detail = client.get("/advice/prompts/onboarding").json()
    assert detail["total_steps"] == 5
    assert detail["questions"][3]["options"] == ["beginner", "intermediate", "advanced"]
    assert client.get("/advice/prompts/lottery").status_code == 404


def test_wizard_step_validation(client):
    ok = client.post(
        "/advice/wizard/validate",
        json={"prompt_key": "onboarding", "step": 1, "value": "5,000"},
    )
    assert ok.json() == {"key": "income", "value": 5000, "next_step": 2, "total_steps": 5}

    bad = client.post(
        "/advice/wizard/validate",
        json={"prompt_key": "onboarding", "step": 3, "value": "car"},
    )
    assert bad.status_code == 422
    assert "goals" in bad.json()["detail"]["errors"]


def test_generate_topic_advice(client, fake_adapter):
    response = client.post(
        "/advice/generate",
        json={
            "prompt_key": "emergency_fund",
            "form_data": {"income": 40000, "expenses": 25000, "current_savings": 10000},
            "language": "hi",
        },
    )

    assert response.status_code == 201
    assert response.json()["generated_advice"] == "Advice for emergency_fund in hi"
    assert fake_adapter.calls[0][1][1]["current_savings"] == 10000


def test_ai_routes_use_gateway(client, fake_adapter):
    coach = client.post(
        "/ai/coach",
        json={"query": "How much should I save?", "language": "Hindi", "history": [{"role": "model", "content": "Hi"}]},
    )
    assert coach.json() == {"response": "coach says: How much should I save?"}
    assert fake_adapter.calls[0][1][2] == [{"role": "model", "content": "Hi"}]

    summary = client.post("/ai/summarize", json={"article_content": "Sensex up.", "language": "German"})
    assert summary.json() == {"summary": "short summary"}

    term = client.post("/ai/translate", json={"term": "EMI", "language": "Marathi"})
    assert term.json() == {"simplified_explanation": "EMI explained"}
    assert fake_adapter.calls[-1] == ("explain_term", ("EMI", "Marathi", "beginner"))

    assert client.post("/ai/speech", json={"text": "hello"}).json()["audio"].startswith("data:audio/wav")
    fake_adapter.speech_available = False
    assert client.post("/ai/speech", json={"text": "hello"}).status_code == 503


def test_products_by_category(client):
    loans = client.get("/ai/products/loan").json()

    assert [item["name"] for item in loans] == [
        "SwiftCash Personal Loan",
        "HomeFirst Mortgage Plan",
        "AutoDrive Car Loan",
    ]
    assert client.get("/ai/products/crypto").status_code == 422
