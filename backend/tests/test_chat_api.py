from finsarthi.models.user import UserRole
from finsarthi.services.polling import POLL_INTERVAL_SECONDS


def test_customer_and_coach_chat_end_to_end(client, customer, coach, auth_headers):
    customer_headers = auth_headers(customer)
    coach_headers = auth_headers(coach)

    created = client.post("/chat/requests", json={"coach_id": coach.id}, headers=customer_headers)
    assert created.status_code == 200
    request_id = created.json()["id"]
    assert created.json()["status"] == "pending"

    outgoing = client.get("/chat/requests/outgoing", headers=customer_headers).json()
    assert outgoing["poll_after_seconds"] == POLL_INTERVAL_SECONDS

    incoming = client.get("/chat/requests/incoming", headers=coach_headers).json()
    assert [row["request"]["id"] for row in incoming] == [request_id]
    assert incoming[0]["customer"]["full_name"] == "Amit Kumar"

    accepted = client.post(f"/chat/requests/{request_id}/accept", headers=coach_headers)
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "accepted"

    outgoing = client.get("/chat/requests/outgoing", headers=customer_headers).json()
    assert outgoing["poll_after_seconds"] is None

    active = client.get("/chat/active", headers=coach_headers).json()
    assert active["request"]["id"] == request_id
    assert active["partner"]["id"] == customer.id

    sent = client.post(
        f"/chat/requests/{request_id}/messages",
        json={"content": "hello"},
        headers=customer_headers,
    )
    assert sent.status_code == 201
    assert sent.json()["sender_id"] == customer.id

    assert client.get("/chat/unread-count", headers=coach_headers).json() == {"count": 1}

    marked = client.post(f"/chat/requests/{request_id}/read", headers=coach_headers)
    assert marked.json() == {"updated": 1}
    assert client.get("/chat/unread-count", headers=coach_headers).json() == {"count": 0}

    messages = client.get(f"/chat/requests/{request_id}/messages", headers=coach_headers).json()
    assert [message["content"] for message in messages] == ["hello"]
    assert messages[0]["is_read"] is True


def test_repeated_request_is_deduplicated(client, customer, coach, auth_headers):
    headers = auth_headers(customer)
    first = client.post("/chat/requests", json={"coach_id": coach.id}, headers=headers).json()
    second = client.post("/chat/requests", json={"coach_id": coach.id}, headers=headers).json()

    assert first["id"] == second["id"]


def test_customer_cannot_accept_own_request(client, customer, coach, auth_headers):
    headers = auth_headers(customer)
    request_id = client.post("/chat/requests", json={"coach_id": coach.id}, headers=headers).json()["id"]

    response = client.post(f"/chat/requests/{request_id}/accept", headers=headers)

    assert response.status_code == 403


def test_illegal_transition_returns_conflict(client, customer, coach, auth_headers):
    request_id = client.post(
        "/chat/requests", json={"coach_id": coach.id}, headers=auth_headers(customer)
    ).json()["id"]
    coach_headers = auth_headers(coach)
    client.post(f"/chat/requests/{request_id}/decline", headers=coach_headers)

    response = client.post(f"/chat/requests/{request_id}/accept", headers=coach_headers)

    assert response.status_code == 409


def test_messages_before_accept_conflict(client, customer, coach, auth_headers):
    headers = auth_headers(customer)
    request_id = client.post("/chat/requests", json={"coach_id": coach.id}, headers=headers).json()["id"]

    response = client.post(
        f"/chat/requests/{request_id}/messages", json={"content": "hi"}, headers=headers
    )

    assert response.status_code == 409


def test_outsiders_cannot_see_a_chat(client, make_user, customer, coach, auth_headers):
    stranger = make_user(full_name="Sunita Patil", email="sunita@example.com")
    request_id = client.post(
        "/chat/requests", json={"coach_id": coach.id}, headers=auth_headers(customer)
    ).json()["id"]

    response = client.get(f"/chat/requests/{request_id}/messages", headers=auth_headers(stranger))

    assert response.status_code == 404


def test_request_requires_customer_and_real_coach(client, make_user, customer, coach, auth_headers):
    other_customer = make_user(full_name="Sunita Patil", email="sunita@example.com")

    as_coach = client.post("/chat/requests", json={"coach_id": coach.id}, headers=auth_headers(coach))
    not_a_coach = client.post(
        "/chat/requests", json={"coach_id": other_customer.id}, headers=auth_headers(customer)
    )
    anonymous = client.post("/chat/requests", json={"coach_id": coach.id})

    assert as_coach.status_code == 403
    assert not_a_coach.status_code == 404
    assert anonymous.status_code == 401


def test_available_coaches_listing(client, make_user, coach, auth_headers):
    make_user(role=UserRole.COACH, full_name="anjali Mehta", email="anjali@example.com", is_available=True)
    make_user(role=UserRole.COACH, full_name="Rahul Verma", email="rahul@example.com", is_available=False)

    names = [item["full_name"] for item in client.get("/coaches/").json()]
    assert names == ["anjali Mehta", "Priya Sharma"]

    toggled = client.put(
        "/users/me/availability", json={"is_available": False}, headers=auth_headers(coach)
    )
    assert toggled.json()["is_available"] is False
    assert [item["full_name"] for item in client.get("/coaches/").json()] == ["anjali Mehta"]
