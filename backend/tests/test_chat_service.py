import pytest
from sqlalchemy.orm import Session

from finsarthi.models.chat import ChatRequest, ChatStatus
from finsarthi.models.user import UserRole
from finsarthi.services import chat as chat_service


def _pending_for_coach(db: Session, coach_id: int) -> list[ChatRequest]:
    return [
        row["request"]
        for row in chat_service.get_chat_requests_for_coach(db, coach_id)
        if row["request"].status == ChatStatus.PENDING
    ]


def test_create_request_twice_returns_same_pending_request(db_session, customer, coach):
    first = chat_service.create_chat_request(db_session, customer.id, coach.id)
    second = chat_service.create_chat_request(db_session, customer.id, coach.id)

    assert first.id == second.id
    assert second.status == ChatStatus.PENDING
    assert db_session.query(ChatRequest).count() == 1


def test_create_request_recovers_from_concurrent_insert(
    monkeypatch: pytest.MonkeyPatch, db_session, customer, coach
):
    winner = ChatRequest(customer_id=customer.id, coach_id=coach.id, status=ChatStatus.PENDING)
    db_session.add(winner)
    db_session.commit()

    real_lookup = chat_service._active_request_for_pair
    lookups = []

    def stale_then_real(db, customer_id, coach_id):
        lookups.append((customer_id, coach_id))
        if len(lookups) == 1:
            return None
        return real_lookup(db, customer_id, coach_id)

    monkeypatch.setattr(chat_service, "_active_request_for_pair", stale_then_real)

    request = chat_service.create_chat_request(db_session, customer.id, coach.id)

    assert request.id == winner.id
    assert len(lookups) == 2
    assert db_session.query(ChatRequest).count() == 1


def test_accept_makes_session_active_for_both_parties(db_session, customer, coach):
    request = chat_service.create_chat_request(db_session, customer.id, coach.id)

    accepted = chat_service.update_chat_request_status(
        db_session, request.id, ChatStatus.ACCEPTED, actor_id=coach.id
    )

    assert accepted.status == ChatStatus.ACCEPTED
    assert _pending_for_coach(db_session, coach.id) == []

    customer_view = chat_service.get_active_chat_session(db_session, customer.id)
    coach_view = chat_service.get_active_chat_session(db_session, coach.id)
    assert customer_view["request"].id == request.id
    assert customer_view["partner"].id == coach.id
    assert coach_view["request"].id == request.id
    assert coach_view["partner"].id == customer.id


def test_decline_clears_pending_and_allows_new_request(db_session, customer, coach):
    request = chat_service.create_chat_request(db_session, customer.id, coach.id)
    chat_service.update_chat_request_status(
        db_session, request.id, ChatStatus.DECLINED, actor_id=coach.id
    )

    assert _pending_for_coach(db_session, coach.id) == []
    assert chat_service.get_active_chat_session(db_session, customer.id) is None

    again = chat_service.create_chat_request(db_session, customer.id, coach.id)
    assert again.id != request.id
    assert again.status == ChatStatus.PENDING


def test_closed_chat_allows_new_request(db_session, customer, coach):
    request = chat_service.create_chat_request(db_session, customer.id, coach.id)
    chat_service.update_chat_request_status(db_session, request.id, ChatStatus.ACCEPTED, actor_id=coach.id)
    chat_service.update_chat_request_status(db_session, request.id, ChatStatus.CLOSED, actor_id=customer.id)

    again = chat_service.create_chat_request(db_session, customer.id, coach.id)

    assert again.id != request.id
    assert chat_service.get_active_chat_session(db_session, coach.id) is None


@pytest.mark.parametrize(
    ("path", "target"),
    [
        ([], ChatStatus.CLOSED),
        ([], ChatStatus.PENDING),
        ([ChatStatus.ACCEPTED], ChatStatus.DECLINED),
        ([ChatStatus.ACCEPTED], ChatStatus.ACCEPTED),
        ([ChatStatus.DECLINED], ChatStatus.ACCEPTED),
        ([ChatStatus.ACCEPTED, ChatStatus.CLOSED], ChatStatus.ACCEPTED),
    ],
)
def test_illegal_transitions_are_rejected(db_session, customer, coach, path, target):
    request = chat_service.create_chat_request(db_session, customer.id, coach.id)
    for step in path:
        chat_service.update_chat_request_status(db_session, request.id, step)

    with pytest.raises(chat_service.InvalidTransitionError):
        chat_service.update_chat_request_status(db_session, request.id, target)

    db_session.refresh(request)
    assert request.status == (path[-1] if path else ChatStatus.PENDING)


def test_only_requested_coach_can_respond(db_session, make_user, customer, coach):
    other_coach = make_user(role=UserRole.COACH, full_name="Rahul Verma", email="rahul@example.com")
    request = chat_service.create_chat_request(db_session, customer.id, coach.id)

    with pytest.raises(chat_service.ChatPermissionError):
        chat_service.update_chat_request_status(
            db_session, request.id, ChatStatus.ACCEPTED, actor_id=customer.id
        )
    with pytest.raises(chat_service.ChatPermissionError):
        chat_service.update_chat_request_status(
            db_session, request.id, ChatStatus.DECLINED, actor_id=other_coach.id
        )


def test_update_missing_request_returns_none(db_session):
    assert chat_service.update_chat_request_status(db_session, 404, ChatStatus.ACCEPTED) is None


def test_coach_view_drops_requests_whose_customer_is_gone(db_session, customer, coach):
    chat_service.create_chat_request(db_session, customer.id, coach.id)
    db_session.add(ChatRequest(customer_id=9999, coach_id=coach.id, status=ChatStatus.PENDING))
    db_session.commit()

    rows = chat_service.get_chat_requests_for_coach(db_session, coach.id)

    assert len(rows) == 1
    assert rows[0]["customer"] == {
        "id": customer.id,
        "full_name": "Amit Kumar",
        "email": "amit@example.com",
    }


def test_unread_count_only_counts_accepted_chats_from_partner(db_session, make_user, customer, coach):
    request = chat_service.create_chat_request(db_session, customer.id, coach.id)
    chat_service.update_chat_request_status(db_session, request.id, ChatStatus.ACCEPTED, actor_id=coach.id)

    chat_service.send_message(db_session, request.id, customer.id, "hello")
    chat_service.send_message(db_session, request.id, customer.id, "are you there?")
    chat_service.send_message(db_session, request.id, coach.id, "yes")

    assert chat_service.get_unread_message_count_for_user(db_session, coach.id) == 2
    assert chat_service.get_unread_message_count_for_user(db_session, customer.id) == 1

    chat_service.update_chat_request_status(db_session, request.id, ChatStatus.CLOSED, actor_id=coach.id)
    assert chat_service.get_unread_message_count_for_user(db_session, coach.id) == 0


def test_mark_read_only_touches_partner_messages(db_session, customer, coach):
    request = chat_service.create_chat_request(db_session, customer.id, coach.id)
    chat_service.update_chat_request_status(db_session, request.id, ChatStatus.ACCEPTED, actor_id=coach.id)
    chat_service.send_message(db_session, request.id, customer.id, "hello")
    chat_service.send_message(db_session, request.id, coach.id, "hi there")

    assert chat_service.mark_messages_as_read(db_session, request.id, coach.id) == 1
    assert chat_service.get_unread_message_count_for_user(db_session, coach.id) == 0
    assert chat_service.get_unread_message_count_for_user(db_session, customer.id) == 1
    assert chat_service.mark_messages_as_read(db_session, request.id, coach.id) == 0


def test_messages_require_accepted_chat_and_participant(db_session, make_user, customer, coach):
    stranger = make_user(full_name="Sunita Patil", email="sunita@example.com")
    request = chat_service.create_chat_request(db_session, customer.id, coach.id)

    with pytest.raises(chat_service.ChatStateError):
        chat_service.send_message(db_session, request.id, customer.id, "too early")

    chat_service.update_chat_request_status(db_session, request.id, ChatStatus.ACCEPTED, actor_id=coach.id)
    with pytest.raises(chat_service.ChatPermissionError):
        chat_service.send_message(db_session, request.id, stranger.id, "let me in")

    assert chat_service.send_message(db_session, 404, customer.id, "nobody home") is None


def test_messages_are_returned_newest_first(db_session, customer, coach):
    request = chat_service.create_chat_request(db_session, customer.id, coach.id)
    chat_service.update_chat_request_status(db_session, request.id, ChatStatus.ACCEPTED, actor_id=coach.id)
    for content in ("one", "two", "three"):
        chat_service.send_message(db_session, request.id, customer.id, content)

    messages = chat_service.get_messages_for_chat(db_session, request.id)

    assert [message.content for message in messages] == ["three", "two", "one"]
