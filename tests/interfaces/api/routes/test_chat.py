from .conftest import auth_headers


def _open_thread(client, user, participant):
    return client.post(
        "/chat/create", json={"participantId": participant.id}, headers=auth_headers(user)
    )


def test_direct_thread_is_created_once(client, make_user):
    ana, ben = make_user("Ana"), make_user("Ben")

    created = _open_thread(client, ana, ben)
    existing = _open_thread(client, ben, ana)

    assert created.status_code == 201
    assert existing.status_code == 200
    assert existing.json()["id"] == created.json()["id"]
    assert {item["id"] for item in created.json()["participants"]} == {ana.id, ben.id}
    assert [thread["id"] for thread in client.get("/chat", headers=auth_headers(ben)).json()] == [
        created.json()["id"]
    ]


def test_thread_creation_errors(client, make_user):
    ana = make_user("Ana")

    assert _open_thread(client, ana, ana).status_code == 400
    missing = client.post(
        "/chat/create", json={"participantId": "nobody"}, headers=auth_headers(ana)
    )
    assert missing.status_code == 404


def test_send_message_is_stored_and_broadcast(client, runtime, transport, make_user):
    ana, ben, eve = make_user("Ana"), make_user("Ben"), make_user("Eve")
    thread_id = _open_thread(client, ana, ben).json()["id"]
    runtime.registry.register(ben.id, "sid-ben-1")
    runtime.registry.register(ben.id, "sid-ben-2")
    runtime.registry.register(eve.id, "sid-eve")

    response = client.post(
        f"/chat/{thread_id}/messages", json={"content": "Hi Ben!"}, headers=auth_headers(ana)
    )

    assert response.status_code == 201
    message = response.json()
    assert message["messageType"] == "text"
    assert [receipt["user"] for receipt in message["readBy"]] == [ana.id]
    for sid in ("sid-ben-1", "sid-ben-2"):
        [payload] = transport.events("new_message", sid)
        assert payload["chatId"] == thread_id
        assert payload["message"]["id"] == message["id"]
    assert transport.events("new_message", "sid-eve") == []

    listing = client.get(f"/chat/{thread_id}/messages", headers=auth_headers(ben)).json()
    assert [item["content"] for item in listing["messages"]] == ["Hi Ben!"]
    assert listing["pagination"]["totalItems"] == 1


def test_outsiders_cannot_use_a_thread(client, make_user):
    ana, ben, eve = make_user("Ana"), make_user("Ben"), make_user("Eve")
    thread_id = _open_thread(client, ana, ben).json()["id"]
    headers = auth_headers(eve)

    sent = client.post(f"/chat/{thread_id}/messages", json={"content": "hey"}, headers=headers)
    listed = client.get(f"/chat/{thread_id}/messages", headers=headers)
    missing = client.get("/chat/missing/messages", headers=headers)

    assert sent.status_code == 403
    assert sent.json() == {"detail": "Access denied"}
    assert listed.status_code == 403
    assert missing.status_code == 404


def test_message_content_is_validated(client, make_user):
    ana, ben = make_user("Ana"), make_user("Ben")
    thread_id = _open_thread(client, ana, ben).json()["id"]
    headers = auth_headers(ana)

    blank = client.post(f"/chat/{thread_id}/messages", json={"content": "  "}, headers=headers)
    too_long = client.post(
        f"/chat/{thread_id}/messages", json={"content": "x" * 2001}, headers=headers
    )

    assert blank.status_code == 400
    assert too_long.status_code == 400


def test_mark_thread_read(client, make_user):
    ana, ben = make_user("Ana"), make_user("Ben")
    thread_id = _open_thread(client, ana, ben).json()["id"]
    for text in ("one", "two"):
        client.post(
            f"/chat/{thread_id}/messages", json={"content": text}, headers=auth_headers(ana)
        )

    first = client.post(f"/chat/{thread_id}/read", headers=auth_headers(ben))
    second = client.post(f"/chat/{thread_id}/read", headers=auth_headers(ben))

    assert first.json() == {"message": "Messages marked as read", "updated": 2}
    assert second.json()["updated"] == 0
