from sqlalchemy.exc import OperationalError

from innovatefund.infrastructure import database
from innovatefund.infrastructure.repositories import IdeaRepository, UserRepository

from .conftest import auth_headers


def _like(client, idea, user):
    return client.post(f"/ideas/{idea.id}/like", headers=auth_headers(user))


def test_like_creates_unread_notification(
    client, drain, runtime, make_user, make_idea, push_sender
):
    rita = make_user("Rita", push_token="tok123")
    uma = make_user("Uma")
    idea = make_idea(rita)
    runtime.registry.register(rita.id, "sid-rita")

    response = _like(client, idea, uma)
    drain()

    assert response.status_code == 200
    assert response.json() == {"message": "Idea liked", "liked": True, "likesCount": 1}

    inbox = client.get("/notifications", headers=auth_headers(rita)).json()
    assert inbox["unreadCount"] == 1
    assert inbox["pagination"] == {"currentPage": 1, "totalPages": 1, "totalItems": 1}
    [item] = inbox["notifications"]
    assert item["type"] == "idea_liked"
    assert item["title"] == "Your idea was liked!"
    assert item["message"] == 'Uma liked your idea "Solar Water Purifier"'
    assert item["relatedItem"] == {"itemType": "idea", "itemId": idea.id}
    assert item["actionUrl"] == f"/ideas/{idea.id}"
    assert item["read"] is False
    assert item["sender"]["id"] == uma.id
    assert [call["token"] for call in push_sender.calls] == ["tok123"]


def test_live_payload_matches_stored_record(
    client, drain, runtime, transport, make_user, make_idea
):
    rita, uma = make_user("Rita"), make_user("Uma")
    idea = make_idea(rita)
    runtime.registry.register(rita.id, "sid-rita")

    _like(client, idea, uma)
    drain()

    [live] = transport.events("new_notification", "sid-rita")
    [stored] = client.get("/notifications", headers=auth_headers(rita)).json()["notifications"]
    assert live["id"] == stored["id"]
    assert live["type"] == stored["type"]
    assert live["message"] == stored["message"]


def test_mark_read_is_idempotent(client, drain, make_user, make_idea):
    rita, uma = make_user("Rita"), make_user("Uma")
    _like(client, make_idea(rita), uma)
    drain()
    headers = auth_headers(rita)
    [item] = client.get("/notifications", headers=headers).json()["notifications"]

    first = client.patch(f"/notifications/{item['id']}/read", headers=headers)
    second = client.patch(f"/notifications/{item['id']}/read", headers=headers)

    assert first.status_code == 200
    assert first.json()["read"] is True
    assert second.json()["readAt"] == first.json()["readAt"]
    assert client.get("/notifications/unread-count", headers=headers).json() == {
        "unreadCount": 0
    }


def test_notifications_are_private(client, drain, make_user, make_idea):
    rita, uma = make_user("Rita"), make_user("Uma")
    _like(client, make_idea(rita), uma)
    drain()
    [item] = client.get("/notifications", headers=auth_headers(rita)).json()["notifications"]

    assert client.get("/notifications", headers=auth_headers(uma)).json()["notifications"] == []
    assert (
        client.patch(f"/notifications/{item['id']}/read", headers=auth_headers(uma)).status_code
        == 404
    )
    assert client.delete(f"/notifications/{item['id']}", headers=auth_headers(uma)).status_code == 404


def test_read_all_and_delete(client, drain, make_user, make_idea):
    rita, uma, ivan = make_user("Rita"), make_user("Uma"), make_user("Ivan")
    _like(client, make_idea(rita), uma)
    _like(client, make_idea(rita, title="Smart Compost Bin"), ivan)
    drain()
    headers = auth_headers(rita)

    response = client.patch("/notifications/read-all", headers=headers)
    assert response.json() == {"message": "All notifications marked as read", "updated": 2}
    assert client.get("/notifications?unread=true", headers=headers).json()["notifications"] == []

    [first, _] = client.get("/notifications", headers=headers).json()["notifications"]
    deleted = client.delete(f"/notifications/{first['id']}", headers=headers)
    assert deleted.json() == {"message": "Notification deleted"}
    assert client.get("/notifications", headers=headers).json()["pagination"]["totalItems"] == 1


def test_pagination_bounds_are_validated(client, make_user):
    headers = auth_headers(make_user("Rita"))

    assert client.get("/notifications?limit=0", headers=headers).status_code == 422
    assert client.get("/notifications?limit=101", headers=headers).status_code == 422
    assert client.get("/notifications?page=0", headers=headers).status_code == 422


def test_register_push_token(client, make_user):
    rita = make_user("Rita")

    response = client.post(
        "/notifications/fcm-token", json={"token": "device-1"}, headers=auth_headers(rita)
    )
    empty = client.post("/notifications/fcm-token", json={"token": " "}, headers=auth_headers(rita))

    assert response.json() == {"message": "FCM token updated successfully"}
    assert empty.status_code == 400
    with database.SessionLocal() as session:
        assert UserRepository(session).get(rita.id).push_token == "device-1"


def test_failed_notification_write_leaves_like_untouched(
    client, runtime, monkeypatch, make_user, make_idea
):
    rita, uma = make_user("Rita"), make_user("Uma")
    idea = make_idea(rita)

    def broken(payload):
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(runtime.dispatcher, "_persist", broken)

    response = _like(client, idea, uma)

    assert response.status_code == 500
    assert response.json() == {"detail": "Server error"}
    with database.SessionLocal() as session:
        assert IdeaRepository(session).get(idea.id).likes == []


def test_delivery_failures_do_not_fail_the_request(
    client, drain, runtime, make_user, make_idea, push_sender
):
    rita, uma = make_user("Rita", push_token="tok123"), make_user("Uma")
    push_sender.error = RuntimeError("fcm unavailable")

    response = _like(client, make_idea(rita), uma)
    drain()

    assert response.status_code == 200
    assert [warning.leg for warning in runtime.dispatcher.warnings] == ["push"]
