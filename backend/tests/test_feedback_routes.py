from conftest import auth_headers


def _reply(client, headers):
    return client.post("/api/v1/chat/send", headers=headers, json={"message": "Hello"}).json()


def test_submit_then_update_feedback(client, user_headers, fake_generation):
    sent = _reply(client, user_headers)
    message_id = sent["message"]["id"]

    created = client.post("/api/v1/feedback", headers=user_headers, json={"message_id": message_id, "rating": "like"})
    assert created.status_code == 200
    assert created.json()["message"] == "Feedback submitted"

    updated = client.post("/api/v1/feedback", headers=user_headers, json={
        "message_id": message_id, "rating": "dislike", "reason": "  Too vague  "
    })
    assert updated.json()["message"] == "Feedback updated to 'dislike'"
    assert updated.json()["feedback_id"] == created.json()["feedback_id"]

    current = client.get(f"/api/v1/feedback/message/{message_id}", headers=user_headers).json()
    assert current == {"has_feedback": True, "rating": "dislike", "reason": "Too vague"}


def test_no_feedback_yet(client, user_headers, fake_generation):
    message_id = _reply(client, user_headers)["message"]["id"]
    current = client.get(f"/api/v1/feedback/message/{message_id}", headers=user_headers).json()
    assert current == {"has_feedback": False, "rating": None, "reason": None}


def test_only_assistant_messages_can_be_rated(client, user_headers, fake_generation):
    user_message_id = _reply(client, user_headers)["user_message"]["id"]
    response = client.post("/api/v1/feedback", headers=user_headers, json={"message_id": user_message_id, "rating": "like"})
    assert response.status_code == 404


def test_invalid_rating(client, user_headers, fake_generation):
    message_id = _reply(client, user_headers)["message"]["id"]
    response = client.post("/api/v1/feedback", headers=user_headers, json={"message_id": message_id, "rating": "meh"})
    assert response.status_code == 422


def test_cannot_rate_another_users_message(client, user_headers, fake_generation):
    message_id = _reply(client, user_headers)["message"]["id"]
    other = auth_headers(client, email="eve@example.com", first_name="Eve")
    response = client.post("/api/v1/feedback", headers=other, json={"message_id": message_id, "rating": "like"})
    assert response.status_code == 403


def test_feedback_list_is_admin_only(client, user_headers, admin_headers, fake_generation):
    sent = _reply(client, user_headers)
    client.post("/api/v1/feedback", headers=user_headers, json={
        "message_id": sent["message"]["id"], "rating": "like"
    })

    assert client.get("/api/v1/feedback", headers=user_headers).status_code == 403

    records = client.get("/api/v1/feedback", headers=admin_headers).json()
    assert len(records) == 1
    assert records[0]["rating"] == "like"
    assert records[0]["message_content"] == sent["message"]["content"]
    assert records[0]["conversation_id"] == sent["conversation_id"]


def test_deleting_conversation_removes_its_feedback(client, user_headers, admin_headers, fake_generation):
    sent = _reply(client, user_headers)
    client.post("/api/v1/feedback", headers=user_headers, json={
        "message_id": sent["message"]["id"], "rating": "dislike"
    })
    client.delete(f"/api/v1/conversations/{sent['conversation_id']}", headers=user_headers)

    assert client.get("/api/v1/feedback", headers=admin_headers).json() == []
