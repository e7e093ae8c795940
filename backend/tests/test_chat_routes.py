import base64
import json

from progress_chat.api.routes import chat as chat_routes
from progress_chat.services.generation_service import GenerationService, FALLBACK_RESPONSE

PNG_DATA_URI = "data:image/png;base64," + base64.b64encode(b"\x89PNG\r\n\x1a\nfake").decode()
PDF_DATA_URI = "data:application/pdf;base64," + base64.b64encode(b"%PDF-1.4 fake").decode()


class FailingBedrock:
    async def generate(self, messages, system_prompt="", max_tokens=None, temperature=None):
        raise RuntimeError("model unavailable")


def test_send_creates_titled_conversation(client, user_headers, fake_generation):
    response = client.post("/api/v1/chat/send", headers=user_headers, json={"message": "Plan a trip to Lisbon"})

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Test Title"
    assert body["user_message"]["content"] == "Plan a trip to Lisbon"
    assert body["message"]["role"] == "assistant"
    assert body["message"]["content"] == "Reply 1 to: Plan a trip to Lisbon"
    assert fake_generation.title_calls == ["Plan a trip to Lisbon"]

    call = fake_generation.calls[0]
    assert call["profile"]["first_name"] == "Ada"
    assert call["mode"] == "standard"
    assert call["history"] == []


def test_send_to_existing_conversation_passes_history(client, user_headers, fake_generation):
    first = client.post("/api/v1/chat/send", headers=user_headers, json={"message": "Hi"}).json()
    client.post("/api/v1/chat/send", headers=user_headers, json={
        "message": "Go deeper",
        "conversation_id": first["conversation_id"],
        "mode": "thinkDeep",
    })

    assert len(fake_generation.title_calls) == 1
    second_call = fake_generation.calls[1]
    assert second_call["mode"] == "thinkDeep"
    assert [h["role"] for h in second_call["history"]] == ["user", "assistant"]


def test_first_message_titles_an_empty_conversation(client, user_headers, fake_generation):
    conversation = client.post("/api/v1/conversations", headers=user_headers, json={}).json()
    body = client.post("/api/v1/chat/send", headers=user_headers, json={
        "message": "Hello",
        "conversation_id": conversation["id"],
    }).json()

    assert body["conversation_id"] == conversation["id"]
    assert body["title"] == "Test Title"


def test_send_to_unknown_conversation(client, user_headers, fake_generation):
    response = client.post("/api/v1/chat/send", headers=user_headers, json={"message": "Hi", "conversation_id": 999})
    assert response.status_code == 404


def test_empty_message_without_attachment_is_rejected(client, user_headers, fake_generation):
    response = client.post("/api/v1/chat/send", headers=user_headers, json={"message": "   "})
    assert response.status_code == 422


def test_unknown_mode_is_rejected(client, user_headers, fake_generation):
    response = client.post("/api/v1/chat/send", headers=user_headers, json={"message": "Hi", "mode": "turbo"})
    assert response.status_code == 422


def test_image_attachment_is_stored(client, user_headers, fake_generation):
    body = client.post("/api/v1/chat/send", headers=user_headers, json={
        "message": "What is this?",
        "attachment_data_uri": PNG_DATA_URI,
    }).json()

    assert body["user_message"]["attachment_data_uri"] == PNG_DATA_URI
    assert fake_generation.calls[0]["attachment_data_uri"] == PNG_DATA_URI


def test_non_image_attachment_is_rejected(client, user_headers, fake_generation):
    response = client.post("/api/v1/chat/send", headers=user_headers, json={
        "message": "Summarize",
        "attachment_data_uri": PDF_DATA_URI,
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "Currently, only image files are supported."
    assert fake_generation.calls == []


def test_generation_failure_stores_fallback(client, user_headers, monkeypatch):
    monkeypatch.setattr(chat_routes.chat_service, "generation", GenerationService(bedrock=FailingBedrock()))

    body = client.post("/api/v1/chat/send", headers=user_headers, json={"message": "Hello"}).json()

    assert body["title"] == "New Conversation"
    assert body["message"]["content"] == FALLBACK_RESPONSE


def test_regenerate_replaces_trailing_replies_with_one_call(client, user_headers, fake_generation):
    first = client.post("/api/v1/chat/send", headers=user_headers, json={"message": "One"}).json()
    conversation_id = first["conversation_id"]
    second = client.post("/api/v1/chat/send", headers=user_headers, json={
        "message": "Two", "conversation_id": conversation_id
    }).json()
    calls_before = len(fake_generation.calls)

    response = client.post("/api/v1/chat/regenerate", headers=user_headers, json={"conversation_id": conversation_id})

    assert response.status_code == 200
    assert len(fake_generation.calls) == calls_before + 1
    assert fake_generation.calls[-1]["message"] == "Two"
    assert [h["content"] for h in fake_generation.calls[-1]["history"]] == ["One", first["message"]["content"]]

    messages = client.get(f"/api/v1/conversations/{conversation_id}/messages", headers=user_headers).json()
    ids = [m["id"] for m in messages]
    assert second["message"]["id"] not in ids
    assert response.json()["message"]["id"] > second["message"]["id"]
    assert first["message"]["id"] in ids
    assert [m["role"] for m in messages] == ["user", "assistant", "user", "assistant"]
    assert messages[-1]["content"] == response.json()["message"]["content"]


def test_regenerate_without_user_message(client, user_headers, fake_generation):
    conversation = client.post("/api/v1/conversations", headers=user_headers, json={}).json()
    response = client.post("/api/v1/chat/regenerate", headers=user_headers, json={"conversation_id": conversation["id"]})
    assert response.status_code == 400
    assert fake_generation.calls == []


def _events(response):
    return [
        json.loads(line[len("data: "):])
        for line in response.text.splitlines()
        if line.startswith("data: ")
    ]


def test_stream_emits_metadata_tokens_and_done(client, user_headers, fake_generation):
    response = client.post("/api/v1/chat/stream", headers=user_headers, json={"message": "Hello there"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    events = _events(response)

    assert events[0]["type"] == "metadata"
    assert events[0]["metadata"]["title"] == "Test Title"
    assert events[-1]["type"] == "done"

    tokens = "".join(e["content"] for e in events if e["type"] == "token")
    assert tokens == "Reply 1 to: Hello there"
    assert events[-1]["content"] == tokens
    assert events[-1]["metadata"]["message"]["role"] == "assistant"


def test_stream_rejects_non_image_before_streaming(client, user_headers, fake_generation):
    response = client.post("/api/v1/chat/stream", headers=user_headers, json={
        "message": "Read this", "attachment_data_uri": PDF_DATA_URI
    })
    assert response.status_code == 400
