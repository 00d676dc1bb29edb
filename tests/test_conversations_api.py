"""
End-to-end tests through the FastAPI app with the testing container.

The testing config sets the assistant reply delay to zero, so
wait_for_reply=true returns promptly.
"""

import uuid

import pytest

from conftest import auth, service_token

BORROWER_HEADERS = auth("borrower-1", "Bob Rivera")
LENDER_HEADERS = auth("lender-1", "Lena Park")
OUTSIDER_HEADERS = auth("outsider-9", "Otto")


@pytest.fixture()
def conversation_id(client, auth_headers):
    response = client.post(
        "/conversations",
        json={
            "transaction_id": "TX-1001",
            "title": "Excavator fleet financing",
            "borrower_name": "Acme Construction",
            "deal_amount": 750000,
            "deal_type": "equipment_financing",
            "urgency": "high",
            "participants": [
                {"user_id": "borrower-1", "name": "Bob Rivera", "role": "borrower"},
                {"user_id": "lender-1", "name": "Lena Park", "role": "lender"},
            ],
        },
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


class TestConversations:
    def test_create(self, client, auth_headers, conversation_id):
        data = client.get(f"/conversations/{conversation_id}", headers=auth_headers).json()

        assert data["status"] == "prospecting"
        assert len(data["participants"]) == 4
        roles = {p["user_id"]: p["role"] for p in data["participants"]}
        assert roles == {
            "user-1": "finance_manager",
            "borrower-1": "borrower",
            "lender-1": "lender",
            "assistant": "assistant",
        }
        assert data["messages"] == []

    def test_create_rejects_bad_amount(self, client, auth_headers):
        response = client.post(
            "/conversations",
            json={
                "transaction_id": "TX-9",
                "title": "Zero",
                "borrower_name": "Acme",
                "deal_amount": 0,
                "deal_type": "sba_loan",
            },
            headers=auth_headers,
        )
        assert response.status_code == 422
        assert "error" in response.json()

    def test_create_rejects_nan_amount(self, client, auth_headers):
        body = (
            '{"transaction_id": "TX-9", "title": "Broken", "borrower_name": "Acme", '
            '"deal_amount": NaN, "deal_type": "sba_loan"}'
        )
        response = client.post(
            "/conversations",
            content=body,
            headers={**auth_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Validation error"

    def test_update_deal_rejects_nan_amount(self, client, auth_headers, conversation_id):
        response = client.patch(
            f"/conversations/{conversation_id}/deal",
            json={"field": "deal_amount", "value": "NaN"},
            headers=auth_headers,
        )
        assert response.status_code == 422

    def test_list_my_deals(self, client, auth_headers, conversation_id):
        mine = client.get("/conversations?filter=my_deals", headers=LENDER_HEADERS).json()
        theirs = client.get("/conversations?filter=my_deals", headers=OUTSIDER_HEADERS).json()
        urgent = client.get("/conversations?filter=urgent&sort=amount", headers=auth_headers).json()

        assert mine["total"] == 1
        assert mine["conversations"][0]["id"] == conversation_id
        assert mine["conversations"][0]["participant_count"] == 4
        assert theirs["total"] == 0
        assert urgent["total"] == 1

    def test_unknown_filter(self, client, auth_headers):
        response = client.get("/conversations?filter=everything", headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Validation error"

    def test_access(self, client, auth_headers, conversation_id):
        assert client.get(f"/conversations/{conversation_id}", headers=OUTSIDER_HEADERS).status_code == 403
        assert client.get(f"/conversations/{uuid.uuid4()}", headers=auth_headers).status_code == 404
        assert client.get("/conversations/not-a-uuid", headers=auth_headers).status_code == 404

    def test_status_flow(self, client, auth_headers, conversation_id):
        response = client.post(
            f"/conversations/{conversation_id}/status",
            json={"status": "pre_qualified"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        message = response.json()
        assert message["message_type"] == "status_update"
        assert message["is_system_message"] is True
        assert message["metadata"]["deal_update"]["new_value"] == "pre_qualified"

        skipped = client.post(
            f"/conversations/{conversation_id}/status",
            json={"status": "closed"},
            headers=auth_headers,
        )
        assert skipped.status_code == 409

    def test_update_deal(self, client, auth_headers, conversation_id):
        response = client.patch(
            f"/conversations/{conversation_id}/deal",
            json={"field": "deal_amount", "value": 800000},
            headers=auth_headers,
        )
        assert response.status_code == 200
        update = response.json()["metadata"]["deal_update"]
        assert update == {"field": "deal_amount", "old_value": "750000.0", "new_value": "800000.0"}

        denied = client.patch(
            f"/conversations/{conversation_id}/deal",
            json={"field": "deal_amount", "value": 900000},
            headers=BORROWER_HEADERS,
        )
        assert denied.status_code == 403

    def test_participants(self, client, auth_headers, conversation_id):
        invite = {"user_id": "vendor-1", "name": "Val Ortiz", "role": "vendor"}
        url = f"/conversations/{conversation_id}/participants"

        assert client.post(url, json=invite, headers=BORROWER_HEADERS).status_code == 403
        created = client.post(url, json=invite, headers=auth_headers)
        assert created.status_code == 201
        assert created.json()["permissions"]["can_upload_documents"] is True
        assert client.post(url, json=invite, headers=auth_headers).status_code == 409

    def test_assistant_id_cannot_be_invited(self, client, auth_headers, conversation_id):
        url = f"/conversations/{conversation_id}/participants"
        impostor = {"user_id": "assistant", "name": "Mallory", "role": "broker"}
        assert client.post(url, json=impostor, headers=auth_headers).status_code == 409

        second_bot = {"user_id": "bot-2", "name": "Bot", "role": "assistant"}
        assert client.post(url, json=second_bot, headers=auth_headers).status_code == 422

    def test_permissions(self, client, auth_headers, conversation_id):
        response = client.get(
            f"/conversations/{conversation_id}/participants/lender-1/permissions",
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json() == {
            "can_invite_users": False,
            "can_upload_documents": True,
            "can_access_financials": True,
            "can_submit_to_lenders": False,
            "can_approve_deal": True,
        }

        missing = client.get(
            f"/conversations/{conversation_id}/participants/nobody/permissions",
            headers=auth_headers,
        )
        assert missing.status_code == 404

    def test_presence(self, client, conversation_id):
        response = client.post(
            f"/conversations/{conversation_id}/presence",
            json={"is_online": True},
            headers=BORROWER_HEADERS,
        )
        assert response.status_code == 200
        assert response.json()["user_id"] == "borrower-1"
        assert response.json()["is_online"] is True
        assert response.json()["last_seen"] is not None

        outsider = client.post(
            f"/conversations/{conversation_id}/presence",
            json={"is_online": True},
            headers=OUTSIDER_HEADERS,
        )
        assert outsider.status_code == 404


class TestChat:
    def test_message_with_reply(self, client, auth_headers, conversation_id):
        response = client.post(
            f"/conversations/{conversation_id}/messages",
            json={"content": "EVA, which lender matches best?", "wait_for_reply": True},
            headers=auth_headers,
        )
        assert response.status_code == 201
        body = response.json()
        assert body["message"]["sender_id"] == "user-1"
        recommendation = body["reply"]["metadata"]["eva_recommendation"]
        assert body["reply"]["message_type"] == "eva_recommendation"
        assert recommendation["type"] == "lender_match"
        assert recommendation["confidence"] == 92
        assert recommendation["data"]["topRecommendation"] == "Growth Capital Partners"

        messages = client.get(f"/conversations/{conversation_id}", headers=auth_headers).json()["messages"]
        assert [m["sender_id"] for m in messages] == ["user-1", "assistant"]

    def test_message_without_trigger(self, client, auth_headers, conversation_id):
        response = client.post(
            f"/conversations/{conversation_id}/messages",
            json={"content": "Quote received from the dealer"},
            headers=BORROWER_HEADERS,
        )
        assert response.status_code == 201
        assert response.json()["reply"] is None
        assert response.json()["reply_pending"] is False

    def test_validation(self, client, auth_headers, conversation_id):
        url = f"/conversations/{conversation_id}/messages"
        assert client.post(url, json={}, headers=auth_headers).status_code == 400
        assert client.post(url, json={"content": "   "}, headers=auth_headers).status_code == 422
        assert client.post(url, json={"content": "hi"}, headers=OUTSIDER_HEADERS).status_code == 404

    def test_documents(self, client, conversation_id):
        response = client.post(
            f"/conversations/{conversation_id}/documents",
            files=[("files", ("invoice.pdf", b"%PDF-1.4 test", "application/pdf"))],
            headers=BORROWER_HEADERS,
        )
        assert response.status_code == 201, response.text
        message = response.json()["message"]
        assert message["content"] == "Attachment"
        assert message["message_type"] == "document_share"
        attachment = message["attachments"][0]
        assert attachment["file_name"] == "invoice.pdf"
        assert attachment["file_size"] == len(b"%PDF-1.4 test")
        assert attachment["url"].startswith("/files/")

    def test_document_too_large(self, client, conversation_id):
        response = client.post(
            f"/conversations/{conversation_id}/documents",
            files=[("files", ("scan.pdf", b"x" * 2048, "application/pdf"))],
            headers=BORROWER_HEADERS,
        )
        assert response.status_code == 422


class TestLenders:
    def test_matches_and_selection(self, client, auth_headers, conversation_id):
        matches = client.get(
            f"/conversations/{conversation_id}/lender-matches", headers=auth_headers
        ).json()["recommendations"]
        assert [m["lender_name"] for m in matches] == [
            "Growth Capital Partners",
            "Capital Equipment Finance",
            "First Capital Bank",
        ]
        assert [m["approval_probability"] for m in matches] == [90, 86, 80]

        response = client.post(
            f"/conversations/{conversation_id}/lender-matches/{matches[1]['id']}/select",
            params={"wait_for_reply": "true"},
            headers=auth_headers,
        )
        assert response.status_code == 201
        body = response.json()
        assert body["message"]["metadata"]["lender_selection"]["lender_name"] == "Capital Equipment Finance"
        assert body["confirmation"]["content"].endswith("closes in 5 days.")

        status = client.get(f"/conversations/{conversation_id}", headers=auth_headers).json()["status"]
        assert status == "prospecting"

    def test_selection_errors(self, client, auth_headers, conversation_id):
        matches = client.get(
            f"/conversations/{conversation_id}/lender-matches", headers=auth_headers
        ).json()["recommendations"]
        url = f"/conversations/{conversation_id}/lender-matches"

        assert client.post(f"{url}/{matches[0]['id']}/select", headers=BORROWER_HEADERS).status_code == 403
        assert client.post(f"{url}/unknown/select", headers=auth_headers).status_code == 404


class TestAppBehaviour:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_invalid_token(self, client):
        headers = {"Authorization": f"Bearer {service_token(secret='wrong-secret')}"}
        response = client.get("/conversations", headers=headers)
        assert response.status_code == 401
        assert "error" in response.json()

    @pytest.mark.parametrize("subject", ["assistant", "system"])
    def test_reserved_subject_is_refused(self, client, subject):
        response = client.get("/conversations", headers=auth(subject, "Mallory"))
        assert response.status_code == 401

    def test_correlation_id_is_echoed(self, client, auth_headers):
        response = client.get("/conversations", headers={**auth_headers, "X-Correlation-ID": "req-123"})
        assert response.headers["X-Correlation-ID"] == "req-123"
