"""Contact form relay tests."""


def test_contact_us(client, auth_headers, mailer):
    response = client.post(
        "/api/contactus",
        headers=auth_headers,
        json={"subject": "Restock", "message": "Please restock <b>lamps</b>"},
    )
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Email Sent"}

    sent = mailer.sent[0]
    assert sent["subject"] == "Restock"
    assert sent["reply_to"] == auth_headers.email
    assert "&lt;b&gt;lamps&lt;/b&gt;" in sent["html"]


def test_contact_us_missing_fields(client, auth_headers, mailer):
    response = client.post("/api/contactus", headers=auth_headers, json={"subject": "Hi"})
    assert response.status_code == 400
    assert response.json()["message"] == "Please add subject and message"
    assert mailer.sent == []


def test_contact_us_requires_auth(client):
    response = client.post("/api/contactus", json={"subject": "Hi", "message": "There"})
    assert response.status_code == 401


def test_contact_us_delivery_failure(client, auth_headers, mailer):
    mailer.fail = True
    response = client.post(
        "/api/contactus", headers=auth_headers, json={"subject": "Hi", "message": "There"}
    )
    assert response.status_code == 500
    assert response.json()["message"] == "Email not sent, please try again"
