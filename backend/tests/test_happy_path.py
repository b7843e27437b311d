from stepgate.config import get_settings

from helpers import png_b64

settings = get_settings()


def test_full_funnel(client, classifier):
    session = client.post("/api/session", json={"pagePath": "/"}).json()
    token = session["session_token"]
    assert (session["step1_verified"], session["step2_verified"], session["reward_disclosed"]) == (False, False, False)

    reg = client.post("/api/session/register", json={
        "sessionToken": token,
        "name": "Asha Rao",
        "studentClass": "Class 10",
        "mobile": "9876543210",
    })
    assert reg.status_code == 200

    step1 = client.post("/api/verify-screenshot", json={
        "sessionToken": token, "stepNumber": 1, "screenshotBase64": png_b64(),
    })
    assert step1.json()["verified"] is True
    state = client.post("/api/session/refresh", json={"sessionToken": token}).json()
    assert state["step1_verified"] is True
    assert state["current_step"] == 2

    step2 = client.post("/api/verify-screenshot", json={
        "sessionToken": token, "stepNumber": 2, "screenshotBase64": png_b64(),
    })
    assert step2.json() == {"verified": True, "reason": "Confirmation screen visible", "step": 2}

    reward = client.post("/api/get-drive-link", json={"sessionToken": token})
    assert reward.status_code == 200
    assert reward.json()["driveLink"] == settings.REWARD_LINK

    final = client.post("/api/session/refresh", json={"sessionToken": token}).json()
    assert final["reward_disclosed"] is True
    assert final["current_step"] == 3
    assert len(classifier.calls) == 2


def test_steps_catalogue(client):
    steps = client.get("/api/steps").json()
    assert [s["step"] for s in steps] == [1, 2]


def test_health(client):
    body = client.get("/health").json()
    assert body["database"] == "connected"
    assert body["ai_classifier"] == "unavailable"
