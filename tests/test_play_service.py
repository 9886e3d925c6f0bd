from fastapi.testclient import TestClient

from server.play_service import app

client = TestClient(app)


def pick(actions):
    labels = [action["label"] for action in actions]
    bids = [index for index, label in enumerate(labels) if label.startswith("Bid")]
    if bids:
        return bids[-1]
    for preferred in ("Play", "Pass", "Continue"):
        if preferred in labels:
            return labels.index(preferred)
    return 0


def start(**payload):
    response = client.post("/session/start", json={"seed": 21, "max_rounds": 1, **payload})
    assert response.status_code == 200
    return response.json()


def test_start_session_waits_for_the_human():
    body = start()
    state = body["state"]

    assert body["session_id"]
    assert set(state["scores"]) == {"You", "Bot A", "Bot B"}
    assert state["round"]["current_player"] == "You"
    assert len(state["round"]["hand"]) in (17, 20)
    assert state["legalActions"]
    assert state["events"]


def test_human_can_play_a_match_to_the_end():
    body = start()
    session_id = body["session_id"]
    state = body["state"]

    for _ in range(300):
        if state["match_over"]:
            break
        actions = state["legalActions"]
        assert actions
        response = client.post(f"/session/{session_id}/action", json={"action_index": pick(actions)})
        assert response.status_code == 200
        state = response.json()["state"]

    assert state["match_over"]
    assert sum(state["scores"].values()) == 0
    assert state["legalActions"] == []


def test_get_state_round_trips():
    body = start()
    response = client.get(f"/session/{body['session_id']}")
    assert response.status_code == 200
    assert response.json()["state"]["round"]["current_player"] == "You"


def test_errors():
    body = start()
    session_id = body["session_id"]

    assert client.get("/session/missing").status_code == 404
    assert client.post("/session/missing/action", json={"action_index": 0}).status_code == 404
    assert client.post(f"/session/{session_id}/action", json={"action_index": 999}).status_code == 400
    assert client.post(f"/session/{session_id}/action", json={"action_index": -1}).status_code == 422
    bad = client.post("/session/start", json={"opponents": ["greedy", "genius"]})
    assert bad.status_code == 400
