def test_secret_code_unlocks(client):
    r = client.post("/gate/evaluate", json={"keys": ["1", "2", "3", "4", "="]})
    body = r.json()
    assert body["unlocked"] is True
    assert body["user"] == {"id": 1, "pin": "1234", "subscriptionType": "pro"}
    assert body["state"] == "result-displayed"
    assert body["delay"] > 0


def test_free_codes_are_distinct(client):
    a = client.post("/gate/evaluate", json={"keys": list("7360=")}).json()["user"]
    b = client.post("/gate/evaluate", json={"keys": list("4567=")}).json()["user"]
    assert a["subscriptionType"] == b["subscriptionType"] == "free"
    assert a["id"] != b["id"]


def test_plain_math(client):
    body = client.post("/gate/evaluate", json={"keys": list("9÷0=")}).json()
    assert body == {"display": "Infinity", "state": "result-displayed", "unlocked": False, "user": None, "delay": 0}


def test_unknown_key(client):
    assert client.post("/gate/evaluate", json={"keys": ["%"]}).status_code == 400
