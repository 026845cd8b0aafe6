from fastapi.testclient import TestClient

from til.app import app


def test_create_fact(client):
    response = client.post("/api/facts", json={
        "text": "A day on Venus is longer than its year",
        "source": "https://example.com/venus",
        "category": "science",
    })

    assert response.status_code == 201
    data = response.json()
    assert data["id"] > 0
    assert data["category"] == "science"
    assert data["votesInteresting"] == 0
    assert data["votesMindblowing"] == 0
    assert data["votesFalse"] == 0
    assert data["is_disputed"] is False


def test_create_fact_validation(client):
    base = {"text": "t", "source": "https://example.com", "category": "news"}

    assert client.post("/api/facts", json={**base, "source": "example.com"}).status_code == 422
    assert client.post("/api/facts", json={**base, "category": "gossip"}).status_code == 422
    assert client.post("/api/facts", json={**base, "text": "x" * 201}).status_code == 422
    assert client.post("/api/facts", json={**base, "text": ""}).status_code == 422


def test_list_facts(client, add_fact):
    add_fact(text="low", category="news", interesting=1)
    add_fact(text="high", category="news", interesting=5)
    add_fact(text="other", category="finance")

    everything = client.get("/api/facts")
    news = client.get("/api/facts", params={"category": "news"})

    assert everything.status_code == 200
    assert len(everything.json()) == 3
    assert [f["text"] for f in news.json()] == ["high", "low"]


def test_list_facts_unknown_category(client):
    response = client.get("/api/facts", params={"category": "gossip"})

    assert response.status_code == 422
    assert "gossip" in response.json()["detail"]


def test_get_fact(client, add_fact):
    fact = add_fact()

    assert client.get(f"/api/facts/{fact.id}").json()["text"] == fact.text
    assert client.get("/api/facts/999").status_code == 404


def test_vote_on_fact(client, add_fact):
    fact = add_fact(interesting=1)

    response = client.post(f"/api/facts/{fact.id}/votes", json={"vote": "false"})
    assert response.status_code == 200
    assert response.json()["votesFalse"] == 1
    assert response.json()["is_disputed"] is False

    response = client.post(f"/api/facts/{fact.id}/votes", json={"vote": "false"})
    assert response.json()["votesFalse"] == 2
    assert response.json()["is_disputed"] is True


def test_vote_validation(client, add_fact):
    fact = add_fact()

    assert client.post("/api/facts/999/votes", json={"vote": "false"}).status_code == 404
    assert client.post(f"/api/facts/{fact.id}/votes", json={"vote": "boring"}).status_code == 422


def test_store_failures_are_bad_gateway(failing_client):
    response = failing_client.get("/api/facts")

    assert response.status_code == 502
    assert response.json()["detail"] == "An error occurred. Please try again later."
    assert failing_client.post("/api/facts/1/votes", json={"vote": "false"}).status_code == 502


def test_list_categories(client):
    categories = client.get("/api/categories").json()

    assert len(categories) == 8
    assert categories[0] == {"name": "technology", "color": "#3b82f6"}


def test_health(client, add_fact):
    add_fact()

    data = client.get("/health").json()

    assert data["status"] == "healthy"
    assert data["store"] == "sql"
    assert data["store_connected"] is True
    assert data["facts_count"] == 1


def test_health_when_store_is_down(failing_client):
    data = failing_client.get("/health").json()

    assert data["status"] == "degraded"
    assert data["store_connected"] is False


def test_collection_paths_answer_without_redirect(client, add_fact):
    add_fact(category="news")
    direct = TestClient(app, follow_redirects=False)

    listed = direct.get("/api/facts", params={"category": "news"})
    created = direct.post("/api/facts", json={
        "text": "Lightning is hotter than the sun's surface",
        "source": "https://example.com/lightning",
        "category": "science",
    })

    assert listed.status_code == 200
    assert len(listed.json()) == 1
    assert created.status_code == 201
    assert direct.get("/api/categories").status_code == 200
