import json

import httpx
import pytest

from til.models import Category, VoteType
from til.store import FactNotFoundError, RestFactStore, StoreError


def _row(**overrides):
    row = {
        "id": 1,
        "text": "Sharks predate trees",
        "source": "https://example.com/sharks",
        "category": "science",
        "votesInteresting": 0,
        "votesMindblowing": 0,
        "votesFalse": 0,
        "created_at": "2024-05-01T12:00:00+00:00",
    }
    row.update(overrides)
    return row


def _store(handler):
    requests = []

    def record(request):
        requests.append(request)
        return handler(request)

    store = RestFactStore(
        "https://project.supabase.co/",
        api_key="anon-key",
        transport=httpx.MockTransport(record),
    )
    return store, requests


def test_list_facts_sends_postgrest_query():
    store, requests = _store(lambda request: httpx.Response(200, json=[_row()]))

    facts = store.list_facts(Category.SCIENCE, limit=1000)

    request = requests[0]
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/fact"
    assert request.url.params["select"] == "*"
    assert request.url.params["category"] == "eq.science"
    assert request.url.params["order"] == "votesInteresting.desc"
    assert request.url.params["limit"] == "1000"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["authorization"] == "Bearer anon-key"
    assert facts[0].text == "Sharks predate trees"


def test_list_all_facts_has_no_category_filter():
    store, requests = _store(lambda request: httpx.Response(200, json=[]))

    assert store.list_facts() == []
    assert "category" not in requests[0].url.params


def test_create_fact_asks_for_the_stored_row():
    store, requests = _store(lambda request: httpx.Response(201, json=[_row(id=5)]))

    fact = store.create_fact("Sharks predate trees", "https://example.com/sharks", "science")

    request = requests[0]
    assert request.method == "POST"
    assert request.headers["prefer"] == "return=representation"
    assert json.loads(request.content) == [{
        "text": "Sharks predate trees",
        "source": "https://example.com/sharks",
        "category": "science",
    }]
    assert fact.id == 5


def test_update_votes_patches_one_column():
    store, requests = _store(
        lambda request: httpx.Response(200, json=[_row(votesMindblowing=4)])
    )

    fact = store.update_votes(1, VoteType.MINDBLOWING, 4)

    request = requests[0]
    assert request.method == "PATCH"
    assert request.url.params["id"] == "eq.1"
    assert json.loads(request.content) == {"votesMindblowing": 4}
    assert fact.votes_mindblowing == 4


def test_update_votes_on_missing_row():
    store, _ = _store(lambda request: httpx.Response(200, json=[]))

    with pytest.raises(FactNotFoundError):
        store.update_votes(9, VoteType.FALSE, 1)


def test_get_fact():
    store, requests = _store(lambda request: httpx.Response(200, json=[_row(id=3)]))

    assert store.get_fact(3).id == 3
    assert requests[0].url.params["id"] == "eq.3"


def test_count_facts_reads_content_range():
    store, requests = _store(
        lambda request: httpx.Response(200, headers={"content-range": "0-24/57"})
    )

    assert store.count_facts() == 57
    assert requests[0].method == "HEAD"
    assert requests[0].headers["prefer"] == "count=exact"


def test_error_status_becomes_store_error():
    store, _ = _store(lambda request: httpx.Response(500, json={"message": "boom"}))

    with pytest.raises(StoreError):
        store.list_facts()


def test_transport_error_becomes_store_error():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    store, _ = _store(handler)

    with pytest.raises(StoreError):
        store.create_fact("t", "https://example.com", "news")


def test_malformed_rows_become_store_error():
    store, _ = _store(lambda request: httpx.Response(200, json=[{"id": "x"}]))

    with pytest.raises(StoreError):
        store.list_facts()
