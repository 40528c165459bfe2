"""Tests for metro, state, ranking, stats and comparison endpoints."""

from __future__ import annotations


def test_health(client):
    """GET /health returns ok."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["version"] == "0.1.0"


def test_ready(client):
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "ready"


# --- Metros ---


def test_list_metros(client):
    """GET /v1/metros returns every metro alphabetically."""
    response = client.get("/v1/metros")
    assert response.status_code == 200
    body = response.json()
    assert body["meta"]["total_count"] == 6
    assert body["meta"]["source"] == "BEA Regional Price Parities"
    assert body["data"][0]["slug"] == "abilene-tx"


def test_get_metro(client):
    response = client.get("/v1/metros/abilene-tx")
    assert response.status_code == 200
    body = response.json()
    assert body["data"]["metro"]["cbsa"] == "10180"
    assert [h["year"] for h in body["data"]["history"]] == [2021, 2022]
    assert body["data"]["display"]["rpp_all"] == "88.5"
    assert body["data"]["display"]["rpp_all_diff"] == "-11.5% vs national avg"
    assert body["meta"]["year"] == 2022


def test_get_metro_not_found(client):
    response = client.get("/v1/metros/nowhere-zz")
    assert response.status_code == 404


def test_get_metro_history(client):
    response = client.get("/v1/metros/new-york-newark-jersey-city-ny-nj-pa/history")
    assert response.status_code == 200
    assert response.json()["meta"]["total_count"] == 1


# --- States ---


def test_list_states(client):
    response = client.get("/v1/states")
    assert response.status_code == 200
    assert [s["abbr"] for s in response.json()["data"]] == ["CA", "IL", "MO", "NY", "TX"]


def test_get_state(client):
    response = client.get("/v1/states/california")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["state"]["msa_count"] == 2
    assert len(data["metros"]) == data["state"]["msa_count"]
    assert [h["year"] for h in data["history"]] == [2021, 2022]
    assert data["display"]["rpp_all_diff"] == "+12.6% vs national avg"


def test_state_at_national_average(client):
    response = client.get("/v1/states/missouri")
    assert response.json()["data"]["display"]["rpp_all_diff"] == "at national average"


def test_get_state_not_found(client):
    assert client.get("/v1/states/atlantis").status_code == 404


# --- Rankings / stats ---


def test_most_expensive(client):
    response = client.get("/v1/rankings/most-expensive", params={"limit": 3})
    assert response.status_code == 200
    assert [m["cbsa"] for m in response.json()["data"]] == ["35620", "41860", "31080"]


def test_least_expensive(client):
    response = client.get("/v1/rankings/least-expensive", params={"limit": 1})
    assert [m["cbsa"] for m in response.json()["data"]] == ["44180"]


def test_highest_rent(client):
    response = client.get("/v1/rankings/highest-rent", params={"limit": 1})
    assert [m["cbsa"] for m in response.json()["data"]] == ["41860"]


def test_ranking_limit_validated(client):
    assert client.get("/v1/rankings/most-expensive", params={"limit": 0}).status_code == 422
    assert client.get("/v1/rankings/most-expensive", params={"limit": 101}).status_code == 422


def test_stats(client):
    response = client.get("/v1/stats")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["msa_count"] == 6
    assert data["state_count"] == 5
    assert data["max_rpp_all"] == 125.4


def test_stats_empty_store(empty_client):
    response = empty_client.get("/v1/stats")
    assert response.status_code == 200
    assert response.json()["data"]["msa_count"] == 0


def test_empty_store_lists(empty_client):
    assert empty_client.get("/v1/metros").json()["data"] == []
    assert empty_client.get("/v1/search", params={"q": "spring"}).json() == {
        "results": [],
        "query": "spring",
    }


# --- Salary comparison ---


def test_salary_equivalent_between_states(client):
    response = client.get(
        "/v1/salary-equivalent",
        params={"salary": 100000, "from_slug": "new-york", "to_slug": "texas"},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["equivalent_salary"] == 86364
    assert data["display"] == "$100,000 in New York ≈ $86,364 in Texas"


def test_salary_equivalent_metro_to_state(client):
    response = client.get(
        "/v1/salary-equivalent",
        params={"salary": 50000, "from_slug": "abilene-tx", "to_slug": "missouri"},
    )
    assert response.status_code == 200
    assert response.json()["data"]["to"]["rpp_all"] == 100.0


def test_salary_equivalent_unknown_place(client):
    response = client.get(
        "/v1/salary-equivalent",
        params={"salary": 50000, "from_slug": "abilene-tx", "to_slug": "atlantis"},
    )
    assert response.status_code == 404


def test_salary_equivalent_rejects_non_positive_salary(client):
    response = client.get(
        "/v1/salary-equivalent",
        params={"salary": 0, "from_slug": "texas", "to_slug": "new-york"},
    )
    assert response.status_code == 422
