"""Tests for the HTTP API layer."""

from __future__ import annotations

from fastapi.testclient import TestClient

from tesvik_engine.api.server import app


client = TestClient(app)


class TestMetaEndpoints:
    def test_health(self):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json() == {"status": "ok"}

    def test_root(self):
        data = client.get("/").json()
        assert "POST /calculate" in data["endpoints"]

    def test_schema(self):
        schema = client.get("/schema").json()
        assert "land_cost" in schema["properties"]
        assert schema["properties"]["land_cost"]["minimum"] == 0

    def test_provinces(self):
        data = client.get("/provinces").json()
        assert len(data) == 81
        assert {"province": "Van", "region": 6} in data

    def test_sector_search(self):
        data = client.get("/sectors", params={"q": "26"}).json()
        assert [s["nace_code"] for s in data] == ["26.11"]


class TestCalculate:
    def test_eligible(self, machinery_form):
        r = client.post("/calculate", json={"inputs": machinery_form})
        assert r.status_code == 200
        result = r.json()["result"]
        assert result["is_eligible"] is True
        assert result["machinery_support_amount"] == 1_250_000
        assert r.json()["report"] == ""

    def test_ineligible_is_not_http_error(self, machinery_form):
        form = {**machinery_form, "land_cost": -1}
        r = client.post("/calculate", json={"inputs": form})
        assert r.status_code == 200
        result = r.json()["result"]
        assert result["is_eligible"] is False
        assert "Arazi maliyeti negatif olamaz." in result["validation_errors"]

    def test_with_report(self, interest_form):
        r = client.post("/calculate", json={"inputs": interest_form, "include_report": True})
        data = r.json()
        assert data["result"]["payment_plan"]["term_months"] == 60
        assert "KREDİ ÖDEME PLANI" in data["report"]


class TestPaymentPlan:
    def test_plan(self):
        r = client.post("/payment-plan", json={
            "principal": 1_000_000, "annual_interest_rate": 36, "term_months": 12,
        })
        assert r.status_code == 200
        plan = r.json()
        assert len(plan["rows"]) == 12
        assert plan["rows"][0]["faiz_tutari"] == 30_000
        assert plan["rows"][-1]["kalan_anapara"] == 0

    def test_levy_overrides(self):
        r = client.post("/payment-plan", json={
            "principal": 1_000_000, "annual_interest_rate": 36, "term_months": 12,
            "bsmv_rate": 0, "kkdf_rate": 0,
        })
        assert r.json()["total_bsmv"] == 0

    def test_invalid_term(self):
        r = client.post("/payment-plan", json={
            "principal": 1_000_000, "annual_interest_rate": 36, "term_months": 0,
        })
        assert r.status_code == 422


class TestQuery:
    def test_query(self):
        r = client.post("/incentives/query", json={
            "nace_code": "10.51", "province": "Gaziantep", "district": "Şahinbey", "osb_status": "DIŞI",
        })
        assert r.status_code == 200
        data = r.json()
        assert data["location"]["region"] == 6
        assert data["sector"]["is_priority"] is True

    def test_unknown_sector(self):
        r = client.post("/incentives/query", json={"nace_code": "99.99", "province": "Ankara"})
        assert r.status_code == 404


class TestReport:
    def test_calculator_report(self, machinery_form):
        r = client.post("/report", json={"inputs": machinery_form})
        data = r.json()
        assert data["kind"] == "calculator"
        assert "DESTEK KALEMLERİ" in data["report"]

    def test_query_report(self):
        r = client.post("/report", json={"query": {"nace_code": "26.11", "province": "Ankara"}})
        data = r.json()
        assert data["kind"] == "query"
        assert "SEKTÖR BİLGİLERİ" in data["report"]

    def test_requires_exactly_one(self, machinery_form):
        assert client.post("/report", json={}).status_code == 422
        both = {"inputs": machinery_form, "query": {"nace_code": "26.11", "province": "Ankara"}}
        assert client.post("/report", json=both).status_code == 422
