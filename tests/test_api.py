"""
Tests for calculator API endpoints.
"""

import pytest

from fincalc.config import get_settings


class TestHealth:
    """Test service endpoints."""

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestEmiAPI:
    """Test EMI endpoint."""

    def test_emi(self, client):
        response = client.post(
            "/api/calculate/emi",
            json={"principal": 1000000, "annual_rate_pct": 9, "tenure_months": 120},
        )
        assert response.status_code == 200
        data = response.json()
        assert 12667 < data["payment"] < 12668
        assert len(data["schedule"]) == 120
        assert data["schedule"][-1]["closing_balance"] == 0

    def test_emi_invalid_principal(self, client):
        response = client.post(
            "/api/calculate/emi",
            json={"principal": 0, "annual_rate_pct": 9, "tenure_months": 120},
        )
        assert response.status_code == 400
        assert "principal" in response.json()["detail"]

    def test_emi_tenure_limit(self, client):
        limit = get_settings().max_tenure_months
        response = client.post(
            "/api/calculate/emi",
            json={"principal": 100000, "annual_rate_pct": 9, "tenure_months": limit + 1},
        )
        assert response.status_code == 400

    def test_emi_missing_field(self, client):
        response = client.post("/api/calculate/emi", json={"principal": 100000})
        assert response.status_code == 422


class TestGrowthAPI:
    """Test projection endpoints."""

    def test_sip(self, client):
        response = client.post(
            "/api/calculate/sip",
            json={"monthly_amount": 10000, "annual_rate_pct": 12, "years": 15},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_invested"] == 1800000
        assert len(data["series"]) == 15

    def test_sip_monthly_series(self, client):
        response = client.post(
            "/api/calculate/sip",
            json={
                "monthly_amount": 1000,
                "annual_rate_pct": 12,
                "years": 2,
                "frequency": "monthly",
            },
        )
        assert response.status_code == 200
        assert len(response.json()["series"]) == 24

    def test_unknown_frequency(self, client):
        response = client.post(
            "/api/calculate/sip",
            json={
                "monthly_amount": 1000,
                "annual_rate_pct": 12,
                "years": 2,
                "frequency": "weekly",
            },
        )
        assert response.status_code == 400

    def test_years_limit(self, client):
        limit = get_settings().max_projection_years
        response = client.post(
            "/api/calculate/sip",
            json={"monthly_amount": 1000, "annual_rate_pct": 12, "years": limit + 1},
        )
        assert response.status_code == 400

    def test_lumpsum(self, client):
        response = client.post(
            "/api/calculate/lumpsum",
            json={"principal": 500000, "annual_rate_pct": 12, "years": 10},
        )
        assert response.status_code == 200
        assert response.json()["future_value"] == pytest.approx(500000 * 1.01 ** 120)

    def test_lumpsum_annual_compounding(self, client):
        response = client.post(
            "/api/calculate/lumpsum",
            json={
                "principal": 500000,
                "annual_rate_pct": 12,
                "years": 10,
                "compounding_per_year": 1,
            },
        )
        assert response.status_code == 200
        assert response.json()["future_value"] == pytest.approx(500000 * 1.12 ** 10)

    def test_fixed_deposit_defaults_to_quarterly(self, client):
        response = client.post(
            "/api/calculate/fixed-deposit",
            json={"principal": 100000, "annual_rate_pct": 7, "years": 5},
        )
        assert response.status_code == 200
        assert response.json()["future_value"] == pytest.approx(100000 * 1.0175 ** 20)

    def test_recurring_deposit(self, client):
        response = client.post(
            "/api/calculate/recurring-deposit",
            json={"monthly_amount": 5000, "annual_rate_pct": 7, "years": 5},
        )
        assert response.status_code == 200
        assert response.json()["total_invested"] == 300000

    def test_ppf(self, client):
        response = client.post(
            "/api/calculate/ppf",
            json={"monthly_amount": 12500, "annual_rate_pct": 7.1, "years": 15},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_invested"] == 12500 * 180
        assert data["maturity"] > data["total_invested"]

    def test_ppf_negative_rate(self, client):
        response = client.post(
            "/api/calculate/ppf",
            json={"monthly_amount": 12500, "annual_rate_pct": -1, "years": 15},
        )
        assert response.status_code == 400

    def test_step_up_sip(self, client):
        response = client.post(
            "/api/calculate/step-up-sip",
            json={
                "monthly_amount": 10000,
                "annual_rate_pct": 12,
                "years": 15,
                "step_up_pct": 10,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_invested"] > 1800000

    def test_pension(self, client):
        response = client.post(
            "/api/calculate/pension",
            json={
                "monthly_amount": 5000,
                "years": 25,
                "annual_rate_pct": 10,
                "annuity_rate_pct": 6,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["annuity_corpus"] == pytest.approx(data["corpus"] * 0.6)
        assert data["estimated_monthly_pension"] > 0


class TestGoalAPI:
    """Test goal planner endpoint."""

    def test_goal(self, client):
        response = client.post(
            "/api/calculate/goal",
            json={"goal_today": 5000000, "years": 10, "inflation_pct": 6, "return_pct": 12},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["inflated_goal"] == pytest.approx(5000000 * 1.06 ** 10)
        assert data["required_sip"] > 0
        assert data["required_lumpsum"] < data["inflated_goal"]
        assert len(data["series"]) == 10
        assert data["series"][-1]["required_corpus"] == pytest.approx(data["inflated_goal"])

    def test_goal_rate_below_minus_100(self, client):
        response = client.post(
            "/api/calculate/goal",
            json={"goal_today": 5000000, "years": 10, "inflation_pct": -150, "return_pct": 12},
        )
        assert response.status_code == 400


class TestSwpAPI:
    """Test withdrawal simulation endpoint."""

    def test_swp_depletes(self, client):
        response = client.post(
            "/api/calculate/swp",
            json={
                "corpus": 1000000,
                "monthly_withdrawal": 15000,
                "annual_rate_pct": 10,
                "years": 20,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["depleted"] is True
        assert data["survives_horizon"] is False
        assert data["months_survived"] < 240

    def test_swp_survives(self, client):
        response = client.post(
            "/api/calculate/swp",
            json={
                "corpus": 1000000,
                "monthly_withdrawal": 5000,
                "annual_rate_pct": 10,
                "years": 20,
            },
        )
        assert response.status_code == 200
        assert response.json()["survives_horizon"] is True


class TestXirrAPI:
    """Test XIRR endpoint."""

    def test_xirr(self, client):
        response = client.post(
            "/api/calculate/xirr",
            json={
                "cash_flows": [
                    {"date": "2025-01-01", "amount": -100000},
                    {"date": "2026-01-01", "amount": 112000},
                ]
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "converged"
        assert data["rate_percent"] == pytest.approx(12.0, abs=1e-5)

    def test_xirr_same_sign_is_not_an_error(self, client):
        response = client.post(
            "/api/calculate/xirr",
            json={
                "cash_flows": [
                    {"date": "2025-01-01", "amount": -100},
                    {"date": "2025-06-01", "amount": -50},
                ]
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "insufficient_sign_variation"
        assert data["rate"] is None

    def test_xirr_non_convergent(self, client):
        response = client.post(
            "/api/calculate/xirr",
            json={
                "cash_flows": [
                    {"date": "2025-01-01", "amount": -100},
                    {"date": "2025-01-01", "amount": 50},
                ]
            },
        )
        assert response.status_code == 200
        assert response.json()["status"] == "non_convergent"

    def test_xirr_empty(self, client):
        response = client.post("/api/calculate/xirr", json={"cash_flows": []})
        assert response.status_code == 400

    def test_xirr_cash_flow_limit(self, client):
        limit = get_settings().max_cash_flows
        flows = [{"date": "2025-01-01", "amount": -1}] * (limit + 1)
        response = client.post("/api/calculate/xirr", json={"cash_flows": flows})
        assert response.status_code == 400
