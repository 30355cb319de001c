"""
Tests for saved river endpoints: refresh, dashboard and alert rules.
"""

from datetime import date

import pytest

SITE = "05331000"


def _today_iv(value="1400"):
    day = date.today().isoformat()
    return [(f"{day}T08:00:00.000-05:00", value)]


def _add(client, headers, site=SITE, name="Mississippi River at St. Paul, MN"):
    response = client.post(
        "/api/v1/rivers",
        json={"site_number": site, "river_name": name, "location": "St. Paul, MN"},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def _set_alerts(client, headers, site=SITE, **rules):
    return client.put(f"/api/v1/rivers/alerts/{site}", json=rules, headers=headers)


class TestSavedRivers:

    def test_add_and_list(self, client, auth_headers):
        river = _add(client, auth_headers)
        assert river["flow_status"] == "No Data"
        assert river["current_flow"] == "No Data"
        assert river["flow_band"] == "unknown"

        rivers = client.get("/api/v1/rivers", headers=auth_headers).json()
        assert [r["site_number"] for r in rivers] == [SITE]

    def test_saving_same_gauge_updates_it(self, client, auth_headers):
        first = _add(client, auth_headers)
        second = _add(client, auth_headers, name="Mississippi (downtown)")

        assert second["id"] == first["id"]
        assert second["river_name"] == "Mississippi (downtown)"
        assert len(client.get("/api/v1/rivers", headers=auth_headers).json()) == 1

    def test_invalid_site_number(self, client, auth_headers):
        response = client.post(
            "/api/v1/rivers", json={"site_number": "12", "river_name": "Tiny"}, headers=auth_headers,
        )
        assert response.status_code == 422

    def test_delete_removes_alert_rules(self, client, auth_headers):
        river = _add(client, auth_headers)
        _set_alerts(client, auth_headers, high={"enabled": True, "threshold_cfs": 1000})

        assert client.delete(f"/api/v1/rivers/{river['id']}", headers=auth_headers).status_code == 204

        config = client.get(f"/api/v1/rivers/alerts/{SITE}", headers=auth_headers).json()
        assert config["high"] is None
        assert client.get("/api/v1/rivers", headers=auth_headers).json() == []

    def test_unknown_river(self, client, auth_headers):
        assert client.post("/api/v1/rivers/999/refresh", headers=auth_headers).status_code == 404


class TestRefresh:

    def test_refresh_one(self, client, auth_headers, fake_usgs):
        river = _add(client, auth_headers)
        fake_usgs.iv = _today_iv("1400.4")

        response = client.post(f"/api/v1/rivers/{river['id']}/refresh", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["river"]["flow_status"] == "Active"
        assert data["river"]["current_flow_cfs"] == 1400.0
        assert data["river"]["current_flow"] == "1400 CFS"
        assert data["river"]["flow_band"] == "high"
        assert data["trend"] == 0
        assert data["alerts"] == []

    def test_trend_against_previous_reading(self, client, auth_headers, fake_usgs):
        river = _add(client, auth_headers)
        fake_usgs.iv = _today_iv("1000")
        client.post(f"/api/v1/rivers/{river['id']}/refresh", headers=auth_headers)

        fake_usgs.iv = _today_iv("800")
        data = client.post(f"/api/v1/rivers/{river['id']}/refresh", headers=auth_headers).json()
        assert data["trend"] == -1

    def test_upstream_failure_marks_error(self, client, auth_headers, fake_usgs):
        river = _add(client, auth_headers)
        _set_alerts(client, auth_headers, low={"enabled": True, "threshold_cfs": 1e9})
        fake_usgs.status = 503

        data = client.post(f"/api/v1/rivers/{river['id']}/refresh", headers=auth_headers).json()

        assert data["river"]["flow_status"] == "Error"
        assert data["river"]["current_flow"] == "Error"
        assert data["alerts"] == []

    def test_alert_fires_once_per_cooldown(self, client, auth_headers, fake_usgs):
        river = _add(client, auth_headers)
        _set_alerts(client, auth_headers, high={"enabled": True, "threshold_cfs": 1000})
        fake_usgs.iv = _today_iv("1500")

        first = client.post(f"/api/v1/rivers/{river['id']}/refresh", headers=auth_headers).json()
        assert [a["kind"] for a in first["alerts"]] == ["high"]
        assert first["alerts"][0]["severity"] == "warning"

        second = client.post(f"/api/v1/rivers/{river['id']}/refresh", headers=auth_headers).json()
        assert second["alerts"] == []

        config = client.get(f"/api/v1/rivers/alerts/{SITE}", headers=auth_headers).json()
        assert config["high"]["last_triggered_at"] is not None

    def test_refresh_all(self, client, auth_headers, fake_usgs):
        _add(client, auth_headers, site="05331000")
        _add(client, auth_headers, site="09380000", name="Colorado River at Lees Ferry, AZ")
        _set_alerts(client, auth_headers, site="09380000", flood={"enabled": True, "threshold_cfs": 5000})
        fake_usgs.iv = _today_iv("6000")

        response = client.post("/api/v1/rivers/refresh", headers=auth_headers)

        assert response.status_code == 200
        results = response.json()
        assert [r["river"]["site_number"] for r in results] == ["05331000", "09380000"]
        assert results[0]["alerts"] == []
        assert results[1]["alerts"][0]["severity"] == "critical"

    def test_dashboard(self, client, auth_headers, fake_usgs):
        _add(client, auth_headers, site="05331000")
        _add(client, auth_headers, site="09380000")
        empty = client.get("/api/v1/rivers/dashboard", headers=auth_headers).json()
        assert empty["total_rivers"] == 2
        assert empty["average_flow_cfs"] is None

        fake_usgs.iv = _today_iv("50")
        client.post("/api/v1/rivers/refresh", headers=auth_headers)

        stats = client.get("/api/v1/rivers/dashboard", headers=auth_headers).json()
        assert stats["average_flow_cfs"] == 50
        assert stats["alert_count"] == 2
        assert stats["last_updated_at"] is not None

    def test_hourly(self, client, auth_headers, fake_usgs):
        river = _add(client, auth_headers)
        fake_usgs.iv = _today_iv("1400")

        data = client.get(f"/api/v1/rivers/{river['id']}/hourly", headers=auth_headers).json()

        assert data["date"] == date.today().isoformat()
        assert data["readings"][8]["flow"] == 1400.0
        assert len(data["readings"]) == 24


class TestAlertConfig:

    def test_set_and_get(self, client, auth_headers):
        response = _set_alerts(
            client, auth_headers,
            high={"enabled": True, "threshold_cfs": 2000},
            low={"enabled": False, "threshold_cfs": 100},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["high"]["threshold_cfs"] == 2000
        assert data["low"] is None
        assert data["flood"] is None

        fetched = client.get(f"/api/v1/rivers/alerts/{SITE}", headers=auth_headers).json()
        assert fetched["high"]["enabled"] is True

    def test_omitting_a_kind_removes_it(self, client, auth_headers):
        _set_alerts(client, auth_headers, high={"enabled": True, "threshold_cfs": 2000})
        _set_alerts(client, auth_headers, flood={"enabled": True, "threshold_cfs": 8000})

        fetched = client.get(f"/api/v1/rivers/alerts/{SITE}", headers=auth_headers).json()
        assert fetched["high"] is None
        assert fetched["flood"]["threshold_cfs"] == 8000

    @pytest.mark.parametrize("rule", [
        {"enabled": True},
        {"enabled": True, "threshold_cfs": -5},
    ])
    def test_invalid_rule(self, client, auth_headers, rule):
        assert _set_alerts(client, auth_headers, high=rule).status_code == 422

    def test_invalid_site_number(self, client, auth_headers):
        assert client.get("/api/v1/rivers/alerts/abc", headers=auth_headers).status_code == 400
