"""
Tests for the conditions endpoints (moon phase, flow, weather).
"""

from datetime import date, timedelta

import pytest


def _yesterday():
    return date.today() - timedelta(days=1)


def test_moon_phase(client, auth_headers):
    response = client.get("/api/v1/conditions/moon-phase", params={"date": "2024-07-21"}, headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Full Moon"
    assert data["emoji"] == "🌕"
    assert data["illumination_percent"] == 97
    assert data["label"] == "🌕 Full Moon (97%)"


@pytest.mark.parametrize("params", [{}, {"date": ""}, {"date": "07/21/2024"}, {"date": "2024-02-30"}])
def test_moon_phase_bad_date(client, auth_headers, params):
    response = client.get("/api/v1/conditions/moon-phase", params=params, headers=auth_headers)
    assert response.status_code == 400


def test_flow(client, auth_headers, fake_usgs):
    day = _yesterday().isoformat()
    fake_usgs.iv = [
        (f"{day}T00:00:00.000-05:00", "1400"),
        (f"{day}T00:15:00.000-05:00", "1420"),
        (f"{day}T00:30:00.000-05:00", "1380"),
    ]
    response = client.get(
        "/api/v1/conditions/flow",
        params={"site_number": "05331000", "date": day},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["flow_cfs"] == 1400.0
    assert data["display"] == "1400 CFS"
    assert data["no_data"] is False
    assert data["simulated"] is False


def test_flow_no_data(client, auth_headers, fake_usgs):
    day = _yesterday().isoformat()
    response = client.get(
        "/api/v1/conditions/flow",
        params={"site_number": "05331000", "date": day},
        headers=auth_headers,
    )
    data = response.json()
    assert data["no_data"] is True
    assert data["flow_cfs"] is None
    assert data["display"] == f"No data for {day}"


def test_flow_simulated_when_usgs_down(client, auth_headers, fake_usgs):
    fake_usgs.status = 503
    response = client.get(
        "/api/v1/conditions/flow",
        params={"site_number": "05331000", "date": _yesterday().isoformat()},
        headers=auth_headers,
    )
    data = response.json()
    assert data["simulated"] is True
    assert data["display"].endswith("(simulated)")


@pytest.mark.parametrize("params", [
    {"date": "2024-07-04"},
    {"site_number": "", "date": "2024-07-04"},
    {"site_number": "abc", "date": "2024-07-04"},
    {"site_number": "05331000"},
])
def test_flow_missing_inputs_make_no_upstream_call(client, auth_headers, fake_usgs, params):
    response = client.get("/api/v1/conditions/flow", params=params, headers=auth_headers)
    assert response.status_code == 400
    assert fake_usgs.requests == []


def test_hourly_flow(client, auth_headers, fake_usgs):
    day = _yesterday().isoformat()
    fake_usgs.iv = [(f"{day}T06:05:00.000-05:00", "800"), (f"{day}T06:20:00.000-05:00", "900")]
    response = client.get(
        "/api/v1/conditions/flow/hourly",
        params={"site_number": "05331000", "date": day},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "instantaneous"
    assert len(data["readings"]) == 24
    assert data["readings"][6] == {"time": "06:00", "flow": 850.0}
    assert data["readings"][7]["flow"] is None


def test_hourly_flow_old_date(client, auth_headers, fake_usgs):
    day = (date.today() - timedelta(days=400)).isoformat()
    fake_usgs.dv = [(day, "850.5")]
    response = client.get(
        "/api/v1/conditions/flow/hourly",
        params={"site_number": "05331000", "date": day},
        headers=auth_headers,
    )
    data = response.json()
    assert data["source"] == "daily_mean"
    assert {r["flow"] for r in data["readings"]} == {850.5}


def test_weather_simulated_without_api_key(client, auth_headers):
    response = client.get(
        "/api/v1/conditions/weather",
        params={"latitude": 44.95, "longitude": -93.09, "date": "2024-07-04"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["simulated"] is True
    assert 10 <= data["air_temp"] <= 105


@pytest.mark.parametrize("params", [{}, {"latitude": 44.9}, {"latitude": 95, "longitude": 0}])
def test_weather_requires_valid_coordinates(client, auth_headers, params):
    response = client.get("/api/v1/conditions/weather", params=params, headers=auth_headers)
    assert response.status_code == 400
