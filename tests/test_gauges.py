"""
Tests for reference gauge search.
"""

import pytest

from fishlog.services.gauges import REFERENCE_GAUGES, search_gauges


def test_reference_gauges_are_unique():
    site_numbers = [g.site_number for g in REFERENCE_GAUGES]
    assert len(site_numbers) == len(set(site_numbers))
    assert all(s.isdigit() and len(s) >= 8 for s in site_numbers)


@pytest.mark.parametrize("query", ["", "a", "co", "  x "])
def test_short_queries_return_nothing(query):
    assert search_gauges(query) == []


def test_search_is_case_insensitive():
    results = search_gauges("COLORADO")
    assert results
    assert all("colorado" in g.display_name.lower() for g in results)


def test_search_by_site_number_prefix():
    assert [g.site_number for g in search_gauges("0938")] == ["09380000"]


def test_results_are_capped():
    assert len(search_gauges("river")) == 10
    assert len(search_gauges("river", limit=3)) == 3


def test_search_endpoint(client):
    response = client.get("/api/v1/gauges/search", params={"q": "yellowstone"})
    assert response.status_code == 200
    data = response.json()
    assert data[0]["site_number"] == "06191500"
    assert data[0]["state"] == "MT"


def test_search_endpoint_limit_bounds(client):
    assert client.get("/api/v1/gauges/search", params={"q": "river", "limit": 0}).status_code == 422
    assert client.get("/api/v1/gauges/search", params={"q": "ri"}).json() == []
