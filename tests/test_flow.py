"""
Tests for flow resolution: service selection, aggregation and fallbacks.
"""

from datetime import date, datetime, timedelta

import pytest

from fishlog.services.flow import FlowValue, HOUR_LABELS, bucket_hourly
from fishlog.services.usgs import UpstreamUnavailable

NOW = datetime(2024, 7, 5, 12, 0)
SITE = "05331000"


def _paths(fake):
    return [r.url.path for r in fake.requests]


class TestResolveFlow:

    async def test_recent_date_averages_instantaneous_readings(self, fake_usgs):
        fake_usgs.iv = [
            ("2024-07-04T00:00:00.000-05:00", "1400"),
            ("2024-07-04T00:15:00.000-05:00", "1420"),
            ("2024-07-04T00:30:00.000-05:00", "1380"),
        ]
        flow = await fake_usgs.resolver(now=NOW).resolve_flow(SITE, date(2024, 7, 4))

        assert flow.flow_cfs == 1400.0
        assert not flow.simulated
        assert flow.display(date(2024, 7, 4)) == "1400 CFS"
        params = fake_usgs.requests[0].url.params
        assert params["startDT"] == params["endDT"] == "2024-07-04"

    async def test_invalid_readings_are_ignored(self, fake_usgs):
        fake_usgs.iv = [
            ("2024-07-04T00:00:00.000-05:00", "1000"),
            ("2024-07-04T00:15:00.000-05:00", "Ice"),
            ("2024-07-04T00:30:00.000-05:00", "-999999"),
            ("2024-07-04T00:45:00.000-05:00", "2000"),
        ]
        flow = await fake_usgs.resolver(now=NOW).resolve_flow(SITE, date(2024, 7, 4))
        assert flow.flow_cfs == 1500.0

    @pytest.mark.parametrize("days_back,expected_service", [
        (0, "/nwis/iv/"),
        (3, "/nwis/iv/"),
        (4, "/nwis/dv/"),
        (200, "/nwis/dv/"),
    ])
    async def test_service_selection_window(self, fake_usgs, days_back, expected_service):
        fake_usgs.iv = [("2024-07-05T00:00:00.000-05:00", "10")]
        fake_usgs.dv = [("2024-01-01", "10")]
        on = NOW.date() - timedelta(days=days_back)

        await fake_usgs.resolver(now=NOW).resolve_flow(SITE, on)

        assert _paths(fake_usgs)[0].endswith(expected_service)

    async def test_old_date_uses_daily_mean(self, fake_usgs):
        on = NOW.date() - timedelta(days=200)
        fake_usgs.dv = [(on.isoformat(), "850.5")]

        flow = await fake_usgs.resolver(now=NOW).resolve_flow(SITE, on)

        assert flow.flow_cfs == 850.5
        assert fake_usgs.requests[0].url.params["statCd"] == "00003"

    async def test_empty_series_is_no_data(self, fake_usgs):
        flow = await fake_usgs.resolver(now=NOW).resolve_flow(SITE, date(2024, 7, 4))
        assert flow.no_data
        assert flow.display(date(2024, 7, 4)) == "No data for 2024-07-04"

    async def test_only_invalid_readings_is_no_data(self, fake_usgs):
        fake_usgs.dv = [("2023-01-01", "Eqp")]
        flow = await fake_usgs.resolver(now=NOW).resolve_flow(SITE, date(2023, 1, 1))
        assert flow.no_data

    async def test_upstream_failure_propagates(self, fake_usgs):
        fake_usgs.status = 503
        with pytest.raises(UpstreamUnavailable):
            await fake_usgs.resolver(now=NOW).resolve_flow(SITE, date(2024, 7, 4))

    async def test_upstream_failure_can_be_simulated(self, fake_usgs):
        fake_usgs.fail = True
        flow = await fake_usgs.resolver(now=NOW).resolve_flow_or_simulate(SITE, date(2024, 7, 4))

        assert flow.simulated
        assert flow.flow_cfs >= 50
        assert flow.display(date(2024, 7, 4)).endswith("CFS (simulated)")

    async def test_no_data_is_not_simulated(self, fake_usgs):
        flow = await fake_usgs.resolver(now=NOW).resolve_flow_or_simulate(SITE, date(2024, 7, 4))
        assert flow.no_data
        assert not flow.simulated


class TestFlowValue:

    @pytest.mark.parametrize("value,text", [
        (FlowValue(1400.4), "1400 CFS"),
        (FlowValue(1400.6), "1401 CFS"),
        (FlowValue(512.0, simulated=True), "512 CFS (simulated)"),
        (FlowValue(None), "No data for 2024-07-04"),
    ])
    def test_display(self, value, text):
        assert value.display(date(2024, 7, 4)) == text


class TestBucketHourly:

    def test_readings_average_within_their_hour(self):
        readings = bucket_hourly([
            {"dateTime": "2024-07-04T00:00:00.000-05:00", "value": "100"},
            {"dateTime": "2024-07-04T00:15:00.000-05:00", "value": "200"},
            {"dateTime": "2024-07-04T13:45:00.000-05:00", "value": "50.5"},
        ])

        assert [r.time for r in readings] == HOUR_LABELS
        assert readings[0].flow == 150.0
        assert readings[13].flow == 50.5
        assert readings[1].flow is None

    def test_hour_taken_from_reported_offset(self):
        readings = bucket_hourly([
            {"dateTime": "2024-07-04T22:30:00.000-07:00", "value": "300"},
        ])
        assert readings[22].flow == 300.0

    def test_no_points_gives_24_empty_hours(self):
        readings = bucket_hourly([])
        assert len(readings) == 24
        assert all(r.flow is None for r in readings)


class TestResolveHourlySeries:

    async def test_recent_date_uses_instantaneous_day_range(self, fake_usgs):
        fake_usgs.iv = [("2024-07-04T05:15:00.000-05:00", "1400")]

        series = await fake_usgs.resolver(now=NOW).resolve_hourly_series(SITE, date(2024, 7, 4))

        params = fake_usgs.requests[0].url.params
        assert params["startDT"] == "2024-07-04T00:00"
        assert params["endDT"] == "2024-07-04T23:59"
        assert series.source == "instantaneous"
        assert not series.simulated
        assert len(series.readings) == 24
        assert series.readings[5].flow == 1400.0

    @pytest.mark.parametrize("days_back,expected_service", [
        (120, "/nwis/iv/"),
        (121, "/nwis/dv/"),
    ])
    async def test_hourly_window_boundary(self, fake_usgs, days_back, expected_service):
        on = NOW.date() - timedelta(days=days_back)
        await fake_usgs.resolver(now=NOW).resolve_hourly_series(SITE, on)
        assert _paths(fake_usgs)[0].endswith(expected_service)

    async def test_old_date_broadcasts_daily_mean(self, fake_usgs):
        on = NOW.date() - timedelta(days=200)
        fake_usgs.dv = [(on.isoformat(), "850.5")]

        series = await fake_usgs.resolver(now=NOW).resolve_hourly_series(SITE, on)

        assert series.source == "daily_mean"
        assert [r.flow for r in series.readings] == [850.5] * 24
        assert [r.time for r in series.readings] == HOUR_LABELS

    async def test_old_date_without_mean_is_empty(self, fake_usgs):
        on = NOW.date() - timedelta(days=200)
        series = await fake_usgs.resolver(now=NOW).resolve_hourly_series(SITE, on)
        assert [r.flow for r in series.readings] == [None] * 24
        assert not series.simulated

    async def test_upstream_failure_gives_flagged_simulation(self, fake_usgs):
        fake_usgs.status = 500
        series = await fake_usgs.resolver(now=NOW).resolve_hourly_series(SITE, date(2024, 7, 4))

        assert series.simulated
        assert series.source == "simulated"
        assert len(series.readings) == 24
        assert len({r.flow for r in series.readings}) == 1
