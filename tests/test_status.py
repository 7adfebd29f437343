"""
Tests for the status page aggregation.
"""
from datetime import date

from seatfinder.modules.status.schemas import IncidentResponse, KeepAliveCheck
from seatfinder.modules.status.service import summarize


def check(status, pinged_at, ms=100):
    return KeepAliveCheck(status=status, pinged_at=pinged_at, response_time_ms=ms)


class TestSummarize:
    def test_no_data(self):
        summary = summarize([], [], today=date(2026, 10, 18))
        assert summary.is_up is False
        assert summary.uptime_percent == "100.00"
        assert summary.avg_response_ms == 0
        assert len(summary.last_30_days) == 30
        assert summary.last_30_days[-1].date == "2026-10-18"
        assert summary.last_30_days[0].date == "2026-09-19"

    def test_uptime_and_buckets(self):
        logs = [
            check("ok", "2026-10-18T09:00:00+00:00", 120),
            check("error", "2026-10-18T08:00:00+00:00", 900),
            check("ok", "2026-10-17T09:00:00+00:00", 60),
        ]
        summary = summarize(logs, [], today=date(2026, 10, 18))
        assert summary.is_up is True
        assert summary.last_ping_at == "2026-10-18T09:00:00+00:00"
        assert summary.uptime_percent == "66.67"
        assert summary.avg_response_ms == 360
        today, yesterday = summary.last_30_days[-1], summary.last_30_days[-2]
        assert (today.success, today.failure) == (1, 1)
        assert (yesterday.success, yesterday.failure) == (1, 0)
        assert [p.ms for p in summary.response_times] == [60, 900, 120]

    def test_latest_error_is_down(self):
        summary = summarize([check("error", "2026-10-18T09:00:00+00:00")], [], today=date(2026, 10, 18))
        assert summary.is_up is False
        assert summary.uptime_percent == "0.00"

    def test_recent_checks_capped(self):
        logs = [check("ok", f"2026-10-18T{h:02d}:00:00+00:00") for h in range(23, -1, -1)]
        assert len(summarize(logs, [], today=date(2026, 10, 18)).recent_checks) == 20

    def test_active_incidents(self):
        incidents = [
            IncidentResponse(title="DB slow", severity="minor", status="investigating", started_at="2026-10-18T08:00:00Z"),
            IncidentResponse(title="Outage", severity="major", status="resolved", started_at="2026-10-10T08:00:00Z",
                             resolved_at="2026-10-10T09:00:00Z"),
        ]
        summary = summarize([], incidents, today=date(2026, 10, 18))
        assert [i.title for i in summary.active_incidents] == ["DB slow"]
        assert len(summary.incidents) == 2


class TestStatusEndpoint:
    def test_status(self, client, fake_db):
        fake_db.add_row("keep_alive_log", {"status": "ok", "response_time_ms": 40, "pinged_at": "2026-10-17T10:00:00+00:00"})
        fake_db.add_row("keep_alive_log", {"status": "ok", "response_time_ms": 60, "pinged_at": "2026-10-18T10:00:00+00:00"})
        fake_db.add_row("incidents", {"title": "Maintenance", "severity": "minor", "status": "monitoring",
                                      "started_at": "2026-10-18T07:00:00+00:00"})
        response = client.get("/api/v1/status")
        assert response.status_code == 200
        body = response.json()
        assert body["is_up"] is True
        assert body["last_ping_at"] == "2026-10-18T10:00:00+00:00"
        assert body["uptime_percent"] == "100.00"
        assert body["avg_response_ms"] == 50
        assert body["total_checks"] == 2
        assert len(body["last_30_days"]) == 30
        assert [i["title"] for i in body["active_incidents"]] == ["Maintenance"]

    def test_status_is_public(self, client):
        assert client.get("/api/v1/status").status_code == 200
