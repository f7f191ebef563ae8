from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest

from airtime.domain.analytics.service import (
    period_start,
    revenue_by_month,
    summarize,
    top_clients,
)


def job(status, rate, client="Acme"):
    return SimpleNamespace(status=status, rate=rate, client=SimpleNamespace(name=client))


def invoice(amount, status="pending", created_at=datetime(2024, 5, 3)):
    return SimpleNamespace(total_amount=amount, status=status, created_at=created_at)


@pytest.mark.parametrize(
    "period,expected",
    [
        ("week", date(2024, 5, 13)),
        ("month", date(2024, 5, 1)),
        ("quarter", date(2024, 4, 1)),
        ("year", date(2024, 1, 1)),
    ],
)
def test_period_start(period, expected):
    # 2024-05-15 is a Wednesday
    assert period_start(period, today=date(2024, 5, 15)) == expected


def test_revenue_by_month_newest_first():
    rows = revenue_by_month(
        [
            invoice(100, created_at=datetime(2024, 1, 5)),
            invoice(250, created_at=datetime(2024, 3, 9)),
            invoice(50, created_at=datetime(2024, 3, 20)),
            invoice(75, created_at=datetime(2023, 12, 31)),
        ]
    )

    assert rows == [
        {"month": "March 2024", "amount": 300},
        {"month": "January 2024", "amount": 100},
        {"month": "December 2023", "amount": 75},
    ]


def test_top_clients_ranked_by_job_rate():
    jobs = [job("completed", 500, f"Client {i}") for i in range(6)]
    jobs.append(job("scheduled", 900, "Client 3"))
    jobs.append(SimpleNamespace(status="scheduled", rate=10, client=None))

    ranked = top_clients(jobs)

    assert len(ranked) == 5
    assert ranked[0] == {"client": "Client 3", "revenue": 1400}
    assert all(row["client"] != "Unknown Client" for row in ranked)


def test_summarize():
    report = summarize(
        [job("completed", 1000), job("completed", 3000), job("scheduled", 2000), job("cancelled", 0)],
        [invoice(4000, "paid"), invoice(2000), invoice(500, "overdue")],
    )

    assert report["total_revenue"] == 6500
    assert report["total_jobs"] == 4
    assert report["completed_jobs"] == 2
    assert report["pending_invoices"] == 1
    assert report["average_job_value"] == 1500
    assert report["completion_rate"] == 50
    assert report["payment_rate"] == pytest.approx(33.333, rel=1e-3)
    assert {"status": "completed", "count": 2} in report["jobs_by_status"]


def test_summarize_without_rows():
    report = summarize([], [])

    assert report["average_job_value"] == 0
    assert report["completion_rate"] == 0
    assert report["payment_rate"] == 0
    assert report["revenue_by_month"] == []


def test_dashboard(client, make):
    tomorrow = date.today() + timedelta(days=1)
    acme = make.client()
    make.job(acme, title="Done", rate=1000.0, status="completed")
    make.job(acme, title="On air", rate=500.0, status="in_progress")
    make.job(acme, title="Next week", slots=[(tomorrow, "08:00", "08:05"), (tomorrow, "07:00", "07:05")])
    make.job(acme, title="Old", slots=[(date(2020, 1, 1), "08:00", "08:05", "completed")])

    res = client.get("/dashboard")

    assert res.status_code == 200
    body = res.json()
    assert body["total_revenue"] == 1000.0
    assert body["total_jobs"] == 4
    assert body["active_jobs"] == 1
    assert body["upcoming_schedules"] == 2
    assert len(body["recent_jobs"]) == 4
    assert [s["start_time"] for s in body["next_schedules"]] == ["07:00", "08:00"]
    assert body["next_schedules"][0]["client_name"] == "Acme Foods"


def test_analytics_covers_only_the_callers_rows(client, db, make, login_as):
    acme = make.client()
    mine = make.job(acme, owner="host-uid", status="completed", rate=3000.0)
    make.job(acme, owner="host2-uid", rate=9999.0)
    make.invoice(acme, mine, amount=3000.0, owner="host-uid", status="paid")
    login_as("host-uid")

    res = client.get("/analytics", params={"period": "year"})

    assert res.status_code == 200
    body = res.json()
    assert body["period"] == "year"
    assert body["total_jobs"] == 1
    assert body["completion_rate"] == 100
    assert body["total_revenue"] == 3000.0
    assert body["payment_rate"] == 100
    assert body["top_clients"] == [{"client": "Acme Foods", "revenue": 3000.0}]


def test_analytics_rejects_unknown_period(client):
    assert client.get("/analytics", params={"period": "decade"}).status_code == 422
