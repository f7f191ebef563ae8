from datetime import date

from airtime.domain.jobs.repository import JobRepository
from airtime.models import Job, Schedule


def booking(client_id, **overrides):
    payload = {
        "title": "Morning Drive Jingle",
        "client_id": client_id,
        "duration": "30 sec",
        "air_time": "07:45",
        "rate": 12500,
        "description": "Weekday breakfast slot",
        "schedule_dates": ["2030-03-02", "2030-03-01", "2030-03-02"],
    }
    payload.update(overrides)
    return payload


def test_create_job_with_schedules(client, make, login_as):
    acme = make.client(owner="host-uid")
    login_as("host-uid")

    res = client.post("/jobs", json=booking(acme.id))

    assert res.status_code == 201
    body = res.json()
    assert body["schedules_created"] == 2
    assert body["schedule_errors"] == []
    assert body["message"] == "Job and 2 schedules created successfully!"
    job = body["job"]
    assert job["repeat_days"] == ["2030-03-01", "2030-03-02"]
    assert job["client_name"] == "Acme Foods"
    assert [(s["scheduled_date"], s["start_time"], s["end_time"], s["status"]) for s in job["schedules"]] == [
        ("2030-03-01", "07:45", "07:46", "upcoming"),
        ("2030-03-02", "07:45", "07:46", "upcoming"),
    ]


def test_unparseable_duration_is_rejected(client, make):
    acme = make.client()

    res = client.post("/jobs", json=booking(acme.id, duration="a little while"))

    assert res.status_code == 422


def test_day_long_duration_is_rejected(client, make):
    acme = make.client()

    res = client.post("/jobs", json=booking(acme.id, duration="1500 min"))

    assert res.status_code == 422
    assert "shorter than a day" in str(res.json()["detail"])
    assert client.get("/jobs").json() == []


def test_job_needs_at_least_one_date(client, make):
    acme = make.client()

    assert client.post("/jobs", json=booking(acme.id, schedule_dates=[])).status_code == 422


def test_partial_schedule_failure_keeps_the_job(client, db, make, monkeypatch):
    acme = make.client()
    original = JobRepository.add_schedule

    def flaky(db_, job, **data):
        if data["scheduled_date"] == date(2030, 3, 2):
            raise RuntimeError("constraint violated")
        return original(db_, job, **data)

    monkeypatch.setattr(JobRepository, "add_schedule", staticmethod(flaky))

    res = client.post("/jobs", json=booking(acme.id))

    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Job created but some schedules failed to create"
    assert body["schedules_created"] == 1
    assert body["schedule_errors"] == [
        {"date": "2030-03-02", "error": "Failed to create schedule"}
    ]
    assert db.query(Job).count() == 1
    assert db.query(Schedule).count() == 1


def test_advertisers_cannot_book(client, make, login_as):
    acme = make.client()
    login_as("adv-uid")

    assert client.post("/jobs", json=booking(acme.id)).status_code == 403


def test_unknown_client_is_not_found(client):
    assert client.post("/jobs", json=booking(999)).status_code == 404


def test_list_filters(client, make):
    acme = make.client()
    make.job(acme, title="Jingle A", owner="host-uid")
    make.job(acme, title="News Sponsor", status="completed")

    titles = lambda res: sorted(j["title"] for j in res.json())  # noqa: E731
    assert titles(client.get("/jobs")) == ["Jingle A", "News Sponsor"]
    assert titles(client.get("/jobs", params={"status": "completed"})) == ["News Sponsor"]
    assert titles(client.get("/jobs", params={"search": "jingle"})) == ["Jingle A"]
    assert titles(client.get("/jobs/completed")) == ["News Sponsor"]
    assert titles(client.get("/jobs", params={"mine": True})) == ["News Sponsor"]


def test_advertiser_sees_only_their_clients_jobs(client, make, login_as):
    mine = make.client(name="Acme Foods", email="BUYER@acme.ng")
    other = make.client(name="Zenith Drinks", email="ads@zenith.ng")
    own_job = make.job(mine, title="Acme spot")
    other_job = make.job(other, title="Zenith spot")
    login_as("adv-uid")

    assert [j["title"] for j in client.get("/jobs").json()] == ["Acme spot"]
    assert client.get(f"/jobs/{own_job.id}").status_code == 200
    assert client.get(f"/jobs/{other_job.id}").status_code == 404


def test_host_edits_only_own_jobs(client, make, login_as):
    acme = make.client()
    theirs = make.job(acme, owner="host2-uid")
    mine = make.job(acme, owner="host-uid")
    login_as("host-uid")

    assert client.put(f"/jobs/{theirs.id}", json={"title": "Hijacked"}).status_code == 403
    res = client.put(f"/jobs/{mine.id}", json={"title": "Renamed"})
    assert res.status_code == 200
    assert res.json()["title"] == "Renamed"


def test_cancelling_a_job_cancels_pending_slots(client, make):
    job = make.job(
        make.client(),
        slots=[
            (date(2030, 1, 1), "09:00", "09:05", "completed"),
            (date(2030, 1, 2), "09:00", "09:05"),
        ],
    )

    res = client.put(f"/jobs/{job.id}", json={"status": "cancelled"})

    assert res.status_code == 200
    assert [s["status"] for s in res.json()["schedules"]] == ["completed", "cancelled"]


def test_changing_air_time_moves_upcoming_slots(client, make):
    job = make.job(
        make.client(),
        slots=[
            (date(2030, 1, 1), "09:00", "09:05", "completed"),
            (date(2030, 1, 2), "09:00", "09:05"),
        ],
    )

    res = client.put(f"/jobs/{job.id}", json={"air_time": "18:30", "duration": "2 min"})

    schedules = res.json()["schedules"]
    assert (schedules[0]["start_time"], schedules[0]["end_time"]) == ("09:00", "09:05")
    assert (schedules[1]["start_time"], schedules[1]["end_time"]) == ("18:30", "18:32")


def test_delete_job_removes_schedules(client, db, make):
    job = make.job(make.client(), slots=[(date(2030, 1, 1), "09:00", "09:05")])

    assert client.delete(f"/jobs/{job.id}").status_code == 200
    assert db.query(Schedule).count() == 0


def test_invoiced_job_cannot_be_deleted(client, make):
    acme = make.client()
    job = make.job(acme, status="completed")
    make.invoice(acme, job)

    assert client.delete(f"/jobs/{job.id}").status_code == 409
