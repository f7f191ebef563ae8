from datetime import date

from airtime.models import Job, Schedule

DAY = date(2030, 6, 1)


def test_schedule_board_for_a_day(client, make):
    acme = make.client()
    make.job(acme, title="Evening", slots=[(DAY, "18:00", "18:05")])
    make.job(acme, title="Morning", slots=[(DAY, "07:00", "07:05"), (date(2030, 6, 2), "07:00", "07:05")])

    res = client.get("/schedules", params={"date": "2030-06-01"})

    assert res.status_code == 200
    rows = res.json()
    assert [(r["job_title"], r["start_time"]) for r in rows] == [("Morning", "07:00"), ("Evening", "18:00")]
    assert rows[0]["client_name"] == "Acme Foods"


def test_all_schedules_in_broadcast_order(client, make):
    acme = make.client()
    make.job(acme, slots=[(date(2030, 6, 2), "07:00", "07:05"), (DAY, "20:00", "20:05")])

    rows = client.get("/schedules").json()

    assert [r["scheduled_date"] for r in rows] == ["2030-06-01", "2030-06-02"]


def test_add_slot_defaults_to_job_air_time(client, make):
    job = make.job(make.client(), air_time="12:00", duration="90 sec")

    res = client.post("/schedules", json={"job_id": job.id, "scheduled_date": "2030-06-03"})

    assert res.status_code == 201
    body = res.json()
    assert (body["start_time"], body["end_time"], body["status"]) == ("12:00", "12:02", "upcoming")


def test_cancel_schedule(client, make):
    job = make.job(make.client(), slots=[(DAY, "09:00", "09:05")])
    schedule_id = job.schedules[0].id

    res = client.post(f"/schedules/{schedule_id}/cancel")

    assert res.status_code == 200
    assert res.json()["status"] == "cancelled"


def test_completed_schedule_cannot_be_cancelled(client, make):
    job = make.job(make.client(), slots=[(DAY, "09:00", "09:05", "completed")])

    assert client.post(f"/schedules/{job.schedules[0].id}/cancel").status_code == 400


def test_manual_completion_from_the_board(client, db, make):
    job = make.job(make.client(), slots=[(DAY, "09:00", "09:05")])
    schedule_id = job.schedules[0].id

    res = client.post(f"/schedules/{schedule_id}/status", json={"status": "completed"})

    assert res.status_code == 200
    assert res.json()["status"] == "completed"
    assert res.json()["job_status"] == "completed"
    db.expire_all()
    assert db.get(Job, job.id).status == "completed"


def test_manual_in_progress_marks_slot_live(client, db, make):
    job = make.job(make.client(), slots=[(DAY, "09:00", "09:05")])
    schedule_id = job.schedules[0].id

    res = client.post(f"/schedules/{schedule_id}/status", json={"status": "in_progress"})

    assert res.json()["status"] == "live"
    assert res.json()["job_status"] == "in_progress"


def test_manual_status_only_accepts_two_values(client, make):
    job = make.job(make.client(), slots=[(DAY, "09:00", "09:05")])

    res = client.post(f"/schedules/{job.schedules[0].id}/status", json={"status": "scheduled"})

    assert res.status_code == 422


def test_advertiser_sees_only_their_slots(client, make, login_as):
    make.job(make.client(), title="Acme", slots=[(DAY, "09:00", "09:05")])
    make.job(
        make.client(name="Zenith", email="ads@zenith.ng"),
        title="Zenith",
        slots=[(DAY, "10:00", "10:05")],
    )
    login_as("adv-uid")

    rows = client.get("/schedules").json()

    assert [r["job_title"] for r in rows] == ["Acme"]


def test_advertiser_cannot_change_slots(client, db, make, login_as):
    job = make.job(make.client(), slots=[(DAY, "09:00", "09:05")])
    login_as("adv-uid")

    assert client.post(f"/schedules/{job.schedules[0].id}/cancel").status_code == 403
    db.expire_all()
    assert db.query(Schedule).one().status == "upcoming"
