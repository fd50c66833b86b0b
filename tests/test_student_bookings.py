from datetime import date, timedelta

import pytest

from app.core.enums import BookingStatus, CancelledBy
from app.db.models.booking import Booking


def _payload(professor, taxonomy, day, **overrides):
    body = {
        "professor_id": professor.id,
        "subject_id": taxonomy["maths"].id,
        "level_id": taxonomy["lycee"].id,
        "date": day.isoformat(),
        "start_time": "14:00",
        "duration": 90,
        "notes": "Préparation du bac",
    }
    body.update(overrides)
    return body


def test_create_booking_computes_price_and_end_time(client, db, student, professor, taxonomy, next_week, auth_headers):
    res = client.post(
        "/student/bookings",
        json=_payload(professor, taxonomy, next_week),
        headers=auth_headers(student),
    )
    assert res.status_code == 201
    data = res.json()
    assert data["flash"]["success"].startswith("Réservation créée avec succès")
    booking = data["booking"]
    assert data["redirect_to"] == f"/student/bookings/{booking['id']}"
    assert booking["total_price"] == 60.0
    assert booking["end_time"] == "15:30:00"
    assert booking["status"] == "pending"
    assert booking["payment_status"] == "pending"
    assert booking["booking_type"] == "student_direct"
    assert booking["student_id"] == student.id


def test_create_booking_wrapping_midnight_keeps_time_only(client, student, professor, taxonomy, next_week, auth_headers):
    res = client.post(
        "/student/bookings",
        json=_payload(professor, taxonomy, next_week, start_time="23:30", duration=60),
        headers=auth_headers(student),
    )
    assert res.status_code == 201
    booking = res.json()["booking"]
    assert booking["end_time"] == "00:30:00"
    assert booking["date"] == next_week.isoformat()

    detail = client.get(f"/student/bookings/{booking['id']}", headers=auth_headers(student)).json()
    assert detail["ends_next_day"] is True


@pytest.mark.parametrize("duration,expected_status", [(29, 422), (30, 201), (240, 201), (241, 422)])
def test_duration_bounds(client, student, professor, taxonomy, next_week, auth_headers, duration, expected_status):
    res = client.post(
        "/student/bookings",
        json=_payload(professor, taxonomy, next_week, duration=duration),
        headers=auth_headers(student),
    )
    assert res.status_code == expected_status


def test_date_must_be_after_today(client, db, student, professor, taxonomy, auth_headers):
    res = client.post(
        "/student/bookings",
        json=_payload(professor, taxonomy, date.today()),
        headers=auth_headers(student),
    )
    assert res.status_code == 422
    assert any(f["field"] == "date" for f in res.json()["details"]["fields"])
    assert db.query(Booking).count() == 0


def test_unknown_professor_is_404(client, student, professor, taxonomy, next_week, auth_headers):
    body = _payload(professor, taxonomy, next_week, professor_id=9999)
    res = client.post("/student/bookings", json=body, headers=auth_headers(student))
    assert res.status_code == 404


def test_unknown_subject_is_field_error(client, student, professor, taxonomy, next_week, auth_headers):
    body = _payload(professor, taxonomy, next_week, subject_id=9999)
    res = client.post("/student/bookings", json=body, headers=auth_headers(student))
    assert res.status_code == 422
    assert res.json()["details"]["fields"][0]["field"] == "subject_id"


def test_parent_cannot_use_student_booking_route(client, parent, professor, taxonomy, next_week, auth_headers):
    res = client.post("/student/bookings", json=_payload(professor, taxonomy, next_week), headers=auth_headers(parent))
    assert res.status_code == 403


def test_requires_authentication(client, professor, taxonomy, next_week):
    res = client.post("/student/bookings", json=_payload(professor, taxonomy, next_week))
    assert res.status_code == 401


def test_update_recomputes_and_resets_to_pending(client, db, student, professor, taxonomy, make_booking, next_week, auth_headers):
    booking = make_booking(professor, student, status=BookingStatus.CONFIRMED)
    later = next_week + timedelta(days=2)
    res = client.put(
        f"/student/bookings/{booking.id}",
        json={
            "subject_id": taxonomy["physique"].id,
            "level_id": taxonomy["college"].id,
            "date": later.isoformat(),
            "start_time": "10:15",
            "duration": 45,
            "notes": "Changement d'horaire",
        },
        headers=auth_headers(student),
    )
    assert res.status_code == 200
    data = res.json()["booking"]
    assert data["status"] == "pending"
    assert data["total_price"] == 30.0
    assert data["end_time"] == "11:00:00"
    assert data["subject_id"] == taxonomy["physique"].id


def test_update_other_students_booking_is_403(client, student, other_student, professor, make_booking, taxonomy, next_week, auth_headers):
    booking = make_booking(professor, other_student)
    body = _payload(professor, taxonomy, next_week)
    body.pop("professor_id")
    res = client.put(f"/student/bookings/{booking.id}", json=body, headers=auth_headers(student))
    assert res.status_code == 403


@pytest.mark.parametrize("start_status", [BookingStatus.PENDING, BookingStatus.CONFIRMED])
def test_cancel_from_open_status(client, db, student, professor, make_booking, auth_headers, start_status):
    booking = make_booking(professor, student, status=start_status)
    res = client.post(f"/student/bookings/{booking.id}/cancel", headers=auth_headers(student))
    assert res.status_code == 200
    assert res.json()["flash"]["success"] == "Réservation annulée avec succès."

    db.refresh(booking)
    assert booking.status == BookingStatus.CANCELLED
    assert booking.cancelled_by == CancelledBy.STUDENT
    assert booking.cancelled_at is not None


@pytest.mark.parametrize("start_status", [BookingStatus.COMPLETED, BookingStatus.CANCELLED])
def test_cancel_closed_booking_is_refused(client, db, student, professor, make_booking, auth_headers, start_status):
    booking = make_booking(professor, student, status=start_status)
    res = client.post(f"/student/bookings/{booking.id}/cancel", headers=auth_headers(student))
    assert res.status_code == 400
    assert res.json()["flash"]["error"] == "Cette réservation ne peut pas être annulée."

    db.refresh(booking)
    assert booking.status == start_status
    assert booking.cancelled_at is None


def test_list_is_paginated_newest_first(client, student, other_student, professor, make_booking, auth_headers):
    ids = [make_booking(professor, student).id for _ in range(12)]
    make_booking(professor, other_student)

    page1 = client.get("/student/bookings", headers=auth_headers(student)).json()
    assert page1["total"] == 12
    assert page1["per_page"] == 10
    assert len(page1["items"]) == 10
    assert page1["items"][0]["id"] == ids[-1]

    page2 = client.get("/student/bookings?page=2", headers=auth_headers(student)).json()
    assert len(page2["items"]) == 2


def test_show_booking_detail(client, student, professor, make_booking, auth_headers):
    booking = make_booking(professor, student)
    res = client.get(f"/student/bookings/{booking.id}", headers=auth_headers(student))
    assert res.status_code == 200
    data = res.json()
    assert data["professor"] == {"id": professor.id, "name": "Claire Martin"}
    assert data["subject"]["name"] == "Mathématiques"
    assert data["level"]["name"] == "Lycée"
    assert data["ends_next_day"] is False


def test_show_missing_booking_is_404(client, student, auth_headers):
    res = client.get("/student/bookings/4242", headers=auth_headers(student))
    assert res.status_code == 404
    assert res.json()["error"] == "NOT_FOUND"
