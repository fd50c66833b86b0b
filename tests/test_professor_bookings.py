from datetime import timedelta

from app.core.enums import BookingStatus, CancelledBy, RoleSlug


def test_confirm_then_complete(client, db, student, professor, make_booking, auth_headers):
    booking = make_booking(professor, student)
    headers = auth_headers(professor)

    confirmed = client.post(f"/professor/bookings/{booking.id}/confirm", headers=headers)
    assert confirmed.status_code == 200
    assert confirmed.json()["booking"]["status"] == "confirmed"

    completed = client.post(f"/professor/bookings/{booking.id}/complete", headers=headers)
    assert completed.status_code == 200

    db.refresh(booking)
    assert booking.status == BookingStatus.COMPLETED
    assert booking.confirmed_at is not None
    assert booking.completed_at is not None


def test_complete_requires_confirmed(client, db, student, professor, make_booking, auth_headers):
    booking = make_booking(professor, student)
    res = client.post(f"/professor/bookings/{booking.id}/complete", headers=auth_headers(professor))
    assert res.status_code == 400
    assert "flash" in res.json()
    db.refresh(booking)
    assert booking.status == BookingStatus.PENDING


def test_confirm_requires_pending(client, student, professor, make_booking, auth_headers):
    booking = make_booking(professor, student, status=BookingStatus.CANCELLED)
    res = client.post(f"/professor/bookings/{booking.id}/confirm", headers=auth_headers(professor))
    assert res.status_code == 400


def test_cancel_requires_reason(client, student, professor, make_booking, auth_headers):
    booking = make_booking(professor, student)
    res = client.post(f"/professor/bookings/{booking.id}/cancel", json={}, headers=auth_headers(professor))
    assert res.status_code == 422


def test_cancel_records_reason(client, db, student, professor, make_booking, auth_headers):
    booking = make_booking(professor, student, status=BookingStatus.CONFIRMED)
    res = client.post(
        f"/professor/bookings/{booking.id}/cancel",
        json={"cancellation_reason": "Indisponible ce jour-là"},
        headers=auth_headers(professor),
    )
    assert res.status_code == 200
    db.refresh(booking)
    assert booking.status == BookingStatus.CANCELLED
    assert booking.cancelled_by == CancelledBy.PROFESSOR
    assert booking.cancellation_reason == "Indisponible ce jour-là"


def test_other_professor_cannot_touch_booking(client, student, professor, make_user, make_booking, auth_headers):
    intruder = make_user(RoleSlug.PROFESSOR, "prof.petit@tutorat.fr", "Marc Petit", hourly_rate=30.0)
    booking = make_booking(professor, student)
    res = client.post(f"/professor/bookings/{booking.id}/confirm", headers=auth_headers(intruder))
    assert res.status_code == 403


def test_list_filters_by_status_and_date(client, student, professor, make_booking, next_week, auth_headers):
    make_booking(professor, student, status=BookingStatus.CONFIRMED, day=next_week)
    make_booking(professor, student, status=BookingStatus.CONFIRMED, day=next_week + timedelta(days=10))
    make_booking(professor, student, status=BookingStatus.PENDING, day=next_week)
    headers = auth_headers(professor)

    confirmed = client.get("/professor/bookings?status=confirmed", headers=headers).json()
    assert confirmed["total"] == 2

    window = client.get(
        f"/professor/bookings?status=confirmed&date_to={(next_week + timedelta(days=1)).isoformat()}",
        headers=headers,
    ).json()
    assert window["total"] == 1
    assert window["items"][0]["student"]["id"] == student.id
