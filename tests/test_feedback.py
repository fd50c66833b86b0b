import pytest

from app.core.enums import BookingStatus
from app.db.models.feedback import Feedback

FEEDBACK = {"rating": 4, "comment": "Séance utile, bons exercices.", "would_recommend": True}


@pytest.mark.parametrize(
    "status", [BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.CANCELLED]
)
def test_feedback_requires_completed_booking(client, db, student, professor, make_booking, auth_headers, status):
    booking = make_booking(professor, student, status=status)
    res = client.post(f"/student/feedback/bookings/{booking.id}", json=FEEDBACK, headers=auth_headers(student))
    assert res.status_code == 403
    assert res.json()["message"] == "Vous ne pouvez donner un feedback qu'après la fin de la session."
    assert db.query(Feedback).count() == 0


def test_feedback_on_completed_booking(client, db, student, professor, make_booking, auth_headers):
    booking = make_booking(professor, student, status=BookingStatus.COMPLETED)
    res = client.post(f"/student/feedback/bookings/{booking.id}", json=FEEDBACK, headers=auth_headers(student))
    assert res.status_code == 201
    feedback = res.json()["feedback"]
    assert feedback["professor_id"] == professor.id
    assert feedback["booking_id"] == booking.id
    assert feedback["is_resolved"] is False


def test_second_feedback_redirects_to_edit(client, db, student, professor, make_booking, auth_headers):
    booking = make_booking(professor, student, status=BookingStatus.COMPLETED)
    first = client.post(f"/student/feedback/bookings/{booking.id}", json=FEEDBACK, headers=auth_headers(student)).json()

    again = client.post(f"/student/feedback/bookings/{booking.id}", json=FEEDBACK, headers=auth_headers(student))
    assert again.status_code == 200
    assert again.json()["redirect_to"] == f"/student/feedback/{first['feedback']['id']}/edit"
    assert db.query(Feedback).count() == 1

    form = client.get(f"/student/feedback/bookings/{booking.id}/create", headers=auth_headers(student)).json()
    assert form["booking"] is None
    assert form["redirect_to"] == f"/student/feedback/{first['feedback']['id']}/edit"


def test_create_form_returns_booking(client, student, professor, make_booking, auth_headers):
    booking = make_booking(professor, student, status=BookingStatus.COMPLETED)
    form = client.get(f"/student/feedback/bookings/{booking.id}/create", headers=auth_headers(student)).json()
    assert form["booking"]["id"] == booking.id
    assert form["redirect_to"] is None


def test_feedback_on_missing_booking_is_404(client, student, auth_headers):
    res = client.post("/student/feedback/bookings/777", json=FEEDBACK, headers=auth_headers(student))
    assert res.status_code == 404


def test_feedback_on_someone_elses_booking_is_403(client, db, student, other_student, professor, make_booking, auth_headers):
    booking = make_booking(professor, other_student, status=BookingStatus.COMPLETED)
    res = client.post(f"/student/feedback/bookings/{booking.id}", json=FEEDBACK, headers=auth_headers(student))
    assert res.status_code == 403
    assert db.query(Feedback).count() == 0


def test_update_and_delete_feedback(client, db, student, professor, make_booking, auth_headers):
    booking = make_booking(professor, student, status=BookingStatus.COMPLETED)
    created = client.post(f"/student/feedback/bookings/{booking.id}", json=FEEDBACK, headers=auth_headers(student)).json()
    feedback_id = created["feedback"]["id"]

    updated = client.put(
        f"/student/feedback/{feedback_id}",
        json={"rating": 2, "comment": None, "would_recommend": False},
        headers=auth_headers(student),
    )
    assert updated.status_code == 200
    assert updated.json()["feedback"]["rating"] == 2

    listing = client.get("/student/feedback", headers=auth_headers(student)).json()
    assert listing["total"] == 1

    deleted = client.delete(f"/student/feedback/{feedback_id}", headers=auth_headers(student))
    assert deleted.status_code == 200
    assert db.query(Feedback).count() == 0
