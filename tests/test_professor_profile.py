from app.core.enums import BookingStatus


def _register_professor(client):
    client.post(
        "/api/auth/register",
        json={"email": "prof.blanc@tutorat.fr", "name": "Julie Blanc", "password": "secret1234", "role": "professor"},
    )
    token = client.post(
        "/api/auth/login", json={"email": "prof.blanc@tutorat.fr", "password": "secret1234"}
    ).json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


def test_registered_professor_sets_rate_then_bookings_use_it(client, student, taxonomy, next_week, auth_headers):
    headers = _register_professor(client)
    profile = client.get("/professor/profile", headers=headers).json()["profile"]
    assert profile["hourly_rate"] is None

    res = client.put(
        "/professor/profile",
        json={"hourly_rate": 35.0, "bio": "Professeure de physique", "specializations": ["mécanique", "optique"]},
        headers=headers,
    )
    assert res.status_code == 200
    assert res.json()["flash"]["success"] == "Profil mis à jour avec succès."
    updated = res.json()["profile"]
    assert updated["hourly_rate"] == 35.0
    assert updated["specializations"] == ["mécanique", "optique"]

    booking = client.post(
        "/student/bookings",
        json={
            "professor_id": updated["id"],
            "subject_id": taxonomy["physique"].id,
            "level_id": taxonomy["lycee"].id,
            "date": next_week.isoformat(),
            "start_time": "10:00",
            "duration": 90,
        },
        headers=auth_headers(student),
    ).json()["booking"]
    assert booking["total_price"] == 52.5

    found = client.get(
        "/student/search/professors", params={"search": "mécanique"}, headers=auth_headers(student)
    ).json()
    assert [p["name"] for p in found["items"]] == ["Julie Blanc"]


def test_partial_update_leaves_other_fields(client, db, professor, auth_headers):
    res = client.put("/professor/profile", json={"phone": "0601020304"}, headers=auth_headers(professor))
    assert res.status_code == 200
    db.refresh(professor)
    assert professor.phone == "0601020304"
    assert professor.hourly_rate == 40.0
    assert professor.bio == "Agrégée de mathématiques"


def test_profile_syncs_teaching_rows(client, db, professor, taxonomy, auth_headers):
    headers = auth_headers(professor)
    res = client.put(
        "/professor/profile",
        json={
            "subject_ids": [taxonomy["maths"].id, taxonomy["physique"].id, taxonomy["maths"].id],
            "city_ids": [taxonomy["lyon"].id],
        },
        headers=headers,
    )
    assert res.status_code == 200
    profile = res.json()["profile"]
    assert sorted(s["name"] for s in profile["subjects"]) == ["Mathématiques", "Physique"]
    assert [c["name"] for c in profile["cities"]] == ["Lyon"]

    client.put("/professor/profile", json={"subject_ids": []}, headers=headers)
    db.expire_all()
    assert professor.subjects == []
    assert [c.name for c in professor.cities] == ["Lyon"]


def test_unknown_taxonomy_row_is_field_error(client, professor, auth_headers):
    res = client.put("/professor/profile", json={"city_ids": [999]}, headers=auth_headers(professor))
    assert res.status_code == 422
    assert res.json()["details"]["fields"][0]["field"] == "city_ids"


def test_invalid_profile_values_are_rejected(client, professor, auth_headers):
    headers = auth_headers(professor)
    assert client.put("/professor/profile", json={"hourly_rate": -5}, headers=headers).status_code == 422
    assert client.put("/professor/profile", json={"name": None}, headers=headers).status_code == 422


def test_profile_stats(client, professor, student, parent, child, make_booking, auth_headers):
    make_booking(professor, student, status=BookingStatus.COMPLETED, duration=90)
    make_booking(professor, student, status=BookingStatus.COMPLETED, duration=60)
    make_booking(professor, parent=parent, child=child)

    stats = client.get("/professor/profile", headers=auth_headers(professor)).json()["stats"]
    assert stats["total_hours_taught"] == 2.5
    assert stats["total_students"] == 2


def test_profile_is_professor_only(client, student, auth_headers):
    assert client.get("/professor/profile", headers=auth_headers(student)).status_code == 403
    assert client.put("/professor/profile", json={"hourly_rate": 10}, headers=auth_headers(student)).status_code == 403
