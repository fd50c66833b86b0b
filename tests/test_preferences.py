def _selected(res):
    return [row["name"] for row in res.json()["selected"]]


def test_student_attach_is_idempotent(client, db, student, taxonomy, auth_headers):
    headers = auth_headers(student)
    body = {"subject_id": taxonomy["maths"].id}

    first = client.post("/student/subjects", json=body, headers=headers)
    second = client.post("/student/subjects", json=body, headers=headers)
    assert first.status_code == second.status_code == 200
    assert _selected(second) == ["Mathématiques"]

    db.expire_all()
    assert len(student.preferred_subjects) == 1


def test_student_detach_is_silent(client, student, taxonomy, auth_headers):
    headers = auth_headers(student)
    client.post("/student/levels", json={"level_id": taxonomy["lycee"].id}, headers=headers)

    removed = client.delete(f"/student/levels/{taxonomy['lycee'].id}", headers=headers)
    assert removed.status_code == 200
    assert _selected(removed) == []

    again = client.delete(f"/student/levels/{taxonomy['lycee'].id}", headers=headers)
    assert again.status_code == 200


def test_student_attach_unknown_row_is_field_error(client, student, taxonomy, auth_headers):
    res = client.post("/student/cities", json={"city_id": 999}, headers=auth_headers(student))
    assert res.status_code == 422
    assert res.json()["details"]["fields"][0]["field"] == "city_id"


def test_student_listing_includes_catalog(client, student, taxonomy, auth_headers):
    headers = auth_headers(student)
    client.post("/student/cities", json={"city_id": taxonomy["lyon"].id}, headers=headers)
    listing = client.get("/student/cities", headers=headers).json()
    assert [c["name"] for c in listing["selected"]] == ["Lyon"]
    assert [c["name"] for c in listing["available"]] == ["Lyon", "Paris"]


def test_professor_duplicate_attach_is_refused(client, professor, taxonomy, auth_headers):
    headers = auth_headers(professor)
    body = {"subject_id": taxonomy["physique"].id}

    assert client.post("/professor/subjects", json=body, headers=headers).status_code == 200
    dup = client.post("/professor/subjects", json=body, headers=headers)
    assert dup.status_code == 400
    assert dup.json()["flash"]["error"] == "Cette matière est déjà dans votre liste."


def test_professor_detach_missing_is_refused(client, professor, taxonomy, auth_headers):
    res = client.delete(f"/professor/levels/{taxonomy['college'].id}", headers=auth_headers(professor))
    assert res.status_code == 400
    assert res.json()["flash"]["error"] == "Ce niveau n'est pas dans votre liste."


def test_professor_zones_are_cities(client, db, professor, taxonomy, auth_headers):
    headers = auth_headers(professor)
    added = client.post("/professor/zones", json={"city_id": taxonomy["paris"].id}, headers=headers)
    assert added.status_code == 200
    assert added.json()["redirect_to"] == "/professor/zones"

    db.expire_all()
    assert [c.name for c in professor.cities] == ["Paris"]

    removed = client.delete(f"/professor/zones/{taxonomy['paris'].id}", headers=headers)
    assert _selected(removed) == []


def test_student_cannot_edit_teaching_profile(client, student, taxonomy, auth_headers):
    res = client.post("/professor/subjects", json={"subject_id": taxonomy["maths"].id}, headers=auth_headers(student))
    assert res.status_code == 403


def test_catalog_is_public(client, taxonomy):
    subjects = client.get("/catalog/subjects").json()
    assert [s["name"] for s in subjects] == ["Mathématiques", "Physique"]
    assert len(client.get("/catalog/levels").json()) == 2
    assert len(client.get("/catalog/cities").json()) == 2
