from datetime import timedelta

from conftest import register_user, submit_form
from intake.config import settings
from intake.services.auth_service import create_admin_token

MB = 1024 * 1024


def test_admin_routes_require_token(client):
    assert client.get("/admin/forms").status_code in (401, 403)
    assert client.get("/admin/form/1").status_code in (401, 403)
    assert client.delete("/admin/form/1").status_code in (401, 403)


def test_admin_routes_reject_bad_token(client):
    headers = {"Authorization": "Bearer not-a-token"}
    assert client.get("/admin/forms", headers=headers).status_code == 401


def test_admin_routes_reject_expired_token(client):
    token = create_admin_token(settings, expires_delta=timedelta(minutes=-1))
    response = client.get("/admin/forms", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_list_forms_most_recent_first(client, admin_headers):
    first = register_user(client, phone="0910000001")
    second = register_user(client, phone="0910000002")
    submit_form(client, first)
    submit_form(client, second)

    response = client.get("/admin/forms", headers=admin_headers)
    assert response.status_code == 200
    forms = response.json()["data"]
    assert [form["userId"] for form in forms] == [second, first]


def test_get_form_by_id(client, admin_headers):
    user_id = register_user(client)
    submit_form(client, user_id)
    form_id = client.get("/admin/forms", headers=admin_headers).json()["data"][0]["id"]

    response = client.get(f"/admin/form/{form_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["userId"] == user_id

    assert client.get("/admin/form/9999", headers=admin_headers).status_code == 404


def test_delete_form_removes_record_and_files(client, admin_headers, upload_dir):
    user_id = register_user(client)
    assert submit_form(client, user_id, nrc=b"a" * 2 * MB, household=b"b" * MB).status_code == 200

    listing = client.get("/admin/forms", headers=admin_headers).json()["data"]
    form = listing[0]
    assert (upload_dir / form["nrcFile"]).exists()
    assert (upload_dir / form["householdFile"]).exists()

    response = client.delete(f"/admin/form/{form['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Data deleted successfully"

    assert not (upload_dir / form["nrcFile"]).exists()
    assert not (upload_dir / form["householdFile"]).exists()
    assert client.get(f"/uploads/{form['nrcFile']}").status_code == 404
    assert client.get(f"/uploads/{form['householdFile']}").status_code == 404
    assert client.get("/admin/forms", headers=admin_headers).json()["data"] == []
    assert client.get(f"/admin/form/{form['id']}", headers=admin_headers).status_code == 404
    assert client.get(f"/api/check-form/{user_id}").json()["data"] == {"exists": False}


def test_delete_tolerates_missing_files(client, admin_headers, upload_dir):
    user_id = register_user(client)
    submit_form(client, user_id)
    form = client.get("/admin/forms", headers=admin_headers).json()["data"][0]
    (upload_dir / form["nrcFile"]).unlink()

    response = client.delete(f"/admin/form/{form['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert not (upload_dir / form["householdFile"]).exists()


def test_delete_unknown_form_leaves_files_alone(client, admin_headers, upload_dir):
    user_id = register_user(client)
    submit_form(client, user_id)

    response = client.delete("/admin/form/9999", headers=admin_headers)
    assert response.status_code == 404
    assert len(list(upload_dir.iterdir())) == 2
