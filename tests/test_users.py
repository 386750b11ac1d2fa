"""
Test suite for user endpoints.

Tests cover:
- Admin-only user creation and listing
- Self-or-admin access to a user's record
- Applying to jobs
- Unhandled errors surfacing as a 500 envelope
"""

from fastapi.testclient import TestClient

from app.core.security import token_codec
from app.crud import user as user_crud
from main import app

U1 = {
    "username": "u1",
    "firstName": "U1F",
    "lastName": "U1L",
    "email": "user1@user.com",
    "isAdmin": False,
}


class TestUserCreation:
    """Tests for POST /users"""
    new_user = {
        "username": "u-new",
        "firstName": "First-new",
        "lastName": "Last-newL",
        "password": "password-new",
        "email": "new@email.com",
        "isAdmin": False,
    }

    def test_create_as_admin(self, client, admin_headers):
        response = client.post("/users", json=self.new_user, headers=admin_headers)

        assert response.status_code == 201
        body = response.json()
        expected = {k: v for k, v in self.new_user.items() if k != "password"}
        assert body["user"] == expected
        assert token_codec.decode_token(body["token"]).username == "u-new"

    def test_create_admin_as_admin(self, client, admin_headers):
        response = client.post("/users", json={**self.new_user, "isAdmin": True}, headers=admin_headers)

        assert response.status_code == 201
        assert response.json()["user"]["isAdmin"] is True
        assert token_codec.decode_token(response.json()["token"]).is_admin is True

    def test_create_as_user(self, client, u1_headers):
        response = client.post("/users", json=self.new_user, headers=u1_headers)

        assert response.status_code == 401

    def test_create_anon(self, client):
        response = client.post("/users", json=self.new_user)

        assert response.status_code == 401

    def test_create_missing_fields(self, client, admin_headers):
        response = client.post("/users", json={"username": "u-new"}, headers=admin_headers)

        assert response.status_code == 400

    def test_create_invalid_email(self, client, admin_headers):
        response = client.post(
            "/users",
            json={**self.new_user, "email": "not-an-email"},
            headers=admin_headers
        )

        assert response.status_code == 400

    def test_create_duplicate(self, client, admin_headers):
        response = client.post("/users", json={**self.new_user, "username": "u1"}, headers=admin_headers)

        assert response.status_code == 400
        assert "Duplicate username" in response.json()["error"]["message"]


class TestUserListing:
    """Tests for GET /users"""

    def test_list_as_admin(self, client, admin_headers):
        response = client.get("/users", headers=admin_headers)

        assert response.status_code == 200
        users = response.json()["users"]
        assert [u["username"] for u in users] == ["u1", "u2", "u3"]
        assert users[0] == U1

    def test_list_as_user(self, client, u1_headers):
        response = client.get("/users", headers=u1_headers)

        assert response.status_code == 401

    def test_list_anon(self, client):
        response = client.get("/users")

        assert response.status_code == 401

    def test_unhandled_error_is_500(self, client, admin_headers, monkeypatch):
        def broken(db):
            raise RuntimeError("connection lost")

        monkeypatch.setattr(user_crud, "find_all", broken)

        with TestClient(app, raise_server_exceptions=False) as failing_client:
            response = failing_client.get("/users", headers=admin_headers)

        assert response.status_code == 500
        assert response.json() == {"error": {"message": "Internal Server Error", "status": 500}}


class TestUserRetrieval:
    """Tests for GET /users/{username}"""

    def test_get_self(self, client, u1_headers, job_ids):
        response = client.get("/users/u1", headers=u1_headers)

        assert response.status_code == 200
        assert response.json() == {"user": {**U1, "applications": [job_ids[0]]}}

    def test_get_as_admin(self, client, admin_headers):
        response = client.get("/users/u1", headers=admin_headers)

        assert response.status_code == 200

    def test_get_other_user(self, client, u2_headers):
        response = client.get("/users/u1", headers=u2_headers)

        assert response.status_code == 401

    def test_get_anon(self, client):
        response = client.get("/users/u1")

        assert response.status_code == 401

    def test_get_nonexistent(self, client, admin_headers):
        response = client.get("/users/nope", headers=admin_headers)

        assert response.status_code == 404


class TestUserUpdate:
    """Tests for PATCH /users/{username}"""

    def test_update_self(self, client, u1_headers):
        response = client.patch("/users/u1", json={"firstName": "New"}, headers=u1_headers)

        assert response.json() == {"user": {**U1, "firstName": "New"}}

    def test_update_as_admin(self, client, admin_headers):
        response = client.patch("/users/u1", json={"firstName": "New"}, headers=admin_headers)

        assert response.status_code == 200

    def test_update_other_user(self, client, u2_headers):
        response = client.patch("/users/u1", json={"firstName": "New"}, headers=u2_headers)

        assert response.status_code == 401

    def test_update_nonexistent(self, client, admin_headers):
        response = client.patch("/users/nope", json={"firstName": "Nope"}, headers=admin_headers)

        assert response.status_code == 404

    def test_update_invalid_data(self, client, admin_headers):
        response = client.patch("/users/u1", json={"firstName": 42}, headers=admin_headers)

        assert response.status_code == 400

    def test_admin_flag_not_self_settable(self, client, u1_headers):
        response = client.patch("/users/u1", json={"isAdmin": True}, headers=u1_headers)

        assert response.status_code == 400

    def test_set_password(self, client, u1_headers):
        response = client.patch("/users/u1", json={"password": "new-password"}, headers=u1_headers)
        assert response.json() == {"user": U1}

        login = client.post("/auth/token", json={"username": "u1", "password": "new-password"})
        assert login.status_code == 200


class TestUserDeletion:
    """Tests for DELETE /users/{username}"""

    def test_delete_self(self, client, u1_headers):
        response = client.delete("/users/u1", headers=u1_headers)

        assert response.json() == {"deleted": "u1"}

    def test_delete_as_admin(self, client, admin_headers):
        response = client.delete("/users/u1", headers=admin_headers)

        assert response.json() == {"deleted": "u1"}

    def test_delete_other_user(self, client, u2_headers):
        response = client.delete("/users/u1", headers=u2_headers)

        assert response.status_code == 401

    def test_delete_nonexistent(self, client, admin_headers):
        response = client.delete("/users/nope", headers=admin_headers)

        assert response.status_code == 404


class TestJobApplication:
    """Tests for POST /users/{username}/jobs/{job_id}"""

    def test_apply_self(self, client, u1_headers, job_ids):
        response = client.post(f"/users/u1/jobs/{job_ids[1]}", headers=u1_headers)

        assert response.json() == {"applied": job_ids[1]}
        user = client.get("/users/u1", headers=u1_headers).json()["user"]
        assert sorted(user["applications"]) == sorted(job_ids[:2])

    def test_apply_as_admin(self, client, admin_headers, job_ids):
        response = client.post(f"/users/u2/jobs/{job_ids[1]}", headers=admin_headers)

        assert response.json() == {"applied": job_ids[1]}

    def test_apply_for_other_user(self, client, u2_headers, job_ids):
        response = client.post(f"/users/u1/jobs/{job_ids[1]}", headers=u2_headers)

        assert response.status_code == 401

    def test_apply_anon(self, client, job_ids):
        response = client.post(f"/users/u1/jobs/{job_ids[1]}")

        assert response.status_code == 401

    def test_apply_twice(self, client, u1_headers, job_ids):
        response = client.post(f"/users/u1/jobs/{job_ids[0]}", headers=u1_headers)

        assert response.json() == {"applied": job_ids[0]}

    def test_apply_nonexistent_job(self, client, u1_headers):
        response = client.post("/users/u1/jobs/0", headers=u1_headers)

        assert response.status_code == 404

    def test_apply_nonexistent_user(self, client, admin_headers, job_ids):
        response = client.post(f"/users/nope/jobs/{job_ids[0]}", headers=admin_headers)

        assert response.status_code == 404

    def test_invalid_job_id(self, client, admin_headers):
        response = client.post("/users/u1/jobs/abc", headers=admin_headers)

        assert response.status_code == 400
