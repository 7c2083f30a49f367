"""HTTP contract of the standalone admin-delete-account function."""

import unittest

from fastapi.testclient import TestClient

from purgehub.core.database import get_db
from purgehub.functions.admin_delete_account import CORS_HEADERS, app
from purgehub.models import BannedEmail, Profile
from purgehub.services.auth_admin import get_auth_admin_client
from tests.helpers import FakeAuthAdminClient, add_account, make_session, make_token


class FunctionTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session()
        self.auth = FakeAuthAdminClient()
        self.admin = add_account(self.db, "mod", admin=True)
        self.target = add_account(self.db, "victim")
        self.admin_id = self.admin.user_id
        self.target_id = self.target.user_id
        self.auth.add(self.admin_id, "mod@example.com")
        self.auth.add(self.target_id, "victim@example.com")

        def _db():
            yield self.db

        app.dependency_overrides[get_db] = _db
        app.dependency_overrides[get_auth_admin_client] = lambda: self.auth
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.db.close()

    def _headers(self, user_id=None) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id or self.admin_id)}"}

    def assertCors(self, resp) -> None:
        for name, value in CORS_HEADERS.items():
            self.assertEqual(resp.headers.get(name), value)


class TestPreflight(FunctionTestCase):
    def test_options_is_empty_200_with_cors(self) -> None:
        resp = self.client.options("/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.content, b"")
        self.assertCors(resp)


class TestDeleteRequest(FunctionTestCase):
    def test_success(self) -> None:
        resp = self.client.post(
            "/",
            json={"userId": str(self.target_id), "reason": "spam"},
            headers=self._headers(),
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"success": True})
        self.assertCors(resp)
        self.assertEqual(self.db.query(Profile).filter(Profile.user_id == self.target_id).count(), 0)
        self.assertEqual(self.db.query(BannedEmail).one().email, "victim@example.com")
        self.assertEqual(self.auth.deleted, [self.target_id])

    def test_missing_authorization(self) -> None:
        resp = self.client.post("/", json={"userId": str(self.target_id)})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Unauthorized"})
        self.assertCors(resp)

    def test_non_admin_caller(self) -> None:
        regular = add_account(self.db, "bob")
        self.auth.add(regular.user_id, "bob@example.com")
        resp = self.client.post(
            "/",
            json={"userId": str(self.target_id)},
            headers=self._headers(regular.user_id),
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Admin only"})
        self.assertEqual(self.auth.deleted, [])

    def test_malformed_body_means_user_id_required(self) -> None:
        resp = self.client.post("/", content=b"{not json", headers=self._headers())
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "userId required"})

    def test_repeat_is_user_not_found(self) -> None:
        body = {"userId": str(self.target_id)}
        self.assertEqual(self.client.post("/", json=body, headers=self._headers()).status_code, 200)
        resp = self.client.post("/", json=body, headers=self._headers())
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "User not found"})

    def test_auth_service_failure_is_reported(self) -> None:
        self.auth.fail_delete = True
        resp = self.client.post(
            "/",
            json={"userId": str(self.target_id)},
            headers=self._headers(),
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("Auth service returned 500", resp.json()["error"])


if __name__ == "__main__":
    unittest.main()
