import unittest

from synqchain import create_app
from synqchain.auth import _parse_users
from synqchain.config import Config
from synqchain.db import close_db
from tests.helpers.temp_db import TempDbSandbox


class AuthRoutesTest(unittest.TestCase):
    def setUp(self) -> None:
        self._temp_db = TempDbSandbox(prefix="auth_routes")
        self.app = create_app(
            self._temp_db.make_config(
                Config,
                TESTING=True,
                APP_USERS="demo@demo.com:demo:Demo User:admin,buyer@demo.com:secret:Bea Buyer:buyer",
            )
        )
        self.client = self.app.test_client()

    def tearDown(self) -> None:
        with self.app.app_context():
            close_db()
        self._temp_db.cleanup()

    def test_me_requires_auth_cookie(self) -> None:
        response = self.client.get("/auth/me")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json(), {"error": "Not authenticated"})

    def test_cookie_must_equal_one(self) -> None:
        self.client.set_cookie("synqchain_auth", "true")
        response = self.client.get("/auth/me")
        self.assertEqual(response.status_code, 401)

    def test_preset_cookie_is_enough(self) -> None:
        self.client.set_cookie("synqchain_auth", "1")
        response = self.client.get("/auth/me")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.get_json(),
            {"user": {"email": "demo@demo.com", "name": "Demo User", "role": "admin"}},
        )

    def test_login_sets_cookie_and_me_returns_user(self) -> None:
        response = self.client.post("/auth/login", json={"email": "Buyer@demo.com", "password": "secret"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["success"], True)

        set_cookie = " ".join(response.headers.getlist("Set-Cookie"))
        self.assertIn("synqchain_auth=1", set_cookie)
        self.assertIn("HttpOnly", set_cookie)
        self.assertIn("SameSite=Lax", set_cookie)
        self.assertIn("Max-Age=86400", set_cookie)
        self.assertNotIn("Secure", set_cookie)

        me = self.client.get("/auth/me")
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.get_json()["user"]["email"], "buyer@demo.com")
        self.assertEqual(me.get_json()["user"]["role"], "buyer")

    def test_login_rejects_bad_credentials(self) -> None:
        response = self.client.post("/auth/login", json={"email": "demo@demo.com", "password": "wrong"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json(), {"error": "Invalid credentials"})

    def test_logout_clears_cookie(self) -> None:
        self.client.post("/auth/login", json={"email": "demo@demo.com", "password": "demo"})
        response = self.client.post("/auth/logout")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"success": True})
        self.assertEqual(self.client.get("/auth/me").status_code, 401)


class ParseUsersTest(unittest.TestCase):
    def test_parse_users_defaults(self) -> None:
        users = list(_parse_users("a@x.com:pw; b@x.com:pw2:Bee:root\n:broken"))
        self.assertEqual(len(users), 2)
        self.assertEqual(users[0]["name"], "a")
        self.assertEqual(users[0]["role"], "viewer")
        self.assertEqual(users[1]["name"], "Bee")
        self.assertEqual(users[1]["role"], "viewer")

    def test_parse_users_ignores_unsupported_input(self) -> None:
        self.assertEqual(list(_parse_users(None)), [])
        self.assertEqual(list(_parse_users(42)), [])


if __name__ == "__main__":
    unittest.main()
