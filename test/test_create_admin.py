from api_testing import DatabaseTestCase
from studio.create_admin import create_admin
from studio.models.user import User
from studio.utils.auth_utils import verify_password


class TestCreateAdmin(DatabaseTestCase):
    def test_creates_once(self):
        first = create_admin(self.db, "admin", "secret123")
        second = create_admin(self.db, "admin", "another123")

        self.assertEqual(first.id, second.id)
        self.assertEqual(self.db.query(User).count(), 1)
        self.assertTrue(verify_password("secret123", second.password))

    def test_reset_password(self):
        create_admin(self.db, "admin", "secret123")
        user = create_admin(self.db, "admin", "another123", reset_password=True)

        self.assertTrue(verify_password("another123", user.password))
        self.assertFalse(verify_password("secret123", user.password))

    def test_short_password(self):
        with self.assertRaises(ValueError):
            create_admin(self.db, "admin", "123")
