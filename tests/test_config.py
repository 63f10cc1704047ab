"""Unit tests for Settings validators."""

import base64
import unittest

from pydantic import ValidationError

from userservice.core.config import Settings

VALID_KEY = base64.b64encode(b"s" * 32).decode()


class TestJwtSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        s = Settings(JWT_SECRET_KEY=VALID_KEY)
        self.assertEqual(s.JWT_EXPIRATION_MS, 86_400_000)
        self.assertEqual(s.JWT_REFRESH_EXPIRATION_MS, 604_800_000)
        self.assertEqual(s.jwt_signing_key, b"s" * 32)

    def test_default_secret_is_usable(self) -> None:
        self.assertEqual(len(Settings().jwt_signing_key), 48)

    def test_secret_must_be_base64(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(JWT_SECRET_KEY="not base64 at all!")

    def test_secret_must_be_long_enough(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(JWT_SECRET_KEY=base64.b64encode(b"short").decode())

    def test_blank_secret(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(JWT_SECRET_KEY="   ")

    def test_refresh_must_not_be_shorter_than_access(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(JWT_SECRET_KEY=VALID_KEY, JWT_EXPIRATION_MS=60_000, JWT_REFRESH_EXPIRATION_MS=30_000)

    def test_expiration_floor(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(JWT_SECRET_KEY=VALID_KEY, JWT_EXPIRATION_MS=10)


class TestDatabaseUrl(unittest.TestCase):
    def test_postgres_accepted_and_stripped(self) -> None:
        s = Settings(DATABASE_URL="  postgresql://u:p@db:5432/users  ")
        self.assertEqual(s.DATABASE_URL, "postgresql://u:p@db:5432/users")

    def test_non_postgres_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(DATABASE_URL="mysql://u:p@db/users")


class TestOrderService(unittest.TestCase):
    def test_trailing_slash_stripped(self) -> None:
        s = Settings(ORDER_SERVICE_URL="http://order-service:8070/")
        self.assertEqual(s.ORDER_SERVICE_URL, "http://order-service:8070")

    def test_scheme_required(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(ORDER_SERVICE_URL="order-service:8070")

    def test_timeout_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(ORDER_SERVICE_TIMEOUT_SEC=0)


if __name__ == "__main__":
    unittest.main()
