import unittest
from datetime import datetime, timedelta, timezone

from trafficwatch.utils.common import DateTimeUtils
from trafficwatch.utils.enum import Role
from trafficwatch.utils.errors import Unauthenticated, ValidationError
from trafficwatch.utils.security import create_jwt_token, decode_jwt_token, get_bearer_token


class TestDateTimeUtils(unittest.TestCase):

    def test_naive_dates_are_utc(self):
        parsed = DateTimeUtils.parse_query_datetime("2026-10-01 08:30", "dateFrom")
        self.assertEqual(parsed, datetime(2026, 10, 1, 8, 30, tzinfo=timezone.utc))

    def test_offsets_are_converted(self):
        parsed = DateTimeUtils.parse_query_datetime("2026-10-01T10:30:00+02:00", "dateTo")
        self.assertEqual(parsed, datetime(2026, 10, 1, 8, 30, tzinfo=timezone.utc))

    def test_empty_and_invalid(self):
        self.assertIsNone(DateTimeUtils.parse_query_datetime("", "dateFrom"))
        with self.assertRaises(ValidationError):
            DateTimeUtils.parse_query_datetime("not a date", "dateFrom")


class TestSecurity(unittest.TestCase):

    def test_token_round_trip(self):
        token = create_jwt_token({"sub": "u1", "role": "admin"}, datetime.utcnow() + timedelta(minutes=5))
        claims = decode_jwt_token(get_bearer_token(f"Bearer {token}"))
        self.assertEqual((claims["sub"], claims["role"]), ("u1", "admin"))

    def test_expired_token(self):
        token = create_jwt_token({"sub": "u1"}, datetime.utcnow() - timedelta(minutes=5))
        with self.assertRaises(Unauthenticated):
            decode_jwt_token(token)

    def test_bearer_header_required(self):
        for header in (None, "", "Bearer", "Bearer   ", "Token abc"):
            with self.assertRaises(Unauthenticated):
                get_bearer_token(header)


class TestRole(unittest.TestCase):

    def test_parse(self):
        self.assertEqual(Role.parse("sub_admin"), Role.SUB_ADMIN)
        self.assertTrue(Role.ADMIN.is_staff)
        self.assertFalse(Role.USER.is_staff)
        with self.assertRaises(ValidationError):
            Role.parse("guest")
