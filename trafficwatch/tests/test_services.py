import unittest
from datetime import datetime
from unittest.mock import MagicMock, patch

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from trafficwatch import schema
from trafficwatch.config import settings
from trafficwatch.models.base import AppUser, Violation
from trafficwatch.service import AuthService, UserService, ViolationService
from trafficwatch.tests.helpers import (ADMIN, OTHER_USER, SUB_ADMIN, USER, TestingSessionLocal,
                                        insert_user, insert_violation, reset_database, violation_input)
from trafficwatch.utils.errors import (Forbidden, NotFound, StoreFailure, Unauthenticated,
                                       ValidationError)


class DatabaseTestCase(unittest.TestCase):

    def setUp(self):
        reset_database()
        self.db = TestingSessionLocal()

    def tearDown(self):
        self.db.close()


class TestCreateViolation(DatabaseTestCase):

    def test_status_and_owner_are_forced(self):
        record = ViolationService.create_violation(
            self.db, USER, violation_input(status="resolved", ownerId="someone-else", userId="x"))

        self.assertEqual(record.status.value, "pending")
        self.assertEqual(record.ownerId, "u1")
        self.assertEqual(record.vehiclePlate, "ABC-123")
        stored = Violation.get_by_id(self.db, record.id)
        self.assertEqual(stored.status, "pending")
        self.assertEqual(stored.user_id, "u1")

    def test_blank_optional_fields_are_stored_as_null(self):
        record = ViolationService.create_violation(self.db, USER, violation_input(evidenceUrls=[]))
        self.assertIsNone(record.vehicleColor)
        self.assertIsNone(record.evidenceUrls)
        self.assertEqual(record.vehicleModel, "Corolla")

    def test_date_time_is_normalised_to_utc(self):
        record = ViolationService.create_violation(
            self.db, USER, violation_input(dateTime="2026-10-01T10:30:00+02:00"))
        self.assertEqual(record.dateTime, datetime(2026, 10, 1, 8, 30))

    def test_missing_required_field(self):
        payload = violation_input()
        del payload["vehiclePlate"]
        with self.assertRaises(ValidationError) as ctx:
            ViolationService.create_violation(self.db, USER, payload)
        self.assertEqual(ctx.exception.context["field"], "vehiclePlate")
        self.assertEqual(self.db.query(Violation).count(), 0)

    def test_unknown_violation_type(self):
        with self.assertRaises(ValidationError):
            ViolationService.create_violation(self.db, USER, violation_input(type="jaywalking"))

    def test_evidence_must_be_absolute_uris(self):
        with self.assertRaises(ValidationError):
            ViolationService.create_violation(self.db, USER, violation_input(evidenceUrls=["photo.jpg"]))

    def test_anonymous_caller(self):
        with self.assertRaises(Unauthenticated):
            ViolationService.create_violation(self.db, None, violation_input())


class TestReadViolations(DatabaseTestCase):

    def setUp(self):
        super().setUp()
        self.mine_old = insert_violation(self.db, owner_id="u1", created_at=datetime(2026, 9, 1),
                                         date_time=datetime(2026, 8, 30), vehicle_plate="OLD-1")
        self.mine_new = insert_violation(self.db, owner_id="u1", created_at=datetime(2026, 9, 3),
                                         status="under_review", type="speeding",
                                         date_time=datetime(2026, 9, 2), location="Harbour Road")
        self.theirs = insert_violation(self.db, owner_id="u2", created_at=datetime(2026, 9, 2),
                                       date_time=datetime(2026, 9, 1))

    def test_user_lists_only_own_violations_newest_first(self):
        records = ViolationService.list_violations(self.db, USER)
        self.assertEqual([r.id for r in records], [self.mine_new.id, self.mine_old.id])

    def test_staff_list_everything_newest_first(self):
        for actor in (SUB_ADMIN, ADMIN):
            records = ViolationService.list_violations(self.db, actor)
            self.assertEqual([r.id for r in records], [self.mine_new.id, self.theirs.id, self.mine_old.id])

    def test_status_and_type_filters(self):
        records = ViolationService.list_violations(
            self.db, ADMIN, schema.ViolationFilters(status="under_review", type="speeding"))
        self.assertEqual([r.id for r in records], [self.mine_new.id])

    def test_search_filter_is_case_insensitive(self):
        records = ViolationService.list_violations(self.db, ADMIN, schema.ViolationFilters(search="harbour"))
        self.assertEqual([r.id for r in records], [self.mine_new.id])
        records = ViolationService.list_violations(self.db, ADMIN, schema.ViolationFilters(search="old-"))
        self.assertEqual([r.id for r in records], [self.mine_old.id])

    def test_date_range_filter_is_inclusive(self):
        filters = schema.ViolationFilters(dateFrom=datetime(2026, 9, 1), dateTo=datetime(2026, 9, 2))
        records = ViolationService.list_violations(self.db, ADMIN, filters)
        self.assertEqual([r.id for r in records], [self.mine_new.id, self.theirs.id])

    def test_get_own_violation(self):
        record = ViolationService.get_violation(self.db, USER, self.mine_old.id)
        self.assertEqual(record.ownerId, "u1")

    def test_get_foreign_violation_is_forbidden(self):
        with self.assertRaises(Forbidden):
            ViolationService.get_violation(self.db, OTHER_USER, self.mine_old.id)

    def test_get_foreign_violation_can_be_concealed(self):
        with patch.object(settings, "CONCEAL_FOREIGN_VIOLATIONS", True):
            with self.assertRaises(NotFound):
                ViolationService.get_violation(self.db, OTHER_USER, self.mine_old.id)
            self.assertEqual(ViolationService.get_violation(self.db, SUB_ADMIN, self.mine_old.id).id,
                             self.mine_old.id)

    def test_get_unknown_id(self):
        with self.assertRaises(NotFound):
            ViolationService.get_violation(self.db, ADMIN, "does-not-exist")


class TestUpdateViolation(DatabaseTestCase):

    def setUp(self):
        super().setUp()
        self.violation = insert_violation(self.db, owner_id="u1", description="original text")

    def reload(self):
        self.db.expire_all()
        return Violation.get_by_id(self.db, self.violation.id)

    def test_sub_admin_closing_a_case_applies_nothing(self):
        with self.assertRaises(Forbidden):
            ViolationService.update_violation(self.db, SUB_ADMIN, self.violation.id,
                                              {"status": "resolved", "adminNotes": "reviewed"})
        stored = self.reload()
        self.assertEqual(stored.status, "pending")
        self.assertIsNone(stored.admin_notes)

    def test_sub_admin_triage(self):
        record = ViolationService.update_violation(self.db, SUB_ADMIN, self.violation.id,
                                                   {"status": "under_review", "adminNotes": "checking camera"})
        self.assertEqual(record.status.value, "under_review")
        self.assertEqual(record.adminNotes, "checking camera")

    def test_admin_updates_status_and_content(self):
        record = ViolationService.update_violation(self.db, ADMIN, self.violation.id,
                                                   {"status": "dismissed", "description": "updated text"})
        self.assertEqual(record.status.value, "dismissed")
        self.assertEqual(record.description, "updated text")
        stored = self.reload()
        self.assertEqual((stored.status, stored.description), ("dismissed", "updated text"))

    def test_owner_attaches_evidence(self):
        urls = ["https://cdn.example.com/u1/v/1.jpg", "https://cdn.example.com/u1/v/2.mp4"]
        record = ViolationService.update_violation(self.db, USER, self.violation.id, {"evidenceUrls": urls})
        self.assertEqual(record.evidenceUrls, urls)

    def test_owner_cannot_touch_anything_else(self):
        with self.assertRaises(Forbidden):
            ViolationService.update_violation(self.db, USER, self.violation.id,
                                              {"evidenceUrls": ["https://cdn.example.com/1.jpg"],
                                               "description": "mine now"})
        stored = self.reload()
        self.assertIsNone(stored.evidence_urls)
        self.assertEqual(stored.description, "original text")

    def test_other_user_cannot_attach_evidence(self):
        with self.assertRaises(Forbidden):
            ViolationService.update_violation(self.db, OTHER_USER, self.violation.id,
                                              {"evidenceUrls": ["https://cdn.example.com/1.jpg"]})

    def test_admin_clears_notes_but_cannot_null_required_fields(self):
        ViolationService.update_violation(self.db, ADMIN, self.violation.id, {"adminNotes": "note"})
        record = ViolationService.update_violation(self.db, ADMIN, self.violation.id, {"adminNotes": None})
        self.assertIsNone(record.adminNotes)
        with self.assertRaises(ValidationError):
            ViolationService.update_violation(self.db, ADMIN, self.violation.id, {"description": None})

    def test_invalid_values_are_rejected(self):
        with self.assertRaises(ValidationError):
            ViolationService.update_violation(self.db, ADMIN, self.violation.id, {"status": "closed"})
        with self.assertRaises(ValidationError):
            ViolationService.update_violation(self.db, ADMIN, self.violation.id, {"type": "jaywalking"})
        with self.assertRaises(ValidationError):
            ViolationService.update_violation(self.db, ADMIN, self.violation.id, ["status"])

    def test_unknown_id(self):
        with self.assertRaises(NotFound):
            ViolationService.update_violation(self.db, ADMIN, "missing", {"status": "pending"})


class TestDeleteViolation(DatabaseTestCase):

    def test_non_admins_are_forbidden_even_for_unknown_ids(self):
        violation = insert_violation(self.db, owner_id="u1")
        for actor in (USER, SUB_ADMIN):
            for violation_id in (violation.id, "missing"):
                with self.assertRaises(Forbidden):
                    ViolationService.delete_violation(self.db, actor, violation_id)
        self.assertIsNotNone(Violation.get_by_id(self.db, violation.id))

    def test_admin_deletes(self):
        violation = insert_violation(self.db, owner_id="u1")
        ViolationService.delete_violation(self.db, ADMIN, violation.id)
        self.assertIsNone(Violation.get_by_id(self.db, violation.id))
        with self.assertRaises(NotFound):
            ViolationService.delete_violation(self.db, ADMIN, violation.id)


class TestStoreFailure(unittest.TestCase):

    def test_store_errors_propagate_without_retry(self):
        db = MagicMock(spec=Session)
        db.commit.side_effect = OperationalError("INSERT", {}, Exception("database is locked"))

        with self.assertRaises(StoreFailure):
            ViolationService.create_violation(db, USER, violation_input())

        self.assertEqual(db.commit.call_count, 1)
        db.rollback.assert_called_once()


class TestUserService(DatabaseTestCase):

    def setUp(self):
        super().setUp()
        insert_user(self.db, "a1", role="admin")
        insert_user(self.db, "u1")

    def test_list_users(self):
        users = UserService.list_users(self.db, ADMIN)
        self.assertEqual({u.id for u in users}, {"a1", "u1"})
        with self.assertRaises(Forbidden):
            UserService.list_users(self.db, SUB_ADMIN)

    def test_promote_user(self):
        user = UserService.update_role(self.db, ADMIN, "u1", "sub_admin")
        self.assertEqual(user.role.value, "sub_admin")
        self.assertEqual(AppUser.get_by_id(self.db, "u1").role, "sub_admin")

    def test_unknown_user(self):
        with self.assertRaises(NotFound):
            UserService.update_role(self.db, ADMIN, "ghost", "user")
        with self.assertRaises(NotFound):
            UserService.delete_user(self.db, ADMIN, "ghost")

    def test_delete_user(self):
        UserService.delete_user(self.db, ADMIN, "u1")
        self.assertIsNone(AppUser.get_by_id(self.db, "u1"))
        with self.assertRaises(ValidationError):
            UserService.delete_user(self.db, ADMIN, "a1")


class TestAuthService(DatabaseTestCase):

    def test_directory_role_wins_over_claims(self):
        insert_user(self.db, "s1", role="sub_admin")
        actor = AuthService.resolve_actor(self.db, {"sub": "s1", "user_metadata": {"role": "admin"}})
        self.assertEqual(actor, schema.Actor(id="s1", role="sub_admin"))

    def test_role_claims(self):
        self.assertEqual(AuthService.resolve_actor(self.db, {"sub": "x", "user_metadata": {"role": "admin"}}).role.value,
                         "admin")
        self.assertEqual(AuthService.resolve_actor(self.db, {"sub": "y", "user_metadata": {"role": "sub_admin"}}).role.value,
                         "sub_admin")

    def test_missing_role_defaults_to_user(self):
        self.assertEqual(AuthService.resolve_actor(self.db, {"sub": "x"}).role.value, "user")

    def test_provider_database_role_is_not_an_application_role(self):
        claims = {"sub": "u9", "role": "authenticated", "email": "u9@example.com", "user_metadata": {}}
        self.assertEqual(AuthService.resolve_actor(self.db, claims), schema.Actor(id="u9", role="user"))

    def test_unknown_role_is_rejected(self):
        with self.assertRaises(Unauthenticated):
            AuthService.resolve_actor(self.db, {"sub": "x", "user_metadata": {"role": "root"}})
        self.assertIsNone(AppUser.get_by_id(self.db, "x"))

    def test_missing_subject(self):
        with self.assertRaises(Unauthenticated):
            AuthService.resolve_actor(self.db, {"user_metadata": {"role": "admin"}})

    def test_first_time_caller_is_registered(self):
        claims = {"sub": "newcomer", "email": "newcomer@example.com", "user_metadata": {"name": "New Comer"}}
        AuthService.resolve_actor(self.db, claims)

        users = {u.id: u for u in UserService.list_users(self.db, ADMIN)}
        self.assertIn("newcomer", users)
        self.assertEqual(users["newcomer"].email, "newcomer@example.com")
        self.assertEqual(users["newcomer"].name, "New Comer")

        UserService.update_role(self.db, ADMIN, "newcomer", "sub_admin")
        self.assertEqual(AuthService.resolve_actor(self.db, claims).role.value, "sub_admin")

    def test_taken_email_does_not_block_registration(self):
        insert_user(self.db, "u1", email="shared@example.com")
        actor = AuthService.resolve_actor(self.db, {"sub": "u2", "email": "shared@example.com"})
        self.assertEqual(actor.id, "u2")
        self.assertIsNone(AppUser.get_by_id(self.db, "u2").email)

    def test_demotion_sticks_against_claims(self):
        claims = {"sub": "x", "user_metadata": {"role": "admin"}}
        self.assertEqual(AuthService.resolve_actor(self.db, claims).role.value, "admin")
        UserService.update_role(self.db, ADMIN, "x", "user")
        self.assertEqual(AuthService.resolve_actor(self.db, claims).role.value, "user")

    def test_deleted_user_cannot_authenticate(self):
        insert_user(self.db, "x", role="user")
        claims = {"sub": "x", "user_metadata": {"role": "admin"}}
        UserService.delete_user(self.db, ADMIN, "x")

        with self.assertRaises(Unauthenticated):
            AuthService.resolve_actor(self.db, claims)
        self.assertNotIn("x", {u.id for u in UserService.list_users(self.db, ADMIN)})
        with self.assertRaises(NotFound):
            UserService.update_role(self.db, ADMIN, "x", "admin")
