"""Tests for purgehub.services.account_deletion: ordering, completeness, refusals, retries."""

import asyncio
import unittest
import uuid
from datetime import timedelta
from unittest.mock import patch

from purgehub.core.config import get_settings
from purgehub.models import (
    BannedEmail,
    Comment,
    Follow,
    Notification,
    Post,
    PostLike,
    Profile,
    Report,
    Story,
    UserRole,
)
from purgehub.schemas.deletion import DeleteAccountRequest
from purgehub.schemas.moderation import BannedEmailCreate
from purgehub.services import moderation
from purgehub.services.account_deletion import delete_account, erase_account_records
from purgehub.services.errors import (
    AdminOnlyError,
    AuthApiError,
    ForbiddenTargetError,
    NotFoundError,
    UnauthorizedError,
    ValidationFailedError,
)
from purgehub.services.roles import grant_role
from tests.helpers import (
    FakeAuthAdminClient,
    add_account,
    admin_context,
    make_session,
    make_token,
)


class DeletionTestCase(unittest.TestCase):
    """Admin 'mod', principal 'boss', target 'victim' with a realistic footprint, bystander 'bob'."""

    def setUp(self) -> None:
        self.db = make_session()
        self.settings = get_settings()
        self.auth = FakeAuthAdminClient()

        self.admin = add_account(self.db, "mod", admin=True)
        self.principal = add_account(self.db, "boss", admin=True, principal=True)
        self.target = add_account(self.db, "victim")
        self.bob = add_account(self.db, "bob")
        for p, email in (
            (self.admin, "mod@example.com"),
            (self.principal, "boss@example.com"),
            (self.target, "Victim@Example.com"),
            (self.bob, "bob@example.com"),
        ):
            self.auth.add(p.user_id, email)

        self.admin_id = self.admin.user_id
        self.target_id = self.target.user_id
        self.bob_id = self.bob.user_id
        self._seed_target_footprint()

    def tearDown(self) -> None:
        self.db.close()

    def _seed_target_footprint(self) -> None:
        db, t, b = self.db, self.target_id, self.bob_id
        posts = [Post(user_id=t, content=f"post {i}") for i in range(3)]
        db.add_all(posts)
        bob_post = Post(user_id=b, content="bob's post")
        db.add(bob_post)
        db.flush()
        db.add_all(
            [
                Comment(post_id=bob_post.id, user_id=t, content="first"),
                Comment(post_id=bob_post.id, user_id=t, content="second"),
                Comment(post_id=posts[0].id, user_id=b, content="bob on victim's post"),
                PostLike(post_id=bob_post.id, user_id=t),
                Follow(follower_id=t, following_id=b),
                Follow(follower_id=b, following_id=t),
                Notification(user_id=b, related_user_id=t, type="follow"),
                Story(user_id=t),
                Report(reason="bob is rude", reporter_id=t, reported_user_id=b),
            ]
        )
        db.commit()

    def _run(self, caller_id: uuid.UUID | None = None, user_id: object = "target", reason: str | None = None):
        caller_id = caller_id or self.admin_id
        body = DeleteAccountRequest(
            userId=str(self.target_id) if user_id == "target" else user_id,
            reason=reason,
        )
        return asyncio.run(
            delete_account(
                self.db,
                self.auth,
                f"Bearer {make_token(caller_id)}",
                body,
                self.settings,
            )
        )

    def _rows_for(self, user_id: uuid.UUID) -> dict[str, int]:
        q = self.db.query
        return {
            "posts": q(Post).filter(Post.user_id == user_id).count(),
            "comments": q(Comment).filter(Comment.user_id == user_id).count(),
            "likes": q(PostLike).filter(PostLike.user_id == user_id).count(),
            "following": q(Follow).filter(Follow.follower_id == user_id).count(),
            "followers": q(Follow).filter(Follow.following_id == user_id).count(),
            "notifications": q(Notification).filter(Notification.related_user_id == user_id).count(),
            "stories": q(Story).filter(Story.user_id == user_id).count(),
            "reports": q(Report).filter(Report.reporter_id == user_id).count(),
            "profile": q(Profile).filter(Profile.user_id == user_id).count(),
            "roles": q(UserRole).filter(UserRole.user_id == user_id).count(),
        }


class TestDeletionCompleteness(DeletionTestCase):
    def test_all_footprint_removed_email_banned_auth_gone(self) -> None:
        deleted = self._run(reason="abuse")
        self.assertEqual(deleted, self.target_id)

        self.assertEqual(set(self._rows_for(self.target_id).values()), {0})
        bans = self.db.query(BannedEmail).filter(BannedEmail.email == "victim@example.com").all()
        self.assertEqual(len(bans), 1)
        self.assertEqual(bans[0].reason, "abuse")
        self.assertEqual(bans[0].banned_by, self.admin_id)
        self.assertEqual(self.auth.deleted, [self.target_id])
        self.assertIsNone(asyncio.run(self.auth.get_user(self.target_id)))

    def test_bystander_data_survives(self) -> None:
        self._run()
        self.assertEqual(self.db.query(Post).filter(Post.user_id == self.bob_id).count(), 1)
        self.assertEqual(self.db.query(Profile).filter(Profile.user_id == self.bob_id).count(), 1)
        # bob's comment lived on the target's post and goes with it
        self.assertEqual(self.db.query(Comment).filter(Comment.user_id == self.bob_id).count(), 0)

    def test_default_reason(self) -> None:
        self._run(reason="   ")
        entry = self.db.query(BannedEmail).one()
        self.assertEqual(entry.reason, self.settings.DEFAULT_DELETE_REASON)

    def test_auth_record_deleted_after_data_committed(self) -> None:
        seen: dict[str, int] = {}

        def check(user_id: uuid.UUID) -> None:
            seen.update(self._rows_for(user_id))
            seen["bans"] = self.db.query(BannedEmail).count()

        self.auth.on_delete = check
        self._run()
        self.assertEqual(seen["profile"], 0)
        self.assertEqual(seen["posts"], 0)
        self.assertEqual(seen["roles"], 0)
        self.assertEqual(seen["bans"], 1)


class TestDeletionRefusals(DeletionTestCase):
    def _assert_untouched(self) -> None:
        rows = self._rows_for(self.target_id)
        self.assertEqual(rows["posts"], 3)
        self.assertEqual(rows["profile"], 1)
        self.assertEqual(self.db.query(BannedEmail).count(), 0)
        self.assertEqual(self.auth.deleted, [])

    def test_second_deletion_reports_user_not_found(self) -> None:
        self._run()
        with self.assertRaises(NotFoundError) as ctx:
            self._run()
        self.assertEqual(ctx.exception.message, "User not found")
        self.assertEqual(self.db.query(BannedEmail).count(), 1)
        self.assertEqual(self.auth.deleted, [self.target_id])

    def test_non_admin_caller_gets_admin_only(self) -> None:
        with self.assertRaises(AdminOnlyError) as ctx:
            self._run(caller_id=self.bob_id)
        self.assertEqual(ctx.exception.message, "Admin only")
        self._assert_untouched()

    def test_missing_header_is_unauthorized(self) -> None:
        body = DeleteAccountRequest(userId=str(self.target_id))
        with self.assertRaises(UnauthorizedError) as ctx:
            asyncio.run(delete_account(self.db, self.auth, None, body, self.settings))
        self.assertEqual(ctx.exception.message, "Unauthorized")
        self._assert_untouched()

    def test_bad_signature_is_unauthorized(self) -> None:
        token = make_token(self.admin_id, secret="x" * 40)
        body = DeleteAccountRequest(userId=str(self.target_id))
        with self.assertRaises(UnauthorizedError):
            asyncio.run(delete_account(self.db, self.auth, f"Bearer {token}", body, self.settings))

    def test_expired_token_is_unauthorized(self) -> None:
        token = make_token(self.admin_id, expires_in=timedelta(minutes=-5))
        body = DeleteAccountRequest(userId=str(self.target_id))
        with self.assertRaises(UnauthorizedError):
            asyncio.run(delete_account(self.db, self.auth, f"Bearer {token}", body, self.settings))

    def test_caller_without_auth_record_is_unauthorized(self) -> None:
        self.auth.users.pop(self.admin_id)
        with self.assertRaises(UnauthorizedError):
            self._run()
        self._assert_untouched()

    def test_missing_user_id(self) -> None:
        with self.assertRaises(ValidationFailedError) as ctx:
            self._run(user_id=None)
        self.assertEqual(ctx.exception.message, "userId required")

    def test_malformed_user_id(self) -> None:
        with self.assertRaises(ValidationFailedError):
            self._run(user_id="not-a-uuid")

    def test_admin_cannot_delete_itself(self) -> None:
        with self.assertRaises(ForbiddenTargetError):
            self._run(user_id=str(self.admin_id))
        self.assertIn(self.admin_id, self.auth.users)

    def test_admin_cannot_delete_another_admin(self) -> None:
        grant_role(self.db, self.target_id, "admin")
        with self.assertRaises(ForbiddenTargetError):
            self._run()
        self._assert_untouched()

    def test_admin_cannot_delete_principal_without_admin_role(self) -> None:
        chief = add_account(self.db, "chief", principal=True)
        self.auth.add(chief.user_id, "chief@example.com")
        with self.assertRaises(ForbiddenTargetError):
            self._run(user_id=str(chief.user_id))
        self.assertEqual(self.db.query(Profile).filter(Profile.user_id == chief.user_id).count(), 1)
        self.assertEqual(self.auth.deleted, [])

    def test_principal_can_delete_an_admin(self) -> None:
        grant_role(self.db, self.target_id, "admin")
        self._run(caller_id=self.principal.user_id)
        self.assertEqual(self._rows_for(self.target_id)["roles"], 0)
        self.assertEqual(self.auth.deleted, [self.target_id])


class TestDeletionRetry(DeletionTestCase):
    def test_auth_failure_keeps_erasure_and_retry_completes(self) -> None:
        self.auth.fail_delete = True
        with self.assertRaises(AuthApiError):
            self._run(reason="first try")
        self.assertEqual(self._rows_for(self.target_id)["profile"], 0)
        self.assertIn(self.target_id, self.auth.users)

        self.auth.fail_delete = False
        self._run(reason="second try")
        self.assertEqual(self.auth.deleted, [self.target_id])
        entry = self.db.query(BannedEmail).one()
        self.assertEqual(entry.reason, "second try")

    def test_account_without_email_is_not_banned(self) -> None:
        self.auth.add(self.target_id, None)
        self._run()
        self.assertEqual(self.db.query(BannedEmail).count(), 0)
        self.assertEqual(self.auth.deleted, [self.target_id])


class TestDeletionAtomicity(DeletionTestCase):
    def test_ledger_failure_rolls_back_erasure(self) -> None:
        with patch(
            "purgehub.services.account_deletion.upsert_banned_email",
            side_effect=RuntimeError("ledger unavailable"),
        ):
            with self.assertRaises(RuntimeError):
                self._run()
        rows = self._rows_for(self.target_id)
        self.assertEqual(rows["profile"], 1)
        self.assertEqual(rows["posts"], 3)
        self.assertEqual(rows["comments"], 2)
        self.assertEqual(rows["followers"], 1)
        self.assertEqual(self.db.query(BannedEmail).count(), 0)
        self.assertEqual(self.auth.deleted, [])
        self.assertIn(self.target_id, self.auth.users)


class TestLedgerAcrossPaths(DeletionTestCase):
    def test_direct_ban_then_deletion_keeps_one_row_with_latest_reason(self) -> None:
        moderation.ban_email(
            self.db,
            admin_context(self.principal.user_id, is_principal=True),
            BannedEmailCreate(email="victim@example.com", reason="spam wave"),
            self.settings,
        )
        self._run(reason="account erased")
        entries = self.db.query(BannedEmail).all()
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].email, "victim@example.com")
        self.assertEqual(entries[0].reason, "account erased")
        self.assertEqual(entries[0].banned_by, self.admin_id)


class TestEraseAccountRecords(DeletionTestCase):
    def test_counts_and_idempotence(self) -> None:
        counts = erase_account_records(self.db, self.target_id)
        self.db.commit()
        self.assertEqual(counts["posts.user_id"], 3)
        self.assertEqual(counts["comments.user_id"], 2)
        self.assertEqual(counts["follows.follower_id"], 1)
        self.assertEqual(counts["follows.following_id"], 1)
        self.assertEqual(counts["profiles.user_id"], 1)
        again = erase_account_records(self.db, self.target_id)
        self.assertEqual(sum(again.values()), 0)


if __name__ == "__main__":
    unittest.main()
