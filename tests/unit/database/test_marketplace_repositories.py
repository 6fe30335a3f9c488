#!/usr/bin/env python3
"""
Repository and schema tests against in-memory SQLite.
"""

import uuid
from datetime import timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from core.utils import utc_now
from database.models import Match, MatchStatus, Message, make_pair_key
from database.repository import Repositories
from database.uow import marketplace_uow
from tests import days_from_today

pytestmark = pytest.mark.db


@pytest.fixture
def repos(db_session):
    return Repositories(db_session)


class TestPairKey:

    def test_pair_key_is_direction_independent(self):
        a, b = uuid.uuid4(), uuid.uuid4()
        assert make_pair_key(a, b) == make_pair_key(b, a)

    def test_reverse_pair_violates_unique_constraint(self, repos, make_user):
        a = make_user()
        b = make_user()
        repos.matches.create(a.id, b.id)
        repos.commit()

        with pytest.raises(IntegrityError):
            repos.matches.create(b.id, a.id)
        repos.rollback()

    def test_get_between_either_direction(self, repos, make_user):
        a = make_user()
        b = make_user()
        match = repos.matches.create(a.id, b.id)
        repos.commit()

        assert repos.matches.get_between(b.id, a.id).id == match.id
        assert repos.matches.get_between(a.id, b.id, status=MatchStatus.ACCEPTED) is None


class TestMatchTransitions:

    def test_transition_from_pending_only_once(self, repos, make_user):
        a = make_user()
        b = make_user()
        match = repos.matches.create(a.id, b.id)
        repos.commit()

        assert repos.matches.transition_from_pending(match.id, MatchStatus.ACCEPTED) is True
        assert repos.matches.transition_from_pending(match.id, MatchStatus.DECLINED) is False
        repos.commit()

        repos.db.refresh(match)
        assert match.status == MatchStatus.ACCEPTED

    def test_expire_pending_before(self, repos, make_user):
        a, b, c, d = make_user(), make_user(), make_user(), make_user()
        stale = repos.matches.create(a.id, b.id)
        fresh = repos.matches.create(a.id, c.id)
        accepted = repos.matches.create(b.id, d.id)
        accepted.status = MatchStatus.ACCEPTED
        old = utc_now() - timedelta(days=40)
        stale.updated_at = old
        accepted.updated_at = old
        repos.commit()

        count = repos.matches.expire_pending_before(utc_now() - timedelta(days=30))
        repos.commit()

        assert count == 1
        assert stale.status == MatchStatus.EXPIRED
        assert fresh.status == MatchStatus.PENDING
        assert accepted.status == MatchStatus.ACCEPTED


class TestMessages:

    def _message(self, repos, sender, receiver, match, minutes_ago, is_read=False):
        message = Message(
            sender_id=sender.id,
            receiver_id=receiver.id,
            match_id=match.id if match else None,
            content=f"sent {minutes_ago} minutes ago",
            is_read=is_read,
            created_at=utc_now() - timedelta(minutes=minutes_ago)
        )
        repos.db.add(message)
        return message

    def test_page_for_match_newest_first_with_total(self, repos, make_user):
        a, b = make_user(), make_user()
        match = repos.matches.create(a.id, b.id)
        for minutes in (50, 40, 30, 20, 10):
            self._message(repos, a, b, match, minutes)
        repos.commit()

        page, total = repos.messages.page_for_match(match.id, offset=0, limit=2)

        assert total == 5
        assert [m.content for m in page] == ["sent 10 minutes ago", "sent 20 minutes ago"]

    def test_mark_read_only_touches_receiver_messages(self, repos, make_user):
        a, b = make_user(), make_user()
        match = repos.matches.create(a.id, b.id)
        to_b = self._message(repos, a, b, match, 5)
        to_a = self._message(repos, b, a, match, 4)
        repos.commit()

        assert repos.messages.mark_read([to_b.id, to_a.id], b.id) == 1
        assert repos.messages.mark_read([to_b.id], b.id) == 0
        repos.commit()

        assert repos.messages.count_unread(b.id) == 0
        assert repos.messages.count_unread(a.id) == 1

    def test_deleting_match_keeps_messages(self, repos, make_user):
        a, b = make_user(), make_user()
        match = repos.matches.create(a.id, b.id)
        message = self._message(repos, a, b, match, 1)
        repos.commit()
        message_id = message.id

        repos.db.delete(match)
        repos.commit()
        repos.db.expire_all()

        remaining = repos.db.get(Message, message_id)
        assert remaining is not None
        assert remaining.match_id is None

    def test_deleting_user_cascades(self, repos, make_user):
        a, b = make_user(), make_user()
        match = repos.matches.create(a.id, b.id)
        self._message(repos, a, b, match, 1)
        repos.commit()

        repos.db.delete(a)
        repos.commit()
        repos.db.expire_all()

        assert repos.db.execute(select(Match)).scalars().all() == []
        assert repos.db.execute(select(Message)).scalars().all() == []


class TestUserSearch:

    def test_search_marketplace_filters_listed_users(self, repos, make_user):
        viewer = make_user()
        listed = make_user(wedding_location="Round Rock, TX", wedding_theme="Boho Chic")
        make_user(profile_visible=False)
        make_user(is_email_verified=False)
        make_user(profile_completed=False)

        results = repos.users.search_marketplace(exclude_user_id=viewer.id)

        assert [u.id for u in results] == [listed.id]

    def test_search_marketplace_column_filters(self, repos, make_user):
        viewer = make_user()
        near = make_user(wedding_date=days_from_today(210), estimated_budget=15000, wedding_theme="Beach")
        make_user(wedding_date=days_from_today(600))
        make_user(estimated_budget=90000)

        results = repos.users.search_marketplace(
            exclude_user_id=viewer.id,
            date_start=days_from_today(100),
            date_end=days_from_today(300),
            theme="beach",
            budget_max=20000
        )

        assert [u.id for u in results] == [near.id]

    def test_search_marketplace_pages_in_query(self, repos, make_user):
        viewer = make_user()
        users = [make_user(wedding_date=days_from_today(190 + i)) for i in range(3)]
        make_user(profile_visible=False)

        first = repos.users.search_marketplace(exclude_user_id=viewer.id, offset=0, limit=2)
        rest = repos.users.search_marketplace(exclude_user_id=viewer.id, offset=2, limit=2)

        assert [u.id for u in first] == [users[0].id, users[1].id]
        assert [u.id for u in rest] == [users[2].id]

    def test_count_marketplace_matches_filters(self, repos, make_user):
        viewer = make_user()
        make_user(estimated_budget=15000)
        make_user(estimated_budget=18000)
        make_user(estimated_budget=90000)
        make_user(is_email_verified=False, estimated_budget=15000)

        assert repos.users.count_marketplace(exclude_user_id=viewer.id) == 3
        assert repos.users.count_marketplace(exclude_user_id=viewer.id, budget_max=20000) == 2


class TestUnitOfWork:

    def test_commits_on_success(self, db_manager, make_user):
        a, b = make_user(), make_user()

        with marketplace_uow(db_manager) as uow_repos:
            uow_repos.matches.create(a.id, b.id)

        with marketplace_uow(db_manager) as uow_repos:
            assert uow_repos.matches.get_between(a.id, b.id) is not None

    def test_rolls_back_on_error(self, db_manager, make_user):
        a, b = make_user(), make_user()

        with pytest.raises(RuntimeError):
            with marketplace_uow(db_manager) as uow_repos:
                uow_repos.matches.create(a.id, b.id)
                raise RuntimeError("boom")

        with marketplace_uow(db_manager) as uow_repos:
            assert uow_repos.matches.get_between(a.id, b.id) is None
