"""Integration tests for the SQLAlchemy repositories on a real database."""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from domain.entities.match import LikeRecord, MatchRecord
from domain.entities.message import Message
from domain.services.chat_list_service import ChatListService
from domain.services.conflicts import is_unique_violation
from domain.services.match_service import MatchService
from infrastructure.database.repositories.sqlalchemy_profile_catalog import (
    SQLAlchemyProfileCatalog,
)
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.realtime.change_feed import ChangeFeed
from tests.conftest import OTHER_USER_ID, TEST_USER_ID, SeedProfile

T0 = datetime(2026, 3, 1, 9, 0, 0)


@pytest.fixture
def uow_factory(session_factory: async_sessionmaker[AsyncSession]):
    return lambda: SQLAlchemyUnitOfWork(session_factory)


async def _create_match(uow_factory, match: MatchRecord) -> None:
    async with uow_factory() as uow:
        await uow.matches.create(match)
        await uow.commit()


class TestLikeRepository:
    @pytest.mark.asyncio
    async def test_upsert_is_idempotent(self, uow_factory) -> None:
        a, b = uuid4(), uuid4()
        async with uow_factory() as uow:
            await uow.likes.upsert(LikeRecord(from_id=a, to_id=b, created_at=T0))
            await uow.commit()
        async with uow_factory() as uow:
            await uow.likes.upsert(LikeRecord(from_id=a, to_id=b, created_at=T0 + timedelta(1)))
            await uow.commit()

        async with uow_factory() as uow:
            assert await uow.likes.exists(a, b) is True
            assert await uow.likes.exists(b, a) is False
            assert await uow.likes.get_targets(a) == {b}


class TestMatchRepository:
    @pytest.mark.asyncio
    async def test_second_create_is_unique_violation(self, uow_factory) -> None:
        a, b = uuid4(), uuid4()
        await _create_match(uow_factory, MatchRecord(user_a=a, user_b=b))

        async with uow_factory() as uow:
            with pytest.raises(IntegrityError) as exc_info:
                await uow.matches.create(MatchRecord(user_a=b, user_b=a))

        assert is_unique_violation(exc_info.value)

    @pytest.mark.asyncio
    async def test_lookup_by_either_participant(self, uow_factory) -> None:
        a, b, c = uuid4(), uuid4(), uuid4()
        older = MatchRecord(user_a=a, user_b=b, created_at=T0)
        newer = MatchRecord(user_a=c, user_b=a, created_at=T0 + timedelta(hours=1))
        await _create_match(uow_factory, older)
        await _create_match(uow_factory, newer)

        async with uow_factory() as uow:
            matches = await uow.matches.get_all_for_user(a)
            partners = await uow.matches.get_partner_ids(a)
            fetched = await uow.matches.get(older.id)

        assert [m.id for m in matches] == [newer.id, older.id]
        assert partners == {b, c}
        assert fetched == older

    @pytest.mark.asyncio
    async def test_delete_reports_whether_it_existed(self, uow_factory) -> None:
        match = MatchRecord(user_a=uuid4(), user_b=uuid4())
        await _create_match(uow_factory, match)

        async with uow_factory() as uow:
            assert await uow.matches.delete(match.id) is True
            assert await uow.matches.delete(match.id) is False
            await uow.commit()


class TestMessageRepository:
    @pytest.fixture
    async def match(self, uow_factory) -> MatchRecord:
        match = MatchRecord(user_a=uuid4(), user_b=uuid4())
        await _create_match(uow_factory, match)
        return match

    @pytest.mark.asyncio
    async def test_position_is_unique_per_match(self, uow_factory, match: MatchRecord) -> None:
        async with uow_factory() as uow:
            await uow.messages.create(
                Message(match_id=match.id, sender_id=match.user_a, text="a", position=0)
            )
            await uow.commit()

        async with uow_factory() as uow:
            with pytest.raises(IntegrityError) as exc_info:
                await uow.messages.create(
                    Message(match_id=match.id, sender_id=match.user_b, text="b", position=0)
                )

        assert is_unique_violation(exc_info.value)

    @pytest.mark.asyncio
    async def test_same_timestamp_orders_by_position(
        self, uow_factory, match: MatchRecord
    ) -> None:
        async with uow_factory() as uow:
            for position, text in [(2, "c"), (0, "a"), (1, "b")]:
                await uow.messages.create(
                    Message(
                        match_id=match.id,
                        sender_id=match.user_a,
                        text=text,
                        created_at=T0,
                        position=position,
                    )
                )
            await uow.commit()

        async with uow_factory() as uow:
            thread = await uow.messages.list_ordered(match.id)
            latest = await uow.messages.get_latest(match.id)

        assert [m.text for m in thread] == ["a", "b", "c"]
        assert latest is not None and latest.text == "c"

    @pytest.mark.asyncio
    async def test_seen_only_moves_forward(self, uow_factory, match: MatchRecord) -> None:
        message = Message(match_id=match.id, sender_id=match.user_a, text="hey")
        async with uow_factory() as uow:
            await uow.messages.create(message)
            await uow.commit()

        async with uow_factory() as uow:
            assert await uow.messages.mark_seen(match.id, message.id) is True
            assert await uow.messages.mark_seen(match.id, message.id) is False
            await uow.commit()

        async with uow_factory() as uow:
            stored = await uow.messages.get(match.id, message.id)
            assert stored is not None and stored.seen is True
            assert await uow.messages.get("other-match", message.id) is None

    @pytest.mark.asyncio
    async def test_mark_all_seen_skips_own_messages(
        self, uow_factory, match: MatchRecord
    ) -> None:
        async with uow_factory() as uow:
            for position, sender in enumerate([match.user_a, match.user_b, match.user_a]):
                await uow.messages.create(
                    Message(
                        match_id=match.id,
                        sender_id=sender,
                        text=str(position),
                        position=position,
                    )
                )
            await uow.commit()

        async with uow_factory() as uow:
            assert await uow.messages.mark_all_seen(match.id, match.user_b) == 2
            await uow.commit()

        async with uow_factory() as uow:
            thread = await uow.messages.list_ordered(match.id)
        assert [m.seen for m in thread] == [True, False, True]

    @pytest.mark.asyncio
    async def test_delete_conversation(self, uow_factory, match: MatchRecord) -> None:
        async with uow_factory() as uow:
            for position in range(3):
                await uow.messages.create(
                    Message(
                        match_id=match.id,
                        sender_id=match.user_a,
                        text="x",
                        position=position,
                    )
                )
            await uow.commit()

        async with uow_factory() as uow:
            assert await uow.messages.delete_conversation(match.id) == 3
            await uow.commit()

        async with uow_factory() as uow:
            assert await uow.messages.list_ordered(match.id) == []


class TestProfileCatalog:
    @pytest.mark.asyncio
    async def test_lists_in_catalog_order(
        self, session_factory: async_sessionmaker[AsyncSession], seed_profile: SeedProfile
    ) -> None:
        first = await seed_profile("First", created_at=T0)
        second = await seed_profile("Second", created_at=T0 + timedelta(minutes=1))
        catalog = SQLAlchemyProfileCatalog(session_factory)

        profiles = await catalog.list_all()
        missing = await catalog.get(uuid4())
        found = await catalog.get(second)

        assert [p.id for p in profiles] == [first, second]
        assert missing is None
        assert found is not None and found.name == "Second"


class TestUnmatchKeepsLikes:
    @pytest.mark.asyncio
    async def test_likes_survive_unmatch(
        self,
        uow_factory,
        session_factory: async_sessionmaker[AsyncSession],
        seed_profile: SeedProfile,
    ) -> None:
        a = await seed_profile("A", gender="male", interested_in="female")
        b = await seed_profile("B", gender="female", interested_in="male")
        service = MatchService(uow_factory, SQLAlchemyProfileCatalog(session_factory))

        await service.like(a, b)
        outcome = await service.like(b, a)
        await service.unmatch(a, b)

        assert outcome.created is True
        assert await service.list_matches(a) == []
        assert await service.has_liked(a, b) is True
        assert await service.has_liked(b, a) is True


class TestWatchChatList:
    @pytest.mark.asyncio
    async def test_match_formation_pushes_new_snapshot(
        self,
        uow_factory,
        session_factory: async_sessionmaker[AsyncSession],
        seed_profile: SeedProfile,
    ) -> None:
        a = await seed_profile("A", gender="male", interested_in="female")
        b = await seed_profile("B", gender="female", interested_in="male")
        feed = ChangeFeed(queue_size=8)
        catalog = SQLAlchemyProfileCatalog(session_factory)
        matches = MatchService(uow_factory, catalog, change_feed=feed)
        chats = ChatListService(uow_factory, catalog, change_feed=feed)

        stream = chats.watch_chat_list(a)
        try:
            assert await stream.__anext__() == []
            await matches.like(a, b)
            await matches.like(b, a)
            snapshot = await stream.__anext__()
        finally:
            await stream.aclose()

        assert [p.profile.name for p in snapshot] == ["B"]
        assert snapshot[0].preview_text == "Start chatting!"


class TestUnitOfWork:
    def test_repositories_require_context(self, uow_factory) -> None:
        uow = uow_factory()

        with pytest.raises(RuntimeError):
            uow.likes

    @pytest.mark.asyncio
    async def test_uncommitted_writes_are_discarded(self, uow_factory) -> None:
        a, b = uuid4(), uuid4()
        async with uow_factory() as uow:
            await uow.likes.upsert(LikeRecord(from_id=a, to_id=b))

        async with uow_factory() as uow:
            assert await uow.likes.exists(a, b) is False

    @pytest.mark.asyncio
    async def test_exception_rolls_back(self, uow_factory) -> None:
        a, b = uuid4(), uuid4()
        with pytest.raises(ValueError):
            async with uow_factory() as uow:
                await uow.likes.upsert(LikeRecord(from_id=a, to_id=b))
                raise ValueError("boom")

        async with uow_factory() as uow:
            assert await uow.likes.exists(a, b) is False


class TestDigitOnlyIds:
    """IDs whose hex has no letters must round-trip as UUIDs, not numbers."""

    @pytest.mark.asyncio
    async def test_like_and_match_ids_round_trip(self, uow_factory) -> None:
        async with uow_factory() as uow:
            await uow.likes.upsert(LikeRecord(from_id=TEST_USER_ID, to_id=OTHER_USER_ID))
            await uow.matches.create(MatchRecord(user_a=OTHER_USER_ID, user_b=TEST_USER_ID))
            await uow.commit()

        async with uow_factory() as uow:
            targets = await uow.likes.get_targets(TEST_USER_ID)
            partners = await uow.matches.get_partner_ids(OTHER_USER_ID)
            (match,) = await uow.matches.get_all_for_user(TEST_USER_ID)

        assert targets == {OTHER_USER_ID}
        assert partners == {TEST_USER_ID}
        assert (match.user_a, match.user_b) == (TEST_USER_ID, OTHER_USER_ID)

    @pytest.mark.asyncio
    async def test_message_sender_round_trips(self, uow_factory) -> None:
        match = MatchRecord(user_a=TEST_USER_ID, user_b=OTHER_USER_ID)
        await _create_match(uow_factory, match)
        async with uow_factory() as uow:
            await uow.messages.create(
                Message(match_id=match.id, sender_id=TEST_USER_ID, text="hi!")
            )
            await uow.commit()

        async with uow_factory() as uow:
            latest = await uow.messages.get_latest(match.id)

        assert latest is not None
        assert latest.sender_id == TEST_USER_ID
