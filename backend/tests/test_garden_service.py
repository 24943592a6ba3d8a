"""
GardenGrid Backend — Garden Service Tests
===========================================

What:  Activation rules, owner scoping, resize reconciliation of beds and
       transactional rollback.
How:   Real queries against in-memory SQLite (see conftest.db_engine).

What we test:
    ✅ create_and_activate leaves exactly one active garden per owner
    ✅ deleting the active garden activates the newest remaining one
    ✅ deleting the last garden leaves the owner with none active
    ✅ another owner's garden is indistinguishable from a missing one
    ✅ a failure mid-activation rolls back the deactivation too
    ✅ a failure after the cascade rolls back the whole garden delete
    ✅ shrinking a garden moves beds that no longer fit to unplaced
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError

from gardengrid.database import session_scope
from gardengrid.exceptions import NotFoundError, ValidationError
from gardengrid.models import Bed, Garden, PlantInBed
from gardengrid.schemas.garden import GardenCreate, GardenUpdate
from gardengrid.services.garden_service import GardenService

OWNER = 7
OTHER_OWNER = 8


def _create(name="Backyard", width=10, height=10, owner=OWNER):
    return GardenCreate(userId=owner, garden_name=name, width=width, height=height)


async def _active_ids(db, owner=OWNER):
    result = await db.execute(
        select(Garden.id).where(Garden.owner_id == owner, Garden.is_active.is_(True))
    )
    return sorted(result.scalars().all())


class TestActivation:
    def setup_method(self):
        self.service = GardenService()

    @pytest.mark.asyncio
    async def test_second_create_deactivates_first(self, db):
        """After creating A then B, only B is active."""
        a = await self.service.create_and_activate(db, OWNER, _create("A"))
        b = await self.service.create_and_activate(db, OWNER, _create("B"))
        await db.commit()

        assert b.is_active
        assert await _active_ids(db) == [b.id]
        listed = {g.id: g.is_active for g in await self.service.list_gardens(db, OWNER)}
        assert listed == {a.id: False, b.id: True}

    @pytest.mark.asyncio
    async def test_owners_are_independent(self, db):
        mine = await self.service.create_and_activate(db, OWNER, _create("Mine"))
        theirs = await self.service.create_and_activate(db, OTHER_OWNER, _create("Theirs", owner=OTHER_OWNER))
        await db.commit()

        assert await _active_ids(db, OWNER) == [mine.id]
        assert await _active_ids(db, OTHER_OWNER) == [theirs.id]

    @pytest.mark.asyncio
    async def test_set_active_switches_the_active_garden(self, db):
        a = await self.service.create_and_activate(db, OWNER, _create("A"))
        await self.service.create_and_activate(db, OWNER, _create("B"))

        result = await self.service.set_active(db, a.id, OWNER)
        await db.commit()

        assert result.is_active
        assert await _active_ids(db) == [a.id]

    @pytest.mark.asyncio
    async def test_database_rejects_a_second_active_garden(self, db):
        """The partial unique index is the last line against double activation."""
        await self.service.create_and_activate(db, OWNER, _create("A"))
        db.add(Garden(owner_id=OWNER, garden_name="Sneaky", width=2, height=2, is_active=True))
        with pytest.raises(IntegrityError):
            await db.flush()

    @pytest.mark.asyncio
    async def test_invalid_dimensions_write_nothing(self, db):
        await self.service.create_and_activate(db, OWNER, _create("A"))
        with patch("gardengrid.services.garden_service.settings") as mock_settings:
            mock_settings.max_grid_dimension = 20
            with pytest.raises(ValidationError) as exc_info:
                await self.service.create_and_activate(db, OWNER, _create("Huge", width=21))
        assert exc_info.value.field == "width"
        assert len(await _active_ids(db)) == 1


class TestDeleteGarden:
    def setup_method(self):
        self.service = GardenService()

    @pytest.mark.asyncio
    async def test_deleting_active_activates_most_recent_remaining(self, db):
        first = await self.service.create_and_activate(db, OWNER, _create("First"))
        second = await self.service.create_and_activate(db, OWNER, _create("Second"))
        third = await self.service.create_and_activate(db, OWNER, _create("Third"))

        result = await self.service.delete_garden(db, OWNER, third.id)
        await db.commit()

        assert result.activated_garden_id == second.id
        assert await _active_ids(db) == [second.id]
        remaining = [g.id for g in await self.service.list_gardens(db, OWNER)]
        assert remaining == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_deleting_inactive_keeps_active(self, db):
        first = await self.service.create_and_activate(db, OWNER, _create("First"))
        second = await self.service.create_and_activate(db, OWNER, _create("Second"))

        result = await self.service.delete_garden(db, OWNER, first.id)

        assert result.activated_garden_id is None
        assert await _active_ids(db) == [second.id]

    @pytest.mark.asyncio
    async def test_deleting_last_garden_leaves_none_active(self, db):
        only = await self.service.create_and_activate(db, OWNER, _create("Only"))

        result = await self.service.delete_garden(db, OWNER, only.id)
        await db.commit()

        assert result.activated_garden_id is None
        assert await _active_ids(db) == []
        assert await self.service.list_gardens(db, OWNER) == []

    @pytest.mark.asyncio
    async def test_delete_cascades_to_beds(self, db):
        garden = await self.service.create_and_activate(db, OWNER, _create())
        db.add(Bed(garden_id=garden.id, name="Bed", width=2, height=2, top_position=0, left_position=0))
        await db.flush()

        await self.service.delete_garden(db, OWNER, garden.id)

        beds = (await db.execute(select(Bed))).scalars().all()
        assert beds == []


class TestOwnership:
    def setup_method(self):
        self.service = GardenService()

    @pytest.mark.asyncio
    async def test_foreign_garden_looks_missing(self, db):
        theirs = await self.service.create_and_activate(db, OTHER_OWNER, _create(owner=OTHER_OWNER))

        with pytest.raises(NotFoundError):
            await self.service.get_garden(db, OWNER, theirs.id)
        with pytest.raises(NotFoundError):
            await self.service.update_garden(db, OWNER, theirs.id, GardenUpdate(garden_name="Mine now"))
        with pytest.raises(NotFoundError):
            await self.service.delete_garden(db, OWNER, theirs.id)

        untouched = await self.service.get_garden(db, OTHER_OWNER, theirs.id)
        assert untouched.garden_name == "Backyard"
        assert untouched.is_active


class TestTransactionalRollback:
    def setup_method(self):
        self.service = GardenService()

    @pytest.mark.asyncio
    async def test_failure_after_deactivation_rolls_back(self, session_factory):
        """If the insert fails, the earlier deactivation must not be committed."""
        async with session_scope(session_factory) as db:
            original = await self.service.create_and_activate(db, OWNER, _create("Original"))

        failing_insert = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("disk full")))
        with patch.object(GardenService, "_insert_active_garden", failing_insert):
            with pytest.raises(OperationalError):
                async with session_scope(session_factory) as db:
                    await self.service.create_and_activate(db, OWNER, _create("Doomed"))

        failing_insert.assert_awaited_once()
        async with session_scope(session_factory) as db:
            assert await _active_ids(db) == [original.id]
            assert len(await self.service.list_gardens(db, OWNER)) == 1

    @pytest.mark.asyncio
    async def test_failure_after_cascade_keeps_garden_beds_and_plants(self, session_factory, make_catalog):
        """If reactivation fails, the plant and bed deletes are rolled back with it."""
        (kale,) = await make_catalog(("Kale", 1))
        async with session_scope(session_factory) as db:
            older = await self.service.create_and_activate(db, OWNER, _create("Older"))
            doomed = await self.service.create_and_activate(db, OWNER, _create("Doomed"))
            bed = Bed(garden_id=doomed.id, name="Bed", width=2, height=2, top_position=0, left_position=0)
            db.add(bed)
            await db.flush()
            db.add(PlantInBed(bed_id=bed.id, plant_id=kale.id, x_position=1, y_position=1))

        failing_activate = AsyncMock(side_effect=OperationalError("UPDATE", {}, Exception("connection lost")))
        with patch.object(GardenService, "_activate_newest", failing_activate):
            with pytest.raises(OperationalError):
                async with session_scope(session_factory) as db:
                    await self.service.delete_garden(db, OWNER, doomed.id)

        failing_activate.assert_awaited_once()
        async with session_scope(session_factory) as db:
            assert [g.id for g in await self.service.list_gardens(db, OWNER)] == [older.id, doomed.id]
            assert await _active_ids(db) == [doomed.id]
            beds = (await db.execute(select(Bed))).scalars().all()
            assert [b.garden_id for b in beds] == [doomed.id]
            plants = (await db.execute(select(PlantInBed))).scalars().all()
            assert [(p.bed_id, p.x_position, p.y_position) for p in plants] == [(beds[0].id, 1, 1)]

    @pytest.mark.asyncio
    async def test_set_active_failure_after_deactivation_rolls_back(self, session_factory):
        async with session_scope(session_factory) as db:
            first = await self.service.create_and_activate(db, OWNER, _create("First"))
            second = await self.service.create_and_activate(db, OWNER, _create("Second"))

        real_deactivate = GardenService._deactivate_gardens

        async def deactivate_then_fail(service, db, owner_id, keep_id=None):
            await real_deactivate(service, db, owner_id, keep_id=keep_id)
            raise OperationalError("UPDATE", {}, Exception("connection lost"))

        with patch.object(GardenService, "_deactivate_gardens", deactivate_then_fail):
            with pytest.raises(OperationalError):
                async with session_scope(session_factory) as db:
                    await self.service.set_active(db, first.id, OWNER)

        async with session_scope(session_factory) as db:
            assert await _active_ids(db) == [second.id]

    @pytest.mark.asyncio
    async def test_session_scope_rolls_back_on_error(self, mock_db_session):
        factory = lambda: _AsyncCtx(mock_db_session)  # noqa: E731

        with pytest.raises(RuntimeError):
            async with session_scope(factory):
                raise RuntimeError("boom")

        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.commit.assert_not_awaited()
        mock_db_session.close.assert_awaited()


class _AsyncCtx:
    def __init__(self, session):
        self.session = session

    async def __aenter__(self):
        return self.session

    async def __aexit__(self, *exc):
        return False


class TestResizeGarden:
    def setup_method(self):
        self.service = GardenService()

    @pytest.mark.asyncio
    async def test_shrink_unplaces_beds_that_no_longer_fit(self, db):
        garden = await self.service.create_and_activate(db, OWNER, _create(width=10, height=10))
        keeps = Bed(garden_id=garden.id, name="Keeps", width=3, height=3, top_position=0, left_position=0)
        loses = Bed(garden_id=garden.id, name="Loses", width=3, height=3, top_position=5, left_position=5)
        parked = Bed(garden_id=garden.id, name="Parked", width=4, height=4, top_position=-1, left_position=-1)
        db.add_all([keeps, loses, parked])
        await db.flush()

        result = await self.service.update_garden(db, OWNER, garden.id, GardenUpdate(width=6, height=6))
        await db.commit()

        assert result.unplaced_bed_ids == [loses.id]
        assert (result.width, result.height) == (6, 6)
        assert keeps.is_placed and (keeps.top_position, keeps.left_position) == (0, 0)
        assert not loses.is_placed
        assert (loses.width, loses.height) == (3, 3)
        assert not parked.is_placed

    @pytest.mark.asyncio
    async def test_rename_only_touches_nothing_else(self, db):
        garden = await self.service.create_and_activate(db, OWNER, _create(width=4, height=5))
        result = await self.service.update_garden(db, OWNER, garden.id, GardenUpdate(garden_name="Front"))
        assert result.garden_name == "Front"
        assert (result.width, result.height, result.is_active) == (4, 5, True)
        assert result.unplaced_bed_ids == []
