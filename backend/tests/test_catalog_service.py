"""
GardenGrid Backend — Plant Catalog Tests
==========================================

What:  Reading the JSON seed file, seeding an empty catalog once, and
       flagging spacings the editor cannot draw.
"""

import json
import logging

import pytest

from gardengrid.exceptions import CatalogLoadError, NotFoundError
from gardengrid.services.catalog_service import CatalogService


def _write_seed(tmp_path, entries, name="plants.json"):
    path = tmp_path / name
    path.write_text(json.dumps(entries), encoding="utf-8")
    return str(path)


SEED = [
    {"common_name": "Tomato", "scientific_name": "Solanum lycopersicum", "icon_image": "tomato.png", "spacing": 4},
    {"common_name": "Basil", "spacing": 1},
    {"common_name": "Pumpkin", "spacing": 9},
    {"common_name": "Leek", "spacing": 2},
]


class TestReadSeedFile:
    def setup_method(self):
        self.service = CatalogService()

    @pytest.mark.asyncio
    async def test_parses_entries(self, tmp_path):
        plants = await self.service.read_seed_file(_write_seed(tmp_path, SEED))
        assert [(p.common_name, p.spacing) for p in plants] == [
            ("Tomato", 4), ("Basil", 1), ("Pumpkin", 9), ("Leek", 2),
        ]
        assert plants[0].scientific_name == "Solanum lycopersicum"

    @pytest.mark.asyncio
    async def test_spacing_defaults_to_one(self, tmp_path):
        (plant,) = await self.service.read_seed_file(_write_seed(tmp_path, [{"common_name": "Chive"}]))
        assert plant.spacing == 1

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogLoadError, match="Could not read"):
            await self.service.read_seed_file(str(tmp_path / "nope.json"))

    @pytest.mark.asyncio
    async def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(CatalogLoadError, match="not valid JSON"):
            await self.service.read_seed_file(str(path))

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "entries",
        [
            {"common_name": "Not a list"},
            [{"spacing": 4}],
            [{"common_name": "Bean", "spacing": "four"}],
            ["Carrot"],
        ],
    )
    async def test_malformed_content(self, tmp_path, entries):
        with pytest.raises(CatalogLoadError):
            await self.service.read_seed_file(_write_seed(tmp_path, entries))


class TestSeedCatalog:
    def setup_method(self):
        self.service = CatalogService()

    @pytest.mark.asyncio
    async def test_seeds_empty_catalog_and_flags_unsupported_spacing(
        self, tmp_path, session_factory, db, caplog
    ):
        path = _write_seed(tmp_path, SEED)
        with caplog.at_level(logging.WARNING, logger="gardengrid.services.catalog_service"):
            result = await self.service.seed_catalog_from_file(path, factory=session_factory)

        assert result.inserted == 4
        assert not result.skipped
        assert result.unsupported == [{"common_name": "Leek", "spacing": 2}]
        assert any("unsupported spacing 2" in r.getMessage() for r in caplog.records)

        catalog = await self.service.list_catalog(db)
        by_name = {p.common_name: p for p in catalog}
        assert [p.common_name for p in catalog] == ["Basil", "Leek", "Pumpkin", "Tomato"]
        assert by_name["Tomato"].footprint_size == 2
        assert by_name["Pumpkin"].footprint_size == 3
        assert by_name["Leek"].footprint_size == 1
        assert not by_name["Leek"].spacing_supported
        assert by_name["Basil"].spacing_supported

    @pytest.mark.asyncio
    async def test_second_seed_is_skipped(self, tmp_path, session_factory, db):
        path = _write_seed(tmp_path, SEED)
        await self.service.seed_catalog_from_file(path, factory=session_factory)

        again = await self.service.seed_catalog_from_file(path, factory=session_factory)

        assert again.skipped
        assert again.inserted == 0
        assert len(await self.service.list_catalog(db)) == 4

    @pytest.mark.asyncio
    async def test_get_catalog_plant(self, make_catalog, db):
        (mint,) = await make_catalog(("Mint", 1))
        found = await self.service.get_catalog_plant(db, mint.id)
        assert found.common_name == "Mint"
        with pytest.raises(NotFoundError):
            await self.service.get_catalog_plant(db, mint.id + 100)
