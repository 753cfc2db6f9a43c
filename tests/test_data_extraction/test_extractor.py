"""Tests for the DataExtractor orchestration pass."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from src.data_extraction.extractor import DataExtractor
from src.dataset.store import DatasetStore
from src.shared.config import ExtractionConfig
from src.shared.models.dataset import ExtractionStatus


def _read_dataset(root: Path, name: str = "data.json") -> dict:
    return json.loads((root / name).read_text(encoding="utf-8"))


class TestFullPass:
    @pytest.mark.asyncio
    async def test_music_project(self, music_project: Path):
        result = await DataExtractor().extract(music_project)

        assert result.status == ExtractionStatus.EXTRACTED
        assert result.ok
        assert result.message == (
            "Data extracted successfully - found 3 tables with data from 2 pages"
        )
        assert result.entry_points == ["src/app/library/page.tsx", "src/app/page.tsx"]
        assert list(result.tables) == ["playlists", "recentlyPlayed", "albums"]
        assert result.dataset_path == str(music_project / "data.json")

    @pytest.mark.asyncio
    async def test_components_merged_across_files(self, music_project: Path):
        result = await DataExtractor().extract(music_project)

        albums = result.tables["albums"]
        assert albums.data == [
            {"id": "1", "title": "Album One", "artist": "The Band", "year": 2020},
            {"id": "2", "title": "Album Two", "artist": "Other Band", "year": None},
            {"id": "3", "title": "Album Three", "artist": None, "year": 2022},
        ]
        assert albums.source_files == [
            "src/components/AlbumGrid.tsx",
            "src/app/Featured/index.tsx",
        ]

    @pytest.mark.asyncio
    async def test_persisted_document(self, music_project: Path):
        await DataExtractor().extract(music_project)

        document = _read_dataset(music_project)
        assert set(document) == {"playlists", "recentlyPlayed", "albums"}
        assert document["recentlyPlayed"] == {
            "data": [
                {"id": "1", "title": "Song A", "artist": "Artist A", "duration": 180},
                {"id": "2", "title": "Song B", "artist": "Artist B", "duration": 200},
            ],
            "sourceFiles": ["src/app/page.tsx"],
        }
        assert document["playlists"]["data"] == [
            {"name": "Chill", "tracks": 12},
            {"name": "Focus", "tracks": 30},
        ]

    @pytest.mark.asyncio
    async def test_api_routes_not_scanned(self, music_project: Path):
        result = await DataExtractor().extract(music_project)
        assert "songs" not in result.tables
        assert all("api" not in p.split("/") for p in result.entry_points)

    def test_extract_sync(self, music_project: Path):
        result = DataExtractor().extract_sync(music_project)
        assert result.status == ExtractionStatus.EXTRACTED

    @pytest.mark.asyncio
    async def test_custom_dataset_filename(self, music_project: Path):
        config = ExtractionConfig(dataset_filename="seed-data.json")
        result = await DataExtractor(config).extract(music_project)
        assert result.status == ExtractionStatus.EXTRACTED
        assert (music_project / "seed-data.json").exists()
        assert not (music_project / "data.json").exists()


class TestCrossPageMerge:
    @pytest.mark.asyncio
    async def test_same_id_in_two_pages(self, write_project):
        root = write_project(
            {
                "src/app/a/page.tsx": """
                    const albums = [
                      { id: "1", title: "One", artist: "Band" },
                      { id: "2", title: "Two", artist: "Other" },
                    ];
                """,
                "src/app/b/page.tsx": """
                    const albums = [
                      { id: "1", title: "One", year: 1999 },
                      { id: "3", title: "Three", year: 2001 },
                    ];
                """,
            }
        )
        result = await DataExtractor().extract(root)

        albums = result.tables["albums"]
        first = next(r for r in albums.data if r["id"] == "1")
        assert first == {"id": "1", "title": "One", "artist": "Band", "year": 1999}
        assert len(albums.data) == 3
        assert albums.source_files == ["src/app/a/page.tsx", "src/app/b/page.tsx"]

    @pytest.mark.asyncio
    async def test_shared_component_scanned_once(self, write_project):
        shared_import = 'import Shared from "@/components/Shared";\n'
        root = write_project(
            {
                "src/app/a/page.tsx": shared_import,
                "src/app/b/page.tsx": shared_import,
                "src/components/Shared.tsx": """
                    const items = [
                      { label: "First item" },
                      { label: "Second item" },
                    ];
                """,
            }
        )
        result = await DataExtractor().extract(root)

        items = result.tables["items"]
        assert len(items.data) == 2
        assert items.source_files == ["src/components/Shared.tsx"]


class TestShortCircuits:
    @pytest.mark.asyncio
    async def test_existing_dataset_skips_without_reading(self, music_project: Path):
        (music_project / "data.json").write_text("{}", encoding="utf-8")

        with patch("src.data_extraction.extractor.ProjectWalker") as walker_cls:
            result = await DataExtractor().extract(music_project)

        walker_cls.assert_not_called()
        assert result.status == ExtractionStatus.ALREADY_EXTRACTED
        assert result.message == "Data already extracted - skipping extraction"
        assert result.ok

    @pytest.mark.asyncio
    async def test_second_run_leaves_file_identical(self, music_project: Path):
        await DataExtractor().extract(music_project)
        before = (music_project / "data.json").read_bytes()

        result = await DataExtractor().extract(music_project)

        assert result.status == ExtractionStatus.ALREADY_EXTRACTED
        assert (music_project / "data.json").read_bytes() == before

    @pytest.mark.asyncio
    async def test_fresh_runs_are_byte_identical(self, music_project: Path):
        dataset = music_project / "data.json"
        await DataExtractor().extract(music_project)
        first = dataset.read_bytes()
        dataset.unlink()

        await DataExtractor().extract(music_project)

        assert dataset.read_bytes() == first

    @pytest.mark.asyncio
    async def test_no_entry_points(self, write_project):
        root = write_project({"src/app/layout.tsx": "export default 1;"})
        result = await DataExtractor().extract(root)

        assert result.status == ExtractionStatus.NO_ENTRY_POINTS
        assert result.message == "No page.tsx files found - no data to extract"
        assert not (root / "data.json").exists()

    @pytest.mark.asyncio
    async def test_missing_app_directory(self, tmp_path: Path):
        result = await DataExtractor().extract(tmp_path)
        assert result.status == ExtractionStatus.NO_ENTRY_POINTS

    @pytest.mark.asyncio
    async def test_no_data(self, write_project):
        root = write_project(
            {"src/app/page.tsx": "const flag = [0];\nexport default function P() {}\n"}
        )
        result = await DataExtractor().extract(root)

        assert result.status == ExtractionStatus.NO_DATA
        assert result.message == "No array constants found in components"
        assert result.ok
        assert not (root / "data.json").exists()


class TestFailures:
    @pytest.mark.asyncio
    async def test_unreadable_entry_point_is_fatal(self, write_project):
        root = write_project({"src/app/ok/page.tsx": "const x = 1;"})
        (root / "src" / "app" / "page.tsx").write_bytes(b"\xff\xfe\xfa broken")

        result = await DataExtractor().extract(root)

        assert result.status == ExtractionStatus.ERROR
        assert not result.ok
        assert result.message.startswith("Error extracting data:")
        assert not (root / "data.json").exists()

    @pytest.mark.asyncio
    async def test_write_failure_reported(
        self, music_project: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setattr(
            DatasetStore, "save", MagicMock(side_effect=OSError("disk full"))
        )
        result = await DataExtractor().extract(music_project)

        assert result.status == ExtractionStatus.ERROR
        assert "disk full" in result.message
        assert "albums" in result.tables

    @pytest.mark.asyncio
    async def test_unresolved_import_is_skipped(
        self, write_project, caplog: pytest.LogCaptureFixture
    ):
        caplog.set_level(logging.WARNING, logger="src")
        root = write_project(
            {
                "src/app/page.tsx": """
                    import Missing from "@/components/Missing";

                    const songs = [
                      { id: "1", title: "Song A" },
                      { id: "2", title: "Song B" },
                    ];
                """,
            }
        )
        result = await DataExtractor().extract(root)

        assert result.status == ExtractionStatus.EXTRACTED
        assert list(result.tables) == ["songs"]
        assert "Could not read component file for import: @/components/Missing" in caplog.text

    @pytest.mark.asyncio
    async def test_unparseable_array_is_skipped(
        self, write_project, caplog: pytest.LogCaptureFixture
    ):
        caplog.set_level(logging.WARNING, logger="src")
        root = write_project(
            {
                "src/app/page.tsx": """
                    const icons = [
                      { id: "1", icon: <Home /> },
                      { id: "2", icon: <Search /> },
                    ];
                    const links = [
                      { id: "1", href: "/home" },
                      { id: "2", href: "/search" },
                    ];
                """,
            }
        )
        result = await DataExtractor().extract(root)

        assert list(result.tables) == ["links"]
        assert "Failed to extract data for icons from src/app/page.tsx" in caplog.text

    @pytest.mark.asyncio
    async def test_bad_records_do_not_block_the_write(self, write_project):
        root = write_project(
            {
                "src/app/page.tsx": """
                    const tracks = [
                      { id: "1", title: "bad \\uD800 escape" },
                      { id: "2", title: "fine" },
                    ];
                    const albums = [
                      { id: 0x_, title: "broken" },
                      { id: 2, title: "X" },
                      { id: 3, title: "Y" },
                    ];
                """,
            }
        )
        result = await DataExtractor().extract(root)

        assert result.status == ExtractionStatus.EXTRACTED
        document = _read_dataset(root)
        assert document["tracks"]["data"] == [{"id": "2", "title": "fine"}]
        assert [r["id"] for r in document["albums"]["data"]] == [2, 3]


class TestIdFactory:
    @pytest.mark.asyncio
    async def test_injected_factory_used_for_records_without_id(self, music_project: Path):
        factory = MagicMock(side_effect=lambda: "fixed")
        result = await DataExtractor(id_factory=factory).extract(music_project)

        assert factory.call_count == 2
        assert len(result.tables["playlists"].data) == 2
