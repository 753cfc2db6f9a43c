"""Shared test fixtures for the seeder test suite."""
from __future__ import annotations

import json
import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from src.dataset.store import DatasetStore
from src.shared.models.dataset import Table, TableStatus

ProjectWriter = Callable[[dict[str, str]], Path]


@pytest.fixture
def write_project(tmp_path: Path) -> ProjectWriter:
    """Return a helper that writes ``{relative_path: source}`` under a project root."""
    root = tmp_path / "project"
    root.mkdir()

    def _write(files: dict[str, str]) -> Path:
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(textwrap.dedent(content), encoding="utf-8")
        return root

    return _write


@pytest.fixture
def music_project(write_project: ProjectWriter) -> Path:
    """A small app with two pages, an aliased component and a folder component."""
    return write_project(
        {
            "src/app/page.tsx": """
                import Link from "next/link";
                import AlbumGrid from "@/components/AlbumGrid";
                import Featured from "./Featured";

                const recentlyPlayed = [
                  { id: "1", title: "Song A", artist: "Artist A", duration: 180 },
                  { id: "2", title: "Song B", artist: "Artist B", duration: 200 },
                ];

                export default function Home() {
                  return <AlbumGrid items={recentlyPlayed} />;
                }
            """,
            "src/app/Featured/index.tsx": """
                export const albums = [
                  { id: "1", title: "Album One", year: 2020 },
                  { id: "3", title: "Album Three", year: 2022 },
                ];
            """,
            "src/components/AlbumGrid.tsx": """
                const albums: Album[] = [
                  { id: "1", title: "Album One", artist: 'The Band' },
                  { id: "2", title: "Album Two", artist: 'Other Band', },
                ];
                const sizes = [0];
            """,
            "src/app/library/page.tsx": """
                const playlists = [
                  { name: "Chill", tracks: 12 },
                  { name: "Focus", tracks: 30 },
                ];
            """,
            "src/app/api/songs/page.tsx": """
                const songs = [
                  { id: "9", title: "Should be ignored" },
                  { id: "10", title: "Also ignored" },
                ];
            """,
        }
    )


@pytest.fixture
def dataset_store(tmp_path: Path) -> DatasetStore:
    """A store pre-populated with two tables and an ``apiRoutes`` entry."""
    root = tmp_path / "dataset_project"
    root.mkdir()
    document = {
        "songs": {
            "data": [
                {"id": "1", "title": "A", "plays": 10},
                {"id": "2", "title": "B", "plays": None},
            ],
            "sourceFiles": ["src/app/page.tsx"],
        },
        "albums": {
            "data": [{"id": "1", "title": "X", "year": 2020}],
            "sourceFiles": ["src/components/Albums.tsx"],
            "status": {"schemaGenerated": True, "seeded": False},
        },
        "apiRoutes": {"songs": "src/app/api/songs/route.ts"},
    }
    (root / "data.json").write_text(json.dumps(document, indent=2), encoding="utf-8")
    return DatasetStore(root)


@pytest.fixture
def sample_tables() -> dict[str, Table]:
    return {
        "recentlyPlayed": Table(
            data=[
                {"id": "1", "title": "Song A", "artist": None},
                {"id": "2", "title": "Song B", "artist": "Artist B"},
            ],
            source_files=["src/app/page.tsx"],
            status=TableStatus(schema_generated=True),
        ),
        "emptyTable": Table(data=[], source_files=[]),
    }
