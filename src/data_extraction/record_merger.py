"""Merge same-named record lists into one normalised table.

Records discovered under one identifier, possibly in several files, are
deduplicated by their ``id`` and padded so that every record carries the
full field set of the table.
"""
from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Callable, Iterable, Mapping, Sequence

from src.shared.models.dataset import Record, Table

logger = logging.getLogger(__name__)

# A record together with the file it came from
TaggedRecord = tuple[Record, str]

IdFactory = Callable[[], str]


def default_id_factory() -> str:
    """Synthetic key for a record without an ``id``."""
    return f"no-id-{uuid.uuid4().hex}"


def _id_key(value: object) -> str:
    """Type-aware dedup key, so ``1`` and ``"1"`` stay distinct."""
    return "id:" + json.dumps(value, sort_keys=True, default=str)


def collect_fields(records: Iterable[Mapping[str, object]]) -> list[str]:
    """Union of field names across *records*, in first-seen order."""
    fields: dict[str, None] = {}
    for record in records:
        for key in record:
            fields.setdefault(key, None)
    return list(fields)


def merge_records(
    name: str,
    tagged: Sequence[TaggedRecord],
    id_factory: IdFactory | None = None,
) -> Table:
    """Build the table for identifier *name*.

    Args:
        name: Identifier the records were declared under (for logging).
        tagged: Records with their source file, in traversal order.
        id_factory: Produces keys for records without an ``id``.  Those keys
            only separate the records internally and never reach the output.

    Returns:
        A table whose records all share the same keys.  For records sharing
        an ``id``, later non-null values win.
    """
    make_key = id_factory or default_id_factory
    records = [record for record, _ in tagged]
    fields = collect_fields(records)
    logger.debug("Fields for %s: %s", name, fields)

    unique: dict[str, Record] = {}
    for record in records:
        record_id = record.get("id")
        if record_id is None:
            # Position suffix keeps synthetic keys unique even if the factory repeats
            key = f"{make_key()}#{len(unique)}"
            unique[key] = dict(record)
            continue

        key = _id_key(record_id)
        existing = unique.get(key)
        if existing is None:
            unique[key] = dict(record)
            continue

        merged = dict(existing)
        for field, value in record.items():
            if value is not None:
                merged[field] = value
        unique[key] = merged
        logger.debug("Merged duplicate %s record with id %r", name, record_id)

    data: list[Record] = [
        {field: record.get(field) for field in fields} for record in unique.values()
    ]

    source_files: dict[str, None] = {}
    for _, source_file in tagged:
        source_files.setdefault(source_file, None)

    logger.info("Normalized %d unique record(s) for %s", len(data), name)
    return Table(data=data, source_files=list(source_files))


def merge_tables(
    grouped: Mapping[str, Sequence[TaggedRecord]],
    id_factory: IdFactory | None = None,
) -> dict[str, Table]:
    """Merge every identifier group, preserving discovery order of names."""
    tables: dict[str, Table] = {}
    for name, tagged in grouped.items():
        if not tagged:
            continue
        tables[name] = merge_records(name, tagged, id_factory=id_factory)
    return tables
