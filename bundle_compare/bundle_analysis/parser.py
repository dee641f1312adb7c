import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, List, Union

import orjson

from bundle_compare.bundle_analysis.models import AssetRecord
from bundle_compare.validation.snapshot import make_asset_entry_validator

log = logging.getLogger(__name__)


class InvalidSnapshotError(Exception):
    def __init__(self, source: str, message: str, errors=None):
        self.source = source
        self.message = message
        self.errors = errors

    def __str__(self) -> str:
        return self.message


def parse_snapshot(data: Any, source: str = "<memory>") -> List[AssetRecord]:
    """
    Turns a decoded Vite stats JSON array into asset records.

    The top level value must be an array of objects; every entry is checked
    against the asset entry schema before being converted.
    """
    if not isinstance(data, list):
        raise InvalidSnapshotError(source, f"Expected array JSON in {source}")

    validator = make_asset_entry_validator()
    records = []
    for index, entry in enumerate(data):
        if not isinstance(entry, Mapping):
            raise InvalidSnapshotError(
                source, f"Expected object at index {index} in {source}"
            )
        if not validator.validate(entry):
            raise InvalidSnapshotError(
                source,
                f"Invalid asset entry at index {index} in {source}: {validator.errors}",
                errors=validator.errors,
            )
        records.append(AssetRecord.from_stats_entry(entry))
    return records


def load_snapshot(path: Union[str, Path]) -> List[AssetRecord]:
    path = Path(path)
    try:
        data = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as exc:
        raise InvalidSnapshotError(
            str(path), f"Couldn't decode JSON in {path}: {exc}"
        ) from exc

    records = parse_snapshot(data, source=str(path))
    log.info(
        "Loaded bundle snapshot",
        extra=dict(path=str(path), asset_count=len(records)),
    )
    return records
