from dataclasses import dataclass
from typing import Any, Mapping

UNKNOWN_ASSET_NAME = "unknown"


@dataclass(frozen=True)
class AssetRecord:
    """
    A single build output file as measured in one stats snapshot.
    """

    name: str
    parsed_size: int = 0
    gzip_size: int = 0

    @classmethod
    def from_stats_entry(cls, entry: Mapping[str, Any]) -> "AssetRecord":
        """
        Builds a record out of one entry of a Vite stats JSON array.

        The name is taken from `filename`, then `label` (first one that is not null),
        falling back to "unknown". Missing sizes count as 0 bytes.
        """
        name = entry.get("filename")
        if name is None:
            name = entry.get("label")
        if name is None:
            name = UNKNOWN_ASSET_NAME

        parsed_size = entry.get("parsedSize")
        gzip_size = entry.get("gzipSize")
        return cls(
            name=name,
            parsed_size=parsed_size if parsed_size is not None else 0,
            gzip_size=gzip_size if gzip_size is not None else 0,
        )


@dataclass(frozen=True)
class SizeTotals:
    parsed: int = 0
    gzip: int = 0

    def __add__(self, other: "SizeTotals") -> "SizeTotals":
        if not isinstance(other, SizeTotals):
            return NotImplemented
        return SizeTotals(
            parsed=self.parsed + other.parsed, gzip=self.gzip + other.gzip
        )
