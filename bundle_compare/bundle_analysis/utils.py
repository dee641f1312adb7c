import re
from typing import Iterable, Pattern, Union

from bundle_compare.bundle_analysis.models import AssetRecord, SizeTotals

# a hyphen followed by 8+ hash-like characters, right before the final extension
DEFAULT_HASH_PATTERN = r"-[A-Za-z0-9_-]{8,}(?=\.[^.]+$)"
DEFAULT_HASH_PLACEHOLDER = "-[hash]"


class AssetNameNormalizer:
    """
    Maps an asset filename to the key used to group "the same" asset across builds.

    Bundlers embed content hashes in the emitted filenames (`app-1a2b3c4d.js`), so
    the raw names of two builds almost never line up. The hash segment is replaced
    by a fixed placeholder; only the first match is replaced so directory-like
    segments earlier in the name are left alone.

    The pattern is a heuristic tuned for Vite/Rollup output and can be swapped for
    other naming conventions without touching the comparison itself.
    """

    def __init__(
        self,
        pattern: Union[str, Pattern[str]] = DEFAULT_HASH_PATTERN,
        placeholder: str = DEFAULT_HASH_PLACEHOLDER,
    ):
        if not isinstance(placeholder, str):
            raise TypeError(
                f"hash placeholder must be a string, got {type(placeholder).__name__}"
            )
        self.pattern = re.compile(pattern)
        self.placeholder = placeholder

    def __call__(self, name: str) -> str:
        # a callable replacement keeps backslashes in the placeholder literal
        return self.pattern.sub(lambda _: self.placeholder, name, count=1)

    def __repr__(self) -> str:
        return f"AssetNameNormalizer(pattern={self.pattern.pattern!r}, placeholder={self.placeholder!r})"


default_normalizer = AssetNameNormalizer()


def normalize_asset_name(name: str) -> str:
    return default_normalizer(name)


def totals(records: Iterable[AssetRecord]) -> SizeTotals:
    """
    Sums parsed and gzip sizes of a snapshot independently.
    """
    parsed, gzip = 0, 0
    for record in records:
        parsed += record.parsed_size
        gzip += record.gzip_size
    return SizeTotals(parsed=parsed, gzip=gzip)
