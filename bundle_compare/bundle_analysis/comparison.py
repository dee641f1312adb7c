import logging
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import sentry_sdk

from bundle_compare.bundle_analysis.models import AssetRecord
from bundle_compare.bundle_analysis.utils import normalize_asset_name
from bundle_compare.helpers.size import to_fixed

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssetChange:
    """
    Info about how an asset has changed between the base and current snapshots.

    `key` is the normalized (hash-free) name the asset was matched on. `previous`
    is None for added assets and `next` is None for removed ones. For those the
    deltas are the full size of the asset that appeared or disappeared.
    """

    class ChangeType(Enum):
        BIGGER = "bigger"
        SMALLER = "smaller"
        ADDED = "added"
        REMOVED = "removed"

    key: str
    change_type: ChangeType
    parsed_delta: int
    gzip_delta: int
    previous: Optional[AssetRecord] = None
    next: Optional[AssetRecord] = None

    @property
    def size_base(self) -> int:
        return self.previous.parsed_size if self.previous is not None else 0

    @property
    def size_head(self) -> int:
        return self.next.parsed_size if self.next is not None else 0

    @property
    def percentage_delta(self) -> Optional[float]:
        """
        Parsed size change as a percentage of the base size, rounded to 2 decimals
        the same way the report rounds it.
        None when the base size is 0, as the ratio is undefined.
        """
        if self.size_base == 0:
            return None
        return float(to_fixed((self.parsed_delta / self.size_base) * 100))


@dataclass(frozen=True)
class ComparisonResult:
    bigger: Tuple[AssetChange, ...] = ()
    smaller: Tuple[AssetChange, ...] = ()
    added: Tuple[AssetChange, ...] = ()
    removed: Tuple[AssetChange, ...] = ()

    @property
    def changes(self) -> Tuple[AssetChange, ...]:
        """All reported changes, added and removed assets first."""
        return self.added + self.removed + self.bigger + self.smaller

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)


@dataclass
class AssetGroup:
    key: str
    base: List[AssetRecord]
    current: List[AssetRecord]


AssetMatch = Tuple[Optional[AssetRecord], Optional[AssetRecord]]


def _by_parsed_size(record: AssetRecord) -> int:
    return record.parsed_size


class BundleSizeComparison:
    """
    Compares two snapshots of asset sizes (base and current builds).

    Inputs are never mutated and no state is shared between instances, so
    comparisons can run concurrently.
    """

    def __init__(
        self,
        base_records: Sequence[AssetRecord],
        current_records: Sequence[AssetRecord],
        normalizer: Callable[[str], str] = normalize_asset_name,
    ):
        self.base_records = tuple(base_records)
        self.current_records = tuple(current_records)
        self.normalizer = normalizer

    @cached_property
    def asset_groups(self) -> Dict[str, AssetGroup]:
        # this groups assets by normalized name
        # base keys come first, then keys only seen in the current snapshot
        groups: Dict[str, AssetGroup] = {}
        for record in self.base_records:
            key = self.normalizer(record.name)
            groups.setdefault(key, AssetGroup(key, [], [])).base.append(record)
        for record in self.current_records:
            key = self.normalizer(record.name)
            groups.setdefault(key, AssetGroup(key, [], [])).current.append(record)
        return groups

    def _match_assets(
        self, base: List[AssetRecord], current: List[AssetRecord]
    ) -> List[AssetMatch]:
        """
        The given base and current assets all share the same normalized name.
        This method picks the matching of assets between base and current.

        Current approach:
        1. Sort both sides by parsed size (ties keep snapshot order)
        2. Pair them by rank, smallest with smallest
        3. Leftover current assets were added, leftover base assets were removed

        There is no notion of content identity here: two unrelated assets whose
        names normalize to the same key will be paired with each other.
        """
        base = sorted(base, key=_by_parsed_size)
        current = sorted(current, key=_by_parsed_size)
        pair_count = min(len(base), len(current))

        # (A, B) means that asset A transformed to asset B
        # (X, None) means that asset X was deleted
        # (None, X) means that asset X was added
        matches: List[AssetMatch] = list(zip(base[:pair_count], current[:pair_count]))
        matches += [(None, record) for record in current[pair_count:]]
        matches += [(record, None) for record in base[pair_count:]]
        return matches

    def _asset_change(
        self, key: str, previous: Optional[AssetRecord], next: Optional[AssetRecord]
    ) -> Optional[AssetChange]:
        if previous is None:
            return AssetChange(
                key=key,
                change_type=AssetChange.ChangeType.ADDED,
                parsed_delta=next.parsed_size,
                gzip_delta=next.gzip_size,
                next=next,
            )
        elif next is None:
            return AssetChange(
                key=key,
                change_type=AssetChange.ChangeType.REMOVED,
                parsed_delta=-previous.parsed_size,
                gzip_delta=-previous.gzip_size,
                previous=previous,
            )

        parsed_delta = next.parsed_size - previous.parsed_size
        if parsed_delta == 0:
            # no visible change, even if the gzip size moved
            return None
        return AssetChange(
            key=key,
            change_type=(
                AssetChange.ChangeType.BIGGER
                if parsed_delta > 0
                else AssetChange.ChangeType.SMALLER
            ),
            parsed_delta=parsed_delta,
            gzip_delta=next.gzip_size - previous.gzip_size,
            previous=previous,
            next=next,
        )

    @sentry_sdk.trace
    def asset_changes(self) -> List[AssetChange]:
        changes = []
        for group in self.asset_groups.values():
            for previous, next in self._match_assets(group.base, group.current):
                change = self._asset_change(group.key, previous, next)
                if change is not None:
                    changes.append(change)
        return changes

    @sentry_sdk.trace
    def comparison_result(self) -> ComparisonResult:
        buckets: Dict[AssetChange.ChangeType, List[AssetChange]] = {
            change_type: [] for change_type in AssetChange.ChangeType
        }
        for change in self.asset_changes():
            buckets[change.change_type].append(change)

        result = ComparisonResult(
            bigger=tuple(
                sorted(
                    buckets[AssetChange.ChangeType.BIGGER],
                    key=lambda change: change.parsed_delta,
                    reverse=True,
                )
            ),
            smaller=tuple(
                sorted(
                    buckets[AssetChange.ChangeType.SMALLER],
                    key=lambda change: change.parsed_delta,
                )
            ),
            added=tuple(
                sorted(
                    buckets[AssetChange.ChangeType.ADDED],
                    key=lambda change: change.next.parsed_size,
                    reverse=True,
                )
            ),
            removed=tuple(
                sorted(
                    buckets[AssetChange.ChangeType.REMOVED],
                    key=lambda change: change.previous.parsed_size,
                    reverse=True,
                )
            ),
        )
        log.debug(
            "Compared bundle snapshots",
            extra=dict(
                base_assets=len(self.base_records),
                current_assets=len(self.current_records),
                groups=len(self.asset_groups),
                bigger=len(result.bigger),
                smaller=len(result.smaller),
                added=len(result.added),
                removed=len(result.removed),
            ),
        )
        return result


def compare(
    base_records: Sequence[AssetRecord],
    current_records: Sequence[AssetRecord],
    normalizer: Callable[[str], str] = normalize_asset_name,
) -> ComparisonResult:
    return BundleSizeComparison(
        base_records, current_records, normalizer=normalizer
    ).comparison_result()
