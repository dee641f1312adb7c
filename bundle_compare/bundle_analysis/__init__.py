from bundle_compare.bundle_analysis import models
from bundle_compare.bundle_analysis.comparison import (
    AssetChange,
    BundleSizeComparison,
    ComparisonResult,
    compare,
)
from bundle_compare.bundle_analysis.models import AssetRecord, SizeTotals
from bundle_compare.bundle_analysis.parser import (
    InvalidSnapshotError,
    load_snapshot,
    parse_snapshot,
)
from bundle_compare.bundle_analysis.report import comment_marker, render_comment
from bundle_compare.bundle_analysis.utils import (
    AssetNameNormalizer,
    normalize_asset_name,
    totals,
)

__all__ = [
    "models",
    "AssetChange",
    "AssetNameNormalizer",
    "AssetRecord",
    "BundleSizeComparison",
    "ComparisonResult",
    "InvalidSnapshotError",
    "SizeTotals",
    "comment_marker",
    "compare",
    "load_snapshot",
    "normalize_asset_name",
    "parse_snapshot",
    "render_comment",
    "totals",
]
