import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

import sentry_sdk

from bundle_compare.bundle_analysis.comparison import AssetChange, ComparisonResult
from bundle_compare.bundle_analysis.models import AssetRecord
from bundle_compare.bundle_analysis.utils import totals
from bundle_compare.helpers.size import format_percent, format_size_pair

log = logging.getLogger(__name__)

DEFAULT_TITLE = "Vite Bundle Size Comparison"
DEFAULT_CHANGESET_LIMIT = 20
DEFAULT_DETAILS_LIMIT = 50

NO_CHANGES_MESSAGE = "No files were changed"
TABLE_HEADER = (
    "| Asset | File Size | % Changed |",
    "| ----- | --------- | --------- |",
)


@dataclass(frozen=True)
class CommentRow:
    asset: str
    size: str
    changed: str

    def to_markdown(self) -> str:
        return f"| {self.asset} | {self.size} | {self.changed} |"


def comment_marker(title: str) -> str:
    """
    Hidden marker used to find (and update) a previously posted comment with the same title
    """
    return f"<!-- bundle-size-compare-action key:{title} -->"


def _sizes_cell(parsed_base: int, parsed_head: int, gzip_base: int, gzip_head: int):
    return (
        f"{format_size_pair(parsed_base, parsed_head)}<br />"
        f"{format_size_pair(gzip_base, gzip_head)} (gzip)"
    )


def change_to_row(change: AssetChange) -> CommentRow:
    if change.change_type == AssetChange.ChangeType.ADDED:
        return CommentRow(
            asset=change.next.name,
            size=_sizes_cell(0, change.next.parsed_size, 0, change.next.gzip_size),
            changed="new",
        )
    if change.change_type == AssetChange.ChangeType.REMOVED:
        return CommentRow(
            asset=change.previous.name,
            size=_sizes_cell(
                change.previous.parsed_size, 0, change.previous.gzip_size, 0
            ),
            changed="-100.00%",
        )
    # resized assets are shown by their normalized name, the hashes differ anyway
    return CommentRow(
        asset=change.key,
        size=_sizes_cell(
            change.previous.parsed_size,
            change.next.parsed_size,
            change.previous.gzip_size,
            change.next.gzip_size,
        ),
        changed=format_percent(change.previous.parsed_size, change.next.parsed_size),
    )


def changes_to_rows(changes: Iterable[AssetChange]) -> List[CommentRow]:
    return [change_to_row(change) for change in changes]


def render_table(rows: Sequence[CommentRow], limit: int = DEFAULT_CHANGESET_LIMIT):
    if not rows:
        return NO_CHANGES_MESSAGE
    lines = [*TABLE_HEADER, *(row.to_markdown() for row in rows[:limit])]
    return "\n".join(lines)


@sentry_sdk.trace
def render_comment(
    base_records: Sequence[AssetRecord],
    current_records: Sequence[AssetRecord],
    comparison: ComparisonResult,
    title: str = DEFAULT_TITLE,
    changeset_limit: int = DEFAULT_CHANGESET_LIMIT,
    details_limit: int = DEFAULT_DETAILS_LIMIT,
) -> str:
    """
    Renders the pull request comment body summarizing a bundle size comparison.

    The comment ends with a marker derived from `title`, so re-running against
    the same title lets the caller replace the previous comment instead of
    posting a new one.
    """
    base_total = totals(base_records)
    current_total = totals(current_records)

    added_rows = changes_to_rows(comparison.added)
    removed_rows = changes_to_rows(comparison.removed)
    bigger_rows = changes_to_rows(comparison.bigger)
    smaller_rows = changes_to_rows(comparison.smaller)
    changeset_rows = added_rows + removed_rows + bigger_rows + smaller_rows

    total_sizes = _sizes_cell(
        base_total.parsed, current_total.parsed, base_total.gzip, current_total.gzip
    )
    total_percent = format_percent(base_total.parsed, current_total.parsed)

    sections = [
        f"### Bundle Stats - {title}",
        "This comment is generated automatically from Vite stats JSON files.",
        "**Total**",
        "\n".join(
            [
                "Files count | Total bundle size | % Changed",
                "----------- | ----------------- | ---------",
                f"{len(current_records)} | {total_sizes} | {total_percent}",
            ]
        ),
        "Changeset",
        render_table(changeset_rows, changeset_limit),
        "<details>\n<summary>View detailed bundle breakdown</summary>",
        "**Added**",
        render_table(added_rows, details_limit),
        "**Removed**",
        render_table(removed_rows, details_limit),
        "**Bigger**",
        render_table(bigger_rows, details_limit),
        "**Smaller**",
        render_table(smaller_rows, details_limit),
        "</details>",
        comment_marker(title),
    ]
    log.debug(
        "Rendered bundle size comment",
        extra=dict(title=title, changeset_rows=len(changeset_rows)),
    )
    return "\n\n".join(sections).strip()
