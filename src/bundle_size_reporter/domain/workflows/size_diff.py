from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path, PurePath

from bundle_size_reporter.domain.models.asset_record import SizeSnapshot, is_tracked_asset
from bundle_size_reporter.domain.models.build_result import AssetDescriptor
from bundle_size_reporter.domain.models.canonical_key import canonical_key
from bundle_size_reporter.domain.models.size_report import DiffKind, SizeDiff, SizeReportRow

LARGE_DIFF_THRESHOLD = 50 * 1024


def classify_delta(current_size: int, previous_size: int | None) -> SizeDiff:
    if previous_size is None:
        return SizeDiff(kind=DiffKind.NONE, delta=None)

    delta = current_size - previous_size
    if delta >= LARGE_DIFF_THRESHOLD:
        kind = DiffKind.LARGE_INCREASE
    elif delta > 0:
        kind = DiffKind.SMALL_INCREASE
    elif delta < 0:
        kind = DiffKind.DECREASE
    else:
        kind = DiffKind.NONE
    return SizeDiff(kind=kind, delta=delta)


def sort_rows(rows: Sequence[SizeReportRow]) -> list[SizeReportRow]:
    # sorted() is stable: equal sizes keep their emitted order.
    return sorted(rows, key=lambda row: row.size, reverse=True)


def build_size_report(
    assets: Sequence[AssetDescriptor],
    snapshot: SizeSnapshot,
    output_dir: Path,
    output_label: str,
    size_of: Callable[[Path], int],
) -> list[SizeReportRow]:
    """Join this build's assets against the previous snapshot.

    Sizes are re-read from ``output_dir``; ``output_label`` is the folder
    prefix shown to the user (the output path as configured).
    """
    rows: list[SizeReportRow] = []
    for asset in assets:
        if not is_tracked_asset(asset.name):
            continue
        relative = PurePath(asset.name)
        size = size_of(output_dir / relative)
        previous_size = snapshot.get(canonical_key(relative))
        rows.append(
            SizeReportRow(
                folder=str(PurePath(output_label) / relative.parent),
                name=relative.name,
                size=size,
                diff=classify_delta(size, previous_size),
            )
        )
    return sort_rows(rows)
