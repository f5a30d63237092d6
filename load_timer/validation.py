# load_timer/validation.py
"""
Interval checks for marked loads.

Everything here is a pure function of its arguments and works on raw
player seconds (no frame rounding), so two loads that touch at the same
timestamp are never reported as overlapping because of rounding.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Sequence, Tuple

from .domain import (
    CLEAR_STATUS,
    KIND_RUN,
    WARNING_ERROR,
    WARNING_INVALID_DURATION,
    WARNING_OUTSIDE_RUN,
    WARNING_OVERLAP,
    Load,
    TimingItem,
    ValidationStatus,
    ValidationWarning,
    load_label,
)


def intervals_overlap(start_a: float, end_a: float, start_b: float, end_b: float) -> bool:
    """Half-open test: touching endpoints (end_a == start_b) do not overlap."""
    return start_a < end_b and end_a > start_b


def validate_load(
    start: Optional[float],
    end: Optional[float],
    all_loads: Sequence[Load],
    self_index: int,
    adj_run_start: Optional[float],
    adj_run_end: Optional[float],
) -> ValidationStatus:
    """
    Classify one load against its siblings and the adjusted run boundaries.

    An incomplete load (either edge None) is pending, never in error.
    The run check only applies once both run boundaries are known.
    """
    if start is None or end is None:
        return CLEAR_STATUS

    is_invalid_duration = end <= start

    is_outside_run = False
    if adj_run_start is not None and adj_run_end is not None:
        is_outside_run = start < adj_run_start or end > adj_run_end

    is_overlapping = False
    for idx, other in enumerate(all_loads):
        if idx == self_index or not other.is_complete:
            continue
        if intervals_overlap(start, end, other.start_time, other.end_time):
            is_overlapping = True
            break

    return ValidationStatus(
        is_overlapping=is_overlapping,
        is_invalid_duration=is_invalid_duration,
        is_outside_run=is_outside_run,
    )


def run_duration_warning(
    adj_run_start: Optional[float],
    adj_run_end: Optional[float],
) -> Optional[ValidationWarning]:
    if adj_run_start is None or adj_run_end is None:
        return None
    if adj_run_end > adj_run_start:
        return None
    return ValidationWarning(
        type=WARNING_ERROR,
        message="Run end must be after run start.",
    )


def _labels(positions: Sequence[int]) -> str:
    if len(positions) == 1:
        return load_label(positions[0])
    return "Loads " + ", ".join(f"#{p + 1}" for p in positions)


@dataclass(frozen=True)
class ValidationReport:
    overlapping_indices: FrozenSet[int] = frozenset()
    invalid_duration_indices: FrozenSet[int] = frozenset()
    outside_run_indices: FrozenSet[int] = frozenset()
    statuses: Tuple[ValidationStatus, ...] = ()
    warnings: Tuple[ValidationWarning, ...] = field(default_factory=tuple)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def status_for(self, index: int) -> ValidationStatus:
        if 0 <= index < len(self.statuses):
            return self.statuses[index]
        return CLEAR_STATUS

    def item_status(self, item: TimingItem) -> ValidationStatus:
        return get_item_validation_status(
            item,
            self.overlapping_indices,
            self.invalid_duration_indices,
            self.outside_run_indices,
        )


def validate_loads(
    loads: Sequence[Load],
    adj_run_start: Optional[float],
    adj_run_end: Optional[float],
) -> ValidationReport:
    """
    Validate the whole collection.

    Warnings come out in a fixed order: run error, invalid durations,
    outside-run, then one overlap warning per overlapping pair (i < j).
    """
    statuses = [
        validate_load(ld.start_time, ld.end_time, loads, i, adj_run_start, adj_run_end)
        for i, ld in enumerate(loads)
    ]

    overlapping = frozenset(i for i, s in enumerate(statuses) if s.is_overlapping)
    invalid = frozenset(i for i, s in enumerate(statuses) if s.is_invalid_duration)
    outside = frozenset(i for i, s in enumerate(statuses) if s.is_outside_run)

    warnings: List[ValidationWarning] = []

    run_warning = run_duration_warning(adj_run_start, adj_run_end)
    if run_warning is not None:
        warnings.append(run_warning)

    if invalid:
        positions = sorted(invalid)
        warnings.append(ValidationWarning(
            type=WARNING_INVALID_DURATION,
            message=f"{_labels(positions)}: end time must be after start time.",
            affected_loads=tuple(loads[p].id for p in positions),
        ))

    if outside:
        positions = sorted(outside)
        warnings.append(ValidationWarning(
            type=WARNING_OUTSIDE_RUN,
            message=f"{_labels(positions)}: outside the run start/end.",
            affected_loads=tuple(loads[p].id for p in positions),
        ))

    for i in sorted(overlapping):
        a = loads[i]
        for j in range(i + 1, len(loads)):
            b = loads[j]
            if not b.is_complete:
                continue
            if intervals_overlap(a.start_time, a.end_time, b.start_time, b.end_time):
                warnings.append(ValidationWarning(
                    type=WARNING_OVERLAP,
                    message=f"{load_label(i)} and {load_label(j)} have overlapping timeframes.",
                    affected_loads=(a.id, b.id),
                ))

    return ValidationReport(
        overlapping_indices=overlapping,
        invalid_duration_indices=invalid,
        outside_run_indices=outside,
        statuses=tuple(statuses),
        warnings=tuple(warnings),
    )


def get_item_validation_status(
    item: TimingItem,
    overlapping: FrozenSet[int],
    invalid_duration: FrozenSet[int],
    outside_run: FrozenSet[int],
) -> ValidationStatus:
    """Per-row badge flags. The run row never carries badges."""
    if item.kind == KIND_RUN or item.load_index is None:
        return CLEAR_STATUS
    idx = item.load_index
    return ValidationStatus(
        is_overlapping=idx in overlapping,
        is_invalid_duration=idx in invalid_duration,
        is_outside_run=idx in outside_run,
    )
