"""Load interval validation."""

import pytest

from load_timer.domain import (
    KIND_LOAD,
    KIND_RUN,
    WARNING_ERROR,
    WARNING_INVALID_DURATION,
    WARNING_OUTSIDE_RUN,
    WARNING_OVERLAP,
    Load,
    TimingItem,
)
from load_timer.validation import (
    get_item_validation_status,
    intervals_overlap,
    run_duration_warning,
    validate_load,
    validate_loads,
)


def _loads(*pairs):
    return [Load(id=i + 1, start_time=s, end_time=e) for i, (s, e) in enumerate(pairs)]


class TestValidateLoad:
    @pytest.mark.parametrize("start,end", [(None, None), (1.0, None), (None, 1.0)])
    def test_incomplete_is_never_in_error(self, start, end):
        others = _loads((0.0, 100.0))
        status = validate_load(start, end, others, 5, 10.0, 20.0)
        assert not status.is_overlapping
        assert not status.is_invalid_duration
        assert not status.is_outside_run
        assert not status.has_error

    def test_clean(self):
        loads = _loads((1.0, 3.0), (3.0, 5.0))
        for i, ld in enumerate(loads):
            status = validate_load(ld.start_time, ld.end_time, loads, i, 0.0, 10.0)
            assert not status.has_error

    def test_overlap_flags_both(self):
        loads = _loads((2.0, 4.0), (3.0, 6.0))
        a = validate_load(2.0, 4.0, loads, 0, None, None)
        b = validate_load(3.0, 6.0, loads, 1, None, None)
        assert a.is_overlapping and b.is_overlapping
        assert a.has_error and b.has_error

    def test_outside_run_end(self):
        loads = _loads((9.0, 12.0))
        status = validate_load(9.0, 12.0, loads, 0, 0.0, 10.0)
        assert status.is_outside_run
        assert not status.is_invalid_duration
        assert status.has_error

    def test_outside_run_start(self):
        status = validate_load(0.5, 2.0, _loads((0.5, 2.0)), 0, 1.0, 10.0)
        assert status.is_outside_run

    def test_no_run_boundaries_no_outside(self):
        status = validate_load(100.0, 200.0, _loads((100.0, 200.0)), 0, 0.0, None)
        assert not status.is_outside_run

    def test_zero_length_is_invalid(self):
        loads = _loads((5.0, 5.0), (4.0, 6.0))
        status = validate_load(5.0, 5.0, loads, 0, None, None)
        assert status.is_invalid_duration
        assert status.is_overlapping

    def test_zero_length_without_neighbours(self):
        status = validate_load(5.0, 5.0, _loads((5.0, 5.0)), 0, None, None)
        assert status.is_invalid_duration
        assert not status.is_overlapping

    def test_negative_duration(self):
        status = validate_load(6.0, 5.0, _loads((6.0, 5.0)), 0, None, None)
        assert status.is_invalid_duration

    def test_incomplete_siblings_ignored(self):
        loads = [Load(id=1, start_time=1.0, end_time=5.0), Load(id=2, start_time=2.0)]
        assert not validate_load(1.0, 5.0, loads, 0, None, None).is_overlapping


class TestIntervalsOverlap:
    def test_touching_is_not_overlap(self):
        assert not intervals_overlap(1.0, 3.0, 3.0, 5.0)
        assert not intervals_overlap(3.0, 5.0, 1.0, 3.0)

    @pytest.mark.parametrize("a,b", [
        ((2.0, 4.0), (3.0, 6.0)),
        ((0.0, 10.0), (4.0, 5.0)),
        ((1.0, 2.0), (1.0, 2.0)),
        ((1.0, 2.0), (5.0, 6.0)),
    ])
    def test_symmetric(self, a, b):
        assert intervals_overlap(*a, *b) == intervals_overlap(*b, *a)


class TestValidateLoads:
    def test_clean_collection(self):
        report = validate_loads(_loads((1.0, 3.0), (3.0, 5.0)), 0.0, 10.0)
        assert report.overlapping_indices == frozenset()
        assert report.invalid_duration_indices == frozenset()
        assert report.outside_run_indices == frozenset()
        assert report.warnings == ()
        assert not report.has_warnings

    def test_overlap_warning_per_pair(self):
        loads = _loads((2.0, 4.0), (3.0, 6.0), (5.0, 7.0))
        report = validate_loads(loads, None, None)
        assert report.overlapping_indices == {0, 1, 2}
        overlaps = [w for w in report.warnings if w.type == WARNING_OVERLAP]
        assert [w.affected_loads for w in overlaps] == [(1, 2), (2, 3)]
        assert overlaps[0].message == "Load #1 and Load #2 have overlapping timeframes."

    def test_every_overlapping_id_is_reported(self):
        loads = _loads((0.0, 10.0), (1.0, 2.0), (3.0, 4.0), (20.0, 21.0))
        report = validate_loads(loads, None, None)
        reported = set()
        for w in report.warnings:
            if w.type == WARNING_OVERLAP:
                reported.update(w.affected_loads)
        assert reported == {1, 2, 3}
        assert len([w for w in report.warnings if w.type == WARNING_OVERLAP]) == 2

    def test_summary_warnings(self):
        loads = _loads((5.0, 5.0), (9.0, 12.0), (7.0, 6.5))
        report = validate_loads(loads, 0.0, 10.0)
        by_type = {w.type: w for w in report.warnings}
        assert by_type[WARNING_INVALID_DURATION].affected_loads == (1, 3)
        assert by_type[WARNING_INVALID_DURATION].message.startswith("Loads #1, #3")
        assert by_type[WARNING_OUTSIDE_RUN].affected_loads == (2,)
        assert by_type[WARNING_OUTSIDE_RUN].message.startswith("Load #2")

    def test_run_error_regardless_of_loads(self):
        report = validate_loads([], 5.0, 2.0)
        assert [w.type for w in report.warnings] == [WARNING_ERROR]
        assert report.warnings[0].affected_loads == ()

    def test_run_error_comes_first(self):
        report = validate_loads(_loads((2.0, 4.0), (3.0, 6.0)), 5.0, 5.0)
        assert report.warnings[0].type == WARNING_ERROR

    def test_status_for(self):
        report = validate_loads(_loads((2.0, 4.0), (3.0, 6.0)), None, None)
        assert report.status_for(1).is_overlapping
        assert not report.status_for(99).has_error


class TestRunDurationWarning:
    def test_unset(self):
        assert run_duration_warning(None, 5.0) is None
        assert run_duration_warning(5.0, None) is None

    def test_positive(self):
        assert run_duration_warning(1.0, 2.0) is None

    def test_zero_length(self):
        assert run_duration_warning(2.0, 2.0).type == WARNING_ERROR


class TestItemStatus:
    def test_run_item_never_flagged(self):
        item = TimingItem(id="run", kind=KIND_RUN, label="Run", start_time=5.0, end_time=2.0)
        status = get_item_validation_status(item, frozenset({0}), frozenset({0}), frozenset({0}))
        assert not status.has_error

    def test_load_item_projection(self):
        item = TimingItem(
            id="load-4", kind=KIND_LOAD, label="Load #2",
            start_time=1.0, end_time=2.0, load_index=1, is_deletable=True,
        )
        status = get_item_validation_status(item, frozenset({1}), frozenset(), frozenset({1}))
        assert status.is_overlapping
        assert status.is_outside_run
        assert not status.is_invalid_duration
        assert status.has_error
        assert status.to_dict()["hasError"] is True
