"""
Tests for the multiscale driver (TSEn curve).

Validates:
    1. Curve length equals (clamped) kmax
    2. Global pre-check fails before any estimator call
    3. Clamp, failure and progress notices
    4. Failed scales are NaN and do not affect other scales
    5. Sequential and parallel runs agree
"""

from pathlib import Path

import numpy as np
import pytest

from shiftentropy import compute_curve, compute_profile, ensemble_fuzzy_dispersion_entropy
from shiftentropy.core.errors import InvalidParameterError, SeriesTooShortError
from shiftentropy.core.notices import (
    CollectingSink,
    Completed,
    KmaxClamped,
    NullSink,
    Progress,
    ScaleFailed,
)


def length_estimator(x, dim, nc, tau):
    return float(len(x))


class CountingEstimator:

    def __init__(self):
        self.n_calls = 0

    def __call__(self, x, dim, nc, tau):
        self.n_calls += 1
        return float(len(x))


class TestCurveShape:

    def test_length_equals_kmax(self):
        np.random.seed(42)
        x = np.random.randn(200)
        tsen = compute_curve(x, 3, 5, 1, 12, sink=NullSink())
        assert tsen.shape == (12,)
        assert np.all(np.isfinite(tsen))
        assert np.all(tsen >= 0)

    def test_scale_one_equals_direct_estimate(self):
        """k=1 has a single offset: the whole series."""
        np.random.seed(42)
        x = np.random.randn(300)
        tsen = compute_curve(x, 3, 5, 1, 1, sink=NullSink())
        assert tsen[0] == pytest.approx(ensemble_fuzzy_dispersion_entropy(x, 3, 5, 1))

    def test_accepts_list_and_column_vector(self):
        x = list(range(1, 11))
        a = compute_curve(x, 2, 3, 1, 3, estimator=length_estimator, sink=NullSink())
        b = compute_curve(np.array(x, dtype=float).reshape(-1, 1), 2, 3, 1, 3,
                          estimator=length_estimator, sink=NullSink())
        assert np.array_equal(a, b)

    def test_input_not_modified(self):
        np.random.seed(42)
        x = np.random.randn(100)
        before = x.copy()
        compute_curve(x, kmax=5, sink=NullSink())
        assert np.array_equal(x, before)


class TestScenario:
    """series = [1..10], dim=2, nc=3, tau=1, kmax=3."""

    def test_scale_means(self):
        x = np.arange(1, 11, dtype=float)
        tsen = compute_curve(x, 2, 3, 1, 3, estimator=length_estimator, sink=NullSink())
        # k=1: [10]; k=2: [5, 5]; k=3: [4, 3, 3]
        assert tsen.tolist() == pytest.approx([10.0, 5.0, 10.0 / 3.0])

    def test_estimator_call_count(self):
        est = CountingEstimator()
        compute_curve(np.arange(1, 11, dtype=float), 2, 3, 1, 3, estimator=est, sink=NullSink())
        assert est.n_calls == 1 + 2 + 3

    def test_profile_spread(self):
        x = np.arange(1, 11, dtype=float)
        profile = compute_profile(x, 2, 3, 1, 3, estimator=length_estimator, sink=NullSink())
        assert profile.n_valid.tolist() == [1, 2, 3]
        assert profile.std[0] == 0.0
        assert profile.std[2] == pytest.approx(np.std([4.0, 3.0, 3.0]))
        assert profile.scales.tolist() == [1, 2, 3]
        assert [r['n_offsets'] for r in profile.rows()] == [1, 2, 3]


class TestPreChecks:

    def test_series_shorter_than_dim(self):
        """Length 5, dim=10: fails before any estimator call."""
        est = CountingEstimator()
        with pytest.raises(SeriesTooShortError):
            compute_curve(np.arange(5.0), dim=10, nc=3, tau=1, kmax=3, estimator=est)
        assert est.n_calls == 0

    def test_kmax_clamped_notice(self):
        """Length 5, kmax=20: notice (20, 5) and a curve of length 5."""
        sink = CollectingSink()
        tsen = compute_curve(np.arange(5.0), 2, 3, 1, 20, estimator=length_estimator, sink=sink)

        assert len(tsen) == 5
        assert sink.of_type(KmaxClamped) == [KmaxClamped(original=20, corrected=5)]

    def test_kmax_clamped_warns_by_default(self):
        with pytest.warns(RuntimeWarning, match="adjusted to 5"):
            compute_curve(np.arange(5.0), 2, 3, 1, 20, estimator=length_estimator)

    def test_profile_records_requested_kmax(self):
        profile = compute_profile(np.arange(5.0), 2, 3, 1, 20, estimator=length_estimator, sink=NullSink())
        assert profile.kmax == 5
        assert profile.kmax_requested == 20
        assert profile.clamped

    @pytest.mark.parametrize('kwargs', [
        {'dim': 0},
        {'nc': -1},
        {'tau': 1.5},
        {'kmax': True},
        {'dim': '3'},
    ])
    def test_invalid_parameters(self, kwargs):
        with pytest.raises(InvalidParameterError):
            compute_curve(np.arange(20.0), **kwargs)

    @pytest.mark.parametrize('series', [[], [1.0, np.nan, 2.0], [1.0, np.inf], [[1, 2], [3, 4]], ['a', 'b']])
    def test_invalid_series(self, series):
        with pytest.raises(InvalidParameterError):
            compute_curve(series, dim=1, kmax=1)


class TestFailedScales:

    def test_last_scale_unusable(self):
        """Length 5, dim=2: at k=5 every offset has one sample."""
        sink = CollectingSink()
        tsen = compute_curve(np.arange(5.0), 2, 3, 1, 5, estimator=length_estimator, sink=sink)

        # k=1: [5]; k=2: [3, 2]; k=3: [2, 2, -]; k=4: [2, -, -, -]; k=5: none
        assert tsen[:4].tolist() == pytest.approx([5.0, 2.5, 2.0, 2.0])
        assert np.isnan(tsen[4])
        assert [f.scale for f in sink.of_type(ScaleFailed)] == [5]

    def test_failure_warns_by_default(self):
        with pytest.warns(RuntimeWarning, match="failed at k=5"):
            compute_curve(np.arange(5.0), 2, 3, 1, 5, estimator=length_estimator)

    def test_estimator_errors_only_affect_their_scales(self):
        def picky(x, dim, nc, tau):
            if len(x) < 4:
                raise ValueError("too few samples")
            return float(len(x))

        sink = CollectingSink()
        profile = compute_profile(np.arange(12.0), 2, 3, 1, 6, estimator=picky, sink=sink)

        assert profile.mean[:3].tolist() == [12.0, 6.0, 4.0]
        assert np.isnan(profile.mean[3:]).all()
        assert sorted(profile.failures) == [4, 5, 6]
        assert profile.n_failed == 3
        assert sink.of_type(Completed) == [Completed(kmax=6, n_failed=3)]

    def test_failed_scale_has_no_valid_offsets(self):
        profile = compute_profile(np.arange(5.0), 2, 3, 1, 5, estimator=length_estimator, sink=NullSink())
        assert profile.n_valid[4] == 0
        assert np.isnan(profile.std[4])


class TestProgress:

    def test_progress_every_ten_percent(self):
        sink = CollectingSink()
        compute_curve(np.arange(100.0), 2, 3, 1, 20, estimator=length_estimator, sink=sink)

        progress = sink.of_type(Progress)
        assert [p.scale for p in progress] == list(range(2, 21, 2))
        assert [p.percent for p in progress] == list(range(10, 101, 10))

    def test_uneven_kmax(self):
        """kmax=25: notices every ceil(25/10)=3 scales."""
        sink = CollectingSink()
        compute_curve(np.arange(100.0), 2, 3, 1, 25, estimator=length_estimator, sink=sink)
        assert [p.scale for p in sink.of_type(Progress)] == [3, 6, 9, 12, 15, 18, 21, 24]

    def test_no_progress_for_short_curves(self):
        sink = CollectingSink()
        compute_curve(np.arange(100.0), 2, 3, 1, 10, estimator=length_estimator, sink=sink)
        assert sink.of_type(Progress) == []
        assert len(sink.of_type(Completed)) == 1


class TestDeterminism:

    def test_repeatable(self):
        np.random.seed(42)
        x = np.random.randn(300)
        a = compute_curve(x, kmax=8, sink=NullSink(), parallel=False)
        b = compute_curve(x, kmax=8, sink=NullSink(), parallel=False)
        assert np.array_equal(a, b, equal_nan=True)

    def test_sequential_matches_parallel(self):
        np.random.seed(42)
        x = np.random.randn(300)
        seq = compute_curve(x, 3, 4, 1, 10, sink=NullSink(), parallel=False)
        par = compute_curve(x, 3, 4, 1, 10, sink=NullSink(), parallel=True,
                            n_jobs=2, backend='threading')
        assert np.allclose(seq, par, equal_nan=True)


class TestWarningLocation:
    """Default-sink warnings are attributed to the calling line."""

    def test_compute_curve_warnings(self):
        with pytest.warns(RuntimeWarning) as record:
            compute_curve(np.arange(5.0), 2, 3, 1, 20, estimator=length_estimator)
        assert len(record) == 2
        assert all(Path(w.filename).name == Path(__file__).name for w in record)

    def test_compute_profile_warnings(self):
        with pytest.warns(RuntimeWarning) as record:
            compute_profile(np.arange(5.0), 2, 3, 1, 20, estimator=length_estimator)
        assert all(Path(w.filename).name == Path(__file__).name for w in record)
