import logging
import math

import pytest

from curvetrace.errors import NumericDegeneracyWarning, UnsupportedTestKindError
from curvetrace.schema import GroupSummary, TestKind
from curvetrace.stats.hypothesis import (
    pairwise_tests,
    pooled_sd,
    resolve_test_kind,
    two_sample_test,
)


def group(name, mean, sd, n):
    return GroupSummary(name=name, mean=mean, sd=sd, samples=n)


def test_symmetry():
    a = group("A", 10.0, 2.0, 8)
    b = group("B", 12.0, 3.0, 11)
    assert two_sample_test(a, b).p_value == pytest.approx(two_sample_test(b, a).p_value)


def test_identical_groups_give_p_near_one():
    a = group("A", 5.0, 1.2, 6)
    b = group("B", 5.0, 1.2, 6)
    result = two_sample_test(a, b, "t-test")
    assert result.p_value == pytest.approx(1.0)
    assert result.statistic == 0.0
    assert result.df == 10


def test_wider_gap_strictly_decreases_p():
    base = group("base", 0.0, 2.0, 10)
    p_values = [
        two_sample_test(base, group("other", gap, 2.0, 10)).p_value
        for gap in (0.0, 0.5, 1.0, 2.0, 3.0, 5.0)
    ]
    assert all(later < earlier for earlier, later in zip(p_values, p_values[1:]))
    assert all(0.0 <= p <= 1.0 for p in p_values)


@pytest.mark.parametrize("n1, n2", [(1, 5), (5, 1), (1, 1)])
def test_single_sample_group_gives_nan(n1, n2):
    result = two_sample_test(group("A", 1.0, 0.5, n1), group("B", 2.0, 0.5, n2))
    assert result.failed
    assert math.isnan(result.p_value)


def test_zero_pooled_sd_equal_means():
    with pytest.warns(NumericDegeneracyWarning):
        result = two_sample_test(group("A", 3.0, 0.0, 4), group("B", 3.0, 0.0, 4))
    assert result.p_value == 1.0


def test_zero_pooled_sd_different_means():
    with pytest.warns(NumericDegeneracyWarning):
        result = two_sample_test(group("A", 3.0, 0.0, 4), group("B", 3.1, 0.0, 4))
    assert result.p_value == 0.0


def test_pooled_sd_formula():
    a = group("A", 0.0, 2.0, 5)
    b = group("B", 0.0, 4.0, 3)
    expected = math.sqrt((4 * 4.0 + 2 * 16.0) / 6)
    assert pooled_sd(a, b) == pytest.approx(expected)


def test_known_p_value():
    # t = 2 with df = 10: means differ by 2 * sp * sqrt(1/6 + 1/6).
    sp = 1.5
    gap = 2.0 * sp * math.sqrt(2.0 / 6.0)
    result = two_sample_test(group("A", 0.0, sp, 6), group("B", gap, sp, 6))
    assert result.statistic == pytest.approx(-2.0)
    assert result.p_value == pytest.approx(0.073388, abs=1e-5)


def test_matches_scipy_ttest_from_stats():
    stats = pytest.importorskip("scipy.stats")
    cases = [
        ((10.0, 2.0, 8), (12.0, 3.0, 11)),
        ((0.52, 0.04, 5), (0.47, 0.05, 5)),
        ((100.0, 15.0, 30), (92.0, 14.0, 25)),
    ]
    for (m1, s1, n1), (m2, s2, n2) in cases:
        expected = stats.ttest_ind_from_stats(m1, s1, n1, m2, s2, n2, equal_var=True)
        got = two_sample_test(group("A", m1, s1, n1), group("B", m2, s2, n2))
        assert got.statistic == pytest.approx(float(expected.statistic))
        assert got.p_value == pytest.approx(float(expected.pvalue), abs=5e-6)


@pytest.mark.parametrize("kind", ["mann-whitney", "anova", TestKind.ANOVA, "bogus"])
def test_unsupported_kind_is_reported(kind):
    a = group("A", 1.0, 1.0, 5)
    b = group("B", 2.0, 1.0, 5)
    with pytest.raises(UnsupportedTestKindError) as excinfo:
        two_sample_test(a, b, kind)
    assert excinfo.value.kind == kind
    assert "t-test" in str(excinfo.value)


def test_explicit_fallback_is_logged(caplog):
    a = group("A", 1.0, 1.0, 5)
    b = group("B", 2.0, 1.0, 5)
    with caplog.at_level(logging.WARNING, logger="curvetrace.stats.hypothesis"):
        result = two_sample_test(a, b, "mann-whitney", fallback=TestKind.T_TEST)
    assert result.kind is TestKind.T_TEST
    assert result.p_value == two_sample_test(a, b).p_value
    assert "fallback" in caplog.text


def test_fallback_must_itself_be_supported():
    with pytest.raises(UnsupportedTestKindError):
        resolve_test_kind("mann-whitney", fallback="anova")


def test_kind_parsing_is_lenient_about_case():
    assert resolve_test_kind(" T-Test ") is TestKind.T_TEST
    assert resolve_test_kind("T_TEST") is TestKind.T_TEST


def test_significance():
    result = two_sample_test(group("A", 0.0, 1.0, 20), group("B", 2.0, 1.0, 20))
    assert result.is_significant(0.05)
    assert result.is_significant(0.001)
    nan_result = two_sample_test(group("A", 0.0, 1.0, 1), group("B", 2.0, 1.0, 20))
    assert not nan_result.is_significant(0.05)
    with pytest.raises(ValueError):
        result.is_significant(1.5)


def test_pairwise_tests():
    groups = [group("A", 1.0, 0.5, 5), group("B", 1.5, 0.5, 5), group("C", 1.0, 0.5, 5)]
    results = pairwise_tests(groups, [("A", "B"), ("A", "C")])
    assert set(results) == {("A", "B"), ("A", "C")}
    assert results[("A", "C")].p_value == pytest.approx(1.0)
    with pytest.raises(KeyError):
        pairwise_tests(groups, [("A", "Z")])
