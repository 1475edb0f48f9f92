import math

import numpy as np
import pytest

from orbital_cloud.cdf import CDF, CDFEntry, CDFTriple
from orbital_cloud.errors import DegenerateDistribution, DomainError, OutOfRangeFraction


def make_cdf(values=(1.0, 2.0, 3.0, 4.0, 5.0), densities=(1.0, 2.0, 3.0, 4.0, 5.0)):
    cdf = CDF()
    for x, d in zip(values, densities):
        cdf.add_point(x, d)
    return cdf


def test_new_cdf_is_empty():
    cdf = CDF()
    assert len(cdf) == 0
    assert cdf.total == 0.0
    with pytest.raises(DegenerateDistribution):
        cdf.inverse_transform(0.5)


def test_add_point_accumulates_running_total():
    cdf = make_cdf()
    assert cdf.total == 15.0
    assert cdf.entries == (
        CDFEntry(1.0, 1.0),
        CDFEntry(3.0, 2.0),
        CDFEntry(6.0, 3.0),
        CDFEntry(10.0, 4.0),
        CDFEntry(15.0, 5.0),
    )


@pytest.mark.parametrize("density", [-1.0, math.nan, math.inf])
def test_add_point_rejects_bad_density(density):
    with pytest.raises(DomainError):
        CDF().add_point(0.0, density)


def test_zero_density_is_degenerate():
    cdf = make_cdf(densities=(0.0, 0.0, 0.0, 0.0, 0.0))
    with pytest.raises(DegenerateDistribution):
        cdf.validate()
    with pytest.raises(DegenerateDistribution):
        cdf.inverse_transform(0.1)


def test_boundaries():
    cdf = make_cdf()
    assert cdf.inverse_transform(0.0) == 1.0
    assert cdf.inverse_transform(1.0 - 1e-12) == pytest.approx(5.0)


def test_interpolates_inside_bucket():
    # target 7.5 lies between fractions 6 (x=3) and 10 (x=4)
    assert make_cdf().inverse_transform(0.5) == pytest.approx(3.375)


def test_monotonic_in_u():
    cdf = make_cdf(values=np.linspace(0.0, 10.0, 40), densities=np.abs(np.sin(np.linspace(0.0, 6.0, 40))))
    xs = [cdf.inverse_transform(u) for u in np.linspace(0.0, 0.999, 300)]
    assert all(b >= a for a, b in zip(xs, xs[1:]))


def test_round_trip_on_tabulated_points():
    values = np.linspace(0.5, 8.0, 16)
    cdf = make_cdf(values=values, densities=np.exp(-values))
    for x in values[:-1]:
        assert cdf.inverse_transform(cdf.cumulative_fraction_at(x)) == pytest.approx(x, abs=1e-9)


def test_cumulative_fraction_at_endpoints():
    cdf = make_cdf()
    assert cdf.cumulative_fraction_at(1.0) == pytest.approx(1.0 / 15.0)
    assert cdf.cumulative_fraction_at(5.0) == pytest.approx(1.0)


def test_cumulative_fraction_below_first_value_is_zero():
    cdf = make_cdf()
    assert cdf.cumulative_fraction_at(0.0) == 0.0
    np.testing.assert_allclose(cdf.cumulative_fraction_at(np.array([-3.0, 0.5, 1.0])), [0.0, 0.0, 1.0 / 15.0])


@pytest.mark.parametrize("u", [-0.1, 1.0, 1.5, math.nan])
def test_out_of_range_fraction(u):
    with pytest.raises(OutOfRangeFraction):
        make_cdf().inverse_transform(u)


def test_vectorized_matches_scalar():
    cdf = make_cdf(values=np.linspace(0.0, 3.0, 25), densities=np.linspace(0.0, 3.0, 25) ** 2)
    us = np.random.default_rng(7).random(500)
    np.testing.assert_allclose(cdf.inverse_transform_many(us), [cdf.inverse_transform(u) for u in us])


def test_vectorized_rejects_out_of_range():
    with pytest.raises(OutOfRangeFraction):
        make_cdf().inverse_transform_many(np.array([0.2, 1.0]))


def test_zero_density_plateau_is_skipped():
    cdf = make_cdf(values=(1.0, 2.0, 3.0, 4.0), densities=(1.0, 0.0, 0.0, 1.0))
    # fraction 0.75 lies beyond the plateau, inside the (3, 4] bucket
    assert cdf.inverse_transform(0.75) == pytest.approx(3.5)


def test_add_point_after_query_refreshes_arrays():
    cdf = make_cdf()
    cdf.inverse_transform_many(np.array([0.5]))
    cdf.add_point(6.0, 15.0)
    assert cdf.inverse_transform_many(np.array([0.75]))[0] == pytest.approx(cdf.inverse_transform(0.75))


def test_triple_validate_names_the_bad_axis():
    good = make_cdf()
    with pytest.raises(DegenerateDistribution, match="polar"):
        CDFTriple(good, CDF(), good).validate()
