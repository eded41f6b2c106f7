"""
Test Suite for Depletion Strengthening Module (meltgeolib/core/DepletionStrengthening.py)

MIT License

Description:
    Viscosity multiplier from the maximum melt fraction field.
"""

import math
import numpy as np
import pytest
from meltgeolib.core.DepletionStrengthening import DepletionStrengtheningModel
from meltgeolib.core.parameters import ParameterSet, DepletionParameters

FIELDS = ["peridotite", "maximum_melt_fraction"]


def make_model(alpha, cap, fields=FIELDS):
    return DepletionStrengtheningModel(DepletionParameters(alpha, cap), fields)


def test_ln2_strengthening():
    '''
    exp(ln 2 * 1) = 2, below the cap of 10
    '''
    model = make_model(math.log(2.0), 10.0)
    factor = model.compute_strengthening(1e9, 1600.0, [0.0, 1.0])
    assert(np.isclose(factor, 2.0, rtol=1e-14))


@pytest.mark.parametrize("depletion", [-0.5, 0.0, 0.3, 1.0, 7.0])
def test_zero_alpha(depletion):
    model = make_model(0.0, 1e3)
    assert(model.compute_strengthening(1e9, 1600.0, [0.2, depletion]) == 1.0)


def test_zero_depletion():
    model = make_model(5.0, 1e3)
    assert(model.compute_strengthening(1e9, 1600.0, [0.7, 0.0]) == 1.0)


def test_absent_depletion_field():
    '''
    Without a depletion field the multiplier is 1, whatever the other values are
    '''
    model = make_model(5.0, 1e3, fields=["peridotite", "crust"])
    assert(model.depletion_index is None)
    for composition in ([0.0, 0.0], [1.0, 1.0], [-3.0, 12.0]):
        assert(model.compute_strengthening(1e9, 1600.0, composition) == 1.0)
    model = make_model(5.0, 1e3, fields=[])
    assert(model.compute_strengthening(1e9, 1600.0, []) == 1.0)


def test_cap_and_clamping():
    model = make_model(10.0, 100.0)
    # exp(10) > 100
    assert(model.compute_strengthening(1e9, 1600.0, [0.0, 1.0]) == 100.0)
    # depletion is clamped into [0, 1]
    assert(model.compute_strengthening(1e9, 1600.0, [0.0, 5.0]) == 100.0)
    assert(model.compute_strengthening(1e9, 1600.0, [0.0, -5.0]) == 1.0)


def test_monotonic_and_bounded():
    model = make_model(6.0, 50.0)
    depletions = np.linspace(-0.2, 1.2, 141)
    factors = np.array([model.compute_strengthening(1e9, 1600.0, [0.0, d]) for d in depletions])
    assert(np.all(np.diff(factors) >= 0.0))
    assert(np.all(factors >= 1.0) and np.all(factors <= 50.0))


def test_vectorized_and_viscosity():
    model = make_model(2.0, 5.0)
    compositions = np.array([[0.0, 0.0], [0.0, 0.5], [0.0, 1.0]])
    factors = model.compute_strengthening_vectorized(compositions)
    assert(np.allclose(factors, [1.0, np.exp(1.0), 5.0]))
    assert(np.isclose(model.compute_viscosity(1e21, 1e9, 1600.0, [0.0, 0.5]), 1e21 * np.exp(1.0)))
    model_absent = make_model(2.0, 5.0, fields=["peridotite", "crust"])
    assert(np.all(model_absent.compute_strengthening_vectorized(compositions) == 1.0))


def test_from_parameters():
    parameters = ParameterSet.from_mapping({"field_names": FIELDS, "alpha_depletion": 1.0,
                                            "delta_eta_depletion_max": 2.0})
    model = DepletionStrengtheningModel.from_parameters(parameters)
    assert(model.depletion_index == 1)
    assert(model.compute_strengthening(0.0, 0.0, [0.0, 1.0]) == 2.0)
