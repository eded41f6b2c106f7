"""
Test Suite for Heating Module (meltgeolib/core/heating.py)

MIT License

Description:
    Compositional heat production.
"""

import numpy as np
import pytest
from meltgeolib.core.heating import heat_source, CompositionalHeating, HeatingModelOutputs
from meltgeolib.core.parameters import ParameterSet


def test_heat_source():
    assert(np.isclose(heat_source([0.5, 0.3, 0.2], [0.0, 1e-6, 2e-6]), 7e-7, rtol=1e-12))
    assert(heat_source([1.0], [3e-6]) == 3e-6)
    with pytest.raises(ValueError):
        heat_source([0.5, 0.5], [1e-6])


def test_compositional_heating_evaluate():
    '''
    Fields [0.3, 0.2] leave 0.5 to the background
    '''
    heating = CompositionalHeating([1e-6, 2e-6, 4e-6], [True, True, True])
    outputs = heating.evaluate([0.3, 0.2])
    assert(isinstance(outputs, HeatingModelOutputs))
    assert(np.isclose(outputs.heating_source_term, 0.5 * 1e-6 + 0.3 * 2e-6 + 0.2 * 4e-6))
    assert(outputs.lhs_latent_heat_term == 0.0)


def test_compositional_heating_masked():
    '''
    Excluded fields do not take part in the averaging
    '''
    heating = CompositionalHeating([1e-6, 2e-6, 4e-6], [True, False, True])
    outputs = heating.evaluate([0.3, 0.2])
    assert(np.isclose(outputs.heating_source_term, 0.8 * 1e-6 + 0.2 * 4e-6))
    # nothing included: the background value is used
    heating = CompositionalHeating([1e-6, 2e-6, 4e-6], [False, False, False])
    assert(np.isclose(heating.evaluate([0.3, 0.2]).heating_source_term, 1e-6))


def test_from_parameters_broadcast():
    parameters = ParameterSet.from_mapping({"field_names": ["a", "b"], "heating_values": "2e-6"})
    heating = CompositionalHeating.from_parameters(parameters)
    assert(heating.heating_values == (2e-6, 2e-6, 2e-6))
    assert(heating.fields_used_in_heat_production_averaging == (True, True, True))
    assert(np.isclose(heating.evaluate([0.1, 0.7]).heating_source_term, 2e-6))


def test_evaluate_points():
    heating = CompositionalHeating([0.0, 1e-6, 2e-6], [True, True, True])
    compositions = np.array([[0.3, 0.2], [0.0, 0.0], [1.0, 1.0]])
    outputs = heating.evaluate_points(compositions)
    expected = [heating.evaluate(c).heating_source_term for c in compositions]
    assert(np.allclose(outputs.heating_source_term, expected))
    assert(np.all(outputs.lhs_latent_heat_term == 0.0))


def test_length_mismatch():
    with pytest.raises(ValueError):
        CompositionalHeating([0.0, 1e-6], [True, True, True])
