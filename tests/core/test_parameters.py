"""
Test Suite for Parameters Module (meltgeolib/core/parameters.py)

MIT License

Description:
    Building, validating and re-emitting the parameters of the petrological models.
"""

import os
import math
import pytest
from meltgeolib.core.parameters import ParameterSet, PhaseBoundaryCoefficients, MeltParameters,\
    DepletionParameters, ReactionCoefficients, read_parameter_set, DEPLETION_FIELD_NAME
from meltgeolib.utils.exception_handler import ConfigurationError

FIXTURE_DIR = os.path.join(os.path.dirname(__file__), "../fixtures/prm")


def test_default_parameters():
    '''
    Defaults follow Katz et al. (2003) and have no compositional field
    '''
    parameters = ParameterSet()
    assert(parameters.phase_boundaries == PhaseBoundaryCoefficients())
    assert(parameters.phase_boundaries.A1 == 1085.7)
    assert(parameters.phase_boundaries.C3 == -2.0e-18)
    assert(parameters.reaction == ReactionCoefficients(0.5, 8e-11))
    assert(parameters.melt == MeltParameters(1.5, 0.15))
    assert(parameters.depletion == DepletionParameters(0.0, 1.0e3))
    assert(parameters.n_compositional_fields == 0)
    assert(parameters.heating_values == (0.0,))
    assert(parameters.fields_used_in_averaging == (True,))
    assert(parameters.depletion_field_name == DEPLETION_FIELD_NAME)


def test_parameters_are_immutable():
    parameters = ParameterSet()
    with pytest.raises(AttributeError):
        parameters.melt = MeltParameters(2.0, 0.1)


def test_from_mapping_short_and_long_keys():
    '''
    Short names and parameter file entry names are both accepted; single values
    are broadcast to the background and all fields.
    '''
    parameters = ParameterSet.from_mapping({
        "A1": "1100.0",
        "Mass fraction cpx": 0.2,
        "alpha_depletion": 2.0,
        "Maximum Depletion viscosity change": "50",
        "field_names": ["peridotite", "maximum_melt_fraction"],
        "heating_values": 1e-6,
        "fields_used_in_averaging": "0",
    })
    assert(parameters.phase_boundaries.A1 == 1100.0)
    assert(parameters.phase_boundaries.A2 == 1.329e-7)
    assert(parameters.melt.M_cpx == 0.2)
    assert(parameters.depletion == DepletionParameters(2.0, 50.0))
    assert(parameters.field_names == ("peridotite", "maximum_melt_fraction"))
    assert(parameters.heating_values == (1e-6, 1e-6, 1e-6))
    assert(parameters.fields_used_in_averaging == (False, False, False))


def test_from_mapping_number_of_fields():
    '''
    Fields given only by their number are named C_1, C_2, ...
    '''
    parameters = ParameterSet.from_mapping({"Number of fields": "2"})
    assert(parameters.field_names == ("C_1", "C_2"))
    with pytest.raises(ConfigurationError):
        ParameterSet.from_mapping({"Number of fields": "3", "Names of fields": "a, b"})


def test_from_mapping_unknown_key_warns():
    with pytest.warns(UserWarning, match="unknown entry"):
        ParameterSet.from_mapping({"gamma": 1.0})


INVALID_CASES = [
    dict(name="cap_below_one", mapping={"delta_eta_depletion_max": 0.5}),
    dict(name="negative_alpha", mapping={"alpha_depletion": -1.0}),
    dict(name="zero_beta", mapping={"beta": 0.0}),
    dict(name="cpx_fraction_above_one", mapping={"M_cpx": 1.5}),
    dict(name="not_a_number", mapping={"A1": "hot"}),
    dict(name="infinite_value", mapping={"A2": "inf"}),
    dict(name="heating_length", mapping={"field_names": ["a", "b"], "heating_values": [0.0, 1.0]}),
    dict(name="mask_length", mapping={"field_names": ["a"], "fields_used_in_averaging": [1, 0, 1]}),
    dict(name="negative_heating", mapping={"heating_values": [-1e-6]}),
    dict(name="duplicate_field_names", mapping={"field_names": ["a", "a"]}),
    dict(name="no_heating_model", mapping={"heating_model_names": ""}),
]


@pytest.mark.parametrize("case", INVALID_CASES, ids=[c["name"] for c in INVALID_CASES])
def test_invalid_configurations(case):
    with pytest.raises(ConfigurationError):
        ParameterSet.from_mapping(case["mapping"])


def test_read_parameter_set():
    '''
    Read the Katz (2003) fixture
    '''
    parameters = read_parameter_set(os.path.join(FIXTURE_DIR, "katz2003.prm"))
    assert(parameters.field_names == ("peridotite", "maximum_melt_fraction"))
    assert(parameters.phase_boundaries == PhaseBoundaryCoefficients())
    assert(math.isclose(parameters.depletion.alpha_depletion, math.log(2.0)))
    assert(parameters.depletion.delta_eta_depletion_max == 10.0)
    assert(parameters.heating_values == (0.0, 1e-6, 2e-6))
    assert(parameters.fields_used_in_averaging == (True, True, True))
    assert(parameters.heating_model_names == ("compositional heating",))


@pytest.mark.parametrize("file_name", ["bad_heating_length.prm", "bad_strengthening_cap.prm"])
def test_read_invalid_parameter_files(file_name):
    with pytest.raises(ConfigurationError):
        read_parameter_set(os.path.join(FIXTURE_DIR, file_name))


def test_prm_round_trip(tmp_path):
    '''
    Parse a configuration, write it out and read it back: the values are recovered
    '''
    parameters = read_parameter_set(os.path.join(FIXTURE_DIR, "katz2003.prm"))
    output_path = os.path.join(tmp_path, "round_trip.prm")
    parameters.write_parameter_file(output_path)
    parameters_again = read_parameter_set(output_path)
    assert(parameters_again == parameters)
    mapping, mapping_again = parameters.to_mapping(), parameters_again.to_mapping()
    for key in ("A1", "A2", "A3", "B1", "B2", "B3", "C1", "C2", "C3", "r1", "r2", "beta", "M_cpx",
                "alpha_depletion", "delta_eta_depletion_max"):
        assert(math.isclose(mapping[key], mapping_again[key], rel_tol=1e-12))


def test_mapping_round_trip():
    parameters = ParameterSet.from_mapping({
        "field_names": ["peridotite", "maximum_melt_fraction"],
        "alpha_depletion": 0.1,
        "heating_values": [0.0, 1e-6, 2e-6],
        "fields_used_in_averaging": [True, False, True],
    })
    assert(ParameterSet.from_mapping(parameters.to_mapping()) == parameters)


def test_replace():
    parameters = ParameterSet.from_mapping({"field_names": ["maximum_melt_fraction"]})
    parameters_new = parameters.replace(alpha_depletion=3.0)
    assert(parameters_new.depletion.alpha_depletion == 3.0)
    assert(parameters.depletion.alpha_depletion == 0.0)
    assert(parameters_new.field_names == parameters.field_names)


def test_constructor_broadcasts_single_values():
    '''
    A single heating value or averaging flag is repeated for the background and every field
    '''
    parameters = ParameterSet(field_names=["a", "b"], heating_values=1e-6, fields_used_in_averaging=False)
    assert(parameters.heating_values == (1e-6, 1e-6, 1e-6))
    assert(parameters.fields_used_in_averaging == (False, False, False))
    # comma separated entries as read from a parameter file
    parameters = ParameterSet(field_names="peridotite, maximum_melt_fraction", heating_values="0, 1e-6, 2e-6",
                              heating_model_names="compositional heating")
    assert(parameters.field_names == ("peridotite", "maximum_melt_fraction"))
    assert(parameters.heating_values == (0.0, 1e-6, 2e-6))
    assert(parameters.heating_model_names == ("compositional heating",))
    with pytest.raises(ConfigurationError):
        ParameterSet(field_names=["a", "b"], heating_values=[1e-6, 2e-6])
