"""
Heating Module - MeltGeoLib

MIT License

Overview:
    Internal heat production from fixed values (W/m^3) assigned to the background
    and to each compositional field, averaged with the volume fractions of the
    fields. Latent heat of melting and freezing is left to other models, so the
    latent heat term reported here is always zero.

Classes:
    - `HeatingModelOutputs`: source term and latent heat term.
    - `CompositionalHeating`: the heating model.

Functions:
    - `heat_source`: inner product of volume fractions and heating values.
"""

from collections import namedtuple

import numpy as np

from ..utils.exception_handler import my_assert
from .composition import volume_fractions_from_composition, volume_fractions_from_compositions


HeatingModelOutputs = namedtuple("HeatingModelOutputs", [
    "heating_source_term",
    "lhs_latent_heat_term"
])


def heat_source(volume_fractions, heating_values):
    """
    Average heat production.

    Args:
        volume_fractions (sequence of float): N+1 volume fractions.
        heating_values (sequence of float): N+1 heat production values (W/m^3).

    Returns:
        float: sum of volume_fractions[c] * heating_values[c].
    """
    my_assert(len(volume_fractions) == len(heating_values), ValueError,
              "heat_source: %d volume fractions but %d heating values"
              % (len(volume_fractions), len(heating_values)))
    compositional_heat_production = 0.0
    for fraction, value in zip(volume_fractions, heating_values):
        compositional_heat_production += fraction * value
    return compositional_heat_production


class CompositionalHeating:
    """
    Heat production determined from values assigned to each compositional field.

    Attributes:
        heating_values (tuple): N+1 heat production values (W/m^3), background first.
        fields_used_in_heat_production_averaging (tuple): N+1 booleans, background first.
    """

    def __init__(self, heating_values, fields_used_in_heat_production_averaging):
        self.heating_values = tuple(float(value) for value in heating_values)
        self.fields_used_in_heat_production_averaging = tuple(bool(used) for used in fields_used_in_heat_production_averaging)
        my_assert(len(self.heating_values) == len(self.fields_used_in_heat_production_averaging), ValueError,
                  "CompositionalHeating: %d heating values but %d averaging flags"
                  % (len(self.heating_values), len(self.fields_used_in_heat_production_averaging)))

    @classmethod
    def from_parameters(cls, parameters):
        # lengths are checked when the ParameterSet is built
        return cls(parameters.heating_values, parameters.fields_used_in_averaging)

    def evaluate(self, composition):
        """
        Heating outputs at a single point.

        Args:
            composition (sequence of float): N compositional field values.

        Returns:
            HeatingModelOutputs: the averaged heat production and a zero latent heat term.
        """
        volume_fractions = volume_fractions_from_composition(composition,
                                                             self.fields_used_in_heat_production_averaging)
        return HeatingModelOutputs(heating_source_term=heat_source(volume_fractions, self.heating_values),
                                   lhs_latent_heat_term=0.0)

    def evaluate_points(self, compositions):
        """
        Heating outputs for many points.

        Args:
            compositions (array-like, shape (n_points, N)): compositional field values.

        Returns:
            HeatingModelOutputs: np.ndarray of shape (n_points,) for each term.
        """
        volume_fractions = volume_fractions_from_compositions(compositions,
                                                              self.fields_used_in_heat_production_averaging)
        heating_source_terms = volume_fractions @ np.asarray(self.heating_values)
        return HeatingModelOutputs(heating_source_term=heating_source_terms,
                                   lhs_latent_heat_term=np.zeros_like(heating_source_terms))
