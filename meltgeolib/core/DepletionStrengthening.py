"""
Depletion Strengthening Module - MeltGeoLib

MIT License

Overview:
    Melting dehydrates the source rock by removing most of the volatiles, and makes
    it stronger. Hirth and Kohlstedt (1996) report a factor 100 to 1000 viscosity
    contrast between wet and dry rocks, while some experimental studies report a
    smaller (factor 10) contrast (e.g. Fei et al., 2013).

    The depletion F of a rock parcel is the maximum melt fraction it has experienced,
    tracked by a compositional field. The viscosity is multiplied by

        min(exp(alpha_F * F), delta_eta_F_max)

Classes:
    - `DepletionStrengtheningModel`: the viscosity multiplier.
"""

import math

import numpy as np

from .parameters import DepletionParameters, DEPLETION_FIELD_NAME
from .composition import CompositionAccessor


class DepletionStrengtheningModel:
    """
    Viscosity multiplier from depletion.

    Attributes:
        alpha_depletion (float): exponential strengthening factor, >= 0.
        delta_eta_depletion_max (float): maximum strengthening, >= 1.
        depletion_index (int or None): index of the depletion field, None if the
            model has no such field, in which case the multiplier is always 1.
    """

    def __init__(self, depletion=None, composition=None, depletion_field_name=DEPLETION_FIELD_NAME):
        """
        Args:
            depletion (DepletionParameters, optional): strengthening exponent and cap.
            composition (CompositionAccessor or sequence of str, optional): the compositional fields.
            depletion_field_name (str): name of the field tracking depletion.
        """
        depletion = DepletionParameters() if depletion is None else depletion
        if not isinstance(composition, CompositionAccessor):
            composition = CompositionAccessor(() if composition is None else composition)
        self.alpha_depletion = depletion.alpha_depletion
        self.delta_eta_depletion_max = depletion.delta_eta_depletion_max
        self.composition = composition
        self.depletion_field_name = depletion_field_name
        # resolved once, the field list does not change after configuration
        self.depletion_index = composition.index_for_name(depletion_field_name)

    @classmethod
    def from_parameters(cls, parameters):
        return cls(parameters.depletion, parameters.composition, parameters.depletion_field_name)

    def compute_strengthening(self, pressure, temperature, composition):
        """
        Viscosity multiplier due to depletion.

        Args:
            pressure (float): pressure (Pa), not used.
            temperature (float): temperature, not used.
            composition (sequence of float): compositional field values.

        Returns:
            float: factor in [1, delta_eta_depletion_max]; 1.0 if there is no depletion field.
        """
        depletion_strengthening = 1.0
        if self.depletion_index is not None:
            depletion = min(1.0, max(composition[self.depletion_index], 0.0))
            depletion_strengthening = min(math.exp(self.alpha_depletion * depletion),
                                          self.delta_eta_depletion_max)
        return depletion_strengthening

    def compute_strengthening_vectorized(self, compositions):
        """
        Viscosity multipliers for many points.

        Args:
            compositions (array-like, shape (n_points, N)): compositional field values.

        Returns:
            np.ndarray, shape (n_points,)
        """
        C = np.atleast_2d(np.asarray(compositions, dtype=float))
        if self.depletion_index is None:
            return np.ones(C.shape[0])
        depletion = np.clip(C[:, self.depletion_index], 0.0, 1.0)
        return np.minimum(np.exp(self.alpha_depletion * depletion), self.delta_eta_depletion_max)

    def compute_viscosity(self, viscosity, pressure, temperature, composition):
        '''
        Apply the strengthening to a viscosity (Pa s).
        '''
        return viscosity * self.compute_strengthening(pressure, temperature, composition)
