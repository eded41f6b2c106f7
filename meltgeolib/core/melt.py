"""
MIT License

Copyright (c) 2025 MeltGeoLib authors

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.

Module Name: melt
Purpose: This module computes the equilibrium melt fraction of anhydrous peridotite
         following the parameterization of Katz et al. (2003), G-cubed 4(9), 1073.
"""
import math

import numpy as np
import pandas as pd

from .parameters import PhaseBoundaryCoefficients, ReactionCoefficients, MeltParameters


class PhaseBoundaryModel:
    '''
    Solidus, lherzolite liquidus and liquidus of peridotite as quadratic functions
    of pressure.
    All inputs and outputs:
        - Pressure (P): in Pascals (Pa), float or np.ndarray
        - Temperature (T): in degree Celsius (C)
    '''

    def __init__(self, coefficients=None):
        """
        Args:
            coefficients (PhaseBoundaryCoefficients, optional): defaults to Katz et al. (2003).
        """
        self.coefficients = PhaseBoundaryCoefficients() if coefficients is None else coefficients

    def solidus(self, P):
        """
        T_s = A1 + A2 * P + A3 * P^2
        """
        c = self.coefficients
        return c.A1 + c.A2 * P + c.A3 * P * P

    def liquidus_lherzolite(self, P):
        """
        T_lherz = B1 + B2 * P + B3 * P^2
        """
        c = self.coefficients
        return c.B1 + c.B2 * P + c.B3 * P * P

    def liquidus(self, P):
        """
        T_l = C1 + C2 * P + C3 * P^2
        """
        c = self.coefficients
        return c.C1 + c.C2 * P + c.C3 * P * P


class MeltFractionEngine:
    '''
    Equilibrium melt fraction F(T, P) of peridotite.

    Below the solidus F = 0, above the liquidus F = 1. In between, melting first
    consumes clinopyroxene:
        F = T'^beta,  T' = (T - T_s) / (T_lherz - T_s)
    until clinopyroxene is exhausted at F_cpx = M_cpx / R(P), R = r1 + r2 * P.
    Beyond that point (Katz et al., 2003, eq. 9-10):
        T_cpx = F_cpx^(1/beta) * (T_lherz - T_s) + T_s
        F = F_cpx + (1 - F_cpx) * ((T - T_cpx) / (T_l - T_cpx))^beta
    which meets the first branch at T = T_cpx and reaches 1 at the liquidus.
    '''

    def __init__(self, phase_boundaries=None, reaction=None, melt=None):
        """
        Args:
            phase_boundaries (PhaseBoundaryModel or PhaseBoundaryCoefficients, optional)
            reaction (ReactionCoefficients, optional)
            melt (MeltParameters, optional)
        """
        if isinstance(phase_boundaries, PhaseBoundaryModel):
            self.phase_boundaries = phase_boundaries
        else:
            self.phase_boundaries = PhaseBoundaryModel(phase_boundaries)
        self.reaction = ReactionCoefficients() if reaction is None else reaction
        self.melt = MeltParameters() if melt is None else melt

    @classmethod
    def from_parameters(cls, parameters):
        return cls(parameters.phase_boundaries, parameters.reaction, parameters.melt)

    def reaction_coefficient(self, P):
        return self.reaction.r1 + self.reaction.r2 * P

    def cpx_exhaustion_melt_fraction(self, P):
        '''
        Melt fraction at which clinopyroxene is used up, M_cpx / R(P).
        A nonpositive reaction coefficient never exhausts clinopyroxene (returns inf).
        '''
        R = self.reaction_coefficient(P)
        if R <= 0.0:
            return math.inf
        return self.melt.M_cpx / R

    def cpx_exhaustion_temperature(self, P):
        '''
        Temperature (C) at which clinopyroxene is used up, float or np.ndarray.
        Where it is never used up the lherzolite liquidus is returned.
        '''
        P = np.asarray(P, dtype=float)
        T_solidus = self.phase_boundaries.solidus(P)
        T_lherz = self.phase_boundaries.liquidus_lherzolite(P)
        R = self.reaction_coefficient(P)
        with np.errstate(divide="ignore", invalid="ignore"):
            F_cpx = np.where(R > 0.0, self.melt.M_cpx / R, np.inf)
        F_cpx = np.minimum(F_cpx, 1.0)
        T_cpx = np.where(T_lherz > T_solidus,
                         F_cpx ** (1.0 / self.melt.beta) * (T_lherz - T_solidus) + T_solidus,
                         T_solidus)
        if T_cpx.ndim == 0:
            return float(T_cpx)
        return T_cpx

    def melt_fraction(self, temperature, pressure, composition=None, position=None):
        """
        Equilibrium melt fraction at a single point.

        Args:
            temperature (float): temperature (C).
            pressure (float): pressure (Pa).
            composition (sequence, optional): compositional fields, not used by this parameterization.
            position (optional): location of the point, not used by this parameterization.

        Returns:
            float: melt fraction in [0, 1].
        """
        T = float(temperature)
        P = float(pressure)
        beta = self.melt.beta

        T_solidus = self.phase_boundaries.solidus(P)
        T_liquidus = self.phase_boundaries.liquidus(P)
        if T <= T_solidus:
            return 0.0
        if T >= T_liquidus:
            return 1.0

        T_lherz = self.phase_boundaries.liquidus_lherzolite(P)
        F_cpx = self.cpx_exhaustion_melt_fraction(P)
        if T_lherz > T_solidus:
            F = ((T - T_solidus) / (T_lherz - T_solidus)) ** beta
        else:
            F = math.inf

        if F > F_cpx and F_cpx < 1.0:
            # clinopyroxene exhausted
            if T_lherz > T_solidus:
                T_cpx = F_cpx ** (1.0 / beta) * (T_lherz - T_solidus) + T_solidus
            else:
                T_cpx = T_solidus
            if T_liquidus > T_cpx:
                F = F_cpx + (1.0 - F_cpx) * ((T - T_cpx) / (T_liquidus - T_cpx)) ** beta
            else:
                F = 1.0

        return min(max(F, 0.0), 1.0)

    def melt_fractions(self, temperatures, pressures):
        """
        Equilibrium melt fractions for many points, vectorized with numpy.

        Args:
            temperatures (float or np.ndarray): temperatures (C).
            pressures (float or np.ndarray): pressures (Pa), broadcast against temperatures.

        Returns:
            np.ndarray: melt fractions in [0, 1].
        """
        T, P = np.broadcast_arrays(np.asarray(temperatures, dtype=float),
                                   np.asarray(pressures, dtype=float))
        beta = self.melt.beta

        T_solidus = self.phase_boundaries.solidus(P)
        T_lherz = self.phase_boundaries.liquidus_lherzolite(P)
        T_liquidus = self.phase_boundaries.liquidus(P)
        R = self.reaction_coefficient(P)

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            F_cpx = np.where(R > 0.0, self.melt.M_cpx / R, np.inf)
            width = T_lherz - T_solidus
            T_prime = np.where(width > 0.0, np.maximum(T - T_solidus, 0.0) / width, np.inf)
            F1 = T_prime ** beta

            exhausted = (F1 > F_cpx) & (F_cpx < 1.0)
            # only read where exhausted, i.e. where F_cpx is finite and below one
            F_cpx_bounded = np.where(exhausted, F_cpx, 0.0)
            T_cpx = np.where(width > 0.0, F_cpx_bounded ** (1.0 / beta) * width + T_solidus, T_solidus)
            span = T_liquidus - T_cpx
            F2 = np.where(span > 0.0,
                          F_cpx_bounded + (1.0 - F_cpx_bounded) * (np.maximum(T - T_cpx, 0.0) / span) ** beta,
                          1.0)

            F = np.where(exhausted, F2, F1)
        F = np.where(T <= T_solidus, 0.0, F)
        F = np.where(T >= T_liquidus, 1.0, F)
        return np.clip(F, 0.0, 1.0)

    def tabulate(self, pressures):
        '''
        Tabulate the phase boundaries over pressure.

        Args:
            pressures (array-like): pressures (Pa).

        Returns:
            pd.DataFrame: columns "pressure", "solidus", "lherzolite_liquidus", "liquidus", "cpx_out" (C).
        '''
        P = np.atleast_1d(np.asarray(pressures, dtype=float))
        table = pd.DataFrame({
            "pressure": P,
            "solidus": self.phase_boundaries.solidus(P),
            "lherzolite_liquidus": self.phase_boundaries.liquidus_lherzolite(P),
            "liquidus": self.phase_boundaries.liquidus(P),
            "cpx_out": np.atleast_1d(self.cpx_exhaustion_temperature(P)),
        })
        table.attrs["units"] = {"pressure": "Pa", "solidus": "C", "lherzolite_liquidus": "C",
                                "liquidus": "C", "cpx_out": "C"}
        return table
