"""
Evaluator Module - MeltGeoLib

MIT License

Overview:
    Evaluation of the petrological properties handed back to the geodynamic solver
    at each point: melt fraction, viscosity multiplier, heat production and latent
    heat term. The models are built once from a ParameterSet and hold no state that
    changes between calls, so one evaluator can be shared by any number of callers.

Classes:
    - `PointOutputs`: the output record of one point.
    - `PropertyEvaluator`: builds the models and evaluates points.

Functions:
    - `create_property_evaluator`: evaluator from a deal.ii parameter file.
"""

from collections import namedtuple

import numpy as np
import pandas as pd

from ..utils.exception_handler import my_assert
from .parameters import read_parameter_set
from .registry import initialize_registry, MELT_FRACTION_MODEL, RHEOLOGY_MODEL, HEATING_MODEL

PointOutputs = namedtuple("PointOutputs", [
    "melt_fraction",
    "viscosity_multiplier",
    "heat_source_term",
    "latent_heat_term"
])

DEFAULT_MODEL_NAMES = {
    MELT_FRACTION_MODEL: "katz 2003",
    RHEOLOGY_MODEL: "depletion strengthening",
}

OUTPUT_COLUMNS = list(PointOutputs._fields)


class PropertyEvaluator:
    """
    Per-point petrological properties.

    Attributes:
        parameters (ParameterSet): the configuration.
        melt_model: model with melt_fraction(T, P, composition, position).
        rheology_model: model with compute_strengthening(P, T, composition).
        heating_models (list): models with evaluate(composition).

    Models may also provide a batch interface, used by evaluate_points:
    melt_fractions(T, P), compute_strengthening_vectorized(C) and evaluate_points(C).
    For a model without it, the points are evaluated one by one.
    """

    def __init__(self, parameters, registry=None, model_names=None):
        """
        Args:
            parameters (ParameterSet): validated parameters.
            registry (ModelRegistry, optional): defaults to the models of this package.
            model_names (dict, optional): model kind -> name, for the melt fraction and
                rheology models. The heating models come from parameters.heating_model_names.

        Raises:
            ConfigurationError: if a model name is not registered.
        """
        self.parameters = parameters
        self.registry = initialize_registry() if registry is None else registry
        names = dict(DEFAULT_MODEL_NAMES)
        if model_names is not None:
            names.update(model_names)
        self.model_names = names
        self.melt_model = self.registry.create(MELT_FRACTION_MODEL, names[MELT_FRACTION_MODEL], parameters)
        self.rheology_model = self.registry.create(RHEOLOGY_MODEL, names[RHEOLOGY_MODEL], parameters)
        self.heating_models = [self.registry.create(HEATING_MODEL, name, parameters)
                               for name in parameters.heating_model_names]

    def evaluate(self, temperature, pressure, composition, position=None, **kwargs):
        """
        Evaluate all properties at one point.

        Args:
            temperature (float): temperature (C).
            pressure (float): pressure (Pa).
            composition (sequence of float): one value per compositional field.
            position (optional): location of the point, passed on to the melt model.
            **kwargs: Additional keyword arguments (e.g., debug=True to print variables).

        Returns:
            PointOutputs

        Raises:
            ValueError: if the composition does not have one value per compositional field.
        """
        self.parameters.composition.check_composition(composition)

        melt_fraction = self.melt_model.melt_fraction(temperature, pressure, composition, position)
        viscosity_multiplier = self.rheology_model.compute_strengthening(pressure, temperature, composition)
        heat_source_term = 0.0
        latent_heat_term = 0.0
        for heating_model in self.heating_models:
            heating_outputs = heating_model.evaluate(composition)
            heat_source_term += heating_outputs.heating_source_term
            latent_heat_term += heating_outputs.lhs_latent_heat_term

        if kwargs.get("debug", False):
            print("DEBUG MODE: Evaluating properties")
            print(f"  Temperature: {temperature:.2f} C")
            print(f"  Pressure: {pressure:.2e} Pa")
            print(f"  Composition: {list(composition)}")
            print(f"  Melt fraction: {melt_fraction:.4e}")
            print(f"  Viscosity multiplier: {viscosity_multiplier:.4e}")
            print(f"  Heat source term: {heat_source_term:.4e} W/m^3")

        return PointOutputs(melt_fraction=melt_fraction,
                            viscosity_multiplier=viscosity_multiplier,
                            heat_source_term=heat_source_term,
                            latent_heat_term=latent_heat_term)

    def evaluate_table(self, df):
        """
        Evaluate all properties for the points of a table.

        Args:
            df (pd.DataFrame): columns "temperature" (C), "pressure" (Pa) and one column
                per compositional field, named as the field.

        Returns:
            pd.DataFrame: a copy of df with the columns of PointOutputs appended.

        Raises:
            ValueError: if a column is missing.
        """
        required = ["temperature", "pressure"] + list(self.parameters.field_names)
        missing = [column for column in required if column not in df.columns]
        my_assert(len(missing) == 0, ValueError,
                  "PropertyEvaluator.evaluate_table: missing columns %s" % missing)

        outputs = [self.evaluate(row[0], row[1], row[2:])
                   for row in df[required].itertuples(index=False, name=None)]
        df_out = df.copy()
        results = pd.DataFrame(outputs, columns=OUTPUT_COLUMNS, index=df.index, dtype=float)
        for column in OUTPUT_COLUMNS:
            df_out[column] = results[column]
        return df_out

    def evaluate_points(self, temperatures, pressures, compositions):
        """
        Evaluate many points, vectorized where the models provide the batch interface.

        Args:
            temperatures (array-like, shape (n_points,)): temperatures (C).
            pressures (array-like, shape (n_points,)): pressures (Pa).
            compositions (array-like, shape (n_points, N)): compositional field values.

        Returns:
            PointOutputs: np.ndarray of shape (n_points,) for each output.
        """
        T = np.atleast_1d(np.asarray(temperatures, dtype=float))
        P = np.atleast_1d(np.asarray(pressures, dtype=float))
        C = np.asarray(compositions, dtype=float).reshape(T.size, self.parameters.n_compositional_fields)

        if hasattr(self.melt_model, "melt_fractions"):
            melt_fractions = self.melt_model.melt_fractions(T, P)
        else:
            melt_fractions = np.array([self.melt_model.melt_fraction(T[i], P[i], C[i]) for i in range(T.size)],
                                      dtype=float)
        if hasattr(self.rheology_model, "compute_strengthening_vectorized"):
            viscosity_multipliers = self.rheology_model.compute_strengthening_vectorized(C)
        else:
            viscosity_multipliers = np.array([self.rheology_model.compute_strengthening(P[i], T[i], C[i])
                                              for i in range(T.size)], dtype=float)
        heat_source_terms = np.zeros(T.size)
        latent_heat_terms = np.zeros(T.size)
        for heating_model in self.heating_models:
            if hasattr(heating_model, "evaluate_points"):
                heating_outputs = heating_model.evaluate_points(C)
                heat_source_terms = heat_source_terms + heating_outputs.heating_source_term
                latent_heat_terms = latent_heat_terms + heating_outputs.lhs_latent_heat_term
            else:
                for i in range(T.size):
                    heating_outputs = heating_model.evaluate(C[i])
                    heat_source_terms[i] += heating_outputs.heating_source_term
                    latent_heat_terms[i] += heating_outputs.lhs_latent_heat_term
        return PointOutputs(melt_fraction=melt_fractions,
                            viscosity_multiplier=viscosity_multipliers,
                            heat_source_term=heat_source_terms,
                            latent_heat_term=latent_heat_terms)


def create_property_evaluator(file_path, registry=None, model_names=None):
    '''
    Read a deal.ii parameter file and build the evaluator from it.
    '''
    return PropertyEvaluator(read_parameter_set(file_path), registry=registry, model_names=model_names)
