"""
Parameters Module - MeltGeoLib

MIT License

Overview:
    This module holds the parameters of the melting, depletion strengthening and
    compositional heating models. Parameters are declared once, together with their
    default values (Katz et al., 2003, for the melting parameterization), read from
    a deal.ii parameter file or a plain mapping, validated, and then never changed.

Classes:
    - `PhaseBoundaryCoefficients`: solidus, lherzolite liquidus and liquidus coefficients.
    - `ReactionCoefficients`: clinopyroxene reaction coefficient.
    - `MeltParameters`: melt exponent and clinopyroxene mass fraction.
    - `DepletionParameters`: depletion strengthening exponent and cap.
    - `ParameterSet`: the validated, immutable collection of all of the above.

Functions:
    - `read_parameter_set`: build a `ParameterSet` from a deal.ii parameter file.
"""

import math
import warnings
from typing import NamedTuple

from ..utils.exception_handler import my_assert, ConfigurationError
from ..utils.dealii_param_parser import read_parameter_file, write_parameter_file
from ..utils.param_utilities import parse_entry_as_list, format_list_as_entry, format_value_as_entry,\
    string_to_double, string_to_bool, possibly_extend_from_1_to_N
from .composition import CompositionAccessor

DEPLETION_FIELD_NAME = "maximum_melt_fraction"
DEFAULT_HEATING_MODEL_NAMES = ("compositional heating",)


class PhaseBoundaryCoefficients(NamedTuple):
    # solidus, T = A1 + A2 * P + A3 * P^2 (C, C/Pa, C/Pa^2)
    A1: float = 1085.7
    A2: float = 1.329e-7
    A3: float = -5.1e-18
    # lherzolite liquidus
    B1: float = 1475.0
    B2: float = 8.0e-8
    B3: float = -3.2e-18
    # liquidus
    C1: float = 1780.0
    C2: float = 4.50e-8
    C3: float = -2.0e-18


class ReactionCoefficients(NamedTuple):
    # R = r1 + r2 * P
    r1: float = 0.5
    r2: float = 8e-11


class MeltParameters(NamedTuple):
    beta: float = 1.5
    M_cpx: float = 0.15


class DepletionParameters(NamedTuple):
    alpha_depletion: float = 0.0
    delta_eta_depletion_max: float = 1.0e3


class ParameterDeclaration(NamedTuple):
    name: str          # attribute name, also accepted as a key in flat mappings
    entry: str         # entry name in the parameter file
    group: str         # which record the value belongs to
    description: str


# Scalar entries of the "Material model/Depletion strengthening" subsection,
# in the order of the parameter file.
SCALAR_DECLARATIONS = (
    ParameterDeclaration("A1", "A1", "phase_boundaries",
                         "Constant parameter in the quadratic function that approximates the solidus of peridotite. Units: C."),
    ParameterDeclaration("A2", "A2", "phase_boundaries",
                         "Prefactor of the linear pressure term of the solidus of peridotite. Units: C/Pa."),
    ParameterDeclaration("A3", "A3", "phase_boundaries",
                         "Prefactor of the quadratic pressure term of the solidus of peridotite. Units: C/(Pa^2)."),
    ParameterDeclaration("B1", "B1", "phase_boundaries",
                         "Constant parameter in the quadratic function that approximates the lherzolite liquidus. Units: C."),
    ParameterDeclaration("B2", "B2", "phase_boundaries",
                         "Prefactor of the linear pressure term of the lherzolite liquidus. Units: C/Pa."),
    ParameterDeclaration("B3", "B3", "phase_boundaries",
                         "Prefactor of the quadratic pressure term of the lherzolite liquidus. Units: C/(Pa^2)."),
    ParameterDeclaration("C1", "C1", "phase_boundaries",
                         "Constant parameter in the quadratic function that approximates the liquidus of peridotite. Units: C."),
    ParameterDeclaration("C2", "C2", "phase_boundaries",
                         "Prefactor of the linear pressure term of the liquidus of peridotite. Units: C/Pa."),
    ParameterDeclaration("C3", "C3", "phase_boundaries",
                         "Prefactor of the quadratic pressure term of the liquidus of peridotite. Units: C/(Pa^2)."),
    ParameterDeclaration("r1", "r1", "reaction",
                         "Constant in the linear function that approximates the clinopyroxene reaction coefficient."),
    ParameterDeclaration("r2", "r2", "reaction",
                         "Prefactor of the linear pressure term of the clinopyroxene reaction coefficient. Units: 1/Pa."),
    ParameterDeclaration("beta", "beta", "melt",
                         "Exponent of the melting temperature in the melt fraction calculation."),
    ParameterDeclaration("M_cpx", "Mass fraction cpx", "melt",
                         "Mass fraction of clinopyroxene in the peridotite to be molten."),
    ParameterDeclaration("alpha_depletion", "Exponential depletion strengthening factor", "depletion",
                         "Exponential dependency of viscosity on the depletion field, exp(alpha_F * F)."),
    ParameterDeclaration("delta_eta_depletion_max", "Maximum Depletion viscosity change", "depletion",
                         "Maximum depletion strengthening of viscosity."),
)

HEATING_VALUES_ENTRY = "Compositional heating values"
AVERAGING_MASK_ENTRY = "Use compositional field for heat production averaging"
DEPLETION_FIELD_ENTRY = "Depletion field name"

# keys of a flat mapping that are not scalar declarations: short name -> entry name
LIST_KEYS = {
    "heating_values": HEATING_VALUES_ENTRY,
    "fields_used_in_averaging": AVERAGING_MASK_ENTRY,
    "field_names": "Names of fields",
    "n_compositional_fields": "Number of fields",
    "depletion_field_name": DEPLETION_FIELD_ENTRY,
    "heating_model_names": "List of model names",
}


class ParameterSet:
    """
    Immutable, validated parameters of the petrological models.

    Attributes:
        phase_boundaries (PhaseBoundaryCoefficients): solidus/liquidus coefficients.
        reaction (ReactionCoefficients): clinopyroxene reaction coefficients.
        melt (MeltParameters): melt exponent and clinopyroxene mass fraction.
        depletion (DepletionParameters): strengthening exponent and cap.
        composition (CompositionAccessor): names of the N compositional fields.
        heating_values (tuple): N+1 heat production values (W/m^3), background first.
        fields_used_in_averaging (tuple): N+1 booleans, background first.
        depletion_field_name (str): name of the field tracking depletion.
        heating_model_names (tuple): names of the heating models to evaluate.

    All checks are done in the constructor; an invalid combination raises
    ConfigurationError and no object is created.
    """

    __slots__ = ("phase_boundaries", "reaction", "melt", "depletion", "composition",
                 "heating_values", "fields_used_in_averaging", "depletion_field_name",
                 "heating_model_names", "_frozen")

    def __init__(self, phase_boundaries=None, reaction=None, melt=None, depletion=None,
                 field_names=(), heating_values=(0.0,), fields_used_in_averaging=(True,),
                 depletion_field_name=DEPLETION_FIELD_NAME,
                 heating_model_names=DEFAULT_HEATING_MODEL_NAMES):
        phase_boundaries = PhaseBoundaryCoefficients() if phase_boundaries is None else phase_boundaries
        reaction = ReactionCoefficients() if reaction is None else reaction
        melt = MeltParameters() if melt is None else melt
        depletion = DepletionParameters() if depletion is None else depletion

        # list entries may also be given as a single value or a comma separated string
        composition = field_names if isinstance(field_names, CompositionAccessor)\
            else CompositionAccessor(parse_entry_as_list(field_names))
        n_fields = composition.n_compositional_fields + 1  # background included

        for record in (phase_boundaries, reaction, melt, depletion):
            for key, value in record._asdict().items():
                my_assert(isinstance(value, (int, float)) and not isinstance(value, bool)
                          and math.isfinite(value), ConfigurationError,
                          "ParameterSet: %s must be a finite number, get %r" % (key, value))
        my_assert(melt.beta > 0.0, ConfigurationError,
                  "ParameterSet: beta must be positive, get %s" % melt.beta)
        my_assert(0.0 <= melt.M_cpx <= 1.0, ConfigurationError,
                  "ParameterSet: M_cpx must be within [0, 1], get %s" % melt.M_cpx)
        my_assert(depletion.alpha_depletion >= 0.0, ConfigurationError,
                  "ParameterSet: alpha_depletion must be nonnegative, get %s" % depletion.alpha_depletion)
        my_assert(depletion.delta_eta_depletion_max >= 1.0, ConfigurationError,
                  "ParameterSet: delta_eta_depletion_max must be >= 1, get %s" % depletion.delta_eta_depletion_max)

        heating_values = [string_to_double(value, HEATING_VALUES_ENTRY)
                          for value in parse_entry_as_list(heating_values)]
        heating_values = possibly_extend_from_1_to_N(heating_values, n_fields, HEATING_VALUES_ENTRY)
        for value in heating_values:
            my_assert(math.isfinite(value) and value >= 0.0, ConfigurationError,
                      "ParameterSet: heating values must be finite and nonnegative, get %s" % value)

        fields_used = [string_to_bool(value, AVERAGING_MASK_ENTRY)
                       for value in parse_entry_as_list(fields_used_in_averaging)]
        fields_used = possibly_extend_from_1_to_N(fields_used, n_fields, AVERAGING_MASK_ENTRY)

        my_assert(isinstance(depletion_field_name, str) and depletion_field_name != "", ConfigurationError,
                  "ParameterSet: depletion field name must be a nonempty string")
        heating_model_names = tuple(parse_entry_as_list(heating_model_names))
        my_assert(len(heating_model_names) > 0, ConfigurationError,
                  "ParameterSet: at least one heating model needs to be given")

        object.__setattr__(self, "_frozen", False)
        self.phase_boundaries = PhaseBoundaryCoefficients(*(float(v) for v in phase_boundaries))
        self.reaction = ReactionCoefficients(*(float(v) for v in reaction))
        self.melt = MeltParameters(*(float(v) for v in melt))
        self.depletion = DepletionParameters(*(float(v) for v in depletion))
        self.composition = composition
        self.heating_values = tuple(heating_values)
        self.fields_used_in_averaging = tuple(fields_used)
        self.depletion_field_name = depletion_field_name
        self.heating_model_names = heating_model_names
        self._frozen = True

    def __setattr__(self, name, value):
        if getattr(self, "_frozen", False):
            raise AttributeError("ParameterSet is immutable, cannot set '%s'" % name)
        object.__setattr__(self, name, value)

    def __eq__(self, other):
        if not isinstance(other, ParameterSet):
            return NotImplemented
        return self.to_mapping() == other.to_mapping()

    def __repr__(self):
        return "ParameterSet(%s)" % ", ".join("%s=%r" % (k, v) for k, v in self.to_mapping().items())

    @property
    def n_compositional_fields(self):
        return self.composition.n_compositional_fields

    @property
    def field_names(self):
        return self.composition.names

    def replace(self, **kwargs):
        '''
        Return a new ParameterSet with some values changed; keys as in to_mapping().
        '''
        mapping = self.to_mapping()
        mapping.update(kwargs)
        return ParameterSet.from_mapping(mapping)

    # ------------------------------------------------------------------
    # conversion from and to flat mappings
    # ------------------------------------------------------------------
    @classmethod
    def from_mapping(cls, mapping, field_names=None):
        """
        Build a ParameterSet from a flat mapping.

        Args:
            mapping (dict): keys are either the short names (A1, ..., M_cpx, alpha_depletion,
                delta_eta_depletion_max, heating_values, fields_used_in_averaging, field_names,
                depletion_field_name, heating_model_names) or the entry names of the parameter
                file (e.g. "Mass fraction cpx"). Values may be numbers, lists or strings.
            field_names (list, optional): names of the compositional fields; overrides the mapping.

        Returns:
            ParameterSet

        Raises:
            ConfigurationError: for malformed or out-of-bounds values.
        """
        known_keys = set()
        records = {"phase_boundaries": {}, "reaction": {}, "melt": {}, "depletion": {}}
        for declaration in SCALAR_DECLARATIONS:
            known_keys.update((declaration.name, declaration.entry))
            value = _lookup(mapping, declaration.name, declaration.entry)
            if value is not None:
                records[declaration.group][declaration.name] = string_to_double(value, declaration.entry)
        for name, entry in LIST_KEYS.items():
            known_keys.update((name, entry))
        for key in mapping:
            if key not in known_keys:
                warnings.warn("ParameterSet.from_mapping: unknown entry '%s' is ignored" % key)

        if field_names is None:
            field_names = parse_entry_as_list(_lookup(mapping, "field_names", "Names of fields", default=""))
        n_fields_entry = _lookup(mapping, "n_compositional_fields", "Number of fields")
        if n_fields_entry is not None:
            try:
                n_fields = int(str(n_fields_entry).strip())
            except ValueError:
                raise ConfigurationError("Entry 'Number of fields' must be an integer, get '%s'" % n_fields_entry)
            if len(field_names) == 0 and n_fields > 0:
                # unnamed fields follow the C_1, C_2, ... convention
                field_names = ["C_%d" % (i + 1) for i in range(n_fields)]
            my_assert(n_fields == len(field_names), ConfigurationError,
                      "ParameterSet.from_mapping: 'Number of fields' (%d) does not match the %d names given"
                      % (n_fields, len(field_names)))

        heating_values = parse_entry_as_list(_lookup(mapping, "heating_values", HEATING_VALUES_ENTRY, default="0"))
        fields_used = parse_entry_as_list(_lookup(mapping, "fields_used_in_averaging", AVERAGING_MASK_ENTRY, default="1"))
        heating_model_names = parse_entry_as_list(
            _lookup(mapping, "heating_model_names", "List of model names",
                    default=format_list_as_entry(DEFAULT_HEATING_MODEL_NAMES)))

        return cls(phase_boundaries=PhaseBoundaryCoefficients(**records["phase_boundaries"]),
                   reaction=ReactionCoefficients(**records["reaction"]),
                   melt=MeltParameters(**records["melt"]),
                   depletion=DepletionParameters(**records["depletion"]),
                   field_names=field_names,
                   heating_values=heating_values,
                   fields_used_in_averaging=fields_used,
                   depletion_field_name=str(_lookup(mapping, "depletion_field_name", DEPLETION_FIELD_ENTRY,
                                                    default=DEPLETION_FIELD_NAME)).strip(),
                   heating_model_names=heating_model_names)

    def to_mapping(self):
        '''
        Return the parameters as a flat dict keyed by the short names.
        '''
        mapping = {}
        for record in (self.phase_boundaries, self.reaction, self.melt, self.depletion):
            mapping.update(record._asdict())
        mapping["field_names"] = list(self.field_names)
        mapping["heating_values"] = list(self.heating_values)
        mapping["fields_used_in_averaging"] = list(self.fields_used_in_averaging)
        mapping["depletion_field_name"] = self.depletion_field_name
        mapping["heating_model_names"] = list(self.heating_model_names)
        return mapping

    # ------------------------------------------------------------------
    # conversion from and to deal.ii parameter dictionaries
    # ------------------------------------------------------------------
    @classmethod
    def from_prm_dict(cls, prm_dict):
        """
        Build a ParameterSet from a parsed deal.ii parameter file.

        The entries are looked up in:
            - "Compositional fields": "Number of fields", "Names of fields"
            - "Material model/Depletion strengthening": the melting and strengthening parameters
            - "Heating model": "List of model names", and its subsection "Compositional heating"

        Missing subsections or entries take their default values.
        """
        mapping = {}
        compositional_fields = prm_dict.get("Compositional fields", {})
        for entry in ("Number of fields", "Names of fields"):
            if entry in compositional_fields:
                mapping[entry] = compositional_fields[entry]

        strengthening = prm_dict.get("Material model", {}).get("Depletion strengthening", {})
        scalar_entries = {declaration.entry for declaration in SCALAR_DECLARATIONS}
        for key, value in strengthening.items():
            if key in scalar_entries or key == DEPLETION_FIELD_ENTRY:
                mapping[key] = value
            else:
                warnings.warn("ParameterSet.from_prm_dict: unknown entry 'Depletion strengthening/%s' is ignored" % key)

        heating = prm_dict.get("Heating model", {})
        if "List of model names" in heating:
            mapping["List of model names"] = heating["List of model names"]
        for key, value in heating.get("Compositional heating", {}).items():
            if key in (HEATING_VALUES_ENTRY, AVERAGING_MASK_ENTRY):
                mapping[key] = value
            else:
                warnings.warn("ParameterSet.from_prm_dict: unknown entry 'Compositional heating/%s' is ignored" % key)

        return cls.from_mapping(mapping)

    def to_prm_dict(self):
        '''
        Return the parameters as a nested dict of strings, the layout read by from_prm_dict.
        '''
        strengthening = {}
        values = self.to_mapping()
        for declaration in SCALAR_DECLARATIONS:
            strengthening[declaration.entry] = format_value_as_entry(values[declaration.name])
        strengthening[DEPLETION_FIELD_ENTRY] = self.depletion_field_name
        return {
            "Compositional fields": {
                "Number of fields": str(self.n_compositional_fields),
                "Names of fields": format_list_as_entry(self.field_names),
            },
            "Material model": {
                "Depletion strengthening": strengthening,
            },
            "Heating model": {
                "List of model names": format_list_as_entry(self.heating_model_names),
                "Compositional heating": {
                    HEATING_VALUES_ENTRY: format_list_as_entry(self.heating_values),
                    AVERAGING_MASK_ENTRY: format_list_as_entry([int(v) for v in self.fields_used_in_averaging]),
                },
            },
        }

    def write_parameter_file(self, file_path):
        '''
        Save the parameters to a deal.ii parameter file.
        '''
        write_parameter_file(file_path, self.to_prm_dict())


def read_parameter_set(file_path):
    '''
    Read a deal.ii parameter file and build the ParameterSet from it.
    '''
    return ParameterSet.from_prm_dict(read_parameter_file(file_path))


def _lookup(mapping, name, entry, default=None):
    # short names take precedence over parameter file entry names
    if name in mapping:
        return mapping[name]
    return mapping.get(entry, default)
