"""
Registry Module - MeltGeoLib

MIT License

Overview:
    Models are selected by name from the parameters. The names and the functions
    building the models are kept in a `ModelRegistry`, filled by a single call to
    `initialize_registry` before any model is created.

    Model kinds and their variants:
        - "melt fraction model": "katz 2003"
        - "rheology model": "depletion strengthening"
        - "heating model": "compositional heating"

Classes:
    - `ModelRegistry`: name -> constructor table, per model kind.

Functions:
    - `initialize_registry`: register all models shipped with the package.
"""

from collections import namedtuple, OrderedDict

from ..utils.exception_handler import my_assert, ConfigurationError
from .melt import MeltFractionEngine
from .DepletionStrengthening import DepletionStrengtheningModel
from .heating import CompositionalHeating

MELT_FRACTION_MODEL = "melt fraction model"
RHEOLOGY_MODEL = "rheology model"
HEATING_MODEL = "heating model"

MODEL_KINDS = (MELT_FRACTION_MODEL, RHEOLOGY_MODEL, HEATING_MODEL)

RegistryEntry = namedtuple("RegistryEntry", ["name", "constructor", "description"])


class ModelRegistry:
    '''
    Table of the models that can be selected by name.
    Constructors take a ParameterSet and return the model.
    '''

    def __init__(self):
        self._entries = OrderedDict((kind, OrderedDict()) for kind in MODEL_KINDS)

    def register(self, kind, name, constructor, description=""):
        """
        Register a model.

        Raises:
            ValueError: for an unknown kind or a name that is already registered.
        """
        my_assert(kind in self._entries, ValueError,
                  "ModelRegistry.register: unknown model kind '%s', options are %s" % (kind, list(self._entries)))
        my_assert(name not in self._entries[kind], ValueError,
                  "ModelRegistry.register: %s '%s' is already registered" % (kind, name))
        self._entries[kind][name] = RegistryEntry(name, constructor, description)

    def names(self, kind):
        return list(self._entries[kind].keys())

    def has(self, kind, name):
        return kind in self._entries and name in self._entries[kind]

    def describe(self, kind, name):
        return self._entry(kind, name).description

    def create(self, kind, name, parameters):
        '''
        Build the model registered as `name` from a ParameterSet.
        '''
        return self._entry(kind, name).constructor(parameters)

    def _entry(self, kind, name):
        my_assert(self.has(kind, name), ConfigurationError,
                  "Unknown %s '%s', registered options are %s"
                  % (kind, name, self.names(kind) if kind in self._entries else []))
        return self._entries[kind][name]


def initialize_registry(registry=None):
    '''
    Register the models of this package, in a fixed order.
    '''
    if registry is None:
        registry = ModelRegistry()
    registry.register(MELT_FRACTION_MODEL, "katz 2003", MeltFractionEngine.from_parameters,
                      "Equilibrium melt fraction of anhydrous peridotite after Katz et al. (2003).")
    registry.register(RHEOLOGY_MODEL, "depletion strengthening", DepletionStrengtheningModel.from_parameters,
                      "Viscosity multiplier min(exp(alpha_F * F), delta_eta_F_max) from the depletion field.")
    registry.register(HEATING_MODEL, "compositional heating", CompositionalHeating.from_parameters,
                      "Implementation of a model in which magnitude of internal heat production "
                      "is determined from fixed values assigned to each compositional "
                      "field. These values are interpreted as having units W/m^3.")
    return registry
