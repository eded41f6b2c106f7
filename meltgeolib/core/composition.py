"""
Composition Module - MeltGeoLib

MIT License

Overview:
    Access to the compositional fields carried by the geodynamic model and the
    averaging of bulk properties over them.

    Averaged properties use N+1 volume fractions, ordered background first, then
    the N compositional fields in the order they are declared.

Classes:
    - `CompositionAccessor`: name <-> index lookup of compositional fields.

Functions:
    - `compute_volume_fractions`: clip, mask and normalize N+1 fractions.
    - `volume_fractions_from_composition`: the same, starting from the N field values.
"""

import numpy as np

from ..utils.exception_handler import my_assert, ConfigurationError


class CompositionAccessor:
    """
    Ordered names of the compositional fields.

    Field lookups by name return an index or None; absence of a field is a normal
    outcome for optional features (e.g. depletion strengthening), not an error.
    """

    def __init__(self, names=()):
        names = tuple(str(name).strip() for name in names)
        for name in names:
            my_assert(name != "", ConfigurationError, "CompositionAccessor: field names must not be empty")
        my_assert(len(set(names)) == len(names), ConfigurationError,
                  "CompositionAccessor: field names must be unique, get %s" % str(names))
        self._names = names
        self._indices = {name: index for index, name in enumerate(names)}

    @property
    def names(self):
        return self._names

    @property
    def n_compositional_fields(self):
        return len(self._names)

    def name_exists(self, name):
        return name in self._indices

    def index_for_name(self, name):
        '''
        Return the index of the field, or None if there is no such field.
        '''
        return self._indices.get(name)

    def value(self, composition, index):
        return composition[index]

    def check_composition(self, composition):
        '''
        Assert that a composition vector has one value per field.
        '''
        my_assert(len(composition) == len(self._names), ValueError,
                  "composition has %d values, but %d compositional fields are declared"
                  % (len(composition), len(self._names)))

    def __len__(self):
        return len(self._names)

    def __eq__(self, other):
        if not isinstance(other, CompositionAccessor):
            return NotImplemented
        return self._names == other._names

    def __repr__(self):
        return "CompositionAccessor(%r)" % (list(self._names),)


def compute_volume_fractions(fractions, mask):
    """
    Normalize background-first fractions into volume fractions.

    Negative values are clipped to zero, entries excluded by the mask are set to
    zero and the rest is scaled to sum to one. If nothing remains, the background
    takes all the weight.

    Args:
        fractions (sequence of float): N+1 values, background first.
        mask (sequence of bool): N+1 flags, True if the entry takes part in the averaging.

    Returns:
        list of float: N+1 volume fractions, nonnegative, summing to one.
    """
    my_assert(len(fractions) == len(mask), ValueError,
              "compute_volume_fractions: %d fractions but %d mask entries" % (len(fractions), len(mask)))
    clipped = [max(value, 0.0) if used else 0.0 for value, used in zip(fractions, mask)]
    total = sum(clipped)
    if total <= 0.0:
        volume_fractions = [0.0] * len(clipped)
        volume_fractions[0] = 1.0
        return volume_fractions
    return [value / total for value in clipped]


def background_fraction(composition, mask):
    '''
    Fraction not taken by the compositional fields included in the mask.

    mask is background first, so composition[i] goes with mask[i + 1].
    '''
    total = 0.0
    for value, used in zip(composition, mask[1:]):
        if used:
            total += min(max(value, 0.0), 1.0)
    return max(1.0 - total, 0.0)


def volume_fractions_from_composition(composition, mask):
    """
    Volume fractions of the background and the N compositional fields.

    Field values are clipped into [0, 1]. The background is what the included
    fields leave over; if they add up to more than one the background vanishes
    and the fields are normalized.

    Args:
        composition (sequence of float): N compositional field values.
        mask (sequence of bool): N+1 flags, background first.

    Returns:
        list of float: N+1 volume fractions.
    """
    my_assert(len(composition) + 1 == len(mask), ValueError,
              "volume_fractions_from_composition: %d fields need %d mask entries, get %d"
              % (len(composition), len(composition) + 1, len(mask)))
    fractions = [background_fraction(composition, mask)]
    fractions.extend(min(max(value, 0.0), 1.0) for value in composition)
    return compute_volume_fractions(fractions, mask)


def volume_fractions_from_compositions(compositions, mask):
    """
    Vectorized volume_fractions_from_composition.

    Args:
        compositions (array-like, shape (n_points, N)): field values per point.
        mask (sequence of bool): N+1 flags, background first.

    Returns:
        np.ndarray, shape (n_points, N+1)
    """
    C = np.atleast_2d(np.asarray(compositions, dtype=float))
    mask = np.asarray(mask, dtype=bool)
    my_assert(C.shape[1] + 1 == mask.size, ValueError,
              "volume_fractions_from_compositions: %d fields need %d mask entries, get %d"
              % (C.shape[1], C.shape[1] + 1, mask.size))
    C = np.clip(C, 0.0, 1.0)
    included = np.where(mask[1:], C, 0.0)
    background = np.maximum(1.0 - included.sum(axis=1), 0.0)
    fractions = np.column_stack([background, C])
    fractions = np.where(mask, np.maximum(fractions, 0.0), 0.0)
    total = fractions.sum(axis=1)
    degenerate = total <= 0.0
    volume_fractions = np.zeros_like(fractions)
    volume_fractions[~degenerate] = fractions[~degenerate] / total[~degenerate, None]
    volume_fractions[degenerate, 0] = 1.0
    return volume_fractions
