# param_utilities.py
# MIT License
# Copyright (c) 2025 MeltGeoLib authors
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
param_utilities.py

Conversion of deal.ii parameter entries (strings) into python values.

Functions:
    - parse_entry_as_list: 'a, b, c' -> ['a', 'b', 'c']
    - format_list_as_entry: ['a', 'b'] -> 'a, b'
    - string_to_double / string_to_bool: typed conversion of a single entry
    - possibly_extend_from_1_to_N: broadcast a single value to N entries
"""

from .exception_handler import my_assert, ConfigurationError

TRUE_STRINGS = ("1", "true", "yes", "on")
FALSE_STRINGS = ("0", "false", "no", "off")


def parse_entry_as_list(entry):
    """
    Split a comma separated entry into a list of stripped strings.

    An empty entry gives an empty list. A list or tuple is returned as a list of
    its items and a single number or bool as a one item list, so that values set
    from python and values read from a file are treated the same way.
    """
    if not isinstance(entry, str):
        if hasattr(entry, "__iter__"):
            return list(entry)
        if isinstance(entry, (bool, int, float)):
            return [entry]
    entry = str(entry).strip()
    if entry == "":
        return []
    return [part.strip() for part in entry.split(',')]


def format_list_as_entry(values):
    '''
    Join values into a comma separated entry; floats are written with repr so that
    reading the entry back gives the same numbers.
    '''
    return ", ".join(format_value_as_entry(value) for value in values)


def format_value_as_entry(value):
    '''
    Format a single value for a parameter file.
    '''
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    return str(value)


def string_to_double(value, name):
    """
    Convert an entry to float.

    Args:
        value (str, int or float): the entry.
        name (str): name of the entry, for error reporting.

    Raises:
        ConfigurationError: if the value is not a number.
    """
    if isinstance(value, bool):
        raise ConfigurationError("Entry '%s' must be a number, get a boolean (%s)" % (name, value))
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError("Entry '%s' must be a number, get '%s'" % (name, value))


def string_to_bool(value, name):
    """
    Convert an entry to bool. Accepts booleans, 0/1 and true/false style strings.

    Raises:
        ConfigurationError: if the value is not recognized.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        my_assert(value in (0, 1), ConfigurationError,
                  "Entry '%s' must be 0 or 1, get %s" % (name, value))
        return bool(value)
    value_str = str(value).strip().lower()
    if value_str in TRUE_STRINGS:
        return True
    if value_str in FALSE_STRINGS:
        return False
    raise ConfigurationError("Entry '%s' must be a boolean (0/1, true/false), get '%s'" % (name, value))


def possibly_extend_from_1_to_N(values, N, name):
    """
    Return a list of N values: a single value is repeated N times, a list of
    N values is returned as is.

    Args:
        values (list): the parsed values.
        N (int): the required length.
        name (str): name of the entry, for error reporting.

    Raises:
        ConfigurationError: for any other length.
    """
    values = list(values)
    if len(values) == 1:
        return values * N
    my_assert(len(values) == N, ConfigurationError,
              "Length of '%s' needs to be either one or %d, but is %d." % (name, N, len(values)))
    return values
