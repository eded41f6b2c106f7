# dealii_param_parser.py
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
dealii_param_parser.py

Description: Reading and writing of deal.ii parameter files, the format the
             melting, rheology and heating parameters of MeltGeoLib are given in.

Functions:
    - parse_parameters_to_dict: Parses a deal.ii parameter file into a nested dictionary.
    - save_parameters_from_dict: Saves a nested dictionary to a deal.ii formatted file.
    - read_parameter_file / write_parameter_file: the same, given a path.
"""

import io
import re

from .exception_handler import my_assert, ConfigurationError


def parse_parameters_to_dict(file_input):
    """
    Parses a deal.ii parameter file and returns a dictionary of parameters.

    Args:
        file_input (TextIO): A file object opened for reading, which contains the parameter data.

    Returns:
        dict: Parameter names mapped to their values (str); subsections are nested dictionaries.

    Raises:
        ConfigurationError: if a 'set' line carries no '=' sign.
    """
    parameters = {}
    current_line = file_input.readline()
    while current_line != "":
        # Inputs formats:
        # - Comments: Lines starting with '#'
        # - Section markers: "subsection name" to start and "end" to close
        # - Key-value pairs: 'set key = value'
        if re.match(r'^(\t| )*#', current_line):
            pass
        elif re.match(r'^(\t| )*set ', current_line):
            line_cleaned = re.sub(r'^(\t| )*set ', '', current_line, count=1)
            my_assert('=' in line_cleaned, ConfigurationError,
                      "parse_parameters_to_dict: malformed entry, expect 'set key = value', get '%s'"
                      % current_line.strip())
            key, value = line_cleaned.split('=', maxsplit=1)
            key = key.strip()
            value = re.sub(r' *(#.*)?\n?$', '', value.lstrip())
            while value.endswith('\\'):
                # a trailing '\' continues the value on the next line
                next_line = file_input.readline()
                if next_line == "":
                    break
                value = value[:-1].rstrip() + ' ' + re.sub(r' *(#.*)?\n?$', '', next_line.strip())
            parameters[key] = value
        elif re.match(r'^(\t| )*subsection ', current_line):
            subsection_name = re.sub(r'^(\t| )*subsection ', '', current_line)
            subsection_name = re.sub(r' *(#.*)?\n?$', '', subsection_name)
            new_entries = parse_parameters_to_dict(file_input)
            if subsection_name in parameters:
                # repeated subsections are merged, later entries win
                print('%s is already presented, going to update.' % subsection_name)
                parameters[subsection_name].update(new_entries)
            else:
                parameters[subsection_name] = new_entries
        elif re.match(r'^(\t| )*end(\t| )*(#.*)?$', current_line.rstrip('\n')):
            return parameters
        current_line = file_input.readline()
    return parameters


def parse_parameters_from_string(text):
    '''
    Parse the content of a deal.ii parameter file given as a string.
    '''
    return parse_parameters_to_dict(io.StringIO(text))


def save_parameters_from_dict(fout, parameters_dict, indent_level=0):
    """
    Saves a dictionary of parameters to a deal.ii formatted file, preserving
    nested structure using subsections.

    Args:
        fout (TextIO): An open file object where the parameters will be written.
        parameters_dict (dict): Parameters to save; values are str (entries) or dict (subsections).
        indent_level (int): Current indentation level of nested sections (default is 0).

    Raises:
        ValueError: If a dictionary value is not of type str or dict.
    """
    indent = ' ' * 4 * indent_level
    for key, value in parameters_dict.items():
        if isinstance(value, str):
            fout.write(indent + 'set %s = %s\n' % (key, value))
        elif isinstance(value, dict):
            if indent_level == 0:
                fout.write('\n')
            fout.write(indent + 'subsection %s\n' % key)
            save_parameters_from_dict(fout, value, indent_level + 1)
            fout.write(indent + 'end\n')
            if indent_level == 0:
                fout.write('\n')
        else:
            raise ValueError('Value in dictionary must be str or dict, received:\n key: '
                             + key + "\n type of value: " + str(type(value)) + "\n value: " + str(value))


def read_parameter_file(file_path):
    '''
    Read a deal.ii parameter file from disk.
    '''
    with open(file_path, 'r') as fin:
        return parse_parameters_to_dict(fin)


def write_parameter_file(file_path, parameters_dict):
    '''
    Write a nested parameter dictionary to disk in deal.ii format.
    '''
    with open(file_path, 'w') as fout:
        save_parameters_from_dict(fout, parameters_dict)
