# MIT License
#
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
File: plot_helper.py

Description:
This module draws the melting model on matplotlib axes, for checking a set of
parameters before it is handed to a geodynamic model.

Functions:
    plot_table_columns
        - Plot one or more columns of a DataFrame against another, with the units
        stored in DataFrame.attrs["units"] appended to the labels.
    plot_phase_boundaries
        - Solidus, lherzolite liquidus, liquidus and clinopyroxene-out temperature
        over pressure.
    plot_melt_fraction_curves
        - Melt fraction over temperature, one curve per pressure.
"""

import numpy as np
import pandas as pd

PHASE_BOUNDARY_COLUMNS = ["solidus", "lherzolite_liquidus", "liquidus", "cpx_out"]
PHASE_BOUNDARY_LABELS = ["Solidus", "Lherzolite liquidus", "Liquidus", "Cpx out"]


def plot_table_columns(data, x_col, y_cols, labels, ax, x_scale=1.0, x_unit=None):
    """
    Plot columns of a table against x_col, one line per column.

    Args:
        data (pd.DataFrame): the table; units may be stored in data.attrs["units"].
        x_col (str): column for the x-axis.
        y_cols (list of str): columns for the y-axis.
        labels (list of str): legend labels, the unit of the column is appended.
        ax (matplotlib.axes.Axes): axes to draw on.
        x_scale (float): factor applied to the x values.
        x_unit (str, optional): unit of the scaled x values, defaults to the stored one.

    Returns:
        str: the unit of the x-axis, or None.

    Raises:
        KeyError: if a column is missing.
        ValueError: if y_cols and labels differ in length.
    """
    missing = [col for col in [x_col] + list(y_cols) if col not in data.columns]
    if missing:
        raise KeyError(f"columns {missing} not found in the DataFrame. Available columns: {list(data.columns)}")
    if len(y_cols) != len(labels):
        raise ValueError(f"y_cols and labels must have the same length. Got {len(y_cols)} and {len(labels)}.")

    units = data.attrs.get("units", {})
    for col, label in zip(y_cols, labels):
        unit = units.get(col)
        ax.plot(data[x_col] * x_scale, data[col], label=f"{label} ({unit})" if unit else label)
    ax.legend()
    ax.grid()
    return units.get(x_col) if x_unit is None else x_unit


def plot_phase_boundaries(engine, pressures, ax, **kwargs):
    '''
    Plot the phase boundaries of a MeltFractionEngine against pressure (GPa).

    Returns:
        pd.DataFrame: the tabulated boundaries that were plotted.
    '''
    table = engine.tabulate(pressures)
    x_unit = plot_table_columns(table, "pressure", PHASE_BOUNDARY_COLUMNS, PHASE_BOUNDARY_LABELS, ax,
                                x_scale=1e-9, x_unit="GPa")
    ax.set_xlabel(f"Pressure ({x_unit})")
    ax.set_ylabel("Temperature (C)")
    ax.set_title(kwargs.get("title", "Peridotite melting"))
    return table


def plot_melt_fraction_curves(engine, temperatures, pressures, ax, **kwargs):
    """
    Plot melt fraction against temperature, one curve per pressure.

    Args:
        engine (MeltFractionEngine): the melting model.
        temperatures (array-like): temperatures (C).
        pressures (array-like): pressures (Pa), one curve each.
        ax (matplotlib.axes.Axes): axes to draw on.

    Returns:
        pd.DataFrame: temperature column and one melt fraction column per pressure.
    """
    T = np.asarray(temperatures, dtype=float)
    data = {"temperature": T}
    labels = []
    for P in np.atleast_1d(pressures):
        data["F_%.2fGPa" % (P / 1e9)] = engine.melt_fractions(T, P)
        labels.append("%.2f GPa" % (P / 1e9))
    table = pd.DataFrame(data)
    table.attrs["units"] = {"temperature": "C"}
    x_unit = plot_table_columns(table, "temperature", list(table.columns[1:]), labels, ax)
    ax.set_xlabel(f"Temperature ({x_unit})")
    ax.set_ylabel("Melt fraction")
    ax.set_title(kwargs.get("title", "Melt fraction"))
    return table
