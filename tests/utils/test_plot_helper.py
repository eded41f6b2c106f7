# test_plot_helper.py

import numpy as np
import pandas as pd
import pytest
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from meltgeolib.core.melt import MeltFractionEngine
from meltgeolib.utils.plot_helper import plot_table_columns, plot_phase_boundaries, plot_melt_fraction_curves


def test_plot_phase_boundaries():
    fig, ax = plt.subplots()
    table = plot_phase_boundaries(MeltFractionEngine(), np.linspace(0.0, 6e9, 13), ax)
    assert(len(ax.get_lines()) == 4)
    assert(ax.get_xlabel() == "Pressure (GPa)")
    labels = [line.get_label() for line in ax.get_lines()]
    assert(labels[0] == "Solidus (C)")
    # x values are drawn in GPa
    assert(np.isclose(np.asarray(ax.get_lines()[0].get_xdata())[-1], 6.0))
    assert(np.allclose(np.asarray(ax.get_lines()[0].get_ydata()), table["solidus"]))
    plt.close(fig)


def test_plot_melt_fraction_curves():
    fig, ax = plt.subplots()
    table = plot_melt_fraction_curves(MeltFractionEngine(), np.linspace(1000.0, 2000.0, 51), [1e9, 3e9], ax)
    assert(list(table.columns) == ["temperature", "F_1.00GPa", "F_3.00GPa"])
    assert(len(ax.get_lines()) == 2)
    assert(ax.get_xlabel() == "Temperature (C)")
    assert(table["F_1.00GPa"].iloc[0] == 0.0 and table["F_1.00GPa"].iloc[-1] == 1.0)
    plt.close(fig)


def test_plot_table_columns_errors():
    fig, ax = plt.subplots()
    data = pd.DataFrame({"x": [0.0, 1.0], "y": [1.0, 2.0]})
    with pytest.raises(KeyError):
        plot_table_columns(data, "x", ["z"], ["z"], ax)
    with pytest.raises(ValueError):
        plot_table_columns(data, "x", ["y"], ["a", "b"], ax)
    plt.close(fig)


def test_plot_table_columns_units():
    fig, ax = plt.subplots()
    data = pd.DataFrame({"x": [0.0, 1.0], "y": [1.0, 2.0]})
    data.attrs["units"] = {"x": "km", "y": "C"}
    assert(plot_table_columns(data, "x", ["y"], ["Depth profile"], ax) == "km")
    assert(ax.get_lines()[0].get_label() == "Depth profile (C)")
    plt.close(fig)
