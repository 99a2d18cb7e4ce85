"""Pytest fixtures shared across all test modules."""

import matplotlib

matplotlib.use("agg")

import matplotlib.pyplot as plt
import pytest

from notebook_fill import Notebook
from notebook_fill.config import NotebookFillConfig, reset_config


@pytest.fixture(autouse=True)
def close_figures():
    """Start and end every test without open matplotlib figures."""
    plt.close("all")
    yield
    plt.close("all")


@pytest.fixture(autouse=True)
def reset_global_config():
    """Reset the lazily created global config before each test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def config(tmp_path):
    """Config whose scratch directory lives inside the test's tmp_path."""
    return NotebookFillConfig(temp_dir=tmp_path / "figures")


@pytest.fixture
def make_notebook():
    """Build a Notebook from (cell_type, source) pairs."""

    def _make(*cells, nbformat=4):
        return Notebook.from_dict({
            "metadata": {},
            "nbformat": nbformat,
            "nbformat_minor": 5,
            "cells": [
                {"cell_type": cell_type, "source": source, "metadata": {}}
                if cell_type != "code"
                else {
                    "cell_type": cell_type,
                    "source": source,
                    "metadata": {},
                    "outputs": [],
                    "execution_count": None,
                }
                for cell_type, source in cells
            ],
        })

    return _make
