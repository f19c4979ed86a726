"""Shared fixtures for attendance_figure tests."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
import pytest

from attendance_figure.data import load_restaurants
from attendance_figure.log import PACKAGE_LOGGER


@pytest.fixture(scope="session")
def restaurants():
    """The bundled restaurant table, as loaded (BYOB still numeric)."""
    return load_restaurants()


@pytest.fixture
def synthetic():
    """Three states with exact size/attendance lines for A and B, none for C.

    attendance = 2 * size + 1 in A, 50 - size in B; C is flat noise.
    Two states share a city name; populations are constant per city.
    """
    rows = []
    rid = 0
    layout = {
        "A": [("Springfield", 1000, [10, 20, 30]), ("Avon", 5000, [40, 50])],
        "B": [("Springfield", 20000, [5, 15, 25, 35]), ("Bath", 80000, [45])],
        "C": [("Cove", 150000, [10, 20, 30, 40, 50, 60])],
    }
    noise = [12.0, 9.0, 14.0, 8.0, 11.0, 10.0]
    for state, cities in layout.items():
        for city, pop, sizes in cities:
            for size in sizes:
                if state == "A":
                    att = 2.0 * size + 1.0
                elif state == "B":
                    att = 50.0 - size
                else:
                    att = noise[sizes.index(size)]
                rid += 1
                rows.append({
                    "restaurant_id": rid,
                    "state": state,
                    "city": city,
                    "city_population": pop,
                    "restaurant_size": size,
                    "attendance": att,
                    "BYOB": float(rid % 2),
                })
    return pd.DataFrame(rows)


@pytest.fixture
def log_curve():
    """Rows lying exactly on attendance = 3 + 2 * ln(population)."""
    pops = np.array([1000, 1000, 5000, 20000, 20000, 80000], dtype=float)
    return pd.DataFrame({
        "city_population": pops,
        "attendance": 3.0 + 2.0 * np.log(pops),
    })


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers that entry points attach to pytest's per-test stderr."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for h in logger.handlers[:]:
        logger.removeHandler(h)
