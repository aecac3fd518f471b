import matplotlib

matplotlib.use("Agg")

import pytest

from edfl import CavitySolver, make_config


@pytest.fixture
def solver():
    return CavitySolver()


@pytest.fixture
def weak_pump_config():
    """Forward-pumped cavity well below lasing threshold."""
    return make_config(1e-3, length=10.0, roc=0.1, direction="forward", segments=100)
