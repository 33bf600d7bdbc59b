import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from HeatGen.decoder.kernel import build_kernel
from HeatGen.types.points import PointSet


@pytest.fixture(scope="session")
def kernel():
    return build_kernel(48)


@pytest.fixture
def two_points():
    return PointSet([((0.0, 0.0), 1.0), ((10.0, 10.0), 1.0)])


@pytest.fixture
def uniform_points():
    rng = np.random.default_rng(7)
    return PointSet.from_arrays(rng.uniform(0.0, 1000.0, size=(10_000, 2)))
