import numpy as np
import pytest

from emwave.mesh import UniformGridMesher

DTYPE_MAP = {
    'float32': np.float32,
    'float64': np.float64,
}


@pytest.fixture(scope="session")
def dtype_map():
    return DTYPE_MAP


@pytest.fixture
def mesh64():
    """10 x 10 world on a 64 x 64 grid."""
    return UniformGridMesher(origin=(0.0, 0.0), world_size=(10.0, 10.0), nx=64, ny=64)


@pytest.fixture
def mesh11():
    """10 x 10 world with unit spacing."""
    return UniformGridMesher(origin=(0.0, 0.0), world_size=(10.0, 10.0), nx=11, ny=11)
