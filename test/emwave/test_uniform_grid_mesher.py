import numpy as np
import pytest

from emwave.mesh import UniformGridMesher, auto_grid_size
from data_uniform_grid_mesher import *


class TestUniformGridMesher:

    @pytest.mark.parametrize("nx,ny,expected_nx,expected_ny", count_clamp_data)
    def test_count_clamp(self, nx, ny, expected_nx, expected_ny):
        mesh = UniformGridMesher(world_size=(10.0, 10.0), nx=nx, ny=ny)
        assert (mesh.nx, mesh.ny) == (expected_nx, expected_ny)
        assert mesh.shape == (expected_ny, expected_nx)
        assert mesh.dx > 0 and mesh.dy > 0

    @pytest.mark.parametrize("world_size,expected", world_size_clamp_data)
    def test_world_size_clamp(self, world_size, expected):
        mesh = UniformGridMesher(world_size=world_size, nx=11, ny=11)
        assert mesh.world_size == pytest.approx(expected)
        assert mesh.dx == pytest.approx(expected[0] / 10)
        assert mesh.dy == pytest.approx(expected[1] / 10)

    def test_spacing_and_coords(self):
        mesh = UniformGridMesher(origin=(-2.0, 1.0), world_size=(8.0, 4.0), nx=5, ny=9)
        assert mesh.h == pytest.approx((2.0, 0.5))
        assert mesh.domain == pytest.approx((-2.0, 6.0, 1.0, 5.0))
        np.testing.assert_allclose(mesh.x_coords, [-2.0, 0.0, 2.0, 4.0, 6.0])
        assert mesh.y_coords[-1] == pytest.approx(5.0)

        coords = mesh.node_coords
        assert coords.shape == (9, 5, 2)
        assert tuple(coords[3, 2]) == pytest.approx(mesh.index_to_world(2, 3))

    def test_from_domain(self):
        mesh = UniformGridMesher.from_domain((1.0, 3.0, -1.0, 1.0), nx=21, ny=11)
        assert mesh.origin == (1.0, -1.0)
        assert mesh.world_size == pytest.approx((2.0, 2.0))
        assert mesh.dx == pytest.approx(0.1)
        assert mesh.dy == pytest.approx(0.2)

    @pytest.mark.parametrize("position,expected", world_to_index_data)
    def test_world_to_index(self, mesh11, position, expected):
        assert mesh11.world_to_index(position) == expected

    def test_linear_index(self, mesh11):
        assert mesh11.linear_index(3, 2) == 2 * 11 + 3
        assert mesh11.world_to_linear_index((3.0, 2.0)) == 25

        field = mesh11.init_field_matrix()
        field[2, 3] = 1.0
        assert np.flatnonzero(field)[0] == 25

    @pytest.mark.parametrize("rect,expected", index_range_data)
    def test_index_range(self, mesh11, rect, expected):
        assert mesh11.index_range(*rect) == expected

    def test_init_field_matrix(self, mesh64, dtype_map):
        a = mesh64.init_field_matrix(dtype_map['float32'])
        assert a.shape == (64, 64)
        assert a.dtype == np.float32
        assert not a.any()

        b = mesh64.init_field_matrix(fill=1.0)
        assert np.all(b == 1.0)

    @pytest.mark.parametrize("world_size,speed,freq,cells,expected", auto_grid_size_data)
    def test_auto_grid_size(self, world_size, speed, freq, cells, expected):
        assert auto_grid_size(world_size, speed, freq, cells) == expected


if __name__ == '__main__':
    pytest.main(['test/emwave/test_uniform_grid_mesher.py', '-qs', '--disable-warnings'])
