import math

# (nx, ny, expected_nx, expected_ny)
count_clamp_data = [
    (64, 32, 64, 32),
    (1, 0, 2, 2),
    (-5, 2, 2, 2),
    (1000, 600, 512, 512),
    (10.7, 20.2, 10, 20),
    (math.nan, math.inf, 128, 128),
]

# (world_size, expected_world_size)
world_size_clamp_data = [
    ((10.0, 20.0), (10.0, 20.0)),
    ((0.1, 0.0), (1.0, 1.0)),
    ((1000.0, -3.0), (500.0, 1.0)),
    ((math.nan, math.inf), (10.0, 10.0)),
]

# Grid: origin (0, 0), world 10 x 10, nx = ny = 11 (unit spacing)
# (position, expected (ix, iy))
world_to_index_data = [
    ((0.0, 0.0), (0, 0)),
    ((10.0, 10.0), (10, 10)),
    ((2.49, 7.51), (2, 8)),
    ((2.5, 3.5), (3, 4)),
    ((-4.0, 25.0), (0, 10)),
    ((math.nan, 5.0), (0, 5)),
    ((5.0, -math.inf), (5, 0)),
]

# (world rect, expected (ix0, ix1, iy0, iy1))
index_range_data = [
    ((2.2, 4.7, 3.0, 3.0), (2, 5, 3, 3)),
    ((-3.0, 1.5, 8.5, 30.0), (0, 2, 8, 10)),
]

# (world_size, wave_speed, frequency, cells_per_lambda, expected (nx, ny))
auto_grid_size_data = [
    ((10.0, 10.0), 1.0, 1.0, 12, (121, 121)),
    ((10.0, 5.0), 1.0, 1.0, 10, (101, 51)),
    ((100.0, 50.0), 1.0, 2.0, 12, (512, 256)),
]
