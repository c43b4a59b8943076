from .uniform_grid_mesher import UniformGridMesher, auto_grid_size
