import argparse

import matplotlib.pyplot as plt
import numpy as np

from emwave import TEzFDTDModel, ScalarWaveModel, UniformGridMesher
from emwave.model import Source


parser = argparse.ArgumentParser(description=
    """
    Gaussian pulse radiated from the domain center. Records the field energy
    in the interior (outside the absorbing layer) to show how the pulse
    leaves the domain.
    """)

parser.add_argument('--model',
    default = 'em2d', type = str,
    help = "em2d (TEz Maxwell) or scalar_wave2d.")

parser.add_argument('--n',
    default = 96, type = int,
    help = "Number of grid samples along each axis.")

parser.add_argument('--T',
    default = 20.0, type = float,
    help = "Simulated time.")

parser.add_argument('--save_every',
    default = 50, type = int,
    help = "Snapshot period in steps.")


options = vars(parser.parse_args())

mesh = UniformGridMesher(world_size=(10.0, 10.0), nx=options['n'], ny=options['n'])
if options['model'] == 'em2d':
    model = TEzFDTDModel(mesh, wave_speed=1.0, options={'pml_width': 16})
else:
    model = ScalarWaveModel(mesh, wave_speed=1.0, options={'pml_width': 16})

model.set_sources([Source(position=(5.0, 5.0), frequency=0.5, waveform='gaussian',
                          pulse_width=0.5, pulse_delay=2.0)])

nt = max(1, int(options['T'] / model.dt))
save_every = max(1, min(options['save_every'], nt))
history = model.run(nt, save_every=save_every)

times = np.array([h['time'] for h in history])
energy = np.array([np.sum(h['instantaneous'] ** 2) for h in history])

fig, axes = plt.subplots(1, 2, figsize=(11, 4.5))
axes[0].semilogy(times, energy + 1e-30)
axes[0].set_xlabel("t")
axes[0].set_ylabel("interior energy")
snap = history[len(history) // 4]
axes[1].imshow(snap['instantaneous'], origin='lower', extent=mesh.domain, cmap='magma')
axes[1].set_title(f"|field| at t={snap['time']:.2f}")
plt.show()
