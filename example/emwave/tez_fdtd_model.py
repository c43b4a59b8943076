import argparse

import matplotlib.pyplot as plt

from emwave import WaveScene, create_model


parser = argparse.ArgumentParser(description=
    """
    Real-time TEz FDTD demo: a continuous-wave antenna next to a wall.
    The scene is advanced with fixed wall-clock frames and the time-averaged
    field magnitude is shown as a heat map.
    """)

parser.add_argument('--n',
    default = 160, type = int,
    help = "Number of grid samples along each axis.")

parser.add_argument('--world_size',
    default = 16.0, type = float,
    help = "Side length of the square domain.")

parser.add_argument('--frequency',
    default = 1.0, type = float,
    help = "Source frequency.")

parser.add_argument('--material',
    default = 'concrete', type = str,
    help = "Wall material preset: air, drywall, concrete, metal or custom.")

parser.add_argument('--pml_width',
    default = 16, type = int,
    help = "Absorbing layer width in samples, 0 disables it.")

parser.add_argument('--frames',
    default = 900, type = int,
    help = "Number of 60 Hz frames to simulate.")

parser.add_argument('--show_figure',
    default = True, type = bool,
    help = "Whether to display the averaged magnitude.")


options = vars(parser.parse_args())

L = options['world_size']
scene = WaveScene(world_size=(L, L), nx=options['n'], ny=options['n'])
scene.add_source(position=(0.25 * L, 0.5 * L), frequency=options['frequency'])
scene.add_rectangle((0.4 * L, 0.5 * L), 0.05 * L, 0.6 * L, material=options['material'])
print(scene)

model = create_model(scene, options={'pml_width': options['pml_width']})
print(model)

for _ in range(options['frames']):
    model.step(1 / 60)

stats = model.get_stats()
print(f"t={stats.time:.3f}, max={stats.max_instantaneous:.4e}, mean={stats.mean_instantaneous:.4e}")

if options['show_figure']:
    fig, axes = plt.subplots(1, 2, figsize=(11, 5))
    extent = scene.domain
    im = axes[0].imshow(model.get_averaged_magnitude(), origin='lower', extent=extent,
                        cmap='inferno')
    axes[0].set_title("Averaged |E|")
    fig.colorbar(im, ax=axes[0])
    im = axes[1].imshow(model.field('Hz'), origin='lower', extent=extent, cmap='coolwarm')
    axes[1].set_title(f"Hz at t={model.time:.2f}")
    fig.colorbar(im, ax=axes[1])
    plt.show()
