import pytest

from emwave import WaveScene, create_model, TEzFDTDModel, ScalarWaveModel
from emwave.model import Source, Rectangle, Circle, Material


class TestWaveScene:

    def test_defaults(self):
        scene = WaveScene()
        assert scene.model == "em2d"
        assert scene.domain == (0.0, 10.0, 0.0, 10.0)
        mesh = scene.build_mesh()
        assert (mesh.nx, mesh.ny) == (128, 128)

        with pytest.raises(ValueError):
            WaveScene(model="acoustic3d")

    def test_sources(self):
        scene = WaveScene(origin=(2.0, 0.0), world_size=(4.0, 8.0))
        tag0 = scene.add_source()
        tag1 = scene.add_source(position=(3.0, 1.0), waveform="ricker", tag="detector")
        assert (tag0, tag1) == ("src_0", "detector")

        sources = scene.list_sources()
        assert sources[0].position == (4.0, 4.0)
        assert sources[1].waveform == "ricker"

        assert scene.remove_source("detector")
        assert not scene.remove_source("detector")
        assert len(scene.list_sources()) == 1

    def test_set_sources(self):
        scene = WaveScene()
        scene.set_sources([{"position": (1.0, 1.0), "frequency": 2.0},
                           Source(position=(2.0, 2.0), tag="b")])
        assert [s.tag for s in scene.list_sources()] == ["src_0", "b"]
        assert scene.add_source() == "src_2"

        with pytest.raises(ValueError):
            scene.set_sources([{"frequency": 2.0}])

    def test_shapes(self):
        scene = WaveScene()
        t0 = scene.add_rectangle((5.0, 5.0), 2.0, 1.0, angle=30.0, material="concrete")
        t1 = scene.add_circle((2.0, 2.0), 0.5, material={"preset": "metal"})
        assert (t0, t1) == ("obj_0", "obj_1")

        rect, circle = scene.list_shapes()
        assert isinstance(rect, Rectangle) and rect.material.eps_r == 6.0
        assert isinstance(circle, Circle) and circle.material.is_metal

        assert scene.remove_shape("obj_0")
        assert [s.tag for s in scene.list_shapes()] == ["obj_1"]
        scene.clear_shapes()
        assert scene.list_shapes() == []

    def test_set_shapes(self):
        scene = WaveScene()
        scene.set_shapes([
            {"type": "rectangle", "center": (1.0, 1.0), "width": 1.0, "height": 2.0},
            {"type": "circle", "center": (3.0, 3.0), "radius": 1.0, "material": "air"},
        ])
        rect, circle = scene.list_shapes()
        assert rect.material.preset == "drywall"
        assert circle.material.preset == "air"
        assert rect.tag == "obj_0" and circle.tag == "obj_1"

        with pytest.raises(ValueError):
            scene.set_shapes([{"type": "triangle"}])

    def test_str(self):
        scene = WaveScene()
        assert "(no sources configured)" in str(scene)
        scene.add_source(tag="antenna")
        scene.add_circle((1.0, 1.0), 0.5, material="metal")
        text = str(scene)
        assert "antenna" in text and "metal" in text


class TestCreateModel:

    def test_em2d(self):
        scene = WaveScene(nx=64, ny=64, wave_speed=2.0, attenuation=0.1)
        scene.add_source(position=(5.0, 5.0))
        scene.add_source(position=(5.0, 5.0), active=False)
        scene.add_rectangle((7.0, 5.0), 0.5, 4.0, material=Material.from_preset("metal"))

        model = create_model(scene, options={'pml_width': 16})
        assert isinstance(model, TEzFDTDModel)
        assert model.wave_speed == 2.0
        assert model.attenuation == 0.1
        assert model.pml_width == 16
        assert len(model.source_manager) == 1
        assert model.metal_mask.any()

        model.run(5)
        assert model.time == pytest.approx(5 * model.dt)

    def test_scalar_wave2d(self):
        scene = WaveScene(nx=48, ny=32, model="scalar_wave2d")
        scene.add_source()
        scene.add_circle((3.0, 3.0), 1.0)

        model = create_model(scene)
        assert isinstance(model, ScalarWaveModel)
        assert (model.nx, model.ny) == (48, 32)
        assert model.barrier.any()

    def test_unknown_model(self):
        scene = WaveScene()
        scene.model = "unknown"
        with pytest.raises(ValueError):
            create_model(scene)


if __name__ == '__main__':
    pytest.main(['test/emwave/test_wave_scene.py', '-qs', '--disable-warnings'])
