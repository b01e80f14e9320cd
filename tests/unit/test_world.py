#!/usr/bin/env python3
"""
Tests for worlds.
"""

from elements import Model, Physics, Plugin, World


class TestWorld:
    def test_no_models(self):
        assert list(World.from_xml_string("<world />").each_model()) == []

    def test_models(self):
        world = World.from_xml_string('<world><model name="0" /><model name="1" /></world>')
        models = list(world.each_model())
        assert [m.name for m in models] == ["0", "1"]
        assert all(isinstance(m, Model) and m.parent is world for m in models)

    def test_find_model_by_name(self):
        world = World.from_xml_string('<world><model name="0" /><model name="1" /></world>')
        assert world.find_model_by_name("1").name == "1"
        assert world.find_model_by_name("2") is None

    def test_plugins(self):
        world = World.from_xml_string('<world><plugin name="p" filename="libp.so" /></world>')
        plugins = list(world.each_plugin())
        assert [p.filename for p in plugins] == ["libp.so"]
        assert isinstance(plugins[0], Plugin)

    def test_physics(self):
        world = World.from_xml_string(
            '<world><physics><real_time_factor>2</real_time_factor></physics></world>')
        assert world.physics().real_time_factor == 2

    def test_physics_is_created_on_demand(self):
        world = World.from_xml_string("<world />")
        physics = world.physics()
        assert isinstance(physics, Physics)
        assert physics.real_time_factor == 1
        assert world.xml.find("physics") is not None

    def test_spherical_coordinates(self):
        assert World.from_xml_string("<world />").spherical_coordinates() is None
        world = World.from_xml_string(
            "<world><spherical_coordinates><elevation>10</elevation></spherical_coordinates></world>")
        assert world.spherical_coordinates().elevation == 10
