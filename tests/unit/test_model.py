#!/usr/bin/env python3
"""
Tests for the Model element: name maps, canonical link and joint resolution.
"""

import pytest
from lxml import etree

from core.conversions import pose_to_isometry
from core.errors import Invalid, NoSuchModel, UnavailableSDFVersionInModel
from elements import Frame, Joint, Link, Model, Plugin


def model(xml):
    return Model(etree.fromstring(xml))


class TestLoadFromModelName:
    def test_loads_a_model(self, loader):
        assert Model.load_from_model_name("simple_model", loader=loader).name == "simple test model"

    def test_latest_version(self, loader):
        assert Model.load_from_model_name("versioned_model", loader=loader).name == "versioned model 1.5"

    def test_version_ceiling(self, loader):
        assert Model.load_from_model_name("versioned_model", 130, loader=loader).name == "versioned model 1.3"

    def test_unmatched_version_ceiling(self, loader):
        with pytest.raises(UnavailableSDFVersionInModel):
            Model.load_from_model_name("versioned_model", 0, loader=loader)

    def test_unknown_model(self, loader):
        with pytest.raises(NoSuchModel):
            Model.load_from_model_name("does_not_exist", loader=loader)

    def test_nested(self, loader):
        m = Model.load_from_model_name("nested_model", flatten=False, loader=loader)
        assert [sub.name for sub in m.each_model()] == ["s"]


class TestJointResolution:
    def test_declaration_order_does_not_matter(self):
        m = model("""
            <model name="m">
              <joint name="j" type="fixed"><parent>parent_l</parent><child>child_l</child></joint>
              <link name="parent_l" />
              <link name="child_l" />
            </model>""")
        joint = m.find_joint_by_name("j")
        assert joint.parent_link is m.find_link_by_name("parent_l")
        assert joint.child_link is m.find_link_by_name("child_l")

    def test_world(self):
        m = model('<model name="m"><joint name="j" type="fixed"><parent>world</parent><child>l</child></joint>'
                  '<link name="l" /></model>')
        assert m.find_joint_by_name("j").parent_link is Link.world()

    def test_links_of_submodels(self, loader):
        m = Model.load_from_model_name("nested_model", flatten=False, loader=loader)
        joint = m.find_joint_by_name("attach")
        assert joint.parent_link is m.find_link_by_name("root_link")
        assert joint.child_link is m.find_link_by_name("s::l")

    def test_joints_of_submodels(self, loader):
        m = Model.load_from_model_name("nested_model", flatten=False, loader=loader)
        joint = m.find_joint_by_name("s::j")
        assert joint.parent_link.name == "l"
        assert joint.child_link.name == "l2"
        assert joint.full_name() == "r::s::j"

    def test_missing_parent(self):
        with pytest.raises(Invalid, match="parent"):
            model('<model name="m"><link name="l" /><joint name="j"><child>l</child></joint></model>')

    def test_missing_child(self):
        with pytest.raises(Invalid, match="child"):
            model('<model name="m"><link name="l" /><joint name="j"><parent>l</parent></joint></model>')

    def test_unknown_link_lists_known_links(self):
        with pytest.raises(Invalid) as excinfo:
            model('<model name="m"><link name="a" /><link name="b" />'
                  '<joint name="j"><parent>a</parent><child>c</child></joint></model>')
        message = str(excinfo.value)
        assert "'c'" in message
        assert "a, b" in message


class TestNameMaps:
    def test_no_submodels(self):
        assert list(model("<model />").each_model()) == []

    def test_direct_models(self):
        m = model('<model><model name="test0" /><model name="test1" /></model>')
        assert [sub.name for sub in m.each_model()] == ["test0", "test1"]

    def test_models_with_name(self):
        m = model("""
            <model>
              <model name="test0"><model name="test1"><model name="test2" /></model></model>
            </model>""")
        assert [(name, sub.name) for name, sub in m.each_model_with_name()] == [
            ("test0", "test0"), ("test0::test1", "test1"), ("test0::test1::test2", "test2"),
        ]

    def test_links_with_name(self):
        m = model("""
            <model>
              <link name="test0" />
              <model name="sub">
                <link name="test1" />
                <model name="subsub"><link name="test2" /></model>
              </model>
            </model>""")
        assert [(name, link.name) for name, link in m.each_link_with_name()] == [
            ("test0", "test0"), ("sub::test1", "test1"), ("sub::subsub::test2", "test2"),
        ]
        assert [link.name for link in m.each_direct_link()] == ["test0"]
        assert [link.name for link in m.each_link()] == ["test0", "test1", "test2"]

    def test_frames(self):
        m = model('<model><frame name="f0" /><model name="sub"><frame name="f1" /></model></model>')
        assert [f.name for f in m.each_direct_frame()] == ["f0"]
        assert [name for name, _ in m.each_frame_with_name()] == ["f0", "sub::f1"]
        assert isinstance(m.find_frame_by_name("sub::f1"), Frame)
        assert [f.name for f in m.each_frame()] == ["f0", "f1"]

    def test_joints(self):
        m = model("""
            <model>
              <link name="l" />
              <joint name="j0" type="fixed"><parent>world</parent><child>l</child></joint>
              <model name="sub">
                <link name="l" />
                <joint name="j1" type="fixed"><parent>world</parent><child>l</child></joint>
              </model>
            </model>""")
        assert [j.name for j in m.each_direct_joint()] == ["j0"]
        assert sorted(name for name, _ in m.each_joint_with_name()) == ["j0", "sub::j1"]
        assert {j.name for j in m.each_joint()} == {"j0", "j1"}
        assert m.find_joint_by_name("sub::j1").child_link is m.find_link_by_name("sub::l")

    def test_plugins(self):
        m = model("""
            <model>
              <plugin name="p0" filename="libp0.so" />
              <plugin filename="libanonymous.so" />
              <model name="sub"><plugin name="p1" filename="libp1.so" /></model>
            </model>""")
        assert [p.filename for p in m.each_direct_plugin()] == ["libp0.so", "libanonymous.so"]
        assert [p.filename for p in m.each_plugin()] == ["libp0.so", "libanonymous.so", "libp1.so"]
        assert [name for name, _ in m.each_plugin_with_name()] == ["p0", "sub::p1"]
        assert isinstance(m.find_plugin_by_name("sub::p1"), Plugin)

    def test_sensors(self):
        m = model("""
            <model>
              <link name="l"><sensor name="s0" type="ray" /></link>
              <model name="sub"><link name="l"><sensor name="s1" type="camera" /></link></model>
            </model>""")
        assert [s.name for s in m.each_direct_sensor()] == ["s0"]
        assert [s.name for s in m.each_sensor()] == ["s0", "s1"]

    def test_find_by_name(self):
        m = model("""
            <model name="m">
              <model name="sub">
                <link name="l"><sensor name="s" type="ray" /></link>
              </model>
            </model>""")
        assert isinstance(m.find_by_name("sub"), Model)
        assert isinstance(m.find_by_name("sub::l"), Link)
        assert m.find_by_name("sub::l::s").name == "s"
        assert m.find_by_name("sub::unknown") is None
        assert m.find_model_by_name("sub").name == "sub"
        assert m.find_link_by_name("l") is None

    def test_duplicate_names(self):
        with pytest.raises(Invalid, match="duplicate"):
            model('<model><link name="l" /><link name="l" /></model>')

    def test_duplicate_qualified_names(self):
        with pytest.raises(Invalid, match="duplicate"):
            model('<model><link name="sub::l" /><model name="sub"><link name="l" /></model></model>')

    def test_unnamed_link(self):
        with pytest.raises(Invalid):
            model("<model><link /></model>")


class TestCanonicalLink:
    def test_no_link(self):
        assert model("<model />").canonical_link is None

    def test_first_link(self):
        assert model('<model><link name="l" /><link name="l2" /></model>').canonical_link.name == "l"

    def test_inherited_by_submodels(self):
        m = model('<model><link name="l" /><model name="sub" /></model>')
        assert next(m.each_model()).canonical_link == m.canonical_link

    def test_inherited_even_if_the_submodel_has_links(self):
        m = model('<model><link name="l" /><model name="sub"><link name="subl" /></model></model>')
        assert next(m.each_model()).canonical_link == m.canonical_link

    def test_from_submodel(self):
        m = model('<model><model name="sub"><link name="l" /></model></model>')
        sub = next(m.each_model())
        assert m.canonical_link == next(sub.each_link())
        assert sub.canonical_link == next(sub.each_link())

    def test_from_second_submodel(self):
        m = model('<model><model name="first" /><model name="sub"><link name="l" /></model></model>')
        first, sub = m.each_model()
        expected = sub.canonical_link
        assert first.canonical_link == expected
        assert m.canonical_link == expected


class TestProperties:
    def test_static(self):
        assert not model("<model />").static
        assert model("<model><static>true</static></model>").static
        assert not model("<model><static>0</static></model>").static

    def test_pose(self):
        m = model("<model><pose>1 2 3 0 0 2</pose></model>")
        assert m.pose.approx(pose_to_isometry("1 2 3 0 0 2"))

    def test_links_are_parented_to_their_model(self, loader):
        m = Model.load_from_model_name("nested_model", flatten=False, loader=loader)
        link = m.find_link_by_name("s::l")
        assert link.parent.name == "s"
        assert isinstance(m.find_joint_by_name("attach"), Joint)
