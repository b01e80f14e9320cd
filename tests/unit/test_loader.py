#!/usr/bin/env python3
"""
Tests for SDF document loading, model lookup and bulk model enumeration.
"""

import os

import pytest
from lxml import etree

import core
from core.errors import (
    Invalid, InvalidXML, NoSuchModel, NotSDF, UnavailableSDFVersionInModel,
)
from core.loader import SdfLoader, numeric_version_to_string, sdf_version_of


def model_names(document):
    return [m.get("name") for m in document.root.findall("model")]


class TestLoadGazeboModel:
    def test_loads_a_model_directory(self, loader, models_dir):
        document = loader.load_gazebo_model(os.path.join(models_dir, "simple_model"))
        assert model_names(document) == ["simple test model"]

    def test_latest_version(self, loader, models_dir):
        document = loader.load_gazebo_model(os.path.join(models_dir, "versioned_model"))
        assert model_names(document) == ["versioned model 1.5"]

    def test_unversioned_config(self, loader, models_dir):
        document = loader.load_gazebo_model(os.path.join(models_dir, "model_without_version"))
        assert model_names(document) == ["model without version"]

    def test_version_ceiling(self, loader, models_dir):
        document = loader.load_gazebo_model(os.path.join(models_dir, "versioned_model"), 130)
        assert model_names(document) == ["versioned model 1.3"]

    def test_unmatched_version_ceiling(self, loader, models_dir):
        with pytest.raises(UnavailableSDFVersionInModel):
            loader.load_gazebo_model(os.path.join(models_dir, "versioned_model"), 0)


class TestLoadSdf:
    def test_loads_a_file(self, loader, models_dir):
        path = os.path.join(models_dir, "simple_model", "model.sdf")
        document = loader.load_sdf(path)
        assert model_names(document) == ["simple test model"]
        assert document.path == path
        assert document.metadata.includes == {}

    def test_not_sdf(self, loader, models_dir):
        with pytest.raises(NotSDF):
            loader.load_sdf(os.path.join(models_dir, "not_sdf.xml"))

    def test_missing_file(self, loader, models_dir):
        with pytest.raises(FileNotFoundError):
            loader.load_sdf(os.path.join(models_dir, "does_not_exist.xml"))

    def test_empty_file(self, loader, write_sdf):
        with pytest.raises(NotSDF):
            loader.load_sdf(write_sdf(""))

    def test_malformed_xml(self, loader, write_sdf):
        with pytest.raises(InvalidXML):
            loader.load_sdf(write_sdf("<sdf><model></sdf>"))

    def test_legacy_gazebo_root(self, loader, write_sdf):
        document = loader.load_sdf(write_sdf('<gazebo version="1.0"><model name="m" /></gazebo>'))
        assert model_names(document) == ["m"]

    def test_errors_mention_the_loaded_file(self, loader, write_sdf):
        path = write_sdf("<sdf><include><name>x</name></include></sdf>")
        with pytest.raises(InvalidXML) as excinfo:
            loader.load_sdf(path)
        assert str(excinfo.value).startswith(f"while loading {path}: ")
        assert "no uri element" in str(excinfo.value)

    def test_wrapped_errors_keep_their_attributes(self, loader, write_sdf):
        path = write_sdf('<sdf version="1.5"><include><uri>model://unknown</uri></include></sdf>')
        with pytest.raises(NoSuchModel) as excinfo:
            loader.load_sdf(path)
        assert excinfo.value.model_name == "unknown"
        assert path in str(excinfo.value)

    def test_missing_included_file_mentions_the_loaded_file(self, tmp_path):
        model_dir = tmp_path / "models" / "broken"
        model_dir.mkdir(parents=True)
        (model_dir / "model.config").write_text('<model><sdf version="1.5">missing.sdf</sdf></model>')
        top = tmp_path / "top.sdf"
        top.write_text('<sdf version="1.5"><include><uri>model://broken</uri></include></sdf>')

        loader = SdfLoader(model_path=[str(tmp_path / "models")])
        with pytest.raises(FileNotFoundError) as excinfo:
            loader.load_sdf(str(top))
        assert f"while loading {top}" in str(excinfo.value)
        assert excinfo.value.filename == str(model_dir / "missing.sdf")


class TestModelFromName:
    def test_resolves_and_loads(self, loader):
        document = loader.model_from_name("simple_model")
        assert model_names(document) == ["simple test model"]

    def test_version_ceiling(self, loader):
        document = loader.model_from_name("versioned_model", 130)
        assert model_names(document) == ["versioned model 1.3"]

    def test_cache_is_version_aware(self, loader):
        latest = loader.model_from_name("versioned_model")
        old = loader.model_from_name("versioned_model", 130)
        assert model_names(latest) == ["versioned model 1.5"]
        assert model_names(old) == ["versioned model 1.3"]

    def test_loads_are_independent_copies(self, loader):
        first = loader.model_from_name("simple_model")
        second = loader.model_from_name("simple_model")
        assert etree.tostring(first.root) == etree.tostring(second.root)
        assert first.root is not second.root

        first.root.find("model").set("name", "changed")
        assert model_names(second) == ["simple test model"]
        assert model_names(loader.model_from_name("simple_model")) == ["simple test model"]

    def test_cached_document_is_shared(self, loader):
        assert loader.cached_model("simple_model").tree is loader.cached_model("simple_model").tree

    def test_unknown_model(self, loader):
        with pytest.raises(NoSuchModel):
            loader.model_from_name("does_not_exist")

    def test_flattened_by_default(self, loader):
        document = loader.model_from_name("nested_model")
        assert document.root.find("model/model") is None
        assert document.root.find("model/link[@name='s::l']") is not None

    def test_nested_on_request(self, loader):
        document = loader.model_from_name("nested_model", flatten=False)
        assert document.root.find("model/model[@name='s']") is not None


class TestGazeboModels:
    def test_loads_all_models_of_the_path(self, loader):
        models = loader.gazebo_models()
        assert len(models) == 12
        assert model_names(models["simple_model"]) == ["simple test model"]
        assert model_names(models["versioned_model"]) == ["versioned model 1.5"]

    def test_skips_models_without_a_matching_version(self, loader):
        loader.gazebo_models()
        models = loader.gazebo_models(130)
        assert sorted(models) == ["model_without_version", "versioned_model"]
        assert model_names(models["versioned_model"]) == ["versioned model 1.3"]

    def test_other_failures_propagate(self, data_dir):
        loader = SdfLoader(model_path=[os.path.join(data_dir, "broken_models")])
        with pytest.raises(InvalidXML):
            loader.gazebo_models()

    def test_later_directory_provides_the_matching_version(self, tmp_path):
        for base, version in (("a", "1.6"), ("b", "1.5")):
            model_dir = tmp_path / base / "m"
            model_dir.mkdir(parents=True)
            (model_dir / "model.config").write_text(f'<model><sdf version="{version}">model.sdf</sdf></model>')
            (model_dir / "model.sdf").write_text(
                f'<sdf version="{version}"><model name="m from {base}" /></sdf>')

        loader = SdfLoader(model_path=[str(tmp_path / "a"), str(tmp_path / "b")])
        assert model_names(loader.gazebo_models(150)["m"]) == ["m from b"]
        assert model_names(loader.gazebo_models()["m"]) == ["m from a"]


class TestVersions:
    @pytest.mark.parametrize("version,text", [(150, "1.5"), (130, "1.3"), (110, "1.1"), (200, "2.0")])
    def test_numeric_version_to_string(self, version, text):
        assert numeric_version_to_string(version) == text

    def test_sdf_version_of(self):
        assert sdf_version_of(etree.fromstring('<sdf version="1.6" />')) == 160
        assert sdf_version_of(etree.fromstring('<sdf />')) is None
        with pytest.raises(Invalid):
            sdf_version_of(etree.fromstring('<sdf version="abc" />'))

    def test_loader_sdf_version_of(self, loader):
        assert loader.sdf_version_of(etree.fromstring('<gazebo version="1.0" />')) == 100


class TestDefaultLoader:
    def test_set_model_path(self, models_dir, monkeypatch):
        monkeypatch.setattr(core, "_default_loader", None)
        core.set_model_path([models_dir])
        assert core.get_model_path() == [models_dir]
        assert core.default_loader().model_from_name("simple_model")
        core.clear_cache()
        assert core.default_loader().resolver.cache_entry("simple_model").path is None
