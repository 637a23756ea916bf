"""Tests for pyseud2eqn.config_manager, error and tracing helpers."""

import json

import pytest

from pyseud2eqn import config_manager
from pyseud2eqn import error as E
from pyseud2eqn import tracing
from pyseud2eqn.ExprEngine import Scope
from pyseud2eqn.NumberFormat import RepStyle


class TestConfigManager:

    def test_missing_file_gives_defaults(self, tmp_path):
        settings = config_manager.load_setting_value("all", path=tmp_path / "none.json")
        assert settings == config_manager.DEFAULT_SETTINGS

    def test_corrupt_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        assert config_manager.load_setting_value("precision", path=path) == 256

    def test_non_object_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert config_manager.load_setting_value("repstyle", path=path) == "SiSuffix"

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "config.json"
        config_manager.save_setting({"repstyle": "TenExp"}, path=path)
        assert json.loads(path.read_text(encoding="utf-8")) == {"repstyle": "TenExp"}
        assert config_manager.load_setting_value("repstyle", path=path) == "TenExp"
        assert config_manager.load_setting_value("precision", path=path) == 256

    def test_unknown_key(self, tmp_path):
        assert config_manager.load_setting_value("darkmode", path=tmp_path / "none.json") == 0

    def test_scope_from_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"repstyle": "Verbatim", "si_long_form": true}', encoding="utf-8")
        scope = Scope.from_settings(config_manager.load_setting_value("all", path=path))
        assert scope.repstyle is RepStyle.Verbatim
        assert scope.si_long_form is True

    def test_shipped_config_matches_defaults(self):
        assert config_manager.load_setting_value("all") == config_manager.DEFAULT_SETTINGS

    def test_strict_missing_file(self, tmp_path):
        with pytest.raises(E.ConfigError) as excinfo:
            config_manager.load_setting_value("all", path=tmp_path / "none.json", strict=True)
        assert excinfo.value.code == "5002"
        assert excinfo.value.message.endswith("none.json")

    def test_strict_non_object_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(E.ConfigError) as excinfo:
            config_manager.load_setting_value("repstyle", path=path, strict=True)
        assert excinfo.value.code == "5002"

    def test_strict_readable_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"precision": 64}', encoding="utf-8")
        assert config_manager.load_setting_value("precision", path=path, strict=True) == 64


class TestErrors:

    def test_fields(self):
        err = E.ParseError("Unexpected token: 'x'", code="3001", equation="1 x )", column=4)
        assert err.code == "3001"
        assert err.equation == "1 x )"
        assert err.column == 4
        assert str(err) == "Unexpected token: 'x'"
        assert isinstance(err, E.EqnError)

    def test_describe(self):
        assert E.describe("3003") == "Missing ')'. "
        assert E.describe("5777") == "Configuration Error"
        assert E.describe("4000") == "Unexpected Error"


class TestTracing:

    def test_silent_by_default(self, capsys):
        tracing.trace("hello")
        assert capsys.readouterr().err == ""

    def test_tagged_with_line(self, capsys, monkeypatch):
        monkeypatch.setattr(tracing, "debug", True)
        tracing.trace("hello")
        err = capsys.readouterr().err
        assert err.startswith("[line ")
        assert err.rstrip().endswith("hello")
