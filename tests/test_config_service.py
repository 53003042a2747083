# tests/test_config_service.py

import pytest

from sfdeploy_tool.api.exceptions import ConfigError
from sfdeploy_tool.services.config_service import ConfigService, parse_switch


def test_defaults_without_config_file(tmp_path):
    options = ConfigService(tmp_path, environ={}).resolve_options()

    assert options.rollback_enabled is False
    assert options.stage_dir == "sfdeploy"


def test_yaml_file_sets_options(tmp_path):
    (tmp_path / ".sfdeploy.yaml").write_text(
        "rollback_enabled: true\n"
        "source_dir: force-app\n"
    )

    options = ConfigService(tmp_path, environ={}).resolve_options()

    assert options.rollback_enabled is True
    assert options.source_dir == "force-app"


def test_environment_variables_are_expanded(tmp_path, monkeypatch):
    monkeypatch.setenv("SFDEPLOY_TEST_STAGE", "out/stage")
    (tmp_path / ".sfdeploy.yaml").write_text("stage_dir: ${SFDEPLOY_TEST_STAGE}\n")

    options = ConfigService(tmp_path, environ={}).resolve_options()

    assert options.stage_dir == "out/stage"


def test_precedence(tmp_path):
    (tmp_path / ".sfdeploy.yaml").write_text(
        "rollback_enabled: false\n"
        "update_package_enabled: true\n"
        "force_initial_build: false\n"
    )
    environ = {
        "SFDEPLOY_ROLLBACK_ENABLED": "yes",
        "SFDEPLOY_FORCE_INITIAL_BUILD": "1",
    }

    options = ConfigService(tmp_path, environ=environ).resolve_options({
        "force_initial_build": False,
        "update_package_enabled": None,
    })

    assert options.rollback_enabled is True  # environment beats file
    assert options.force_initial_build is False  # override beats environment
    assert options.update_package_enabled is True  # None override ignored


def test_config_path_from_environment(tmp_path):
    custom = tmp_path / "ci" / "deploy.yaml"
    custom.parent.mkdir()
    custom.write_text("rollback_enabled: true\n")

    service = ConfigService(tmp_path, environ={"SFDEPLOY_CONFIG": str(custom)})

    assert service.config_path == custom
    assert service.resolve_options().rollback_enabled is True


def test_explicit_missing_file(tmp_path):
    service = ConfigService(tmp_path, tmp_path / "missing.yaml", environ={})

    with pytest.raises(ConfigError, match="not found"):
        service.load_config()


def test_empty_file(tmp_path):
    (tmp_path / ".sfdeploy.yaml").write_text("")

    assert ConfigService(tmp_path, environ={}).load_config() == {}


def test_invalid_yaml(tmp_path):
    (tmp_path / ".sfdeploy.yaml").write_text("rollback_enabled: [true\n")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        ConfigService(tmp_path, environ={}).load_config()


def test_non_mapping_document(tmp_path):
    (tmp_path / ".sfdeploy.yaml").write_text("- rollback_enabled\n")

    with pytest.raises(ConfigError, match="mapping"):
        ConfigService(tmp_path, environ={}).load_config()


def test_unknown_option(tmp_path):
    (tmp_path / ".sfdeploy.yaml").write_text("rolback_enabled: true\n")

    with pytest.raises(ConfigError, match="rolback_enabled"):
        ConfigService(tmp_path, environ={}).resolve_options()


@pytest.mark.parametrize("value, expected", [
    ("true", True), ("ON", True), ("1", True),
    ("false", False), ("no", False), ("", False),
])
def test_parse_switch(value, expected):
    assert parse_switch("SFDEPLOY_ROLLBACK_ENABLED", value) is expected


def test_parse_switch_rejects_garbage():
    with pytest.raises(ConfigError):
        parse_switch("SFDEPLOY_ROLLBACK_ENABLED", "maybe")
