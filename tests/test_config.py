# tests/test_config.py
from pathlib import Path

from smbuilder.config import BuilderConfig, LoggingConfig, load_config
from smbuilder.utils.result import ExitCode


def _write_templates(directory: Path) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "header.h.tmpl").write_text("// {{name}}\n")
    (directory / "source.c.tmpl").write_text("// {{name}}\n")


def test_defaults():
    config = BuilderConfig()

    assert config.logging == LoggingConfig(level="warn", format="text")
    assert config.output_root == Path(".")
    assert config.templates_dir is None
    assert config.validate().is_ok()


def test_from_yaml_resolves_relative_paths(tmp_path):
    _write_templates(tmp_path / "tmpl")
    config_file = tmp_path / "smbuilder.yaml"
    config_file.write_text(
        "logging:\n"
        "  level: debug\n"
        "  format: json\n"
        "output_root: build\n"
        "templates_dir: tmpl\n"
    )

    config = BuilderConfig.from_yaml(config_file).unwrap()

    assert config.logging.level == "debug"
    assert config.logging.format == "json"
    assert config.output_root == tmp_path / "build"
    assert config.templates_dir == tmp_path / "tmpl"
    assert config.validate().is_ok()


def test_empty_file_gives_defaults(tmp_path):
    config_file = tmp_path / "smbuilder.yaml"
    config_file.write_text("")

    config = BuilderConfig.from_yaml(config_file).unwrap()

    assert config.logging.level == "warn"
    assert config.output_root == tmp_path / "."


def test_missing_file(tmp_path):
    result = BuilderConfig.from_yaml(tmp_path / "nope.yaml")

    assert result.is_err()
    assert result.unwrap_err().field == "path"
    assert result.unwrap_err().code == ExitCode.CONFIG_ERROR


def test_malformed_yaml(tmp_path):
    config_file = tmp_path / "smbuilder.yaml"
    config_file.write_text("logging: [debug\n")

    result = BuilderConfig.from_yaml(config_file)

    assert result.unwrap_err().field == "yaml"


def test_non_mapping_logging_section():
    result = BuilderConfig.from_dict({"logging": "debug"})

    assert result.unwrap_err().field == "logging"


def test_invalid_log_level():
    config = BuilderConfig(logging=LoggingConfig(level="verbose"))

    result = config.validate()

    assert result.unwrap_err().field == "logging.level"


def test_invalid_log_format():
    config = BuilderConfig(logging=LoggingConfig(format="xml"))

    assert config.validate().unwrap_err().field == "logging.format"


def test_missing_templates_dir(tmp_path):
    config = BuilderConfig(templates_dir=tmp_path / "missing")

    assert config.validate().unwrap_err().field == "templates_dir"


def test_templates_dir_without_source_template(tmp_path):
    (tmp_path / "header.h.tmpl").write_text("")
    config = BuilderConfig(templates_dir=tmp_path)

    error = config.validate().unwrap_err()

    assert "source.c.tmpl" in error.message


def test_with_logging_overrides_only_given_values():
    config = BuilderConfig(logging=LoggingConfig(level="info", format="json"))

    updated = config.with_logging(level="debug")

    assert updated.logging == LoggingConfig(level="debug", format="json")
    assert config.logging.level == "info"


def test_load_config_without_file_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert load_config().unwrap() == BuilderConfig()


def test_load_config_reads_default_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "smbuilder.yaml").write_text("logging:\n  level: info\n")

    assert load_config().unwrap().logging.level == "info"


def test_load_config_validates(tmp_path):
    config_file = tmp_path / "bad.yaml"
    config_file.write_text("logging:\n  format: xml\n")

    result = load_config(config_file)

    assert result.unwrap_err().field == "logging.format"
