"""Unit tests for run-spec parsing."""

from __future__ import annotations

import pytest

from core.errors import IplogRunSpecError
from core.run_spec import load_run_spec
from tests.fixture_paths import fixture_path


def test_load_run_spec_valid_ingest_flattens_sections() -> None:
    """Ingest and store sections should map to CLI-style setting names."""
    spec = load_run_spec(str(fixture_path("run_spec/valid_ingest.yaml")))

    assert spec.version == 1
    assert spec.settings["log_file"] == "/var/log/apache2/access.log"
    assert spec.settings["db_host"] == "db.example.com"
    assert spec.settings["db_port"] == 3307
    assert spec.settings["db_table"] == "access_2014"
    assert spec.settings["recent_first"] is True
    assert spec.settings["max_lines"] is None


def test_load_run_spec_preserves_password_whitespace() -> None:
    """Passwords should be passed through verbatim."""
    spec = load_run_spec(str(fixture_path("run_spec/valid_ingest.yaml")))

    assert spec.settings["db_password"] == " s3cret "


@pytest.mark.parametrize(
    "fixture_name",
    [
        "unknown_field.yaml",
        "bad_version.yaml",
        "bad_verbosity.yaml",
        "bad_insert_type.yaml",
        "empty.yaml",
    ],
)
def test_load_run_spec_invalid_files_raise_error(fixture_name: str) -> None:
    """Malformed run specs should be rejected with a run-spec error."""
    with pytest.raises(IplogRunSpecError):
        load_run_spec(str(fixture_path(f"run_spec/{fixture_name}")))


def test_load_run_spec_unknown_field_names_the_field() -> None:
    """Unknown keys should be listed in the error."""
    with pytest.raises(IplogRunSpecError, match="follow"):
        load_run_spec(str(fixture_path("run_spec/unknown_field.yaml")))


def test_load_run_spec_missing_file_raises_error(tmp_path) -> None:
    """Missing run-spec path should be rejected."""
    with pytest.raises(IplogRunSpecError, match="does not exist"):
        load_run_spec(str(tmp_path / "missing.yaml"))


def test_load_run_spec_invalid_yaml_raises_error(tmp_path) -> None:
    """YAML syntax errors should surface as run-spec errors."""
    spec_path = tmp_path / "broken.yaml"
    spec_path.write_text("version: 1\ningest: [unclosed\n", encoding="utf-8")

    with pytest.raises(IplogRunSpecError, match="Fix YAML syntax"):
        load_run_spec(str(spec_path))
