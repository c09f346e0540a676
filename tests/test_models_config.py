"""Tests for configuration models."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from snapmatch.models.config import (
    ENV_FAILURE_DIR,
    ENV_RECORD,
    ENV_REFERENCE_DIR,
    ENV_TOLERANCE,
    DeviceProfile,
    SnapshotConfig,
)


@pytest.fixture
def clean_env(monkeypatch):
    for var in (ENV_REFERENCE_DIR, ENV_RECORD, ENV_TOLERANCE, ENV_FAILURE_DIR):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


class TestSnapshotConfig:
    """Tests for SnapshotConfig model."""

    def test_default_values(self):
        config = SnapshotConfig()
        assert config.reference_images_directory is None
        assert config.failure_directory is None
        assert config.tolerance == 0.0
        assert config.record_mode is False
        assert config.folder_suffixes == ("tests", "specs")
        assert isinstance(config.device, DeviceProfile)
        assert config.device.scale == 1.0

    def test_is_frozen(self):
        config = SnapshotConfig()
        with pytest.raises(ValidationError):
            config.tolerance = 0.5

    def test_suffixes_lowercased(self):
        config = SnapshotConfig(folder_suffixes=["UITests", "Specs"])
        assert config.folder_suffixes == ("uitests", "specs")

    def test_single_suffix_string(self):
        assert SnapshotConfig(folder_suffixes="Checks").folder_suffixes == ("checks",)

    def test_empty_suffixes_rejected(self):
        with pytest.raises(ValidationError):
            SnapshotConfig(folder_suffixes=[])

    def test_negative_tolerance_rejected(self):
        with pytest.raises(ValidationError):
            SnapshotConfig(tolerance=-0.1)

    def test_env_reference_directory(self, monkeypatch):
        monkeypatch.setenv("MY_REFS", "/data/refs")
        config = SnapshotConfig(reference_images_directory="env:MY_REFS")
        assert config.reference_images_directory == Path("/data/refs")

    def test_env_reference_directory_missing(self, monkeypatch):
        monkeypatch.delenv("MISSING_REFS", raising=False)
        with pytest.raises(ValidationError, match="MISSING_REFS"):
            SnapshotConfig(reference_images_directory="env:MISSING_REFS")


class TestConfigFile:
    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "snapmatch.json"
        SnapshotConfig(
            reference_images_directory=tmp_path / "refs",
            tolerance=0.02,
            folder_suffixes=("uitests",),
        ).save(path)

        data = json.loads(path.read_text())
        assert data["tolerance"] == 0.02
        assert data["folder_suffixes"] == ["uitests"]

        loaded = SnapshotConfig.load(path)
        assert loaded.reference_images_directory == tmp_path / "refs"
        assert loaded.folder_suffixes == ("uitests",)

    def test_auto_detected_device_not_saved(self, tmp_path):
        path = tmp_path / "snapmatch.json"
        with patch("platform.system", return_value="Darwin"):
            SnapshotConfig(tolerance=0.01).save(path)

        assert "device" not in json.loads(path.read_text())

        with patch("platform.system", return_value="Linux"):
            loaded = SnapshotConfig.load(path)
        assert loaded.device.os_name == "Linux"
        assert loaded.tolerance == 0.01

    def test_env_overlay_keeps_device_auto_detected(self, clean_env, tmp_path):
        path = tmp_path / "snapmatch.json"
        clean_env.setenv(ENV_TOLERANCE, "0.05")
        with patch("platform.system", return_value="Darwin"):
            SnapshotConfig.from_env().save(path)

        assert "device" not in json.loads(path.read_text())

    def test_explicit_device_is_saved(self, tmp_path):
        path = tmp_path / "snapmatch.json"
        device = DeviceProfile(model="iPhone 15", os_name="iOS", os_version="17.2", scale=3.0)
        SnapshotConfig(device=device).save(path)

        with patch("platform.system", return_value="Linux"):
            loaded = SnapshotConfig.load(path)
        assert loaded.device == device

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SnapshotConfig.load(tmp_path / "nope.json")


class TestFromEnv:
    def test_no_variables_returns_base(self, clean_env):
        base = SnapshotConfig(tolerance=0.3)
        assert SnapshotConfig.from_env(base) is base

    def test_overlays_variables(self, clean_env, tmp_path):
        clean_env.setenv(ENV_REFERENCE_DIR, str(tmp_path / "refs"))
        clean_env.setenv(ENV_FAILURE_DIR, str(tmp_path / "failures"))
        clean_env.setenv(ENV_TOLERANCE, "0.05")
        clean_env.setenv(ENV_RECORD, "true")

        config = SnapshotConfig.from_env(SnapshotConfig(folder_suffixes=("uitests",)))
        assert config.reference_images_directory == tmp_path / "refs"
        assert config.failure_directory == tmp_path / "failures"
        assert config.tolerance == 0.05
        assert config.record_mode is True
        assert config.folder_suffixes == ("uitests",)

    def test_record_flag_false_values(self, clean_env):
        clean_env.setenv(ENV_RECORD, "0")
        assert SnapshotConfig.from_env().record_mode is False
