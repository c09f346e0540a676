"""Tests for reference directory resolution."""

from pathlib import Path

import pytest

from snapmatch.exceptions import ReferenceDirectoryError, SnapshotConfigurationError
from snapmatch.mode import ModeController
from snapmatch.models.config import SnapshotConfig
from snapmatch.resolver.paths import reference_group, resolve_reference_directory


class TestResolveReferenceDirectory:
    """Tests for resolve_reference_directory."""

    def test_infers_from_tests_suffix(self):
        config = SnapshotConfig(folder_suffixes=("tests",))
        directory = resolve_reference_directory("/Users/dev/MyApp/MyAppTests/Sub/File.swift", config)
        assert directory == Path("/Users/dev/MyApp/MyAppTests/ReferenceImages")

    def test_default_suffixes_include_specs(self):
        directory = resolve_reference_directory("/repo/specs/ui/test_button.py", SnapshotConfig())
        assert directory == Path("/repo/specs/ReferenceImages")

    def test_suffix_match_is_case_insensitive(self):
        directory = resolve_reference_directory("/repo/FeatureSPECS/test_a.py", SnapshotConfig())
        assert directory == Path("/repo/FeatureSPECS/ReferenceImages")

    def test_first_matching_component_wins(self):
        directory = resolve_reference_directory("/repo/tests/unit_tests/test_a.py", SnapshotConfig())
        assert directory == Path("/repo/tests/ReferenceImages")

    def test_relative_path(self):
        directory = resolve_reference_directory("tests/test_a.py", SnapshotConfig())
        assert directory == Path("tests/ReferenceImages")

    def test_override_short_circuits_inference(self, tmp_path):
        config = SnapshotConfig(reference_images_directory=tmp_path / "refs")
        # No test folder in this path; the override must still win
        directory = resolve_reference_directory("/nowhere/file.py", config)
        assert directory == tmp_path / "refs"

    def test_no_match_is_a_configuration_error(self):
        with pytest.raises(ReferenceDirectoryError) as exc_info:
            resolve_reference_directory("/nowhere/file.py", SnapshotConfig())
        assert isinstance(exc_info.value, SnapshotConfigurationError)
        assert "set_reference_images_directory" in str(exc_info.value)
        assert exc_info.value.source_file == "/nowhere/file.py"

    def test_custom_folder_replaces_defaults(self):
        controller = ModeController()
        controller.set_test_folder("UITests")

        directory = resolve_reference_directory("/repo/AppUITests/test_a.py", controller.config)
        assert directory == Path("/repo/AppUITests/ReferenceImages")

        with pytest.raises(ReferenceDirectoryError):
            resolve_reference_directory("/repo/specs/test_a.py", controller.config)


class TestReferenceGroup:
    def test_strips_directory_and_extension(self):
        assert reference_group("/repo/tests/test_login.py") == "test_login"

    def test_swift_source(self):
        assert reference_group("/repo/AppTests/LoginSpec.swift") == "LoginSpec"
