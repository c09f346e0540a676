"""pytest plugin: configures snapshot mode from the command line and tracks the running test."""

from __future__ import annotations

import logging

import pytest

from snapmatch.comparator import SnapshotComparator
from snapmatch.expectation import set_current_example
from snapmatch.mode import mode_controller
from snapmatch.models.config import SnapshotConfig
from snapmatch.models.snapshot import ExampleMetadata

logger = logging.getLogger(__name__)


def pytest_addoption(parser):
    group = parser.getgroup("snapmatch", "snapshot testing")
    group.addoption(
        "--snapshot-record",
        action="store_true",
        default=False,
        help="Record reference images instead of verifying against them",
    )
    group.addoption(
        "--snapshot-tolerance",
        type=float,
        default=None,
        help="Default fraction of pixels allowed to differ (0..1)",
    )
    group.addoption("--snapshot-reference-dir", default=None, help="Directory holding reference images")
    group.addoption("--snapshot-failure-dir", default=None, help="Write reference/failed/diff images here")
    group.addoption("--snapshot-config", default=None, help="Path to a snapmatch JSON config file")
    parser.addini("snapshot_reference_dir", "Directory holding reference images", default="")
    parser.addini("snapshot_test_folder", "Folder suffix marking the test suite root", default="")


def build_config(config: pytest.Config) -> SnapshotConfig:
    """Combine config file, environment, ini values and options, later ones winning."""
    config_file = config.getoption("snapshot_config")
    base = SnapshotConfig.load(config_file) if config_file else SnapshotConfig()
    base = SnapshotConfig.from_env(base)

    changes: dict = {}
    if config.getini("snapshot_reference_dir"):
        changes["reference_images_directory"] = config.rootpath / config.getini("snapshot_reference_dir")
    if config.getini("snapshot_test_folder"):
        changes["folder_suffixes"] = (config.getini("snapshot_test_folder"),)
    if config.getoption("snapshot_reference_dir"):
        changes["reference_images_directory"] = config.getoption("snapshot_reference_dir")
    if config.getoption("snapshot_failure_dir"):
        changes["failure_directory"] = config.getoption("snapshot_failure_dir")
    if config.getoption("snapshot_tolerance") is not None:
        changes["tolerance"] = config.getoption("snapshot_tolerance")
    if config.getoption("snapshot_record"):
        changes["record_mode"] = True

    if not changes:
        return base
    return SnapshotConfig(**{**base.model_dump(exclude_unset=True), **changes})


def pytest_configure(config):
    snapshot_config = build_config(config)
    mode_controller.use(snapshot_config)
    if snapshot_config.record_mode:
        logger.info("Snapshot record mode enabled; checks will overwrite reference images")


def pytest_unconfigure(config):
    mode_controller.reset()


def pytest_report_header(config):
    snapshot_config = mode_controller.config
    mode = "record" if snapshot_config.record_mode else "verify"
    references = snapshot_config.reference_images_directory or "inferred per test file"
    return f"snapmatch: {mode} mode, tolerance {snapshot_config.tolerance:g}, references: {references}"


def example_for_item(item: pytest.Item) -> ExampleMetadata:
    """Describe a test the way nested example groups are described: outer to inner, comma separated."""
    groups = [node.name for node in item.listchain() if isinstance(node, pytest.Class)]
    _, line, _ = item.location
    return ExampleMetadata(
        name=", ".join(groups + [item.name]),
        file=str(item.path),
        line=(line or 0) + 1,
    )


@pytest.hookimpl(tryfirst=True)
def pytest_runtest_setup(item):
    set_current_example(example_for_item(item))


@pytest.hookimpl(trylast=True)
def pytest_runtest_teardown(item, nextitem):
    set_current_example(None)


@pytest.fixture
def snapshot_config() -> SnapshotConfig:
    """The snapshot configuration in effect for this session."""
    return mode_controller.config


@pytest.fixture
def snapshot_comparator() -> SnapshotComparator:
    return SnapshotComparator()
