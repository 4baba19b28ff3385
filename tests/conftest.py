# Author: PB
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/conftest.py
"""Pytest configuration for layer-diff tests."""

import pytest

from tests.fixtures.image_fixture import (
    file_entry,
    make_image,
    tar_dir,
    tar_file,
    tar_symlink,
    write_docker_archive,
)


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run tests that build large synthetic images",
    )


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "slow: mark test as building a large synthetic image",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is passed."""
    if not config.getoption("--run-slow"):
        skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)


@pytest.fixture
def wasteful_image():
    """Three layers where /a is rewritten and /b is written once."""
    return make_image(
        [file_entry("/a", 100)],
        [file_entry("/a", 40)],
        [file_entry("/b", 10)],
    )


@pytest.fixture
def app_archive(tmp_path):
    """A saved image that installs, patches and cleans up an app."""
    return write_docker_archive(tmp_path / "app.tar", [
        [
            tar_dir("etc"),
            tar_file("etc/app.conf", 300),
            tar_dir("usr/bin"),
            tar_file("usr/bin/app", 2000),
            tar_symlink("usr/bin/app-link", "app"),
            tar_dir("tmp"),
            tar_file("tmp/cache.bin", 500),
        ],
        [
            tar_file("etc/app.conf", 350),
            tar_file("tmp/.wh.cache.bin"),
        ],
        [
            tar_file("usr/bin/app", 2100),
            tar_dir("var/log"),
            tar_file("var/log/.wh..wh..opq"),
            tar_file("var/log/app.log", 50),
        ],
    ], repo_tag="example/app:1.0", commands=[
        "ADD rootfs /",
        "RUN configure && rm /tmp/cache.bin",
        "RUN upgrade-app",
    ])


@pytest.fixture
def efficient_archive(tmp_path):
    """A saved image where no path is written twice."""
    return write_docker_archive(tmp_path / "efficient.tar", [
        [tar_file("bin/tool", 1000)],
        [tar_file("etc/tool.conf", 10), tar_symlink("bin/t", "tool")],
    ], repo_tag="example/efficient:1.0")

