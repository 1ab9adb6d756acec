"""Unit tests for the argument-forwarding launcher."""
# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from driverkit.exceptions import LauncherError
from driverkit.launcher import main, parse_launcher_args


class TestParseLauncherArgs:
    def test_positional_arguments_are_forwarded(self):
        plan = parse_launcher_args(["--headless", "about:blank"])
        assert plan.executable is None
        assert plan.args == ["--headless", "about:blank"]

    def test_executable(self):
        plan = parse_launcher_args(["--spectron-path=/opt/app/app.exe"])
        assert plan.executable == "/opt/app/app.exe"

    def test_indexed_args_precede_forwarded_args(self):
        plan = parse_launcher_args([
            "--remote-debugging-port=0",
            "--spectron-arg1=second",
            "--spectron-arg0=first",
            "--no-sandbox",
        ])
        assert plan.args == ["first", "second", "--remote-debugging-port=0", "--no-sandbox"]

    def test_value_may_contain_equals(self):
        plan = parse_launcher_args(["--spectron-arg0=--flag=value"])
        assert plan.args == ["--flag=value"]

    def test_env_and_create_file(self, tmp_path: Path):
        target = tmp_path / "marker.txt"
        plan = parse_launcher_args([
            "--spectron-env-APP_MODE=test",
            f"--spectron-create-file={target}",
        ])
        assert plan.env == {"APP_MODE": "test"}
        assert plan.create_files == [target]
        assert plan.args == []

    def test_unknown_spectron_flags_are_dropped(self):
        plan = parse_launcher_args(["--spectron-unknown=1", "--other=2"])
        assert plan.args == ["--other=2"]

    def test_bad_index_raises(self):
        with pytest.raises(LauncherError):
            parse_launcher_args(["--spectron-argX=oops"])


class TestMain:
    def test_requires_executable(self):
        with pytest.raises(LauncherError):
            main(["--spectron-arg0=x"])

    def test_propagates_exit_code_and_env(self, tmp_path: Path):
        target = tmp_path / "nested" / "created.txt"
        code = main([
            f"--spectron-path={sys.executable}",
            "--spectron-arg0=-c",
            "--spectron-arg1=import os, sys; sys.exit(int(os.environ['APP_CODE']))",
            "--spectron-env-APP_CODE=7",
            f"--spectron-create-file={target}",
        ])
        assert code == 7
        assert target.is_file()

    def test_existing_file_is_left_alone(self, tmp_path: Path):
        target = tmp_path / "keep.txt"
        target.write_text("content")
        main([
            f"--spectron-path={sys.executable}",
            "--spectron-arg0=-c",
            "--spectron-arg1=pass",
            f"--spectron-create-file={target}",
        ])
        assert target.read_text() == "content"
