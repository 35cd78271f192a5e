from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from producer_export.cli import main as cli_main
from producer_export.cli.__main__ import EXIT_FATAL, EXIT_PARTIAL_FAILURE, EXIT_SUCCESS_ALL

"""Exit code contract tests."""


def test_exit_code_values():
    assert (EXIT_SUCCESS_ALL, EXIT_PARTIAL_FAILURE, EXIT_FATAL) == (0, 2, 1)


def test_exit_code_fatal_config(temp_workdir: Path, roster_workbook: Path, capsys):
    # 明示指定した設定ファイルが無い → exit 1
    code = cli_main([str(roster_workbook), "--config", "config/absent.yml"])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_all_success_without_config_file(temp_workdir: Path, roster_workbook: Path):
    # config/export.yml が無くても既定値で動く
    assert cli_main([str(roster_workbook)]) == 0


def test_exit_code_partial_failure(write_config, roster_workbook: Path):
    original = Path.write_text

    def flaky(self, *args, **kwargs):
        if self.name.startswith("Jane Doe_"):
            raise PermissionError("read-only")
        return original(self, *args, **kwargs)

    with patch.object(Path, "write_text", flaky):
        assert cli_main([str(roster_workbook)]) == 2


def test_exit_code_fatal_unreadable_workbook(write_config, temp_workdir: Path):
    bad = temp_workdir / "data" / "broken.xlsx"
    bad.write_bytes(b"not a zip container")
    assert cli_main([str(bad)]) == 1
