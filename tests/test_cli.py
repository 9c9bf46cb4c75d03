"""Tests for the command-line entry point."""

from pathlib import Path

import pytest

from zecwallettool import ConversionSettings, get_adapter
from zecwallettool.cli import main
from zecwallettool.testing import make_entry, make_wallet


@pytest.fixture
def zwl_file(tmp_path: Path, settings: ConversionSettings) -> Path:
    wallet = make_wallet([make_entry(0), make_entry(1)], "zwl", seed=bytes(range(32)))
    path = tmp_path / "wallet.dat"
    path.write_bytes(get_adapter("zwl", settings).write(wallet))
    return path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("ZECWALLETTOOL_NETWORK", "ZECWALLETTOOL_DERIVER", "ZECWALLETTOOL_STRICT"):
        monkeypatch.delenv(name, raising=False)


class TestCli:
    """Tests for zecwallettool.cli.main."""

    def test_prints_summary(self, zwl_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["zwl", str(zwl_file)]) == 0
        out = capsys.readouterr().out
        assert "Format:    zwl" in out
        assert "Keys:      2" in out

    def test_converts(
        self, zwl_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        target = tmp_path / "zec.db"
        assert main(["zwl", str(zwl_file), "ywallet", str(target)]) == 0
        assert target.read_bytes().startswith(b"SQLite format 3\x00")
        assert "Wrote ywallet wallet" in capsys.readouterr().out

    def test_explicit_deriver(self, zwl_file: Path) -> None:
        assert main(["zwl", str(zwl_file), "--deriver", "zecwallettool.testing:MockAddressDeriver"]) == 0

    def test_bad_deriver_path(self, zwl_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["zwl", str(zwl_file), "--deriver", "no_such_module:Deriver"]) == 1
        assert "error: Cannot load deriver" in capsys.readouterr().err

    def test_corrupt_file_reports_error(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test that decode errors are printed instead of raised."""
        path = tmp_path / "corrupt.dat"
        path.write_bytes(b"\x63" + bytes(7))
        assert main(["zwl", str(path)]) == 1
        assert "error: Unsupported wallet version: 99" in capsys.readouterr().err

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["zwl", str(tmp_path / "missing.dat")]) == 1
        assert "Cannot access wallet file" in capsys.readouterr().err

    def test_destination_format_without_path(self, zwl_file: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["zwl", str(zwl_file), "ywallet"])
        assert exc_info.value.code == 2

    def test_unknown_format_rejected_by_parser(self, zwl_file: Path) -> None:
        with pytest.raises(SystemExit):
            main(["exodus", str(zwl_file)])
