"""Unit tests for the command line entrypoint."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, Mock

import pytest

from pyrus_client import cli
from pyrus_client.errors import APIError, ErrorCode
from pyrus_client.models.responses import DownloadResponse, ProfileResponse


@pytest.fixture
def fake_client(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> MagicMock:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PYRUS_LOGIN", "bot@example.com")
    monkeypatch.setenv("PYRUS_SECURITY_KEY", "secret")
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)

    client = MagicMock()
    client.__enter__.return_value = client
    monkeypatch.setattr(cli.PyrusClient, "from_settings", Mock(return_value=client))
    return client


def test_missing_configuration_exits_with_2(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PYRUS_LOGIN", raising=False)
    monkeypatch.delenv("PYRUS_SECURITY_KEY", raising=False)

    assert cli.main(["profile"]) == 2
    assert "Configuration error" in capsys.readouterr().err


def test_profile_prints_json(fake_client: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    fake_client.profile.return_value = ProfileResponse(person_id=3, email="bot@example.com")

    assert cli.main(["profile"]) == 0
    assert '"person_id": 3' in capsys.readouterr().out


def test_download_writes_file(fake_client: Mock, tmp_path: Path) -> None:
    fake_client.download_file.return_value = DownloadResponse(
        filename="../report.txt", raw_file=b"content"
    )

    assert cli.main(["download", "5", "--output-dir", str(tmp_path)]) == 0
    fake_client.download_file.assert_called_once_with(5)
    assert (tmp_path / "report.txt").read_bytes() == b"content"


def test_api_error_exits_with_1(fake_client: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    fake_client.task.side_effect = APIError(ErrorCode.ACCESS_DENIED_TASK, "access denied")

    assert cli.main(["task", "9"]) == 1
    assert "access denied" in capsys.readouterr().err
