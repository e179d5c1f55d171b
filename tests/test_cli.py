from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from seleniumctl.__main__ import app
from seleniumctl.errors import CatalogError, DownloadError

runner: CliRunner = CliRunner()


def test_latest() -> None:
    with patch("seleniumctl.cli.commands.VersionCatalog") as catalog:
        catalog.return_value.latest.return_value = "2.42.2"
        result = runner.invoke(app, ["latest"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "2.42.2" in result.output


def test_latest_catalog_error() -> None:
    with patch("seleniumctl.cli.commands.VersionCatalog") as catalog:
        catalog.return_value.latest.side_effect = CatalogError("listing unreachable")
        result = runner.invoke(app, ["latest"])

    assert result.exit_code == 1
    assert "listing unreachable" in result.output


def test_versions() -> None:
    with patch("seleniumctl.cli.commands.VersionCatalog") as catalog:
        catalog.return_value.available_versions.return_value = ["2.39.0", "2.42.2"]
        result = runner.invoke(app, ["versions"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "2.39.0" in result.output
    assert "2.42.2" in result.output


def test_download(tmp_path: Path) -> None:
    directory = tmp_path / ("nested-jar-directory-" * 5)
    jar = directory / "selenium-server-standalone-10.2.0.jar"
    with patch("seleniumctl.cli.commands.download", return_value=jar) as download:
        result = runner.invoke(
            app, ["download", "10.2.0", "--dir", str(directory)], catch_exceptions=False
        )

    assert result.exit_code == 0
    download.assert_called_once_with("10.2.0", directory=directory)
    # The path is the last line, unwrapped, so `$(seleniumctl download)` works.
    assert result.output.splitlines()[-1] == str(jar)


def test_download_error(tmp_path: Path) -> None:
    with patch(
        "seleniumctl.cli.commands.download", side_effect=DownloadError("HTTP 404")
    ):
        result = runner.invoke(app, ["download", "99.0.0", "--dir", str(tmp_path)])

    assert result.exit_code == 1
    assert "HTTP 404" in result.output


def test_start_missing_jar(tmp_path: Path) -> None:
    result = runner.invoke(app, ["start", str(tmp_path / "missing.jar")])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_start_passes_options(jar: Path) -> None:
    with patch("seleniumctl.cli.commands.Server") as server_cls:
        result = runner.invoke(
            app,
            ["start", str(jar), "--port", "5555", "--background", "--", "-debug", "x"],
            catch_exceptions=False,
        )

    assert result.exit_code == 0
    server_cls.assert_called_once_with(
        jar, port=5555, timeout=30.0, background=True, log=None
    )
    server = server_cls.return_value
    server.__lshift__.assert_called_once_with(["-debug", "x"])
    server.start.assert_called_once_with()


def test_get_downloads_then_starts(jar: Path, tmp_path: Path) -> None:
    with (
        patch("seleniumctl.cli.commands.download", return_value=jar) as download,
        patch("seleniumctl.cli.commands.Server") as server_cls,
    ):
        result = runner.invoke(
            app,
            ["get", "latest", "--dir", str(tmp_path), "--background"],
            catch_exceptions=False,
        )

    assert result.exit_code == 0
    download.assert_called_once_with("latest", directory=tmp_path)
    server_cls.assert_called_once_with(
        jar, port=4444, timeout=30.0, background=True, log=None
    )
    server_cls.return_value.start.assert_called_once_with()
