"""Test the thermorhythm cli."""

import logging
import pathlib

import pytest
import pytest_mock
from typer import testing

from thermorhythm.core import cli, exceptions, orchestrator
from thermorhythm.io.writers import summaries

ALL_REPORTS = ["chronogram", "actogram", "extrema", "periodogram", "autocorrelation"]


@pytest.fixture
def create_typer_cli_runner() -> testing.CliRunner:
    """Create a Typer CLI runner."""
    return testing.CliRunner()


@pytest.fixture
def mock_print(mocker: pytest_mock.MockerFixture) -> pytest_mock.MockType:
    """Patch the console summaries."""
    return mocker.patch.object(summaries, "print_results")


def test_main_default(
    mocker: pytest_mock.MockerFixture,
    readings_csv: pathlib.Path,
    create_typer_cli_runner: testing.CliRunner,
    mock_print: pytest_mock.MockType,
) -> None:
    """Test cli with only necessary arguments."""
    mock_run = mocker.patch.object(orchestrator, "run")

    result = create_typer_cli_runner.invoke(cli.app, [str(readings_csv)])

    assert result.exit_code == 0
    mock_run.assert_called_once_with(
        input=readings_csv,
        output=None,
        subject=None,
        reports=ALL_REPORTS,
        verbosity=logging.INFO,
    )
    mock_print.assert_called_once_with(mock_run.return_value)


def test_main_with_options(
    mocker: pytest_mock.MockerFixture,
    readings_csv: pathlib.Path,
    tmp_path: pathlib.Path,
    create_typer_cli_runner: testing.CliRunner,
    mock_print: pytest_mock.MockType,
) -> None:
    """Test cli with optional arguments."""
    mock_run = mocker.patch.object(orchestrator, "run")

    create_typer_cli_runner.invoke(
        cli.app,
        [
            str(readings_csv),
            "--output",
            str(tmp_path),
            "-s",
            "monkey_02",
            "-r",
            "periodogram",
            "-r",
            "autocorrelation",
        ],
    )

    mock_run.assert_called_once_with(
        input=readings_csv,
        output=tmp_path,
        subject="monkey_02",
        reports=["periodogram", "autocorrelation"],
        verbosity=logging.INFO,
    )


def test_main_verbosity(
    mocker: pytest_mock.MockerFixture,
    readings_csv: pathlib.Path,
    create_typer_cli_runner: testing.CliRunner,
    mock_print: pytest_mock.MockType,
) -> None:
    """Test cli with different verbosity levels."""
    mock_run = mocker.patch.object(orchestrator, "run")

    create_typer_cli_runner.invoke(cli.app, [str(readings_csv), "-v"])

    mock_run.assert_called_once_with(
        input=readings_csv,
        output=None,
        subject=None,
        reports=ALL_REPORTS,
        verbosity=logging.DEBUG,
    )


def test_main_bad_report(
    readings_csv: pathlib.Path,
    create_typer_cli_runner: testing.CliRunner,
) -> None:
    """Test cli with a report that does not exist."""
    result = create_typer_cli_runner.invoke(
        cli.app, [str(readings_csv), "-r", "hypnogram"]
    )

    assert result.exit_code != 0


def test_main_series_error(
    mocker: pytest_mock.MockerFixture,
    readings_csv: pathlib.Path,
    create_typer_cli_runner: testing.CliRunner,
    mock_print: pytest_mock.MockType,
) -> None:
    """Test that input errors exit with a non-zero code."""
    mocker.patch.object(
        orchestrator, "run", side_effect=exceptions.EmptySeriesError("no readings")
    )

    result = create_typer_cli_runner.invoke(cli.app, [str(readings_csv)])

    assert result.exit_code == 1
    mock_print.assert_not_called()


def test_main_version(
    create_typer_cli_runner: testing.CliRunner,
) -> None:
    """Test cli version output."""
    result = create_typer_cli_runner.invoke(cli.app, ["--version"])

    assert result.exit_code == 0
    assert "Thermorhythm version" in result.output


def test_main_version_with_options(
    create_typer_cli_runner: testing.CliRunner,
    readings_csv: pathlib.Path,
    mocker: pytest_mock.MockerFixture,
) -> None:
    """Test other arguments and options are ignored when --version is passed."""
    mock_run = mocker.patch.object(orchestrator, "run")

    result = create_typer_cli_runner.invoke(
        cli.app, [str(readings_csv), "-r", "extrema", "--version"]
    )

    assert result.exit_code == 0
    assert "Thermorhythm version" in result.output
    mock_run.assert_not_called()
