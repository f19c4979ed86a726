"""End-to-end tests for the attendance-figure command."""

import logging

import pandas as pd
import pytest
from PIL import Image

from attendance_figure.build_figure import main
from attendance_figure.data import SAMPLE_DATA
from attendance_figure.errors import DataSchemaError
from attendance_figure.log import PACKAGE_LOGGER, configure_logging


def test_main_writes_figure_and_summary(tmp_path, capsys):
    output = tmp_path / "figure.tiff"
    summary = tmp_path / "tables" / "summary.csv"
    assert main(["--output", str(output), "--summary-csv", str(summary), "--verify"]) == 0

    with Image.open(output) as img:
        assert img.size == (3600, 2700)
    table = pd.read_csv(summary)
    assert list(table.columns) == ["state", "BYOB", "mean", "se", "n"]
    assert len(table) == 6
    out = capsys.readouterr().out
    assert "Wrote" in out
    assert "trend lines for MA, NH" in out


def test_main_empty_exclusion_fits_every_state(tmp_path, capsys):
    assert main(["--output", str(tmp_path / "all.tiff"), "--exclude-state", ""]) == 0
    assert "trend lines for MA, NH, VT" in capsys.readouterr().out


def test_main_unknown_state_propagates(tmp_path):
    with pytest.raises(DataSchemaError):
        main(["--output", str(tmp_path / "x.tiff"), "--exclude-state", "CA"])
    assert not (tmp_path / "x.tiff").exists()


def test_main_reads_csv_path(tmp_path, restaurants, capsys):
    data = tmp_path / "subset.csv"
    restaurants[restaurants["state"] != "MA"].to_csv(data, index=False)
    assert main(["--data", str(data), "--output", str(tmp_path / "sub.tiff")]) == 0
    assert "from 30 restaurants; trend lines for NH" in capsys.readouterr().out


def test_main_reads_csv_url(tmp_path, capsys):
    assert main(["--data", SAMPLE_DATA.as_uri(), "--output", str(tmp_path / "url.tiff")]) == 0
    assert "from 45 restaurants; trend lines for MA, NH" in capsys.readouterr().out


def test_configure_logging_adds_one_handler():
    logger = logging.getLogger(PACKAGE_LOGGER)
    configure_logging("DEBUG", force=True)
    configure_logging("WARNING")
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING
    configure_logging("INFO", force=True)
