"""
Tests for pipeline.run_slicer

Test Coverage:
- End-to-end run from CSV and PDF to output slices
- Validation happens before anything is written
- Optional shrink pass (Ghostscript patched out)
"""

import logging
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from pdf_slicer.config import ExportConfig, SlicerConfig
from pdf_slicer.errors import (
    ParseError,
    PostProcessError,
    RequestValidationError,
    SourceLoadError,
)
from pdf_slicer.pipeline import SliceRunResult, run_slicer
from pdf_slicer.timing import TimingLog


@pytest.fixture
def config_for(tmp_path):
    """Factory building a SlicerConfig rooted in tmp_path."""
    def _config(requests_path, source_path, **kwargs):
        return SlicerConfig(
            requests_path=requests_path,
            source_path=source_path,
            output_dir=tmp_path / "outputs",
            **kwargs,
        )
    return _config


class TestRunSlicer:
    """Tests for run_slicer() function."""

    def test_run_slicer_when_valid_inputs_then_writes_one_pdf_per_row(
        self, six_page_pdf, write_csv, config_for, page_labels, tmp_path
    ):
        """Default 1-based numbering: page id n is the page at index n-1."""
        # Arrange
        csv_path = write_csv([("Intro", 1, 3), ("Body", 3, 6), ("Last", 6, 7)])
        config = config_for(csv_path, six_page_pdf)

        # Act
        result = run_slicer(config)

        # Assert
        assert isinstance(result, SliceRunResult)
        out = tmp_path / "outputs"
        assert result.output_paths == [out / "Intro.pdf", out / "Body.pdf", out / "Last.pdf"]
        assert page_labels(out / "Intro.pdf") == [0, 1]
        assert page_labels(out / "Body.pdf") == [2, 3, 4]
        assert page_labels(out / "Last.pdf") == [5]
        assert result.warnings == []
        assert result.shrunk == []

    def test_run_slicer_when_zero_based_then_matches_indices(
        self, six_page_pdf, write_csv, config_for, page_labels, tmp_path
    ):
        csv_path = write_csv([("ch1", 1, 4)])
        config = config_for(csv_path, six_page_pdf, export=ExportConfig(first_page_number=0))

        run_slicer(config)

        assert page_labels(tmp_path / "outputs" / "ch1.pdf") == [1, 2, 3]

    def test_run_slicer_when_empty_range_then_writes_nothing(
        self, six_page_pdf, write_csv, config_for, tmp_path
    ):
        """A bad row rejects the whole batch before any output exists."""
        csv_path = write_csv([("ok", 1, 3), ("x", 5, 5)])

        with pytest.raises(RequestValidationError):
            run_slicer(config_for(csv_path, six_page_pdf))

        assert not (tmp_path / "outputs").exists()

    def test_run_slicer_when_source_missing_then_raises_before_writing(
        self, write_csv, config_for, tmp_path
    ):
        csv_path = write_csv([("ok", 1, 3)])

        with pytest.raises(SourceLoadError):
            run_slicer(config_for(csv_path, tmp_path / "missing.pdf"))

        assert not (tmp_path / "outputs").exists()

    def test_run_slicer_when_csv_missing_then_raises(self, six_page_pdf, config_for, tmp_path):
        with pytest.raises(ParseError):
            run_slicer(config_for(tmp_path / "nope.csv", six_page_pdf))

    def test_run_slicer_when_duplicate_descriptions_then_warns(
        self, six_page_pdf, write_csv, config_for, caplog
    ):
        caplog.set_level(logging.WARNING)
        csv_path = write_csv([("dup", 1, 2), ("dup", 2, 3)])

        result = run_slicer(config_for(csv_path, six_page_pdf))

        assert result.warnings == ["Slices 'dup', 'dup' all write dup.pdf; the last slice wins"]
        assert "all write dup.pdf" in caplog.text

    def test_run_slicer_when_descriptions_sanitize_to_same_name_then_warns_and_lists_once(
        self, six_page_pdf, write_csv, config_for, page_labels, tmp_path, caplog
    ):
        """a/b and a_b both become a_b.pdf; the collision is reported by name."""
        # Arrange
        caplog.set_level(logging.WARNING)
        csv_path = write_csv([("a/b", 1, 2), ("a_b", 3, 5)])

        # Act
        result = run_slicer(config_for(csv_path, six_page_pdf))

        # Assert
        out = tmp_path / "outputs"
        assert result.output_paths == [out / "a_b.pdf"]
        assert result.export.exported[0].description == "a_b"
        assert page_labels(out / "a_b.pdf") == [2, 3]
        assert result.warnings == ["Slices 'a/b', 'a_b' all write a_b.pdf; the last slice wins"]
        assert "'a/b', 'a_b' all write a_b.pdf" in caplog.text

    def test_run_slicer_when_pages_missing_then_warning_reported(
        self, six_page_pdf, write_csv, config_for
    ):
        """Missing-page reports appear in the run warnings, not only the log."""
        csv_path = write_csv([("tail", 5, 10)])

        result = run_slicer(config_for(csv_path, six_page_pdf))

        assert result.warnings == ["Slice 'tail' references pages missing from source: [7-9]"]
        assert result.export.exported[0].pages == (5, 6)

    def test_run_slicer_when_continue_on_error_then_failures_become_warnings(
        self, six_page_pdf, write_csv, config_for
    ):
        csv_path = write_csv([("in", 1, 3), ("out", 40, 45)])
        config = config_for(csv_path, six_page_pdf, export=ExportConfig(continue_on_error=True))

        result = run_slicer(config)

        assert [s.description for s in result.export.exported] == ["in"]
        assert any("'out' failed" in w for w in result.warnings)

    def test_run_slicer_when_timing_log_given_then_fills_phases(
        self, six_page_pdf, write_csv, config_for
    ):
        log = TimingLog()
        csv_path = write_csv([("a", 1, 2)])

        result = run_slicer(config_for(csv_path, six_page_pdf), timing_log=log)

        assert result.timing is log
        assert {"read_requests", "validate", "load_source", "export"} <= set(log.run_timings)
        assert "shrink" not in log.run_timings

    # ─────────────────────────────────────────────────────────────────────────
    # Shrink
    # ─────────────────────────────────────────────────────────────────────────

    def test_run_slicer_when_shrink_enabled_then_writes_optimized_copies(
        self, six_page_pdf, write_csv, config_for, tmp_path
    ):
        # Arrange
        def fake_gs(cmd, **kwargs):
            out = next(a for a in cmd if a.startswith("-sOutputFile="))
            Path(out.split("=", 1)[1]).write_bytes(b"%PDF-tiny")
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        csv_path = write_csv([("a", 1, 3), ("b", 3, 5)])
        optimized = tmp_path / "outputs_optimized"
        config = config_for(csv_path, six_page_pdf, shrink=True, optimized_dir=optimized)

        # Act
        with patch("pdf_slicer.postprocess.shrink.shutil.which", return_value="/usr/bin/gs"), \
                patch("pdf_slicer.postprocess.shrink.subprocess.run", side_effect=fake_gs):
            result = run_slicer(config)

        # Assert
        assert [r.output_path for r in result.shrunk] == [optimized / "a.pdf", optimized / "b.pdf"]
        assert (tmp_path / "outputs" / "a.pdf").read_bytes().startswith(b"%PDF")
        assert (optimized / "a.pdf").read_bytes() == b"%PDF-tiny"

    def test_run_slicer_when_shrinking_colliding_names_then_each_file_once(
        self, six_page_pdf, write_csv, config_for, tmp_path
    ):
        def fake_gs(cmd, **kwargs):
            out = next(a for a in cmd if a.startswith("-sOutputFile="))
            Path(out.split("=", 1)[1]).write_bytes(b"%PDF-tiny")
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        csv_path = write_csv([("a/b", 1, 2), ("a_b", 3, 5)])
        optimized = tmp_path / "outputs_optimized"
        config = config_for(csv_path, six_page_pdf, shrink=True, optimized_dir=optimized)

        with patch("pdf_slicer.postprocess.shrink.shutil.which", return_value="/usr/bin/gs"), \
                patch("pdf_slicer.postprocess.shrink.subprocess.run", side_effect=fake_gs) as run:
            result = run_slicer(config)

        assert run.call_count == 1
        assert [r.output_path for r in result.shrunk] == [optimized / "a_b.pdf"]

    def test_run_slicer_when_ghostscript_missing_then_exports_remain(
        self, six_page_pdf, write_csv, config_for, tmp_path
    ):
        csv_path = write_csv([("a", 1, 3)])
        config = config_for(
            csv_path, six_page_pdf, shrink=True, optimized_dir=tmp_path / "outputs_optimized"
        )

        with patch("pdf_slicer.postprocess.shrink.shutil.which", return_value=None):
            with pytest.raises(PostProcessError):
                run_slicer(config)

        assert (tmp_path / "outputs" / "a.pdf").is_file()
