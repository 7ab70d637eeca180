"""
Tests for config dataclasses.
"""

from pathlib import Path

import pytest

from pdf_slicer.config import ExportConfig, ShrinkConfig, SlicerConfig
from pdf_slicer.slicing.policy import MissingPagePolicy


def _paths():
    return dict(
        requests_path=Path("inputs/slices.csv"),
        source_path=Path("inputs/guide.pdf"),
        output_dir=Path("outputs"),
    )


class TestExportConfig:
    def test_defaults(self):
        config = ExportConfig()
        assert config.first_page_number == 1
        assert config.compact is True
        assert config.missing_pages is MissingPagePolicy.WARN
        assert config.continue_on_error is False

    @pytest.mark.parametrize("first", [-1, 2, 10])
    def test_export_config_when_first_page_not_0_or_1_then_raises(self, first):
        with pytest.raises(ValueError, match="first_page_number"):
            ExportConfig(first_page_number=first)

    def test_export_config_when_frozen_then_cannot_mutate(self):
        config = ExportConfig()
        with pytest.raises(AttributeError):
            config.compact = False


class TestShrinkConfig:
    def test_defaults(self):
        config = ShrinkConfig()
        assert config.executable == "gs"
        assert config.pdf_settings == "/ebook"
        assert config.image_resolution == 150

    @pytest.mark.parametrize(
        "kwargs,match",
        [
            ({"executable": ""}, "executable"),
            ({"pdf_settings": "/tiny"}, "pdf_settings"),
            ({"image_resolution": 0}, "image_resolution"),
            ({"timeout_seconds": -1}, "timeout_seconds"),
        ],
    )
    def test_shrink_config_when_invalid_then_raises(self, kwargs, match):
        with pytest.raises(ValueError, match=match):
            ShrinkConfig(**kwargs)


class TestSlicerConfig:
    def test_slicer_config_when_minimal_then_shrink_disabled(self):
        config = SlicerConfig(**_paths())
        assert config.shrink is False
        assert config.optimized_dir is None
        assert config.export == ExportConfig()

    def test_slicer_config_when_shrink_without_dir_then_raises(self):
        with pytest.raises(ValueError, match="optimized_dir is required"):
            SlicerConfig(**_paths(), shrink=True)

    def test_slicer_config_when_optimized_dir_same_as_output_then_raises(self):
        with pytest.raises(ValueError, match="must differ"):
            SlicerConfig(**_paths(), shrink=True, optimized_dir=Path("outputs"))

    def test_slicer_config_when_shrink_with_dir_then_accepts(self):
        config = SlicerConfig(**_paths(), shrink=True, optimized_dir=Path("outputs_optimized"))
        assert config.optimized_dir == Path("outputs_optimized")
