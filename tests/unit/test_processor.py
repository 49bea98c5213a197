"""Tests for parallel processing orchestration."""

import json
from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import pytest
from PIL import Image, ImageDraw

from hitboxer.config import HitboxerSettings
from hitboxer.core.processor import SpriteSheetProcessor, process_sprite
from hitboxer.domain import AccuracyTier, AlphaMask, ShapeMode, SpriteShape, SpriteSheetSpec


def inline_executor() -> MagicMock:
    """Create an executor mock that runs submitted work immediately."""
    executor = MagicMock()

    def submit(fn, task):
        future = MagicMock()
        future.result.return_value = fn(task)
        return future

    executor.submit.side_effect = submit
    executor.__enter__.return_value = executor
    executor.__exit__.return_value = None
    return executor


@pytest.fixture
def sheet() -> SpriteSheetSpec:
    """Create a two-sprite, single-row layout."""
    return SpriteSheetSpec(sprite_width=16, sprite_height=16, grid_width=2, num_sprites=2)


@pytest.fixture
def sheet_image(tmp_path: Path) -> Path:
    """Create a sheet whose first sprite holds an 8x8 block and second is empty."""
    image = Image.new("RGBA", (32, 16), (0, 0, 0, 0))
    ImageDraw.Draw(image).rectangle([4, 4, 11, 11], fill=(200, 40, 40, 255))
    path = tmp_path / "ships.png"
    image.save(path)
    return path


@pytest.fixture
def settings() -> HitboxerSettings:
    """Create default settings."""
    return HitboxerSettings()


@pytest.fixture
def block_task(settings: HitboxerSettings) -> dict:
    """Create a serialized task for a sprite holding an 8x8 block."""
    rows = [[255 if 2 <= x < 10 and 2 <= y < 10 else 0 for x in range(12)] for y in range(12)]
    return {
        "index": 4,
        "position": [32, 16],
        "mask": AlphaMask.from_rows(rows).to_dict(),
        "mode": ShapeMode.DECOMPOSITION.value,
        "tiers": ["low", "high"],
        "settings": settings.model_dump(),
    }


class TestProcessSprite:
    """Tests for process_sprite function."""

    def test_process_sprite(self, block_task: dict):
        """Test processing a sprite at two tiers."""
        result = process_sprite(block_task)

        assert "error" not in result
        assert result["index"] == 4
        assert result["duration_ms"] >= 0

        shapes = [SpriteShape.from_dict(data) for data in result["shapes"]]
        assert [shape.tier for shape in shapes] == [AccuracyTier.LOW, AccuracyTier.HIGH]
        for shape in shapes:
            assert shape.index == 4
            assert shape.position == (32, 16)
            assert shape.polygon_count == 1
            assert shape.stable

    def test_small_sprite_vanishes_at_coarse_tier(self, block_task: dict):
        """Test that a 4x4 block has no pieces at the low tier but one at high."""
        rows = [[255 if 2 <= x < 6 and 2 <= y < 6 else 0 for x in range(8)] for y in range(8)]
        block_task["mask"] = AlphaMask.from_rows(rows).to_dict()
        result = process_sprite(block_task)

        low, high = (SpriteShape.from_dict(data) for data in result["shapes"])
        # Every traced pixel lies within 4px of the chord the contour is
        # simplified against, so the low tier collapses to two points
        assert low.polygons == []
        assert high.polygon_count == 1

    def test_process_sprite_other_mode(self, block_task: dict):
        """Test that the task mode selects the geometry."""
        block_task["mode"] = ShapeMode.CONVEX_HULL.value
        result = process_sprite(block_task)

        shape = SpriteShape.from_dict(result["shapes"][0])
        assert shape.mode == ShapeMode.CONVEX_HULL
        assert len(shape.outline) == 4

    def test_process_sprite_handles_error(self):
        """Test that process_sprite reports errors instead of raising."""
        result = process_sprite({"index": 3, "mode": "decomposition"})

        assert "error" in result
        assert "traceback" in result
        assert result["index"] == 3

    def test_process_sprite_invalid_settings(self, block_task: dict):
        """Test that invalid settings surface as an error result."""
        block_task["settings"]["decomposition"]["max_depth"] = 0
        result = process_sprite(block_task)

        assert "error" in result
        assert result["index"] == 4


class TestSpriteSheetProcessor:
    """Tests for SpriteSheetProcessor class."""

    def test_init(self, settings: HitboxerSettings):
        """Test SpriteSheetProcessor initialization."""
        with patch('hitboxer.core.processor.configure_logging') as mock_logging:
            mock_logging.return_value = Mock()
            processor = SpriteSheetProcessor(settings)

            assert processor.config == settings
            assert processor.shapes == {}
            mock_logging.assert_called_once()

    @patch('hitboxer.core.processor.as_completed', side_effect=lambda futures: list(futures))
    @patch('hitboxer.core.processor.ProcessPoolExecutor')
    @patch('hitboxer.core.processor.configure_logging')
    def test_process_writes_metadata(
        self,
        mock_logging,
        mock_executor_class,
        _mock_as_completed,
        settings: HitboxerSettings,
        sheet: SpriteSheetSpec,
        sheet_image: Path,
    ):
        """Test processing a sheet with one solid and one empty sprite."""
        mock_logging.return_value = Mock()
        mock_executor_class.return_value = inline_executor()

        processor = SpriteSheetProcessor(settings)
        stats = processor.process(sheet_image, sheet, max_workers=1)

        assert stats.processed_count == 1
        assert stats.empty_count == 1
        assert stats.error_count == 0
        assert stats.polygon_count == 3
        assert stats.duration_seconds >= 0

        meta_path = sheet_image.parent / "meta" / "ships-decomposition-meta.json"
        assert stats.output_files == [meta_path]

        metadata = json.loads(meta_path.read_text(encoding="utf-8"))
        assert metadata["sourceImage"] == "ships.png"
        assert metadata["algorithm"] == "convexDecomposition"
        assert list(metadata["accuracyLevels"]) == ["low", "mid", "high"]
        for entries in metadata["accuracyLevels"].values():
            assert [entry["index"] for entry in entries] == [0, 1]
            assert entries[0]["polygonCount"] == 1
            assert entries[1]["polygonCount"] == 0
            assert entries[1]["position"] == {"x": 16, "y": 0}

        assert [len(shapes) for shapes in processor.shapes.values()] == [2, 2, 2]

    @patch('hitboxer.core.processor.ProcessPoolExecutor')
    @patch('hitboxer.core.processor.configure_logging')
    def test_process_all_transparent(
        self,
        mock_logging,
        mock_executor_class,
        settings: HitboxerSettings,
        sheet: SpriteSheetSpec,
        tmp_path: Path,
    ):
        """Test that transparent sprites never reach the worker pool."""
        mock_logging.return_value = Mock()
        path = tmp_path / "blank.png"
        Image.new("RGBA", (32, 16), (0, 0, 0, 0)).save(path)

        processor = SpriteSheetProcessor(settings)
        stats = processor.process(path, sheet)

        assert stats.processed_count == 0
        assert stats.empty_count == 2
        mock_executor_class.assert_not_called()
        assert stats.output_files[0].exists()

    @patch('hitboxer.core.processor.as_completed', side_effect=lambda futures: list(futures))
    @patch('hitboxer.core.processor.ProcessPoolExecutor')
    @patch('hitboxer.core.processor.configure_logging')
    def test_process_handles_errors(
        self,
        mock_logging,
        mock_executor_class,
        _mock_as_completed,
        settings: HitboxerSettings,
        sheet: SpriteSheetSpec,
        sheet_image: Path,
    ):
        """Test that worker errors are counted and the sprite is left out."""
        mock_logging.return_value = Mock()

        mock_executor = MagicMock()
        mock_future = MagicMock()
        mock_future.result.return_value = {
            "error": "Test error",
            "index": 0,
            "traceback": "Traceback...",
            "duration_ms": 1.0,
        }
        mock_executor.submit.return_value = mock_future
        mock_executor.__enter__.return_value = mock_executor
        mock_executor.__exit__.return_value = None
        mock_executor_class.return_value = mock_executor

        processor = SpriteSheetProcessor(settings)
        stats = processor.process(sheet_image, sheet, max_workers=1)

        assert stats.processed_count == 0
        assert stats.error_count == 1
        assert stats.errors == [(0, "Test error")]
        assert all(
            [shape.index for shape in shapes] == [1] for shapes in processor.shapes.values()
        )

    @patch('hitboxer.core.processor.as_completed', side_effect=lambda futures: list(futures))
    @patch('hitboxer.core.processor.ProcessPoolExecutor')
    @patch('hitboxer.core.processor.configure_logging')
    def test_process_custom_output_and_previews(
        self,
        mock_logging,
        mock_executor_class,
        _mock_as_completed,
        settings: HitboxerSettings,
        sheet: SpriteSheetSpec,
        sheet_image: Path,
        tmp_path: Path,
    ):
        """Test an explicit output path with preview rendering enabled."""
        mock_logging.return_value = Mock()
        mock_executor_class.return_value = inline_executor()
        settings.processing.mode = ShapeMode.OUTLINE
        settings.processing.tiers = [AccuracyTier.MID]
        settings.processing.write_previews = True

        output = tmp_path / "out" / "shapes.json"
        processor = SpriteSheetProcessor(settings)
        stats = processor.process(sheet_image, sheet, output_path=output)

        preview = tmp_path / "out" / "ships-marchingSquares-mid.png"
        assert stats.output_files == [output, preview]
        assert output.exists()
        with Image.open(preview) as image:
            assert image.mode == "RGB"

        metadata = json.loads(output.read_text(encoding="utf-8"))
        assert metadata["algorithm"] == "marchingSquares"
        assert metadata["accuracyLevels"]["mid"][0]["pointCount"] > 0

    @patch('hitboxer.core.processor.configure_logging')
    def test_process_missing_image(
        self,
        mock_logging,
        settings: HitboxerSettings,
        sheet: SpriteSheetSpec,
        tmp_path: Path,
    ):
        """Test that a missing sheet raises FileNotFoundError."""
        mock_logging.return_value = Mock()
        processor = SpriteSheetProcessor(settings)

        with pytest.raises(FileNotFoundError):
            processor.process(tmp_path / "missing.png", sheet)

    @patch('hitboxer.core.processor.as_completed', side_effect=lambda futures: list(futures))
    @patch('hitboxer.core.processor.ProcessPoolExecutor')
    @patch('hitboxer.core.processor.configure_logging')
    def test_progress_callback(
        self,
        mock_logging,
        mock_executor_class,
        _mock_as_completed,
        settings: HitboxerSettings,
        sheet: SpriteSheetSpec,
        sheet_image: Path,
    ):
        """Test that progress is reported once per processed sprite."""
        mock_logging.return_value = Mock()
        mock_executor_class.return_value = inline_executor()
        callback = Mock()

        processor = SpriteSheetProcessor(settings)
        processor.process(sheet_image, sheet, progress_callback=callback)

        callback.assert_called_once_with(1, 1, 0, True)
