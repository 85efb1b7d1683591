"""Tests for the ingestion pipeline (commands/generate.py)."""

import importlib
import logging
from pathlib import Path

import pytest

from jdx_converter.commands import (
    IngestionState,
    generate,
    ingest_directory,
    validate_image,
)
from jdx_converter.container import Dataset, Header
from jdx_converter.lib import (
    ClassLimitError,
    DecodedImage,
    HeaderMismatchError,
    ImageDecodeError,
    ImageTooLargeError,
    InputPathError,
    NoImagesError,
    OutputExistsError,
    UnsupportedBitDepthError,
)
from jdx_converter.lib.imaging import decode_image

generate_module = importlib.import_module("jdx_converter.commands.generate")


# ---------------------------------------------------------------------------
# Ingestion state
# ---------------------------------------------------------------------------


class TestIngestionState:
    def test_starts_empty(self) -> None:
        state = IngestionState()
        assert not state.is_initialized
        with pytest.raises(NoImagesError):
            state.dataset

    def test_initializes_once(self) -> None:
        state = IngestionState()
        header = Header(image_width=1, image_height=1, bit_depth=8)
        dataset = state.initialize(header)
        assert state.is_initialized
        assert state.dataset is dataset
        with pytest.raises(RuntimeError):
            state.initialize(header)
        assert state.dataset is dataset


# ---------------------------------------------------------------------------
# Successful runs
# ---------------------------------------------------------------------------


class TestGenerate:
    def test_two_classes(self, pets_dir: Path, tmp_path: Path, config) -> None:
        output = tmp_path / "pets.jdx"
        header = generate(pets_dir, output, config)

        assert output.exists()
        assert header.image_count == 2
        assert header.bit_depth == 8
        assert (header.image_width, header.image_height) == (4, 4)
        assert header.class_names == [p.name for p in pets_dir.iterdir()]

        stored = Dataset.read_from_path(output)
        assert stored.header == header
        pixels = dict(stored.items())
        assert pixels["cat"] == bytes([10] * 16)
        assert pixels["dog"] == bytes([200] * 16)

    def test_header_follows_first_image(self, tmp_path: Path, make_image, config) -> None:
        root = tmp_path / "rgb"
        make_image(root / "a" / "0.png", mode="RGB", size=(3, 2), color=(1, 2, 3))
        make_image(root / "b" / "0.png", mode="RGB", size=(3, 2))
        header = generate(root, tmp_path / "rgb.jdx", config)
        assert (header.image_width, header.image_height, header.bit_depth) == (3, 2, 24)

    def test_rgba(self, tmp_path: Path, make_image, config) -> None:
        root = tmp_path / "rgba"
        make_image(root / "a" / "0.png", mode="RGBA", color=(1, 2, 3, 4))
        assert generate(root, tmp_path / "rgba.jdx", config).bit_depth == 32

    @pytest.mark.parametrize("mode, bit_depth", [("1", 8), ("P", 24)])
    def test_compact_modes_are_expanded(
        self, tmp_path: Path, make_image, config, mode: str, bit_depth: int
    ) -> None:
        root = tmp_path / "compact"
        make_image(root / "a" / "0.png", mode=mode)
        assert generate(root, tmp_path / "out.jdx", config).bit_depth == bit_depth

    def test_hidden_entries_are_skipped(
        self, pets_dir: Path, tmp_path: Path, make_image, config
    ) -> None:
        make_image(pets_dir / ".cache" / "0.png")
        (pets_dir / "cat" / ".DS_Store").write_bytes(b"not an image")
        header = generate(pets_dir, tmp_path / "pets.jdx", config)
        assert sorted(header.class_names) == ["cat", "dog"]
        assert header.image_count == 2

    def test_custom_hidden_prefix(self, pets_dir: Path, tmp_path: Path, config) -> None:
        config.hidden_prefix = "c"
        header = generate(pets_dir, tmp_path / "pets.jdx", config)
        assert header.class_names == ["dog"]

    def test_empty_class_is_not_a_class(
        self, pets_dir: Path, tmp_path: Path, config
    ) -> None:
        (pets_dir / "bird").mkdir()
        header = generate(pets_dir, tmp_path / "pets.jdx", config)
        assert "bird" not in header.class_names

    def test_unreadable_class_is_skipped(
        self, pets_dir: Path, tmp_path: Path, config, caplog
    ) -> None:
        (pets_dir / "notes.txt").write_text("a file, not a class")
        with caplog.at_level(logging.WARNING):
            header = generate(pets_dir, tmp_path / "pets.jdx", config)
        assert "notes.txt" not in header.class_names
        assert "Skipping file 'notes.txt'" in caplog.text

    def test_missing_suffix_warns(
        self, pets_dir: Path, tmp_path: Path, config, caplog
    ) -> None:
        output = tmp_path / "pets.bin"
        with caplog.at_level(logging.WARNING):
            generate(pets_dir, output, config)
        assert output.exists()
        assert "should end with the extension '.jdx'" in caplog.text


# ---------------------------------------------------------------------------
# Fatal conditions
# ---------------------------------------------------------------------------


class TestGenerateFailures:
    def test_existing_output_is_untouched(self, pets_dir: Path, tmp_path: Path, config) -> None:
        output = tmp_path / "pets.jdx"
        output.write_bytes(b"original")
        with pytest.raises(OutputExistsError) as info:
            generate(pets_dir, output, config)
        assert info.value.is_fatal
        assert output.read_bytes() == b"original"

    def test_existing_output_checked_before_input(self, tmp_path: Path, config) -> None:
        output = tmp_path / "pets.jdx"
        output.write_bytes(b"original")
        with pytest.raises(OutputExistsError):
            generate(tmp_path / "missing", output, config)

    def test_missing_input_dir(self, tmp_path: Path, config) -> None:
        with pytest.raises(InputPathError):
            generate(tmp_path / "missing", tmp_path / "out.jdx", config)

    def test_mismatched_image_aborts_before_writing(
        self, tmp_path: Path, make_image, config
    ) -> None:
        root = tmp_path / "mixed"
        make_image(root / "small" / "0.png", size=(4, 4))
        make_image(root / "large" / "0.png", size=(5, 5))
        output = tmp_path / "mixed.jdx"
        with pytest.raises(HeaderMismatchError):
            generate(root, output, config)
        assert not output.exists()

    def test_mismatched_bit_depth(self, tmp_path: Path, make_image, config) -> None:
        root = tmp_path / "mixed"
        make_image(root / "a" / "0.png", mode="L")
        make_image(root / "a" / "1.png", mode="RGB")
        with pytest.raises(HeaderMismatchError, match="bit depth"):
            generate(root, tmp_path / "mixed.jdx", config)

    def test_undecodable_image(self, pets_dir: Path, tmp_path: Path, config) -> None:
        (pets_dir / "cat" / "broken.png").write_bytes(b"definitely not a png")
        output = tmp_path / "pets.jdx"
        with pytest.raises(ImageDecodeError, match="broken.png"):
            generate(pets_dir, output, config)
        assert not output.exists()

    def test_image_too_wide(self, tmp_path: Path, make_image, config) -> None:
        root = tmp_path / "wide"
        make_image(root / "a" / "0.png", size=(65536, 1))
        with pytest.raises(ImageTooLargeError, match="65,536 x 65,536 x 32"):
            generate(root, tmp_path / "wide.jdx", config)

    def test_unsupported_bit_depth(self, tmp_path: Path, make_image, config) -> None:
        root = tmp_path / "la"
        make_image(root / "a" / "0.png", mode="LA")
        with pytest.raises(UnsupportedBitDepthError, match="bit-depth of 16"):
            generate(root, tmp_path / "la.jdx", config)

    def test_class_limit(
        self, tmp_path: Path, make_image, config, monkeypatch
    ) -> None:
        monkeypatch.setattr(generate_module, "MAX_CLASSES", 2)
        root = tmp_path / "many"
        for name in ("a", "b", "c"):
            make_image(root / name / "0.png")
        output = tmp_path / "many.jdx"
        with pytest.raises(ClassLimitError):
            generate(root, output, config)
        assert not output.exists()

    @pytest.mark.parametrize("hidden_only", [False, True])
    def test_no_images(self, tmp_path: Path, config, make_image, hidden_only: bool) -> None:
        root = tmp_path / "empty"
        (root / "cat").mkdir(parents=True)
        if hidden_only:
            make_image(root / "cat" / ".0.png")
        output = tmp_path / "empty.jdx"
        with pytest.raises(NoImagesError):
            generate(root, output, config)
        assert not output.exists()


def test_ingest_directory_does_not_write(pets_dir: Path, tmp_path: Path, config) -> None:
    before = set(tmp_path.rglob("*"))
    dataset = ingest_directory(pets_dir, config)
    assert len(dataset) == 2
    assert set(tmp_path.rglob("*")) == before


# ---------------------------------------------------------------------------
# Sample width and pixel layout
# ---------------------------------------------------------------------------


class TestWideSamples:
    @pytest.mark.parametrize("channels, bits", [(3, 48), (4, 64)])
    def test_decoder_reports_stored_depth(
        self, tmp_path: Path, make_png_16bit, channels: int, bits: int
    ) -> None:
        path = make_png_16bit(tmp_path / "deep.png", channels=channels)
        assert decode_image(path).bits_per_pixel == bits

    def test_sixteen_bit_rgb_is_rejected(
        self, tmp_path: Path, make_png_16bit, config
    ) -> None:
        root = tmp_path / "deep"
        make_png_16bit(root / "a" / "0.png")
        output = tmp_path / "deep.jdx"
        with pytest.raises(UnsupportedBitDepthError, match="bit-depth of 48"):
            generate(root, output, config)
        assert not output.exists()

    def test_eight_bit_rgb_is_not_widened(self, tmp_path: Path, make_image) -> None:
        path = make_image(tmp_path / "rgb.png", mode="RGB")
        assert decode_image(path).bits_per_pixel == 24


class TestValidateImage:
    def _image(self, mode: str, bits: int) -> DecodedImage:
        return DecodedImage(width=1, height=1, mode=mode, bits_per_pixel=bits, data=b"")

    @pytest.mark.parametrize("mode", ["I", "F", "RGBX", "RGBa"])
    def test_wrong_layout_names_the_mode(self, mode: str) -> None:
        with pytest.raises(UnsupportedBitDepthError) as info:
            validate_image(self._image(mode, 32), "odd.tif")
        message = str(info.value)
        assert f"32-bit {mode} pixels" in message
        assert "must be RGBA" in message
        assert "Only bit-depths" not in message

    @pytest.mark.parametrize("mode, bits", [("L", 8), ("RGB", 24), ("RGBA", 32)])
    def test_supported_layouts(self, mode: str, bits: int) -> None:
        assert validate_image(self._image(mode, bits), "ok.png") == bits
