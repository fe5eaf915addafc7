"""
Unit tests for attempt image merging.
"""

import pytest
from PIL import Image

from papercopy_toolkit.core.models import Attempt
from papercopy_toolkit.output.images import (
    attempt_to_image,
    merge_images,
    rotate_upright,
    scale_image,
)
from papercopy_toolkit.scanning import ScanError


def _marked(size=(40, 20)):
    """Image with a black pixel in its top-left corner."""
    image = Image.new("RGB", size, "white")
    image.putpixel((0, 0), (0, 0, 0))
    return image


class TestRotateUpright:

    def test_rotate_upright_when_zero_then_same_image(self):
        image = _marked()

        assert rotate_upright(image, 0) is image

    @pytest.mark.parametrize("rotation,size,corner", [
        (90, (20, 40), (19, 0)),    # clockwise: top-left goes to top-right
        (180, (40, 20), (39, 19)),
        (270, (20, 40), (0, 39)),
    ])
    def test_rotate_upright_is_clockwise(self, rotation, size, corner):
        rotated = rotate_upright(_marked(), rotation)

        assert rotated.size == size
        assert rotated.getpixel(corner) == (0, 0, 0)

    def test_rotate_upright_when_unsupported_then_raises(self):
        with pytest.raises(ValueError):
            rotate_upright(_marked(), 45)


class TestScaleAndMerge:

    def test_scale_image(self):
        assert scale_image(_marked((40, 20)), 0.5).size == (20, 10)

    @pytest.mark.parametrize("scale", [0, 1])
    def test_scale_image_when_identity_then_unchanged(self, scale):
        image = _marked()

        assert scale_image(image, scale) is image

    def test_merge_images_stacks_left_aligned(self):
        top = Image.new("RGB", (30, 10), "black")
        bottom = Image.new("RGB", (50, 20), "black")

        merged = merge_images([top, bottom])

        assert merged.size == (50, 30)
        assert merged.getpixel((40, 5)) == (255, 255, 255)
        assert merged.getpixel((40, 25)) == (0, 0, 0)

    def test_merge_images_when_empty_then_raises(self):
        with pytest.raises(ValueError):
            merge_images([])


class TestAttemptToImage:

    def test_attempt_to_image_rotates_scales_and_stacks(self, make_page):
        # Arrange
        pages = [make_page(width=40, height=20, rotation=90), make_page(width=40, height=20)]
        attempt = Attempt(pages=pages)
        loaded = []

        def loader(source, dpi):
            loaded.append((source, dpi))
            return Image.new("RGB", (40, 20), "white")

        # Act
        image = attempt_to_image(attempt, scale=0.5, dpi=150, loader=loader)

        # Assert
        assert image.size == (20, 30)
        assert loaded == [(pages[0].source, 150), (pages[1].source, 150)]

    def test_attempt_to_image_appends_unscaled_footer(self, make_attempt, make_image):
        footer = make_image("footer.png", size=(60, 10))
        attempt = make_attempt()

        image = attempt_to_image(
            attempt,
            scale=0.5,
            footer=footer,
            loader=lambda source, dpi: Image.new("RGB", (40, 20)),
        )

        assert image.size == (60, 20)

    def test_attempt_to_image_when_footer_missing_then_scan_error(self, make_attempt, tmp_path):
        with pytest.raises(ScanError, match="footer"):
            attempt_to_image(
                make_attempt(),
                footer=tmp_path / "missing.png",
                loader=lambda source, dpi: Image.new("RGB", (40, 20)),
            )

    def test_attempt_to_image_when_no_pages_then_scan_error(self):
        with pytest.raises(ScanError):
            attempt_to_image(Attempt())

    def test_attempt_to_image_reads_real_file(self, make_image, make_page):
        path = make_image("page.png", size=(30, 50))
        attempt = Attempt(pages=[make_page(path=str(path), width=30, height=50, rotation=270)])

        assert attempt_to_image(attempt).size == (50, 30)
