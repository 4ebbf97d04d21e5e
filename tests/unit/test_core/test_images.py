"""
test_images.py - image intake pipeline

DoD:
- batch validation is all-or-nothing, first failing reason surfaced
- accepted files appended in input order, input list untouched
- read failure drops the whole batch
- remove_at: out-of-range is a no-op
"""

import base64

import pytest

from lingofy.core.images import (
    build_image_prompt,
    check_file,
    remove_at,
    validate_and_ingest,
    validate_batch,
    validate_images,
)
from lingofy.domain.errors import ErrorCodes, ImageReadError, ImageValidationError
from lingofy.domain.schemas import ImageReference, SelectedFile, StoreProfile

MIB = 1024 * 1024


# =============================================================================
# Validation
# =============================================================================


class TestCheckFile:

    def test_accepts_allowed_types(self, make_file):
        for mime in ("image/jpeg", "image/png", "image/webp"):
            assert check_file(make_file(mime_type=mime)) is None

    def test_rejects_oversized(self, make_file):
        reason = check_file(make_file(name="big.png", size=5 * MIB + 1))

        assert reason == 'File "big.png" exceeds the 5MB size limit.'

    def test_exact_limit_allowed(self, make_file):
        assert check_file(make_file(size=5 * MIB)) is None

    def test_rejects_unsupported_type(self, make_file):
        reason = check_file(make_file(name="anim.gif", mime_type="image/gif"))

        assert reason == 'File type for "anim.gif" is not supported (use JPG, PNG, WEBP).'

    def test_size_checked_before_type(self, make_file):
        reason = check_file(make_file(name="x.gif", mime_type="image/gif", size=6 * MIB))

        assert "size limit" in reason


class TestValidateBatch:

    def test_collects_every_failure_in_order(self, make_file):
        files = [
            make_file(name="a.png"),
            make_file(name="b.bmp", mime_type="image/bmp"),
            make_file(name="c.png", size=10 * MIB),
        ]

        reasons = validate_batch(files)

        assert len(reasons) == 2
        assert '"b.bmp"' in reasons[0]
        assert '"c.png"' in reasons[1]


# =============================================================================
# Inline images
# =============================================================================


class TestValidateImages:
    """Inline images from a seeded profile."""

    def test_accepts_allowed_images(self, existing_image, generated_image):
        validate_images([existing_image, generated_image])

    def test_rejects_disallowed_type(self):
        html = ImageReference.from_bytes(b"<script>", "text/html")

        with pytest.raises(ImageValidationError) as exc_info:
            validate_images([html])

        assert exc_info.value.message == (
            'File type for "image 1" is not supported (use JPG, PNG, WEBP).'
        )

    def test_rejects_oversized_and_collects_all(self, existing_image):
        big = ImageReference.from_bytes(b"x" * (5 * MIB + 1), "image/png", name="big.png")
        gif = ImageReference.from_bytes(b"GIF89a", "image/gif")

        with pytest.raises(ImageValidationError) as exc_info:
            validate_images([existing_image, big, gif])

        assert exc_info.value.errors == [
            'File "big.png" exceeds the 5MB size limit.',
            'File type for "image 3" is not supported (use JPG, PNG, WEBP).',
        ]

    def test_empty(self):
        validate_images([])


# =============================================================================
# Ingest
# =============================================================================


class TestValidateAndIngest:

    @pytest.mark.asyncio
    async def test_batch_with_one_oversized_file_rejected(self, make_file, existing_image):
        """3 files, one over 5 MiB → whole batch rejected, gallery unchanged."""
        existing = [existing_image]
        files = [
            make_file(name="one.png"),
            make_file(name="two.jpg", mime_type="image/jpeg", size=5 * MIB + 1),
            make_file(name="three.png"),
        ]

        with pytest.raises(ImageValidationError) as exc_info:
            await validate_and_ingest(files, existing)

        assert existing == [existing_image]
        assert exc_info.value.code == ErrorCodes.IMAGE_VALIDATION_FAILED
        assert exc_info.value.message == 'File "two.jpg" exceeds the 5MB size limit.'
        assert exc_info.value.errors == [exc_info.value.message]

    @pytest.mark.asyncio
    async def test_first_failure_is_the_message(self, make_file):
        files = [
            make_file(name="first.gif", mime_type="image/gif"),
            make_file(name="second.png", size=6 * MIB),
        ]

        with pytest.raises(ImageValidationError) as exc_info:
            await validate_and_ingest(files, [])

        assert '"first.gif"' in exc_info.value.message
        assert len(exc_info.value.errors) == 2

    @pytest.mark.asyncio
    async def test_two_valid_files_appended_in_order(
        self, make_file, existing_image, png_bytes, jpeg_bytes
    ):
        existing = [existing_image]
        files = [
            make_file(name="a.jpg", mime_type="image/jpeg", payload=jpeg_bytes),
            make_file(name="b.png", mime_type="image/png", payload=png_bytes),
        ]

        result = await validate_and_ingest(files, existing)

        assert len(result) == 3
        assert result[0] is existing_image
        assert result[1].name == "a.jpg"
        assert result[1].mime_type == "image/jpeg"
        assert base64.b64decode(result[1].data) == jpeg_bytes
        assert result[2].name == "b.png"
        assert result[2].data_url.startswith("data:image/png;base64,")
        assert existing == [existing_image]

    @pytest.mark.asyncio
    async def test_empty_batch_returns_copy(self, existing_image):
        existing = [existing_image]

        result = await validate_and_ingest([], existing)

        assert result == existing
        assert result is not existing

    @pytest.mark.asyncio
    async def test_read_failure_drops_batch(self, make_file):
        async def broken_read() -> bytes:
            raise OSError("disk error")

        files = [
            make_file(name="ok.png"),
            SelectedFile(name="bad.png", mime_type="image/png", size=10, read=broken_read),
        ]

        with pytest.raises(ImageReadError) as exc_info:
            await validate_and_ingest(files, [])

        assert exc_info.value.code == ErrorCodes.IMAGE_READ_FAILED

    @pytest.mark.asyncio
    async def test_understated_size_caught_after_read(self, make_file):
        """Declared size lies; the real payload is over the limit."""
        selected = make_file(name="liar.png", payload=b"x" * 2048, size=10)

        with pytest.raises(ImageValidationError):
            await validate_and_ingest([selected], [], max_size=1024)

    @pytest.mark.asyncio
    async def test_custom_allowed_types(self, make_file):
        files = [make_file(name="a.png")]

        with pytest.raises(ImageValidationError):
            await validate_and_ingest(files, [], allowed_types=["image/jpeg"])

    @pytest.mark.asyncio
    async def test_mime_type_case_insensitive(self, make_file):
        result = await validate_and_ingest([make_file(mime_type="IMAGE/PNG")], [])

        assert result[0].mime_type == "image/png"


# =============================================================================
# remove_at
# =============================================================================


class TestRemoveAt:

    @pytest.mark.parametrize("index", [-1, 3, 100])
    def test_out_of_range_is_noop(self, index):
        images = ["a", "b", "c"]

        result = remove_at(images, index)

        assert result == ["a", "b", "c"]
        assert result is images

    @pytest.mark.parametrize(
        "index, expected",
        [(0, ["b", "c"]), (1, ["a", "c"]), (2, ["a", "b"])],
    )
    def test_removes_one_keeps_order(self, index, expected):
        images = ["a", "b", "c"]

        result = remove_at(images, index)

        assert result == expected
        assert images == ["a", "b", "c"]

    def test_empty_list(self):
        assert remove_at([], 0) == []


# =============================================================================
# Prompt
# =============================================================================


class TestBuildImagePrompt:

    def test_uses_title_and_description(self, profile: StoreProfile):
        prompt = build_image_prompt(profile)

        assert prompt == (
            "Generate a high-quality, professional product photograph for e-commerce. "
            'The product is: "Handcrafted Wonder". '
            'Description: "A unique piece, crafted with love and care. Perfect for any occasion.". '
            "The image should be on a clean, minimalist background, suitable for a "
            "product listing."
        )

    def test_extra_prompt_trimmed_and_appended(self, profile):
        prompt = build_image_prompt(profile, "  on a wooden table ")

        assert prompt.endswith(
            ' Additional instructions from the creator: "on a wooden table".'
        )

    def test_blank_extra_prompt_ignored(self, profile):
        assert build_image_prompt(profile, "   ") == build_image_prompt(profile)

    def test_deterministic(self, profile):
        assert build_image_prompt(profile, "x") == build_image_prompt(profile, "x")


def test_image_reference_size(png_bytes):
    image = ImageReference.from_bytes(png_bytes, "image/png")

    assert image.size == len(png_bytes)
