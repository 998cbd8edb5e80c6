"""Tests for image intake: decoding, sniffing and the size/type policy."""

from __future__ import annotations

import base64

import pytest

from policy_portal.core.config import UploadConfig
from policy_portal.exceptions import ImageRejectedError
from policy_portal.extraction.images import ImagePolicy, PolicyImage, load_image, sniff_mime_type

JPEG = b"\xff\xd8\xff\xe0" + b"\x00" * 20
GIF = b"GIF89a" + b"\x00" * 20
WEBP = b"RIFF\x24\x00\x00\x00WEBPVP8 " + b"\x00" * 12
HEIC = b"\x00\x00\x00\x18ftypheic" + b"\x00" * 12


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class TestSniffMimeType:
    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            (b"\x89PNG\r\n\x1a\n" + b"\x00" * 8, "image/png"),
            (JPEG, "image/jpeg"),
            (GIF, "image/gif"),
            (WEBP, "image/webp"),
            (HEIC, "image/heic"),
        ],
    )
    def test_known_formats(self, data: bytes, expected: str) -> None:
        assert sniff_mime_type(data) == expected

    def test_unknown(self) -> None:
        assert sniff_mime_type(b"%PDF-1.7 ...") is None


class TestLoadImage:
    def test_data_url(self, png_bytes: bytes, png_data_url: str) -> None:
        image = load_image(png_data_url)
        assert image == PolicyImage(data=png_bytes, mime_type="image/png")

    def test_bare_base64(self, png_bytes: bytes) -> None:
        assert load_image(_b64(png_bytes)).data == png_bytes

    def test_base64_with_line_breaks(self, png_bytes: bytes) -> None:
        encoded = _b64(png_bytes)
        wrapped = "\n".join(encoded[i : i + 8] for i in range(0, len(encoded), 8))
        assert load_image(wrapped).data == png_bytes

    def test_raw_bytes(self) -> None:
        assert load_image(JPEG).mime_type == "image/jpeg"

    def test_sniffed_type_wins_over_declared(self, png_bytes: bytes) -> None:
        image = load_image("data:image/jpeg;base64," + _b64(png_bytes))
        assert image.mime_type == "image/png"

    def test_declared_image_type_used_when_unrecognized(self) -> None:
        policy = ImagePolicy(allowed_mime_types=frozenset({"image/bmp"}))
        image = load_image(b"BM" + b"\x00" * 30, declared_mime="image/bmp", policy=policy)
        assert image.mime_type == "image/bmp"

    def test_data_url_with_parameters(self, png_bytes: bytes) -> None:
        image = load_image("data:image/png;name=policy.png;base64," + _b64(png_bytes))
        assert image.data == png_bytes

    def test_empty_rejected(self) -> None:
        with pytest.raises(ImageRejectedError, match="empty"):
            load_image(b"")

    def test_invalid_base64_rejected(self) -> None:
        with pytest.raises(ImageRejectedError, match="base64"):
            load_image("data:image/png;base64,!!!not-base64!!!")

    def test_non_image_rejected(self) -> None:
        with pytest.raises(ImageRejectedError, match="not a recognized image"):
            load_image("data:text/plain;base64," + _b64(b"hello world"))

    def test_disallowed_type_rejected(self) -> None:
        policy = ImagePolicy(allowed_mime_types=frozenset({"image/png"}))
        with pytest.raises(ImageRejectedError, match="image/gif"):
            load_image(GIF, policy=policy)

    def test_oversized_bytes_rejected(self, png_bytes: bytes) -> None:
        with pytest.raises(ImageRejectedError, match="limit"):
            load_image(png_bytes, policy=ImagePolicy(max_bytes=10))

    def test_oversized_base64_rejected_before_decoding(self) -> None:
        with pytest.raises(ImageRejectedError, match="limit"):
            load_image("A" * 4000, policy=ImagePolicy(max_bytes=100))


class TestPolicyImage:
    def test_data_url_round_trip(self, png_bytes: bytes) -> None:
        image = PolicyImage(data=png_bytes, mime_type="image/png")
        assert image.to_data_url().startswith("data:image/png;base64,")
        assert load_image(image.to_data_url()) == image
        assert image.size == len(png_bytes)


class TestImagePolicyFromConfig:
    def test_reads_limits(self) -> None:
        policy = ImagePolicy.from_config(UploadConfig(max_bytes=1234, allowed_mime_types=["IMAGE/PNG"]))
        assert policy.max_bytes == 1234
        assert policy.allowed_mime_types == frozenset({"image/png"})
