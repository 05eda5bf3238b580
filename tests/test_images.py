import pytest
from PIL import Image

from jpegshrink.core.errors import InvalidImageError
from jpegshrink.core.images import compare_images, verify_image


def test_verify_image_returns_format_and_size(image_file):
    assert verify_image(str(image_file)) == ("PNG", (64, 48))


def test_verify_image_rejects_garbage(tmp_path):
    path = tmp_path / "fake.jpg"
    path.write_bytes(b"this is plain text, not pixels")

    with pytest.raises(InvalidImageError) as excinfo:
        verify_image(str(path))

    assert excinfo.value.status_code == 400


def test_compare_images(tmp_path, image_file):
    compressed = tmp_path / "out.jpg"
    with Image.open(image_file) as img:
        img.convert("RGB").resize((32, 24)).save(compressed, format="JPEG")

    psnr, ssim = compare_images(str(image_file), str(compressed))

    assert psnr is not None
    assert ssim is not None


def test_compare_images_with_missing_output(tmp_path, image_file):
    assert compare_images(str(image_file), str(tmp_path / "missing.jpg")) == (None, None)


def test_verify_image_rejects_decompression_bombs(image_file, monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

    with pytest.raises(InvalidImageError) as excinfo:
        verify_image(str(image_file))

    assert excinfo.value.status_code == 400
