import time

import pytest
from PIL import Image

from jpegshrink.utils.metrics import (
    IDENTICAL_PSNR,
    PerformanceTimer,
    calculate_image_metrics,
    get_cpu_mem,
    measure_compression_performance,
)


def gradient(size=(40, 30)):
    img = Image.new("RGB", size)
    for x in range(size[0]):
        for y in range(size[1]):
            img.putpixel((x, y), (x * 6 % 256, y * 8 % 256, 128))
    return img


def test_measure_compression_performance():
    result = measure_compression_performance(1000, 250, 1.234567)

    assert result == {
        "compression_ratio": 4.0,
        "space_savings_percent": 75.0,
        "processing_time": 1.2346,
    }


def test_measure_compression_performance_handles_empty_files():
    result = measure_compression_performance(0, 0, 0.0)

    assert result["compression_ratio"] == 0
    assert result["space_savings_percent"] == 0


def test_identical_images():
    img = gradient()

    psnr, ssim = calculate_image_metrics(img, img.copy())

    assert psnr == IDENTICAL_PSNR
    assert ssim == pytest.approx(1.0)


def test_downscaled_output_is_compared_at_original_size():
    img = gradient((80, 60))
    smaller = img.resize((40, 30))

    psnr, ssim = calculate_image_metrics(img, smaller)

    assert psnr is not None and 0 < psnr < IDENTICAL_PSNR
    assert ssim is not None and 0 < ssim <= 1


def test_tiny_images_skip_ssim():
    img = gradient((4, 4))
    other = Image.new("RGB", (4, 4), (0, 0, 0))

    psnr, ssim = calculate_image_metrics(img, other)

    assert psnr is not None
    assert ssim is None


def test_performance_timer():
    with PerformanceTimer() as timer:
        time.sleep(0.01)

    assert timer.execution_time >= 0.005


def test_get_cpu_mem():
    usage = get_cpu_mem()

    assert set(usage) == {"cpu_usage", "memory_usage"}
    assert 0 <= usage["memory_usage"] <= 100
