import io
import json
import os
import sys
from pathlib import Path

import pytest
from PIL import Image
from fastapi.testclient import TestClient

from jpegshrink import app, config
from jpegshrink.core.compressor import CommandCompressor, get_compressor

FAKE_COMPRESSOR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "fake_compressor.py")


def make_image_bytes(fmt="PNG", size=(64, 48)):
    img = Image.new("RGB", size)
    for x in range(size[0]):
        for y in range(size[1]):
            img.putpixel((x, y), (x * 4 % 256, y * 5 % 256, (x + y) * 3 % 256))
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run with the uploads/outputs directories under a fresh working directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config, "UPLOADS_DIR", "uploads")
    monkeypatch.setattr(config, "OUTPUTS_DIR", "outputs")
    monkeypatch.setattr(config, "COMPUTE_QUALITY_METRICS", True)
    monkeypatch.delenv("FAKE_COMPRESSOR_MODE", raising=False)
    monkeypatch.delenv("FAKE_COMPRESSOR_KEEP", raising=False)
    return Path(os.getcwd())


@pytest.fixture
def compressor_log(workdir, monkeypatch):
    """Path of the JSON-lines file the fake compressor appends its arguments to."""
    path = workdir / "compressor-calls.jsonl"
    monkeypatch.setenv("FAKE_COMPRESSOR_LOG", str(path))
    return path


@pytest.fixture
def read_calls(compressor_log):
    def _read():
        if not compressor_log.exists():
            return []
        return [json.loads(line) for line in compressor_log.read_text().splitlines()]
    return _read


@pytest.fixture
def fake_compressor():
    return CommandCompressor([sys.executable, FAKE_COMPRESSOR])


@pytest.fixture
def client(workdir, compressor_log, fake_compressor):
    app.dependency_overrides[get_compressor] = lambda: fake_compressor
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def png_bytes():
    return make_image_bytes("PNG")


@pytest.fixture
def image_file(tmp_path, png_bytes):
    path = tmp_path / "input.png"
    path.write_bytes(png_bytes)
    return path
