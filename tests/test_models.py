import pytest

from jpegshrink.core.errors import InvalidParametersError
from jpegshrink.models.compression import CompressionParameters


@pytest.mark.parametrize("target_size, resize_factor, expected", [
    (None, None, (500, 1.0)),
    ("", "  ", (500, 1.0)),
    ("800", "0.3", (800, 0.3)),
    (" 2000 ", "1", (2000, 1.0)),
    ("50", "0.1", (50, 0.1)),
])
def test_from_form(target_size, resize_factor, expected):
    params = CompressionParameters.from_form(target_size, resize_factor)

    assert (params.target_size_kb, params.resize_factor) == pytest.approx(expected)


@pytest.mark.parametrize("target_size, resize_factor, field", [
    ("-5", "1", "targetSize"),
    ("12.5kb", "1", "targetSize"),
    ("500", "1.01", "resizeFactor"),
    ("500", "-0.5", "resizeFactor"),
    ("500", "nan", "resizeFactor"),
])
def test_from_form_rejects(target_size, resize_factor, field):
    with pytest.raises(InvalidParametersError) as excinfo:
        CompressionParameters.from_form(target_size, resize_factor)

    assert field in str(excinfo.value)
    assert excinfo.value.status_code == 400
