import pytest

from og_card.formatting import format_bytes, format_number, format_optional_number


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (0, "0 B"),
        (1, "1 B"),
        (1000, "1000 B"),
        (1499, "1499 B"),
        (1500, "1.46 KiB"),
        (2048, "2.00 KiB"),
        (5120, "5.00 KiB"),
        (10240, "10.0 KiB"),
        (51200, "50.0 KiB"),
        (102400, "100 KiB"),
        (512000, "500 KiB"),
        (1048575, "1024 KiB"),
        (1536000, "1.46 MiB"),
        (2097152, "2.00 MiB"),
        (5242880, "5.00 MiB"),
        (10485760, "10.0 MiB"),
        (52428800, "50.0 MiB"),
        (104857600, "100 MiB"),
        (1073741824, "1024 MiB"),
    ],
)
def test_format_bytes(size, expected):
    assert format_bytes(size) == expected


@pytest.mark.parametrize(
    ("number", "expected"),
    [
        (0, "0"),
        (1, "1"),
        (1000, "1000"),
        (1499, "1499"),
        (1500, "1.5K"),
        (2000, "2.0K"),
        (5000, "5.0K"),
        (10000, "10K"),
        (50000, "50K"),
        (100000, "100K"),
        (500000, "500K"),
        (999999, "1000K"),
        (1500000, "1.5M"),
        (2000000, "2.0M"),
        (5000000, "5.0M"),
        (10000000, "10M"),
        (50000000, "50M"),
        (100000000, "100M"),
        (1000000000, "1000M"),
    ],
)
def test_format_number(number, expected):
    assert format_number(number) == expected


def test_format_optional_number_none():
    assert format_optional_number(None) is None


def test_format_optional_number_matches_format_number():
    assert format_optional_number(1500) == "1.5K"
    assert format_optional_number(42) == format_number(42)


@pytest.mark.parametrize("func", [format_bytes, format_number])
def test_negative_values_rejected(func):
    with pytest.raises(ValueError):
        func(-1)


@pytest.mark.parametrize("func", [format_bytes, format_number])
def test_values_beyond_u32_rejected(func):
    with pytest.raises(ValueError):
        func(2**32)


def test_non_integer_rejected():
    with pytest.raises(TypeError):
        format_number(1.5)