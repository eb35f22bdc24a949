import pytest

from serviced_ocf.utilities.converters import convert, convert_boolean, convert_duration, convert_integer


@pytest.mark.ci
class TestConverters:
    @staticmethod
    @pytest.mark.parametrize('value, expected', [
        (None, None),
        ("60", 60),
        (60, 60),
        ("1m", 60),
        ("1m30s", 90),
        ("1h", 3600),
        ("2S", 2),
    ])
    def test_convert_duration(value, expected):
        assert convert_duration(value) == expected

    @staticmethod
    @pytest.mark.parametrize('value', ["1x", "m", "10s5"])
    def test_convert_duration_invalid(value):
        with pytest.raises(ValueError):
            convert_duration(value)

    @staticmethod
    def test_convert_integer():
        assert convert_integer("4979") == 4979
        assert convert_integer(None) is None
        with pytest.raises(ValueError):
            convert_integer("port")

    @staticmethod
    @pytest.mark.parametrize('value, expected', [
        ("yes", True), ("1", True), ("true", True),
        ("no", False), ("0", False), ("", False),
    ])
    def test_convert_boolean(value, expected):
        assert convert_boolean(value) is expected

    @staticmethod
    def test_convert_without_converter_is_identity():
        assert convert(None, "foo") == "foo"
