"""
Tests for the polyline codec.
"""

import pytest

from aether.polyline import PolylineDecodeError, decode, decode_latlon, encode

CANONICAL = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"
CANONICAL_PATH = [(-120.2, 38.5), (-120.95, 40.7), (-126.453, 43.252)]


class TestDecode:
    """Tests for decode()."""

    def test_canonical_example(self):
        assert decode(CANONICAL) == CANONICAL_PATH

    def test_latlon_order(self):
        assert decode_latlon(CANONICAL) == [(lat, lon) for lon, lat in CANONICAL_PATH]

    @pytest.mark.parametrize("encoded", ["", None])
    def test_empty(self, encoded):
        assert decode(encoded) == []

    def test_returns_fresh_list(self):
        first = decode(CANONICAL)
        first.append((0.0, 0.0))
        assert decode(CANONICAL) == CANONICAL_PATH

    def test_truncated_raises(self):
        with pytest.raises(PolylineDecodeError):
            decode(CANONICAL[:-1])

    def test_latitude_without_longitude_raises(self):
        # "_p~iF" is a complete latitude with no longitude after it
        with pytest.raises(PolylineDecodeError):
            decode("_p~iF")

    def test_invalid_character_raises(self):
        with pytest.raises(PolylineDecodeError, match="Invalid polyline character"):
            decode("_p~iF ~ps|U")

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            decode("~")


class TestEncode:
    """Tests for encode()."""

    def test_canonical_example(self):
        assert encode(CANONICAL_PATH) == CANONICAL

    def test_empty(self):
        assert encode([]) == ""

    def test_decodes_back_at_precision(self):
        path = [(-3.70379, 40.41678), (-3.70012, 40.41801), (-3.69955, 40.41522)]
        for (lon, lat), (dlon, dlat) in zip(path, decode(encode(path))):
            assert dlon == pytest.approx(lon, abs=1e-5)
            assert dlat == pytest.approx(lat, abs=1e-5)
