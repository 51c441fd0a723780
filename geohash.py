import logging
import math
from typing import NamedTuple

logger = logging.getLogger(__name__)

MIN_LAT = -90.0
MAX_LAT = 90.0
MIN_LNG = -180.0
MAX_LNG = 180.0

BASE32 = "0123456789bcdefghjkmnpqrstuvwxyz"  # Standard Base32 characters
MAX_PRECISION = 12

_FRACTION_SCALE = 1 << 32
_MAX_FRACTION = _FRACTION_SCALE - 1
_MASK64 = (1 << 64) - 1
_BASE32_INDEX = {c: i for i, c in enumerate(BASE32)}


class GeohashError(ValueError):
    """Base class for every input rejected by the codec."""


class FormatError(GeohashError):
    """Input is not shaped like a "lat, lng" pair or a geohash."""


class ParseError(FormatError):
    """A latitude or longitude token is not a number."""


class RangeError(GeohashError):
    """Coordinate or radius outside its valid bounds."""


class InvalidCharacterError(GeohashError):
    def __init__(self, char: str, index: int):
        super().__init__(f"invalid character {char!r} at index {index}")
        self.char = char
        self.index = index


class Coordinate(NamedTuple):
    lat: float
    lng: float


def check_coordinate(lat: float, lng: float) -> Coordinate:
    """Return the pair unchanged if it lies on the globe, else raise RangeError."""
    if not MIN_LAT <= lat <= MAX_LAT:
        raise RangeError(f"latitude must be in the range [{MIN_LAT:g}, {MAX_LAT:g}], got {lat}")
    if not MIN_LNG <= lng <= MAX_LNG:
        raise RangeError(f"longitude must be in the range [{MIN_LNG:g}, {MAX_LNG:g}], got {lng}")
    return Coordinate(lat, lng)


def parse_coordinate(text: str) -> Coordinate:
    """Parse a "lat, lng" string into a validated Coordinate."""
    parts = text.split(",")
    if len(parts) != 2:
        logger.debug("rejecting coordinate input %r: %d parts", text, len(parts))
        raise FormatError('invalid coordinates format, use "lat, lng"')

    values = []
    for name, token in zip(("latitude", "longitude"), parts):
        token = token.strip()
        try:
            values.append(float(token))
        except ValueError:
            logger.debug("rejecting coordinate input %r: bad %s", text, name)
            raise ParseError(f"{name} {token!r} is not a number") from None

    return check_coordinate(*values)


def map_to_fraction(value: float, lo: float, hi: float) -> int:
    """Scale a value in [lo, hi] onto the unsigned 32-bit range.

    Only value == hi would land on 2**32; it is folded into the top cell.
    """
    fraction = math.floor(_FRACTION_SCALE * ((value - lo) / (hi - lo)))
    return min(fraction, _MAX_FRACTION)


def unmap_fraction(fraction: int, lo: float, hi: float) -> float:
    return lo + fraction / _FRACTION_SCALE * (hi - lo)


def interleave(lat32: int, lng32: int) -> int:
    """Spread two 32-bit values over 64 bits: latitude on even bits, longitude on odd."""
    result = 0
    for i in range(32):
        result |= ((lat32 >> i) & 1) << (2 * i)
        result |= ((lng32 >> i) & 1) << (2 * i + 1)
    return result


def deinterleave(key: int) -> tuple[int, int]:
    lat32 = lng32 = 0
    for i in range(32):
        lat32 |= ((key >> (2 * i)) & 1) << i
        lng32 |= ((key >> (2 * i + 1)) & 1) << i
    return lat32, lng32


def uint64_to_base32(key: int, length: int = MAX_PRECISION) -> str:
    """Emit `length` characters from the top of a 64-bit key, 5 bits each."""
    result = []
    for _ in range(length):
        result.append(BASE32[key >> 59])
        key = (key << 5) & _MASK64
    return "".join(result)


def base32_to_uint64(geohash: str) -> int:
    """Rebuild the 64-bit key for a validated geohash, zero-filling the unused low bits."""
    result = 0
    for char in geohash:
        result = (result << 5) | _BASE32_INDEX[char]
    return result << (64 - 5 * len(geohash))


def validate_geohash(geohash: str) -> None:
    """Raise on the first character outside the alphabet, then on a bad length."""
    for index, char in enumerate(geohash):
        if char not in _BASE32_INDEX:
            logger.debug("rejecting geohash %r at index %d", geohash, index)
            raise InvalidCharacterError(char, index)
    if not 1 <= len(geohash) <= MAX_PRECISION:
        raise FormatError(
            f"geohash must be 1 to {MAX_PRECISION} characters long, got {len(geohash)}"
        )


def _check_precision(precision: int) -> None:
    if not 1 <= precision <= MAX_PRECISION:
        raise ValueError(f"Precision must be between 1 and {MAX_PRECISION}")


def encode(lat: float, lng: float, precision: int = MAX_PRECISION) -> str:
    """Encode a latitude and longitude into a geohash of `precision` characters."""
    _check_precision(precision)
    check_coordinate(lat, lng)

    lat32 = map_to_fraction(lat, MIN_LAT, MAX_LAT)
    lng32 = map_to_fraction(lng, MIN_LNG, MAX_LNG)
    return uint64_to_base32(interleave(lat32, lng32), precision)


def decode(geohash: str) -> Coordinate:
    """Decode a geohash into the south-west corner of its cell.

    For a full 12-character hash the cell is small enough that the corner is
    within a few 1e-7 degrees of the encoded point.
    """
    validate_geohash(geohash)
    return _decode_key(geohash)


def _decode_key(geohash: str) -> Coordinate:
    lat32, lng32 = deinterleave(base32_to_uint64(geohash))
    return Coordinate(
        unmap_fraction(lat32, MIN_LAT, MAX_LAT),
        unmap_fraction(lng32, MIN_LNG, MAX_LNG),
    )


class Geohash:
    BASE32 = BASE32

    def __init__(self, precision: int = MAX_PRECISION):
        """Initialize Geohash encoder/decoder with given precision."""
        _check_precision(precision)
        self.precision = precision

    def encode(self, lat: float, lng: float) -> str:
        return encode(lat, lng, self.precision)

    def decode(self, geohash: str) -> Coordinate:
        """Decode a geohash whose length matches this codec's precision."""
        validate_geohash(geohash)
        if len(geohash) != self.precision:
            raise FormatError(
                f"Geohash length {len(geohash)} doesn't match precision {self.precision}"
            )
        return _decode_key(geohash)

    def cell_size(self) -> tuple[float, float]:
        """Calculate the size of one geohash cell at this precision.

        Returns:
            (latitude_degrees, longitude_degrees)
        """
        bit_length = self.precision * 5
        lat_bits = bit_length // 2
        lng_bits = bit_length - lat_bits

        return (MAX_LAT - MIN_LAT) / (1 << lat_bits), (MAX_LNG - MIN_LNG) / (1 << lng_bits)


if __name__ == "__main__":
    geo = Geohash(precision=12)
    encoded = geo.encode(21.0278, 105.8342)  # Hanoi
    decoded = geo.decode(encoded)

    print(f"Encoded: {encoded}")
    print(f"Decoded: {decoded}")
    print(f"Cell size: {geo.cell_size()}")
