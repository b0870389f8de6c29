"""Encoded polyline codec (Google format, as returned by OSRM with geometries=polyline)."""

from typing import Iterable, List

from houseplanner.models.request import Coordinate


def _encode_value(value: int) -> str:
    value = ~(value << 1) if value < 0 else value << 1
    chunks = []
    while value >= 0x20:
        chunks.append(chr((0x20 | (value & 0x1F)) + 63))
        value >>= 5
    chunks.append(chr(value + 63))
    return "".join(chunks)


def encode_polyline(points: Iterable[Coordinate], precision: int = 5) -> str:
    factor = 10 ** precision
    encoded = []
    prev_lat = prev_lng = 0
    for point in points:
        lat = int(round(point.lat * factor))
        lng = int(round(point.lng * factor))
        encoded.append(_encode_value(lat - prev_lat))
        encoded.append(_encode_value(lng - prev_lng))
        prev_lat, prev_lng = lat, lng
    return "".join(encoded)


def decode_polyline(encoded: str, precision: int = 5) -> List[Coordinate]:
    """Decode an encoded polyline into coordinates.

    Raises ValueError on truncated input.
    """
    factor = 10 ** precision
    points: List[Coordinate] = []
    index = lat = lng = 0
    length = len(encoded)

    while index < length:
        deltas = []
        for _ in range(2):
            shift = result = 0
            while True:
                if index >= length:
                    raise ValueError("Truncated polyline")
                byte = ord(encoded[index]) - 63
                index += 1
                result |= (byte & 0x1F) << shift
                shift += 5
                if byte < 0x20:
                    break
            deltas.append(~(result >> 1) if result & 1 else result >> 1)

        lat += deltas[0]
        lng += deltas[1]
        points.append(Coordinate(lat=lat / factor, lng=lng / factor))

    return points
