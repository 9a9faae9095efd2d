"""OBJ line formatting helpers.

Rounding is half-up: ``floor(x * 10^p + 0.5) / 10^p``. Vertices keep four
decimal places, normals two.
"""

import math
from typing import Iterator, Optional, Tuple

import numpy as np

VERTEX_DECIMALS = 4
NORMAL_DECIMALS = 2


def round_to(value: float, places: int) -> float:
    factor = 10.0 ** places
    return math.floor(value * factor + 0.5) / factor


def round_array(values: np.ndarray, places: int) -> np.ndarray:
    """Vectorised round_to."""
    factor = 10.0 ** places
    return np.floor(values * factor + 0.5) / factor


def format_number(value: float) -> str:
    """Shortest decimal text for a rounded value, never in exponent form."""
    if float(value).is_integer():
        return str(int(value))  # also turns -0.0 into "0"
    text = repr(float(value))
    if "e" in text or "E" in text:
        text = np.format_float_positional(value, trim="-")
    return text


def vertex_line(x: float, y: float, z: float) -> str:
    return f"v {format_number(x)} {format_number(y)} {format_number(z)}"


def normal_line(x: float, y: float, z: float) -> str:
    return f"vn {format_number(x)} {format_number(y)} {format_number(z)}"


def face_line(a: int, b: int, c: int, normals: Optional[Tuple[int, int, int]] = None) -> str:
    """Face with 1-based vertex indices and optional ``v//n`` normal indices."""
    if normals is None:
        return f"f {a} {b} {c}"
    na, nb, nc = normals
    return f"f {a}//{na} {b}//{nb} {c}//{nc}"


def vertex_lines(points: np.ndarray) -> Iterator[str]:
    """Yield one ``v`` line per (already transformed) point."""
    for x, y, z in round_array(points, VERTEX_DECIMALS).tolist():
        yield vertex_line(x, y, z)


def normal_lines(normals: np.ndarray) -> Iterator[str]:
    """Yield one ``vn`` line per (already transformed) normal."""
    for x, y, z in round_array(normals, NORMAL_DECIMALS).tolist():
        yield normal_line(x, y, z)
