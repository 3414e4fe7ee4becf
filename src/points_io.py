# src/points_io.py
import math, re
from typing import Iterable, Iterator, NamedTuple, Tuple, Union
from pathlib import Path

import numpy as np


class EmptyPointSetError(ValueError):
    """The input opened fine but yielded no complete (x, y, z) triple."""


class PointSet(NamedTuple):
    points: np.ndarray  # (N,3) read-only, file order
    xs: np.ndarray      # writable per-axis copies, reordered by order statistics
    ys: np.ndarray
    zs: np.ndarray


# plain ASCII decimal literals only: no nan/inf, no digit separators, no
# non-ASCII digits
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?", re.ASCII)


def _parse_float(token: str):
    if not _DECIMAL.fullmatch(token):
        return None
    v = float(token)
    # overflow, e.g. 1e999
    return v if math.isfinite(v) else None


def iter_xyz(lines: Iterable[str]) -> Iterator[Tuple[float, float, float]]:
    """
    Yield (x, y, z) from whitespace-separated tokens, ignoring line breaks.
    Stops at the first unparsable token; a trailing incomplete triple is dropped.
    """
    triple = []
    for line in lines:
        for tok in line.split():
            v = _parse_float(tok)
            if v is None:
                return
            triple.append(v)
            if len(triple) == 3:
                yield triple[0], triple[1], triple[2]
                triple = []


def split_axes(points: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Independent contiguous copies of the x, y, z columns."""
    return tuple(np.array(points[:, i], dtype=np.float64) for i in range(3))


def load_points(path: Union[str, Path]) -> PointSet:
    """
    Read an ASCII xyz file. Raises OSError if it cannot be opened and
    EmptyPointSetError if no point was parsed.
    """
    # undecodable bytes become U+FFFD and end parsing like any other bad token
    with open(path, "r", encoding="ascii", errors="replace") as f:
        triples = list(iter_xyz(f))

    if not triples:
        raise EmptyPointSetError(f"no points parsed from {path}")

    pts = np.array(triples, dtype=np.float64).reshape(-1, 3)
    pts.setflags(write=False)
    xs, ys, zs = split_axes(pts)
    return PointSet(points=pts, xs=xs, ys=ys, zs=zs)
