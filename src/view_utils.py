import copy, sys
from pathlib import Path
from typing import Dict, Optional, Union

import yaml

TAG = "[robust_view]"

# ---------------------------
# Config
# ---------------------------
DEFAULT_INPUT = "../optimized_points.txt"

BACKENDS = ("auto", "open3d", "matplotlib")

DEFAULT_CONFIG: Dict[str, dict] = {
    "statistics": {
        "lower_percentile": 0.05,
        "upper_percentile": 0.95,
        "min_extent": 1e-6,
    },
    "display": {
        "backend": "auto",
        "color": [0.9, 0.9, 0.1],   # bright yellow
        "window_name": None,        # None -> derived from the input file name
        "width": 1280,
        "height": 720,
        "point_size": 1.0,          # matplotlib only
    },
}


def load_config(path: Union[str, Path]) -> dict:
    """
    Load a YAML config file into a Python dict.
    """
    with open(path, "r") as f:
        cfg = yaml.safe_load(f)
    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        raise ValueError(f"{path}: top level of the config must be a mapping")
    return cfg


def merge_config(overrides: Optional[dict] = None) -> dict:
    """Deep-merge user overrides over DEFAULT_CONFIG and validate the result."""
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    for section, values in (overrides or {}).items():
        if section not in cfg:
            raise ValueError(f"unknown config section: {section!r}")
        if not isinstance(values, dict):
            raise ValueError(f"config section {section!r} must be a mapping")
        for key, val in values.items():
            if key not in cfg[section]:
                raise ValueError(f"unknown config key: {section}.{key}")
            cfg[section][key] = val
    validate_config(cfg)
    return cfg


def validate_config(cfg: dict):
    try:
        _check_values(cfg)
    except TypeError as e:
        # null, list or mapping where a number or string belongs
        raise ValueError(f"bad config value: {e}") from e


def _check_values(cfg: dict):
    st = cfg["statistics"]
    lo, hi = float(st["lower_percentile"]), float(st["upper_percentile"])
    if not 0.0 <= lo <= hi <= 1.0:
        raise ValueError(f"percentiles must satisfy 0 <= lower <= upper <= 1, got {lo}, {hi}")
    if float(st["min_extent"]) < 0:
        raise ValueError("statistics.min_extent must be >= 0")

    disp = cfg["display"]
    if disp["backend"] not in BACKENDS:
        raise ValueError(f"display.backend must be one of {BACKENDS}, got {disp['backend']!r}")
    disp["color"] = parse_color(disp["color"])
    for key in ("width", "height"):
        if int(disp[key]) <= 0:
            raise ValueError(f"display.{key} must be positive")
    if float(disp["point_size"]) <= 0:
        raise ValueError("display.point_size must be positive")
    if disp["window_name"] is not None and not isinstance(disp["window_name"], str):
        raise ValueError(f"display.window_name must be a string or null, got {disp['window_name']!r}")


def parse_color(value) -> list:
    """Three floats in [0, 1]."""
    try:
        rgb = [float(c) for c in value]
    except (TypeError, ValueError):
        raise ValueError(f"color must be three numbers, got {value!r}")
    if len(rgb) != 3 or any(c < 0.0 or c > 1.0 for c in rgb):
        raise ValueError(f"color must be three values in [0, 1], got {value!r}")
    return rgb


# ---------------------------
# Console
# ---------------------------
def status(msg: str):
    print(f"{TAG} {msg}", flush=True)


def error(msg: str):
    print(f"{TAG} ERROR: {msg}", file=sys.stderr, flush=True)


def fmt_vec(v) -> str:
    return "(" + ", ".join(f"{float(c):.6g}" for c in v) + ")"
