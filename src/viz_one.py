import sys, json, argparse, traceback
from pathlib import Path

import numpy as np
import yaml

from normalize import RobustFrame, normalize_points, robust_frame
from points_io import EmptyPointSetError, load_points
from view_utils import (
    BACKENDS, DEFAULT_INPUT, error, fmt_vec, load_config, merge_config, status,
)

EXIT_OK = 0
EXIT_CANNOT_OPEN = 1
EXIT_NO_POINTS = -1
EXIT_BAD_CONFIG = 2


# ---------------- Open3D presenter ----------------
def build_cloud(points):
    """PointCloud holding the ORIGINAL points, in file order."""
    import open3d as o3d
    pcd = o3d.geometry.PointCloud()
    pcd.points = o3d.utility.Vector3dVector(np.asarray(points, dtype=np.float64))
    return pcd


def apply_frame(pcd, frame: RobustFrame):
    # after the translation the center sits at the origin, so scaling about
    # (0,0,0) is scaling about the center
    pcd.translate(-np.asarray(frame.center, dtype=np.float64))
    pcd.scale(float(frame.scale), center=np.zeros(3))
    return pcd


def paint(pcd, color):
    pcd.paint_uniform_color(list(color))
    return pcd


def show(geometries, window_name, width=1280, height=720):
    import open3d as o3d
    o3d.visualization.draw_geometries(geometries, window_name=window_name, width=width, height=height)


def present_open3d(points, frame, disp, title):
    pcd = build_cloud(points)
    apply_frame(pcd, frame)
    paint(pcd, disp["color"])
    status("Displaying geometry...")
    status("Press 'Q' in the window to exit.")
    show([pcd], title, width=int(disp["width"]), height=int(disp["height"]))


def present_matplotlib(points, frame, disp, title):
    import viz_mpl
    pts = normalize_points(points, frame.center, frame.scale)
    status("Displaying geometry (matplotlib)...")
    status("Close the window to exit.")
    viz_mpl.show_points(pts, disp["color"], title_text=title, point_size=float(disp["point_size"]))


def present(points, frame, disp, title, backend="auto"):
    if backend == "open3d":
        present_open3d(points, frame, disp, title)
    elif backend == "matplotlib":
        present_matplotlib(points, frame, disp, title)
    else:
        try:
            present_open3d(points, frame, disp, title)
        except Exception:
            error("Open3D failed, falling back to Matplotlib:\n" + traceback.format_exc())
            present_matplotlib(points, frame, disp, title)


# ---------------- pipeline ----------------
def summarize(path, num_points, frame: RobustFrame) -> dict:
    return {
        "file": Path(path).name,
        "num_points": int(num_points),
        "center": [round(float(c), 6) for c in frame.center],
        "scale": float(frame.scale),
        "extent": [round(float(e), 6) for e in frame.extent],
    }


def run(path=DEFAULT_INPUT, cfg=None, backend=None, as_json=False) -> int:
    """load -> robust center/scale -> present. Returns a process exit code."""
    cfg = cfg if cfg is not None else merge_config()
    disp = dict(cfg["display"])
    st = cfg["statistics"]

    try:
        ps = load_points(path)
    except OSError as e:
        error(f"cannot open {path}: {e}")
        return EXIT_CANNOT_OPEN
    except EmptyPointSetError:
        error(f"no points loaded from {path}, check the file")
        return EXIT_NO_POINTS

    n = ps.points.shape[0]
    status(f"Loaded {n} points from {path}")

    status("Computing robust (median/percentile) bounds...")
    frame = robust_frame(
        ps.xs, ps.ys, ps.zs,
        lower=float(st["lower_percentile"]),
        upper=float(st["upper_percentile"]),
        min_extent=float(st["min_extent"]),
    )
    kept = 100.0 * (float(st["upper_percentile"]) - float(st["lower_percentile"]))
    status(f"  Robust center (median): {fmt_vec(frame.center)}")
    status(f"  Robust scale: {frame.scale:.6g} (based on {kept:.0f}% of data)")

    title = disp["window_name"] or f"Robust view | File: {Path(path).name}"
    present(ps.points, frame, disp, title, backend=backend or disp["backend"])
    status("Viewer closed.")

    if as_json:
        print(json.dumps(summarize(path, n, frame), indent=2))
    return EXIT_OK


def parse_args(argv=None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description=f"Normalize {DEFAULT_INPUT} with a median/percentile frame and view it",
    )
    ap.add_argument("--config", default=None, help="Path to a YAML config (e.g., configs/robust_view.yaml)")
    ap.add_argument("--backend", choices=BACKENDS, default=None, help="Viewer backend (overrides config)")
    ap.add_argument("--json", action="store_true", help="Print a JSON summary after the viewer closes")
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        cfg = merge_config(load_config(args.config) if args.config else None)
    except (OSError, ValueError, yaml.YAMLError) as e:
        error(f"bad config {args.config}: {e}")
        return EXIT_BAD_CONFIG
    return run(DEFAULT_INPUT, cfg, backend=args.backend, as_json=args.json)


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
