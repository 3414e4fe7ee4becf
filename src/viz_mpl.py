# src/viz_mpl.py
import numpy as np


def make_figure(pts, color, title_text="", point_size=1.0):
    import matplotlib.pyplot as plt
    from mpl_toolkits.mplot3d import Axes3D  # noqa

    fig = plt.figure(figsize=(8, 6), dpi=120)
    ax = fig.add_subplot(111, projection="3d")
    ax.set_facecolor("white")

    pts = np.asarray(pts)
    ax.scatter(pts[:, 0], pts[:, 1], pts[:, 2], s=point_size, alpha=0.8, color=tuple(color))

    ax.grid(False)
    ax.set_xlabel("X"); ax.set_ylabel("Y"); ax.set_zlabel("Z")
    ax.set_box_aspect([1, 1, 1])
    if title_text:
        fig.suptitle(title_text, fontsize=11, y=0.98)
    return fig


def show_points(pts, color, title_text="", point_size=1.0):
    """Blocking matplotlib viewer for already-normalized points."""
    import matplotlib.pyplot as plt

    fig = make_figure(pts, color, title_text=title_text, point_size=point_size)
    if fig.canvas.manager is not None and title_text:
        fig.canvas.manager.set_window_title(title_text)
    plt.show()
    plt.close(fig)
