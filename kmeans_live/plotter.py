import numpy as np
import matplotlib.pyplot as plt
from matplotlib import patheffects

from kmeans_live.config import DEFAULT_PALETTE, BACKGROUND_COLOR
from kmeans_live.model import ClusterModel


def point_colors(labels, n_clusters, palette=DEFAULT_PALETTE):
    """
    Map cluster labels to palette colors. Ids past the end of the palette
    share its last color, and so do points without a valid cluster.
    """
    labels = np.asarray(labels, dtype=int)
    last = len(palette) - 1
    idx = np.where((labels >= 0) & (labels < n_clusters), np.minimum(labels, last), last)
    return [palette[i] for i in idx]


def format_summary(model: ClusterModel) -> str:
    """Info panel text: sizes, then centroid and population per cluster."""
    lines = [f"Clusters: {model.n_clusters}", f"Points: {model.n_points}"]
    for i, c in enumerate(model.clusters):
        lines.append("")
        lines.append(f"Cluster #{i + 1}:")
        lines.append(f"\tCentroid ({c.mean[0]:.6f}, {c.mean[1]:.6f})")
        lines.append(f"\tPopulation {c.population}")
    return "\n".join(lines)


def draw_model(
        ax: plt.Axes,
        model: ClusterModel,
        palette=DEFAULT_PALETTE,
        point_size: float = 8.0,
        centroid_size: float = 200.0,
        show_summary: bool = True,
) -> plt.Axes:
    """
    Draw points colored by cluster, centroid markers with `#i` tags and
    the info panel onto ``ax``. Axes span the unit square with y pointing
    down, matching screen coordinates.
    """
    ax.clear()
    ax.set_facecolor(BACKGROUND_COLOR)
    ax.set_xlim(0, 1)
    ax.set_ylim(1, 0)
    ax.set_aspect('equal', 'box')
    ax.set_xticks([])
    ax.set_yticks([])

    # 1) Points
    if model.n_points:
        ax.scatter(
            model.points[:, 0], model.points[:, 1],
            c=point_colors(model.labels, model.n_clusters, palette),
            s=point_size,
            marker='s',
            linewidths=0,
        )

    # 2) Centroids, black rim under the cluster color
    if model.n_clusters:
        means = model.means
        ax.scatter(
            means[:, 0], means[:, 1],
            c=point_colors(np.arange(model.n_clusters), model.n_clusters, palette),
            s=centroid_size,
            marker='s',
            edgecolor='black',
            linewidth=2,
            zorder=3,
        )
        outline = [patheffects.withStroke(linewidth=2, foreground=(0, 0, 0, 0.8))]
        for i, (x, y) in enumerate(means):
            ax.text(
                x, y, f"#{i}",
                color='white',
                fontsize=10,
                ha='center', va='center',
                path_effects=outline,
                zorder=4,
            )

    # 3) Info panel
    if show_summary:
        ax.text(
            0.02, 0.98, format_summary(model),
            transform=ax.transAxes,
            color='white',
            fontsize=9,
            ha='left', va='top',
            bbox=dict(facecolor='black', alpha=0.7, edgecolor='none', pad=8),
            zorder=5,
        )
    return ax


def plot_model(
        model: ClusterModel,
        title: str = None,
        palette=DEFAULT_PALETTE,
        figsize: tuple = (9, 9),
        savepath: str = None,
        point_size: float = 8.0,
) -> plt.Axes:
    """
    Render ``model`` on a fresh figure.

    Args:
      model      : the ClusterModel to draw
      title      : figure title
      palette    : list of colors, last one is the fallback
      figsize    : figure size
      savepath   : if given, calls fig.savefig(savepath)
      point_size : marker size for data points

    Returns:
      ax : the matplotlib Axes instance
    """
    fig, ax = plt.subplots(figsize=figsize)
    fig.patch.set_facecolor(BACKGROUND_COLOR)
    draw_model(ax, model, palette=palette, point_size=point_size)
    if title:
        ax.set_title(title, color='white')
    plt.tight_layout()

    if savepath:
        fig.savefig(savepath, facecolor=fig.get_facecolor())

    return ax
