# editing.py
"""
Live edits of a ClusterModel.

These are the commands an input driver issues: scatter or seed points,
erase around the cursor, resize the point set, add or drop a cluster.
None of them runs a recompute; labels and populations stay stale until
the next ``ClusterModel.recompute()``.
"""
import logging

import numpy as np

from kmeans_live.model import ClusterModel, Cluster, UNASSIGNED

logger = logging.getLogger(__name__)


def add_points_uniform(
    model: ClusterModel,
    count: int,
    low=(0.0, 0.0),
    high=(1.0, 1.0),
) -> None:
    """
    Append ``count`` points sampled uniformly inside the box [low, high].
    Existing points are left untouched.
    """
    if count < 0:
        raise ValueError("count must be >= 0")
    low, high = model.check_box(low, high)
    if count == 0:
        return

    start = model.n_points
    resize_points(model, start + count)
    model.randomize(start, None, low, high)
    logger.debug("Added %d points in box %s-%s", count, tuple(low), tuple(high))


def add_points_around(
    model: ClusterModel,
    x: float,
    y: float,
    count: int = 16,
    half_width: float = 0.02,
) -> None:
    """Seed ``count`` points in a small square centered on (x, y)."""
    if half_width < 0:
        raise ValueError("half_width must be >= 0")
    add_points_uniform(
        model,
        count,
        low=(x - half_width, y - half_width),
        high=(x + half_width, y + half_width),
    )


def remove_points_near(model: ClusterModel, x: float, y: float, radius: float = 0.03) -> int:
    """
    Drop every point strictly closer than ``radius`` to (x, y).
    Remaining points keep their relative order. Returns how many were removed.
    """
    if radius < 0:
        raise ValueError("radius must be >= 0")
    if model.n_points == 0:
        return 0

    dists = np.linalg.norm(model.points - np.array([x, y], dtype=float), axis=1)
    keep = dists >= radius
    removed = int(model.n_points - keep.sum())
    if removed:
        model.points = model.points[keep]
        model.labels = model.labels[keep]
        logger.debug("Erased %d points around (%.3f, %.3f)", removed, x, y)
    return removed


def resize_points(model: ClusterModel, new_count: int) -> None:
    """
    Truncate or grow the point set to ``max(new_count, 0)``.
    New points sit at (0, 0), unassigned, until the caller randomizes them.
    """
    new_count = max(int(new_count), 0)
    old_count = model.n_points
    if new_count <= old_count:
        model.points = model.points[:new_count]
        model.labels = model.labels[:new_count]
        return

    extra = new_count - old_count
    model.points = np.vstack([model.points, np.zeros((extra, 2))])
    model.labels = np.concatenate([model.labels, np.full(extra, UNASSIGNED, dtype=int)])


def grow_points(model: ClusterModel, step: int = 128) -> None:
    """Scatter ``step`` more points over the whole unit square."""
    add_points_uniform(model, step)


def shrink_points(model: ClusterModel, step: int = 128) -> None:
    """Drop the last ``step`` points (never below zero)."""
    if step < 0:
        raise ValueError("step must be >= 0")
    resize_points(model, model.n_points - step)


def reset_points(model: ClusterModel) -> None:
    """Re-scatter every point over the unit square; clusters keep their means."""
    model.randomize()
    logger.debug("Re-randomized %d points", model.n_points)


def add_cluster(model: ClusterModel) -> Cluster:
    cluster = Cluster(mean=np.zeros(2), population=0, id=model.n_clusters)
    model.clusters.append(cluster)
    model.reindex_clusters()
    logger.debug("Added cluster #%d", cluster.id)
    return cluster


def remove_last_cluster(model: ClusterModel) -> None:
    """
    Drop the last cluster. No-op when there are none. Points that were
    assigned to it become unassigned until the next recompute.
    """
    if not model.clusters:
        return
    removed = model.clusters.pop()
    model.labels[model.labels == removed.id] = UNASSIGNED
    model.reindex_clusters()
    logger.debug("Removed cluster #%d", removed.id)
