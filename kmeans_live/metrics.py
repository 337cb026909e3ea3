"""
Quality statistics for the current assignment of a ClusterModel.

Only points whose label indexes a live cluster take part, so the numbers
describe the state left by the last recompute. The sklearn scores are
O(n^2) in the number of points; call them on demand, not per redraw.
"""
import numpy as np
import pandas as pd
from sklearn.metrics import (
    silhouette_score,
    calinski_harabasz_score,
    davies_bouldin_score,
)

from kmeans_live.model import ClusterModel


def _labelled(model: ClusterModel):
    """Points and labels restricted to those with a valid cluster index."""
    mask = model.valid_label_mask()
    return model.points[mask], model.labels[mask]


def _scorable(labels):
    # sklearn needs 2 <= n_labels <= n_samples - 1
    return 1 < len(np.unique(labels)) < len(labels)


def compute_silhouette(X, labels):
    return silhouette_score(X, labels) if _scorable(labels) else np.nan


def compute_calinski_harabasz(X, labels):
    return calinski_harabasz_score(X, labels) if _scorable(labels) else np.nan


def compute_davies_bouldin(X, labels):
    return davies_bouldin_score(X, labels) if _scorable(labels) else np.nan


def point_distances(model: ClusterModel):
    """Distance of every labelled point to its cluster mean, with the labels."""
    X, labels = _labelled(model)
    if len(X) == 0:
        return np.zeros(0), labels
    return np.linalg.norm(X - model.means[labels], axis=1), labels


def assigned_counts(model: ClusterModel) -> np.ndarray:
    """Labelled points per cluster, counted from the labels themselves."""
    _, labels = _labelled(model)
    return np.bincount(labels, minlength=model.n_clusters)


def compute_wcss_per_cluster(model: ClusterModel) -> np.ndarray:
    """Within-cluster sum of squares, one entry per cluster (0 when empty)."""
    d, labels = point_distances(model)
    return np.bincount(labels, weights=d**2, minlength=model.n_clusters)


def compute_avg_distance_per_cluster(model: ClusterModel) -> np.ndarray:
    """Mean point-to-centroid distance per cluster (nan when empty)."""
    d, labels = point_distances(model)
    totals = np.bincount(labels, weights=d, minlength=model.n_clusters)
    counts = assigned_counts(model)
    avg = np.full(model.n_clusters, np.nan)
    np.divide(totals, counts, out=avg, where=counts > 0)
    return avg


def compute_inertia(model: ClusterModel) -> float:
    """Sum of squared distances of assigned points to their cluster mean."""
    return float(compute_wcss_per_cluster(model).sum())


def compute_unbalanced_factor(model: ClusterModel) -> float:
    """Largest over smallest non-empty cluster; nan with fewer than two."""
    counts = assigned_counts(model)
    counts = counts[counts > 0]
    if len(counts) < 2:
        return float('nan')
    return float(counts.max() / counts.min())


def cluster_summary(model: ClusterModel) -> pd.DataFrame:
    """One row per cluster: mean coordinate, population and spread."""
    means = model.means
    return pd.DataFrame({
        "cluster": np.arange(model.n_clusters),
        "mean_x": means[:, 0],
        "mean_y": means[:, 1],
        "population": model.populations,
        "avg_distance": compute_avg_distance_per_cluster(model),
        "wcss": compute_wcss_per_cluster(model),
    })


def compute_all_metrics(model: ClusterModel) -> dict:
    X, labels = _labelled(model)
    return {
        "silhouette": compute_silhouette(X, labels),
        "calinski_harabasz": compute_calinski_harabasz(X, labels),
        "davies_bouldin": compute_davies_bouldin(X, labels),
        "inertia": compute_inertia(model),
        "unbalanced_factor": compute_unbalanced_factor(model),
        "assigned": int(len(labels)),
    }


def format_metrics(model: ClusterModel) -> str:
    """Multi-line report: per-cluster table followed by the global scores."""
    lines = [cluster_summary(model).to_string(index=False)]
    for name, value in compute_all_metrics(model).items():
        lines.append(f"{name}: {value:.6g}" if isinstance(value, float) else f"{name}: {value}")
    return "\n".join(lines)
