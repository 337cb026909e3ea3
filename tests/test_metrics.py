# test_metrics.py

import numpy as np
import pandas as pd
import pytest
from sklearn.datasets import make_blobs

import kmeans_live.metrics as metrics
from kmeans_live import editing
from kmeans_live.model import ClusterModel


@pytest.fixture
def blob_model():
    X, _ = make_blobs(n_samples=100, centers=3, cluster_std=0.5, random_state=0)
    X = (X - X.min(axis=0)) / (X.max(axis=0) - X.min(axis=0))
    return ClusterModel.from_arrays(X, X[[0, 1, 2]], random_state=0)


@pytest.fixture
def pairs_model():
    X = np.array([[0, 0], [1, 1], [10, 10], [11, 11], [12, 12]], dtype=float)
    model = ClusterModel.from_arrays(X, [[0.5, 0.5], [11, 11]])
    model.recompute()
    return model


def test_wcss_and_unbalanced(pairs_model):
    wcss = metrics.compute_wcss_per_cluster(pairs_model)
    # each pair point sits 0.5 squared-distance from (0.5, 0.5)
    assert pytest.approx(wcss[0]) == 0.5 + 0.5
    # (10,10) and (12,12) are 2 squared-distance from (11, 11)
    assert pytest.approx(wcss[1]) == 2.0 + 0.0 + 2.0
    assert pytest.approx(metrics.compute_inertia(pairs_model)) == 5.0

    # sizes 2 and 3
    assert pytest.approx(metrics.compute_unbalanced_factor(pairs_model)) == 1.5


def test_avg_distance_and_empty_cluster(pairs_model):
    editing.add_cluster(pairs_model)
    avg = metrics.compute_avg_distance_per_cluster(pairs_model)
    assert pytest.approx(avg[0]) == np.sqrt(0.5)
    assert pytest.approx(avg[1]) == 2 * np.sqrt(2) / 3
    # the new cluster has no points yet
    assert np.isnan(avg[2])
    assert metrics.compute_wcss_per_cluster(pairs_model)[2] == 0.0


def test_all_metrics_after_recompute(blob_model):
    blob_model.recompute()
    m = metrics.compute_all_metrics(blob_model)

    assert set(m) == {
        'silhouette',
        'calinski_harabasz',
        'davies_bouldin',
        'inertia',
        'unbalanced_factor',
        'assigned',
    }
    assert m['assigned'] == blob_model.n_points
    assert pytest.approx(m['inertia']) == metrics.compute_wcss_per_cluster(blob_model).sum()
    assert np.isfinite(m['silhouette'])


def test_metrics_ignore_unassigned_points(blob_model):
    # nothing assigned before the first pass
    m = metrics.compute_all_metrics(blob_model)
    assert m['assigned'] == 0
    assert m['inertia'] == 0.0
    assert np.isnan(m['silhouette'])
    assert np.isnan(m['unbalanced_factor'])


def test_single_cluster_scores_are_nan():
    X = np.array([[0.1, 0.1], [0.2, 0.2], [0.3, 0.1]])
    model = ClusterModel.from_arrays(X, [[0.2, 0.2]])
    model.recompute()
    m = metrics.compute_all_metrics(model)
    assert np.isnan(m['silhouette'])
    assert np.isnan(m['calinski_harabasz'])
    assert np.isnan(m['davies_bouldin'])
    assert m['assigned'] == 3


def test_cluster_summary(blob_model):
    blob_model.recompute()
    df = metrics.cluster_summary(blob_model)

    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == [
        'cluster', 'mean_x', 'mean_y', 'population', 'avg_distance', 'wcss'
    ]
    assert list(df['cluster']) == [0, 1, 2]
    assert df['population'].sum() == blob_model.n_points
    np.testing.assert_allclose(df[['mean_x', 'mean_y']].to_numpy(), blob_model.means)


def test_cluster_summary_without_clusters():
    model = ClusterModel(20, 0, random_state=0)
    df = metrics.cluster_summary(model)
    assert df.shape == (0, 6)


def test_format_metrics_report(pairs_model):
    report = metrics.format_metrics(pairs_model)
    assert 'population' in report
    assert 'inertia: 5' in report
    assert 'assigned: 5' in report
