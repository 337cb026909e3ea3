import matplotlib
matplotlib.use("Agg")

import logging
from types import SimpleNamespace

import matplotlib.pyplot as plt
import numpy as np
import pytest

from kmeans_live import editing
from kmeans_live.config import VisualizerConfig
from kmeans_live.model import ClusterModel
from kmeans_live.viewer import KMeansViewer, LEFT_BUTTON, RIGHT_BUTTON


@pytest.fixture
def viewer():
    config = VisualizerConfig(point_count=400, cluster_count=3, random_state=0)
    v = KMeansViewer.from_config(config)
    yield v
    plt.close(v.fig)


def key(k):
    return SimpleNamespace(key=k)


def mouse(v, button, x=0.5, y=0.5, inside=True):
    return SimpleNamespace(
        button=button,
        inaxes=v.ax if inside else None,
        xdata=x if inside else None,
        ydata=y if inside else None,
    )


def test_from_config_builds_model(viewer):
    assert viewer.model.n_points == 400
    assert viewer.model.n_clusters == 3


def test_space_recomputes(viewer):
    viewer.on_key(key(' '))
    assert viewer.model.populations.sum() == 400
    assert np.all(viewer.model.valid_label_mask())


def test_plus_minus_resize_by_batch(viewer):
    viewer.on_key(key('+'))
    assert viewer.model.n_points == 400 + 128
    viewer.on_key(key('-'))
    viewer.on_key(key('-'))
    assert viewer.model.n_points == 400 - 128


def test_up_down_change_clusters(viewer):
    viewer.on_key(key('up'))
    assert viewer.model.n_clusters == 4
    for _ in range(6):
        viewer.on_key(key('down'))
    assert viewer.model.n_clusters == 0

    # recompute with no clusters is harmless
    viewer.on_key(key(' '))


def test_r_rescatters_points(viewer):
    before = viewer.model.points.copy()
    viewer.on_key(key('r'))
    assert viewer.model.n_points == 400
    assert not np.array_equal(before, viewer.model.points)


def test_unknown_key_is_ignored(viewer):
    before = viewer.model.points.copy()
    viewer.on_key(key('x'))
    np.testing.assert_array_equal(before, viewer.model.points)


def test_left_click_seeds_points(viewer):
    viewer.on_press(mouse(viewer, LEFT_BUTTON, 0.3, 0.7))
    new = viewer.model.points[400:]
    assert len(new) == viewer.config.click_count
    assert np.all(np.abs(new - [0.3, 0.7]) <= viewer.config.click_half_width + 1e-12)


def test_click_outside_axes_is_ignored(viewer):
    viewer.on_press(mouse(viewer, LEFT_BUTTON, inside=False))
    assert viewer.model.n_points == 400


def test_right_drag_erases(viewer):
    radius = viewer.config.erase_radius

    viewer.on_press(mouse(viewer, RIGHT_BUTTON, 0.5, 0.5))
    assert viewer.is_erasing
    assert np.all(np.linalg.norm(viewer.model.points - [0.5, 0.5], axis=1) >= radius)

    viewer.on_motion(mouse(viewer, None, 0.2, 0.2))
    assert np.all(np.linalg.norm(viewer.model.points - [0.2, 0.2], axis=1) >= radius)

    viewer.on_release(mouse(viewer, RIGHT_BUTTON))
    assert not viewer.is_erasing

    # moving without the button held does nothing
    editing.add_points_around(viewer.model, 0.8, 0.8, count=5, half_width=0.005)
    count = viewer.model.n_points
    viewer.on_motion(mouse(viewer, None, 0.8, 0.8))
    assert viewer.model.n_points == count


def test_escape_closes_figure():
    v = KMeansViewer(ClusterModel(10, 1, random_state=0))
    num = v.fig.number
    v.on_key(key('escape'))
    assert not plt.fignum_exists(num)


def test_viewer_keys_released_from_toolbar_shortcuts():
    with plt.rc_context({'keymap.home': ['h', 'r', 'home']}):
        v = KMeansViewer(ClusterModel(10, 1, random_state=0))
        # 'r' re-scatters points instead of resetting the view
        assert 'r' not in plt.rcParams['keymap.home']
        assert plt.rcParams['keymap.home'] == ['h', 'home']
        plt.close(v.fig)


def test_m_logs_metrics(viewer, caplog):
    viewer.on_key(key(' '))
    with caplog.at_level(logging.INFO, logger='kmeans_live.viewer'):
        viewer.on_key(key('m'))
    assert 'silhouette' in caplog.text
    assert 'inertia' in caplog.text
    assert viewer.model.n_points == 400
