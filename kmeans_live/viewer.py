"""
Interactive matplotlib front end.

Keys:
  space   one recompute pass
  r       re-scatter all points
  + / -   add / remove a batch of points
  up/down add / remove a cluster
  m       log cluster metrics
  escape  close

Mouse:
  left click         seed points around the cursor
  right press / drag erase points around the cursor
"""
import logging

import matplotlib.pyplot as plt

from kmeans_live import editing
from kmeans_live.config import VisualizerConfig, BACKGROUND_COLOR
from kmeans_live.metrics import format_metrics
from kmeans_live.model import ClusterModel
from kmeans_live.plotter import draw_model

logger = logging.getLogger(__name__)

LEFT_BUTTON = 1
RIGHT_BUTTON = 3

VIEWER_KEYS = (' ', 'r', '+', '-', 'up', 'down', 'm', 'escape')


def release_default_keymaps(keys=VIEWER_KEYS):
    """Unbind ``keys`` from matplotlib's toolbar shortcuts ('r' is home by default)."""
    for name in [n for n in plt.rcParams if n.startswith('keymap.')]:
        plt.rcParams[name] = [k for k in plt.rcParams[name] if k not in keys]


class KMeansViewer:
    def __init__(self, model: ClusterModel, config: VisualizerConfig = None, fig=None):
        self.model = model
        self.config = config or VisualizerConfig()
        self.is_erasing = False

        release_default_keymaps()
        if fig is None:
            fig, ax = plt.subplots(figsize=self.config.figsize, dpi=self.config.dpi)
        else:
            ax = fig.axes[0] if fig.axes else fig.add_subplot()
        self.fig = fig
        self.ax = ax
        self.fig.patch.set_facecolor(BACKGROUND_COLOR)

        self._key_actions = {
            ' ': lambda: self.model.recompute(),
            'r': lambda: editing.reset_points(self.model),
            '+': lambda: editing.grow_points(self.model, self.config.batch_step),
            '-': lambda: editing.shrink_points(self.model, self.config.batch_step),
            'up': lambda: editing.add_cluster(self.model),
            'down': lambda: editing.remove_last_cluster(self.model),
            'm': self.report_metrics,
        }

        canvas = self.fig.canvas
        self._cids = [
            canvas.mpl_connect('key_press_event', self.on_key),
            canvas.mpl_connect('button_press_event', self.on_press),
            canvas.mpl_connect('button_release_event', self.on_release),
            canvas.mpl_connect('motion_notify_event', self.on_motion),
        ]
        self.redraw()

    @classmethod
    def from_config(cls, config: VisualizerConfig) -> "KMeansViewer":
        model = ClusterModel(
            point_count=config.point_count,
            cluster_count=config.cluster_count,
            random_state=config.random_state,
        )
        return cls(model, config)

    def redraw(self):
        draw_model(
            self.ax,
            self.model,
            palette=self.config.palette,
            point_size=self.config.point_size,
            centroid_size=self.config.centroid_size,
        )
        self.fig.canvas.draw_idle()

    def report_metrics(self) -> str:
        report = format_metrics(self.model)
        logger.info("Cluster metrics:\n%s", report)
        return report

    def close(self):
        for cid in self._cids:
            self.fig.canvas.mpl_disconnect(cid)
        self._cids = []
        plt.close(self.fig)

    # ── Event handlers ───────────────────────────────────────────────────────

    def on_key(self, event):
        if event.key == 'escape':
            self.close()
            return
        action = self._key_actions.get(event.key)
        if action is None:
            return
        logger.debug("Key %r", event.key)
        action()
        self.redraw()

    def _cursor(self, event):
        if event.inaxes is not self.ax or event.xdata is None or event.ydata is None:
            return None
        return float(event.xdata), float(event.ydata)

    def _erase_at(self, pos):
        editing.remove_points_near(self.model, pos[0], pos[1], self.config.erase_radius)

    def on_press(self, event):
        pos = self._cursor(event)
        if pos is None:
            return
        if event.button == LEFT_BUTTON:
            editing.add_points_around(
                self.model, pos[0], pos[1],
                count=self.config.click_count,
                half_width=self.config.click_half_width,
            )
        elif event.button == RIGHT_BUTTON:
            self.is_erasing = True
            self._erase_at(pos)
        else:
            return
        self.redraw()

    def on_release(self, event):
        if event.button == RIGHT_BUTTON:
            self.is_erasing = False

    def on_motion(self, event):
        if not self.is_erasing:
            return
        pos = self._cursor(event)
        if pos is None:
            return
        self._erase_at(pos)
        self.redraw()

    def show(self):
        plt.show()
