import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

# label of a point that has not been through an assignment pass
UNASSIGNED = -1


def squared_distances(X, centroids):
    """Squared Euclidean distances, shape (len(X), len(centroids))."""
    diffs = X[:, None, :] - centroids[None, :, :]
    return np.einsum('ijk,ijk->ij', diffs, diffs)


@dataclass
class Point:
    x: float
    y: float
    cluster_id: int = UNASSIGNED


@dataclass
class Cluster:
    mean: np.ndarray = field(default_factory=lambda: np.zeros(2))
    population: int = 0
    id: int = 0


class ClusterModel:
    """
    Points and clusters of a live K-means session.

    Points live in ``points`` (shape (n, 2)) with their cluster index in
    ``labels`` (shape (n,)); clusters are a list of ``Cluster`` whose ``id``
    is always their position in the list. All sampling draws from the
    model's own RandomState, seeded once from ``random_state``.
    """

    def __init__(self, point_count=0, cluster_count=0, random_state=None):
        self.random_state = random_state
        self.rng = np.random.RandomState(random_state)
        self.points = np.zeros((0, 2))
        self.labels = np.full(0, UNASSIGNED, dtype=int)
        self.clusters = []
        self.initialize(point_count, cluster_count)

    @classmethod
    def from_arrays(cls, points, means, random_state=None) -> "ClusterModel":
        """Build a model with explicit point coordinates and cluster means."""
        model = cls(random_state=random_state)
        model.points = model._validate_coords(points, "points")
        model.labels = np.full(len(model.points), UNASSIGNED, dtype=int)
        model.clusters = [
            Cluster(mean=np.array(m, dtype=float))
            for m in model._validate_coords(means, "means")
        ]
        model.reindex_clusters()
        return model

    @staticmethod
    def _validate_coords(arr, name):
        if isinstance(arr, pd.DataFrame):
            arr = arr.values
        arr = np.asarray(arr, dtype=float)
        if arr.size == 0:
            return np.zeros((0, 2))
        if arr.ndim != 2 or arr.shape[1] != 2:
            raise ValueError(f"{name} must have shape (n, 2), got {arr.shape}")
        return arr.copy()

    # ── Construction ─────────────────────────────────────────────────────────

    def initialize(self, point_count, cluster_count):
        """
        Scatter ``point_count`` points over the unit square and seed
        ``cluster_count`` clusters on randomly picked points (with
        replacement, so two clusters may start on the same point).
        """
        if point_count < 0 or cluster_count < 0:
            raise ValueError("point_count and cluster_count must be >= 0")

        self.points = np.zeros((point_count, 2))
        self.labels = np.full(point_count, UNASSIGNED, dtype=int)
        self.randomize()

        self.clusters = []
        for i in range(cluster_count):
            if point_count:
                mean = self.points[self.rng.randint(0, point_count)].copy()
            else:
                mean = np.zeros(2)
            self.clusters.append(Cluster(mean=mean, id=i))

        logger.debug("Initialized %d points, %d clusters", point_count, cluster_count)

    @staticmethod
    def check_box(low, high):
        """Box corners as arrays; raises ValueError if low exceeds high on an axis."""
        low = np.asarray(low, dtype=float)
        high = np.asarray(high, dtype=float)
        if np.any(low > high):
            raise ValueError(f"low {tuple(low)} must not exceed high {tuple(high)}")
        return low, high

    def randomize(self, start=0, stop=None, low=(0.0, 0.0), high=(1.0, 1.0)):
        """
        Resample points[start:stop] uniformly inside the box [low, high].
        """
        low, high = self.check_box(low, high)

        n = len(self.points[start:stop])
        if n == 0:
            return
        self.points[start:stop] = self.rng.uniform(low, high, size=(n, 2))

    def reindex_clusters(self):
        for i, c in enumerate(self.clusters):
            c.id = i

    # ── Read access ──────────────────────────────────────────────────────────

    @property
    def n_points(self) -> int:
        return len(self.points)

    @property
    def n_clusters(self) -> int:
        return len(self.clusters)

    @property
    def means(self) -> np.ndarray:
        if not self.clusters:
            return np.zeros((0, 2))
        return np.vstack([c.mean for c in self.clusters])

    @property
    def populations(self) -> np.ndarray:
        return np.array([c.population for c in self.clusters], dtype=int)

    def valid_label_mask(self) -> np.ndarray:
        """True for points whose label indexes the current cluster list."""
        return (self.labels >= 0) & (self.labels < self.n_clusters)

    def iter_points(self) -> Iterator[Point]:
        for (x, y), lbl in zip(self.points, self.labels):
            yield Point(float(x), float(y), int(lbl))

    # ── K-means pass ─────────────────────────────────────────────────────────

    def find_closest_cluster(self, point) -> Optional[Cluster]:
        """Nearest cluster by Euclidean distance; first index wins ties."""
        if not self.clusters:
            return None
        if isinstance(point, Point):
            point = (point.x, point.y)
        dist2 = squared_distances(np.asarray(point, dtype=float)[None, :], self.means)
        return self.clusters[int(dist2[0].argmin())]

    def assign(self):
        """Label every point with the index of its nearest cluster mean."""
        dist2 = squared_distances(self.points, self.means)
        # argmin returns the first minimum, so ties go to the lower index
        self.labels = dist2.argmin(axis=1).astype(int)

    def recompute(self):
        """
        One Lloyd iteration: assign every point to its nearest cluster, then
        move each cluster mean to the average of its points.

        A cluster that receives no points ends up at (0, 0). With no clusters
        nothing happens and the labels keep their previous values.
        """
        if not self.clusters:
            logger.debug("Recompute skipped: no clusters")
            return

        self.assign()

        k = self.n_clusters
        pops = np.bincount(self.labels, minlength=k)
        sums = np.zeros((k, 2))
        np.add.at(sums, self.labels, self.points)

        for c in self.clusters:
            c.population = int(pops[c.id])
            c.mean = sums[c.id].copy()
            if c.population:
                c.mean = c.mean / c.population

        logger.debug(
            "Recomputed %d points over %d clusters, populations=%s",
            self.n_points, k, pops.tolist(),
        )
