# run.py

import argparse
import logging

import matplotlib.pyplot as plt

from kmeans_live.config import VisualizerConfig
from kmeans_live.metrics import format_metrics
from kmeans_live.model import ClusterModel
from kmeans_live.plotter import plot_model
from kmeans_live.viewer import KMeansViewer

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="kmeans-live",
        description="Interactive single-step K-means visualizer",
    )
    parser.add_argument('-p', '--points', type=int, help="initial number of points")
    parser.add_argument('-k', '--clusters', type=int, help="initial number of clusters")
    parser.add_argument('-s', '--seed', type=int, help="random seed")
    parser.add_argument('--save', metavar="PATH", help="render once to PATH and exit")
    parser.add_argument('--recompute', action='store_true',
                        help="run one recompute pass before saving")
    parser.add_argument('-v', '--verbose', action='store_true', help="debug logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # 1) Resolve configuration
    try:
        config = VisualizerConfig().with_overrides(
            point_count=args.points,
            cluster_count=args.clusters,
            random_state=args.seed,
        )
    except ValueError as err:
        logger.error("Invalid configuration: %s", err)
        return 2

    # 2) Build the model
    model = ClusterModel(
        point_count=config.point_count,
        cluster_count=config.cluster_count,
        random_state=config.random_state,
    )
    logger.info("Started with %d points and %d clusters", model.n_points, model.n_clusters)

    # 3) Static snapshot or interactive window
    if args.save:
        if args.recompute:
            model.recompute()
            logger.info("Clusters after one pass:\n%s", format_metrics(model))
        ax = plot_model(model, figsize=config.figsize, savepath=args.save,
                        palette=config.palette, point_size=config.point_size)
        plt.close(ax.figure)
        logger.info("Saved %s", args.save)
        return 0

    viewer = KMeansViewer(model, config)
    viewer.show()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
