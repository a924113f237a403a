import argparse
import logging

from kmedoids_pam.config.settings import (
    CLUSTERING_CONFIG,
    PARALLEL_CONFIG,
    get_kmedoids_params,
    get_logging_config,
)
from kmedoids_pam.data.data_loader import DistanceMatrixLoader, demo_matrix
from kmedoids_pam.data.data_processor import DistanceMatrixBuilder
from kmedoids_pam.models.exceptions import InvalidParameter
from kmedoids_pam.models.kmedoids import KMedoids
from kmedoids_pam.utils.metrics import compute_clustering_metrics


def build_parser():
    params = get_kmedoids_params()
    parser = argparse.ArgumentParser("K-Medoids clustering of a distance matrix")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--matrix", type=str, default=None, help="Distance matrix file (.npy, .csv, .txt); demo line matrix if omitted")
    source.add_argument("--features", type=str, default=None, help="Feature table file, one row per point")
    parser.add_argument("--distance", type=str, choices=CLUSTERING_CONFIG['distances'], default=CLUSTERING_CONFIG['default_distance'])
    parser.add_argument("--standardize", action="store_true")
    parser.add_argument("--n_clusters", type=int, default=params['n_clusters'])
    parser.add_argument("--start_prob", type=float, default=params['start_prob'])
    parser.add_argument("--end_prob", type=float, default=params['end_prob'])
    parser.add_argument("--max_iter", type=int, default=params['max_iter'])
    parser.add_argument("--tol", type=float, default=params['tol'])
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--n_jobs", type=int, default=PARALLEL_CONFIG['n_jobs'])
    return parser


def load_distance_matrix(args):
    loader = DistanceMatrixLoader()
    if args.matrix:
        return loader.load(args.matrix)
    if args.features:
        builder = DistanceMatrixBuilder(metric=args.distance, standardize=args.standardize)
        return builder.build(loader.load_features(args.features))
    return demo_matrix()


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging_config = get_logging_config()
    logging.basicConfig(level=logging_config['level'], format=logging_config['format'])
    logger = logging.getLogger(__name__)

    distance_matrix = load_distance_matrix(args)

    try:
        km = KMedoids(
            distance_matrix,
            n_clusters=args.n_clusters,
            start_prob=args.start_prob,
            end_prob=args.end_prob,
            random_state=args.seed,
            n_jobs=args.n_jobs,
        )
        result = km.run(max_iterations=args.max_iter, tolerance=args.tol)
    except InvalidParameter as e:
        logger.error(f"Invalid parameters: {e}")
        return 2

    metrics = compute_clustering_metrics(distance_matrix, result)
    logger.info(f"Finished after {result.n_iter} passes (converged: {result.converged})")

    print("Medoids:", list(result.medoids))
    print("Clusters:")
    for medoid, members in result.clusters.items():
        print(f"  {medoid}: {sorted(members)}")
    print(f"Configuration cost: {metrics['configuration_cost']:.4f}")
    print(f"Nearest-medoid inertia: {metrics['inertia']:.4f}")
    if metrics['silhouette'] is not None:
        print(f"Silhouette: {metrics['silhouette']:.4f}")
    print(f"Points not at their nearest medoid: {metrics['n_not_nearest']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
