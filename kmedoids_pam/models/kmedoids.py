"""K-medoids clustering on a precomputed distance matrix"""

import logging
import math
import warnings
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from joblib import Parallel, delayed, effective_n_jobs
from sklearn.exceptions import ConvergenceWarning
from sklearn.utils import check_array, check_random_state
from sklearn.utils.validation import check_non_negative

from kmedoids_pam.config.settings import PARALLEL_CONFIG, VALIDATION_CONFIG
from kmedoids_pam.models.exceptions import InvalidParameter
from kmedoids_pam.utils.parallel_utils import get_batch_size, split_list, worker


@dataclass(frozen=True)
class KMedoidsResult:
    """Outcome of a single :meth:`KMedoids.run` call."""

    medoids: Tuple[int, ...]
    clusters: Dict[int, List[int]]
    cost: float
    n_iter: int
    converged: bool
    cost_history: List[float] = field(default_factory=list)

    def labels(self) -> np.ndarray:
        """Position of each point's medoid in ``medoids``."""
        n_points = sum(len(members) for members in self.clusters.values())
        labels = np.empty(n_points, dtype=int)
        for position, medoid in enumerate(self.medoids):
            labels[self.clusters[medoid]] = position
        return labels


class KMedoids:
    """k-medoids clustering with windowed seeding and PAM-style swaps.

    Parameters
    ----------
    distance_matrix : array-like, shape (n_points, n_points)
        Pairwise dissimilarities. Must be finite and non-negative. Symmetry
        and a zero diagonal are assumed; a warning is emitted when they do
        not hold.

    n_clusters : int, optional, default: 2
        Number of medoids. Must be strictly smaller than the number of points.

    start_prob, end_prob : float, optional, default: 0.90, 0.99
        Seeding window. Each new medoid is drawn uniformly from the points
        whose distance to their closest medoid lies between these two
        quantiles.

    random_state : int, RandomState instance or None, optional
        Random source for seeding. An int makes every :meth:`run` reproducible.

    n_jobs : int or None, optional
        Number of joblib workers used to evaluate swap candidates. ``None``
        or 1 evaluates them one at a time.

    Notes
    -----
    Points are assigned to medoids round-robin: each medoid in turn takes its
    closest still-unassigned point. This is not the global nearest-medoid
    assignment of textbook PAM and may yield a higher cost for the same
    medoids.
    """

    def __init__(
        self,
        distance_matrix,
        n_clusters=2,
        start_prob=0.90,
        end_prob=0.99,
        random_state=None,
        n_jobs=None,
    ):
        self.logger = logging.getLogger(__name__)

        if not (0 <= start_prob < end_prob <= 1):
            raise InvalidParameter(
                "start_prob must be smaller than end_prob and both must lie "
                "in [0, 1]. Got start_prob=%s, end_prob=%s"
                % (start_prob, end_prob)
            )

        self.distance_matrix = self._check_distance_matrix(distance_matrix)
        self.n_points = self.distance_matrix.shape[0]

        if (
            isinstance(n_clusters, bool)
            or not isinstance(n_clusters, (int, np.integer))
            or n_clusters <= 0
        ):
            raise InvalidParameter(
                "n_clusters should be a positive integer. "
                "%s was given" % (n_clusters,)
            )
        if not n_clusters < self.n_points:
            raise InvalidParameter(
                "The number of clusters (%d) must be less than the number "
                "of points %d." % (n_clusters, self.n_points)
            )

        self.n_clusters = int(n_clusters)
        self.n_range = range(self.n_points)
        self.start_prob = start_prob
        self.end_prob = end_prob
        self.random_state = random_state
        self.n_jobs = n_jobs

    def _check_distance_matrix(self, distance_matrix):
        try:
            D = check_array(distance_matrix, dtype=np.float64, copy=True)
            check_non_negative(D, "KMedoids (distance_matrix)")
        except ValueError as e:
            raise InvalidParameter(str(e)) from e

        if D.shape[0] != D.shape[1]:
            raise InvalidParameter(
                "distance_matrix must be square, got shape %s" % (D.shape,)
            )

        tol = VALIDATION_CONFIG["symmetry_tol"]
        if VALIDATION_CONFIG["check_symmetry"] and not np.allclose(
            D, D.T, atol=tol
        ):
            warnings.warn(
                "distance_matrix is not symmetric; distances are read as "
                "d(point, medoid)."
            )
        if VALIDATION_CONFIG["check_zero_diagonal"] and np.any(
            np.abs(np.diag(D)) > tol
        ):
            warnings.warn("distance_matrix has non-zero diagonal entries.")

        D.setflags(write=False)
        return D

    def get_distance(self, point1: int, point2: int) -> float:
        return float(self.distance_matrix[point1, point2])

    def initialize_medoids(self, random_state=None) -> Tuple[int, ...]:
        """Pick the initial medoids.

        The first medoid is drawn uniformly. Every following one is drawn
        uniformly from the non-medoids ranked by distance to their closest
        medoid, restricted to the ``[start_prob, end_prob]`` window of that
        ranking, so far-away points are favoured as in k-means++ while the
        most extreme ones are avoided.
        """
        if random_state is None:
            random_state = check_random_state(self.random_state)

        medoids = [int(random_state.randint(self.n_points))]
        while len(medoids) < self.n_clusters:
            candidates = np.asarray(self.get_non_medoids(medoids))
            # distance of each candidate to its closest medoid
            distances = self.distance_matrix[np.ix_(candidates, medoids)].min(
                axis=1
            )
            order = np.argsort(distances, kind="stable")

            start_idx, end_idx = self._selection_window(len(candidates))
            pick = random_state.randint(start_idx, end_idx + 1)
            medoids.append(int(candidates[order[pick]]))

        self.logger.debug(f"Initial medoids: {medoids}")
        return tuple(medoids)

    def _selection_window(self, count: int) -> Tuple[int, int]:
        start_idx = math.floor(self.start_prob * count)
        # round half up
        end_idx = math.floor(self.end_prob * (count - 1) + 0.5)
        # narrow windows over few points can invert; draw between the bounds
        return min(start_idx, end_idx), max(start_idx, end_idx)

    def get_closest_medoid(
        self, medoids: Sequence[int], point: int
    ) -> Tuple[Optional[int], float]:
        """Closest medoid to ``point`` and its distance.

        Ties go to the medoid listed first. ``(None, inf)`` if ``medoids``
        is empty.
        """
        closest_medoid = None
        closest_distance = math.inf
        for medoid in medoids:
            distance = self.get_distance(point, medoid)
            if distance < closest_distance:
                closest_medoid = medoid
                closest_distance = distance
        return closest_medoid, closest_distance

    def get_closest_point(
        self, medoid: int, exception: Iterable[int]
    ) -> Tuple[Optional[int], float]:
        """Closest point to ``medoid`` outside ``exception``.

        Ties go to the lowest index. ``(None, inf)`` if every point is
        excluded.
        """
        excluded = np.zeros(self.n_points, dtype=bool)
        excluded[list(exception)] = True
        return self._closest_unassigned(medoid, excluded)

    def _closest_unassigned(self, medoid, assigned):
        if assigned.all():
            return None, math.inf
        distances = np.where(assigned, np.inf, self.distance_matrix[:, medoid])
        point = int(np.argmin(distances))
        return point, float(distances[point])

    def associate_medoids_to_closest_point(
        self, medoids: Sequence[int]
    ) -> Tuple[Dict[int, List[int]], float]:
        """Build the clusters for ``medoids`` and their configuration cost.

        Medoids take turns, in order, claiming their closest unassigned
        point until every point is assigned. The cost is the sum over
        clusters of the mean member-to-medoid distance.
        """
        medoids = tuple(medoids)
        if not medoids:
            raise InvalidParameter("medoids must not be empty")

        clusters = {medoid: [medoid] for medoid in medoids}
        clusters_costs = dict.fromkeys(medoids, 0.0)
        assigned = np.zeros(self.n_points, dtype=bool)
        assigned[list(medoids)] = True

        while not assigned.all():
            for medoid in medoids:
                point, distance = self._closest_unassigned(medoid, assigned)
                if point is None:
                    break
                clusters[medoid].append(point)
                clusters_costs[medoid] += distance
                assigned[point] = True

        configuration_cost = sum(
            clusters_costs[medoid] / len(clusters[medoid]) for medoid in clusters
        )
        return clusters, float(configuration_cost)

    def get_non_medoids(self, medoids: Iterable[int]) -> List[int]:
        medoids = set(medoids)
        return [point for point in self.n_range if point not in medoids]

    def _evaluate(self, candidates):
        if self.n_jobs in (None, 1) or len(candidates) == 1:
            return [self.associate_medoids_to_closest_point(c) for c in candidates]

        n_workers = min(len(candidates), effective_n_jobs(self.n_jobs))
        chunks = split_list(candidates, n_workers)
        chunk_results = Parallel(
            n_jobs=self.n_jobs, backend=PARALLEL_CONFIG["backend"]
        )(delayed(worker)((self, chunk)) for chunk in chunks)
        return [evaluation for chunk in chunk_results for evaluation in chunk]

    def _swap_pass(self, medoids, clusters, cost, cost_history):
        """One pass over every (medoid, non-medoid) pair.

        Medoids are taken from the start of the pass; each one's non-medoids
        are listed from the current best configuration when its turn starts.
        A candidate replaces the pair's medoid by its non-medoid in the
        current best configuration and is kept as soon as it lowers the
        cost. Pairs whose medoid was already swapped out, or whose non-medoid
        was already swapped in, are skipped.
        """
        batch_size = get_batch_size(self.n_jobs)
        cost_change = 0.0

        for pass_medoid in tuple(medoids):
            if pass_medoid not in medoids:
                continue
            pending = deque(
                (pass_medoid, non_medoid)
                for non_medoid in self.get_non_medoids(medoids)
            )
            medoids, clusters, cost, change = self._swap_medoid(
                pending, batch_size, medoids, clusters, cost, cost_history
            )
            if change:
                cost_change = change

        return medoids, clusters, cost, cost_change

    def _swap_medoid(self, pending, batch_size, medoids, clusters, cost, cost_history):
        cost_change = 0.0
        while pending:
            batch = []
            while pending and len(batch) < batch_size:
                medoid, non_medoid = pending.popleft()
                if medoid not in medoids or non_medoid in medoids:
                    continue
                candidate = tuple(
                    non_medoid if m == medoid else m for m in medoids
                )
                batch.append((medoid, non_medoid, candidate))
            if not batch:
                break

            evaluations = self._evaluate([candidate for _, _, candidate in batch])
            for position, (new_clusters, new_cost) in enumerate(evaluations):
                medoid, non_medoid, candidate = batch[position]
                if new_cost < cost:
                    self.logger.debug(
                        f"Swap {medoid} -> {non_medoid}: cost {cost:.6f} -> {new_cost:.6f}"
                    )
                    cost_change = cost - new_cost
                    medoids, clusters, cost = candidate, new_clusters, new_cost
                    cost_history.append(new_cost)
                    # later candidates in the batch were built on the old medoids
                    pending.extendleft(
                        (m, x) for m, x, _ in reversed(batch[position + 1:])
                    )
                    break

        return medoids, clusters, cost, cost_change

    def run(self, max_iterations=10, tolerance=0.01) -> KMedoidsResult:
        """Seed, assign and refine the medoids.

        Parameters
        ----------
        max_iterations : int, optional, default: 10
            Maximum number of swap passes. Zero returns the seeded
            configuration.

        tolerance : float, optional, default: 0.01
            Refinement stops once the last improvement of a pass is no
            larger than this.

        Returns
        -------
        KMedoidsResult
        """
        if (
            isinstance(max_iterations, bool)
            or not isinstance(max_iterations, (int, np.integer))
            or max_iterations < 0
        ):
            raise InvalidParameter(
                "max_iterations should be a nonnegative integer. "
                "%s was given" % (max_iterations,)
            )
        if tolerance is None or tolerance < 0:
            raise InvalidParameter(
                "tolerance should be nonnegative. %s was given" % (tolerance,)
            )

        medoids = self.initialize_medoids(check_random_state(self.random_state))
        clusters, cost = self.associate_medoids_to_closest_point(medoids)
        cost_history = [cost]
        self.logger.info(f"Seeded medoids {list(medoids)} with cost {cost:.6f}")

        cost_change = math.inf
        iteration = 0
        while cost_change > tolerance and iteration < max_iterations:
            medoids, clusters, cost, cost_change = self._swap_pass(
                medoids, clusters, cost, cost_history
            )
            iteration += 1
            self.logger.info(
                f"Pass {iteration}: medoids {list(medoids)}, cost {cost:.6f}, "
                f"change {cost_change:.6f}"
            )

        converged = cost_change <= tolerance
        if not converged and max_iterations > 0:
            warnings.warn(
                "Maximum number of iteration reached before "
                "convergence. Consider increasing max_iterations to "
                "improve the fit.",
                ConvergenceWarning,
            )

        return KMedoidsResult(
            medoids=tuple(medoids),
            clusters=clusters,
            cost=cost,
            n_iter=iteration,
            converged=converged,
            cost_history=cost_history,
        )
