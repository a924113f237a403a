from joblib import effective_n_jobs

from kmedoids_pam.config.settings import PARALLEL_CONFIG


def worker(args_tuple):
    """Evaluate a chunk of candidate medoid sets on one joblib worker."""

    engine, candidates = args_tuple
    return [engine.associate_medoids_to_closest_point(c) for c in candidates]


def get_batch_size(n_jobs):
    """
    Number of swap candidates evaluated together before results are checked.

    Args:
        n_jobs (int or None): joblib ``n_jobs`` setting

    Returns:
        int: 1 for sequential evaluation, otherwise a multiple of the worker count
    """
    if n_jobs in (None, 1):
        return 1
    return effective_n_jobs(n_jobs) * PARALLEL_CONFIG['batch_multiplier']


def split_list(items, num_splits):
    """
    Split a list into approximately equal-sized, order-preserving chunks.

    Args:
        items (list): Input list to split
        num_splits (int): Number of chunks to create

    Returns:
        list: List of num_splits lists whose concatenation equals items

    Raises:
        ValueError: If num_splits <= 0
    """
    if num_splits <= 0:
        raise ValueError("Number of splits must be greater than 0")
    total_items = len(items)
    part_size = total_items // num_splits
    remainder = total_items % num_splits
    chunks = []
    start = 0
    for i in range(num_splits):
        end = start + part_size + (1 if i < remainder else 0)
        chunks.append(list(items[start:end]))
        start = end
    return chunks
