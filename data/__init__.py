from .sampler import (
    InvalidArgument,
    WindowSampler,
    iter_samples,
    num_windows,
    sample,
    window_matrix,
    window_offsets,
)
from .batching import batch_pairs, iter_batches, num_batches
from .dataset import TokenWindowDataset

__all__ = [
    "InvalidArgument",
    "WindowSampler",
    "iter_samples",
    "num_windows",
    "sample",
    "window_matrix",
    "window_offsets",
    "batch_pairs",
    "iter_batches",
    "num_batches",
    "TokenWindowDataset",
]
