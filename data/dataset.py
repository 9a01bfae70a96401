import numpy as np
import torch
from torch.utils.data import Dataset
from typing import Sequence, Tuple

from data.sampler import num_windows, validate_window_args


class TokenWindowDataset(Dataset):
    """
    Token dataset with configurable stride for creating training windows.

    Item idx is the pair starting at offset idx * stride; the target is the
    input shifted forward by one token. Windows are sliced on access.

    Args:
        tokens: List of token IDs
        max_length: Length of each sequence window
        stride: Step size between windows (default: max_length for non-overlapping windows)
                - stride=max_length: No overlap
                - stride=max_length//2: 50% overlap
                - stride=1: Maximum overlap (max_length times more samples)
    """
    def __init__(self, tokens: Sequence[int], max_length: int = 256, stride: int = None):
        self.max_length = max_length
        self.stride = stride if stride is not None else max_length  # Default: non-overlapping
        validate_window_args(self.max_length, self.stride)

        self.tokens = np.array(tokens, dtype=np.int64)
        self.num_samples = num_windows(len(self.tokens), self.max_length, self.stride)

    def __len__(self):
        return self.num_samples

    def __getitem__(self, idx: int) -> Tuple[torch.Tensor, torch.Tensor]:
        if idx < 0:
            idx += self.num_samples
        if idx < 0 or idx >= self.num_samples:
            raise IndexError(f"Index {idx} out of range [0, {self.num_samples})")

        start_idx = idx * self.stride
        end_idx = start_idx + self.max_length
        x = torch.tensor(self.tokens[start_idx:end_idx], dtype=torch.long)
        y = torch.tensor(self.tokens[start_idx + 1:end_idx + 1], dtype=torch.long)
        return x, y
