from __future__ import annotations

import numpy as np
from numpy.lib.stride_tricks import as_strided
from typing import Iterator, List, Sequence, Tuple

Window = List[int]
SamplePair = Tuple[Window, Window]


class InvalidArgument(ValueError):
    """Raised when a window, stride or batch size is not a positive integer."""


def check_positive_int(name: str, value: int) -> None:
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 1:
        raise InvalidArgument(f"{name} must be >= 1, got {value}")


def validate_window_args(max_length: int, stride: int) -> None:
    check_positive_int("max_length", max_length)
    check_positive_int("stride", stride)


def num_windows(n_tokens: int, max_length: int, stride: int) -> int:
    """Number of (input, target) pairs a sequence of n_tokens yields."""
    validate_window_args(max_length, stride)
    # the target window needs one token past the input window
    last_start = n_tokens - max_length - 1
    if last_start < 0:
        return 0
    return last_start // stride + 1


def window_offsets(n_tokens: int, max_length: int, stride: int) -> range:
    return range(0, num_windows(n_tokens, max_length, stride) * stride, stride)


def sample(tokens: Sequence[int], max_length: int, stride: int) -> List[SamplePair]:
    """
    Slide a window over tokens and collect next-token prediction pairs.

    Each pair is (tokens[i:i+max_length], tokens[i+1:i+max_length+1]) for
    i = 0, stride, 2*stride, ... while the target window stays in bounds.
    Tokens left over at the end are dropped, never padded.

    Args:
        tokens: Token IDs produced by a tokenizer
        max_length: Window width in tokens
        stride: Offset step between successive windows
                - stride < max_length: overlapping windows
                - stride == max_length: contiguous, non-overlapping windows
                - stride > max_length: gapped windows (some tokens skipped)

    Returns:
        List of (input_window, target_window) pairs, empty if len(tokens) <= max_length

    Raises:
        InvalidArgument: if max_length < 1 or stride < 1
    """
    return list(iter_samples(tokens, max_length, stride))


def iter_samples(tokens: Sequence[int], max_length: int, stride: int) -> Iterator[SamplePair]:
    """Lazy form of `sample`; arguments are checked when called, not on first next()."""
    offsets = window_offsets(len(tokens), max_length, stride)
    return _generate(tokens, offsets, max_length)


def _generate(tokens: Sequence[int], offsets: range, max_length: int) -> Iterator[SamplePair]:
    for i in offsets:
        window = [int(t) for t in tokens[i:i + max_length + 1]]
        yield window[:-1], window[1:]


class WindowSampler:
    """
    Restartable, indexable view over the sample pairs of a token sequence.

    Nothing is materialized up front: each iteration starts again at offset 0
    and builds windows on demand, which keeps memory flat for long corpora.

    Example:
        >>> sampler = WindowSampler([10, 20, 30, 40, 50], max_length=2, stride=2)
        >>> list(sampler)
        [([10, 20], [20, 30]), ([30, 40], [40, 50])]
    """

    def __init__(self, tokens: Sequence[int], max_length: int, stride: int):
        validate_window_args(max_length, stride)
        self.tokens: Tuple[int, ...] = tuple(int(t) for t in tokens)
        self.max_length = max_length
        self.stride = stride
        self.offsets = window_offsets(len(self.tokens), max_length, stride)

    def __len__(self) -> int:
        return len(self.offsets)

    def __iter__(self) -> Iterator[SamplePair]:
        return _generate(self.tokens, self.offsets, self.max_length)

    def __getitem__(self, idx: int) -> SamplePair:
        # range handles negative indices and raises IndexError when out of range
        start = self.offsets[idx]
        end = start + self.max_length
        return list(self.tokens[start:end]), list(self.tokens[start + 1:end + 1])

    def __repr__(self) -> str:
        return (
            f"WindowSampler(n_tokens={len(self.tokens)}, max_length={self.max_length}, "
            f"stride={self.stride}, num_samples={len(self)})"
        )


def window_matrix(tokens: Sequence[int], max_length: int, stride: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Stack every input and target window into two (num_windows, max_length) arrays.

    Uses strided views over a single int64 buffer, so no window is copied.
    The returned arrays are read-only.
    """
    n = num_windows(len(tokens), max_length, stride)
    # private copy, so later changes to the caller's tokens cannot reach the views
    arr = np.array(tokens, dtype=np.int64)
    if n == 0:
        inputs = np.empty((0, max_length), dtype=np.int64)
        targets = np.empty((0, max_length), dtype=np.int64)
        inputs.setflags(write=False)
        targets.setflags(write=False)
        return inputs, targets

    step = arr.strides[0]
    inputs = as_strided(arr, shape=(n, max_length), strides=(stride * step, step), writeable=False)
    targets = as_strided(arr[1:], shape=(n, max_length), strides=(stride * step, step), writeable=False)
    return inputs, targets
