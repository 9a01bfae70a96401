from __future__ import annotations

import random
from typing import Iterator, List, Optional, Sequence, TypeVar

from data.sampler import check_positive_int

T = TypeVar("T")


def num_batches(n_pairs: int, batch_size: int, drop_last: bool = False) -> int:
    check_positive_int("batch_size", batch_size)
    if drop_last:
        return n_pairs // batch_size
    return (n_pairs + batch_size - 1) // batch_size


def iter_batches(
    pairs: Sequence[T],
    batch_size: int,
    shuffle: bool = False,
    drop_last: bool = False,
    rng: Optional[random.Random] = None,
) -> Iterator[List[T]]:
    """
    Group sample pairs into consecutive batches.

    Args:
        pairs: Ordered sample set, e.g. the output of `sample`
        batch_size: Number of pairs per batch
        shuffle: Reorder whole pairs before grouping (tokens inside a window never move)
        drop_last: Discard a trailing batch smaller than batch_size
        rng: Random source used when shuffling. The global `random` state is
             never touched; pass a seeded `random.Random` for reproducible order.
    """
    check_positive_int("batch_size", batch_size)
    order = list(range(len(pairs)))
    if shuffle:
        if rng is None:
            rng = random.Random()
        rng.shuffle(order)
    return _group(pairs, order, batch_size, drop_last)


def _group(pairs: Sequence[T], order: List[int], batch_size: int, drop_last: bool) -> Iterator[List[T]]:
    for start in range(0, len(order), batch_size):
        batch = [pairs[i] for i in order[start:start + batch_size]]
        if drop_last and len(batch) < batch_size:
            break
        yield batch


def batch_pairs(
    pairs: Sequence[T],
    batch_size: int,
    shuffle: bool = False,
    drop_last: bool = False,
    rng: Optional[random.Random] = None,
) -> List[List[T]]:
    return list(iter_batches(pairs, batch_size, shuffle=shuffle, drop_last=drop_last, rng=rng))
