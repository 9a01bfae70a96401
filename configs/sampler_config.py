from dataclasses import dataclass
from typing import Optional
import logging

from data.sampler import check_positive_int

logger = logging.getLogger(__name__)


@dataclass
class SamplerConfig:
    # Windowing
    max_length: int = 256
    stride: int = 128

    # Batching
    batch_size: int = 4
    shuffle: bool = True
    drop_last: bool = True
    num_workers: int = 0

    # Seed for the shuffle generator, None = nondeterministic order
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        check_positive_int("max_length", self.max_length)
        check_positive_int("stride", self.stride)
        check_positive_int("batch_size", self.batch_size)

        if not isinstance(self.num_workers, int) or isinstance(self.num_workers, bool):
            raise TypeError(f"num_workers must be an integer, got {type(self.num_workers).__name__}")
        if self.num_workers < 0:
            raise ValueError(f"num_workers must be non-negative, got {self.num_workers}")

        if self.seed is not None and (not isinstance(self.seed, int) or isinstance(self.seed, bool)):
            raise TypeError(f"seed must be an integer or None, got {type(self.seed).__name__}")

        if self.stride > self.max_length:
            logger.warning(
                f"stride ({self.stride}) is greater than max_length ({self.max_length}); "
                f"{self.stride - self.max_length} tokens between windows will be skipped."
            )
