import random
from typing import Optional

import torch


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Independent Python RNG, leaves the global random state alone"""
    return random.Random(seed)


def make_generator(seed: Optional[int] = None) -> torch.Generator:
    """Torch generator for DataLoader shuffling; unseeded draws a fresh seed"""
    generator = torch.Generator()
    if seed is None:
        generator.seed()
    else:
        generator.manual_seed(seed)
    return generator
