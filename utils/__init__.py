from .helpers import make_generator, make_rng
from .logger import setup_logging

__all__ = ['make_generator', 'make_rng', 'setup_logging']
