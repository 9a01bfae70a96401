from .dataset_config import DataConfig
from .sampler_config import SamplerConfig

__all__ = ['DataConfig', 'SamplerConfig']
