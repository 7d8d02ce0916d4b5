"""Predefined chain configurations and ready-to-run demos."""

from .demo import ChainDemo
from .motomini import motomini_config
from .puma560 import puma560_config
from .rx90l import rx90l_config

__all__ = [
    "ChainDemo",
    "motomini_config",
    "puma560_config",
    "rx90l_config",
]
