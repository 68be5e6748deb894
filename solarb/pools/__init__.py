"""Liquidity pool interface and protocol adapters."""

from .base import Pool
from .constant_product import AldrinPool, ConstantProductPool, OrcaPool
from .loader import PoolType, load_pools, pool_factory, read_json_dir
from .stable_swap import MercurialPool, SaberPool, StableSwapPool

__all__ = [
    "Pool",
    "PoolType",
    "ConstantProductPool",
    "OrcaPool",
    "AldrinPool",
    "StableSwapPool",
    "SaberPool",
    "MercurialPool",
    "load_pools",
    "pool_factory",
    "read_json_dir",
]
