"""Pool factory and JSON configuration loading.

Each protocol keeps one JSON document per pool in its own directory. The
factory is keyed on the protocol tag; pools that do not trade exactly two
tokens are skipped with a warning.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Iterable, Mapping

from pydantic import ValidationError

from ..errors import ConfigurationError
from .base import Pool
from .constant_product import AldrinPool, OrcaPool
from .stable_swap import MercurialPool, SaberPool

log = logging.getLogger(__name__)


class PoolType(str, Enum):
    """Protocol tags accepted in pool directory configuration."""

    ORCA = "orca"
    ALDRIN = "aldrin"
    SABER = "saber"
    MERCURIAL = "mercurial"

    @classmethod
    def parse(cls, value: str | "PoolType") -> "PoolType":
        if isinstance(value, cls):
            return value
        raw = str(value or "").strip().lower()
        for member in cls:
            if member.value == raw:
                return member
        raise ConfigurationError(
            f"unsupported pool type {value!r}", details={"pool_type": value}
        )


_POOL_CLASSES: dict[PoolType, type] = {
    PoolType.ORCA: OrcaPool,
    PoolType.ALDRIN: AldrinPool,
    PoolType.SABER: SaberPool,
    PoolType.MERCURIAL: MercurialPool,
}


def pool_factory(pool_type: PoolType | str, json_str: str) -> Pool:
    """Build the adapter for *pool_type* from its JSON configuration."""

    kind = PoolType.parse(pool_type)
    cls = _POOL_CLASSES[kind]
    try:
        return cls.from_json(json_str)
    except ValidationError as exc:
        raise ConfigurationError(
            f"malformed {kind.value} pool configuration: {exc}",
            details={"pool_type": kind.value},
        ) from exc


def read_json_dir(directory: str | Path) -> list[Path]:
    """Return the ``*.json`` files in *directory*, sorted by name."""

    path = Path(directory)
    if not path.is_dir():
        raise ConfigurationError(f"pool directory not found: {path}")
    return sorted(p for p in path.iterdir() if p.suffix == ".json" and p.is_file())


def load_pools(pool_dirs: Mapping[str, str]) -> list[Pool]:
    """Load every pool listed in *pool_dirs* (``{protocol tag: directory}``)."""

    pools: list[Pool] = []
    for tag, directory in pool_dirs.items():
        kind = PoolType.parse(tag)
        log.debug("pool dir: %s (%s)", directory, kind.value)
        for pool_path in read_json_dir(directory):
            try:
                pool = pool_factory(kind, pool_path.read_text())
            except ConfigurationError as exc:
                exc.details.setdefault("path", str(pool_path))
                raise
            mints = pool.mints()
            if len(mints) != 2 or mints[0] == mints[1]:
                log.warning("skipping pool with mints != 2: %s", pool_path)
                continue
            pools.append(pool)
    return pools


def describe_pools(pools: Iterable[Pool]) -> list[dict[str, object]]:
    """Return a printable summary of *pools* for diagnostics."""

    rows = []
    for pool in pools:
        rows.append(
            {
                "name": pool.name(),
                "type": getattr(pool, "protocol", type(pool).__name__),
                "mints": [str(m) for m in pool.mints()],
            }
        )
    return rows
