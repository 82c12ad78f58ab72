"""
Constant store: where derived constants are published for the filter kernels.

The derivers in ``coefficients`` and ``block_grid`` never publish anything
themselves. ``publish_constants`` walks their ``symbols()``, converts every
value to its float32 payload, and only then writes them into a
``ConstantStore``. ``SymbolTable`` is the in-memory store; a device-backed
store only has to implement ``publish``.
"""

import abc
from typing import Dict, Iterator

import numpy as np
import torch

from quick_iir.errors import NonFiniteConstant


def to_payload(name: str, value) -> np.ndarray:
    """
    float32 array for ``value``, the precision of device constant memory.
    Values that are non-finite or overflow float32 raise NonFiniteConstant.
    """
    if isinstance(value, torch.Tensor):
        value = value.detach().cpu().numpy()
    with np.errstate(over="ignore"):
        array = np.asarray(value, dtype=np.float32)
    if not np.isfinite(array).all():
        raise NonFiniteConstant(f"Refusing to publish non-finite {name} (float32): {value}")
    return array


class ConstantStore(abc.ABC):
    """Write-only sink for named constants."""

    @abc.abstractmethod
    def publish(self, name: str, value) -> None:
        ...


class SymbolTable(ConstantStore):
    """
    In-memory constant store. Values are kept as float32 numpy arrays;
    scalars become 0-d arrays.
    """

    def __init__(self):
        self._symbols: Dict[str, np.ndarray] = {}

    def publish(self, name: str, value) -> None:
        self._symbols[name] = to_payload(name, value)

    def __getitem__(self, name: str) -> np.ndarray:
        return self._symbols[name]

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def as_dict(self) -> Dict[str, object]:
        """Plain python view: floats for scalars, lists for vectors."""
        return {name: array.tolist() for name, array in self._symbols.items()}


def publish_constants(store: ConstantStore, *bags) -> ConstantStore:
    """
    Publish every symbol of every bag, in order. Returns ``store``.

    All payloads are converted and checked before the first publish, so a
    value that overflows float32 leaves ``store`` untouched.
    """
    payloads = [
        (name, to_payload(name, value))
        for bag in bags
        for name, value in bag.symbols().items()
    ]
    for name, array in payloads:
        store.publish(name, array)
    return store


__all__ = ["ConstantStore", "SymbolTable", "publish_constants", "to_payload"]
