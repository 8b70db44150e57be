from __future__ import annotations

import logging
import pickle
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from bootwire.inspection.bindings import BootstrapperBinding

logger = logging.getLogger(__name__)


class IBootstrapperBindingCache(ABC):
    """Interface for caches of inspected bootstrapper bindings.

    Keying (for example by the set of bootstrappers or a deploy version) is
    the caller's concern: one cache instance holds one binding list.
    """

    @abstractmethod
    def get(self) -> list[BootstrapperBinding] | None:
        """Return the cached bindings, or ``None`` on a miss."""

    @abstractmethod
    def set(self, bindings: Sequence[BootstrapperBinding]) -> None:
        """Store the bindings."""

    @abstractmethod
    def flush(self) -> None:
        """Drop the cached bindings."""


class FileBootstrapperBindingCache(IBootstrapperBindingCache):
    """Pickle bindings to a file.

    Bootstrappers referenced by the bindings must be picklable, which holds
    for instances of module-level classes with picklable state.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def get(self) -> list[BootstrapperBinding] | None:
        try:
            payload = self._path.read_bytes()
        except FileNotFoundError:
            return None

        try:
            bindings = pickle.loads(payload)  # noqa: S301
        except (pickle.UnpicklingError, EOFError, AttributeError, ImportError, TypeError) as error:
            logger.warning("Ignoring unreadable binding cache %s: %s", self._path, error)
            return None

        if not isinstance(bindings, list) or not all(
            isinstance(binding, BootstrapperBinding) for binding in bindings
        ):
            logger.warning("Ignoring binding cache %s with unexpected contents", self._path)
            return None
        return bindings

    def set(self, bindings: Sequence[BootstrapperBinding]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_bytes(pickle.dumps(list(bindings), protocol=pickle.HIGHEST_PROTOCOL))

    def flush(self) -> None:
        self._path.unlink(missing_ok=True)
