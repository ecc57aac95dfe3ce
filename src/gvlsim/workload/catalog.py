"""Fixed catalog of request profiles."""

import logging
from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping

from .models import Phase, PhaseKind, RequestProfile

logger = logging.getLogger(__name__)


class UnknownProfile(ValueError):
    """Raised when one or more profile keys are not in the catalog."""

    def __init__(self, unknown_keys: Iterable[str], valid_keys: Iterable[str]):
        self.unknown_keys: List[str] = list(unknown_keys)
        self.valid_keys: List[str] = list(valid_keys)
        super().__init__(
            f"Invalid profile key(s): {', '.join(str(k) for k in self.unknown_keys)}. "
            f"Valid profiles are: {', '.join(self.valid_keys)}"
        )


class WorkloadCatalog:
    """Read-only collection of request profiles, looked up by key."""

    def __init__(self, profiles: Iterable[RequestProfile]):
        """Build the catalog.

        Args:
            profiles: Profiles to register, in display order. Keys must be unique.
        """
        table = {}
        for profile in profiles:
            if profile.key in table:
                raise ValueError(f"Duplicate profile key: {profile.key}")
            table[profile.key] = profile
        self._profiles: Mapping[str, RequestProfile] = MappingProxyType(table)

        logger.debug(f"WorkloadCatalog initialized with {len(table)} profiles")

    def lookup(self, key: str) -> RequestProfile:
        """Return the profile registered under ``key``."""
        try:
            return self._profiles[key]
        except (KeyError, TypeError):
            raise UnknownProfile([key], self.keys()) from None

    def validate_keys(self, keys: Iterable[str]) -> None:
        """Raise UnknownProfile naming every key that is not in the catalog."""
        unknown = []
        for key in keys:
            if key not in self and key not in unknown:
                unknown.append(key)
        if unknown:
            raise UnknownProfile(unknown, self.keys())

    def keys(self) -> List[str]:
        return list(self._profiles.keys())

    def profiles(self) -> List[RequestProfile]:
        return list(self._profiles.values())

    def __contains__(self, key: object) -> bool:
        # Unhashable keys can never be registered
        try:
            return key in self._profiles
        except TypeError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)


def _cpu(duration: int) -> Phase:
    return Phase(PhaseKind.CPU, duration)


def _io(duration: int) -> Phase:
    return Phase(PhaseKind.IO, duration)


DEFAULT_CATALOG = WorkloadCatalog([
    RequestProfile(
        key="low-io",
        name="Low IO (3 small DB queries)",
        phases=(
            _cpu(20),  # Initial processing
            _io(10),   # DB query 1
            _cpu(20),
            _io(10),   # DB query 2
            _cpu(20),
            _io(10),   # DB query 3
            _cpu(30),  # Final processing
        ),
    ),
    RequestProfile(
        key="heavy-io",
        name="Heavy IO (LLM API call)",
        phases=(
            _cpu(10),   # Setup
            _io(500),   # External API call
            _cpu(50),   # Process response
        ),
    ),
    RequestProfile(
        key="cpu-bound",
        name="CPU bound (report rendering)",
        phases=(
            _cpu(60),  # Query result aggregation
            _io(5),    # Cache write
            _cpu(60),  # Template rendering
        ),
    ),
])


def lookup(key: str) -> RequestProfile:
    """Look up a profile in the default catalog."""
    return DEFAULT_CATALOG.lookup(key)
