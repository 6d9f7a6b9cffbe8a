"""
Ports (interfaces) for durable and remote storage.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

# Returns the current time as epoch milliseconds.
Clock = Callable[[], int]

# Returns a fresh unique identifier.
IdFactory = Callable[[], str]


class KeyValueStore(ABC):
    """
    Port for synchronous key-value persistence of JSON blobs.

    Implementations:
        - MemoryKeyValueStore: Process-local dict, used in tests.
        - FileKeyValueStore: One JSON file per key under a data directory.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """
        Read the raw value stored under `key`.

        Returns:
            The stored string, or None if nothing has been written yet.
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Durably store `value` under `key`, replacing any previous value.
        """
        pass

    @abstractmethod
    def copy(self, key: str, new_key: str) -> bool:
        """
        Copy the raw value under `key` to `new_key`, byte for byte.

        Returns:
            False if nothing is stored under `key`.
        """
        pass


class RemoteSnapshotStore(ABC):
    """
    Port for publishing and fetching snapshots outside the local machine.

    Implementations:
        - PasteServiceStore: Uploads to a paste service and returns its URL.
    """

    @abstractmethod
    async def upload(self, data: dict[str, Any]) -> str:
        """
        Publish a snapshot.

        Returns:
            A URL that `download` accepts.
        """
        pass

    @abstractmethod
    async def download(self, url: str) -> dict[str, Any]:
        """
        Fetch a previously published snapshot.

        Raises:
            ExternalFetchError: If the snapshot cannot be retrieved or parsed.
        """
        pass

    async def aclose(self) -> None:
        """Release network resources. No-op unless the adapter holds any."""
        return None
