"""In-process client storage, for tests and server-side request scopes."""

from storefront.storage.port import ClientStorage


class MemoryClientStorage(ClientStorage):
    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._values: dict[str, bytes] = dict(initial or {})

    def get(self, key):
        return self._values.get(key)

    def set(self, key, value):
        self._values[key] = bytes(value)
