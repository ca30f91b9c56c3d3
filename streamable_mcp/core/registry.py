from __future__ import annotations

from types import MappingProxyType
from typing import List, Mapping

from .errors import UnknownServerError


class ServerRegistry:
    """Read-only mapping of logical server name -> base endpoint URL."""

    def __init__(self, servers: Mapping[str, str]):
        for name, url in servers.items():
            if not url:
                raise ValueError(f"Server '{name}' has an empty URL")
        self._servers: Mapping[str, str] = MappingProxyType(dict(servers))

    def validate(self, name: str) -> str:
        """Return the URL registered for `name` or raise UnknownServerError."""
        url = self._servers.get(name)
        if url is None:
            raise UnknownServerError(name, self.names())
        return url

    def names(self) -> List[str]:
        return list(self._servers.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._servers

    def __len__(self) -> int:
        return len(self._servers)

    def __repr__(self) -> str:
        return f"ServerRegistry({dict(self._servers)!r})"
