"""
Artifact Store Protocol

Pass-by-reference storage for large outputs. Bound on the controller so tool
backends and future result types can share it; the loop itself does not read
or write artifacts.
"""

from typing import Protocol


class ArtifactStoreProtocol(Protocol):
    async def put(self, content: bytes, mime_type: str = "text/plain") -> str:
        """Store content and return its reference id."""
        ...

    async def get(self, ref_id: str) -> bytes | None:
        ...
