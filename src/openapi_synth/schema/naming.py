"""Content-derived schema names and their readable overrides.

An anonymous object (a dict, a decoded JSON object) is named after its key
set: the sorted keys are joined on NUL and hashed to a 16 character hex digest.
The same key set always yields the same name, whatever the insertion order.
"""

import hashlib
import logging
from collections.abc import Iterable

from pydantic import BaseModel

logger = logging.getLogger(__name__)


def key_digest(keys: Iterable[str]) -> str:
    """Stable 16 hex character digest of a key set."""
    joined = "\x00".join(sorted(str(k) for k in keys))
    return hashlib.blake2b(joined.encode("utf-8"), digest_size=8).hexdigest()


class NameCollision(BaseModel):
    """Two different names registered for the same key set."""

    digest: str
    previous: str
    name: str

    def __str__(self) -> str:
        return f"schema name collision for {self.digest}: {self.previous!r} overridden by {self.name!r}"


class SchemaNameRegistry:
    """Maps key-set digests to readable schema names.

    One registry belongs to one document, so documents built side by side
    do not see each other's names.
    """

    def __init__(self):
        self._names: dict[str, str] = {}
        self.collisions: list[NameCollision] = []

    def set_name(self, name: str, keys: Iterable[str]) -> str:
        """Use ``name`` as the title of any object with exactly these keys.

        Registering a different name for a known key set is recorded as a
        collision; the newer name wins.
        """
        digest = key_digest(keys)
        previous = self._names.get(digest)
        if previous is not None and previous != name:
            logger.warning("%s overrides named schema: %s -> %s", digest, previous, name)
            self.collisions.append(NameCollision(digest=digest, previous=previous, name=name))
        self._names[digest] = name
        return digest

    def get_name(self, keys: Iterable[str]) -> str:
        """Registered name for the key set, or its digest."""
        digest = key_digest(keys)
        return self._names.get(digest, digest)

    def __contains__(self, digest: str) -> bool:
        return digest in self._names

    def __len__(self) -> int:
        return len(self._names)
