"""Base class for per-document extractors."""

from abc import ABC, abstractmethod
from typing import Iterator

from ..document import JsonDict, root_objects, walk_objects


class Extractor(ABC):
    """Contract for extractors. Each instance handles exactly one document."""

    @abstractmethod
    def extract(self, mod: JsonDict) -> None:
        """Collect this extractor's records from the decoded save."""

    def iter_objects(self, mod: JsonDict) -> Iterator[JsonDict]:
        """Visit every object of the save in stack order."""
        return walk_objects(root_objects(mod))
