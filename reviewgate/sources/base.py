"""Abstract base for change sources (local git checkout, hosting API)."""

from abc import ABC, abstractmethod
from typing import List

from reviewgate.models import DiffRange


class DiffEnumerationFailure(Exception):
    """Raised when the changed paths of a diff range cannot be listed."""

    pass


class ChangeSource(ABC):
    """Lists changed paths for a diff range.

    Paths are in host diff order, added/modified/deleted files included,
    renames reported under their destination path.
    """

    @abstractmethod
    def list_changed_paths(self, diff_range: DiffRange) -> List[str]:
        """Return paths changed between the two revisions of diff_range."""
        ...

    def has_revision(self, revision: str) -> bool:
        """Return True if revision is known. Override if the source can check."""
        return True
