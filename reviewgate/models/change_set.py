"""Diff range and the in-scope change set computed from it."""

from pydantic import BaseModel, ConfigDict, Field, computed_field


class DiffRange(BaseModel):
    """Two revisions to diff.

    Full (non-incremental) ranges are compared from the merge base, like
    the pull request diff on the host.
    """

    model_config = ConfigDict(frozen=True)

    from_revision: str
    to_revision: str
    incremental: bool = False

    @property
    def is_empty(self) -> bool:
        return self.from_revision == self.to_revision


class ChangeSet(BaseModel):
    """In-scope paths, in host diff order."""

    model_config = ConfigDict(frozen=True)

    matched_paths: tuple[str, ...] = ()
    diff_range: DiffRange | None = None
    changed_count: int = Field(default=0, ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def file_count(self) -> int:
        return len(self.matched_paths)
