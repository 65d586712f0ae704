"""Path scope rule (static include/exclude globs)."""

from pydantic import BaseModel, ConfigDict


class PathScopeRule(BaseModel):
    """Include and exclude globs, rooted at the repository root.

    Excludes are evaluated after includes and can only remove matches.
    """

    model_config = ConfigDict(frozen=True)

    include_globs: tuple[str, ...] = ()
    exclude_globs: tuple[str, ...] = ()
