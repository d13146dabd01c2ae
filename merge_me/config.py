from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

DEFAULT_MERGE_METHOD = "SQUASH"
DEFAULT_MAXIMUM_RETRIES = 3


class MergeMethod(str, Enum):
    """
    https://docs.github.com/en/graphql/reference/enums#pullrequestmergemethod
    """

    merge = "MERGE"
    squash = "SQUASH"
    rebase = "REBASE"


class InvalidMergeMethod(ValueError):
    pass


class InvalidMaximumRetries(ValueError):
    pass


def parse_merge_method(raw: str | None) -> MergeMethod:
    value = (raw or DEFAULT_MERGE_METHOD).strip().upper()
    try:
        return MergeMethod(value)
    except ValueError:
        allowed = ", ".join(method.value for method in MergeMethod)
        raise InvalidMergeMethod(
            f"Unknown merge method: {raw!r}. Expected one of: {allowed}."
        ) from None


def parse_maximum_retries(raw: str | int | None) -> int:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return DEFAULT_MAXIMUM_RETRIES
    try:
        retries = int(raw)
    except ValueError:
        raise InvalidMaximumRetries(
            f"Maximum retries must be an integer, got {raw!r}."
        ) from None
    if retries < 0:
        raise InvalidMaximumRetries(
            f"Maximum retries must not be negative, got {retries}."
        )
    return retries


class Inputs(BaseModel):
    # login of the account whose pull requests we merge, e.g. dependabot[bot]
    github_login: str
    merge_method: MergeMethod = MergeMethod.squash
    # additional merge attempts after the first failure
    maximum_retries: int = Field(default=DEFAULT_MAXIMUM_RETRIES, ge=0)
