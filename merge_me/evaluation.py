from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from merge_me.config import MergeMethod
from merge_me.queries import (
    MergeableState,
    MergeStateStatus,
    PullRequestInformation,
    PullRequestState,
    ReviewEdge,
    approve_and_merge_pull_request_mutation,
    merge_pull_request_mutation,
)


@dataclass(frozen=True)
class Skip:
    reason: str


@dataclass(frozen=True)
class Proceed:
    pass


Decision = Union[Skip, Proceed]


def check_author(*, actual_login: str, expected_login: str) -> Optional[Skip]:
    """
    Must run before any API call for the event.
    """
    if actual_login != expected_login:
        return Skip(
            f"Pull request created by {actual_login}, not {expected_login}, skipping."
        )
    return None


def evaluate(pull_request: PullRequestInformation, *, require_clean: bool) -> Decision:
    """
    Decide whether we may merge `pull_request`.

    Checks run from most to least definitive and the first failure wins, so a
    closed pull request never reports a conflict.

    `require_clean` enables the mergeStateStatus check, which is only
    available when the pull request was fetched for a check suite.
    """
    if pull_request.pull_request_state != PullRequestState.OPEN:
        return Skip(
            f"Pull request is not open: {pull_request.pull_request_state.value}."
        )
    if pull_request.merged:
        return Skip("Pull request is already merged.")
    if pull_request.mergeable_state != MergeableState.MERGEABLE:
        return Skip(
            f"Pull request is not in a mergeable state: {pull_request.mergeable_state.value}."
        )
    if require_clean and pull_request.merge_state_status != MergeStateStatus.CLEAN:
        merge_state_status = (
            pull_request.merge_state_status.value
            if pull_request.merge_state_status is not None
            else MergeStateStatus.UNKNOWN.value
        )
        return Skip(
            f"Pull request cannot be merged cleanly. Current state: {merge_state_status}."
        )
    return Proceed()


class MutationKind(Enum):
    approve_and_merge = "approve_and_merge"
    merge_only = "merge_only"


@dataclass(frozen=True)
class Mutation:
    kind: MutationKind
    merge_method: MergeMethod
    query: str


def select_mutation(
    review_edge: Optional[ReviewEdge], merge_method: MergeMethod
) -> Mutation:
    """
    Approve and merge pull requests nobody has reviewed yet. Pull requests with
    an existing review are merged without adding another review.
    """
    if review_edge is None:
        return Mutation(
            kind=MutationKind.approve_and_merge,
            merge_method=merge_method,
            query=approve_and_merge_pull_request_mutation(merge_method),
        )
    return Mutation(
        kind=MutationKind.merge_only,
        merge_method=merge_method,
        query=merge_pull_request_mutation(merge_method),
    )
