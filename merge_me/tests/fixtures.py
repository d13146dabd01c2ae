import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from merge_me.events import CheckSuiteEvent, PushEvent
from merge_me.queries import (
    MergeableState,
    MergeStateStatus,
    PullRequestInformation,
    PullRequestState,
    ReviewEdge,
    ReviewNode,
)

PULL_REQUEST_ID = "MDExOlB1bGxSZXF1ZXN0MzE3MDI5MjU4"
COMMIT_HEADLINE = "Update test"
GITHUB_LOGIN = "dependabot-preview[bot]"

EVENT_FIXTURES = Path(__file__).parent.parent / "test" / "fixtures" / "events"


def load_event_fixture(event_name: str, name: str) -> Dict[str, Any]:
    return json.loads((EVENT_FIXTURES / event_name / f"{name}.json").read_text())


def create_check_suite_event(
    *, author: str = GITHUB_LOGIN, pull_request_numbers: Optional[List[int]] = None
) -> CheckSuiteEvent:
    payload = load_event_fixture("check_suite", "completed_success")
    payload["check_suite"]["head_commit"]["author"]["name"] = author
    if pull_request_numbers is not None:
        payload["check_suite"]["pull_requests"] = [
            dict(number=number) for number in pull_request_numbers
        ]
    return CheckSuiteEvent.model_validate(payload)


def create_push_event(
    *, pusher: str = GITHUB_LOGIN, ref: Optional[str] = None
) -> PushEvent:
    payload = load_event_fixture("push", "branch_update")
    payload["pusher"]["name"] = pusher
    if ref is not None:
        payload["ref"] = ref
    return PushEvent.model_validate(payload)


def create_pull_request(
    *,
    mergeable_state: MergeableState = MergeableState.MERGEABLE,
    merged: bool = False,
    pull_request_state: PullRequestState = PullRequestState.OPEN,
    merge_state_status: Optional[MergeStateStatus] = MergeStateStatus.CLEAN,
    review_states: Optional[List[str]] = None,
    commit_headline: Optional[str] = COMMIT_HEADLINE,
) -> PullRequestInformation:
    return PullRequestInformation(
        pull_request_id=PULL_REQUEST_ID,
        mergeable_state=mergeable_state,
        merged=merged,
        pull_request_state=pull_request_state,
        merge_state_status=merge_state_status,
        review_edges=[
            ReviewEdge(node=ReviewNode(state=state)) for state in review_states or []
        ],
        commit_headline=commit_headline,
    )


def create_pull_request_by_number_data(
    *,
    mergeable: str = "MERGEABLE",
    merged: bool = False,
    state: str = "OPEN",
    merge_state_status: str = "CLEAN",
    review_states: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    The `data` of a FindPullRequestInfoAndReviewsByNumber response.
    """
    return dict(
        repository=dict(
            pullRequest=dict(
                commits=dict(
                    edges=[dict(node=dict(commit=dict(messageHeadline=COMMIT_HEADLINE)))]
                ),
                id=PULL_REQUEST_ID,
                mergeStateStatus=merge_state_status,
                mergeable=mergeable,
                merged=merged,
                reviews=dict(
                    edges=[dict(node=dict(state=s)) for s in review_states or []]
                ),
                state=state,
            )
        )
    )
