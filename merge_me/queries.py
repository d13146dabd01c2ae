from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union, cast

import httpx as http
import structlog
from pydantic import BaseModel
from typing_extensions import TypedDict

import merge_me.app_config as conf
from merge_me.config import MergeMethod
from merge_me.errors import GraphQLRequestError
from merge_me.http import HttpClient

logger = structlog.get_logger()


class ErrorLocation(TypedDict):
    line: int
    column: int


class GraphQLError(TypedDict):
    message: str
    locations: List[ErrorLocation]
    type: Optional[str]
    path: Optional[List[str]]


class GraphQLResponse(TypedDict):
    data: Optional[Dict[Any, Any]]
    errors: Optional[List[GraphQLError]]


FIND_PULL_REQUEST_BY_REFERENCE_QUERY = """
query FindPullRequestInfoAndReviews($referenceName: String!, $repositoryName: String!, $repositoryOwner: String!) {
  repository(name: $repositoryName, owner: $repositoryOwner) {
    pullRequests(headRefName: $referenceName, first: 1) {
      nodes {
        id
        mergeable
        merged
        reviews(last: 1) {
          edges {
            node {
              state
            }
          }
        }
        state
      }
    }
  }
}
"""

FIND_PULL_REQUEST_BY_NUMBER_QUERY = """
query FindPullRequestInfoAndReviewsByNumber($pullRequestNumber: Int!, $repositoryName: String!, $repositoryOwner: String!) {
  repository(name: $repositoryName, owner: $repositoryOwner) {
    pullRequest(number: $pullRequestNumber) {
      commits(last: 1) {
        edges {
          node {
            commit {
              messageHeadline
            }
          }
        }
      }
      id
      mergeStateStatus
      mergeable
      merged
      reviews(last: 1) {
        edges {
          node {
            state
          }
        }
      }
      state
    }
  }
}
"""


def approve_and_merge_pull_request_mutation(merge_method: MergeMethod) -> str:
    """
    Approve and merge the pull request in a single request.
    """
    return f"""
mutation ($commitHeadline: String!, $pullRequestId: ID!) {{
  addPullRequestReview(input: {{event: APPROVE, pullRequestId: $pullRequestId}}) {{
    clientMutationId
  }}
  mergePullRequest(input: {{commitBody: " ", commitHeadline: $commitHeadline, mergeMethod: {merge_method.value}, pullRequestId: $pullRequestId}}) {{
    clientMutationId
  }}
}}
"""


def merge_pull_request_mutation(merge_method: MergeMethod) -> str:
    return f"""
mutation ($commitHeadline: String!, $pullRequestId: ID!) {{
  mergePullRequest(input: {{commitBody: " ", commitHeadline: $commitHeadline, mergeMethod: {merge_method.value}, pullRequestId: $pullRequestId}}) {{
    clientMutationId
  }}
}}
"""


class MergeStateStatus(Enum):
    # The head ref is out of date.
    BEHIND = "BEHIND"
    # The merge is blocked.
    BLOCKED = "BLOCKED"
    # Mergeable and passing commit status.
    CLEAN = "CLEAN"
    # The merge commit cannot be cleanly created.
    DIRTY = "DIRTY"
    # The merge is blocked due to the pull request being a draft.
    DRAFT = "DRAFT"
    # Mergeable with passing commit status and pre-recieve hooks.
    HAS_HOOKS = "HAS_HOOKS"
    # The state cannot currently be determined.
    UNKNOWN = "UNKNOWN"
    # Mergeable with non-passing commit status.
    UNSTABLE = "UNSTABLE"


class MergeableState(Enum):
    # The pull request cannot be merged due to merge conflicts.
    CONFLICTING = "CONFLICTING"
    # The pull request can be merged.
    MERGEABLE = "MERGEABLE"
    # The mergeability of the pull request is still being calculated.
    UNKNOWN = "UNKNOWN"


class PullRequestState(Enum):
    # A pull request that is still open.
    OPEN = "OPEN"
    # A pull request that has been closed without being merged.
    CLOSED = "CLOSED"
    # A pull request that has been closed by being merged.
    MERGED = "MERGED"


class ReviewNode(BaseModel):
    # APPROVED, CHANGES_REQUESTED, COMMENTED, ...
    state: str


class ReviewEdge(BaseModel):
    node: ReviewNode


class ReviewConnection(BaseModel):
    edges: List[ReviewEdge] = []


class CommitInfo(BaseModel):
    messageHeadline: str


class PullRequestCommit(BaseModel):
    commit: CommitInfo


class PullRequestCommitEdge(BaseModel):
    node: PullRequestCommit


class PullRequestCommitConnection(BaseModel):
    edges: List[PullRequestCommitEdge] = []


class PullRequestNode(BaseModel):
    """
    The pull request as returned by GitHub's v4 API.
    """

    id: str
    mergeable: MergeableState
    merged: bool
    state: PullRequestState
    # only requested when looking up a pull request by number
    mergeStateStatus: Optional[MergeStateStatus] = None
    reviews: ReviewConnection = ReviewConnection()
    commits: Optional[PullRequestCommitConnection] = None


class PullRequestInformation(BaseModel):
    """
    Freshly fetched state of a single pull request. Built per event and never
    cached.
    """

    pull_request_id: str
    mergeable_state: MergeableState
    merged: bool
    pull_request_state: PullRequestState
    merge_state_status: Optional[MergeStateStatus] = None
    review_edges: List[ReviewEdge] = []
    commit_headline: Optional[str] = None

    @property
    def review_edge(self) -> Optional[ReviewEdge]:
        return self.review_edges[0] if self.review_edges else None

    @property
    def latest_review_state(self) -> Optional[str]:
        edge = self.review_edge
        return edge.node.state if edge is not None else None


def to_pull_request_information(node: PullRequestNode) -> PullRequestInformation:
    commit_headline = None
    if node.commits is not None and node.commits.edges:
        commit_headline = node.commits.edges[0].node.commit.messageHeadline
    return PullRequestInformation(
        pull_request_id=node.id,
        mergeable_state=node.mergeable,
        merged=node.merged,
        pull_request_state=node.state,
        merge_state_status=node.mergeStateStatus,
        review_edges=node.reviews.edges,
        commit_headline=commit_headline,
    )


def get_repo(*, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    try:
        return cast(Dict[str, Any], data["repository"])
    except (KeyError, TypeError):
        return None


def get_pull_request(*, repo: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    try:
        return cast(Optional[Dict[str, Any]], repo["pullRequest"])
    except (KeyError, TypeError):
        return None


def get_first_pull_request(*, repo: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    try:
        nodes = repo["pullRequests"]["nodes"]
    except (KeyError, TypeError):
        return None
    if not nodes:
        return None
    return cast(Dict[str, Any], nodes[0])


class Client:
    """
    Thin GraphQL client: execute a document and get data back, or raise.
    """

    def __init__(
        self,
        *,
        owner: str,
        repo: str,
        token: str,
        transport: Optional[http.AsyncBaseTransport] = None,
    ):
        self.owner = owner
        self.repo = repo
        # NOTE: We must call `await session.aclose()` when we are finished with our session.
        # We implement an async context manager this handle this.
        self.session = HttpClient(transport=transport)
        self.session.headers["Authorization"] = f"bearer {token}"
        # mergeStateStatus is behind the merge-info preview.
        self.session.headers[
            "Accept"
        ] = "application/vnd.github.merge-info-preview+json"
        if (
            conf.GITHUB_API_HEADER_NAME is not None
            and conf.GITHUB_API_HEADER_VALUE is not None
        ):
            self.session.headers[
                conf.GITHUB_API_HEADER_NAME
            ] = conf.GITHUB_API_HEADER_VALUE
        self.log = logger.bind(owner=self.owner, repo=self.repo)

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        await self.session.aclose()

    async def send_query(
        self, query: str, variables: Mapping[str, Union[str, int, None]]
    ) -> Dict[str, Any]:
        res = await self.session.post(
            conf.GITHUB_V4_API_URL, json=dict(query=query, variables=variables)
        )
        rate_limit_remaining = res.headers.get("x-ratelimit-remaining")
        rate_limit_max = res.headers.get("x-ratelimit-limit")
        log = self.log.bind(rate_limit=f"{rate_limit_remaining}/{rate_limit_max}")
        try:
            res.raise_for_status()
        except http.HTTPError:
            log.debug("github api request error", res=res, exc_info=True)
            raise
        body = cast(GraphQLResponse, res.json())
        errors = body.get("errors")
        if errors:
            log.debug("github api graphql error", errors=errors)
            raise GraphQLRequestError(cast(List[Mapping[str, Any]], errors))
        return body.get("data") or {}

    async def find_pull_request_by_reference(
        self, reference_name: str
    ) -> Optional[PullRequestInformation]:
        """
        Find the first pull request whose head branch is `reference_name`.
        """
        data = await self.send_query(
            query=FIND_PULL_REQUEST_BY_REFERENCE_QUERY,
            variables=dict(
                referenceName=reference_name,
                repositoryName=self.repo,
                repositoryOwner=self.owner,
            ),
        )
        repository = get_repo(data=data)
        if repository is None:
            return None
        pull_request = get_first_pull_request(repo=repository)
        if pull_request is None:
            return None
        return to_pull_request_information(PullRequestNode.model_validate(pull_request))

    async def find_pull_request_by_number(
        self, number: int
    ) -> Optional[PullRequestInformation]:
        data = await self.send_query(
            query=FIND_PULL_REQUEST_BY_NUMBER_QUERY,
            variables=dict(
                pullRequestNumber=number,
                repositoryName=self.repo,
                repositoryOwner=self.owner,
            ),
        )
        repository = get_repo(data=data)
        if repository is None:
            return None
        pull_request = get_pull_request(repo=repository)
        if pull_request is None:
            return None
        return to_pull_request_information(PullRequestNode.model_validate(pull_request))

    async def send_mutation(
        self, mutation: str, *, commit_headline: str, pull_request_id: str
    ) -> None:
        await self.send_query(
            query=mutation,
            variables=dict(
                commitHeadline=commit_headline, pullRequestId=pull_request_id
            ),
        )
