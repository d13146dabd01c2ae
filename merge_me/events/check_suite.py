from typing import List, Optional

import pydantic

from merge_me.events.base import GithubEvent


class CommitAuthor(pydantic.BaseModel):
    name: str
    email: Optional[str] = None


class HeadCommit(pydantic.BaseModel):
    id: Optional[str] = None
    message: str
    author: CommitAuthor


class PullRequest(pydantic.BaseModel):
    number: int


class CheckSuite(pydantic.BaseModel):
    # null until the suite has completed
    conclusion: Optional[str] = None
    head_branch: Optional[str] = None
    head_sha: str
    head_commit: HeadCommit
    pull_requests: List[PullRequest] = []


class CheckSuiteEvent(GithubEvent):
    """
    https://docs.github.com/en/webhooks/webhook-events-and-payloads#check_suite
    """

    action: str
    check_suite: CheckSuite
