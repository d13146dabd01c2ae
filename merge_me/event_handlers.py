from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
import structlog

from merge_me.config import Inputs, MergeMethod
from merge_me.evaluation import Skip, check_author, evaluate, select_mutation
from merge_me.events import CheckSuiteEvent, PushEvent
from merge_me.merge import PullRequestDetails, merge_with_retry
from merge_me.queries import Client, PullRequestInformation
from merge_me.text import get_branch_name, get_commit_headline

logger = structlog.get_logger()

PULL_REQUEST_NOT_FOUND = "Unable to fetch pull request information."


async def try_merge(
    api_client: Client,
    pull_request: PullRequestInformation,
    *,
    commit_headline: str,
    require_clean: bool,
    merge_method: MergeMethod,
    maximum_retries: int,
    log: structlog.stdlib.BoundLogger,
) -> None:
    decision = evaluate(pull_request, require_clean=require_clean)
    if isinstance(decision, Skip):
        log.info(decision.reason)
        return
    mutation = select_mutation(pull_request.review_edge, merge_method)
    await merge_with_retry(
        api_client,
        mutation,
        PullRequestDetails(
            commit_headline=commit_headline,
            pull_request_id=pull_request.pull_request_id,
        ),
        maximum_retries=maximum_retries,
    )


async def check_suite_handle(
    api_client: Client,
    event: CheckSuiteEvent,
    *,
    github_login: str,
    merge_method: MergeMethod,
    maximum_retries: int,
) -> None:
    """
    Merge the pull request whose checks just passed.
    """
    log = logger.bind(
        owner=event.repository.owner.login,
        repo=event.repository.name,
        event_name="check_suite",
    )
    head_commit = event.check_suite.head_commit
    skip = check_author(
        actual_login=head_commit.author.name, expected_login=github_login
    )
    if skip is not None:
        log.info(skip.reason)
        return

    if not event.check_suite.pull_requests:
        log.warning(PULL_REQUEST_NOT_FOUND, head_sha=event.check_suite.head_sha)
        return
    pull_request_number = event.check_suite.pull_requests[0].number
    log = log.bind(number=pull_request_number)

    pull_request = await api_client.find_pull_request_by_number(pull_request_number)
    if pull_request is None:
        log.warning(PULL_REQUEST_NOT_FOUND)
        return
    log.info(f"Found pull request information: {pull_request.model_dump_json()}.")

    await try_merge(
        api_client,
        pull_request,
        commit_headline=(
            pull_request.commit_headline or get_commit_headline(head_commit.message)
        ),
        require_clean=True,
        merge_method=merge_method,
        maximum_retries=maximum_retries,
        log=log,
    )


async def push_handle(
    api_client: Client,
    event: PushEvent,
    *,
    github_login: str,
    merge_method: MergeMethod,
    maximum_retries: int,
) -> None:
    """
    Merge the pull request for the branch that was pushed to.
    """
    log = logger.bind(
        owner=event.repository.owner.login,
        repo=event.repository.name,
        event_name="push",
        ref=event.ref,
    )
    skip = check_author(actual_login=event.pusher.name, expected_login=github_login)
    if skip is not None:
        log.info(skip.reason)
        return

    branch_name = get_branch_name(event.ref)
    commit = event.commits[0] if event.commits else event.head_commit
    if branch_name is None or commit is None:
        # tags and branch deletions don't belong to a pull request.
        log.warning(PULL_REQUEST_NOT_FOUND)
        return

    pull_request = await api_client.find_pull_request_by_reference(branch_name)
    if pull_request is None:
        log.warning(PULL_REQUEST_NOT_FOUND)
        return
    log.info(f"Found pull request information: {pull_request.model_dump_json()}.")

    await try_merge(
        api_client,
        pull_request,
        commit_headline=get_commit_headline(commit.message),
        require_clean=False,
        merge_method=merge_method,
        maximum_retries=maximum_retries,
        log=log,
    )


async def handle_event(
    event_name: str,
    payload: Dict[str, Any],
    *,
    token: str,
    inputs: Inputs,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> None:
    log = logger.bind(event_name=event_name)

    if event_name == "check_suite":
        check_suite_event = CheckSuiteEvent.model_validate(payload)
        check_suite = check_suite_event.check_suite
        if (
            check_suite_event.action != "completed"
            or check_suite.conclusion != "success"
        ):
            log.info(
                f"Check suite has not completed successfully: {check_suite.conclusion}, skipping."
            )
            return
        async with Client(
            owner=check_suite_event.repository.owner.login,
            repo=check_suite_event.repository.name,
            token=token,
            transport=transport,
        ) as api_client:
            await check_suite_handle(
                api_client,
                check_suite_event,
                github_login=inputs.github_login,
                merge_method=inputs.merge_method,
                maximum_retries=inputs.maximum_retries,
            )
    elif event_name == "push":
        push_event = PushEvent.model_validate(payload)
        async with Client(
            owner=push_event.repository.owner.login,
            repo=push_event.repository.name,
            token=token,
            transport=transport,
        ) as api_client:
            await push_handle(
                api_client,
                push_event,
                github_login=inputs.github_login,
                merge_method=inputs.merge_method,
                maximum_retries=inputs.maximum_retries,
            )
    else:
        log.warning(f"Unknown event {event_name}, skipping.")
