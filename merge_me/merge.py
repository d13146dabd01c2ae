from __future__ import annotations

import asyncio
from dataclasses import dataclass

import structlog

from merge_me.errors import GraphQLRequestError, identify_github_graphql_error
from merge_me.evaluation import Mutation
from merge_me.queries import Client

logger = structlog.get_logger()

EXPONENTIAL_BACKOFF = 2
DEFAULT_WAIT_TIME_MS = 1000

MERGE_FAILURE_HINT = (
    "An error ocurred while merging the Pull Request. This is usually "
    "caused by the base branch being out of sync with the target "
    "branch. In this case, the base branch must be rebased. Some "
    "tools, such as Dependabot, do that automatically."
)


@dataclass(frozen=True)
class PullRequestDetails:
    commit_headline: str
    pull_request_id: str


def get_retry_delay_ms(trial: int) -> int:
    # `trial` is 1-indexed: 1000ms, 4000ms, 9000ms, ...
    return trial**EXPONENTIAL_BACKOFF * DEFAULT_WAIT_TIME_MS


async def merge(
    api_client: Client, mutation: Mutation, details: PullRequestDetails
) -> None:
    """
    Issue exactly one merge mutation. Errors propagate to the caller.
    """
    await api_client.send_mutation(
        mutation.query,
        commit_headline=details.commit_headline,
        pull_request_id=details.pull_request_id,
    )


async def merge_with_retry(
    api_client: Client,
    mutation: Mutation,
    details: PullRequestDetails,
    *,
    maximum_retries: int,
    trial: int = 1,
) -> None:
    """
    Merge, retrying failed attempts with a quadratic backoff.

    At most `maximum_retries` retries follow the first failure. Once they are
    used up the last error is re-raised unchanged.
    """
    log = logger.bind(
        pull_request_id=details.pull_request_id,
        mutation=mutation.kind.value,
        merge_method=mutation.merge_method.value,
    )
    while True:
        try:
            await merge(api_client, mutation, details)
            return
        except Exception as error:
            log.info(MERGE_FAILURE_HINT, trial=trial)
            error_kinds = (
                sorted(identify_github_graphql_error(error.errors))
                if isinstance(error, GraphQLRequestError)
                else []
            )
            log.debug(f"Original error: {error}.", trial=trial, error_kinds=error_kinds)

            if trial > maximum_retries:
                raise

            next_retry_in = get_retry_delay_ms(trial)
            log.info(f"Retrying in {next_retry_in}...", trial=trial)
            await asyncio.sleep(next_retry_in / 1000)
            trial += 1
