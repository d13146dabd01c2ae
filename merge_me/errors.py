from __future__ import annotations

from typing import Any, List, Mapping, Optional

GraphQLErrorKind = str


class GraphQLRequestError(Exception):
    """
    GitHub responded with a GraphQL error payload instead of data.

    GitHub returns HTTP 200 for most GraphQL failures, including rejected
    mutations, so the `errors` list is the only signal.
    """

    def __init__(self, errors: Optional[List[Mapping[str, Any]]]) -> None:
        self.errors = errors or []
        messages = "; ".join(str(error.get("message")) for error in self.errors)
        super().__init__(messages or "GraphQL response did not contain data")


def identify_github_graphql_error(errors: Any) -> set[GraphQLErrorKind]:
    kinds: set[GraphQLErrorKind] = set()
    if not errors:
        return kinds
    for error in errors:
        if "type" in error:
            if error["type"] == "RATE_LIMITED":
                kinds.add("rate_limited")
            elif error["type"] == "UNPROCESSABLE":
                kinds.add("unprocessable")
            elif error["type"] == "NOT_FOUND":
                kinds.add("not_found")
            else:
                kinds.add("unknown")
        elif str(error.get("message", "")).startswith(
            "Something went wrong while executing your query."
        ):
            kinds.add("internal")
        else:
            kinds.add("unknown")
    return kinds
