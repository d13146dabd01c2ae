from pathlib import Path
from typing import Any, Optional, Type, TypeVar, overload

from starlette.config import Config, undefined

from merge_me.logging import get_logging_level

T = TypeVar("T")


class TypedConfig(Config):
    @overload  # type: ignore [override]
    def __call__(self, key: str, cast: Type[T], default: T = ...) -> T:
        ...

    @overload
    def __call__(self, key: str, cast: Type[str] = ..., default: str = ...) -> str:
        ...

    @overload
    def __call__(
        self, key: str, cast: Type[str] = ..., default: None = ...
    ) -> Optional[str]:
        ...

    def __call__(
        self, key: str, cast: Optional[type] = None, default: Any = undefined
    ) -> Any:
        return super().get(key, cast=cast, default=default)


# .env is only present in local development.
config = TypedConfig(".env" if Path(".env").is_file() else None)

LOGGING_LEVEL = get_logging_level(config("LOGGING_LEVEL", default="INFO"))

# provided by the workflow, e.g. `env: GITHUB_TOKEN: ${{ secrets.GITHUB_TOKEN }}`
GITHUB_TOKEN = config("GITHUB_TOKEN", default=None)

# action inputs are exposed by the runner as INPUT_<NAME> environment variables.
GITHUB_LOGIN = config("INPUT_GITHUB_LOGIN", default="dependabot[bot]")
MERGE_METHOD = config("INPUT_MERGE_METHOD", default="SQUASH")
MAXIMUM_RETRIES = config("INPUT_MAXIMUM_RETRIES", default="3")

# set by the runner for every workflow run.
GITHUB_EVENT_NAME = config("GITHUB_EVENT_NAME", default=None)
GITHUB_EVENT_PATH = config("GITHUB_EVENT_PATH", default=None)

# For GitHub Enterprise, the v4 API has the form:
# http(s)://[hostname]/api/graphql, instead of https://api.github.com/graphql.
GITHUB_V4_API_URL = config(
    "GITHUB_V4_API_URL", default="https://api.github.com/graphql"
)

# An extra header to send with git API requests.
GITHUB_API_HEADER_NAME = config("GITHUB_API_HEADER_NAME", default=None)
GITHUB_API_HEADER_VALUE = config("GITHUB_API_HEADER_VALUE", default=None)
