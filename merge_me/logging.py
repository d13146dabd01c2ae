import logging
import sys
from typing import Any, Dict

import sentry_sdk
import structlog
from httpx import Response
from sentry_sdk.integrations.logging import LoggingIntegration
from structlog_sentry import SentryProcessor

EventDict = Dict[str, Any]


def get_logging_level(name: str) -> int:
    return logging._nameToLevel[name.upper()]


def add_request_info_processor(_: Any, __: Any, event_dict: EventDict) -> EventDict:
    """
    Structlog processor for adding more information to log events that provide
    `res` with an httpx Response object.
    """
    response = event_dict.get("res", None)
    if isinstance(response, Response):
        event_dict["response_content"] = response.content
        event_dict["response_status_code"] = response.status_code
        event_dict["request_url"] = str(response.request.url)
        event_dict["request_method"] = response.request.method
    return event_dict


def configure_logging(level: int = logging.INFO) -> None:
    # for info on logging formats see: https://docs.python.org/3/library/logging.html#logrecord-attributes
    logging.basicConfig(
        stream=sys.stdout,
        level=level,
        format="%(levelname)s %(name)s:%(filename)s:%(lineno)d %(message)s",
    )

    # sentry is a no-op unless SENTRY_DSN is set. The logging integration is
    # disabled as the structlog processor provides more info via the extra data
    # field.
    sentry_sdk.init(integrations=[LoggingIntegration(level=None, event_level=None)])

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_request_info_processor,
            SentryProcessor(event_level=logging.WARNING),
            structlog.processors.KeyValueRenderer(key_order=["event"], sort_keys=True),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
