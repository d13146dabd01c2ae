import pytest
import structlog

from merge_me.logging import add_request_info_processor


@pytest.fixture(autouse=True)
def configure_structlog() -> None:
    """
    Reset structlog before every test so loggers bound at import time pick up
    the test processors instead of a cached configuration.
    """
    structlog.reset_defaults()
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            add_request_info_processor,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
