from merge_me.events.check_suite import CheckSuiteEvent  # noqa: F401
from merge_me.events.push import PushEvent  # noqa: F401
