from typing import List, Optional

import pydantic

from merge_me.events.base import GithubEvent


class Pusher(pydantic.BaseModel):
    name: str
    email: Optional[str] = None


class Commit(pydantic.BaseModel):
    id: Optional[str] = None
    message: str


class PushEvent(GithubEvent):
    """
    https://docs.github.com/en/webhooks/webhook-events-and-payloads#push
    """

    ref: str
    pusher: Pusher
    commits: List[Commit] = []
    head_commit: Optional[Commit] = None
