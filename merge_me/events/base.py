from typing import Optional

import pydantic


class Owner(pydantic.BaseModel):
    login: str


class Repository(pydantic.BaseModel):
    name: str
    owner: Owner


class GithubEvent(pydantic.BaseModel):
    repository: Repository
    sender: Optional[Owner] = None
