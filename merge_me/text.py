from typing import Optional


def get_commit_headline(message: str) -> str:
    """
    The first line of a commit message, used as the title of the merge commit.
    """
    return message.split("\n", 1)[0].rstrip("\r")


def get_branch_name(raw_ref: str) -> Optional[str]:
    """
    Extract the branch name from the ref
    """
    if raw_ref.startswith("refs/heads/"):
        return raw_ref.split("refs/heads/", 1)[1]
    return None
