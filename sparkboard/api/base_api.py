from sparkboard.client import Client
from sparkboard.exceptions import NotAuthenticatedError
from sparkboard.models.user import Actor


def require_actor(actor: Actor | None) -> Actor:
    """
    Ensure an authoring operation has a signed-in user.

    :raises NotAuthenticatedError: If actor is None
    """
    if actor is None:
        raise NotAuthenticatedError("You must be logged in to do that")
    return actor


class BaseApi:

    def __init__(self, client: Client) -> None:
        self._client = client
