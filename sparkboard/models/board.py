from pydantic import BaseModel

from sparkboard.models.meta import create_partial_model


class Board(BaseModel):
    """A named canvas owning zero or more sparks."""
    id: str
    name: str
    user_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    thumbnail_urls: list[str] | None = None


BoardPartial = create_partial_model(Board)
