from pydantic import BaseModel, Field

# Range of the INTEGER id column
POST_ID_MIN = -(2**31)
POST_ID_MAX = 2**31 - 1


class PostCreate(BaseModel):
    """Creation payload. ``published`` and ``id`` are not client-settable."""

    title: str = Field(..., description="Post title")
    body: str = Field(..., description="Post body")


class PostOut(BaseModel):
    id: int = Field(..., description="Post ID")
    title: str = Field(..., description="Post title")
    body: str = Field(..., description="Post body")
    published: bool = Field(..., description="Whether the post is published")

    model_config = {"from_attributes": True}


class PostDeleteQuery(BaseModel):
    text: str | None = Field(None, description="Delete posts whose title contains this text")
    id: int | None = Field(None, ge=POST_ID_MIN, le=POST_ID_MAX, description="Delete the post with this ID")

    def selector_count(self) -> int:
        return sum(value is not None for value in (self.text, self.id))
