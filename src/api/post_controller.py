# api/post_controller.py
from typing import Annotated

from fastapi import APIRouter, Body, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from db.database import get_session_maker
import schemas.posts as posts
from services import post_service

posts_router = APIRouter(prefix="/post", tags=["Posts"])

SessionMakerDep = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_maker)]
PostIdPath = Annotated[int, Path(ge=posts.POST_ID_MIN, le=posts.POST_ID_MAX, description="Post ID")]


@posts_router.get(
    "",
    response_model=list[posts.PostOut],
    summary="List posts",
    description="Return up to 20 posts. Unpublished posts are included only when requested.",
)
async def get_posts(
    session_maker: SessionMakerDep,
    include_unpublished: bool | None = Query(None, description="Include unpublished posts"),
) -> list[posts.PostOut]:
    return await post_service.get_posts(session_maker, include_unpublished=bool(include_unpublished))


@posts_router.get(
    "/{post_id}",
    response_model=posts.PostOut,
    summary="Get post by ID",
    description="Fetch a single post by its identifier.",
)
async def get_post(post_id: PostIdPath, session_maker: SessionMakerDep) -> posts.PostOut:
    return await post_service.get_post_by_id(session_maker, post_id)


@posts_router.post(
    "",
    response_model=posts.PostOut,
    summary="Create post",
    description="Create an unpublished post from a title and body.",
)
async def create_post(
    session_maker: SessionMakerDep,
    post_data: Annotated[posts.PostCreate, Body(...)],
) -> posts.PostOut:
    return await post_service.create_post(session_maker, post_data)


@posts_router.post(
    "/{post_id}/publish",
    response_model=posts.PostOut,
    summary="Publish post",
    description="Mark a post as published and return it.",
)
async def publish_post(post_id: PostIdPath, session_maker: SessionMakerDep) -> posts.PostOut:
    return await post_service.publish_post(session_maker, post_id)


@posts_router.delete(
    "",
    response_model=int,
    summary="Delete posts",
    description="Delete by title substring (`text`) or by `id`; exactly one must be given. Returns the number deleted.",
)
async def delete_posts(
    session_maker: SessionMakerDep,
    query: Annotated[posts.PostDeleteQuery, Body(...)],
) -> int:
    return await post_service.delete_posts(session_maker, query)
