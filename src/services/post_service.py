import importlib

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import BadRequestError, NotFoundError
import schemas.posts

SessionMaker = async_sessionmaker[AsyncSession]

DELETE_SELECTOR_ERROR = "request needs exactly one of 'text' or 'id'"


def _repo():
    # Resolved per call so tests can monkeypatch repository functions
    return importlib.import_module("db.repositories.post_repository")


async def get_posts(session_maker: SessionMaker, include_unpublished: bool = False) -> list[schemas.posts.PostOut]:
    posts = await _repo().get_posts(session_maker, include_unpublished=include_unpublished)
    return [schemas.posts.PostOut.model_validate(p) for p in posts]


async def get_post_by_id(session_maker: SessionMaker, post_id: int) -> schemas.posts.PostOut:
    post = await _repo().get_post_by_id(session_maker, post_id)
    if post is None:
        raise NotFoundError(f"Post with id {post_id} not found")
    return schemas.posts.PostOut.model_validate(post)


async def create_post(session_maker: SessionMaker, post_data: schemas.posts.PostCreate) -> schemas.posts.PostOut:
    post = await _repo().create_post(session_maker, title=post_data.title, body=post_data.body)
    return schemas.posts.PostOut.model_validate(post)


async def publish_post(session_maker: SessionMaker, post_id: int) -> schemas.posts.PostOut:
    post = await _repo().publish_post(session_maker, post_id)
    return schemas.posts.PostOut.model_validate(post)


async def delete_posts(session_maker: SessionMaker, query: schemas.posts.PostDeleteQuery) -> int:
    if query.selector_count() != 1:
        raise BadRequestError(DELETE_SELECTOR_ERROR)

    repo = _repo()
    if query.text is not None:
        return await repo.delete_posts_by_title(session_maker, query.text)
    return await repo.delete_post_by_id(session_maker, query.id)
