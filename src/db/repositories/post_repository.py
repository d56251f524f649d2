import logging

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import Session

from db.executor import do_query
from db.models.post import Post

logger = logging.getLogger(__name__)

LIST_LIMIT: int = 20

SessionMaker = async_sessionmaker[AsyncSession]


async def get_posts(session_maker: SessionMaker, include_unpublished: bool = False) -> list[Post]:
    def _work(db: Session) -> list[Post]:
        stmt = select(Post)
        if not include_unpublished:
            stmt = stmt.where(Post.published.is_(True))
        return list(db.scalars(stmt.limit(LIST_LIMIT)).all())

    return await do_query(session_maker, _work)


async def get_post_by_id(session_maker: SessionMaker, post_id: int) -> Post | None:
    def _work(db: Session) -> Post | None:
        return db.get(Post, post_id)

    post = await do_query(session_maker, _work)
    if post is None:
        logger.info("Post with id %s not found", post_id)
    return post


async def create_post(session_maker: SessionMaker, title: str, body: str) -> Post:
    def _work(db: Session) -> Post:
        new_post = Post(title=title, body=body, published=False)
        db.add(new_post)
        db.flush()
        return new_post

    post = await do_query(session_maker, _work)
    logger.info("Created new post with id %s", post.id)
    return post


async def publish_post(session_maker: SessionMaker, post_id: int) -> Post:
    """Flip ``published`` to true and return the updated row.

    A missing id makes ``scalar_one`` raise ``NoResultFound``, which the
    executor reports as an internal error.
    """

    def _work(db: Session) -> Post:
        stmt = update(Post).where(Post.id == post_id).values(published=True).returning(Post)
        return db.execute(stmt).scalar_one()

    post = await do_query(session_maker, _work)
    logger.info("Published post with id %s", post_id)
    return post


async def delete_posts_by_title(session_maker: SessionMaker, text: str) -> int:
    """Delete every post whose title contains ``text`` literally.

    ``%`` and ``_`` in ``text`` are escaped and never act as wildcards.
    """

    def _work(db: Session) -> int:
        stmt = (
            delete(Post)
            .where(Post.title.contains(text, autoescape=True))
            .execution_options(synchronize_session=False)
        )
        return db.execute(stmt).rowcount

    deleted = await do_query(session_maker, _work)
    logger.info("Deleted %s post(s) with title containing %r", deleted, text)
    return deleted


async def delete_post_by_id(session_maker: SessionMaker, post_id: int) -> int:
    def _work(db: Session) -> int:
        stmt = delete(Post).where(Post.id == post_id).execution_options(synchronize_session=False)
        return db.execute(stmt).rowcount

    deleted = await do_query(session_maker, _work)
    if deleted:
        logger.info("Deleted post with id %s", post_id)
    else:
        logger.info("Skip delete: post %s not found", post_id)
    return deleted
