import pytest

from core.exceptions import BadRequestError, NotFoundError
import db.repositories.post_repository as post_repository
from db.models.post import Post
from schemas.posts import PostCreate, PostDeleteQuery
from services import post_service

pytestmark = [pytest.mark.unit, pytest.mark.anyio]


@pytest.fixture
def forbid_repository(monkeypatch):
    """Fail the test if any delete reaches the repository."""

    async def _fail(*args, **kwargs):
        raise AssertionError("repository must not be called")

    monkeypatch.setattr(post_repository, "delete_posts_by_title", _fail)
    monkeypatch.setattr(post_repository, "delete_post_by_id", _fail)


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"text": None, "id": None},
        {"text": "abc", "id": 1},
        {"text": "", "id": 0},
    ],
)
async def test_delete_posts_requires_exactly_one_selector(payload, forbid_repository):
    with pytest.raises(BadRequestError) as exc_info:
        await post_service.delete_posts(None, PostDeleteQuery(**payload))

    assert exc_info.value.message == "request needs exactly one of 'text' or 'id'"


async def test_delete_posts_by_text_dispatch(monkeypatch):
    calls = []

    async def mock_delete_by_title(session_maker, text):
        calls.append(("text", text))
        return 2

    monkeypatch.setattr(post_repository, "delete_posts_by_title", mock_delete_by_title)

    # An empty string still counts as a provided selector
    assert await post_service.delete_posts(None, PostDeleteQuery(text="")) == 2
    assert calls == [("text", "")]


async def test_delete_posts_by_id_dispatch(monkeypatch):
    calls = []

    async def mock_delete_by_id(session_maker, post_id):
        calls.append(("id", post_id))
        return 0

    monkeypatch.setattr(post_repository, "delete_post_by_id", mock_delete_by_id)

    assert await post_service.delete_posts(None, PostDeleteQuery(id=5)) == 0
    assert calls == [("id", 5)]


async def test_get_post_by_id_not_found(monkeypatch):
    # Mock get_post_by_id to return None
    async def mock_get_post_by_id(*args, **kwargs):
        return None

    monkeypatch.setattr(post_repository, "get_post_by_id", mock_get_post_by_id)

    with pytest.raises(NotFoundError):
        await post_service.get_post_by_id(None, 1)


async def test_create_post_shapes_repository_row(monkeypatch):
    async def mock_create_post(session_maker, title, body):
        return Post(id=11, title=title, body=body, published=False)

    monkeypatch.setattr(post_repository, "create_post", mock_create_post)

    out = await post_service.create_post(None, PostCreate(title="T", body="B"))

    assert out.model_dump() == {"id": 11, "title": "T", "body": "B", "published": False}
