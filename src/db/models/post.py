from sqlalchemy import Boolean, Column, Integer, Text, false

from ..database import Base


class Post(Base):
    """SQLAlchemy model representing a blog post.

    Attributes:
        id (int): Database-assigned identifier, immutable once inserted.
        title (str): Post title.
        body (str): Post body.
        published (bool): Publication flag; False until the post is published.
    """

    __tablename__ = "posts"

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Unique post identifier",
    )
    title = Column(
        Text,
        nullable=False,
        doc="Post title",
    )
    body = Column(
        Text,
        nullable=False,
        doc="Full post body",
    )
    published = Column(
        Boolean,
        default=False,
        server_default=false(),
        nullable=False,
        doc="Whether the post is published",
    )

    def __repr__(self) -> str:
        """Return the formal string representation for debugging."""
        title_value = getattr(self, "title", None)
        if isinstance(title_value, str) and title_value:
            title_repr = (
                title_value[:30] + "..." if len(title_value) > 30 else title_value
            )
        else:
            title_repr = ""
        return f"<Post(id={self.id}, title={title_repr!r}, published={self.published})>"
