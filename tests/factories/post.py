"""Post factory for tests."""

from polyfactory.factories.pydantic_factory import ModelFactory
from pydantic import BaseModel


class PostCreate(BaseModel):
    """Schema for creating a post (for factory use)."""

    title: str
    content: str


class PostFactory(ModelFactory[PostCreate]):
    """Factory for generating post attributes."""

    __model__ = PostCreate

    @classmethod
    def title(cls) -> str:
        """Generate a headline."""
        return cls.__faker__.sentence(nb_words=4)

    @classmethod
    def content(cls) -> str:
        """Generate a body."""
        return cls.__faker__.paragraph()
