"""Recipe model for the recommendation catalog."""

from sqlalchemy import Boolean, Integer, String, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class Recipe(Base, TimestampMixin):
    """Model for storing catalog recipes.

    The catalog is curated externally. The engine only ever touches
    `popularity` and `likes`, and only to increment them.

    ingredients: ordered list of free-text lines, e.g. ["peanut butter", "bread"]
    nutritional_tags: e.g. ["high-protein", "low-carb"]
    """

    __tablename__ = "recipes"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    cuisine: Mapped[str | None] = mapped_column(String(100), nullable=True)
    nutritional_tags: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    complexity: Mapped[str | None] = mapped_column(String(50), nullable=True)
    portion_size: Mapped[str | None] = mapped_column(String(50), nullable=True)
    ingredients: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    popularity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    likes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Recipe(id='{self.id}', name='{self.name}')>"
