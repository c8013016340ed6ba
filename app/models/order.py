"""Order model for purchases validated against the commerce API."""

from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class Order(SQLModel, table=True):
    """A validated external purchase.

    Orders are recorded once and never updated or deleted.

    Attributes:
        id: Unique identifier (UUID).
        fs_id: Order identifier in the FastSpring commerce system.
        user_id: Owner of the order.
    """
    __tablename__ = "orders"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    fs_id: str = Field(unique=True)
    user_id: str
