"""Order request and response bodies."""

from uuid import UUID

from app.schemas.base import CamelModel


class OrderValidate(CamelModel):
    order_id: str


class OrderRead(CamelModel):
    id: UUID
    fs_id: str
    user_id: str
