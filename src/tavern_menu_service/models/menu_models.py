"""Menu data models and request schemas.

MenuItem is the stored representation. The remaining models describe the
path parameters, query strings and bodies accepted by the HTTP endpoints and
are consumed by the validation stages.
"""

import re
from enum import Enum
from uuid import UUID

from pydantic import UUID4, BaseModel, ConfigDict, Field, field_validator

UUID4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


class MenuType(str, Enum):
    """Closed set of menus held by the service."""

    ALE = "ale"
    WINE = "wine"
    FOOD = "food"


class MenuSort(str, Enum):
    """Fields a menu can be ordered by."""

    NAME = "name"
    PRICE = "price"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class NewMenuItem(BaseModel):
    """Menu item fields supplied by a client, before an id is assigned."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Item name", min_length=2, max_length=50)
    description: str = Field(..., description="Item description", min_length=15, max_length=500)
    price: float = Field(..., description="Item price", ge=0, allow_inf_nan=False, strict=True)


class MenuItem(NewMenuItem):
    """Menu item stored in a menu."""

    id: UUID = Field(..., description="Unique identifier for the menu item")


class MenuTypeParams(BaseModel):
    """Path parameters naming a menu."""

    type: MenuType


class MenuItemParams(MenuTypeParams):
    """Path parameters naming a single item within a menu."""

    id: UUID4

    @field_validator("id", mode="before")
    @classmethod
    def require_canonical_form(cls, value: object) -> object:
        # Only the hyphenated 8-4-4-4-12 form is accepted on the wire
        if isinstance(value, str) and not UUID4_PATTERN.match(value):
            raise ValueError("Input should be a hyphenated version 4 UUID")
        return value


class MenuQuery(BaseModel):
    """Query string accepted when retrieving a menu."""

    sort: MenuSort = MenuSort.PRICE
    order: SortOrder = SortOrder.ASC


class EchoRequest(BaseModel):
    """Body accepted by the echo endpoint."""

    text: str = Field(..., min_length=1, max_length=50)
