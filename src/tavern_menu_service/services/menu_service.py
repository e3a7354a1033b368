"""Menu service holding the in-memory menus."""

import logging
import threading
import uuid
from operator import attrgetter
from uuid import UUID

from tavern_menu_service.models.error_models import missing_resource
from tavern_menu_service.models.menu_models import (
    MenuItem,
    MenuSort,
    MenuType,
    NewMenuItem,
    SortOrder,
)
from tavern_menu_service.observability import traced
from tavern_menu_service.observability.metrics import record_item_added, record_item_removed

logger = logging.getLogger(__name__)

Menu = tuple[MenuItem, ...]

SEED_MENUS: dict[MenuType, list[NewMenuItem]] = {
    MenuType.ALE: [
        NewMenuItem(name="Dwarven Spring", description="A smooth pale ale", price=0.8),
        NewMenuItem(name="Monk's Staff", description="A strong dark stout", price=1.2),
        NewMenuItem(name="Harvest Mist", description="A refreshing wheat beer", price=1.0),
    ],
    MenuType.WINE: [
        NewMenuItem(name="Stargazer", description="Sauvignon Blanc, crisp and dry", price=2.2),
        NewMenuItem(name="Alexston Farmstead", description="Moscato, sweet dessert wine", price=2.8),
        NewMenuItem(name="Red Valley", description="Cabernet Sauvignon, full-bodied red", price=2.5),
    ],
    MenuType.FOOD: [
        NewMenuItem(
            name="Today's Special",
            description="Ask the bartender for today's special",
            price=1.2,
        ),
        NewMenuItem(
            name="Steak and Ale Pie",
            description="A hearty pie served with carrots and potatoes",
            price=1.5,
        ),
        NewMenuItem(
            name="Methi Matar Malai",
            description="Pea and fenugreek in a creamy curry sauce",
            price=0.9,
        ),
    ],
}


def _with_id(item: NewMenuItem) -> MenuItem:
    return MenuItem(id=uuid.uuid4(), **item.model_dump())


class MenuService:
    """Service owning the menu registry.

    Each instance holds one immutable snapshot per menu type. Reads return the
    current snapshot; add and remove build a new snapshot and swap it in while
    holding that menu type's lock, so concurrent mutations of the same menu
    are applied one after another.
    """

    def __init__(self, menus: dict[MenuType, list[NewMenuItem]] | None = None) -> None:
        """Initialize the MenuService.

        Args:
            menus: Initial items per menu type, defaults to the seed menus.
                Menu types missing from the mapping start empty.
        """
        source = SEED_MENUS if menus is None else menus
        self._menus: dict[MenuType, Menu] = {
            menu_type: tuple(_with_id(item) for item in source.get(menu_type, []))
            for menu_type in MenuType
        }
        self._locks: dict[MenuType, threading.Lock] = {menu_type: threading.Lock() for menu_type in MenuType}

    def get_menu(self, menu_type: MenuType | str) -> Menu:
        """Get the current snapshot of a menu.

        Args:
            menu_type: The menu to look up

        Returns:
            The menu's items in insertion order

        Raises:
            ApiError: missing_resource if the menu type is not registered
        """
        menu = self._menus.get(menu_type)  # type: ignore[call-overload]
        if menu is None:
            name = menu_type.value if isinstance(menu_type, MenuType) else menu_type
            raise missing_resource(f"Menu type {name} does not exist")
        return menu

    @traced("menu.retrieve")
    def retrieve(
        self,
        menu_type: MenuType | str,
        sort: MenuSort = MenuSort.NAME,
        order: SortOrder = SortOrder.ASC,
    ) -> list[MenuItem]:
        """Retrieve a menu ordered by the given field.

        The sort is stable in both directions, so items with equal keys keep
        their relative menu order.

        Args:
            menu_type: The menu to retrieve
            sort: Field to order by
            order: Sort direction

        Returns:
            A new list of the menu's items in the requested order
        """
        menu = self.get_menu(menu_type)
        return sorted(menu, key=attrgetter(MenuSort(sort).value), reverse=SortOrder(order) is SortOrder.DESC)

    @traced("menu.add")
    def add(self, menu_type: MenuType | str, item: NewMenuItem) -> list[MenuItem]:
        """Append a new item to a menu.

        Args:
            menu_type: The menu to expand
            item: Item fields, a fresh id is generated

        Returns:
            The full updated menu in insertion order
        """
        self.get_menu(menu_type)
        menu_type = MenuType(menu_type)

        with self._locks[menu_type]:
            new_item = _with_id(item)
            expanded = (*self._menus[menu_type], new_item)
            self._menus[menu_type] = expanded

        logger.info(f"Added item {new_item.id} to {menu_type.value} menu")
        record_item_added(menu_type.value)
        return list(expanded)

    @traced("menu.remove")
    def remove(self, menu_type: MenuType | str, item_id: UUID) -> bool:
        """Remove an item from a menu.

        Args:
            menu_type: The menu to reduce
            item_id: Id of the item to remove

        Returns:
            True once the item has been removed

        Raises:
            ApiError: missing_resource if the menu type or item does not exist,
                in which case the menu is left unchanged
        """
        self.get_menu(menu_type)
        menu_type = MenuType(menu_type)

        with self._locks[menu_type]:
            menu = self._menus[menu_type]
            reduced = tuple(item for item in menu if item.id != item_id)
            if len(reduced) == len(menu):
                raise missing_resource(f"Menu item with id {item_id} not found")
            self._menus[menu_type] = reduced

        logger.info(f"Removed item {item_id} from {menu_type.value} menu")
        record_item_removed(menu_type.value)
        return True
