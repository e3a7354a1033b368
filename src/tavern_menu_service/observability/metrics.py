"""Custom metrics for the tavern menu service."""

from opentelemetry import metrics

# Get meter for menu service
meter = metrics.get_meter("menu-svc")

menu_items_added_counter = meter.create_counter(
    name="menu_items_added_total",
    description="Total number of items added to a menu by menu type",
    unit="1",
)

menu_items_removed_counter = meter.create_counter(
    name="menu_items_removed_total",
    description="Total number of items removed from a menu by menu type",
    unit="1",
)

api_error_counter = meter.create_counter(
    name="api_errors_total",
    description="Total number of error responses by error kind and status",
    unit="1",
)


def record_item_added(menu_type: str) -> None:
    """Record an item being added to a menu.

    Args:
        menu_type: The menu the item was added to (e.g., "ale", "wine")
    """
    menu_items_added_counter.add(1, {"menu_type": menu_type})


def record_item_removed(menu_type: str) -> None:
    """Record an item being removed from a menu.

    Args:
        menu_type: The menu the item was removed from
    """
    menu_items_removed_counter.add(1, {"menu_type": menu_type})


def record_api_error(kind: str, status_code: int) -> None:
    """Record an error response sent to a client.

    Args:
        kind: Error kind discriminator (e.g., "validation_error")
        status_code: HTTP status of the response
    """
    api_error_counter.add(1, {"error_kind": kind, "status_code": status_code})
