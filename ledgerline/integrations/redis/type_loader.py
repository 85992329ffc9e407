"""Type loading utilities for stored event records.

Provides utilities for dynamically loading event data types from their
fully qualified names, used when decoding records back to events.
"""

import importlib
from functools import lru_cache
from typing import Any


def get_qualified_name(cls: type) -> str:
    """Get the fully qualified name of a class.

    Args:
        cls: The class to get the qualified name for.

    Returns:
        The fully qualified name (module.ClassName).

    Example:
        >>> from ledgerline.domain import Event
        >>> get_qualified_name(Event)
        'ledgerline.domain.event.Event'
    """
    return f"{cls.__module__}.{cls.__qualname__}"


@lru_cache(maxsize=256)
def load_type(qualified_name: str) -> type[Any]:
    """Load a type from its fully qualified name.

    The longest dotted prefix that names an importable module is imported,
    and the remaining parts are looked up as attributes. This resolves
    classes nested inside other classes, such as
    ``billing.events.Billing.InvoiceWasVoided``. Results are cached.

    Args:
        qualified_name: The fully qualified name (module.QualName).

    Returns:
        The loaded type.

    Raises:
        ImportError: If no module prefix can be imported, a module fails
            while importing, or the name does not refer to a class.

    Example:
        >>> cls = load_type("ledgerline.domain.event.Event")
        >>> cls.__name__
        'Event'
    """
    parts = qualified_name.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module_path = ".".join(parts[:split])
        try:
            loaded: Any = importlib.import_module(module_path)
        except ModuleNotFoundError as err:
            if err.name is not None and _is_prefix(err.name, module_path):
                continue
            raise ImportError(f"Failed to import module '{module_path}': {err}") from err
        except Exception as err:
            raise ImportError(f"Failed to import module '{module_path}': {err}") from err
        break
    else:
        raise ImportError(f"Invalid qualified name: {qualified_name}")

    attribute_path = ".".join(parts[split:])
    for attribute in parts[split:]:
        try:
            loaded = getattr(loaded, attribute)
        except AttributeError:
            raise ImportError(
                f"Module '{module_path}' has no attribute '{attribute_path}'"
            ) from None

    if not isinstance(loaded, type):
        raise ImportError(f"'{qualified_name}' is not a class")
    return loaded


def _is_prefix(module_name: str, module_path: str) -> bool:
    return module_path == module_name or module_path.startswith(f"{module_name}.")
