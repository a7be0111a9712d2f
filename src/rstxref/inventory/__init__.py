"""Cross-project inventories and the role catalog."""

from .decoder import Ref, RefMap, decode_inventory, inventory_base_url, join_inventories, load_inventories
from .roles import RoleCatalog, expand_template, resolve_role_catalog_url

__all__ = [
    "Ref",
    "RefMap",
    "RoleCatalog",
    "decode_inventory",
    "expand_template",
    "inventory_base_url",
    "join_inventories",
    "load_inventories",
    "resolve_role_catalog_url",
]
