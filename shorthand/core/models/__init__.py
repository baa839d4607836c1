"""
Domain models — Pydantic types for gh-shorthand.

All models are re-exported here for convenient access:

    from shorthand.core.models import ShorthandConfig, FetchResult, Item
"""

from shorthand.core.models.config import ShorthandConfig
from shorthand.core.models.items import FilterResult, Icon, Item, ModItem, Mods, Text
from shorthand.core.models.rpc import FetchResult, Issue, Project, Repo

__all__ = [
    # rpc.py
    "FetchResult",
    # items.py
    "FilterResult",
    "Icon",
    "Issue",
    "Item",
    "ModItem",
    "Mods",
    "Project",
    "Repo",
    # config.py
    "ShorthandConfig",
    "Text",
]
