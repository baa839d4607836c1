"""
Script filter items — the JSON document the launcher renders.

Field names follow the launcher's schema; ``model_dump`` with
``by_alias=True, exclude_none=True`` produces the wire form.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Icon(BaseModel):
    """Icon file path, relative to the workflow directory."""

    path: str


class Text(BaseModel):
    """Clipboard copy / large type text."""

    model_config = ConfigDict(populate_by_name=True)

    copy_text: str = Field(alias="copy")
    large_type: str = Field(alias="largetype")


class ModItem(BaseModel):
    """Alternate action shown while a modifier key is held."""

    valid: bool = True
    arg: str = ""
    subtitle: str = ""
    icon: Icon | None = None


class Mods(BaseModel):
    """Modifier-key alternatives for an item."""

    cmd: ModItem | None = None
    alt: ModItem | None = None
    ctrl: ModItem | None = None


class Item(BaseModel):
    """A single result row."""

    uid: str | None = None
    title: str
    subtitle: str | None = None
    arg: str | None = None
    icon: Icon | None = None
    valid: bool = False
    autocomplete: str | None = None
    mods: Mods | None = None
    text: Text | None = None


class FilterResult(BaseModel):
    """Top-level script filter response."""

    items: list[Item] = Field(default_factory=list)
    rerun: float | None = None
    variables: dict[str, str] | None = None

    def append(self, *items: Item) -> None:
        self.items.extend(items)

    def set_variable(self, key: str, value: str) -> None:
        if self.variables is None:
            self.variables = {}
        self.variables[key] = value

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
