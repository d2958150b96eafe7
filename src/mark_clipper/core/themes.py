"""Card themes and category helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ThemeKey(str, Enum):
    """Closed set of card themes, stored in ``clips.theme_name``."""

    Olivine = "Olivine"
    Jasmine = "Jasmine"
    Maya_blue = "Maya_blue"
    Eggshell = "Eggshell"


@dataclass(frozen=True)
class ThemeConfig:
    key: ThemeKey
    display_name: str
    color_primary: str
    css_variables: dict[str, str] = field(default_factory=dict)


def _theme(key: ThemeKey, display_name: str, color: str) -> ThemeConfig:
    return ThemeConfig(
        key=key,
        display_name=display_name,
        color_primary=color,
        css_variables={"--theme-primary": color},
    )


THEMES: dict[ThemeKey, ThemeConfig] = {
    ThemeKey.Olivine: _theme(ThemeKey.Olivine, "Olivine", "#b1cd93"),
    ThemeKey.Jasmine: _theme(ThemeKey.Jasmine, "Jasmine", "#f8d584"),
    ThemeKey.Maya_blue: _theme(ThemeKey.Maya_blue, "Maya blue", "#7fbce5"),
    ThemeKey.Eggshell: _theme(ThemeKey.Eggshell, "Eggshell", "#f0e8d4"),
}

DEFAULT_THEME: ThemeKey = ThemeKey.Olivine

DEFAULT_CATEGORY: str = "default"
"""Reserved category meaning "uncategorized"."""


def get_theme_config(key: ThemeKey | str | None) -> ThemeConfig:
    """Return the config for *key*, falling back to the default theme."""
    try:
        return THEMES[ThemeKey(key)]
    except ValueError:
        return THEMES[DEFAULT_THEME]


def normalize_category(value: str | None) -> str:
    """Trim a category name; blank or missing becomes the default sentinel."""
    if value is None:
        return DEFAULT_CATEGORY
    cleaned = value.strip()
    return cleaned or DEFAULT_CATEGORY


def is_uncategorized(category: str | None) -> bool:
    return normalize_category(category) == DEFAULT_CATEGORY
