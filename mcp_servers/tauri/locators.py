"""Locator strategy resolution.

Maps the strategy names exposed on the tool surface onto Selenium `By`
constants. Matching is case-insensitive and ignores `-`/`_` separators, so
`linkText`, `link-text` and `LINK_TEXT` are the same strategy.
"""

from __future__ import annotations

from dataclasses import dataclass

from selenium.webdriver.common.by import By

from .errors import UnsupportedLocatorError

# Names advertised in tool schemas (enum order is the order shown to clients).
LOCATOR_STRATEGIES: list[str] = ["id", "css", "xpath", "name", "tag", "class", "linkText", "partialLinkText"]

_STRATEGIES: dict[str, str] = {
    "id": By.ID,
    "css": By.CSS_SELECTOR,
    "cssselector": By.CSS_SELECTOR,
    "xpath": By.XPATH,
    "name": By.NAME,
    # Legacy: a bare tag name is a valid CSS selector.
    "tag": By.CSS_SELECTOR,
    "class": By.CLASS_NAME,
    "classname": By.CLASS_NAME,
    "linktext": By.LINK_TEXT,
    "partiallinktext": By.PARTIAL_LINK_TEXT,
}


def _normalize(strategy: str) -> str:
    return strategy.strip().lower().replace("-", "").replace("_", "").replace(" ", "")


def resolve_locator(strategy: str, value: str) -> tuple[str, str]:
    """Return a Selenium `(by, value)` pair or raise UnsupportedLocatorError."""
    if not isinstance(strategy, str):
        raise UnsupportedLocatorError(repr(strategy))
    by = _STRATEGIES.get(_normalize(strategy))
    if by is None:
        raise UnsupportedLocatorError(strategy)
    return by, value


@dataclass(frozen=True, slots=True)
class LocatorSpec:
    by: str
    value: str

    @classmethod
    def from_args(cls, args: dict, *, by_key: str = "by", value_key: str = "value") -> LocatorSpec:
        return cls(by=str(args.get(by_key) or ""), value=str(args.get(value_key) or ""))

    def resolve(self) -> tuple[str, str]:
        return resolve_locator(self.by, self.value)


__all__ = ["LOCATOR_STRATEGIES", "LocatorSpec", "resolve_locator"]
