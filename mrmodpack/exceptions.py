from typing import Any, Dict, Optional, Sequence


class ModpackError(Exception):
    """Base error carrying a short code and some context for reporting."""

    default_code = "E000"

    def __init__(self, message: str, code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.context = context or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class InvalidVersionFormat(ModpackError, ValueError):
    default_code = "E100"

    def __init__(self, raw: str, message: Optional[str] = None):
        super().__init__(message or f"Invalid game version: {raw!r}", context={"raw": raw})
        self.raw = raw


class EmptyModList(ModpackError):
    default_code = "E200"

    def __init__(self, message: str = "No mods were given"):
        super().__init__(message)


class NoResolvableMods(ModpackError):
    """None of the requested mods could be resolved to compatibility data."""

    default_code = "E201"

    def __init__(self, unresolved: Sequence[str]):
        super().__init__(
            f"Could not resolve any of {len(unresolved)} mod(s)",
            context={"unresolved": list(unresolved)},
        )
        self.unresolved = tuple(unresolved)


class RegistryError(ModpackError):
    default_code = "E300"


class RegistryNotFound(RegistryError):
    default_code = "E304"
