# src/ui/router.py

"""Route table mapping URL-style paths to screens."""

from collections.abc import Callable
from dataclasses import dataclass

from textual.screen import Screen

ScreenFactory = Callable[[dict[str, str]], Screen[None]]


@dataclass(frozen=True)
class Route:
    """A path pattern such as ``/products/edit/:id`` and its screen."""

    pattern: str
    factory: ScreenFactory
    guarded: bool = False
    capability: str | None = None

    def match(self, path: str) -> dict[str, str] | None:
        """Return the path parameters when *path* fits the pattern."""
        want = [s for s in self.pattern.split("/") if s]
        got = [s for s in path.split("?")[0].split("/") if s]
        if len(want) != len(got):
            return None
        params: dict[str, str] = {}
        for expected, actual in zip(want, got):
            if expected.startswith(":"):
                params[expected[1:]] = actual
            elif expected != actual:
                return None
        return params


class Router:
    """First-match lookup over an ordered list of routes."""

    def __init__(self, routes: list[Route]) -> None:
        self.routes = routes

    def resolve(self, path: str) -> tuple[Route, dict[str, str]] | None:
        for route in self.routes:
            params = route.match(path)
            if params is not None:
                return route, params
        return None
