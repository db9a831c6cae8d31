from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Sequence


class ResolutionError(RuntimeError):
    """Base class for failures of a single ``get``/``resolve`` call."""

    def __init__(self, name: str, msg: str) -> None:
        super().__init__(msg)
        self.name = name


class ComponentNotFound(ResolutionError):
    def __init__(self, name: str) -> None:
        super().__init__(name, f"Component '{name}' not found")


class NamedComponentNotFound(ResolutionError):
    def __init__(self, name: str) -> None:
        super().__init__(name, f"No component or property named '{name}' found")


class CyclicDependency(ResolutionError):
    def __init__(self, name: str, path: Sequence[str]) -> None:
        self.path = tuple(path)
        super().__init__(name, f"Cyclic dependency on '{name}': {' -> '.join(self.path)}")


class ContainerClosedError(ResolutionError):
    def __init__(self) -> None:
        super().__init__("Container", "Container has been closed")
