from __future__ import annotations

from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from ._descriptor import DependencySpec
    from ._resolver import Resolver

_UNRESOLVED = object()


class LazyProxy:
    """Stand-in for a lazy dependency.

    Nothing is resolved when the proxy is created. The first use (attribute
    access, call, or any of the forwarded operators) resolves the dependency
    once; every later use goes straight to the memoized target.
    """

    __slots__ = ("_dependency", "_resolver", "_target")

    def __init__(self, resolver: Resolver, dependency: DependencySpec) -> None:
        object.__setattr__(self, "_resolver", resolver)
        object.__setattr__(self, "_dependency", dependency)
        object.__setattr__(self, "_target", _UNRESOLVED)

    def _materialize(self) -> Any:
        target = object.__getattribute__(self, "_target")
        if target is not _UNRESOLVED:
            return target

        resolver = object.__getattribute__(self, "_resolver")
        with resolver.lock:
            target = object.__getattribute__(self, "_target")
            if target is _UNRESOLVED:
                target = resolver.resolve_dependency(object.__getattribute__(self, "_dependency"))
                object.__setattr__(self, "_target", target)
        return target

    @property
    def materialized(self) -> bool:
        return object.__getattribute__(self, "_target") is not _UNRESOLVED

    @property  # type: ignore[misc]
    def __class__(self) -> type:
        return type(self._materialize())

    def __getattr__(self, name: str) -> Any:
        return getattr(self._materialize(), name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self._materialize(), name, value)

    def __delattr__(self, name: str) -> None:
        delattr(self._materialize(), name)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self._materialize()(*args, **kwargs)

    def __str__(self) -> str:
        return str(self._materialize())

    def __bool__(self) -> bool:
        return bool(self._materialize())

    def __hash__(self) -> int:
        return hash(self._materialize())

    def __eq__(self, other: object) -> bool:
        return self._materialize() == other

    def __ne__(self, other: object) -> bool:
        return self._materialize() != other

    def __lt__(self, other: Any) -> bool:
        return self._materialize() < other

    def __le__(self, other: Any) -> bool:
        return self._materialize() <= other

    def __gt__(self, other: Any) -> bool:
        return self._materialize() > other

    def __ge__(self, other: Any) -> bool:
        return self._materialize() >= other

    def __len__(self) -> int:
        return len(self._materialize())

    def __iter__(self) -> Any:
        return iter(self._materialize())

    def __contains__(self, item: Any) -> bool:
        return item in self._materialize()

    def __getitem__(self, key: Any) -> Any:
        return self._materialize()[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._materialize()[key] = value

    def __delitem__(self, key: Any) -> None:
        del self._materialize()[key]

    def __enter__(self) -> Any:
        return self._materialize().__enter__()

    def __exit__(self, *exc_info: Any) -> Any:
        return self._materialize().__exit__(*exc_info)

    def __repr__(self) -> str:
        dependency = object.__getattribute__(self, "_dependency")
        label = dependency.name or dependency.type_name
        if not self.materialized:
            return f"<LazyProxy '{label}' (unresolved)>"
        return f"<LazyProxy '{label}' -> {self._materialize()!r}>"
