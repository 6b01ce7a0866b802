"""A structure that may refer to its own field, and what moving it breaks."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field


@dataclass(eq=False)
class FieldRef:
    """A writable reference to one attribute of one particular object."""

    owner: object
    name: str

    @property
    def value(self) -> object:
        return getattr(self.owner, self.name)

    @value.setter
    def value(self, new: object) -> None:
        setattr(self.owner, self.name, new)


@dataclass(eq=False)
class MaybeSelfRef:
    """Holds ``a`` and, once initialised, a reference back to ``a``."""

    a: int = 0
    _target: FieldRef | None = field(default=None, init=False, repr=False)

    def init(self) -> None:
        """Point the reference at this object's own ``a``."""
        self._target = FieldRef(self, "a")

    def b(self) -> FieldRef | None:
        """Return the stored reference, or ``None`` before :meth:`init`."""
        return self._target


@dataclass
class Foo:
    """A structure whose first field refers to itself and second does not."""

    a: MaybeSelfRef = field(default_factory=MaybeSelfRef)
    b: str = ""


def _swap(x: MaybeSelfRef, y: MaybeSelfRef) -> None:
    x.a, y.a = y.a, x.a
    x._target, y._target = y._target, x._target


def _describe(ref: FieldRef | None) -> str:
    return "None" if ref is None else f"Some({id(ref.owner):#x})"


def heap_pinning() -> MaybeSelfRef:
    """Write ``a`` through its own reference and print it before and after."""
    x = MaybeSelfRef()
    x.init()
    print(x.a)
    x.b().value = 2
    print(x.a)
    return x


def swap_problem() -> tuple[MaybeSelfRef, MaybeSelfRef]:
    """Move the contents of an initialised value and show the stale reference."""
    x = MaybeSelfRef()
    y = MaybeSelfRef()
    x.init()
    x.b().value = 2
    _swap(x, y)
    print(
        f"""
     x: {{
  +----->a: {id(x):#x},
  |      b: {_describe(x.b())},
  |  }}
  |
  |  y: {{
  |      a: {id(y):#x},
  +-----|b: {_describe(y.b())},
     }}"""
    )
    return x, y


def main(argv: list[str] | None = None) -> int:
    """Run the self-reference demonstration."""
    heap_pinning()
    return 0


if __name__ == "__main__":
    sys.exit(main())