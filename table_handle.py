import logging
from dataclasses import dataclass, field
from typing import Any, List, Sequence

from errors import AxesNotDistinct, IndexOutOfRange, MetadataMissing, ShapeMismatch

logger = logging.getLogger(__name__)

REQUIRED_ATTRS = ("units", "doc", "dims")


def display_shape(storage_shape: Sequence[int]) -> tuple[int, ...]:
    """Storage keeps the slowest-varying axis last; axis 0 on screen is that one."""
    return tuple(int(n) for n in reversed(tuple(storage_shape)))


def storage_axis(display_axis: int, ndims: int) -> int:
    return ndims - 1 - display_axis


def storage_selection(ndims: int, free_axes: Sequence[int], fixed_index: Sequence[int]) -> tuple:
    """Slice tuple in storage order: full ranges on free axes, single indices elsewhere."""
    selection = []
    for k in range(ndims):
        axis = storage_axis(k, ndims)
        if axis in free_axes:
            selection.append(slice(None))
        else:
            selection.append(int(fixed_index[axis]))
    return tuple(selection)


def group_of(name: str) -> str:
    parts = [p for p in name.split("/") if p]
    if not parts:
        raise MetadataMissing(f"Table name {name!r} has no group component")
    return parts[0]


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    dims: str
    shape: str
    ndims: int
    units: str
    documentation: str

    def as_row(self) -> list[str]:
        return [
            f"'{self.name}'",
            self.dims,
            self.shape,
            str(self.ndims),
            self.units,
            self.documentation,
        ]


@dataclass(frozen=True)
class TableHandle:
    name: str
    documentation: str
    units: str
    dimension_names: tuple[str, ...]
    coordinate_labels: tuple[tuple[str, ...], ...]
    shape: tuple[int, ...]
    kind: str = ""
    store: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def open(cls, store, name: str) -> "TableHandle":
        """Read metadata for ``name`` from ``store`` and validate it.

        Raises MetadataMissing when a required attribute or a coordinate
        table is absent and ShapeMismatch when the coordinate labels do not
        agree with the declared shape.
        """
        attrs = store.read_attributes(name)
        missing = [key for key in REQUIRED_ATTRS if key not in attrs]
        if missing:
            raise MetadataMissing(f"{name}: missing attribute(s) {', '.join(missing)}")

        dims = [str(d) for d in attrs["dims"]]
        shape = display_shape(store.storage_shape(name))
        if len(shape) < 1:
            raise ShapeMismatch(f"{name}: scalar tables cannot be viewed")
        if len(dims) != len(shape):
            raise ShapeMismatch(
                f"{name}: {len(dims)} dimension name(s) for {len(shape)} axes"
            )

        group = group_of(name)
        labels = []
        for i, dim in enumerate(dims):
            coords = tuple(store.read_coordinates(group, dim))
            if len(coords) != shape[i]:
                raise ShapeMismatch(
                    f"{name}: dimension {dim!r} has {len(coords)} label(s), shape says {shape[i]}"
                )
            labels.append(coords)

        return cls(
            name=name,
            documentation=str(attrs["doc"]),
            units=str(attrs["units"]),
            dimension_names=tuple(dims),
            coordinate_labels=tuple(labels),
            shape=shape,
            kind=str(attrs.get("type", "")),
            store=store,
        )

    @property
    def ndims(self) -> int:
        return len(self.shape)

    def extent(self, axis: int) -> int:
        return self.shape[axis]

    def validate_projection(self, free_axis_0: int, free_axis_1: int, fixed_index: Sequence[int]):
        if free_axis_0 == free_axis_1:
            raise AxesNotDistinct(f"free axes must differ, both are {free_axis_0}")
        for axis in (free_axis_0, free_axis_1):
            if not 0 <= axis < self.ndims:
                raise IndexOutOfRange(f"free axis {axis} outside 0..{self.ndims - 1}")
        if len(fixed_index) != self.ndims:
            raise IndexOutOfRange(
                f"fixed index has {len(fixed_index)} entries for {self.ndims} axes"
            )
        for axis, idx in enumerate(fixed_index):
            if axis in (free_axis_0, free_axis_1):
                continue
            if not 0 <= idx < self.shape[axis]:
                raise IndexOutOfRange(
                    f"index {idx} out of range for axis {axis} ({self.dimension_names[axis]}) "
                    f"of extent {self.shape[axis]}"
                )

    def project(self, free_axis_0: int, free_axis_1: int, fixed_index: Sequence[int]):
        """Return the 2-D slice in storage order; see axis_projector for orientation."""
        self.validate_projection(free_axis_0, free_axis_1, fixed_index)
        return self.store.read_projection(self, free_axis_0, free_axis_1, list(fixed_index))

    def read_all(self):
        return self.store.read_array(self)

    def summary(self) -> CatalogEntry:
        return CatalogEntry(
            name=self.name,
            dims=", ".join(self.dimension_names),
            shape=", ".join(str(n) for n in self.shape),
            ndims=self.ndims,
            units=self.units,
            documentation=self.documentation,
        )

    def labels_for(self, axis: int) -> List[str]:
        return list(self.coordinate_labels[axis])
