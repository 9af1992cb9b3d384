"""
Table stores: the only place the viewer touches raw data.

A store enumerates groups and tables, reads per-table attributes and
coordinate labels, and serves 2-D projections of N-D arrays. Arrays are
always handed out in storage axis order; TableHandle owns the conversion to
display order.
"""
import logging
import os

import h5py
import numpy as np

from errors import MetadataMissing, StoreReadError, StoreUnavailable
from table_handle import TableHandle, group_of, storage_selection

logger = logging.getLogger(__name__)


def _as_text(value) -> str:
    if isinstance(value, (bytes, np.bytes_)):
        return value.decode("utf-8", errors="replace").rstrip("\x00")
    if isinstance(value, np.ndarray) and value.shape == ():
        return _as_text(value.item())
    return str(value)


def _as_text_list(values) -> list[str]:
    if isinstance(values, (str, bytes, np.bytes_, np.str_)):
        return [_as_text(values)]
    return [_as_text(v) for v in np.asarray(values).ravel()]


class H5TableStore:
    """h5py adapter for files laid out as ``group/table`` plus ``group/<dim>`` labels."""

    def __init__(self, path: str):
        self.path = path
        self._file = None

    def open(self):
        if self._file is not None:
            return self
        if not os.path.exists(self.path):
            raise StoreUnavailable(f"Unable to find {self.path}")
        try:
            self._file = h5py.File(self.path, "r")
        except (OSError, ValueError) as exc:
            raise StoreUnavailable(f"Unable to open {self.path}: {exc}") from exc
        logger.debug("Opened store %s", self.path)
        return self

    def close(self):
        if self._file is not None:
            try:
                self._file.close()
            finally:
                self._file = None

    def __enter__(self):
        return self.open()

    def __exit__(self, *exc):
        self.close()
        return False

    @property
    def file(self):
        if self._file is None:
            self.open()
        return self._file

    def _dataset(self, name: str):
        obj = self.file.get(name)
        if not isinstance(obj, h5py.Dataset):
            raise MetadataMissing(f"{name} is not a table in {self.path}")
        return obj

    # ---------- enumeration ----------
    def list_groups(self) -> list[str]:
        return [name for name, obj in self.file.items() if isinstance(obj, h5py.Group)]

    def list_tables(self, group: str) -> list[str]:
        grp = self.file.get(group)
        if not isinstance(grp, h5py.Group):
            return []
        return [name for name, obj in grp.items() if isinstance(obj, h5py.Dataset)]

    # ---------- metadata ----------
    def open_table(self, name: str) -> TableHandle:
        return TableHandle.open(self, name)

    def read_attributes(self, name: str) -> dict:
        ds = self._dataset(name)
        attrs = {}
        for key, value in ds.attrs.items():
            if key == "dims":
                attrs[key] = _as_text_list(value)
            else:
                attrs[key] = _as_text(value)
        return attrs

    def storage_shape(self, name: str) -> tuple[int, ...]:
        return tuple(self._dataset(name).shape)

    def read_coordinates(self, group: str, dim: str) -> list[str]:
        path = f"{group}/{dim}"
        obj = self.file.get(path)
        if not isinstance(obj, h5py.Dataset):
            raise MetadataMissing(f"No coordinate table {path}")
        return _as_text_list(obj[()])

    # ---------- data ----------
    def read_projection(self, table: TableHandle, free_axis_0: int, free_axis_1: int, fixed_index):
        ds = self._dataset(table.name)
        selection = storage_selection(table.ndims, (free_axis_0, free_axis_1), fixed_index)
        try:
            return np.asarray(ds[selection], dtype=float)
        except (OSError, ValueError, TypeError) as exc:
            raise StoreReadError(f"{table.name}: unable to read slice: {exc}") from exc

    def read_array(self, table: TableHandle):
        return np.asarray(self._dataset(table.name)[()], dtype=float).transpose()


class ArrayTableStore:
    """In-memory store over numpy arrays, laid out like H5TableStore."""

    def __init__(self):
        self._tables: dict[str, dict] = {}
        self._coordinates: dict[str, list[str]] = {}
        self._groups: list[str] = []

    def open(self):
        return self

    def close(self):
        pass

    def _note_group(self, group: str):
        if group not in self._groups:
            self._groups.append(group)

    def add_coordinates(self, group: str, dim: str, labels):
        self._note_group(group)
        self._coordinates[f"{group}/{dim}"] = [str(label) for label in labels]

    def add_table(
        self,
        name: str,
        values,
        dims=None,
        units: str = "",
        doc: str = "",
        labels=None,
        attrs: dict | None = None,
    ):
        """Register ``values`` (display axis order) under ``group/table``.

        ``labels`` maps dimension name to coordinate labels; dimensions
        without labels get ``0..n-1``. Pass ``attrs`` to store raw
        attributes verbatim instead of the ones built from the arguments.
        """
        values = np.asarray(values, dtype=float)
        group = group_of(name)
        self._note_group(group)
        if attrs is None:
            attrs = {"units": units, "doc": doc, "dims": list(dims or [])}
        for axis, dim in enumerate(attrs.get("dims", [])):
            key = f"{group}/{dim}"
            if labels and dim in labels:
                self._coordinates[key] = [str(v) for v in labels[dim]]
            elif key not in self._coordinates and axis < values.ndim:
                self._coordinates[key] = [str(i) for i in range(values.shape[axis])]
        self._tables[name] = {"attrs": dict(attrs), "data": values.transpose()}

    def _table(self, name: str) -> dict:
        try:
            return self._tables[name]
        except KeyError:
            raise MetadataMissing(f"{name} is not a table") from None

    def list_groups(self) -> list[str]:
        return list(self._groups)

    def list_tables(self, group: str) -> list[str]:
        prefix = f"{group}/"
        return [name[len(prefix):] for name in self._tables if name.startswith(prefix)]

    def open_table(self, name: str) -> TableHandle:
        return TableHandle.open(self, name)

    def read_attributes(self, name: str) -> dict:
        return dict(self._table(name)["attrs"])

    def storage_shape(self, name: str) -> tuple[int, ...]:
        return tuple(self._table(name)["data"].shape)

    def read_coordinates(self, group: str, dim: str) -> list[str]:
        try:
            return list(self._coordinates[f"{group}/{dim}"])
        except KeyError:
            raise MetadataMissing(f"No coordinate table {group}/{dim}") from None

    def read_projection(self, table: TableHandle, free_axis_0: int, free_axis_1: int, fixed_index):
        data = self._table(table.name)["data"]
        selection = storage_selection(table.ndims, (free_axis_0, free_axis_1), fixed_index)
        try:
            return np.array(data[selection], dtype=float)
        except (IndexError, ValueError, TypeError) as exc:
            raise StoreReadError(f"{table.name}: unable to read slice: {exc}") from exc

    def read_array(self, table: TableHandle):
        return np.array(self._table(table.name)["data"], dtype=float).transpose()
