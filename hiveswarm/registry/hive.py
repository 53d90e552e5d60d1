# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hiveswarm/registry/hive.py
"""
Binary hive (regf) <-> key tree, through the python-hivex bindings.

hivex is imported lazily: the text and policy codecs never need it, and a
missing binding only fails the conversions that touch a hive.

Writing needs an existing hive to start from: hivex can edit a hive but not
create one. The template is copied next to the output, filled, committed
and renamed over the output in one step.
"""
from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..core.exceptions import wrap_fatal, wrap_tree
from ..core.file_ops import PathLike, atomic_write
from ..core.logger import Log
from .constants import DEFAULT_MAX_DEPTH, DEFAULT_ROOT_NAME
from .model import RegistryKey, RegistryValue

REGF_SIGNATURE = b"regf"
MIN_HIVE_SIZE = 4096


def _load_hivex() -> Any:
    try:
        import hivex  # type: ignore
    except ImportError as e:
        raise wrap_fatal(
            "python-hivex is required for hive conversions (pip install hiveswarm[hive] or the distro package)",
            e,
        )
    return hivex


def _is_probably_regf(path: Path) -> bool:
    """Hives start with the ASCII 'regf' signature."""
    with open(path, "rb") as f:
        return f.read(len(REGF_SIGNATURE)) == REGF_SIGNATURE


def _check_hive_file(path: Path, role: str) -> None:
    st = path.stat()
    if st.st_size < MIN_HIVE_SIZE:
        raise wrap_fatal(f"{role} hive is too small ({st.st_size} bytes): {path}", path=str(path))
    if not _is_probably_regf(path):
        raise wrap_fatal(f"{role} file does not look like a regf hive: {path}", path=str(path))


def _open_hive(path: Path, *, write: bool) -> Any:
    hivex = _load_hivex()
    try:
        return hivex.Hivex(str(path), write=write)
    except RuntimeError as e:
        raise wrap_fatal(f"hivex could not open {path}: {e}", e, path=str(path))


def _close(h: Any) -> None:
    close = getattr(h, "close", None)
    if callable(close):
        close()


def _mk_reg_value(value: RegistryValue) -> Dict[str, Any]:
    return {"key": value.name, "t": value.type, "value": value.data}


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def _read_values(h: Any, node: int) -> List[RegistryValue]:
    out: List[RegistryValue] = []
    for v in h.node_values(node):
        vtype, data = h.value_value(v)
        out.append(RegistryValue(name=h.value_key(v), type=vtype, data=data))
    return out


def _read_tree(h: Any, root_name: str, max_depth: int) -> RegistryKey:
    root_node = h.root()
    root = RegistryKey(name=root_name, values=_read_values(h, root_node))

    stack: List[Tuple[int, RegistryKey, int]] = [(root_node, root, 0)]
    while stack:
        node, key, depth = stack.pop()
        children = h.node_children(node)
        if children and depth >= max_depth:
            raise wrap_tree(f"hive nesting deeper than {max_depth} levels", key=key.name)
        for child in children:
            sub = RegistryKey(name=h.node_name(child), values=_read_values(h, child))
            key.subkeys.append(sub)
            stack.append((child, sub, depth + 1))
    return root


def hive_to_tree(
    path: PathLike,
    root_name: str = DEFAULT_ROOT_NAME,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    logger: Optional[logging.Logger] = None,
) -> RegistryKey:
    """Load a whole hive; its root key is renamed `root_name`."""
    p = Path(path)
    _check_hive_file(p, "input")
    h = _open_hive(p, write=False)
    try:
        try:
            tree = _read_tree(h, root_name, max_depth)
        except RuntimeError as e:
            raise wrap_fatal(f"hivex failed reading {p}: {e}", e, path=str(p))
    finally:
        _close(h)

    if logger is not None:
        keys, values = tree.count()
        Log.trace(logger, "hive %s: %d keys, %d values", p, keys, values)
    return tree


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def _fill_hive(h: Any, key: RegistryKey) -> None:
    root_node = h.root()
    if h.node_children(root_node) or h.node_values(root_node):
        raise wrap_fatal("template hive root must have no subkeys and no values")

    stack: List[Tuple[int, RegistryKey]] = [(root_node, key)]
    while stack:
        node, src = stack.pop()
        if src.values:
            h.node_set_values(node, [_mk_reg_value(v) for v in src.values])
        stack.extend((h.node_add_child(node, child.name), child) for child in src.subkeys)


def _commit(h: Any) -> None:
    try:
        h.commit(None)
    except TypeError:
        h.commit()


def tree_to_hive(
    key: RegistryKey,
    output: PathLike,
    template: PathLike,
    *,
    logger: Optional[logging.Logger] = None,
) -> int:
    """
    Write `key` into a copy of `template` saved as `output`.

    The root key's own name is not stored: hive roots are named by the
    template. Returns the size of the written hive in bytes.
    """
    key.validate()
    tpl = Path(template)
    out = Path(output)
    _check_hive_file(tpl, "template")

    with atomic_write(out) as temp_path:
        shutil.copyfile(tpl, temp_path)
        h = _open_hive(temp_path, write=True)
        try:
            _fill_hive(h, key)
            _commit(h)
        except RuntimeError as e:
            raise wrap_fatal(f"hivex failed writing {out}: {e}", e, path=str(out))
        finally:
            _close(h)

    size = out.stat().st_size
    if logger is not None:
        keys, values = key.count()
        Log.trace(logger, "hive %s: %d keys, %d values, %d bytes", out, keys, values, size)
    return size
