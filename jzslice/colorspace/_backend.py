"""numpy/torch dispatch for the colorspace math.

Every function takes numpy arrays, Python scalars or torch tensors and
returns the same kind it was given. Torch is imported on first use only, so
numpy-only callers never load it.
"""

import numpy as np
from typing import Any, Callable

Array = Any  # numpy.ndarray or torch.Tensor

_torch = None


def _get_torch():
    global _torch
    if _torch is None:
        import torch
        _torch = torch
    return _torch


def is_torch(x: Array) -> bool:
    return type(x).__module__.startswith('torch')


def asarray(x: Any) -> Array:
    """Pass tensors through; coerce everything else to a float numpy array."""
    if is_torch(x):
        return x
    arr = np.asarray(x)
    if not np.issubdtype(arr.dtype, np.floating):
        arr = arr.astype(np.float64)
    return arr


def _dispatch(np_func: Callable, torch_name: str) -> Callable:
    """Op that calls torch.<torch_name> for tensors and np_func otherwise.

    The first argument decides the backend.
    """
    def op(x: Array, *args: Any) -> Array:
        if is_torch(x):
            return getattr(_get_torch(), torch_name)(x, *args)
        return np_func(x, *args)

    op.__name__ = op.__qualname__ = torch_name
    return op


# === Elementwise ===

sin = _dispatch(np.sin, 'sin')
cos = _dispatch(np.cos, 'cos')
sqrt = _dispatch(np.sqrt, 'sqrt')
pow = _dispatch(np.power, 'pow')
atan2 = _dispatch(np.arctan2, 'atan2')
isnan = _dispatch(np.isnan, 'isnan')
where = _dispatch(np.where, 'where')
zeros_like = _dispatch(np.zeros_like, 'zeros_like')
full_like = _dispatch(np.full_like, 'full_like')


def clip(x: Array, lo: float, hi: float) -> Array:
    if is_torch(x):
        return x.clamp(lo, hi)
    return np.clip(x, lo, hi)


def clip_min(x: Array, lo: float) -> Array:
    if is_torch(x):
        return x.clamp(min=lo)
    return np.maximum(x, lo)


# === Shape and reductions ===

def stack(arrays: list[Array], axis: int = -1) -> Array:
    if is_torch(arrays[0]):
        return _get_torch().stack(arrays, dim=axis)
    return np.stack(arrays, axis=axis)


def max_along_axis(x: Array, axis: int, keepdims: bool = False) -> Array:
    """Largest value along axis (values, not indices)."""
    if is_torch(x):
        return x.amax(dim=axis, keepdim=keepdims)
    return np.max(x, axis=axis, keepdims=keepdims)


def all_along_axis(x: Array, axis: int) -> Array:
    if is_torch(x):
        return x.all(dim=axis)
    return np.all(x, axis=axis)


# === Conversions ===

def to_index(x: Array) -> Array:
    """Integer index array from a boolean or integer-valued array."""
    if is_torch(x):
        return x.long()
    return np.asarray(x).astype(np.intp)


def from_numpy(arr: np.ndarray, reference: Array) -> Array:
    """Copy arr onto the array type, device and dtype of reference."""
    if is_torch(reference):
        return _get_torch().as_tensor(np.array(arr), dtype=reference.dtype, device=reference.device)
    return np.asarray(arr).astype(np.asarray(reference).dtype, copy=False)
