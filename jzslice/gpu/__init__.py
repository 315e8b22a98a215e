"""Torch device selection for the wide-lane gamut search (CUDA, MPS or CPU)."""

import logging

import numpy as np
import torch
from typing import Optional

from jzslice import defaults
from jzslice.colorspace import hue_dial, HueDial

logger = logging.getLogger(__name__)


def _probe() -> Optional[str]:
    """Name of the first usable accelerator, or None."""
    if torch.cuda.is_available():
        return 'cuda'
    mps = getattr(torch.backends, 'mps', None)
    if mps is not None and mps.is_available():
        return 'mps'
    return None


class GPUContext:
    """Process-wide device for batched max-chroma searches.

    Detection runs once, on first use. A failed probe or warmup pins the
    context to the CPU, where every search still runs through torch.
    """

    _device: Optional[torch.device] = None
    _accelerator: Optional[str] = None  # 'cuda', 'mps', or None

    @classmethod
    def _select(cls) -> None:
        try:
            cls._accelerator = _probe()
        except Exception:
            logger.warning("GPU detection failed, using CPU", exc_info=True)
            cls._accelerator = None
        cls._device = torch.device(cls._accelerator or 'cpu')
        logger.debug("Max-chroma search device: %s", cls._device)

    @classmethod
    def device(cls) -> torch.device:
        if cls._device is None:
            cls._select()
        return cls._device

    @classmethod
    def is_available(cls) -> bool:
        """True when searches run on CUDA or MPS rather than the CPU."""
        cls.device()
        return cls._accelerator is not None

    @classmethod
    def warmup(cls) -> None:
        """Run one small dial so the first frame does not pay kernel setup."""
        if not cls.is_available():
            return

        try:
            cls.dial(count=64)
            cls.synchronize()
        except Exception:
            logger.warning("GPU warmup failed on %s, falling back to CPU", cls._device, exc_info=True)
            cls._accelerator = None
            cls._device = torch.device('cpu')

    @classmethod
    def synchronize(cls) -> None:
        """Block until queued device work is done. No-op on CPU."""
        if cls._accelerator == 'cuda':
            torch.cuda.synchronize()
        elif cls._accelerator == 'mps' and hasattr(torch.mps, 'synchronize'):
            torch.mps.synchronize()

    @classmethod
    def to_device(cls, arr: np.ndarray) -> torch.Tensor:
        """Copy an array to the selected device as float32."""
        return torch.as_tensor(np.asarray(arr), dtype=torch.float32, device=cls.device())

    @classmethod
    def to_cpu(cls, tensor: torch.Tensor) -> np.ndarray:
        return tensor.detach().cpu().numpy()

    @classmethod
    def dial(
        cls,
        count: int = defaults.DEFAULT_DIAL_COUNT,
        iterations: int = defaults.WIDE_SEARCH_ITERATIONS,
        lanes: int = defaults.WIDE_SEARCH_LANES,
    ) -> HueDial:
        """Hue dial computed on the selected device in float32."""
        reference = torch.zeros((), dtype=torch.float32, device=cls.device())
        return hue_dial(count=count, iterations=iterations, lanes=lanes, reference=reference)


__all__ = ['GPUContext']
