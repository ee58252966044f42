"""
common.shared.utils

Progress helpers shared across the vasu report commands.
"""

from __future__ import annotations

import sys
from typing import Any, Iterable, Iterator, Optional

from tqdm import tqdm


class Progress:
    """
    Simple wrapper for tqdm progress bars that automatically closes
    on completion or interruption.

    Bars are hidden when stderr is not a terminal unless ``disable`` is set
    explicitly.
    """

    def __init__(
        self,
        iterable: Iterable[Any],
        desc: str = "Processing",
        *,
        unit: str = "it",
        disable: Optional[bool] = None,
    ):
        if disable is None:
            disable = not sys.stderr.isatty()
        self._tqdm = tqdm(iterable, desc=desc, unit=unit, ncols=100, leave=False, disable=disable)

    def __iter__(self) -> Iterator[Any]:
        try:
            for item in self._tqdm:
                yield item
        finally:
            self._tqdm.close()
