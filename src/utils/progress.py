#!/usr/bin/env python3

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from typing import TypeVar

from tqdm import tqdm

T = TypeVar("T")


def progress_disabled(explicit_disable: bool | None = None) -> bool:
    if explicit_disable is not None:
        return explicit_disable
    flag = os.getenv("SCOUT_PROGRESS", "").lower().strip()
    return flag in {"0", "false", "off", "no"}


def progress_iter(
    iterable: Iterable[T],
    *,
    total: int | None = None,
    desc: str | None = None,
    unit: str = "it",
    disable: bool | None = None,
) -> Iterator[T]:
    """Yield items from iterable with a tqdm progress bar.

    The bar is written to stderr so ``--json`` output on stdout stays clean,
    and it is always closed explicitly, even when the consumer stops early.
    """
    if progress_disabled(disable):
        yield from iterable
        return

    if total is None and hasattr(iterable, "__len__"):
        total = len(iterable)  # type: ignore[arg-type]
    pbar = tqdm(total=total, desc=desc, unit=unit, leave=False)
    try:
        for item in iterable:
            yield item
            pbar.update(1)
    finally:
        pbar.close()
