"""Identifier generation."""

import itertools
import random
import string
from typing import Optional

_ALPHABET = string.ascii_lowercase + string.digits


class IdGenerator:
    """
    Produces opaque ids of the form ``<prefix>_<random suffix><counter>``.

    The counter is monotonic per generator, so ids never collide within one
    store even if the random suffix repeats. Pass a seeded ``random.Random``
    for reproducible ids.
    """

    def __init__(self, rng: Optional[random.Random] = None, suffix_length: int = 6):
        self._rng = rng or random.Random()
        self._counter = itertools.count(1)
        self._suffix_length = suffix_length

    def next(self, prefix: str) -> str:
        suffix = "".join(self._rng.choice(_ALPHABET) for _ in range(self._suffix_length))
        return f"{prefix}_{suffix}{next(self._counter)}"
