from __future__ import annotations

import os
import random

import numpy as np


def set_determinism(seed: int = 42, python_hash_seed: int = 0) -> None:
    """Seed Python ``random`` and NumPy so shuffled pools are reproducible.

    Also exports PYTHONHASHSEED for any subprocesses started afterwards.
    """
    os.environ["PYTHONHASHSEED"] = str(python_hash_seed)
    random.seed(seed)
    np.random.seed(seed)
