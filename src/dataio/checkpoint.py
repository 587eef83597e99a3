"""
===========================================================
checkpoint.py
Last Updated: 2026-10-19
===========================================================

Description:
    Save and restore complete TownModel state, either to a file
    or to a base64 string (for shipping a model to a worker).

Notes:
    - Checkpoints are pickles: only load files you trust.
    - The model random stream is saved too, so a restored model
      continues exactly where the saved one stopped.
-----------------------------------------------------------
License: MIT
===========================================================
"""

from __future__ import annotations
import base64
import pickle
from pathlib import Path
from typing import Union

from epiagents.model import TownModel

PathLike = Union[str, Path]


def save(model: TownModel, filepath: PathLike) -> Path:
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        pickle.dump(model, f, protocol=pickle.HIGHEST_PROTOCOL)
    return path


def load(filepath: PathLike) -> TownModel:
    with open(filepath, "rb") as f:
        model = pickle.load(f)
    if not isinstance(model, TownModel):
        raise ValueError(f"{filepath} does not contain a TownModel")
    return model


def serialize(model: TownModel) -> str:
    """Encode a model as a base64 string"""
    return base64.b64encode(pickle.dumps(model, protocol=pickle.HIGHEST_PROTOCOL)).decode("ascii")


def deserialize(data: str) -> TownModel:
    model = pickle.loads(base64.b64decode(data))
    if not isinstance(model, TownModel):
        raise ValueError("data does not encode a TownModel")
    return model
