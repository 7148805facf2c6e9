from .pos import PosRepository
from . import models

__all__ = ["PosRepository", "models"]
