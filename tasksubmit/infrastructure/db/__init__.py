from . import models  # noqa: F401
from .base import Base
from .session import create_session_factory, create_storage_engine

__all__ = ["Base", "create_session_factory", "create_storage_engine"]
