from .deps import get_container
from .errors import register_exception_handlers

__all__ = ["get_container", "register_exception_handlers"]
