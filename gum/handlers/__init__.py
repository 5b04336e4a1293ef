from .base import Handler
from .jekyll import JekyllHandler
from .redirect import RedirectHandler
from .static import StaticHandler

__all__ = ["Handler", "JekyllHandler", "RedirectHandler", "StaticHandler"]
