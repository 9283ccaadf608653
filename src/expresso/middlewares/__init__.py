"""Built-in middlewares."""

from expresso.middlewares.api_key import APIKeyAuthentication
from expresso.middlewares.cors import Cors, cors

__all__ = [
    "APIKeyAuthentication",
    "Cors",
    "cors",
]
