from .redact import redact

__all__ = [
    "redact",
]
