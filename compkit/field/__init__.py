"""Field paths and structured field-level validation errors."""

__all__ = ["errors", "path"]