"""Domain value objects."""

from taskauth.domain.value_objects.core import EmailAddress

__all__ = ["EmailAddress"]
