"""Git helpers used by remote-build packagers."""

from .publisher import RepositoryPublisher, RepositoryTarget

__all__ = ["RepositoryPublisher", "RepositoryTarget"]
