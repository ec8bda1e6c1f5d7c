"""Application factories for repository access."""

from vita.application.factories.repository_factory import (
    RepositoryFactory,
    RepositoryScope,
)

__all__ = ["RepositoryFactory", "RepositoryScope"]
