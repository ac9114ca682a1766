"""distpack: package manager packaging for release distributions."""

from .errors import (
    ArtifactNotFound,
    ExternalToolFailure,
    PackagerProcessingError,
    TemplateRenderError,
)

__version__ = "0.1.0"

__all__ = [
    "ArtifactNotFound",
    "ExternalToolFailure",
    "PackagerProcessingError",
    "TemplateRenderError",
    "__version__",
]
