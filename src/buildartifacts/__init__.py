from .errors import (
    ArtifactError,
    InvalidInput,
    ApiError,
    DecodeError,
    BuildNotFound,
    IoError,
    ExtractError,
    DeadlineExceeded,
)
from .model import BuildRecord, PipelineConfig
from .pipeline import run

__all__ = [
    "ArtifactError",
    "InvalidInput",
    "ApiError",
    "DecodeError",
    "BuildNotFound",
    "IoError",
    "ExtractError",
    "DeadlineExceeded",
    "BuildRecord",
    "PipelineConfig",
    "run",
]
