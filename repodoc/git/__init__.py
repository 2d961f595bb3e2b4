"""Repository acquisition helpers."""

from .clone import AcquisitionError, FlattenError, FlattenReport, RepositoryCloner, extract_repo_name

__all__ = ["AcquisitionError", "FlattenError", "FlattenReport", "RepositoryCloner", "extract_repo_name"]
