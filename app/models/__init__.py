# models package for SQLModel models
from .project_draft import ProjectDraftRecord  # noqa: F401  (import for metadata registration)
