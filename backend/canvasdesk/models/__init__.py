"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - File is the aggregate root; assets and elements scoped by file_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
      or alembic autogenerate runs
"""

from canvasdesk.models.user import User  # noqa: F401
from canvasdesk.models.file import File  # noqa: F401
from canvasdesk.models.file_collaborator import FileCollaborator  # noqa: F401
from canvasdesk.models.asset import Asset  # noqa: F401
from canvasdesk.models.element import CanvasElement  # noqa: F401
