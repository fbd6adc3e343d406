"""Initial league results schema.

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op  # type: ignore[attr-defined]
from sqlmodel import SQLModel

from app.schemas.audit_logs import AuditLog
from app.schemas.leagues import League, LeagueMember
from app.schemas.match_result_submissions import MatchResultSubmission
from app.schemas.matches import Match
from app.schemas.notifications import EmailOutbox, Notification
from app.schemas.teams import Team, TeamMember
from app.schemas.users import User

revision = "20261019_000001"
down_revision = None
branch_labels = None
depends_on = None

# Dependency order: parents before children.
TABLES = [
    User.__table__,  # type: ignore[attr-defined]
    League.__table__,  # type: ignore[attr-defined]
    LeagueMember.__table__,  # type: ignore[attr-defined]
    Team.__table__,  # type: ignore[attr-defined]
    TeamMember.__table__,  # type: ignore[attr-defined]
    Match.__table__,  # type: ignore[attr-defined]
    MatchResultSubmission.__table__,  # type: ignore[attr-defined]
    Notification.__table__,  # type: ignore[attr-defined]
    EmailOutbox.__table__,  # type: ignore[attr-defined]
    AuditLog.__table__,  # type: ignore[attr-defined]
]


def upgrade() -> None:
    bind = op.get_bind()
    SQLModel.metadata.create_all(bind=bind, tables=TABLES)


def downgrade() -> None:
    bind = op.get_bind()
    SQLModel.metadata.drop_all(bind=bind, tables=list(reversed(TABLES)))
