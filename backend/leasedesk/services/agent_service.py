# Overview: Service-layer operations for the agent directory.

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import ConflictError, StorageFailure, ValidationError
from ..models import Agent
from .activity_log_service import ActivityLog

logger = logging.getLogger(__name__)


class AgentDirectory:
    """Names offered in the agent picker. Unique by name."""

    def __init__(self, session, activity: ActivityLog):
        self.session = session
        self.activity = activity

    def list_names(self) -> list[str]:
        rows = self.session.query(Agent.name).order_by(Agent.name.asc()).all()
        return [row.name for row in rows]

    def add(self, name: str | None, *, actor: str | None = None, ip_address: str | None = None) -> Agent:
        name = (name or "").strip()
        if not name:
            raise ValidationError("name is required")
        if len(name) > 128:
            raise ValidationError("name exceeds max length 128")
        if self.session.query(Agent.id).filter(Agent.name == name).first():
            raise ConflictError("Agent already exists")

        agent = Agent(name=name)
        self.session.add(agent)
        try:
            self.session.flush()
        except IntegrityError:
            self.session.rollback()
            raise ConflictError("Agent already exists")
        self.activity.record("Add Agent", username=actor, details=name, ip_address=ip_address)
        self._commit()
        return agent

    def ensure_seeded(self, names: tuple[str, ...]) -> int:
        """Insert the default agents when the directory is empty."""
        if self.session.query(Agent.id).first() is not None:
            return 0
        unique = list(dict.fromkeys(names))
        for name in unique:
            self.session.add(Agent(name=name))
        self._commit()
        logger.info("Seeded %d default agents", len(unique))
        return len(unique)

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Agent directory commit failed")
            raise StorageFailure()
