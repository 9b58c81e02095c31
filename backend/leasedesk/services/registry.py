# Overview: Wires the service layer together around one session handle.

"""
Service registry.

Every service takes its collaborators in its constructor, so the whole
graph is built in one place. create_app() builds it against db.session
(a scoped session, released per app context at teardown) and stores it in
app.extensions; tests and the CLI can build their own against any session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping

from flask import current_app

from .activity_log_service import ActivityLog
from .agent_service import AgentDirectory
from .agreement_service import AgreementStore
from .auth_service import AuthService
from .backup_service import BackupService
from .passwords import PasswordHasher
from .reporting_service import ReportService
from .session_service import SessionTokens
from .settings_service import SettingsService
from .user_service import UserStore

logger = logging.getLogger(__name__)

EXTENSION_KEY = "leasedesk"


@dataclass(frozen=True)
class Services:
    passwords: PasswordHasher
    activity: ActivityLog
    users: UserStore
    agreements: AgreementStore
    agents: AgentDirectory
    settings: SettingsService
    tokens: SessionTokens
    auth: AuthService
    backup: BackupService
    reports: ReportService
    roles: tuple[str, ...]


def build_services(session, config: Mapping) -> Services:
    passwords = PasswordHasher(
        rounds=int(config.get("BCRYPT_ROUNDS", 12)),
        min_length=int(config.get("MIN_PASSWORD_LENGTH", 6)),
    )
    activity = ActivityLog(session)
    users = UserStore(
        session,
        passwords,
        activity,
        primary_admin_username=config.get("PRIMARY_ADMIN_USERNAME", "admin"),
    )
    agreements = AgreementStore(session, activity)
    agents = AgentDirectory(session, activity)
    settings = SettingsService(session, activity)
    tokens = SessionTokens(
        session,
        secret=config.get("JWT_SECRET") or config.get("SECRET_KEY"),
        algorithm=config.get("JWT_ALGORITHM", "HS256"),
        ttl=timedelta(hours=int(config.get("SESSION_TTL_HOURS", 24))),
    )
    roles = tuple(config.get("USER_ROLES") or ("admin", "user"))
    return Services(
        passwords=passwords,
        activity=activity,
        users=users,
        agreements=agreements,
        agents=agents,
        settings=settings,
        tokens=tokens,
        auth=AuthService(users, passwords, tokens, activity),
        backup=BackupService(session, agreements, users, settings, agents, activity, roles=roles),
        reports=ReportService(session, settings),
        roles=roles,
    )


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]


def seed_defaults(services: Services, config: Mapping) -> dict:
    """First-run data: primary admin, settings row, default agents. Idempotent."""
    admin = services.users.ensure_primary_admin(config.get("ADMIN_DEFAULT_PASSWORD", "admin123"))
    services.settings.ensure_seeded()
    agents = services.agents.ensure_seeded(tuple(config.get("DEFAULT_AGENTS") or ()))
    if admin is not None and config.get("ADMIN_DEFAULT_PASSWORD") == "admin123":
        logger.warning("Primary admin seeded with the default password; change it")
    return {"admin_created": admin is not None, "agents_seeded": agents}
