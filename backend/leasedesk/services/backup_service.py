# Overview: Service-layer operations for backup export and restore.

"""
Backup / restore.

Snapshot shape (version 1):
    {
      "version": 1,
      "exported_at": "...Z",
      "agreements": [Agreement.to_dict(), ...],
      "users": [{"username", "role", "status", "password": "[REDACTED]"}, ...],
      "settings": SystemSettings.to_dict(),
      "agents": ["Agent 1", ...]
    }

Restore policy:
- Agreements: clear-then-insert. The store ends up holding exactly the
  snapshot's agreements. A token number repeated inside the snapshot aborts
  the whole restore with ConflictError before anything is written.
- Users: additive merge. An entry is skipped when its credential is
  redacted or not a bcrypt hash, when it names the primary admin, or when
  the username already exists. Existing users are never modified.
- Settings: replace the singleton's editable fields.
- Agents: additive merge by name.

The whole restore is one transaction; any failure rolls everything back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError

from ..errors import ConflictError, ServiceError, StorageFailure, ValidationError
from ..models import Agent, Agreement, User, USER_STATUS_ACTIVE, USER_STATUS_INACTIVE
from ..validation import AgreementInput, SettingsInput
from .activity_log_service import ActivityLog
from .agent_service import AgentDirectory
from .agreement_service import AgreementStore, apply_agreement_input
from .passwords import is_current_scheme
from .settings_service import SettingsService
from .user_service import UserStore
from leasedesk.time_utils import parse_utc_timestamp, to_utc_z, utcnow

logger = logging.getLogger(__name__)

BACKUP_VERSION = 1
REDACTED = "[REDACTED]"


@dataclass
class RestoreResult:
    restored_count: int = 0
    users: int = 0
    skipped_users: list[str] = field(default_factory=list)
    agents: int = 0

    def to_dict(self) -> dict:
        return {
            "message": "Backup restored successfully",
            "restored_count": self.restored_count,
            "users": self.users,
            "skipped_users": self.skipped_users,
            "agents": self.agents,
        }


@dataclass(frozen=True)
class _PreparedAgreement:
    data: AgreementInput
    created_at: object
    updated_at: object


class BackupService:
    def __init__(
        self,
        session,
        agreements: AgreementStore,
        users: UserStore,
        settings: SettingsService,
        agents: AgentDirectory,
        activity: ActivityLog,
        *,
        roles: tuple[str, ...],
    ):
        self.session = session
        self.agreements = agreements
        self.users = users
        self.settings = settings
        self.agents = agents
        self.activity = activity
        self.roles = roles

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export(self) -> dict:
        """Full snapshot. Stored credential forms are never included."""
        return {
            "version": BACKUP_VERSION,
            "exported_at": to_utc_z(utcnow()),
            "agreements": [a.to_dict() for a in self.agreements.all()],
            "users": [
                {
                    "username": u.username,
                    "role": u.role,
                    "status": u.status,
                    "password": REDACTED,
                }
                for u in self.users.list_users()
            ],
            "settings": self.settings.get().to_dict(),
            "agents": self.agents.list_names(),
        }

    # ------------------------------------------------------------------
    # Restore
    # ------------------------------------------------------------------

    def restore(self, snapshot, *, actor: str | None = None, ip_address: str | None = None) -> RestoreResult:
        if not isinstance(snapshot, dict) or not isinstance(snapshot.get("agreements"), list):
            raise ValidationError("Invalid backup data")

        # Validate everything before the first write.
        prepared = self._prepare_agreements(snapshot["agreements"])
        users, skipped = self._prepare_users(snapshot.get("users") or [])
        settings = None
        if isinstance(snapshot.get("settings"), dict):
            settings = SettingsInput.from_payload(snapshot["settings"])
        agent_names = self._prepare_agents(snapshot.get("agents") or [])

        result = RestoreResult(skipped_users=skipped)
        try:
            self.agreements.clear()
            for item in prepared:
                agreement = Agreement(
                    created_at=item.created_at or utcnow(),
                    updated_at=item.updated_at or item.created_at or utcnow(),
                )
                apply_agreement_input(agreement, item.data)
                self.agreements.insert(agreement)
                result.restored_count += 1

            for user in users:
                self.users.insert(user)
                result.users += 1

            existing_agents = set(self.agents.list_names())
            for name in agent_names:
                if name not in existing_agents:
                    self.session.add(Agent(name=name))
                    result.agents += 1

            if settings is not None:
                self.settings.ensure_seeded(commit=False)
                self.settings.apply(settings.values, actor=actor)

            self.session.flush()
            self.activity.record(
                "Restore Backup",
                username=actor,
                details=f"Restored {result.restored_count} agreements, {result.users} users",
                ip_address=ip_address,
            )
            self.session.commit()
        except ServiceError:
            self.session.rollback()
            raise
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Restore failed; rolled back")
            raise StorageFailure()

        logger.info(
            "Restored backup: %d agreements, %d users, %d skipped",
            result.restored_count,
            result.users,
            len(result.skipped_users),
        )
        return result

    def _prepare_agreements(self, rows: list) -> list[_PreparedAgreement]:
        prepared = []
        seen: set[str] = set()
        for index, row in enumerate(rows):
            try:
                data = AgreementInput.from_payload(row)
            except ValidationError as exc:
                raise ValidationError(f"Agreement #{index + 1}: {exc.message}")
            if data.token_number in seen:
                raise ConflictError(f"Duplicate token number in backup: {data.token_number}")
            seen.add(data.token_number)
            created_at = parse_utc_timestamp(row.get("created_at") or row.get("createdAt"))
            updated_at = parse_utc_timestamp(row.get("updated_at") or row.get("updatedAt"))
            prepared.append(_PreparedAgreement(data=data, created_at=created_at, updated_at=updated_at))
        return prepared

    def _prepare_users(self, rows: list) -> tuple[list[User], list[str]]:
        users: list[User] = []
        skipped: list[str] = []
        seen: set[str] = set()
        for row in rows:
            if not isinstance(row, dict):
                raise ValidationError("Invalid backup data")
            username = str(row.get("username") or "").strip()
            if not username:
                continue

            credential = row.get("password_hash") or row.get("password")
            if (
                credential == REDACTED
                or not is_current_scheme(credential)
                or username == self.users.primary_admin_username
                or username in seen
                or self.users.find_by_username(username) is not None
            ):
                skipped.append(username)
                continue

            role = row.get("role") or "user"
            if role not in self.roles:
                raise ValidationError(f"User {username}: unknown role {role}")
            status = row.get("status") or USER_STATUS_ACTIVE
            if status not in (USER_STATUS_ACTIVE, USER_STATUS_INACTIVE):
                status = USER_STATUS_ACTIVE

            seen.add(username)
            users.append(
                User(
                    username=username,
                    password_hash=credential,
                    role=role,
                    status=status,
                    created_at=parse_utc_timestamp(row.get("created_at")) or utcnow(),
                )
            )
        return users, skipped

    @staticmethod
    def _prepare_agents(names: list) -> list[str]:
        cleaned = []
        for name in names:
            if isinstance(name, dict):
                name = name.get("name")
            text = str(name or "").strip()
            if text and len(text) <= 128:
                cleaned.append(text)
        return list(dict.fromkeys(cleaned))
