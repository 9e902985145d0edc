"""Request Dependencies — locale, caller identity, admin key and runner injection.

Invariants:
    - Locale resolution order: ?locale= query, Accept-Language, settings.default_locale
    - X-User-Id is trusted as-is (authentication happens upstream); blank means guest
    - Admin routes reject requests whose X-Admin-Key differs from settings.admin_api_key;
      no configured key means the check is off

Design Decisions:
    - FastAPI Depends over middleware: each route declares exactly what it needs and
      tests override single dependencies (app.dependency_overrides)
    - secrets.compare_digest for the admin key comparison
"""

import secrets

from fastapi import Depends, Header, Query

from app.config import Settings, get_settings
from app.core.domain_types import Locale, UserType
from app.core.errors import AdminAuthError, UserIdentityRequiredError
from app.infrastructure.database import get_db_manager
from app.services.migration_runner import MigrationRunner, create_migration_runner


def _parse_accept_language(header: str | None) -> Locale | None:
    """First supported primary tag in header order (q-values ignored)."""
    if not header:
        return None
    for part in header.split(","):
        tag = part.split(";")[0].strip().lower()
        primary = tag.split("-")[0]
        for loc in Locale:
            if primary == loc.value:
                return loc
    return None


def get_locale(
    locale: Locale | None = Query(None),
    accept_language: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> Locale:
    if locale is not None:
        return locale
    return _parse_accept_language(accept_language) or settings.default_locale


def get_optional_user_id(x_user_id: str | None = Header(None)) -> str | None:
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()


def get_user_id(user_id: str | None = Depends(get_optional_user_id)) -> str:
    if user_id is None:
        raise UserIdentityRequiredError()
    return user_id


def get_user_type(user_id: str | None = Depends(get_optional_user_id)) -> UserType:
    return UserType.REGISTERED if user_id else UserType.GUEST


def require_admin_key(
    x_admin_key: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    expected = settings.admin_api_key
    if not expected:
        return
    if x_admin_key is None or not secrets.compare_digest(
        x_admin_key.encode(), expected.encode(),
    ):
        raise AdminAuthError()


def get_migration_runner(settings: Settings = Depends(get_settings)) -> MigrationRunner:
    return create_migration_runner(settings, engine=get_db_manager().engine)
