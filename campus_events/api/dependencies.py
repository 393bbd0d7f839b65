"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from uuid import UUID

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from psycopg_pool import ConnectionPool

from campus_events.adapters.repository import (
    PostgresEventRepository,
    PostgresRegistrationRepository,
    PostgresUserRepository,
)
from campus_events.adapters.security import BcryptPasswordHasher, JWTTokenService
from campus_events.config.settings import get_settings
from campus_events.domain.accounts import AccountService
from campus_events.domain.events import EventService
from campus_events.domain.exceptions import AuthenticationRequired
from campus_events.domain.registration import RegistrationService

# Bearer token extractor; missing tokens are reported by get_current_user_id
bearer_scheme = HTTPBearer(auto_error=False)


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_user_repository(request: Request) -> PostgresUserRepository:
    return PostgresUserRepository(get_pool(request))


def get_event_repository(request: Request) -> PostgresEventRepository:
    return PostgresEventRepository(get_pool(request))


def get_password_hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(cost=get_settings().bcrypt_cost)


def get_token_service() -> JWTTokenService:
    settings = get_settings()
    return JWTTokenService(
        secret_key=settings.jwt_secret,
        expiration_minutes=settings.jwt_expiration_minutes,
    )


def get_registration_service(request: Request) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    All three repositories share the request's connection pool.
    """
    pool = get_pool(request)
    return RegistrationService(
        registrations=PostgresRegistrationRepository(pool),
        events=PostgresEventRepository(pool),
        users=PostgresUserRepository(pool),
    )


def get_event_service(request: Request) -> EventService:
    return EventService(
        events=get_event_repository(request),
        users=get_user_repository(request),
    )


def get_account_service(
    request: Request,
    hasher: BcryptPasswordHasher = Depends(get_password_hasher),
    tokens: JWTTokenService = Depends(get_token_service),
) -> AccountService:
    return AccountService(
        users=get_user_repository(request),
        events=get_event_repository(request),
        hasher=hasher,
        tokens=tokens,
    )


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    x_auth_token: str | None = Header(default=None),
    tokens: JWTTokenService = Depends(get_token_service),
) -> UUID:
    """
    Resolve the caller's user id from the request's bearer token.

    Accepts ``Authorization: Bearer <token>`` or the ``x-auth-token``
    header used by the browser client.

    Raises:
        AuthenticationRequired: If no token is present or it does not verify
    """
    token = credentials.credentials if credentials is not None else x_auth_token
    if not token:
        raise AuthenticationRequired("No token, authorization denied")
    return tokens.resolve(token)
