"""
Account domain service - Sign-up, login, profile and admin user management.

Emails are normalized (strip + lowercase) before every lookup and write,
so uniqueness is checked against the normalized form.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from .access import ensure_admin
from .exceptions import EmailInUse, InvalidCredentials, UserNotFound
from .models import EventView, ProfileUpdate, User, UserProfile
from .ports import EventRepository, PasswordHasher, TokenService, UserRepository
from .projections import project_events

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _optional_text(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass
class AccountService:
    """
    Domain service for user accounts.

    Orchestrates password hashing, token issuance and profile
    persistence. Admin-only operations go through ensure_admin().
    """

    users: UserRepository
    events: EventRepository
    hasher: PasswordHasher
    tokens: TokenService

    def sign_up(
        self, name: str, email: str, password: str, preferences: list[str] | None = None
    ) -> str:
        """
        Create a regular account and return a bearer token.

        Raises:
            EmailInUse: If the email already belongs to an account
        """
        user_id = self.users.create_user(
            name=name.strip(),
            email=normalize_email(email),
            password_hash=self.hasher.hash(password),
            preferences=list(preferences or []),
        )
        if user_id is None:
            raise EmailInUse("User already exists")
        logger.info("User %s signed up", user_id)
        return self.tokens.issue(user_id)

    def login(self, email: str, password: str) -> str:
        """
        Verify credentials and return a bearer token.

        The password check runs even for unknown emails so both
        failures cost the same.

        Raises:
            InvalidCredentials: If the email is unknown or the password is wrong
        """
        user = self.users.get_user_by_email(normalize_email(email))
        password_valid = self.hasher.verify(password, user.password_hash if user else None)
        if user is None or not password_valid:
            raise InvalidCredentials()
        return self.tokens.issue(user.id)

    def change_password(self, user_id: UUID, current_password: str, new_password: str) -> None:
        user = self._user(user_id)
        if not self.hasher.verify(current_password, user.password_hash):
            raise InvalidCredentials("Current password is incorrect")
        self.users.update_password_hash(user_id, self.hasher.hash(new_password))
        logger.info("User %s changed password", user_id)

    def profile(self, user_id: UUID) -> UserProfile:
        return self._profile(self._user(user_id))

    def registered_events(self, user_id: UUID) -> list[EventView]:
        user = self._user(user_id)
        return project_events(self.events.get_events(user.registered_events), self.users)

    def update_profile(self, user_id: UUID, update: ProfileUpdate) -> UserProfile:
        """
        Replace profile fields. Blank optional fields become absent.

        Raises:
            UserNotFound: If the user does not exist
            EmailInUse: If another user already owns the email
        """
        self._user(user_id)
        update = ProfileUpdate(
            name=update.name.strip(),
            email=normalize_email(update.email),
            bio=_optional_text(update.bio),
            college=_optional_text(update.college),
            major=_optional_text(update.major),
            graduation_year=_optional_text(update.graduation_year),
        )

        owner = self.users.get_user_by_email(update.email)
        if owner is not None and owner.id != user_id:
            raise EmailInUse()
        # Unique constraint still decides when two users race for one email
        if not self.users.update_profile(user_id, update):
            raise EmailInUse()
        return self.profile(user_id)

    def update_preferences(self, user_id: UUID, preferences: list[str]) -> UserProfile:
        self._user(user_id)
        self.users.update_preferences(user_id, list(preferences))
        return self.profile(user_id)

    def list_users(self, actor_id: UUID) -> list[UserProfile]:
        ensure_admin(self._user(actor_id))
        return [self._profile(user) for user in self.users.list_users()]

    def delete_user(self, actor_id: UUID, user_id: UUID) -> None:
        """Delete a user, removing them from every event's registrants."""
        ensure_admin(self._user(actor_id))
        if not self.users.delete_user(user_id):
            raise UserNotFound()
        logger.info("User %s deleted by %s", user_id, actor_id)

    def _user(self, user_id: UUID) -> User:
        user = self.users.get_user(user_id)
        if user is None:
            raise UserNotFound()
        return user

    def _profile(self, user: User) -> UserProfile:
        registered = project_events(self.events.get_events(user.registered_events), self.users)
        return UserProfile(user=user, registered_events=registered)
