"""
Account Registry

Manages user identity records in the ledger snapshot.

DESIGN DECISION: User names are unique case-insensitively. The uniqueness
check and the append happen under the storage lock, so two concurrent
registrations of the same name cannot both succeed.
"""

from typing import Optional

from spendwise.audit import AuditLogger
from spendwise.models.audit import AuditEventBuilder
from spendwise.models.ledger import LedgerOutcome, User
from spendwise.services.credentials import PasswordHasher
from spendwise.services.storage import LedgerStorageInterface


class AccountRegistry:
    """
    Registers and looks up ledger users.

    Users are created once and never modified or deleted.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        hasher: Optional[PasswordHasher] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._hasher = hasher or PasswordHasher()
        self._audit = audit_logger or AuditLogger()

    async def register(self, name: str, email: str, password: str) -> LedgerOutcome:
        """
        Register a new user.

        Returns:
            SUCCESS, DUPLICATE if the name is taken (any casing),
            or SAVE_FAILED if the ledger could not be written.

        Raises:
            pydantic.ValidationError: if the name is empty or too long
        """
        # Validate before touching the ledger; hash only once the name is free
        candidate = User(name=name, email=email, password_hash="")

        async with self._storage.lock:
            snapshot = await self._storage.load()

            if snapshot.find_user_by_name(candidate.name) is not None:
                await self._audit.log(
                    AuditEventBuilder.registration_rejected(candidate.name, "duplicate user name")
                )
                return LedgerOutcome.DUPLICATE

            password_hash = await self._hasher.hash_async(password)
            user = candidate.model_copy(update={"password_hash": password_hash})
            snapshot.users.append(user)
            if not await self._storage.save(snapshot):
                return LedgerOutcome.SAVE_FAILED

        await self._audit.log(AuditEventBuilder.user_registered(user.id, user.name))
        return LedgerOutcome.SUCCESS

    async def authenticate(self, name: str, password: str) -> Optional[User]:
        """
        Find a user by name and check the password.

        Returns the user on success, None for an unknown name or a wrong password.
        """
        snapshot = await self._storage.load()
        user = snapshot.find_user_by_name(name)
        if user is None:
            return None

        if await self._hasher.verify_async(password, user.password_hash):
            return user
        return None

    async def get_user(self, user_id: str) -> Optional[User]:
        snapshot = await self._storage.load()
        return snapshot.find_user(user_id)
