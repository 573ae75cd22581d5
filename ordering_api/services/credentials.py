"""
Credential Store

Registers customers and verifies their passwords. Passwords are hashed with
bcrypt (random salt per hash, configurable cost factor) and only ever compared
through ``bcrypt.checkpw``.

Usage:
    store = CredentialStore(db, bcrypt_rounds=settings.bcrypt_rounds)
    customer_id = await store.register(**fields)
    identity = await store.authenticate("jdoe", "s3cret")
"""

import asyncio
import logging
from functools import lru_cache
from typing import Optional

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ordering_api.core.exceptions import AuthError, ConflictError, ValidationError
from ordering_api.models import Customer
from ordering_api.services.tokens import Identity

logger = logging.getLogger(__name__)

REGISTRATION_FIELDS = ("fullname", "address", "phone", "email", "username", "password")

INVALID_CREDENTIALS = "Invalid username or password"

# bcrypt only reads the first 72 bytes; newer releases reject longer input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a password with a freshly generated bcrypt salt."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Stored password hash has an invalid format")
        return False


@lru_cache()
def _dummy_hash(rounds: int) -> str:
    """Hash compared against when the username is unknown, so both failure
    paths pay for one bcrypt verification."""
    return hash_password("dummy-password", rounds=rounds)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def _check_password_length(password: str) -> None:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


class CredentialStore:
    """
    Customer identity and password storage.

    Attributes:
        db: Session for the current unit of work
        bcrypt_rounds: Cost factor used for new hashes
    """

    def __init__(self, db: AsyncSession, bcrypt_rounds: int = 10):
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    async def _find_by_username(self, username: str) -> Optional[Customer]:
        result = await self.db.execute(select(Customer).where(Customer.username == username))
        return result.scalar_one_or_none()

    async def register(
        self,
        fullname: Optional[str],
        address: Optional[str],
        phone: Optional[str],
        email: Optional[str],
        username: Optional[str],
        password: Optional[str],
    ) -> int:
        """
        Create a customer account.

        Args:
            fullname, address, phone, email: Contact details
            username: Login name, unique across customers
            password: Plaintext password, hashed before storage

        Returns:
            int: The new customer id

        Raises:
            ValidationError: A field is missing or blank, or the password is too long
            ConflictError: The username is taken
        """
        values = {
            "fullname": fullname,
            "address": address,
            "phone": phone,
            "email": email,
            "username": username,
            "password": password,
        }
        if any(_is_blank(values[name]) for name in REGISTRATION_FIELDS):
            raise ValidationError("Missing required fields")
        _check_password_length(password)

        if await self._find_by_username(username) is not None:
            raise ConflictError("Username already exists")

        # bcrypt is CPU bound; keep it off the event loop
        password_hash = await asyncio.to_thread(hash_password, password, self.bcrypt_rounds)

        customer = Customer(
            fullname=fullname,
            address=address,
            phone=phone,
            email=email,
            username=username,
            password=password_hash,
        )
        self.db.add(customer)

        try:
            await self.db.commit()
        except IntegrityError:
            # Concurrent registration won the race for the unique username
            await self.db.rollback()
            raise ConflictError("Username already exists")

        await self.db.refresh(customer)
        logger.info(f"Customer #{customer.id} registered ({customer.username})")
        return customer.id

    async def authenticate(self, username: Optional[str], password: Optional[str]) -> Identity:
        """
        Verify a username/password pair.

        Raises:
            ValidationError: Either value is missing or the password is too long
            AuthError: Unknown username or wrong password (indistinguishable)
        """
        if _is_blank(username) or _is_blank(password):
            raise ValidationError("Missing username or password")
        _check_password_length(password)

        customer = await self._find_by_username(username)

        if customer is None:
            await asyncio.to_thread(verify_password, password, _dummy_hash(self.bcrypt_rounds))
            logger.info(f"Login failed for unknown username {username!r}")
            raise AuthError(INVALID_CREDENTIALS)

        if not await asyncio.to_thread(verify_password, password, customer.password):
            logger.info(f"Login failed for customer #{customer.id}")
            raise AuthError(INVALID_CREDENTIALS)

        return Identity(id=customer.id, username=customer.username)
