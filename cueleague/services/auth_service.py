import logging
import secrets
import string
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from cueleague.core import security
from cueleague.core.config import settings
from cueleague.core.database import transaction
from cueleague.core.exceptions import InvalidCredentials, KeyLimitReached
from cueleague.models import access_key as access_key_model

logger = logging.getLogger(__name__)

KEY_ALPHABET = string.ascii_uppercase + string.digits
KEY_LENGTH = 6


def issue_organizer_token(via: str) -> str:
    return security.create_access_token(
        data={"sub": security.ORGANIZER_SUBJECT, "via": via},
        expires_delta=timedelta(minutes=security.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def login(password: str) -> str:
    if not security.verify_admin_password(password or ""):
        logger.warning("Rejected organizer login")
        raise InvalidCredentials("Incorrect password")
    return issue_organizer_token(via="password")


def generate_keys(db: Session, count: Optional[int] = None) -> List[str]:
    """
    Mints single-use organizer keys. Only hashes are stored, so the plain
    keys returned here are the only copy.
    """
    count = count or settings.ACCESS_KEY_BATCH_SIZE
    outstanding = db.query(access_key_model.AccessKey).filter(access_key_model.AccessKey.used.is_(False)).count()
    if outstanding + count > settings.MAX_UNUSED_ACCESS_KEYS:
        raise KeyLimitReached(
            f"{outstanding} keys are still unused; at most {settings.MAX_UNUSED_ACCESS_KEYS} may be outstanding"
        )
    keys = ["".join(secrets.choice(KEY_ALPHABET) for _ in range(KEY_LENGTH)) for _ in range(count)]
    with transaction(db):
        db.add_all([
            access_key_model.AccessKey(key_hash=security.get_password_hash(key), used=False)
            for key in keys
        ])
    logger.info("Generated %d access keys", count)
    return keys


def redeem_key(db: Session, key: str) -> str:
    """
    Consumes an unused key and returns an organizer token. Keys are stored
    hashed, so every unused hash is verified in turn; generate_keys caps how
    many there can be.
    """
    key = (key or "").strip().upper()
    with transaction(db):
        unused = db.query(access_key_model.AccessKey).filter(access_key_model.AccessKey.used.is_(False)).all()
        found = next((k for k in unused if security.verify_password(key, k.key_hash)), None)
        if found is None:
            raise InvalidCredentials("Invalid or already used access key")
        # Conditional update: a concurrent redeem of the same key updates nothing
        claimed = db.query(access_key_model.AccessKey).filter(
            access_key_model.AccessKey.id == found.id,
            access_key_model.AccessKey.used.is_(False),
        ).update({"used": True, "used_at": datetime.utcnow()}, synchronize_session=False)
        if claimed != 1:
            raise InvalidCredentials("Invalid or already used access key")
    logger.info("Access key %s redeemed", found.id)
    return issue_organizer_token(via="access_key")
