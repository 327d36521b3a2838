"""ID token claims consumed when building a user identity."""

import re
from enum import StrEnum
from typing import Any

from loguru import logger
from pydantic import (
    BaseModel,
    ConfigDict,
    StrictBool,
    StrictStr,
    ValidationError,
    field_validator,
)


class IdTokenField(StrEnum):
    """Claim names read from a decoded ID token."""

    SUBJECT = "sub"
    IS_GUEST = "is_guest"
    SIGNATURE = "signature"
    PREFERRED_USERNAME = "preferred_username"
    EMAIL = "email"


REQUIRED_CLAIMS = (
    IdTokenField.SUBJECT,
    IdTokenField.IS_GUEST,
    IdTokenField.SIGNATURE,
    IdTokenField.PREFERRED_USERNAME,
)

# optional sign then decimal digits, as accepted for long user ids
_SUBJECT_PATTERN = re.compile(r"[+-]?[0-9]+")


class InvalidClaimsError(ValueError):
    """Raised when a required claim is missing or has the wrong type."""

    def __init__(self, claim: str, reason: str):
        self.claim = claim
        self.reason = reason
        super().__init__(f"Invalid ID token claim '{claim}': {reason}")


class IdTokenClaims(BaseModel):
    """Validated subset of an ID token needed to identify a user."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    sub: int
    is_guest: StrictBool
    signature: StrictStr
    preferred_username: StrictStr
    email: str | None = None

    @field_validator("sub", mode="before")
    @classmethod
    def _parse_subject(cls, value: Any) -> int:
        # bool is an int subclass; a guest flag in the subject slot is a bug upstream
        if isinstance(value, bool):
            raise ValueError("subject must be a numeric user id")
        if isinstance(value, int):
            return value
        if isinstance(value, str) and _SUBJECT_PATTERN.fullmatch(value.strip()):
            return int(value.strip())
        raise ValueError("subject must be a numeric user id")

    @field_validator("email", mode="before")
    @classmethod
    def _drop_non_string_email(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @classmethod
    def parse(cls, claims: dict[str, Any]) -> "IdTokenClaims":
        """Validate a decoded claim set.

        Args:
            claims: Decoded (already verified) ID token payload

        Returns:
            IdTokenClaims with the identity claims extracted

        Raises:
            InvalidClaimsError: If a required claim is absent or malformed
        """
        if not isinstance(claims, dict):
            raise InvalidClaimsError("<root>", "claim set must be a mapping")
        for claim in REQUIRED_CLAIMS:
            if claim not in claims:
                raise InvalidClaimsError(claim, "claim is missing")
        try:
            return cls.model_validate(claims)
        except ValidationError as e:
            error = e.errors()[0]
            claim = str(error["loc"][0]) if error["loc"] else "<root>"
            logger.debug(f"Rejecting ID token claims, first error on '{claim}': {error['msg']}")
            raise InvalidClaimsError(claim, error["msg"]) from e
