"""Field-level rules for user payloads.

Every violation is collected in request order; nothing here touches the
database.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from email_validator import EmailNotValidError, validate_email

from app.models.users import CreateUserRequest, UpdateUserRequest

NAME_EMPTY = "Name cannot be empty"
EMAIL_INVALID = "Invalid email format"


@dataclass
class ValidationResult:
    errors: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add(self, field_name: str, message: str) -> None:
        self.errors.append((field_name, message))

    def first_errors(self) -> List[Tuple[str, str]]:
        """First message of every failing field, in the order fields failed"""
        seen = {}
        for field_name, message in self.errors:
            seen.setdefault(field_name, message)
        return list(seen.items())

    @property
    def message(self) -> str:
        joined = ", ".join(f"{name}: {message}" for name, message in self.first_errors())
        return f"Validation errors: {joined}"


def check_name(name: str) -> Optional[str]:
    if len(name) < 1:
        return NAME_EMPTY
    return None


def check_email(email: str) -> Optional[str]:
    try:
        info = validate_email(email, check_deliverability=False, globally_deliverable=False)
    except EmailNotValidError:
        return EMAIL_INVALID
    # the domain must have at least one dot-separated segment
    if "." not in info.domain:
        return EMAIL_INVALID
    return None


def _apply(result: ValidationResult, field_name: str, error: Optional[str]) -> None:
    if error is not None:
        result.add(field_name, error)


def validate_create(req: CreateUserRequest) -> ValidationResult:
    result = ValidationResult()
    _apply(result, "name", check_name(req.name))
    _apply(result, "email", check_email(req.email))
    return result


def validate_update(req: UpdateUserRequest) -> ValidationResult:
    result = ValidationResult()
    if req.name is not None:
        _apply(result, "name", check_name(req.name))
    if req.email is not None:
        _apply(result, "email", check_email(req.email))
    # active: any boolean is accepted
    return result
