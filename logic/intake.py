import re
from datetime import datetime
from typing import Any, Mapping
from unidecode import unidecode
from constants import REQUIRED_INTAKE_FIELDS, EMAIL_PATTERN
from database.models import Client
from database.repository import Repository
from enums import ExperienceLevelEnum, SessionTypeEnum
from exceptions import ValidationError
from logger import get_logger

logger = get_logger(__name__)

def normalize_key(key: str) -> str: #"Research Area" and "research-area" both become research_area
    return re.sub(r"[\s\-]+", "_", unidecode(str(key)).strip().lower())

def normalize_answers(raw_answers: Mapping[str, Any]) -> dict[str, Any]:
    answers = {}
    for key, value in raw_answers.items():
        if isinstance(value, str):
            value = value.strip()
        answers[normalize_key(key)] = value
    return answers

def parse_choice(value: Any, enum_class, field: str):
    text = str(value).strip().lower().replace("-", "").replace("_", "").replace(" ", "")
    for member in enum_class: #match on value or member name, ignoring case and separators
        candidates = {member.value.lower(), member.name.lower().replace("_", "")}
        if text in {candidate.replace("-", "").replace("_", "") for candidate in candidates}:
            return member
    choices = ", ".join(member.value for member in enum_class)
    raise ValidationError(f"'{value}' is not a valid {field} (expected one of: {choices})", field=field)

def validate_intake(answers: dict[str, Any]):
    missing_fields = [field for field in REQUIRED_INTAKE_FIELDS if answers.get(field) in (None, "")]
    if missing_fields:
        raise ValidationError(
            f"missing required intake fields: {', '.join(missing_fields)}",
            field=missing_fields[0],
            fields=missing_fields,
        )
    if not re.match(EMAIL_PATTERN, str(answers["email"])):
        raise ValidationError(f"'{answers['email']}' is not a valid email address", field="email")

def find_client_by_email(repository: Repository, email: str) -> Client | None:
    matches = repository.query("client", email=email.lower()) #emails are stored lowercased
    return matches[0] if matches else None

def ingest_intake(raw_answers: Mapping[str, Any], repository: Repository, now: datetime) -> Client:
    """
    Validate intake form answers and build or update the matching client record

    The record is returned unsaved so the caller can persist it with its other changes.
    """
    answers = normalize_answers(raw_answers)
    validate_intake(answers)

    consultation_type = parse_choice(answers["consultation_type"], SessionTypeEnum, "consultation_type")
    experience_level = None
    if answers.get("experience_level") not in (None, ""):
        experience_level = parse_choice(answers["experience_level"], ExperienceLevelEnum, "experience_level")

    client = find_client_by_email(repository, str(answers["email"]))
    if client is None:
        client = Client(
            name=answers["name"],
            email=str(answers["email"]).lower(),
            research_area=answers["research_area"],
            experience_level=experience_level,
            consultation_type=consultation_type,
            intake_answers=answers,
            created_at=now,
            updated_at=now,
        )
        logger.info("Created client %s from intake", client.id)
        return client

    client.name = answers["name"]
    client.research_area = answers["research_area"]
    client.consultation_type = consultation_type
    if experience_level is not None:
        client.experience_level = experience_level
    client.intake_answers = {**client.intake_answers, **answers} #later answers win, earlier extra answers are kept
    client.updated_at = now
    logger.info("Updated client %s from a repeated intake", client.id)
    return client
