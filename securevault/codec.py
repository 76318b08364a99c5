"""
codec.py - Plaintext layout of the vault before encryption

    VALIDATOR:<validator blob>
    website|username|password|created|modified|notes
    ...

Delimiters, backslashes and line breaks inside a field are backslash-escaped
so that any value survives a save/load cycle.
"""
import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple

from .credential import Credential
from .exceptions import MalformedRecordError

logger = logging.getLogger(__name__)

VALIDATOR_PREFIX = "VALIDATOR:"
FIELD_DELIMITER = "|"
ESCAPE = "\\"
FIELD_COUNT = 6
MIN_FIELD_COUNT = 3

_ESCAPES = {
    ESCAPE: ESCAPE + ESCAPE,
    FIELD_DELIMITER: ESCAPE + FIELD_DELIMITER,
    "\n": ESCAPE + "n",
    "\r": ESCAPE + "r",
}
_UNESCAPES = {"n": "\n", "r": "\r"}


def escape_field(value: Optional[str]) -> str:
    if not value:
        return ""
    return "".join(_ESCAPES.get(ch, ch) for ch in value)


def split_fields(line: str) -> List[str]:
    """
    Split a record line on unescaped delimiters, unescaping as we go.

    Like a split with a limit of six, everything after the fifth
    delimiter belongs to the last field.
    """
    fields = []
    current = []
    chars = iter(line)
    for ch in chars:
        if ch == ESCAPE:
            nxt = next(chars, "")
            current.append(_UNESCAPES.get(nxt, nxt))
        elif ch == FIELD_DELIMITER and len(fields) < FIELD_COUNT - 1:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
    fields.append("".join(current))
    return fields


def format_timestamp(value: datetime) -> str:
    return value.isoformat()


def parse_timestamp(value: str, fallback: datetime) -> datetime:
    """Parse an ISO-8601 timestamp, using `fallback` when it is missing or unreadable"""
    if not value:
        return fallback
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.debug("Unparsable timestamp in record, using current time")
        return fallback


def encode_record(credential: Credential) -> str:
    return FIELD_DELIMITER.join([
        escape_field(credential.website),
        escape_field(credential.username),
        escape_field(credential.password),
        format_timestamp(credential.created_at),
        format_timestamp(credential.last_modified),
        escape_field(credential.notes),
    ])


def decode_record(line: str, now: Optional[datetime] = None) -> Credential:
    """
    Decode one record line.

    Raises:
        MalformedRecordError: If the line holds fewer than three fields
    """
    parts = split_fields(line)
    if len(parts) < MIN_FIELD_COUNT:
        raise MalformedRecordError(f"Record has {len(parts)} field(s), expected at least {MIN_FIELD_COUNT}")

    now = now or datetime.now()
    parts += [""] * (FIELD_COUNT - len(parts))
    website, username, password, created, modified, notes = parts

    return Credential(
        website=website,
        username=username,
        password=password,
        created_at=parse_timestamp(created, now),
        last_modified=parse_timestamp(modified, now),
        notes=notes or None,
    )


def encode_store(validator: Optional[str], credentials: Iterable[Credential]) -> str:
    lines = [VALIDATOR_PREFIX + (validator or "")]
    lines.extend(encode_record(c) for c in credentials)
    return "\n".join(lines) + "\n"


def decode_store(
    text: str,
    clock: Callable[[], datetime] = datetime.now,
) -> Tuple[Optional[str], List[Credential]]:
    """
    Decode the decrypted vault text.

    Returns:
        Tuple of (validator blob or None, credentials in stored order).
        Malformed lines are skipped.
    """
    validator = None
    credentials = []
    first = True

    for lineno, raw in enumerate(text.split("\n"), start=1):
        line = raw.rstrip("\r")
        if not line.strip():
            continue

        if first:
            first = False
            if line.startswith(VALIDATOR_PREFIX):
                validator = line[len(VALIDATOR_PREFIX):].strip() or None
                continue

        try:
            credentials.append(decode_record(line, clock()))
        except MalformedRecordError as e:
            # never log the line itself, it may contain a password
            logger.warning("Skipping record on line %d: %s", lineno, e)

    return validator, credentials
