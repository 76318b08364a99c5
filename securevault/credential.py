"""
credential.py - A single stored login
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

MASK = "*"


@dataclass
class Credential:
    """Website, username and password plus bookkeeping metadata"""

    website: str
    username: str
    password: str = field(repr=False)
    created_at: datetime = field(default_factory=datetime.now)
    last_modified: datetime = field(default_factory=datetime.now)
    notes: Optional[str] = None

    @classmethod
    def create(
        cls,
        website: str,
        username: str,
        password: str,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "Credential":
        """New credential whose created and modified timestamps are both `now`"""
        now = now or datetime.now()
        return cls(
            website=website,
            username=username,
            password=password,
            created_at=now,
            last_modified=now,
            notes=notes,
        )

    def update(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> None:
        """
        Replace the supplied fields and bump last_modified.

        Fields left as None keep their existing value.
        """
        if username is not None:
            self.username = username
        if password is not None:
            self.password = password
        if notes is not None:
            self.notes = notes

        self.last_modified = now or datetime.now()

    def matches(self, term: Optional[str]) -> bool:
        """Case-insensitive substring match on website, username or notes"""
        if term is None or not term.strip():
            return True

        term = term.lower()
        return any(
            value is not None and term in value.lower()
            for value in (self.website, self.username, self.notes)
        )

    def is_for(self, website: str) -> bool:
        return self.website is not None and self.website.lower() == website.lower()

    def masked_password(self) -> str:
        return MASK * len(self.password or "")

    def __str__(self) -> str:
        notes = f" | Notes: {self.notes}" if self.notes and self.notes.strip() else ""
        return (
            f"Website: {self.website or 'N/A'} | Username: {self.username or 'N/A'} | "
            f"Created: {self.created_at:%Y-%m-%d %H:%M} | "
            f"Modified: {self.last_modified:%Y-%m-%d %H:%M}{notes}"
        )
