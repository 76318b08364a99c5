"""
strength.py - Password strength scoring

The score is a fixed heuristic (no randomness, no external data), so the
same password always gets the same score.
"""
from typing import Dict, Iterable, Optional

from .generator import SYMBOLS

# Substrings that cost 10 points (matched case-sensitively)
COMMON_PATTERNS = ("123", "abc", "qwe")

# Substrings of the lowercased password that cost 20 points
COMMON_PASSWORDS = ("password", "123456")

STRENGTH_LEVELS = (
    (30, "Very Weak"),
    (50, "Weak"),
    (70, "Fair"),
    (85, "Strong"),
)
STRONGEST_LEVEL = "Very Strong"


class PasswordStrength:
    """Score passwords from 0 to 100 and describe the result"""

    def __init__(
        self,
        common_patterns: Optional[Iterable[str]] = None,
        common_passwords: Optional[Iterable[str]] = None,
    ):
        # The penalty tables are policy, extend them per deployment
        self.common_patterns = tuple(common_patterns if common_patterns is not None else COMMON_PATTERNS)
        self.common_passwords = tuple(
            p.lower() for p in (common_passwords if common_passwords is not None else COMMON_PASSWORDS)
        )

    def checks(self, password: str) -> Dict[str, object]:
        lowered = password.lower()
        return {
            'length': len(password),
            'has_lowercase': any(c.islower() for c in password),
            'has_uppercase': any(c.isupper() for c in password),
            'has_digits': any(c.isdigit() for c in password),
            'has_symbols': any(c in SYMBOLS for c in password),
            'has_patterns': any(p in password for p in self.common_patterns),
            'is_common': any(p in lowered for p in self.common_passwords),
        }

    def evaluate(self, password: Optional[str]) -> int:
        """
        Score a password.

        length (2 points per char, max 25) + 10 per character class present,
        +10 at 12+ chars and +10 more at 16+, -10 for a common pattern,
        -20 for a common password. Clamped to 0..100.
        """
        if not password:
            return 0

        checks = self.checks(password)
        length = checks['length']

        score = min(length * 2, 25)
        variety = sum([
            checks['has_lowercase'],
            checks['has_uppercase'],
            checks['has_digits'],
            checks['has_symbols'],
        ])
        score += variety * 10

        if length >= 12:
            score += 10
        if length >= 16:
            score += 10

        if checks['has_patterns']:
            score -= 10
        if checks['is_common']:
            score -= 20

        return max(0, min(100, score))

    @staticmethod
    def describe(score: int) -> str:
        for limit, label in STRENGTH_LEVELS:
            if score < limit:
                return label
        return STRONGEST_LEVEL

    def analyze(self, password: str) -> Dict:
        """
        Score a password and explain the result

        Returns:
            Dictionary with score, strength label, checks and suggestions
        """
        checks = self.checks(password or "")
        score = self.evaluate(password)

        suggestions = []
        if not checks['has_uppercase']:
            suggestions.append("Add uppercase letters")
        if not checks['has_lowercase']:
            suggestions.append("Add lowercase letters")
        if not checks['has_digits']:
            suggestions.append("Add numbers")
        if not checks['has_symbols']:
            suggestions.append("Add special characters")
        if checks['length'] < 12:
            suggestions.append("Make password at least 12 characters long")
        if checks['has_patterns']:
            suggestions.append("Avoid patterns like '123' or 'abc'")
        if checks['is_common']:
            suggestions.append("Choose a unique password")

        return {
            'score': score,
            'strength': self.describe(score),
            'checks': checks,
            'suggestions': suggestions,
        }


_default_evaluator = PasswordStrength()


def evaluate_password_strength(password: Optional[str]) -> int:
    return _default_evaluator.evaluate(password)


def get_strength_description(score: int) -> str:
    return PasswordStrength.describe(score)


def format_strength_bar(score: int, width: int = 20) -> str:
    """Create a visual strength bar"""
    filled = int((score / 100) * width)
    bar = '█' * filled + '░' * (width - filled)

    # Color codes (for terminal)
    if score >= 85:
        color = '\033[92m'  # Green
    elif score >= 70:
        color = '\033[93m'  # Yellow
    elif score >= 50:
        color = '\033[33m'  # Orange
    else:
        color = '\033[91m'  # Red

    reset = '\033[0m'
    return f"{color}{bar}{reset} {score}%"
