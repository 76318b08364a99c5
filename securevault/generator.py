"""
generator.py - Secure password generation using cryptographically secure randomness
"""
import random
import secrets
import string
from dataclasses import dataclass
from typing import List, Optional

from .exceptions import ConfigurationError

LOWERCASE = string.ascii_lowercase
UPPERCASE = string.ascii_uppercase
DIGITS = string.digits
SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"
SIMILAR_CHARS = "il1Lo0O"

MIN_LENGTH = 4

_CONSONANTS = "bcdfghjklmnpqrstvwxz"
_VOWELS = "aeiouy"


@dataclass
class PasswordConfig:
    """Options for generate()"""

    length: int = 12
    include_lowercase: bool = True
    include_uppercase: bool = True
    include_digits: bool = True
    include_symbols: bool = True
    min_lowercase: int = 1
    min_uppercase: int = 1
    min_digits: int = 1
    min_symbols: int = 1
    exclude_similar: bool = False

    def __post_init__(self):
        if self.length < MIN_LENGTH:
            raise ConfigurationError(f"Password length must be at least {MIN_LENGTH}")
        for name in ("min_lowercase", "min_uppercase", "min_digits", "min_symbols"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} cannot be negative")

    def character_classes(self) -> List[tuple]:
        """(charset, minimum) for every included class, similar characters already removed"""
        classes = [
            (self.include_lowercase, LOWERCASE, self.min_lowercase),
            (self.include_uppercase, UPPERCASE, self.min_uppercase),
            (self.include_digits, DIGITS, self.min_digits),
            (self.include_symbols, SYMBOLS, self.min_symbols),
        ]
        result = []
        for included, chars, minimum in classes:
            if not included:
                continue
            if self.exclude_similar:
                chars = remove_similar_chars(chars)
            result.append((chars, minimum))
        return result


def _default_rng() -> random.Random:
    # SystemRandom draws from os.urandom, unlike the module-level random functions
    return secrets.SystemRandom()


def remove_similar_chars(chars: str) -> str:
    return "".join(c for c in chars if c not in SIMILAR_CHARS)


def generate(config: Optional[PasswordConfig] = None, rng: Optional[random.Random] = None) -> str:
    """
    Generate a password that satisfies every per-class minimum.

    Required characters are drawn first, the rest is filled from the union
    of all included classes, and the whole sequence is shuffled so the
    required characters can end up anywhere.

    Args:
        config: Generation options (default: PasswordConfig())
        rng: Random source (default: secrets.SystemRandom())

    Raises:
        ConfigurationError: If no characters are available or the minimums
            add up to more than the length
    """
    config = config or PasswordConfig()
    rng = rng or _default_rng()

    classes = config.character_classes()
    charset = "".join(chars for chars, _ in classes)
    if not charset:
        raise ConfigurationError("At least one character type must be included")

    required = []
    for chars, minimum in classes:
        required.extend(rng.choice(chars) for _ in range(minimum))

    if len(required) > config.length:
        raise ConfigurationError("Password length is too short for the specified requirements")

    password_chars = required + [rng.choice(charset) for _ in range(config.length - len(required))]
    rng.shuffle(password_chars)

    return "".join(password_chars)


def generate_password(
    length: int = 12,
    use_symbols: bool = True,
    use_digits: bool = True,
    use_uppercase: bool = True,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Simple calling shape: lowercase is always included.

    Every included class is guaranteed at least one character. Lengths
    below MIN_LENGTH raise ConfigurationError rather than being clamped.
    """
    config = PasswordConfig(
        length=length,
        include_lowercase=True,
        include_uppercase=use_uppercase,
        include_digits=use_digits,
        include_symbols=use_symbols,
        min_lowercase=1,
        min_uppercase=1 if use_uppercase else 0,
        min_digits=1 if use_digits else 0,
        min_symbols=1 if use_symbols else 0,
    )
    return generate(config, rng)


def generate_strong_password(length: int = 16, rng: Optional[random.Random] = None) -> str:
    """All four classes, at least one of each"""
    return generate(PasswordConfig(length=length), rng)


def generate_memorable_password(length: int = 12, rng: Optional[random.Random] = None) -> str:
    """
    Generate a pronounceable password like "KabiRoxe4!".

    Alternating consonants and vowels (consonants in random case) are
    followed by two trailing digits/symbols.
    """
    if length < MIN_LENGTH:
        raise ConfigurationError(f"Password length must be at least {MIN_LENGTH}")
    rng = rng or _default_rng()

    chars = []
    use_consonant = rng.random() < 0.5
    while len(chars) < length - 2:
        if use_consonant:
            c = rng.choice(_CONSONANTS)
            chars.append(c.upper() if rng.random() < 0.5 else c)
        else:
            chars.append(rng.choice(_VOWELS))
        use_consonant = not use_consonant

    while len(chars) < length:
        chars.append(rng.choice(DIGITS) if rng.random() < 0.5 else rng.choice(SYMBOLS))

    return "".join(chars)
