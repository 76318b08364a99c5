import random

import pytest

from securevault.exceptions import ConfigurationError
from securevault.generator import (
    DIGITS,
    LOWERCASE,
    SIMILAR_CHARS,
    SYMBOLS,
    UPPERCASE,
    PasswordConfig,
    generate,
    generate_memorable_password,
    generate_password,
    generate_strong_password,
)


def count_in(password, chars):
    return sum(1 for c in password if c in chars)


@pytest.mark.parametrize("length", [4, 5, 12, 16, 64, 200])
def test_length_is_exact(length):
    rng = random.Random(length)
    for _ in range(20):
        assert len(generate(PasswordConfig(length=length), rng)) == length


def test_minimums_are_met():
    config = PasswordConfig(length=16, min_lowercase=2, min_uppercase=3, min_digits=4, min_symbols=5)
    rng = random.Random(1234)
    for _ in range(200):
        password = generate(config, rng)
        assert count_in(password, LOWERCASE) >= 2
        assert count_in(password, UPPERCASE) >= 3
        assert count_in(password, DIGITS) >= 4
        assert count_in(password, SYMBOLS) >= 5


def test_minimums_filling_whole_length():
    config = PasswordConfig(length=8, min_lowercase=2, min_uppercase=2, min_digits=2, min_symbols=2)
    password = generate(config, random.Random(5))
    assert [count_in(password, cs) for cs in (LOWERCASE, UPPERCASE, DIGITS, SYMBOLS)] == [2, 2, 2, 2]


def test_excluded_classes_never_appear():
    config = PasswordConfig(length=32, include_symbols=False, include_uppercase=False)
    rng = random.Random(99)
    for _ in range(50):
        password = generate(config, rng)
        assert count_in(password, SYMBOLS) == 0
        assert count_in(password, UPPERCASE) == 0


def test_minimum_of_excluded_class_is_ignored():
    config = PasswordConfig(length=4, include_digits=False, min_digits=10)
    assert len(generate(config, random.Random(0))) == 4


def test_exclude_similar():
    config = PasswordConfig(length=64, exclude_similar=True)
    rng = random.Random(42)
    for _ in range(50):
        assert not set(generate(config, rng)) & set(SIMILAR_CHARS)


def test_required_characters_are_shuffled():
    # one required digit among lowercase letters: it must not always land in front
    config = PasswordConfig(
        length=10, include_uppercase=False, include_symbols=False, min_lowercase=0, min_digits=1,
    )
    rng = random.Random(7)
    first_digit_positions = set()
    for _ in range(300):
        password = generate(config, rng)
        first_digit_positions.add(next(i for i, c in enumerate(password) if c in DIGITS))
    assert len(first_digit_positions) > 5


def test_seeded_rng_is_deterministic():
    config = PasswordConfig(length=20)
    assert generate(config, random.Random(2024)) == generate(config, random.Random(2024))


def test_default_rng_produces_unique_passwords():
    passwords = {generate() for _ in range(20)}
    assert len(passwords) == 20


@pytest.mark.parametrize("kwargs", [
    dict(length=4, min_lowercase=2, min_uppercase=2, min_digits=1, min_symbols=0),
    dict(length=6, min_digits=7),
])
def test_minimums_above_length_fail(kwargs):
    with pytest.raises(ConfigurationError):
        generate(PasswordConfig(**kwargs))


def test_no_classes_fails():
    config = PasswordConfig(
        include_lowercase=False, include_uppercase=False, include_digits=False, include_symbols=False,
    )
    with pytest.raises(ConfigurationError):
        generate(config)


@pytest.mark.parametrize("kwargs", [dict(length=3), dict(length=0), dict(min_symbols=-1)])
def test_invalid_config(kwargs):
    with pytest.raises(ConfigurationError):
        PasswordConfig(**kwargs)


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        PasswordConfig(length=1)


def test_simple_shape_includes_requested_classes():
    rng = random.Random(3)
    for _ in range(50):
        password = generate_password(12, True, True, True, rng=rng)
        assert len(password) == 12
        assert count_in(password, LOWERCASE) >= 1
        assert count_in(password, UPPERCASE) >= 1
        assert count_in(password, DIGITS) >= 1
        assert count_in(password, SYMBOLS) >= 1


def test_simple_shape_without_symbols():
    rng = random.Random(4)
    for _ in range(50):
        password = generate_password(10, use_symbols=False, use_digits=True, use_uppercase=True, rng=rng)
        assert len(password) == 10
        assert count_in(password, SYMBOLS) == 0


def test_simple_shape_rejects_short_length():
    with pytest.raises(ConfigurationError):
        generate_password(3)


def test_simple_shape_is_the_same_algorithm():
    expected_config = PasswordConfig(
        length=12, include_digits=False, min_digits=0, min_lowercase=1, min_uppercase=1, min_symbols=1,
    )
    assert generate_password(12, True, False, True, rng=random.Random(11)) == \
        generate(expected_config, random.Random(11))


def test_strong_password():
    password = generate_strong_password(20, rng=random.Random(8))
    assert len(password) == 20
    assert all(count_in(password, cs) >= 1 for cs in (LOWERCASE, UPPERCASE, DIGITS, SYMBOLS))


@pytest.mark.parametrize("length", [4, 8, 13])
def test_memorable_password(length):
    password = generate_memorable_password(length, rng=random.Random(length))
    assert len(password) == length
    assert password[:-2].isalpha()
    assert all(c in DIGITS + SYMBOLS for c in password[-2:])


def test_memorable_password_too_short():
    with pytest.raises(ConfigurationError):
        generate_memorable_password(3)
