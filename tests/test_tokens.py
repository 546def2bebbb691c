"""Unit tests for random token generation."""

import random
import secrets
import string

import pytest

from urlshortener.enums import Requirement
from urlshortener.exceptions import RequiredValueError
from urlshortener.tokens import RandomTokenGenerator

ALPHABET = string.ascii_letters + string.digits


class FirstChoice(random.Random):
    def choice(self, seq):
        return seq[0]


def test_generate_token_length() -> None:
    generator = RandomTokenGenerator()
    for length in (1, 3, 10, 64):
        assert len(generator.generate(ALPHABET, length)) == length


def test_generate_token_only_alphabet_characters() -> None:
    generator = RandomTokenGenerator()
    for _ in range(100):
        token = generator.generate("abc", 12)
        assert set(token) <= set("abc")


def test_generate_token_single_character_alphabet() -> None:
    assert RandomTokenGenerator().generate("Z", 10) == "ZZZZZZZZZZ"


def test_generate_token_uniqueness() -> None:
    generator = RandomTokenGenerator()
    tokens = {generator.generate(ALPHABET, 10) for _ in range(1000)}
    # With 62^10 possibilities, 1000 tokens should all be unique
    assert len(tokens) == 1000


def test_generate_token_uses_every_character() -> None:
    generator = RandomTokenGenerator()
    drawn = "".join(generator.generate("abcd", 50) for _ in range(20))
    assert set(drawn) == set("abcd")


def test_default_source_is_system_random() -> None:
    assert isinstance(RandomTokenGenerator()._source, secrets.SystemRandom)


def test_injected_source_drives_output() -> None:
    assert RandomTokenGenerator(FirstChoice()).generate("xyz", 4) == "xxxx"


def test_seeded_sources_are_reproducible() -> None:
    first = RandomTokenGenerator(random.Random(1234))
    second = RandomTokenGenerator(random.Random(1234))
    assert [first.generate(ALPHABET, 8) for _ in range(5)] == [second.generate(ALPHABET, 8) for _ in range(5)]


@pytest.mark.parametrize(
    ("alphabet", "requirement"),
    [
        (None, Requirement.NOT_NULL),
        ("", Requirement.NOT_EMPTY),
        ("   ", Requirement.NOT_BLANK),
    ],
)
def test_generate_token_rejects_bad_alphabet(alphabet, requirement) -> None:
    with pytest.raises(RequiredValueError) as exc_info:
        RandomTokenGenerator().generate(alphabet, 5)
    assert exc_info.value.field_name == "alphabet"
    assert exc_info.value.requirement is requirement


@pytest.mark.parametrize(
    ("length", "requirement"),
    [
        (0, Requirement.NOT_ZERO),
        (-3, Requirement.NOT_NEGATIVE),
    ],
)
def test_generate_token_rejects_bad_length(length, requirement) -> None:
    with pytest.raises(RequiredValueError) as exc_info:
        RandomTokenGenerator().generate(ALPHABET, length)
    assert exc_info.value.field_name == "length"
    assert exc_info.value.requirement is requirement
