"""Random token generation for short urls.

Tokens must not be predictable: a guessable token lets anyone enumerate the
private urls stored behind the shortener. The random source is therefore a
``secrets.SystemRandom`` (OS entropy) by default, injected at construction so
tests can substitute a seeded ``random.Random``.

How to Use
===========
**Step 1 — Create a generator**::
    generator = RandomTokenGenerator()

**Step 2 — Generate a token**::
    token = generator.generate("abcdef0123", 10)

**Step 3 — Deterministic tests**::
    generator = RandomTokenGenerator(random.Random(1234))
"""

import random
import secrets

from urlshortener.arguments import require_non_blank, require_strictly_positive

__all__ = ["RandomTokenGenerator"]


class RandomTokenGenerator:
    """Generates fixed-length tokens sampled uniformly from an alphabet."""

    def __init__(self, source: random.Random | None = None) -> None:
        self._source = source if source is not None else secrets.SystemRandom()

    def generate(self, alphabet: str, length: int) -> str:
        """Return ``length`` characters sampled with replacement from ``alphabet``.

        Raises:
            RequiredValueError: alphabet is empty or blank, or length <= 0.
        """
        require_non_blank(alphabet, "alphabet")
        require_strictly_positive(length, "length")

        return "".join(self._source.choice(alphabet) for _ in range(length))
