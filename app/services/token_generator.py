"""Opaque identifier generation for resume tokens and queued items.

Tokens look like ``tok_<random>_<millis>``. The random part comes from the
``secrets`` module, so a token reveals nothing about the response it points
to and cannot be guessed from other tokens.
"""

import secrets
import time
from typing import Callable

RESUME_TOKEN_PREFIX = "tok"
EMAIL_ID_PREFIX = "mail"
FALLBACK_ID_PREFIX = "mem"


class TokenGenerator:
    """
    Generator of URL-safe, unguessable identifiers.

    Each identifier combines 128 random bits with the current time in
    milliseconds. Uniqueness is probabilistic; collisions within a process
    lifetime are not a practical concern.

    Usage example:
        from app.services.token_generator import TokenGenerator

        tokens = TokenGenerator()
        token = tokens.generate()
    """

    def __init__(
        self,
        prefix: str = RESUME_TOKEN_PREFIX,
        random_bytes: int = 16,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize generator.

        Args:
            prefix: Leading label identifying the kind of identifier
            random_bytes: Entropy per identifier, in bytes
            clock: Source of the current time in seconds
        """
        if not prefix or not prefix.isalnum():
            raise ValueError("Prefix must be a non-empty alphanumeric string")
        self.prefix = prefix
        self.random_bytes = random_bytes
        self.clock = clock

    def generate(self) -> str:
        """
        Produce a new identifier.

        Returns:
            Identifier safe to embed in a URL query string without escaping

        Example:
            >>> TokenGenerator().generate()  # doctest: +SKIP
            'tok_T3bE0m2l3vZ6c0F9yq8XQw_1760781234567'
        """
        random_part = secrets.token_urlsafe(self.random_bytes)
        millis = int(self.clock() * 1000)
        return f"{self.prefix}_{random_part}_{millis}"
