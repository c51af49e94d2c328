"""
One-time code generation.

Codes are uppercase letters only (A-Z), drawn with the secrets module.
The same generator produces email-confirmation codes, login codes and
account ids.
"""

import secrets
import string

ALPHABET = string.ascii_uppercase


class SecretsCodeGenerator:
    """
    Implements CodeGenerator protocol via the secrets module.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def generate(self, length: int = 6) -> str:
        """
        Generate a random uppercase alphabetic code.

        Args:
            length: Number of letters (0 returns an empty string)

        Returns:
            Code such as "QWZKTA"
        """
        if length < 0:
            raise ValueError("length must be non-negative")
        return "".join(secrets.choice(ALPHABET) for _ in range(length))
