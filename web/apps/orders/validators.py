"""CPF (Cadastro de Pessoas Físicas) validation.

A CPF has nine base digits followed by two check digits, each computed
with a mod-11 weighted sum over the digits before it. Sequences of a
single repeated digit satisfy the checksum but are not issued, so they
are rejected explicitly.
"""

import re
from typing import Any

CPF_RE = re.compile(r"^(\d{3})\.?(\d{3})\.?(\d{3})-?(\d{2})$")


def _check_digit(digits: list[int]) -> int:
    weight = len(digits) + 1
    total = sum(d * (weight - i) for i, d in enumerate(digits))
    rest = (total * 10) % 11
    return 0 if rest == 10 else rest


def normalize_cpf(cpf: str) -> str:
    """Strip the ``000.000.000-00`` punctuation, returning digits only.

    Raises:
        ValueError: If ``cpf`` does not have the CPF shape.
    """
    m = CPF_RE.match(cpf.strip())
    if not m:
        raise ValueError("Invalid CPF format")
    return "".join(m.groups())


def canonical_cpf(cpf: Any) -> Any:
    """Return the digits-only form of a CPF-shaped string.

    Values that are not CPF-shaped are returned unchanged, so lookups on
    them simply find nothing.
    """
    if not isinstance(cpf, str):
        return cpf
    try:
        return normalize_cpf(cpf)
    except ValueError:
        return cpf


class CpfValidator:
    """Validate CPF numbers, punctuated or digits-only."""

    def validate(self, cpf: Any) -> bool:
        """Return True when ``cpf`` has a valid shape and check digits.

        Args:
            cpf: Candidate value. Anything other than a string is invalid.

        Returns:
            bool: True for a valid CPF, otherwise False.
        """
        if not isinstance(cpf, str):
            return False
        try:
            number = normalize_cpf(cpf)
        except ValueError:
            return False

        if len(set(number)) == 1:
            return False

        digits = [int(c) for c in number]
        first = _check_digit(digits[:9])
        second = _check_digit(digits[:9] + [first])
        return digits[9] == first and digits[10] == second
