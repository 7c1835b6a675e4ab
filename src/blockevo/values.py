"""Terminal value enumerations and variable naming conventions."""

import re
from typing import Any, Iterable, List

import numpy as np

VARIABLE_NAME_PATTERN = re.compile(r"^(out|v[0-9]+|b[0-9]+)$")


class ValueEnumerations:
    """Terminal pools the generator draws from."""

    NUMERIC_CONSTANTS = [-10, -5, -1, 0, 1, 2, 5, 10, 0.1, 0.5, 1.0, 2.0]

    BOOLEAN_CONSTANTS = [True, False]

    FIXED_VARIABLES = ["out", "v0", "v1", "v2"]

    COMPARE_OPERATORS = ["==", "!=", ">", ">=", "<", "<="]

    OUTPUT_VARIABLE = "out"

    @staticmethod
    def known_variables(input_variables: Iterable[str] = ()) -> List[str]:
        """Fixed slot names followed by any input names not already present."""
        names = list(ValueEnumerations.FIXED_VARIABLES)
        for name in input_variables:
            if name not in names:
                names.append(name)
        return names


def is_number(value: Any) -> bool:
    """True for numeric literals; booleans are not numbers here."""
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def is_boolean(value: Any) -> bool:
    return isinstance(value, (bool, np.bool_))


def is_boolean_name(
    name: str, boolean_inputs: Iterable[str] = (), input_variables: Iterable[str] = ()
) -> bool:
    """
    Names with a ``b`` prefix hold booleans.

    Declared inputs follow their declared type instead: names in
    ``boolean_inputs`` are boolean, other names in ``input_variables`` numeric.
    """
    if name in boolean_inputs:
        return True
    if name in input_variables:
        return False
    return name.startswith("b")


def is_valid_variable_name(name: Any, input_variables: Iterable[str] = ()) -> bool:
    """Known name, input name, or ``out|v<n>|b<n>``."""
    if not isinstance(name, str) or not name:
        return False
    if name in ValueEnumerations.FIXED_VARIABLES or name in input_variables:
        return True
    return VARIABLE_NAME_PATTERN.match(name) is not None


__all__ = [
    "VARIABLE_NAME_PATTERN",
    "ValueEnumerations",
    "is_number",
    "is_boolean",
    "is_boolean_name",
    "is_valid_variable_name",
]
