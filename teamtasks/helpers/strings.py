"""
Naming helpers used to derive table names from resource class names.
"""

import re

_IRREGULAR_PLURALS = {
    "person": "people",
    "child": "children",
}

_ES_ENDINGS = ("s", "x", "z", "ch", "sh")
_VOWELS = "aeiou"


def camel_to_snake_case(camel: str) -> str:
    """
    Convert a CamelCase name to snake_case.

    A lowercase letter followed by an uppercase one starts a new word;
    every character is lowercased:

        camel_to_snake_case("UserSkill") -> "user_skill"
        camel_to_snake_case("ThisIsATest") -> "this_is_a_test"
    """
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])", "_", camel).lower()


def pluralize(word: str) -> str:
    """
    Pluralize the last word of a snake_case name.

        pluralize("user_skill") -> "user_skills"
        pluralize("activity") -> "activities"
    """
    if not word:
        return word

    head, _, last = word.rpartition("_")
    prefix = f"{head}_" if head else ""

    if last in _IRREGULAR_PLURALS:
        return prefix + _IRREGULAR_PLURALS[last]
    if last.endswith("y") and len(last) > 1 and last[-2] not in _VOWELS:
        return prefix + last[:-1] + "ies"
    if last.endswith(_ES_ENDINGS):
        return prefix + last + "es"
    return prefix + last + "s"


def singularize(word: str) -> str:
    """Inverse of pluralize() for the names it produces."""
    head, _, last = word.rpartition("_")
    prefix = f"{head}_" if head else ""

    for singular, plural in _IRREGULAR_PLURALS.items():
        if last == plural:
            return prefix + singular
    if last.endswith("ies"):
        return prefix + last[:-3] + "y"
    if last.endswith("es") and last[:-2].endswith(_ES_ENDINGS):
        return prefix + last[:-2]
    if last.endswith("s"):
        return prefix + last[:-1]
    return word
