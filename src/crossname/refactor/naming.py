import re
from enum import Enum
from typing import List, Tuple, Union

from crossname.refactor.exceptions import InputError


class NamingCase(str, Enum):
    camel = "camel"
    snake = "snake"
    pascal = "pascal"
    kebab = "kebab"


# An acronym stops before a capitalised word: "HTTPServer" -> HTTP, Server.
_WORD = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z0-9]+|[0-9]+")


def _strip_underscores(name: str) -> Tuple[str, str, str]:
    core = name.strip("_")
    if not core:
        return name, "", ""
    head = name[: len(name) - len(name.lstrip("_"))]
    tail = name[len(name.rstrip("_")) :]
    return head, core, tail


def split_words(name: str) -> List[str]:
    """
    Splits an identifier into lowercase words.

    Underscores, hyphens and case changes all separate words. Leading and
    trailing underscores are not part of any word.
    """
    _, core, _ = _strip_underscores(name)
    return [word.lower() for word in _WORD.findall(core)]


def detect_case(name: str) -> NamingCase:
    _, core, _ = _strip_underscores(name)
    if "_" in core:
        return NamingCase.snake
    if "-" in core:
        return NamingCase.kebab
    if core[:1].isupper():
        return NamingCase.pascal
    return NamingCase.camel


def convert_case(name: str, case: Union[NamingCase, str]) -> str:
    """
    Rewrites `name` in the given case. Leading and trailing underscores are
    kept, so `_user_id` becomes `_userId` in camel case.
    """
    try:
        case = NamingCase(case)
    except ValueError:
        choices = ", ".join(c.value for c in NamingCase)
        raise InputError(f"Unknown case '{case}' (choose from {choices})") from None

    head, core, tail = _strip_underscores(name)
    words = split_words(core)
    if not words:
        return name

    if case is NamingCase.snake:
        converted = "_".join(words)
    elif case is NamingCase.kebab:
        converted = "-".join(words)
    elif case is NamingCase.pascal:
        converted = "".join(word.capitalize() for word in words)
    else:
        converted = words[0] + "".join(word.capitalize() for word in words[1:])
    return f"{head}{converted}{tail}"
