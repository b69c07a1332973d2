from string import Formatter
from typing import Dict, Iterable, List, Sequence, Tuple

from agnostic_chat.schemas.messages import Message, normalize_role


class TemplateError(ValueError):
    pass


_formatter = Formatter()


def _placeholders(text: str) -> List[str]:
    names: List[str] = []
    try:
        parsed = list(_formatter.parse(text))
    except ValueError as e:  # unbalanced braces
        raise TemplateError(f"invalid template text {text!r}: {e}") from e
    for _literal, field, _spec, _conv in parsed:
        if field is None:
            continue
        if not field.isidentifier():
            # rejects positional "{}" and "{a.b}" / "{a[0]}" lookups
            raise TemplateError(f"placeholder {{{field}}} must be a plain variable name")
        if field not in names:
            names.append(field)
    return names


class ChatPromptTemplate:
    """
    Ordered (role, text) pairs with {name} placeholders.
    Formatting is pure: the same variables always give the same messages.
    Use {{ and }} for literal braces.
    """

    def __init__(self, messages: Sequence[Tuple[str, str]]) -> None:
        pairs: List[Tuple[str, str]] = []
        names: List[str] = []
        for role, text in messages:
            try:
                role = normalize_role(role)
            except ValueError as e:
                raise TemplateError(str(e)) from e
            for name in _placeholders(text):
                if name not in names:
                    names.append(name)
            pairs.append((role, text))
        self._messages = tuple(pairs)
        self._input_variables = tuple(names)

    @classmethod
    def from_messages(cls, messages: Iterable[Tuple[str, str]]) -> "ChatPromptTemplate":
        return cls(list(messages))

    @property
    def input_variables(self) -> List[str]:
        return list(self._input_variables)

    @property
    def messages(self) -> List[Tuple[str, str]]:
        return list(self._messages)

    def format_messages(self, **variables: object) -> List[Message]:
        missing = [name for name in self._input_variables if name not in variables]
        if missing:
            raise TemplateError(f"missing template variables: {', '.join(missing)}")
        values: Dict[str, object] = {name: variables[name] for name in self._input_variables}
        try:
            return [Message(role=role, content=text.format(**values)) for role, text in self._messages]
        except (KeyError, IndexError) as e:
            # placeholders nested inside a format spec, e.g. "{x:{width}}"
            raise TemplateError(f"unresolved placeholder in template: {e}") from e

    def __repr__(self) -> str:
        return f"ChatPromptTemplate(input_variables={list(self._input_variables)!r})"
