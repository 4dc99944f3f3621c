"""
Ошибки кодека Хаффмана.
"""


class HuffmanError(ValueError):
    """Базовая ошибка сжатия/распаковки."""


class EmptyInputError(HuffmanError):
    """Нет ни одного символа: дерево построить нельзя."""


class MalformedTreeError(HuffmanError):
    """Заголовок с деревом повреждён или не завершён маркером конца."""


class TruncatedPayloadError(HuffmanError):
    """Поток кодов обрывается или не согласуется с деревом."""
