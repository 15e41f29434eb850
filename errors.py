"""
Модуль errors.py - типи помилок рушія попарних переваг

Усі помилки є нащадками ValueError, тому код, що перехоплює ValueError
(як решта модулів), продовжує працювати.
"""


class PreferenceEngineError(ValueError):
    """Базова помилка рушія попарних переваг"""


class InvalidUniverse(PreferenceEngineError):
    """Множина елементів порожня або містить дублікати"""


class EmptyUniverse(InvalidUniverse):
    """Немає елементів для порівняння"""


class MalformedResponse(PreferenceEngineError):
    """Обраний елемент не належить до своєї пари"""


class MissingSessionData(PreferenceEngineError):
    """
    Відсутні дані для завершального етапу сесії.

    Args:
        missing: Назви відсутніх або порожніх входів
    """

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(
            f"Відсутні дані сесії: {', '.join(self.missing)}"
        )
