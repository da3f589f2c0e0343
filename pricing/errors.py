"""Таксономия ошибок ценообразования: все чистые функции либо возвращают результат, либо бросают одну из них."""

from __future__ import annotations


class PricingError(Exception):
    """Базовый класс для всех ошибок ядра цен."""

    def __init__(self, error_code: str, category: str, explanation: str):
        self.error_code = error_code
        self.category = category
        self.explanation = explanation
        super().__init__(f"[{self.category}:{self.error_code}] {self.explanation}")

    def as_dict(self) -> dict:
        return {
            "error": self.explanation,
            "code": self.error_code,
            "category": self.category,
        }


class ValidationError(PricingError):
    """Некорректный вход: процент вне [0, 100], количество <= 0, чужой вариант."""

    def __init__(self, explanation: str, error_code: str = "INVALID_INPUT"):
        super().__init__(error_code, "VALIDATION", explanation)


class NotFoundError(PricingError):
    """Товар или вариант, на который ссылаются, отсутствует."""

    def __init__(self, explanation: str, error_code: str = "NOT_FOUND"):
        super().__init__(error_code, "LOOKUP", explanation)
