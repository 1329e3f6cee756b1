import enum
from datetime import date
from typing import Optional

MAX_WEEKDAYS = 2


class Weekday(str, enum.Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @property
    def display_name(self) -> str:
        return DAYS_OF_WEEK[self.value]


# Названия дней для отображения
DAYS_OF_WEEK = {
    "MONDAY": "Понедельник",
    "TUESDAY": "Вторник",
    "WEDNESDAY": "Среда",
    "THURSDAY": "Четверг",
    "FRIDAY": "Пятница",
    "SATURDAY": "Суббота",
    "SUNDAY": "Воскресенье",
}


class ValidationError(ValueError):
    """Ошибка проверки входных данных (HTTP 400)"""


class InvalidWeekdayCount(ValidationError):
    pass


class InvalidWeekdayToken(ValidationError):
    pass


class InvalidTimeRange(ValidationError):
    pass


def validate_weekdays(weekdays: Optional[str]) -> Optional[ValidationError]:
    """
    Проверяет список дней недели группы.

    Args:
        weekdays: дни через запятую, например "MONDAY,THURSDAY"

    Returns:
        Optional[ValidationError]: ошибка или None, если список корректен
    """
    if not weekdays:
        return None

    days = [day.strip() for day in weekdays.split(",")]

    if len(days) > MAX_WEEKDAYS:
        return InvalidWeekdayCount("Можно указать не более двух дней.")

    for day in days:
        if day not in DAYS_OF_WEEK:
            return InvalidWeekdayToken(
                f"Неверный день недели: {day}. Допустимые: {', '.join(DAYS_OF_WEEK)}."
            )

    return None


def validate_time_range(start_time, end_time) -> Optional[ValidationError]:
    """Начало занятия должно быть строго раньше конца."""
    if start_time >= end_time:
        return InvalidTimeRange("Начало события должно быть раньше конца.")
    return None


def calculate_years(date_of_birth: date, today: Optional[date] = None) -> int:
    """Полных лет на дату today (по умолчанию сегодня)."""
    today = today or date.today()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def pluralize_years(age: int) -> str:
    if 11 <= age % 100 <= 19:
        return f"{age} лет"

    last_digit = age % 10
    if last_digit == 1:
        return f"{age} год"
    elif 2 <= last_digit <= 4:
        return f"{age} года"
    return f"{age} лет"


def calculate_age(date_of_birth: date, today: Optional[date] = None) -> str:
    """Возраст в виде строки, например "20 лет" или "21 год"."""
    return pluralize_years(calculate_years(date_of_birth, today))
