"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: utils/validation.py – проверка пользовательского ввода.

Назначение модуля:
- Очистка текста от управляющих и невидимых символов, ограничение «zalgo»-последовательностей.
- Проверка имени пользователя, email, пароля, заголовка и текста поста, комментария.
- Проверка выбранных категорий поста.

Все длины считаются в логических символах (кодовых точках Unicode), а не в байтах.
Каждая функция проверки возвращает пару (ok, reason); при успехе reason пустой.
Модуль не выполняет ввод-вывод.
"""

import re
import unicodedata

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}")
USERNAME_RE = re.compile(r"[a-zA-Z0-9_\-]+")
CATEGORY_ID_RE = re.compile(r"[+-]?[0-9]+")

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 255
CONTENT_MIN_LENGTH = 10
CONTENT_MAX_LENGTH = 10_000
COMMENT_MIN_LENGTH = 10
COMMENT_MAX_LENGTH = 5_000
MAX_CATEGORIES = 5
# Идентификаторы хранятся в знаковом 64-битном INTEGER
MAX_ID = 2**63 - 1

MAX_COMBINING_PER_BASE = 2
MAX_CONSECUTIVE_COMBINING = 5
MAX_SUSPICIOUS_LETTERS = 10
SUSPICIOUS_LETTERS = ("\u00ed", "\u00ec")  # í, ì
ZERO_WIDTH_CHARS = ("\u200b", "\u200c", "\u200d")

# Управляющие символы C0 (кроме TAB, LF, CR), DEL и C1
_CONTROL_RANGES = (
    (0x0000, 0x0008),
    (0x000B, 0x000C),
    (0x000E, 0x001F),
    (0x007F, 0x009F),
)
# Невидимые символы форматирования, которые удаляются без отказа
_INVISIBLE_RANGES = (
    (0x2060, 0x2064),
    (0xFEFF, 0xFEFF),
)

ValidationResult = tuple[bool, str]

_OK: ValidationResult = (True, "")


def logical_length(text: str) -> int:
    """Длина строки в кодовых точках Unicode."""
    return len(text)


def _in_ranges(ch: str, ranges) -> bool:
    code = ord(ch)
    return any(start <= code <= end for start, end in ranges)


def _is_combining(ch: str) -> bool:
    return unicodedata.category(ch) in ("Mn", "Mc", "Me")


def clean_text(raw: str | None) -> str:
    """Удаляет опасные символы, не обрезая пробелы.

    Управляющие символы и невидимое форматирование удаляются, у каждого базового
    символа остаётся не более двух комбинируемых знаков. Символы нулевой ширины
    сохраняются: их отклоняет check_text_safety().
    """
    if not raw:
        return ""

    cleaned = []
    combining_count = 0
    for ch in raw:
        if _in_ranges(ch, _CONTROL_RANGES):
            continue

        if _is_combining(ch):
            combining_count += 1
            if combining_count <= MAX_COMBINING_PER_BASE:
                cleaned.append(ch)
            continue

        combining_count = 0

        if _in_ranges(ch, _INVISIBLE_RANGES):
            continue

        cleaned.append(ch)

    return "".join(cleaned)


def check_text_safety(text: str) -> ValidationResult:
    """Отклоняет текст с признаками злоупотребления Unicode."""
    if not text:
        return _OK

    consecutive = 0
    for ch in text:
        if _is_combining(ch):
            consecutive += 1
            if consecutive > MAX_CONSECUTIVE_COMBINING:
                return False, "Text contains excessive special characters that may break display"
        else:
            consecutive = 0

    if any(text.count(letter) > MAX_SUSPICIOUS_LETTERS for letter in SUSPICIOUS_LETTERS):
        return False, "Text contains suspicious character patterns"

    if any(ch in text for ch in ZERO_WIDTH_CHARS):
        return False, "Text contains invisible characters"

    return _OK


def validate_username(username: str | None) -> ValidationResult:
    cleaned = clean_text(username)

    if " " in cleaned:
        return False, "Username cannot contain spaces"

    ok, reason = check_text_safety(cleaned)
    if not ok:
        return False, reason

    length = logical_length(cleaned)
    if length == 0:
        return False, "Username is required"
    if length < USERNAME_MIN_LENGTH:
        return False, f"Username must be at least {USERNAME_MIN_LENGTH} characters"
    if length > USERNAME_MAX_LENGTH:
        return False, f"Username must be no more than {USERNAME_MAX_LENGTH} characters"

    if not USERNAME_RE.fullmatch(cleaned):
        return False, "Username can only contain letters, numbers, underscores, and hyphens"

    return _OK


def validate_email(email: str | None) -> ValidationResult:
    email = email or ""

    if not email:
        return False, "Email is required"

    if " " in email:
        return False, "Email cannot contain spaces"

    if not EMAIL_RE.fullmatch(email):
        return False, "Invalid email format (must include domain like @example.com)"

    if logical_length(email) > EMAIL_MAX_LENGTH:
        return False, f"Email must be no more than {EMAIL_MAX_LENGTH} characters"

    return _OK


def validate_password(password: str | None) -> ValidationResult:
    """Политика сложного пароля.

    8–128 символов, без пробелов, хотя бы одна заглавная и одна
    строчная буква, цифра и символ, не являющийся буквой, цифрой или пробелом.
    """
    password = password or ""
    length = logical_length(password)

    if length < PASSWORD_MIN_LENGTH:
        return False, f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
    if length > PASSWORD_MAX_LENGTH:
        return False, f"Password must be no more than {PASSWORD_MAX_LENGTH} characters"
    if " " in password:
        return False, "Password cannot contain spaces"
    if not any(ch.isupper() for ch in password):
        return False, "Password must contain at least one uppercase letter"
    if not any(ch.islower() for ch in password):
        return False, "Password must contain at least one lowercase letter"
    if not any(ch.isdecimal() for ch in password):
        return False, "Password must contain at least one number"
    if not any(not ch.isalpha() and not ch.isdecimal() and not ch.isspace() for ch in password):
        return False, "Password must contain at least one special character (!@#$%^&*)"

    return _OK


def normalize_title(raw: str | None) -> str:
    """Заголовок – одна строка: переводы строк и табуляции становятся пробелами."""
    cleaned = clean_text(raw)
    cleaned = re.sub(r"[\r\n\t]", " ", cleaned)
    return re.sub(r" {2,}", " ", cleaned)


def normalize_content(raw: str | None) -> str:
    """Приводит переводы строк к LF и заменяет табуляцию четырьмя пробелами."""
    cleaned = clean_text(raw)
    cleaned = cleaned.replace("\r\n", "\n").replace("\r", "\n")
    return cleaned.replace("\t", "    ")


def _validate_text_field(
    normalized: str,
    label: str,
    required_message: str,
    min_length: int,
    max_length: int,
) -> ValidationResult:
    if not normalized.strip():
        return False, required_message

    if normalized != normalized.strip():
        return False, f"{label} cannot have spaces at the beginning or end"

    ok, reason = check_text_safety(normalized)
    if not ok:
        return False, reason

    length = logical_length(normalized)
    if length < min_length:
        return False, f"{label} must be at least {min_length} characters"
    if length > max_length:
        return False, f"{label} must be no more than {max_length:,} characters"

    return _OK


def validate_post_title(title: str | None) -> ValidationResult:
    return _validate_text_field(
        normalize_title(title),
        label="Title",
        required_message="Title is required",
        min_length=TITLE_MIN_LENGTH,
        max_length=TITLE_MAX_LENGTH,
    )


def validate_post_content(content: str | None) -> ValidationResult:
    return _validate_text_field(
        normalize_content(content),
        label="Content",
        required_message="Content is required",
        min_length=CONTENT_MIN_LENGTH,
        max_length=CONTENT_MAX_LENGTH,
    )


def validate_comment_content(content: str | None) -> ValidationResult:
    return _validate_text_field(
        normalize_content(content),
        label="Comment",
        required_message="Comment content is required",
        min_length=COMMENT_MIN_LENGTH,
        max_length=COMMENT_MAX_LENGTH,
    )


def validate_category_selection(raw_values: list[str] | None) -> ValidationResult:
    """Проверяет значения поля `category_id[]` из формы создания поста."""
    raw_values = list(raw_values or [])

    if not raw_values:
        return False, "At least one category is required"
    if len(raw_values) > MAX_CATEGORIES:
        return False, f"You can select up to {MAX_CATEGORIES} categories"

    for raw in raw_values:
        if not raw.strip():
            return False, "Invalid category selection: empty category ID"
        if not CATEGORY_ID_RE.fullmatch(raw) or abs(int(raw)) > MAX_ID:
            return False, f"Invalid category ID format: '{raw}' must be a number"
        if int(raw) <= 0:
            return False, f"Invalid category ID: {raw} (must be positive)"

    return _OK


def parse_category_ids(raw_values: list[str]) -> list[int]:
    """Преобразует проверенные значения в уникальные ID в порядке первого появления."""
    ids = []
    for raw in raw_values:
        category_id = int(raw)
        if category_id not in ids:
            ids.append(category_id)
    return ids
