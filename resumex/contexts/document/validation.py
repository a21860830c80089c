"""
Field Validation

Field-level validation for editor forms. Rules are evaluated in a fixed order
(required, minLength, maxLength, email, phone, url, pattern, custom) and the
first failing rule's message is returned. Validation errors are values, never
exceptions.

Examples:
    >>> validate_field("", ValidationRule(required=True), "姓名")
    '姓名不能为空'
    >>> validate_field("abc@", ValidationRule(email=True), "邮箱")
    '请输入有效的邮箱地址'
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Pattern, Union

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+\Z")
PHONE_PATTERN = re.compile(r"^1[3-9]\d{9}\Z", re.ASCII)
URL_PATTERN = re.compile(r"^(https?://)?([\w-]+\.)+[\w-]+(/[\w\-./?%&=]*)?\Z", re.ASCII)

MESSAGES: Dict[str, Dict[str, str]] = {
    "zh": {
        "required": "{label}不能为空",
        "min_length": "{label}至少需要{n}个字符",
        "max_length": "{label}不能超过{n}个字符",
        "email": "请输入有效的邮箱地址",
        "phone": "请输入有效的手机号码",
        "url": "请输入有效的网址",
        "pattern": "{label}格式不正确",
    },
    "en": {
        "required": "{label} is required",
        "min_length": "{label} must be at least {n} characters",
        "max_length": "{label} must be at most {n} characters",
        "email": "Please enter a valid email address",
        "phone": "Please enter a valid mobile number",
        "url": "Please enter a valid URL",
        "pattern": "{label} has an invalid format",
    },
}


@dataclass(frozen=True)
class ValidationRule:
    """
    Configuration of the checks applied to one field.

    Attributes:
        required: Value must be non-empty after trimming
        min_length: Minimum length (checked only for non-empty values)
        max_length: Maximum length (checked only for non-empty values)
        pattern: Custom regular expression the value must match
        email: Value must look like an email address
        phone: Value must be an 11-digit mainland mobile number
        url: Value must look like a web address
        custom: Arbitrary check returning a message or None; always called last
    """

    required: bool = False
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[Union[str, Pattern]] = None
    email: bool = False
    phone: bool = False
    url: bool = False
    custom: Optional[Callable[[str], Optional[str]]] = None


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass
class FormValidationResult:
    """Outcome of validating every configured field of a form."""

    is_valid: bool
    errors: Dict[str, str] = field(default_factory=dict)
    error_list: List[FieldError] = field(default_factory=list)


def validate_field(
    value: Optional[str], rule: ValidationRule, label: str, language: str = "zh"
) -> Optional[str]:
    """
    Validate a single value against a rule.

    Args:
        value: Field value (None is treated as empty)
        rule: Checks to apply
        label: Human-facing field name used in messages (e.g., "姓名")
        language: Message language, "zh" or "en"

    Returns:
        Message of the first failing check, or None if the value passes
    """
    messages = MESSAGES.get(language, MESSAGES["zh"])
    value = value or ""

    if rule.required and value.strip() == "":
        return messages["required"].format(label=label)

    if value and rule.min_length and len(value) < rule.min_length:
        return messages["min_length"].format(label=label, n=rule.min_length)

    if value and rule.max_length and len(value) > rule.max_length:
        return messages["max_length"].format(label=label, n=rule.max_length)

    if value and rule.email and not EMAIL_PATTERN.search(value):
        return messages["email"]

    if value and rule.phone and not PHONE_PATTERN.search(value):
        return messages["phone"]

    if value and rule.url and not URL_PATTERN.search(value):
        return messages["url"]

    if value and rule.pattern is not None and not re.search(rule.pattern, value):
        return messages["pattern"].format(label=label)

    if rule.custom is not None:
        return rule.custom(value)

    return None


class FormValidator:
    """
    Whole-form validator tracking values, touched flags and errors.

    Errors are only reported for touched fields; ``validate_all`` marks every
    configured field touched so a later render shows all errors at once.

    Example:
        validator = FormValidator(
            {"name": "", "email": "a@b.co"},
            rules={"name": ValidationRule(required=True), "email": ValidationRule(email=True)},
            labels={"name": "姓名", "email": "邮箱"},
        )
        result = validator.validate_all()
        result.errors  # {"name": "姓名不能为空"}
    """

    def __init__(
        self,
        initial_values: Mapping[str, str],
        rules: Mapping[str, ValidationRule],
        labels: Optional[Mapping[str, str]] = None,
        language: str = "zh",
    ):
        self.initial_values = dict(initial_values)
        self.rules = dict(rules)
        self.labels = dict(labels or {})
        self.language = language

        self.values: Dict[str, str] = dict(initial_values)
        self.touched: Dict[str, bool] = {}
        self.errors: Dict[str, str] = {}

    def _validate_single(self, name: str, value: Optional[str]) -> Optional[str]:
        rule = self.rules.get(name)
        if rule is None:
            return None
        return validate_field(value, rule, self.labels.get(name) or name, self.language)

    def _store_error(self, name: str, error: Optional[str]) -> None:
        if error:
            self.errors[name] = error
        else:
            self.errors.pop(name, None)

    def set_value(self, name: str, value: str) -> None:
        """Update a value; touched fields are re-validated immediately."""
        self.values[name] = value
        if self.touched.get(name):
            self._store_error(name, self._validate_single(name, value))

    def touch(self, name: str) -> None:
        """Mark a field touched (e.g., on blur) and validate it."""
        self.touched[name] = True
        self._store_error(name, self._validate_single(name, self.values.get(name)))

    def validate_all(self) -> FormValidationResult:
        errors: Dict[str, str] = {}
        error_list: List[FieldError] = []

        for name in self.rules:
            error = self._validate_single(name, self.values.get(name))
            if error:
                errors[name] = error
                error_list.append(FieldError(field=name, message=error))

        self.errors = dict(errors)
        self.touched = {name: True for name in self.rules}

        return FormValidationResult(is_valid=not error_list, errors=errors, error_list=error_list)

    def field_error(self, name: str) -> Optional[str]:
        """Error to display for a field (None until the field is touched)."""
        if not self.touched.get(name):
            return None
        return self.errors.get(name)

    @property
    def has_errors(self) -> bool:
        return any(self.errors.values())

    def reset(self) -> None:
        self.values = dict(self.initial_values)
        self.touched = {}
        self.errors = {}
