"""Unit tests for field and form validation."""

import re

import pytest

from resumex.contexts.document.validation import (
    FieldError,
    FormValidator,
    ValidationRule,
    validate_field,
)


@pytest.mark.unit
def test_required_message():
    """Test empty required field yields the required message."""
    assert validate_field("", ValidationRule(required=True), "姓名") == "姓名不能为空"


@pytest.mark.unit
def test_required_trims_whitespace():
    """Test a whitespace-only value counts as empty."""
    assert validate_field("   ", ValidationRule(required=True), "姓名") == "姓名不能为空"


@pytest.mark.unit
def test_email_message():
    """Test malformed email yields the email message."""
    assert validate_field("abc@", ValidationRule(email=True), "邮箱") == "请输入有效的邮箱地址"


@pytest.mark.unit
def test_passing_value_returns_none():
    """Test a value satisfying every rule passes."""
    rule = ValidationRule(required=True, min_length=3, max_length=40, email=True)
    assert validate_field("liming@example.com", rule, "邮箱") is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [
        ("13800000000", None),
        ("138 0000 0000", "请输入有效的手机号码"),
        ("12800000000", "请输入有效的手机号码"),
        ("1380000000", "请输入有效的手机号码"),
    ],
)
def test_phone(value, expected):
    """Test 11-digit mainland mobile number shape."""
    assert validate_field(value, ValidationRule(phone=True), "手机") == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [
        ("github.com/liming", None),
        ("https://example.com/a?b=1", None),
        ("not a url", "请输入有效的网址"),
    ],
)
def test_url(value, expected):
    """Test web address shape."""
    assert validate_field(value, ValidationRule(url=True), "网址") == expected


@pytest.mark.unit
def test_length_limits():
    """Test min and max length messages."""
    rule = ValidationRule(min_length=2, max_length=4)
    assert validate_field("a", rule, "标题") == "标题至少需要2个字符"
    assert validate_field("abcde", rule, "标题") == "标题不能超过4个字符"
    assert validate_field("abc", rule, "标题") is None


@pytest.mark.unit
def test_optional_empty_value_skips_format_checks():
    """Test format rules are not applied to an empty optional value."""
    rule = ValidationRule(min_length=3, email=True, phone=True, url=True, pattern=r"^\d+$")
    assert validate_field("", rule, "字段") is None
    assert validate_field(None, rule, "字段") is None


@pytest.mark.unit
def test_first_failing_rule_wins():
    """Test evaluation order: required, length, email, phone, url, pattern, custom."""
    assert validate_field("", ValidationRule(required=True, email=True), "邮箱") == "邮箱不能为空"
    assert validate_field("a@", ValidationRule(min_length=5, email=True), "邮箱") == "邮箱至少需要5个字符"
    assert validate_field("a@b", ValidationRule(email=True, phone=True), "x") == "请输入有效的邮箱地址"
    assert (
        validate_field("abc", ValidationRule(pattern=r"^\d+$", custom=lambda v: "custom"), "编号")
        == "编号格式不正确"
    )


@pytest.mark.unit
def test_pattern_accepts_compiled_regex():
    """Test pattern can be a compiled regular expression."""
    rule = ValidationRule(pattern=re.compile(r"^\d{4}\.\d{2}$"))
    assert validate_field("2021.03", rule, "日期") is None
    assert validate_field("2021-03", rule, "日期") == "日期格式不正确"


@pytest.mark.unit
def test_custom_rule_runs_last():
    """Test custom check result is returned when other rules pass."""
    rule = ValidationRule(custom=lambda value: None if value.endswith("!") else "必须以!结尾")
    assert validate_field("hi", rule, "x") == "必须以!结尾"
    assert validate_field("hi!", rule, "x") is None


@pytest.mark.unit
def test_english_messages():
    """Test messages follow the language argument."""
    assert validate_field("", ValidationRule(required=True), "Name", language="en") == "Name is required"


@pytest.mark.unit
def test_validate_all_collects_errors_and_touches_fields():
    """Test whole-form validation returns mapping, ordered list and touches every field."""
    validator = FormValidator(
        {"name": "", "email": "bad", "phone": "13800000000"},
        rules={
            "name": ValidationRule(required=True),
            "email": ValidationRule(email=True),
            "phone": ValidationRule(phone=True),
        },
        labels={"name": "姓名", "email": "邮箱", "phone": "手机"},
    )
    assert validator.field_error("name") is None

    result = validator.validate_all()

    assert not result.is_valid
    assert result.errors == {"name": "姓名不能为空", "email": "请输入有效的邮箱地址"}
    assert result.error_list == [
        FieldError(field="name", message="姓名不能为空"),
        FieldError(field="email", message="请输入有效的邮箱地址"),
    ]
    assert validator.touched == {"name": True, "email": True, "phone": True}
    assert validator.field_error("name") == "姓名不能为空"
    assert validator.has_errors


@pytest.mark.unit
def test_touched_field_revalidates_on_change():
    """Test set_value re-validates a touched field and clears fixed errors."""
    validator = FormValidator({"name": ""}, rules={"name": ValidationRule(required=True)}, labels={"name": "姓名"})

    validator.touch("name")
    assert validator.field_error("name") == "姓名不能为空"

    validator.set_value("name", "李明")
    assert validator.field_error("name") is None
    assert not validator.has_errors


@pytest.mark.unit
def test_untouched_field_not_validated_on_change():
    """Test set_value on an untouched field records no error."""
    validator = FormValidator({"name": "x"}, rules={"name": ValidationRule(required=True)})

    validator.set_value("name", "")

    assert validator.errors == {}


@pytest.mark.unit
def test_reset():
    """Test reset restores initial values and clears state."""
    validator = FormValidator({"name": "李明"}, rules={"name": ValidationRule(required=True)})
    validator.set_value("name", "")
    validator.validate_all()

    validator.reset()

    assert validator.values == {"name": "李明"}
    assert validator.touched == {}
    assert validator.errors == {}
