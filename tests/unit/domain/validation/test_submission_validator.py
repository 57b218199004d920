import pytest

from src.domain.validation import FieldRule, SubmissionValidator, escape_markup


@pytest.fixture
def validator():
    return SubmissionValidator()


@pytest.mark.unit
class TestSubmissionValidator:
    def test_required_field_missing_or_blank(self, validator):
        rules = {"name": FieldRule(required=True, label="Name")}

        for raw in ({}, {"name": None}, {"name": ""}, {"name": "   \t"}):
            result = validator.validate(raw, rules)
            assert not result.valid
            assert result.field_errors == {"name": "Name is required"}

    def test_optional_blank_field_is_valid_and_empty(self, validator):
        result = validator.validate({"note": "  "}, {"note": FieldRule(max_length=5)})

        assert result.valid
        assert result.cleaned == {"note": ""}

    def test_values_are_trimmed(self, validator):
        result = validator.validate({"name": "  Jane  "}, {"name": FieldRule(required=True, max_length=4)})

        assert result.valid
        assert result.get("name") == "Jane"

    def test_non_string_values_are_coerced(self, validator):
        result = validator.validate({"count": 12345}, {"count": FieldRule(required=True, pattern=r"\d+")})

        assert result.cleaned == {"count": "12345"}

    def test_length_bounds_are_inclusive(self, validator):
        rules = {"code": FieldRule(min_length=2, max_length=4)}

        assert validator.validate({"code": "ab"}, rules).valid
        assert validator.validate({"code": "abcd"}, rules).valid
        assert not validator.validate({"code": "a"}, rules).valid
        assert not validator.validate({"code": "abcde"}, rules).valid

    def test_pattern_must_match_whole_value(self, validator):
        rules = {"digits": FieldRule(pattern=r"\d+")}

        assert validator.validate({"digits": "123"}, rules).valid
        assert not validator.validate({"digits": "123abc"}, rules).valid

    def test_only_first_failing_check_is_reported(self, validator):
        rules = {"name": FieldRule(min_length=5, pattern=r"[a-z]+", label="Name")}

        result = validator.validate({"name": "A1"}, rules)

        assert result.field_errors == {"name": "Name must be at least 5 characters"}

    def test_custom_messages_override_defaults(self, validator):
        rules = {"name": FieldRule(required=True, messages={"required": "Tell us who you are"})}

        assert validator.validate({}, rules).field_errors == {"name": "Tell us who you are"}

    def test_sanitize_escapes_markup(self, validator):
        rules = {"text": FieldRule(sanitize=True)}

        result = validator.validate({"text": "<b>\"hi\" & 'bye'</b>"}, rules)

        assert result.get("text") == "&lt;b&gt;&quot;hi&quot; & &#x27;bye&#x27;&lt;&#x2F;b&gt;"

    def test_errors_reported_for_every_invalid_field(self, validator):
        rules = {"a": FieldRule(required=True), "b": FieldRule(required=True), "c": FieldRule()}

        result = validator.validate({"c": "ok"}, rules)

        assert set(result.field_errors) == {"a", "b"}
        assert result.cleaned == {"c": "ok"}

    def test_unknown_fields_are_ignored(self, validator):
        result = validator.validate({"extra": "<x>"}, {"name": FieldRule()})

        assert result.valid
        assert "extra" not in result.cleaned


@pytest.mark.unit
class TestFieldRule:
    def test_rejects_inverted_bounds(self):
        with pytest.raises(ValueError):
            FieldRule(min_length=5, max_length=2)

    def test_string_pattern_is_compiled(self):
        rule = FieldRule(pattern=r"\w+")

        assert rule.pattern.fullmatch("abc")

    def test_escape_markup_leaves_plain_text_untouched(self):
        assert escape_markup("Plain text, 100% safe & sound") == "Plain text, 100% safe & sound"
