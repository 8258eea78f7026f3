"""Tests for the message catalog."""

from response_builder.services.localization import Translator, reset_locale, set_locale


class TestTranslator:
    def setup_method(self):
        self.translator = Translator(
            {
                "en": {"app.hello": "Hello {name}", "app.broken": "Oops {"},
                "de": {"app.hello": "Hallo {name}"},
            },
        )

    def test_builtin_messages(self):
        assert self.translator.translate("response_builder.ok") == "OK"
        assert self.translator.translate(
            "response_builder.no_error_message", {"api_code": 123},
        ) == "Error #123"

    def test_placeholders(self):
        assert self.translator.translate("app.hello", {"name": "Ada"}) == "Hello Ada"

    def test_missing_placeholder_is_kept(self):
        assert self.translator.translate("app.hello") == "Hello {name}"

    def test_missing_key_returns_key(self):
        assert self.translator.translate("app.unknown") == "app.unknown"

    def test_malformed_template_returned_raw(self):
        assert self.translator.translate("app.broken") == "Oops {"

    def test_attribute_placeholder_without_match_is_kept(self):
        translator = Translator({"en": {"app.hi": "Hi {user.name}"}})
        assert translator.translate("app.hi") == "Hi {user.name}"
        assert translator.translate("app.hi", {"user": "plain"}) == "Hi {user.name}"

    def test_index_placeholder_without_match_is_kept(self):
        translator = Translator({"en": {"app.hi": "Hi {user[name]}"}})
        assert translator.translate("app.hi", {"user": {}}) == "Hi {user[name]}"
        assert translator.translate("app.hi", {"user": 5}) == "Hi {user[name]}"
        assert translator.translate("app.hi", {"user": {"name": "Ada"}}) == "Hi Ada"

    def test_positional_placeholder_is_kept(self):
        translator = Translator({"en": {"app.hi": "Hi {0}"}})
        assert translator.translate("app.hi") == "Hi {0}"

    def test_mismatched_format_spec_returns_template(self):
        translator = Translator({"en": {"app.count": "{count:d} items"}})
        assert translator.translate("app.count", {"count": "many"}) == "{count:d} items"

    def test_explicit_locale(self):
        assert self.translator.translate("app.hello", {"name": "Ada"}, locale="de") == "Hallo Ada"

    def test_falls_back_to_default_locale(self):
        assert self.translator.translate("response_builder.ok", locale="de") == "OK"

    def test_has(self):
        assert self.translator.has("app.hello", "de")
        assert not self.translator.has("response_builder.ok", "de")

    def test_request_scoped_locale(self):
        assert self.translator.locale == "en"
        token = set_locale("de")
        try:
            assert self.translator.locale == "de"
            assert self.translator.translate("app.hello", {"name": "Bo"}) == "Hallo Bo"
        finally:
            reset_locale(token)
        assert self.translator.locale == "en"

    def test_custom_default_locale(self):
        translator = Translator({"de": {"app.hello": "Hallo"}}, default_locale="de")
        assert translator.locale == "de"
        assert translator.default_locale == "de"
