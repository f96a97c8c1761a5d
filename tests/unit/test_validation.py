"""
Unit tests for presence validation.

Validation never raises; failures are collected on Model.errors and read
back through is_valid(), error_for() and the valid/invalid properties.
"""

import pytest

from parsistence.models import Model
from parsistence.settings import ValidationSettings


class Note(Model):
    fields = ["title", "body"]
    belongs_to = ["author"]
    validates_presence_of = ["title"]


class Article(Model):
    fields = ["headline", "summary", "views"]
    validates_presence_of = {"headline": "Every article needs a headline", "summary": None}


class TestPresenceValidation:
    """Tests for validate() and is_valid()."""

    def test_empty_string_fails(self):
        """Scenario: blank title is invalid with the default message."""
        note = Note(title="")
        assert note.is_valid() is False
        assert note.error_for("title") == "title can't be blank"

    def test_missing_value_fails(self):
        note = Note()
        assert not note.is_valid()
        assert "title" in note.errors

    def test_fixing_value_passes(self):
        """Scenario: setting the title makes the note valid again."""
        note = Note(title="")
        assert not note.is_valid()
        note.title = "Hi"
        assert note.is_valid() is True
        assert note.errors == {}

    def test_custom_message(self):
        article = Article(summary="short")
        article.validate()
        assert article.errors == {"headline": "Every article needs a headline"}

    def test_empty_custom_message_kept(self):
        """An explicitly declared empty message is reported as-is."""

        class Quiet(Model):
            fields = ["title"]

        Quiet.declare_presence("title", "")
        assert Quiet.schema().presence_messages == {"title": ""}
        quiet = Quiet()
        assert not quiet.is_valid()
        assert quiet.error_for("title") == ""

    def test_default_and_custom_messages_together(self):
        article = Article()
        errors = article.validate()
        assert errors == {
            "headline": "Every article needs a headline",
            "summary": "summary can't be blank",
        }

    @pytest.mark.parametrize("value", [0, False, [], "  "])
    def test_only_none_and_empty_string_are_blank(self, value):
        """Falsy values other than None and "" satisfy presence."""
        note = Note(title=value)
        assert note.is_valid()

    def test_fields_without_rules_ignored(self):
        note = Note(title="Hi")
        assert note.is_valid()
        assert note.error_for("body") is False

    def test_errors_reset_each_pass(self):
        """errors reflects only the latest validate() call."""
        article = Article()
        article.validate()
        assert len(article.errors) == 2
        article.headline = "News"
        article.validate()
        assert article.errors == {"summary": "summary can't be blank"}

    def test_valid_reads_without_revalidating(self):
        """valid/invalid report the last result, not the current state."""
        note = Note()
        assert note.valid  # never validated
        note.validate()
        assert note.invalid
        note.title = "Hi"
        assert note.invalid
        assert note.is_valid()
        assert note.valid

    def test_undeclared_presence_rule_not_checked(self):
        """Rules only apply to declared fields in the attribute snapshot."""

        class Loose(Model):
            fields = ["name"]
            validates_presence_of = ["ghost"]

        assert Loose().is_valid()


class TestBlankMessageSetting:
    """Tests for the configurable default message."""

    def test_template(self):
        assert ValidationSettings().message_for("title") == "title can't be blank"

    def test_custom_template(self, monkeypatch):
        from parsistence.models import model as model_module

        custom = ValidationSettings(blank_message="{field} is required")
        monkeypatch.setattr(model_module.settings, "validation", custom)
        note = Note()
        note.validate()
        assert note.error_for("title") == "title is required"


class TestSettings:
    """Tests for the settings singleton shape."""

    def test_sections(self):
        from parsistence.settings import Settings

        assert set(Settings.model_fields) == {"validation", "store"}
