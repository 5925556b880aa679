"""Tests for placeholder resolver."""

import os

import pytest

from secretstore.core.placeholders import PlaceholderResolver
from secretstore.core.exceptions import ConfigError


class TestPlaceholderResolver:
    """Tests for PlaceholderResolver."""

    def test_resolve_single_placeholder(self, monkeypatch):
        """Should resolve ${env:NAME} pattern."""
        # Arrange
        monkeypatch.setenv("KES_AWS_ACCESS_KEY", "AKIAEXAMPLE")
        resolver = PlaceholderResolver()

        # Act
        result = resolver.resolve_value("${env:KES_AWS_ACCESS_KEY}")

        # Assert
        assert result == "AKIAEXAMPLE"

    def test_resolve_embedded_placeholder(self, monkeypatch):
        """Should resolve placeholder embedded in string."""
        # Arrange
        monkeypatch.setenv("AWS_REGION", "eu-west-1")
        resolver = PlaceholderResolver()

        # Act
        result = resolver.resolve_value("secretsmanager.${env:AWS_REGION}.amazonaws.com")

        # Assert
        assert result == "secretsmanager.eu-west-1.amazonaws.com"

    def test_resolve_with_prefix(self, monkeypatch):
        """Should prepend prefix to variable names."""
        # Arrange
        monkeypatch.setenv("APP_REGION", "us-east-2")
        resolver = PlaceholderResolver(prefix="APP_")

        # Act
        result = resolver.resolve_value("${env:REGION}")

        # Assert
        assert result == "us-east-2"

    def test_resolve_no_placeholder(self):
        """Should return string unchanged if no placeholder."""
        # Arrange
        resolver = PlaceholderResolver()

        # Act
        result = resolver.resolve_value("plain string")

        # Assert
        assert result == "plain string"

    def test_non_string_unchanged(self):
        """Should leave numbers and booleans alone."""
        # Arrange
        resolver = PlaceholderResolver()

        # Act & Assert
        assert resolver.resolve_value(3) == 3
        assert resolver.resolve_value(True) is True

    def test_missing_variable_raises(self, monkeypatch):
        """Should raise ConfigError naming the variable."""
        # Arrange
        monkeypatch.delenv("NOT_SET_ANYWHERE", raising=False)
        resolver = PlaceholderResolver()

        # Act & Assert
        with pytest.raises(ConfigError) as exc_info:
            resolver.resolve_value("${env:NOT_SET_ANYWHERE}")

        assert "NOT_SET_ANYWHERE" in str(exc_info.value)

    def test_resolve_config_dict(self, monkeypatch):
        """Should recursively resolve placeholders in dict."""
        # Arrange
        monkeypatch.setenv("KES_AWS_ACCESS_KEY", "AKIAEXAMPLE")
        monkeypatch.setenv("KES_AWS_SECRET_KEY", "wJalrEXAMPLE")
        resolver = PlaceholderResolver()

        config = {
            "aws": {
                "region": "us-east-1",
                "login": {
                    "access_key": "${env:KES_AWS_ACCESS_KEY}",
                    "secret_key": "${env:KES_AWS_SECRET_KEY}",
                },
            }
        }

        # Act
        result = resolver.resolve_config(config)

        # Assert
        assert result["aws"]["login"]["access_key"] == "AKIAEXAMPLE"
        assert result["aws"]["login"]["secret_key"] == "wJalrEXAMPLE"
        assert result["aws"]["region"] == "us-east-1"

    def test_resolve_config_list(self, monkeypatch):
        """Should resolve placeholders in lists."""
        # Arrange
        monkeypatch.setenv("KEY1", "value1")
        resolver = PlaceholderResolver()

        # Act
        result = resolver.resolve_config(["${env:KEY1}", "plain"])

        # Assert
        assert result == ["value1", "plain"]

    def test_dotenv_file_loaded(self, tmp_path, monkeypatch):
        """Should load variables from a .env file."""
        # Arrange
        monkeypatch.setattr(os, "environ", dict(os.environ))
        os.environ.pop("FROM_DOTENV", None)
        dotenv = tmp_path / ".env"
        dotenv.write_text("FROM_DOTENV=loaded\n")

        # Act
        resolver = PlaceholderResolver(dotenv_path=dotenv)
        result = resolver.resolve_value("${env:FROM_DOTENV}")

        # Assert
        assert result == "loaded"

    def test_dotenv_does_not_override(self, tmp_path, monkeypatch):
        """Existing environment variables win over the .env file."""
        # Arrange
        monkeypatch.setenv("SHADOWED", "from-env")
        dotenv = tmp_path / ".env"
        dotenv.write_text("SHADOWED=from-file\n")

        # Act
        resolver = PlaceholderResolver(dotenv_path=dotenv)

        # Assert
        assert resolver.resolve_value("${env:SHADOWED}") == "from-env"
