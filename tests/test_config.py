"""Tests for parser configuration."""

import pytest

from pipeql.config import DEFAULT_MAX_DEPTH, ParserConfig


class TestParserConfig:
    def test_defaults(self):
        assert ParserConfig().max_depth == DEFAULT_MAX_DEPTH

    def test_rejects_non_positive_depth(self):
        with pytest.raises(ValueError):
            ParserConfig(max_depth=0)

    def test_from_env_default(self, monkeypatch):
        monkeypatch.delenv("PIPEQL_MAX_DEPTH", raising=False)
        assert ParserConfig.from_env() == ParserConfig()

    def test_from_env_override(self, monkeypatch):
        monkeypatch.setenv("PIPEQL_MAX_DEPTH", "12")
        assert ParserConfig.from_env().max_depth == 12

    def test_from_env_empty_value_uses_default(self, monkeypatch):
        monkeypatch.setenv("PIPEQL_MAX_DEPTH", "")
        assert ParserConfig.from_env().max_depth == DEFAULT_MAX_DEPTH

    @pytest.mark.parametrize("raw", ["deep", "1.5", "0", "-3"])
    def test_from_env_invalid(self, monkeypatch, raw):
        monkeypatch.setenv("PIPEQL_MAX_DEPTH", raw)
        with pytest.raises(ValueError):
            ParserConfig.from_env()
