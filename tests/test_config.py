"""
Tests for MaskConfig validation and environment loading.
"""

import dataclasses
import os

import pytest

from logmask import ConfigurationError, MaskConfig, MismatchPolicy, SecurityMarkers, get_marker
from logmask.markers import Marker, MarkerRegistry


class TestMaskConfig:
    """Test suite for construction-time validation."""

    def test_defaults(self):
        config = MaskConfig()
        assert config.trigger is SecurityMarkers.CONFIDENTIAL
        assert config.mask_token == "*****"
        assert config.fault_text == "[MASKING FAULT]"
        assert config.mismatch_policy is MismatchPolicy.MASK_ALL

    def test_immutable(self):
        config = MaskConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.mask_token = "xxx"

    def test_trigger_by_name(self):
        """A marker name resolves through the default registry."""
        assert MaskConfig(trigger="SECRET").trigger is SecurityMarkers.SECRET

    def test_policy_by_value(self):
        config = MaskConfig(mismatch_policy="Mirror_Rendering")
        assert config.mismatch_policy is MismatchPolicy.MIRROR_RENDERING

    @pytest.mark.parametrize("token", ["", "   ", None, 5])
    def test_invalid_mask_token(self, token):
        with pytest.raises(ConfigurationError):
            MaskConfig(mask_token=token)

    def test_invalid_fault_text(self):
        with pytest.raises(ConfigurationError):
            MaskConfig(fault_text="")

    @pytest.mark.parametrize("trigger", ["", None, 3])
    def test_invalid_trigger(self, trigger):
        with pytest.raises(ConfigurationError):
            MaskConfig(trigger=trigger)

    def test_composite_trigger_rejected(self):
        composite = get_marker(SecurityMarkers.CONFIDENTIAL, SecurityMarkers.SECRET)
        with pytest.raises(ConfigurationError):
            MaskConfig(trigger=composite)

    def test_unknown_mismatch_policy(self):
        with pytest.raises(ConfigurationError):
            MaskConfig(mismatch_policy="guess")

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            MaskConfig(mask_token="")


class TestFromEnv:
    """Test suite for environment-based configuration."""

    def test_empty_env_gives_defaults(self):
        assert MaskConfig.from_env(env={}) == MaskConfig()

    def test_reads_all_variables(self):
        config = MaskConfig.from_env(env={
            "LOGMASK_TRIGGER_MARKER": "TOP_SECRET",
            "LOGMASK_MASK_TOKEN": "###",
            "LOGMASK_FAULT_TEXT": "!fault!",
            "LOGMASK_MISMATCH_POLICY": "mirror_rendering",
        })
        assert config.trigger is SecurityMarkers.TOP_SECRET
        assert config.mask_token == "###"
        assert config.fault_text == "!fault!"
        assert config.mismatch_policy is MismatchPolicy.MIRROR_RENDERING

    def test_custom_registry(self):
        registry = MarkerRegistry()
        config = MaskConfig.from_env(env={"LOGMASK_TRIGGER_MARKER": "PII"}, registry=registry)
        assert config.trigger == Marker("PII")
        assert "PII" in registry

    def test_blank_variables_rejected(self):
        with pytest.raises(ConfigurationError):
            MaskConfig.from_env(env={"LOGMASK_TRIGGER_MARKER": " "})
        with pytest.raises(ConfigurationError):
            MaskConfig.from_env(env={"LOGMASK_MASK_TOKEN": ""})

    @pytest.fixture
    def isolated_environ(self, monkeypatch):
        """A throwaway os.environ, so load_dotenv() can't leak into other tests."""
        environ = {k: v for k, v in os.environ.items() if not k.startswith("LOGMASK_")}
        monkeypatch.setattr(os, "environ", environ)
        return environ

    def test_dotenv_file(self, tmp_path, isolated_environ):
        """Variables are loaded from a .env file when env is not given."""
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text("LOGMASK_MASK_TOKEN=[redacted]\nLOGMASK_TRIGGER_MARKER=SECRET\n")

        config = MaskConfig.from_env(dotenv_path=str(dotenv_file))

        assert config.mask_token == "[redacted]"
        assert config.trigger is SecurityMarkers.SECRET

    def test_process_env_wins_over_dotenv(self, tmp_path, isolated_environ):
        isolated_environ["LOGMASK_MASK_TOKEN"] = "from-env"
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text("LOGMASK_MASK_TOKEN=from-file\n")

        assert MaskConfig.from_env(dotenv_path=str(dotenv_file)).mask_token == "from-env"
