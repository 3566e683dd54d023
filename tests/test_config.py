"""
Unit tests for loading and validating environment configuration.
"""

from pathlib import Path

import pytest
import yaml

from helper.config import Config, ConfigurationFileError

from conftest import CERTIFICATE_ARN, config_data


CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


class TestConfigLoading:
    """Test reading configuration files."""

    def test_load_from_directory(self, tmp_path):
        (tmp_path / "dev.yaml").write_text(yaml.safe_dump(config_data()), encoding="utf-8")

        config = Config("dev", config_dir=str(tmp_path))

        assert config.environment == "dev"
        assert config.get("AppName") == "modus"
        assert len(config.get_services()) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationFileError, match="not found"):
            Config("missing", config_dir=str(tmp_path))

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "dev.yaml").write_text("AppName: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigurationFileError, match="not valid YAML"):
            Config("dev", config_dir=str(tmp_path))

    def test_file_must_hold_mapping(self, tmp_path):
        (tmp_path / "dev.yaml").write_text("- modus\n- nprd\n", encoding="utf-8")
        with pytest.raises(ConfigurationFileError, match="mapping"):
            Config("dev", config_dir=str(tmp_path))

    def test_shipped_nonprod_config_is_valid(self):
        """Test that the checked-in non-production configuration loads."""
        config = Config("nonprod", config_dir=str(CONFIG_DIR))

        assert config.get("AppName") == "modus"
        priorities = [entry["Priority"] for entry in config.get_services()]
        assert len(priorities) == len(set(priorities))
        assert config.get_load_balancer_certificate_arns()


class TestIdentityValidation:
    """Test validation of AppName, Environment and UniqueIdentifier."""

    @pytest.mark.parametrize("missing_key", ["AppName", "Environment"])
    def test_required_identity_keys(self, missing_key):
        data = config_data()
        del data[missing_key]
        with pytest.raises(ConfigurationFileError, match=missing_key):
            Config.from_dict("nonprod", data)

    @pytest.mark.parametrize("app_name", ["Modus", "modus_app", "1modus", "modus-", "mo--dus"])
    def test_invalid_app_names(self, app_name):
        with pytest.raises(ConfigurationFileError):
            Config.from_dict("nonprod", config_data(AppName=app_name))

    def test_app_name_length(self):
        with pytest.raises(ConfigurationFileError, match="between 2 and 20"):
            Config.from_dict("nonprod", config_data(AppName="m"))
        with pytest.raises(ConfigurationFileError, match="between 2 and 20"):
            Config.from_dict("nonprod", config_data(AppName="a" * 21))

    def test_invalid_unique_identifier(self):
        with pytest.raises(ConfigurationFileError, match="UniqueIdentifier"):
            Config.from_dict("nonprod", config_data(UniqueIdentifier="Blue"))

    def test_base_id_fits_load_balancer_name(self):
        """Test that the combined identity is capped at 32 characters."""
        data = config_data(AppName="a" * 20, Environment="production", UniqueIdentifier="blue")
        with pytest.raises(ConfigurationFileError, match="too long"):
            Config.from_dict("nonprod", data)

    def test_empty_unique_identifier_allowed(self):
        config = Config.from_dict("nonprod", config_data(UniqueIdentifier=""))
        assert config.get_optional("UniqueIdentifier") == ""


class TestConfigSections:
    """Test the section getters and their defaults."""

    def test_defaults_for_missing_sections(self):
        data = config_data()
        del data["LoadBalancer"]
        config = Config.from_dict("nonprod", data)

        assert config.get_network_config() == {}
        assert config.get_database_config() == {}
        assert config.get_cdn_config() == {}
        assert config.get_load_balancer_certificate_arns() == []

    def test_certificate_arns(self):
        config = Config.from_dict("nonprod", config_data())
        assert config.get_load_balancer_certificate_arns() == [CERTIFICATE_ARN]

    def test_get_missing_key_raises(self):
        config = Config.from_dict("nonprod", config_data())
        with pytest.raises(KeyError):
            config.get("Network")
        assert config.get_optional("Network", {"Cidr": "10.0.0.0/16"}) == {"Cidr": "10.0.0.0/16"}

    def test_services_must_be_list(self):
        config = Config.from_dict("nonprod", config_data(Services={"Name": "api"}))
        with pytest.raises(ConfigurationFileError, match="list"):
            config.get_services()

    def test_services_keep_declaration_order(self):
        config = Config.from_dict("nonprod", config_data())
        assert [entry["Name"] for entry in config.get_services()] == ["api", "nginx"]
