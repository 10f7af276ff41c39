"""Tests for config: defaults, env overrides, port parsing failures."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from simple_api_demo.config import Config, load_config, parse_port
from simple_api_demo.errors import ConfigError, EnvironmentVariableError


class TestDefaults:
    def test_empty_environment_uses_defaults(self):
        config = load_config({})
        assert config.main_port == 8080
        assert config.app_port == 4242
        assert config.bind_address == "0.0.0.0"
        assert config.log_level == "info"

    def test_unrelated_variables_are_ignored(self):
        config = load_config({"HOME": "/root", "PORTS": "1"})
        assert config == Config()

    def test_reads_process_environment_when_not_injected(self, monkeypatch):
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("PORT_APP", "9001")
        monkeypatch.delenv("BIND_ADDRESS", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        config = load_config()
        assert config.main_port == 9000
        assert config.app_port == 9001
        assert config.bind_address == "0.0.0.0"


class TestOverrides:
    def test_custom_values(self):
        config = load_config({"PORT": "3000", "PORT_APP": "5000", "BIND_ADDRESS": "127.0.0.1"})
        assert config == Config(main_port=3000, app_port=5000, bind_address="127.0.0.1")

    @pytest.mark.parametrize("value", ["0", "1", "80", "8080", "65535", "+8081", "00080"])
    def test_valid_ports(self, value):
        assert load_config({"PORT": value}).main_port == int(value)
        assert load_config({"PORT_APP": value}).app_port == int(value)

    def test_bind_address_is_not_validated(self):
        assert load_config({"BIND_ADDRESS": "not really an address"}).bind_address == "not really an address"

    def test_log_level_is_case_insensitive(self):
        assert load_config({"LOG_LEVEL": "DEBUG"}).log_level == "debug"

    def test_no_caching_between_calls(self):
        assert load_config({"PORT": "1234"}).main_port == 1234
        assert load_config({"PORT": "4321"}).main_port == 4321
        assert load_config({}).main_port == 8080

    def test_config_is_immutable(self):
        config = load_config({})
        with pytest.raises(PydanticValidationError):
            config.main_port = 1


class TestInvalidPorts:
    @pytest.mark.parametrize(
        "value", ["not_a_number", "invalid", "", " 8080", "8080 ", "-1", "65536", "70000", "80.0", "0x50", "+", "++80"]
    )
    def test_invalid_main_port(self, value):
        with pytest.raises(EnvironmentVariableError) as excinfo:
            load_config({"PORT": value})
        assert excinfo.value.var_name == "PORT"
        assert f"got: {value}" in str(excinfo.value)

    @pytest.mark.parametrize("var_name", ["PORT", "PORT_APP"])
    def test_oversized_digit_string(self, var_name):
        value = "9" * 5000
        with pytest.raises(EnvironmentVariableError) as excinfo:
            load_config({var_name: value})
        assert excinfo.value.var_name == var_name

    def test_leading_zeros_do_not_hide_overflow(self):
        with pytest.raises(EnvironmentVariableError):
            load_config({"PORT": "0" * 10 + "65536"})
        assert load_config({"PORT": "0" * 10 + "65535"}).main_port == 65535

    def test_invalid_app_port_names_variable(self):
        with pytest.raises(EnvironmentVariableError) as excinfo:
            load_config({"PORT_APP": "abc"})
        assert excinfo.value.var_name == "PORT_APP"
        assert str(excinfo.value) == (
            "Environment variable error: PORT_APP - must be a valid port number (1-65535), got: abc"
        )

    def test_main_port_checked_before_app_port(self):
        with pytest.raises(EnvironmentVariableError) as excinfo:
            load_config({"PORT": "x", "PORT_APP": "y"})
        assert excinfo.value.var_name == "PORT"

    def test_parse_port_direct(self):
        assert parse_port("ANY", "9000") == 9000
        with pytest.raises(EnvironmentVariableError):
            parse_port("ANY", "nine thousand")


class TestLogLevel:
    def test_unknown_log_level_is_config_error(self):
        with pytest.raises(ConfigError) as excinfo:
            load_config({"LOG_LEVEL": "verbose"})
        assert excinfo.value.error_type == "configuration_error"
        assert "verbose" in str(excinfo.value)
