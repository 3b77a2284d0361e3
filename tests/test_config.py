# tests/test_config.py
import pytest

from rcon_core.config import (
    DEFAULT_PORT,
    RconConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)
from rcon_core.exceptions import ConfigError

# 1. 定义一个最小化的、"快乐路径"的配置
valid_config_dict = {
    "server_ip": "10.0.0.5",
    "password": "secret",
}


def test_config_happy_path():
    config = create_config_from_dict(valid_config_dict.copy())

    assert isinstance(config, RconConfig)
    assert config.server_address == "10.0.0.5"
    assert config.server_port == DEFAULT_PORT
    assert config.password == "secret"
    assert config.timeout == 5.0
    assert config.io_timeout is None
    assert config.encoding == "utf-8"


def test_config_full():
    config = create_config_from_dict(
        {
            "server_ip": "rcon.example.com",
            "port": "25575",
            "password": "pw",
            "timeout": "1.5",
            "io_timeout": 3,
            "encoding": "GBK",
        }
    )
    assert config.server_port == 25575
    assert config.timeout == 1.5
    assert config.io_timeout == 3.0
    assert config.encoding == "gbk"
    assert config.endpoint == "rcon.example.com:25575"


def test_config_host_port_shorthand():
    config = create_config_from_dict({"server_ip": "127.0.0.1:27016"})
    assert config.server_address == "127.0.0.1"
    assert config.server_port == 27016


def test_config_missing_server_ip():
    with pytest.raises(ConfigError, match="server_ip"):
        create_config_from_dict({"password": "secret"})


@pytest.mark.parametrize("port", ["abc", 0, 70000, -1])
def test_config_invalid_port(port):
    with pytest.raises(ConfigError):
        create_config_from_dict({"server_ip": "1.2.3.4", "port": port})


@pytest.mark.parametrize("key", ["timeout", "io_timeout"])
@pytest.mark.parametrize("value", ["soon", 0, -2])
def test_config_invalid_timeout(key, value):
    with pytest.raises(ConfigError):
        create_config_from_dict({"server_ip": "1.2.3.4", key: value})


def test_config_invalid_encoding():
    with pytest.raises(ConfigError, match="编码"):
        create_config_from_dict({"server_ip": "1.2.3.4", "encoding": "nope-8"})


def test_config_repr_hides_password():
    config = create_config_from_dict(valid_config_dict.copy())
    assert "secret" not in repr(config)
    assert "******" in repr(config)


def test_config_is_frozen():
    config = create_config_from_dict(valid_config_dict.copy())
    with pytest.raises(AttributeError):
        config.password = "other"


# --- TOML ---


def test_toml_profile(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        """
[profile.default]
server_ip = "1.1.1.1"
password = "a"

[profile.cs2]
server_ip = "2.2.2.2"
port = 27020
password = "b"
""",
        encoding="utf-8",
    )

    assert load_config_from_toml(path).server_address == "1.1.1.1"
    cs2 = load_config_from_toml(path, profile="cs2")
    assert cs2.server_address == "2.2.2.2"
    assert cs2.server_port == 27020


def test_toml_missing_profile(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[profile.default]\nserver_ip = "1.1.1.1"\n', encoding="utf-8")

    with pytest.raises(ConfigError, match="profile.other"):
        load_config_from_toml(path, profile="other")


def test_toml_rcon_section(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[rcon]\nserver_ip = "3.3.3.3"\n', encoding="utf-8")
    assert load_config_from_toml(path).server_address == "3.3.3.3"


def test_toml_root(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('server_ip = "4.4.4.4"\ntimeout = 2\n', encoding="utf-8")
    config = load_config_from_toml(path)
    assert config.server_address == "4.4.4.4"
    assert config.timeout == 2.0


def test_toml_not_found(tmp_path):
    with pytest.raises(ConfigError, match="未找到"):
        load_config_from_toml(tmp_path / "missing.toml")


def test_toml_invalid(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("server_ip = ", encoding="utf-8")
    with pytest.raises(ConfigError, match="TOML"):
        load_config_from_toml(path)


# --- Env ---


def test_env(monkeypatch):
    monkeypatch.setenv("RCON_SERVER_IP", "5.5.5.5")
    monkeypatch.setenv("RCON_PORT", "27017")
    monkeypatch.setenv("RCON_PASSWORD", "envpw")
    monkeypatch.setenv("RCON_IO_TIMEOUT", "4")

    config = load_config_from_env()

    assert config.server_address == "5.5.5.5"
    assert config.server_port == 27017
    assert config.password == "envpw"
    assert config.io_timeout == 4.0


def test_env_empty(monkeypatch):
    for suffix in ("SERVER_IP", "PORT", "PASSWORD", "TIMEOUT", "IO_TIMEOUT", "ENCODING"):
        monkeypatch.delenv(f"RCON_{suffix}", raising=False)

    with pytest.raises(ConfigError, match="RCON_"):
        load_config_from_env()
