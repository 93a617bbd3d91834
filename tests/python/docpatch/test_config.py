from pathlib import Path

import pytest

from docpatch.config import ServerConfig, config_from_dict, load_config
from docpatch.constants import DEFAULT_LISTEN_HOST, DEFAULT_LISTEN_PORT
from docpatch.errors import ConfigError


def test_defaults():
    config = config_from_dict({})
    assert config == ServerConfig()
    assert config.listen.host == DEFAULT_LISTEN_HOST
    assert config.listen.port == DEFAULT_LISTEN_PORT
    assert config.logging.level == "notice"
    assert config.logging.target == "stderr"
    assert config.document is None
    assert not config.persist
    assert config_from_dict(None) == ServerConfig()


def test_full():
    config = config_from_dict(
        {
            "listen": {"host": "::1", "port": 8080},
            "logging": {"level": "debug", "target": "stdout"},
            "document": "data/doc.yaml",
            "persist": True,
        },
        Path("/etc/docpatch"),
    )
    assert config.listen.host == "::1"
    assert config.listen.port == 8080
    assert config.logging.level == "debug"
    assert config.logging.target == "stdout"
    assert config.document == Path("/etc/docpatch/data/doc.yaml")
    assert config.persist


def test_absolute_document():
    config = config_from_dict({"document": "/var/lib/doc.json"}, Path("/etc/docpatch"))
    assert config.document == Path("/var/lib/doc.json")


@pytest.mark.parametrize(
    "data,where",
    [
        ([], "/"),
        ({"unknown": 1}, "/unknown"),
        ({"listen": {"port": "53"}}, "/listen/port"),
        ({"listen": {"port": True}}, "/listen/port"),
        ({"listen": {"port": 0}}, "/listen/port"),
        ({"listen": {"port": 65536}}, "/listen/port"),
        ({"listen": {"address": "::1"}}, "/listen/address"),
        ({"listen": []}, "/listen"),
        ({"logging": {"level": "verbose"}}, "/logging/level"),
        ({"logging": {"target": "file"}}, "/logging/target"),
        ({"persist": "yes", "document": "a.json"}, "/persist"),
        ({"persist": True}, "/persist"),
    ],
)
def test_invalid(data, where):
    with pytest.raises(ConfigError) as e:
        config_from_dict(data)
    assert e.value.where() == where


def test_load_config(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("listen:\n  port: 9000\ndocument: doc.json\n")

    config = load_config(path)
    assert config.listen.port == 9000
    assert config.document == tmp_path / "doc.json"


def test_load_config_invalid(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.yaml")

    path = tmp_path / "config.yaml"
    path.write_text("listen: 1\nlisten: 2\n")
    with pytest.raises(ConfigError):
        load_config(path)
