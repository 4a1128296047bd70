import pytest

from settings import Settings, load_config, load_settings


def test_defaults_when_no_config_file(tmp_path):
    settings = load_settings({"SIGNER_CONFIG_PATH": str(tmp_path / "missing.yaml")})
    assert settings == Settings()
    assert settings.scheme == "ed25519"
    assert settings.cors_origins == ["http://localhost:5173"]
    assert settings.port == 8080


def test_yaml_file_is_loaded(tmp_path):
    path = tmp_path / "signer.yaml"
    path.write_text(
        "scheme: ml-dsa-65\n"
        "cors_origins:\n"
        "  - https://a.example\n"
        "  - https://b.example\n"
        "max_message_bytes: 4096\n"
        "port: 9000\n"
        "log_level: debug\n"
    )
    settings = load_settings({"SIGNER_CONFIG_PATH": str(path)})
    assert settings.scheme == "ml-dsa-65"
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.max_message_bytes == 4096
    assert settings.port == 9000
    assert settings.log_level == "DEBUG"


def test_environment_overrides_yaml(tmp_path):
    path = tmp_path / "signer.yaml"
    path.write_text("scheme: ml-dsa-65\nport: 9000\n")
    settings = load_settings({
        "SIGNER_CONFIG_PATH":   str(path),
        "SIGNER_SCHEME":        "dilithium3",
        "SIGNER_CORS_ORIGINS":  "https://x.example, https://y.example",
        "SIGNER_PORT":          "9100",
    })
    assert settings.scheme == "dilithium3"
    assert settings.cors_origins == ["https://x.example", "https://y.example"]
    assert settings.port == 9100


def test_empty_yaml_file(tmp_path):
    path = tmp_path / "signer.yaml"
    path.write_text("")
    assert load_config(str(path)) == {}


def test_non_mapping_yaml_is_rejected(tmp_path):
    path = tmp_path / "signer.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ValueError, match="mapping"):
        load_config(str(path))
