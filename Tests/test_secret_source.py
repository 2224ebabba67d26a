"""
Author: Ian Young
Purpose: Test where the secret is read from and the file permission warning.
"""

import logging
import os

import pytest

from mfa.custom_exceptions import ConfigurationError, SecretSourceError
from mfa.secret_source import (
    SECRET_FILE_ENV,
    is_insecure,
    read_secret_file,
    resolve_secret,
)

SECRET = "JBSWY3DPEHPK3PXP"
OTHER_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


def write_secret(path, secret=SECRET, mode=0o600):
    """Write a secret file with the given permissions."""
    path.write_text(secret + "\n", encoding="utf-8")
    os.chmod(path, mode)
    return str(path)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Point HOME at an empty directory and clear the secret file variable."""
    monkeypatch.delenv(SECRET_FILE_ENV, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


@pytest.mark.parametrize(
    "mode, insecure",
    [(0o600, False), (0o400, False), (0o700, False), (0o640, True),
     (0o604, True), (0o644, True), (0o660, True)],
)
def test_is_insecure(tmp_path, mode, insecure):
    """Test any group or world permission bit marks the file insecure."""
    path = write_secret(tmp_path / "secret", mode=mode)

    assert is_insecure(path) is insecure


def test_owner_only_file_no_warning(tmp_path, sink):
    """Test an owner-only secret file is read without a warning."""
    path = write_secret(tmp_path / "secret", mode=0o600)

    assert read_secret_file(path, sink) == SECRET
    assert not sink.calls


def test_readable_file_warns_once(tmp_path, sink):
    """Test a group/world readable file warns exactly once."""
    path = write_secret(tmp_path / "secret", mode=0o644)

    # Act
    secret = read_secret_file(path, sink)

    # Assert
    assert secret == SECRET
    assert sink.methods() == ["warn"]
    assert "is not secure" in sink.calls[0][1]
    assert SECRET not in sink.calls[0][1]


def test_missing_file(tmp_path):
    """Test a missing file is a configuration error."""
    with pytest.raises(ConfigurationError):
        read_secret_file(str(tmp_path / "nope"))


def test_empty_file(tmp_path):
    """Test an empty file is a configuration error."""
    path = write_secret(tmp_path / "secret", secret="  ")

    with pytest.raises(SecretSourceError, match="empty"):
        read_secret_file(path)


def test_explicit_secret_wins(tmp_path, monkeypatch, sink):
    """Test an explicit secret beats every file."""
    path = write_secret(tmp_path / "secret", secret=OTHER_SECRET)
    monkeypatch.setenv(SECRET_FILE_ENV, path)

    assert resolve_secret("jbsw y3dp ehpk 3pxp", path, sink) == SECRET
    assert not sink.calls


def test_secret_file_beats_env(tmp_path, monkeypatch):
    """Test an explicit secret file beats the environment variable."""
    explicit = write_secret(tmp_path / "explicit")
    env_file = write_secret(tmp_path / "env", secret=OTHER_SECRET)
    monkeypatch.setenv(SECRET_FILE_ENV, env_file)

    assert resolve_secret(secret_file=explicit) == SECRET


def test_env_beats_default(tmp_path, monkeypatch):
    """Test the environment variable beats the default file."""
    home = tmp_path / "home" / ".mfa"
    home.mkdir(parents=True)
    write_secret(home / "secret", secret=OTHER_SECRET)
    env_file = write_secret(tmp_path / "env")
    monkeypatch.setenv(SECRET_FILE_ENV, env_file)

    assert resolve_secret() == SECRET


def test_default_file(tmp_path):
    """Test the secret falls back to $HOME/.mfa/secret."""
    home = tmp_path / "home" / ".mfa"
    home.mkdir(parents=True)
    write_secret(home / "secret")

    assert resolve_secret() == SECRET


def test_no_source_at_all():
    """Test having no secret anywhere is a configuration error."""
    with pytest.raises(SecretSourceError):
        resolve_secret()


def test_blank_explicit_secret():
    """Test a whitespace-only explicit secret is rejected."""
    with pytest.raises(SecretSourceError):
        resolve_secret("   ")


def test_insecure_file_warns_only_through_sink(tmp_path, sink, caplog):
    """Test the permission warning is not repeated as a logged warning."""
    path = write_secret(tmp_path / "secret", mode=0o644)

    with caplog.at_level(logging.WARNING, logger="mfa"):
        read_secret_file(path, sink)

    assert sink.methods() == ["warn"]
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
