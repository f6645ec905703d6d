"""Pytest configuration and fixtures"""

import hashlib
from unittest.mock import MagicMock, patch

import pytest

from tofuverify.config import Config


class FakeGPG:
    """Stands in for subprocess.run when gpg is invoked"""

    def __init__(self):
        self.returncode = 0
        self.stderr = b"gpg: Good signature"
        self.commands = []

    def __call__(self, command, **kwargs):
        result = MagicMock()
        if "--version" in command:
            result.returncode = 0
            return result

        self.commands.append(command)
        result.returncode = self.returncode
        result.stderr = self.stderr
        return result

    @property
    def last_command(self):
        return self.commands[-1]


@pytest.fixture
def fake_gpg():
    """Patch subprocess.run in the gpg module"""
    gpg = FakeGPG()
    with patch("tofuverify.verifier.provenance.gpg.subprocess.run", side_effect=gpg):
        yield gpg


@pytest.fixture
def trust_root(tmp_path):
    """Trust root that does not exist yet"""
    return tmp_path / "keyrings"


@pytest.fixture
def config(tmp_path, trust_root):
    """Configuration isolated from the user's home directory"""
    cfg = Config(config_path=tmp_path / "config.toml")
    cfg.set("general", "trust_root", str(trust_root))
    cfg.set("keyserver", "ca_cert_file", "")
    return cfg


@pytest.fixture
def downloads(tmp_path):
    """Empty download directory"""
    directory = tmp_path / "downloads"
    directory.mkdir()
    return directory


@pytest.fixture
def artifact(downloads):
    """A downloaded release tarball"""
    path = downloads / "foo-1.0.tar.gz"
    path.write_bytes(b"release tarball contents")
    return path


def digest_of(path, algorithm):
    """Hex digest of a file, for writing manifests in tests"""
    return hashlib.new(algorithm.lower(), path.read_bytes()).hexdigest()


def write_manifest(directory, name, algorithm, *paths, signed=".asc"):
    """Write a coreutils-style manifest listing paths, optionally with a signature"""
    lines = [f"{digest_of(p, algorithm)}  {p.name}\n" for p in paths]
    manifest = directory / name
    manifest.write_text("".join(lines))
    if signed:
        (directory / (name + signed)).write_text("-----BEGIN PGP SIGNATURE-----\n")
    return manifest


@pytest.fixture
def make_manifest():
    """Factory for checksum manifests"""
    return write_manifest
