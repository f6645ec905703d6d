"""Tests for checksum manifest verification"""

import hashlib

import pytest

from tofuverify.verifier.provenance.hash import HashVerifier, parse_manifest


@pytest.fixture
def target(tmp_path):
    path = tmp_path / "foo-1.0.tar.gz"
    path.write_bytes(b"release tarball contents")
    return path


@pytest.fixture
def sha256(target):
    return hashlib.sha256(target.read_bytes()).hexdigest()


def test_hash_verifier_default_mode():
    """Test exact matching is the default"""
    assert HashVerifier().match_mode == "exact"


def test_hash_verifier_rejects_unknown_mode():
    """Test unknown match modes are refused"""
    with pytest.raises(ValueError, match="Unknown manifest match mode"):
        HashVerifier(match_mode="fuzzy")


class TestParseManifest:
    """Test cases for manifest parsing"""

    def test_coreutils_text_and_binary(self):
        """Test coreutils lines in text and binary mode"""
        entries = parse_manifest("AB12  foo.tar.gz\ncd34 *bar.zip\n", "SHA256")

        assert [(e.digest, e.filename) for e in entries] == [("ab12", "foo.tar.gz"), ("cd34", "bar.zip")]
        assert all(e.algorithm == "SHA256" for e in entries)

    def test_single_space_separator(self):
        """Test lines separated by one space are parsed"""
        entries = parse_manifest("ab12 foo-1.0.tar.gz\n", "SHA256")

        assert [(e.digest, e.filename) for e in entries] == [("ab12", "foo-1.0.tar.gz")]

    def test_bsd_format(self):
        """Test BSD-style tagged lines"""
        entries = parse_manifest("SHA512 (foo.tar.gz) = abcdef\n", "SHA512")

        assert len(entries) == 1
        assert entries[0].algorithm == "SHA512"
        assert entries[0].filename == "foo.tar.gz"
        assert entries[0].digest == "abcdef"

    def test_ignores_noise(self):
        """Test comments, blanks and PGP armor are skipped"""
        text = "# comment\n\n-----BEGIN PGP SIGNED MESSAGE-----\nHash: SHA256\nab12  foo\n"

        entries = parse_manifest(text, "SHA256")

        assert [e.filename for e in entries] == ["foo"]

    def test_filename_with_spaces_and_dirs(self):
        """Test filenames keep spaces and directory parts"""
        entries = parse_manifest("ab12  linux-x86_64/en-US/my file.tar.bz2\n", "SHA512")

        assert entries[0].filename == "linux-x86_64/en-US/my file.tar.bz2"
        assert entries[0].base_name == "my file.tar.bz2"


class TestHashVerifierExact:
    """Test cases for exact manifest matching"""

    def test_match(self, tmp_path, target, sha256):
        """Test a listed digest and filename match"""
        manifest = tmp_path / "SHA256SUMS"
        manifest.write_text(f"{'0' * 64}  other.tar.gz\n{sha256}  foo-1.0.tar.gz\n")

        assert HashVerifier().verify("SHA256", manifest, target) is True

    def test_match_uppercase_digest(self, tmp_path, target, sha256):
        """Test digests compare case-insensitively"""
        manifest = tmp_path / "SHA256SUMS"
        manifest.write_text(f"{sha256.upper()} *foo-1.0.tar.gz\n")

        assert HashVerifier().verify("SHA256", manifest, target) is True

    def test_match_single_space(self, tmp_path, target, sha256):
        """Test a single-space manifest line matches in both modes"""
        manifest = tmp_path / "SHA256SUMS"
        manifest.write_text(f"{sha256} foo-1.0.tar.gz\n")

        assert HashVerifier().verify("SHA256", manifest, target) is True
        assert HashVerifier(match_mode="substring").verify("SHA256", manifest, target) is True

    def test_match_nested_path(self, tmp_path, target, sha256):
        """Test entries referencing a subdirectory path match by base name"""
        manifest = tmp_path / "SHA256SUMS"
        manifest.write_text(f"{sha256}  linux/en-US/foo-1.0.tar.gz\n")

        assert HashVerifier().verify("SHA256", manifest, target) is True

    def test_match_bsd(self, tmp_path, target, sha256):
        """Test BSD-style manifests"""
        manifest = tmp_path / "SHA256SUMS"
        manifest.write_text(f"SHA256 (foo-1.0.tar.gz) = {sha256}\n")

        assert HashVerifier().verify("SHA256", manifest, target) is True

    def test_digest_mismatch(self, tmp_path, target):
        """Test a wrong digest is a clean False"""
        manifest = tmp_path / "SHA256SUMS"
        manifest.write_text(f"{'f' * 64}  foo-1.0.tar.gz\n")

        assert HashVerifier().verify("SHA256", manifest, target) is False

    def test_digest_listed_for_other_file(self, tmp_path, target, sha256):
        """Test the digest must be paired with the target's name"""
        manifest = tmp_path / "SHA256SUMS"
        manifest.write_text(f"{sha256}  evil.tar.gz\n{'f' * 64}  foo-1.0.tar.gz\n")

        assert HashVerifier().verify("SHA256", manifest, target) is False

    def test_digest_embedded_in_longer_token(self, tmp_path, target, sha256):
        """Test a digest inside a longer token does not match"""
        manifest = tmp_path / "SHA256SUMS"
        manifest.write_text(f"00{sha256}00  foo-1.0.tar.gz\n")

        assert HashVerifier().verify("SHA256", manifest, target) is False

    def test_unreadable_manifest_raises(self, tmp_path, target):
        """Test I/O failures propagate"""
        with pytest.raises(FileNotFoundError):
            HashVerifier().verify("SHA256", tmp_path / "missing", target)


class TestHashVerifierSubstring:
    """Test cases for the legacy substring mode"""

    def test_match_anywhere(self, tmp_path, target, sha256):
        """Test the digest may appear anywhere"""
        manifest = tmp_path / "SHA256SUMS"
        manifest.write_text(f"checksum={sha256};\n")

        assert HashVerifier("substring").verify("SHA256", manifest, target) is True

    def test_accepts_embedded_digest(self, tmp_path, target, sha256):
        """Test the known weakness: embedded digests pass"""
        manifest = tmp_path / "SHA256SUMS"
        manifest.write_text(f"00{sha256}00  unrelated\n")

        assert HashVerifier("substring").verify("SHA256", manifest, target) is True

    def test_mismatch(self, tmp_path, target):
        """Test absent digests fail"""
        manifest = tmp_path / "SHA256SUMS"
        manifest.write_text("nothing here foo-1.0.tar.gz\n")

        assert HashVerifier("substring").verify("SHA256", manifest, target) is False
