"""Hashing utilities"""

import hashlib
from pathlib import Path

# Manifest algorithms in precedence order, strongest first
HASH_ALGORITHMS = ("SHA512", "SHA256", "SHA1", "MD5")

CHUNK_SIZE = 65536


def _hash_file(file_path: Path | str, hasher) -> str:
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def calculate_sha512(file_path: Path | str) -> str:
    """Calculate SHA512 hash of file"""
    return _hash_file(file_path, hashlib.sha512())


def calculate_sha256(file_path: Path | str) -> str:
    """Calculate SHA256 hash of file"""
    return _hash_file(file_path, hashlib.sha256())


def calculate_sha1(file_path: Path | str) -> str:
    """Calculate SHA1 hash of file"""
    return _hash_file(file_path, hashlib.sha1())


def calculate_md5(file_path: Path | str) -> str:
    """Calculate MD5 hash of file"""
    return _hash_file(file_path, hashlib.md5())


_CALCULATORS = {
    "sha512": calculate_sha512,
    "sha256": calculate_sha256,
    "sha1": calculate_sha1,
    "md5": calculate_md5,
}


def calculate_hash(file_path: Path | str, algorithm: str = "sha256") -> str:
    """Calculate hash of file using specified algorithm"""
    calculator = _CALCULATORS.get(algorithm.lower())
    if calculator is None:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")
    return calculator(file_path)
