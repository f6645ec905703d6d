"""Cryptographic primitives: digests against manifests and gpg signatures"""
