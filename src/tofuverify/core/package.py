"""Package identity derivation

A "package" is named by the leading run of alphanumeric characters in the
artifact's filename: ``firefox-34.0.tar.bz2`` belongs to ``firefox`` and
``node-v20.1.0.tar.xz`` to ``node``. The identity keys the trust store, so
every release of the same project shares one pinned keyring.
"""

import re
from pathlib import Path, PurePath

from tofuverify.data.models import Artifact
from tofuverify.errors import InvalidInvocation

SIGNATURE_SUFFIXES = (".sig", ".asc")

_IDENTITY_RE = re.compile(r"[A-Za-z0-9]*")


def is_signature_file(filename: Path | str) -> bool:
    """Check whether a filename names a detached signature"""
    return str(filename).lower().endswith(SIGNATURE_SUFFIXES)


def derive_package_id(filename: Path | str) -> str:
    """Derive the package identity from an artifact filename

    Purely lexical: the file is not touched.
    """
    if is_signature_file(filename):
        raise InvalidInvocation(
            f"{filename} is a signature file; call this with the filename of a download"
        )

    base_name = PurePath(filename).name
    package_id = _IDENTITY_RE.match(base_name).group(0)
    if not package_id:
        raise InvalidInvocation(
            f"Cannot derive a package name from {base_name!r}: it must start with a letter or digit"
        )
    return package_id


def resolve_artifact(path: Path | str) -> Artifact:
    """Build the Artifact for an existing regular file"""
    path = Path(path)
    if not path.is_file():
        raise InvalidInvocation(f"Artifact not found: {path}")
    return Artifact.from_path(path)
