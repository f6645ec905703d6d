"""Checksum manifest verification"""

import re
from pathlib import Path

from tofuverify.data.models import ManifestEntry
from tofuverify.utils.hashing import calculate_hash
from tofuverify.utils.logging import get_logger

logger = get_logger(__name__)

MATCH_MODES = ("exact", "substring")

# coreutils style: "<digest>  <name>" or "<digest> *<name>", optionally "\"-escaped;
# a single separating space is also accepted
_GNU_LINE = re.compile(r"^\\?(?P<digest>[0-9A-Fa-f]+)\s+\*?(?P<filename>.+)$")
# BSD style: "SHA256 (<name>) = <digest>"
_BSD_LINE = re.compile(r"^(?P<algorithm>[A-Za-z0-9-]+) ?\((?P<filename>.+)\) ?= ?(?P<digest>[0-9A-Fa-f]+)$")


def parse_manifest(text: str, algorithm: str) -> list[ManifestEntry]:
    """Parse checksum manifest text into entries

    Lines that are neither coreutils nor BSD formatted (comments, PGP armor,
    blank lines) are ignored.
    """
    entries = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        match = _BSD_LINE.match(line)
        if match:
            entries.append(
                ManifestEntry(
                    algorithm=match.group("algorithm").upper().replace("-", ""),
                    digest=match.group("digest").lower(),
                    filename=match.group("filename"),
                )
            )
            continue

        match = _GNU_LINE.match(line)
        if match:
            entries.append(
                ManifestEntry(
                    algorithm=algorithm.upper(),
                    digest=match.group("digest").lower(),
                    filename=match.group("filename"),
                )
            )
    return entries


class HashVerifier:
    """Checks a file's digest against the contents of a checksum manifest

    ``exact`` mode requires a parsed manifest line that pairs the computed
    digest with the target's file name. ``substring`` mode reproduces the
    older behaviour of accepting the digest anywhere in the manifest text,
    which also accepts a digest embedded in an unrelated longer token.
    """

    def __init__(self, match_mode: str = "exact"):
        if match_mode not in MATCH_MODES:
            raise ValueError(f"Unknown manifest match mode: {match_mode}")
        self.match_mode = match_mode

    def verify(self, algorithm: str, manifest_path: Path | str, target_path: Path | str) -> bool:
        """Return True if the target's digest is listed in the manifest"""
        manifest_path = Path(manifest_path)
        target_path = Path(target_path)

        digest = calculate_hash(target_path, algorithm)
        text = manifest_path.read_text(encoding="utf-8", errors="replace")

        if self.match_mode == "substring":
            matches = digest in text
        else:
            matches = any(
                entry.digest == digest and entry.base_name == target_path.name
                for entry in parse_manifest(text, algorithm)
            )

        logger.debug(
            "%s digest of %s %s %s",
            algorithm,
            target_path.name,
            "matches" if matches else "not found in",
            manifest_path.name,
        )
        return matches
