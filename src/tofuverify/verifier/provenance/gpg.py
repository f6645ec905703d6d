"""GPG signature verification"""

import subprocess
from pathlib import Path
from typing import Any

from tofuverify.data.models import TrustPolicy
from tofuverify.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_KEYSERVER = "hkps://sks.openpgp-keyserver.de"

POLICY_OPTIONS = {
    TrustPolicy.AUTO_KEY_RETRIEVE: ["--keyserver-options", "auto-key-retrieve"],
    TrustPolicy.ALWAYS_TRUST_PINNED: ["--trust-model=always"],
}


class GPGVerifier:
    """Runs gpg to check a detached signature against a keyring directory"""

    def __init__(
        self,
        binary: str = "gpg",
        keyserver: str = DEFAULT_KEYSERVER,
        ca_cert_file: Path | None = None,
        timeout: float = 120,
    ):
        self.binary = binary
        self.keyserver = keyserver
        self.ca_cert_file = ca_cert_file
        self.timeout = timeout

    def build_command(
        self,
        signature_path: Path | str,
        data_path: Path | str,
        policy: TrustPolicy,
        homedir: Path | str,
    ) -> list[str]:
        """Build the gpg command line for one verification"""
        command = [
            self.binary,
            "--batch",
            "--homedir",
            str(homedir),
            "--keyserver",
            self.keyserver,
        ]

        if self.ca_cert_file is not None:
            if Path(self.ca_cert_file).is_file():
                command += ["--keyserver-options", f"ca-cert-file={self.ca_cert_file}"]
            else:
                logger.warning("Pinned keyserver certificate %s not found; using system CAs", self.ca_cert_file)

        # Never follow a keyserver URL embedded in the signature by its signer
        command += ["--keyserver-options", "no-honor-keyserver-url"]
        command += POLICY_OPTIONS[policy]
        command += ["--verify", str(signature_path), str(data_path)]
        return command

    def check_available(self) -> dict[str, Any] | None:
        """Probe ``gpg --version``; return a status dict if gpg cannot be used"""
        try:
            version = subprocess.run(
                [self.binary, "--version"],
                capture_output=True,
                timeout=10,
            )
        except FileNotFoundError:
            return {
                "available": False,
                "status": "gpg_not_installed",
                "note": f"{self.binary} executable not found",
            }
        except subprocess.TimeoutExpired:
            return {
                "available": False,
                "status": "gpg_unavailable",
                "note": f"{self.binary} --version did not answer",
            }

        if version.returncode != 0:
            return {
                "available": False,
                "status": "gpg_unavailable",
                "note": f"{self.binary} --version exited with status {version.returncode}",
            }
        return None

    def verify(
        self,
        signature_path: Path | str,
        data_path: Path | str,
        policy: TrustPolicy,
        homedir: Path | str,
    ) -> dict[str, Any]:
        """Verify a detached signature over data_path"""
        unavailable = self.check_available()
        if unavailable:
            return unavailable

        command = self.build_command(signature_path, data_path, policy, homedir)
        logger.debug("Running %s", " ".join(command))

        try:
            result = subprocess.run(command, capture_output=True, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            return {
                "available": True,
                "status": "timeout",
                "note": f"gpg did not finish within {self.timeout} seconds",
            }
        except Exception as e:
            return {
                "available": True,
                "status": "error",
                "note": "gpg could not be run",
                "error": str(e),
            }

        output = result.stderr.decode("utf-8", errors="replace") if result.stderr else ""
        if result.returncode == 0:
            return {
                "available": True,
                "status": "verified",
                "note": "Signature verified successfully",
                "output": output,
            }
        return {
            "available": True,
            "status": "verification_failed",
            "note": f"Signature verification failed (gpg exit status {result.returncode})",
            "output": output,
        }
