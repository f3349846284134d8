"""
On-disk storage of the license blobs held by the verifying application.
"""

from __future__ import annotations

from pathlib import Path

from triallic.common.codec import TokenCodec
from triallic.common.config import Config
from triallic.common.models import SignedLicense


class LicenseStore:
    """Reads and writes the token and signature files byte for byte."""

    def __init__(self, license_dir: Path | None = None, config: Config | None = None):
        config = config or Config()
        self.license_dir = Path(license_dir or config.LICENSE_DIR)
        self.token_path = self.license_dir / config.TOKEN_FILE_NAME
        self.signature_path = self.license_dir / config.SIGNATURE_FILE_NAME

    def exists(self) -> bool:
        return self.token_path.is_file() and self.signature_path.is_file()

    def save(self, token_bytes: bytes, signature_hex: str) -> None:
        self.license_dir.mkdir(parents=True, exist_ok=True)
        self.token_path.write_bytes(token_bytes)
        self.signature_path.write_text(signature_hex, encoding="ascii")

    def save_license(self, signed: SignedLicense) -> None:
        self.save(TokenCodec.encode(signed.token), signed.signature_hex)

    def load(self) -> tuple[bytes, str]:
        """Return (token bytes, signature hex) exactly as stored."""
        for path in (self.token_path, self.signature_path):
            if not path.is_file():
                msg = (
                    f"{path} not found. Obtain a trial license with "
                    "'triallic get-license <user-id>'."
                )
                raise FileNotFoundError(msg)
        return self.token_path.read_bytes(), self.signature_path.read_text(
            encoding="ascii", errors="replace"
        )
