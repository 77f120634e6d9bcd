"""Generate local development key pairs for exercising token verification.

The public halves are what ``JWT_PUBLIC_KEY_PATH`` points at; the private
halves exist only so developers can mint test tokens with their own tools.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa


KEYS_DIR = Path(__file__).resolve().parent

KEY_FACTORIES = {
    "rsa": lambda: rsa.generate_private_key(public_exponent=65537, key_size=2048),
    "ec": lambda: ec.generate_private_key(ec.SECP256R1()),
}


def generate(kind: str, keys_dir: Path = KEYS_DIR) -> tuple[Path, Path]:
    """Write ``dev-<kind>.private.pem`` and ``dev-<kind>.public.pem`` once."""
    private_path = keys_dir / f"dev-{kind}.private.pem"
    public_path = keys_dir / f"dev-{kind}.public.pem"

    private_exists = private_path.exists()
    public_exists = public_path.exists()
    if private_exists and public_exists:
        print(f"Keys already exist, skipping: {private_path} / {public_path}")
        return private_path, public_path
    if private_exists != public_exists:
        raise SystemExit(
            "Only one key file exists. Remove both key files and run this script again."
        )

    keys_dir.mkdir(parents=True, exist_ok=True)
    private_key = KEY_FACTORIES[kind]()

    private_path.write_bytes(
        private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    public_path.write_bytes(
        private_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    )
    print(f"Generated: {private_path}")
    print(f"Generated: {public_path}")
    return private_path, public_path


def main(argv: Sequence[str] | None = None) -> int:
    """Generate the requested key kinds (default: rsa) and skip existing ones."""
    kinds = list(sys.argv[1:] if argv is None else argv) or ["rsa"]
    unknown = [kind for kind in kinds if kind not in KEY_FACTORIES]
    if unknown:
        print(f"Unknown key kind(s): {', '.join(unknown)}; choose from rsa, ec", file=sys.stderr)
        return 2
    for kind in kinds:
        generate(kind)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
