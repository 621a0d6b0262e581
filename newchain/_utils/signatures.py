from eth_hash.auto import (
    keccak,
)
from eth_keys import (
    keys,
)
from eth_keys.datatypes import (
    PublicKey,
)
from eth_keys.exceptions import (
    BadSignature,
)
from eth_typing import (
    Address,
    Hash32,
)

from newchain.constants import (
    PUBLIC_KEY_LENGTH,
    SECPK1_N,
    SIGNATURE_LENGTH,
    UNCOMPRESSED_PUBLIC_KEY_PREFIX,
)
from newchain.exceptions import (
    InvalidSignatureValues,
)
from newchain.typing import (
    VRS,
    PublicKeyLike,
)


def validate_signature_values(
    r: int, s: int, recovery_id: int, homestead: bool = False
) -> None:
    """
    Check r, s and the recovery id before attempting recovery.

    With ``homestead`` set, ``s`` must also be in the lower half of the curve
    order, as required of transaction signatures since the Homestead fork.
    """
    if recovery_id not in (0, 1):
        raise InvalidSignatureValues(f"Recovery id must be 0 or 1, got {recovery_id}")
    if not 0 < r < SECPK1_N:
        raise InvalidSignatureValues(f"Signature r is out of range: {r}")
    if not 0 < s < SECPK1_N:
        raise InvalidSignatureValues(f"Signature s is out of range: {s}")
    if homestead and s > SECPK1_N // 2:
        raise InvalidSignatureValues(f"Signature s is in the upper half of the curve: {s}")


def recover_public_key(
    digest: Hash32, r: int, s: int, recovery_id: int, homestead: bool = False
) -> PublicKey:
    validate_signature_values(r, s, recovery_id, homestead=homestead)
    if len(digest) != 32:
        raise InvalidSignatureValues(f"Digest must be 32 bytes, got {len(digest)}")

    try:
        signature = keys.Signature(vrs=(recovery_id, r, s))
        return signature.recover_public_key_from_msg_hash(digest)
    except BadSignature as err:
        raise InvalidSignatureValues(f"Bad Signature: {err}") from err


def split_signature(signature_bytes: bytes) -> VRS:
    """
    Split a 65 byte ``r || s || recovery_id`` signature into ``(recovery_id, r, s)``.
    The recovery id is taken as is, without any legacy offset.
    """
    if len(signature_bytes) != SIGNATURE_LENGTH:
        raise InvalidSignatureValues(
            f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(signature_bytes)}"
        )
    r = int.from_bytes(signature_bytes[:32], "big")
    s = int.from_bytes(signature_bytes[32:64], "big")
    recovery_id = signature_bytes[64]
    return recovery_id, r, s


def recover_signature_public_key(signature_bytes: bytes, digest: Hash32) -> PublicKey:
    recovery_id, r, s = split_signature(signature_bytes)
    return recover_public_key(digest, r, s, recovery_id)


def public_key_to_address(public_key: PublicKeyLike) -> Address:
    """
    Derive the address as the last 20 bytes of the keccak of the 64 byte public
    key. A 65 byte key must carry the uncompressed ``0x04`` marker, which is
    stripped before hashing.
    """
    if isinstance(public_key, PublicKey):
        key_bytes = public_key.to_bytes()
    elif (
        len(public_key) == PUBLIC_KEY_LENGTH + 1
        and public_key[:1] == UNCOMPRESSED_PUBLIC_KEY_PREFIX
    ):
        key_bytes = public_key[1:]
    elif len(public_key) == PUBLIC_KEY_LENGTH:
        key_bytes = public_key
    else:
        raise InvalidSignatureValues(f"Invalid public key: {public_key!r}")

    return Address(keccak(key_bytes)[-20:])
