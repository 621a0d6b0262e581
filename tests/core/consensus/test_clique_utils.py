from eth_keys import (
    keys,
)
from eth_typing import (
    Address,
)
from eth_utils import (
    decode_hex,
)
import pytest
import rlp

from newchain.consensus.clique import (
    VoteAction,
    get_block_signer,
    get_signature_hash,
    get_vote_action,
    sign_block_header,
)
from newchain.consensus.clique.constants import (
    NONCE_DROP,
    SIGNATURE_LENGTH,
    VANITY_LENGTH,
)
from newchain.exceptions import (
    InvalidSignatureValues,
    MalformedEncoding,
    MissingSignatureSuffix,
    TruncatedField,
)
from newchain.rlp.headers import (
    BlockHeader,
    LondonBlockHeader,
    decode_block_header,
)

ALICE_PK = keys.PrivateKey(
    decode_hex("0x45a915e4d060149eb4365960e6a7a45f334393093061116b197e3240065ff2d8")
)

ALICE = Address(ALICE_PK.public_key.to_canonical_address())


BOB_PK = keys.PrivateKey(
    decode_hex("0x15a915e4d060149eb4365960e6a7a45f334393093061116b197e3240065ff2d8")
)

BOB = Address(BOB_PK.public_key.to_canonical_address())


GOERLI_GENESIS_ALLOWED_SIGNER = decode_hex("0xe0a2bd4258d2768837baa26a28fe71dc079f84c7")

GOERLI_HEADER_ONE = BlockHeader(
    difficulty=2,
    block_number=1,
    gas_limit=10475521,
    timestamp=1548947453,
    coinbase=decode_hex("0x0000000000000000000000000000000000000000"),
    parent_hash=decode_hex(
        "0xbf7e331f7f7c1dd2e05159666b3bf8bc7a8a3a9eb1d518969eab529dd9b88c1a"
    ),
    uncles_hash=decode_hex(
        "0x1dcc4de8dec75d7aab85b567b6ccd41ad312451b948a7413f0a142fd40d49347"
    ),
    state_root=decode_hex(
        "0x5d6cded585e73c4e322c30c2f782a336316f17dd85a4863b9d838d2d4b8b3008"
    ),
    transaction_root=decode_hex(
        "0x56e81f171bcc55a6ff8345e692c0f86e5b48e01b996cadc001622fb5e363b421"
    ),
    receipt_root=decode_hex(
        "0x56e81f171bcc55a6ff8345e692c0f86e5b48e01b996cadc001622fb5e363b421"
    ),
    bloom=0,
    gas_used=0,
    extra_data=decode_hex(
        "0x506172697479205465636820417574686f7269747900000000000000000000002bbf886181970654ed46e3fae0ded41ee53fec702c47431988a7ae80e6576f3552684f069af80ba11d36327aaf846d470526e4a1c461601b2fd4ebdcdc2b734a01"  # noqa: E501
    ),
    mix_hash=decode_hex(
        "0x0000000000000000000000000000000000000000000000000000000000000000"
    ),
    nonce=decode_hex("0x0000000000000000"),
)


GOERLI_HEADER_TWO = BlockHeader(
    difficulty=2,
    block_number=2,
    gas_limit=10465292,
    timestamp=1548947468,
    coinbase=decode_hex("0x0000000000000000000000000000000000000000"),
    parent_hash=decode_hex(
        "0x8f5bab218b6bb34476f51ca588e9f4553a3a7ce5e13a66c660a5283e97e9a85a"
    ),
    uncles_hash=decode_hex(
        "0x1dcc4de8dec75d7aab85b567b6ccd41ad312451b948a7413f0a142fd40d49347"
    ),
    state_root=decode_hex(
        "0x5d6cded585e73c4e322c30c2f782a336316f17dd85a4863b9d838d2d4b8b3008"
    ),
    transaction_root=decode_hex(
        "0x56e81f171bcc55a6ff8345e692c0f86e5b48e01b996cadc001622fb5e363b421"
    ),
    receipt_root=decode_hex(
        "0x56e81f171bcc55a6ff8345e692c0f86e5b48e01b996cadc001622fb5e363b421"
    ),
    bloom=0,
    gas_used=0,
    extra_data=decode_hex(
        "0x506172697479205465636820417574686f726974790000000000000000000000fdd66d441eff7d4116fe987f0f10812fc68b06cc500ff71c492234b9a7b8b2f45597190d97cd85f6daa45ac9518bef9f715f4bd414504b1a21d8c681654055df00"  # noqa: E501
    ),
    mix_hash=decode_hex(
        "0x0000000000000000000000000000000000000000000000000000000000000000"
    ),
    nonce=decode_hex("0x0000000000000000"),
)


GOERLI_HEADER_5288_VOTE_IN = BlockHeader(
    difficulty=1,
    block_number=5288,
    gas_limit=8000000,
    timestamp=1549029298,
    # The signer we vote for
    coinbase=decode_hex("0xa8e8f14732658e4b51e8711931053a8a69baf2b1"),
    parent_hash=decode_hex(
        "0xd785b7ab9906d8dcf8ff76edeca0b17aa8b24e7ee099712213c3cf073cdf9eec"
    ),
    uncles_hash=decode_hex(
        "0x1dcc4de8dec75d7aab85b567b6ccd41ad312451b948a7413f0a142fd40d49347"
    ),
    state_root=decode_hex(
        "0x5d6cded585e73c4e322c30c2f782a336316f17dd85a4863b9d838d2d4b8b3008"
    ),
    transaction_root=decode_hex(
        "0x56e81f171bcc55a6ff8345e692c0f86e5b48e01b996cadc001622fb5e363b421"
    ),
    receipt_root=decode_hex(
        "0x56e81f171bcc55a6ff8345e692c0f86e5b48e01b996cadc001622fb5e363b421"
    ),
    bloom=0,
    gas_used=0,
    extra_data=decode_hex(
        "0x506172697479205465636820417574686f726974790000000000000000000000540dd3d15669fa6158287d898f6a7b47091d25251ace9581ad593d6008e272201bcf1cca1e60d826336b3622b3a5638d92a0e156df97c49051657ecd54e62af801"  # noqa: E501
    ),
    mix_hash=decode_hex(
        "0x0000000000000000000000000000000000000000000000000000000000000000"
    ),
    # Vote in favor
    nonce=decode_hex("0xffffffffffffffff"),
)


UNSIGNED_HEADER = GOERLI_HEADER_ONE.copy(
    extra_data=VANITY_LENGTH * b"0" + SIGNATURE_LENGTH * b"0"
)

GOERLI_HEADER_KICK = GOERLI_HEADER_5288_VOTE_IN.copy(nonce=NONCE_DROP)


@pytest.mark.parametrize(
    "header, expected_signer",
    (
        (GOERLI_HEADER_ONE, GOERLI_GENESIS_ALLOWED_SIGNER),
        (GOERLI_HEADER_TWO, GOERLI_GENESIS_ALLOWED_SIGNER),
        (GOERLI_HEADER_5288_VOTE_IN, GOERLI_GENESIS_ALLOWED_SIGNER),
    ),
)
def test_get_signer(header, expected_signer):
    signer = get_block_signer(header)
    assert signer == expected_signer


def test_signature_hash_strips_the_seal():
    unsealed = GOERLI_HEADER_ONE.copy(
        extra_data=GOERLI_HEADER_ONE.extra_data[:-SIGNATURE_LENGTH]
    )
    assert get_signature_hash(GOERLI_HEADER_ONE) == unsealed.hash
    assert get_signature_hash(GOERLI_HEADER_ONE) != GOERLI_HEADER_ONE.hash


def test_signature_hash_ignores_the_seal_contents():
    resealed = GOERLI_HEADER_ONE.copy(
        extra_data=GOERLI_HEADER_ONE.extra_data[:-SIGNATURE_LENGTH]
        + b"\x01" * SIGNATURE_LENGTH
    )
    assert get_signature_hash(resealed) == get_signature_hash(GOERLI_HEADER_ONE)


@pytest.mark.parametrize("extra_data_length", (0, 32, SIGNATURE_LENGTH - 1))
def test_missing_signature_suffix(extra_data_length):
    header = GOERLI_HEADER_ONE.copy(extra_data=b"\x00" * extra_data_length)

    with pytest.raises(MissingSignatureSuffix):
        get_signature_hash(header)
    with pytest.raises(MissingSignatureSuffix):
        get_block_signer(header)


def test_seal_without_vanity_is_accepted():
    header = GOERLI_HEADER_ONE.copy(extra_data=b"\x00" * SIGNATURE_LENGTH)
    signed_header = sign_block_header(header, ALICE_PK)

    assert len(signed_header.extra_data) == SIGNATURE_LENGTH
    assert get_block_signer(signed_header) == ALICE


def test_invalid_seal():
    # recovery id 2 is out of range
    header = GOERLI_HEADER_ONE.copy(
        extra_data=GOERLI_HEADER_ONE.extra_data[:-1] + b"\x02"
    )
    with pytest.raises(InvalidSignatureValues):
        get_block_signer(header)


@pytest.mark.parametrize(
    "header, signer",
    (
        (GOERLI_HEADER_ONE, BOB_PK),
        (GOERLI_HEADER_TWO, ALICE_PK),
        (UNSIGNED_HEADER, BOB_PK),
    ),
)
def test_can_sign_header(header, signer):
    signed_header = sign_block_header(header, signer)

    assert get_block_signer(signed_header) == signer.public_key.to_canonical_address()
    assert signed_header.extra_data[:VANITY_LENGTH] == header.extra_data[:VANITY_LENGTH]
    assert len(signed_header.extra_data) == len(header.extra_data)


def test_london_header_signer():
    header = LondonBlockHeader(*UNSIGNED_HEADER, 7)
    signed_header = sign_block_header(header, ALICE_PK)

    assert signed_header.base_fee_per_gas == 7
    assert get_block_signer(signed_header) == ALICE
    # the base fee is part of the signed fields
    assert get_signature_hash(header) != get_signature_hash(UNSIGNED_HEADER)

    with pytest.raises(AttributeError):
        UNSIGNED_HEADER.base_fee_per_gas


@pytest.mark.parametrize(
    "header, header_class",
    (
        (GOERLI_HEADER_ONE, BlockHeader),
        (LondonBlockHeader(*GOERLI_HEADER_ONE, 1000000000), LondonBlockHeader),
    ),
)
def test_decode_block_header(header, header_class):
    decoded = decode_block_header(rlp.encode(header))

    assert type(decoded) is header_class
    assert decoded == header
    assert decoded.hash == header.hash


def _header_items_with(index, value):
    items = rlp.decode(rlp.encode(GOERLI_HEADER_ONE))
    items[index] = value
    return rlp.encode(items)


@pytest.mark.parametrize(
    "encoded",
    (
        b"",
        b"\x83abc",
        b"\xc3\x80\x80\x80",
        rlp.encode(GOERLI_HEADER_ONE) + b"\x00",
        # mix_hash is 31 bytes
        _header_items_with(13, b"\x01" * 31),
        # parent_hash is empty
        _header_items_with(0, b""),
    ),
)
def test_decode_malformed_block_header(encoded):
    with pytest.raises(MalformedEncoding):
        decode_block_header(encoded)


def test_decode_truncated_block_header():
    with pytest.raises(TruncatedField):
        decode_block_header(rlp.encode(GOERLI_HEADER_ONE)[:-1])


@pytest.mark.parametrize(
    "header, expected",
    (
        (GOERLI_HEADER_ONE, None),
        (GOERLI_HEADER_TWO, None),
        (GOERLI_HEADER_5288_VOTE_IN, VoteAction.NOMINATE),
        (GOERLI_HEADER_KICK, VoteAction.KICK),
        (GOERLI_HEADER_5288_VOTE_IN.copy(nonce=b"\x00" * 7 + b"\x01"), None),
    ),
)
def test_get_vote_action(header, expected):
    assert get_vote_action(header) is expected
