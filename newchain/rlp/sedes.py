from rlp.sedes import (
    BigEndianInt,
    Binary,
    CountableList,
    List,
    big_endian_int,
    binary,
)


address = Binary.fixed_length(20, allow_empty=True)
hash32 = Binary.fixed_length(32)
trie_root = Binary.fixed_length(32, allow_empty=True)
block_nonce = Binary(8, allow_empty=True)

# BigEndianInt takes a length in bytes
storage_key = BigEndianInt(32)
bloom = BigEndianInt(256)

account_accesses = List([address, CountableList(storage_key)])
access_list = CountableList(account_accesses)


#
# Field lists that are hashed for signing, but never decoded
#
legacy_signing_fields = List([
    big_endian_int,  # nonce
    big_endian_int,  # gas_price
    big_endian_int,  # gas
    address,  # to
    big_endian_int,  # value
    binary,  # data
])

eip155_signing_fields = List([
    big_endian_int,  # nonce
    big_endian_int,  # gas_price
    big_endian_int,  # gas
    address,  # to
    big_endian_int,  # value
    binary,  # data
    big_endian_int,  # chain_id
    big_endian_int,  # always 0
    big_endian_int,  # always 0
])

access_list_signing_fields = List([
    big_endian_int,  # chain_id
    big_endian_int,  # nonce
    big_endian_int,  # gas_price
    big_endian_int,  # gas
    address,  # to
    big_endian_int,  # value
    binary,  # data
    access_list,
])

dynamic_fee_signing_fields = List([
    big_endian_int,  # chain_id
    big_endian_int,  # nonce
    big_endian_int,  # max_priority_fee_per_gas
    big_endian_int,  # max_fee_per_gas
    big_endian_int,  # gas
    address,  # to
    big_endian_int,  # value
    binary,  # data
    access_list,
])
