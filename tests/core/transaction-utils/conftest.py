import pytest

# from https://github.com/ethereum/tests/blob/c951a3c105d600ccd8f1c3fc87856b2bcca3df0a/BasicTests/txtest.json  # noqa: E501
TRANSACTION_FIXTURES = [
    {
        "chainId": None,
        "key": "c85ef7d79691fe79573b1a7064c19c1a9819ebdbd1faaab1a8ec92344438aaf4",
        "nonce": 0,
        "gasPrice": 1000000000000,
        "gas": 10000,
        "to": "13978aee95f38490e9769c39b2773ed763d9cd5f",
        "value": 10000000000000000,
        "data": "",
        "low_s": True,
        "signed": "f86b8085e8d4a510008227109413978aee95f38490e9769c39b2773ed763d9cd5f872386f26fc10000801ba0eab47c1a49bf2fe5d40e01d313900e19ca485867d462fe06e139e3a536c6d4f4a014a569d327dcda4b29f74f93c0e9729d2f49ad726e703f9cd90dbb0fbf6649f1",  # noqa: E501
    },
    {
        "chainId": None,
        "key": "c87f65ff3f271bf5dc8643484f66b200109caffe4bf98c4cb393dc35740b28c0",
        "nonce": 0,
        "gasPrice": 1000000000000,
        "gas": 10000,
        "to": "",
        "value": 0,
        "data": "6025515b525b600a37f260003556601b596020356000355760015b525b54602052f260255860005b525b54602052f2",  # noqa: E501
        # signed before Homestead, s is in the upper half of the curve
        "low_s": False,
        "signed": "f87f8085e8d4a510008227108080af6025515b525b600a37f260003556601b596020356000355760015b525b54602052f260255860005b525b54602052f21ba05afed0244d0da90b67cf8979b0f246432a5112c0d31e8d5eedd2bc17b171c694a0bb1035c834677c2e1185b8dc90ca6d1fa585ab3d7ef23707e1a497a98e752d1b",  # noqa: E501
    },
    {
        "chainId": 1,
        "key": "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318",
        "nonce": 0,
        "gasPrice": 234567897654321,
        "gas": 2000000,
        "to": "0xF0109fC8DF283027b6285cc889F5aA624EaC1F55",
        "value": 1000000000,
        "data": "",
        "low_s": True,
        "signed": "0xf86a8086d55698372431831e848094f0109fc8df283027b6285cc889f5aa624eac1f55843b9aca008025a009ebb6ca057a0535d6186462bc0b465b561c94a295bdb0621fc19208ab149a9ca0440ffd775ce91a833ab410777204d5341a6f9fa91216a6f3ee2c051fea6a0428",  # noqa: E501
    },
]

# from https://eips.ethereum.org/EIPS/eip-155
EIP155_FIXTURE = {
    "chainId": 1,
    "key": "0x4646464646464646464646464646464646464646464646464646464646464646",
    "sender": "0x9d8A62f656a8d1615C1294fd71e9CFb3E4855A4F",
    "nonce": 9,
    "gasPrice": 20 * 10**9,
    "gas": 21000,
    "to": "0x3535353535353535353535353535353535353535",
    "value": 10**18,
    "data": "",
    "for_signing": "0xec098504a817c800825208943535353535353535353535353535353535353535880de0b6b3a764000080018080",  # noqa: E501
    "signing_hash": "0xdaf5a779ae972f972197303d7b574746c7ef83eadac0f2791ad23db92e4c8e53",  # noqa: E501
    "v": 37,
    "r": 18515461264373351373200002665853028612451056578545711640558177340181847433846,  # noqa: E501
    "s": 46948507304638947509940763649030358759909902576025900602547168820602576006531,  # noqa: E501
    "signed": "0xf86c098504a817c800825208943535353535353535353535353535353535353535880de0b6b3a76400008025a028ef61340bd939bc2195fe537567866003e1a15d3c71ff63e1590620aa636276a067cbe9d8997f761aecb703304b3800ccf555c9f3dc64214b297fb1966a3b6d83",  # noqa: E501
}

# Hand-built for 2930
TYPED_TRANSACTION_FIXTURES = [
    {
        "chainId": 1,
        "nonce": 3,
        "gasPrice": 1,
        "gas": 25000,
        "to": "b94f5374fce5edbc8e2a8697c15331677e6ebf0b",
        "value": 10,
        "data": "5544",
        "access_list": [
            [b"\xf0" * 20, [b"\0" * 32, b"\xff" * 32]],
        ],
        "key": (b"\0" * 31) + b"\x01",
        "sender": b"~_ER\t\x1ai\x12]]\xfc\xb7\xb8\xc2e\x90)9[\xdf",
        "for_signing": "01f87a0103018261a894b94f5374fce5edbc8e2a8697c15331677e6ebf0b0a825544f85994f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f842a00000000000000000000000000000000000000000000000000000000000000000a0ffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffff",  # noqa: E501
        "signed": "01f8bf0103018261a894b94f5374fce5edbc8e2a8697c15331677e6ebf0b0a825544f85bf85994f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f842a00000000000000000000000000000000000000000000000000000000000000000a0ffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffff80a017047e844eef895a876778a828731a33b67863aea7b9591a0001651ee47322faa043b4d0e8d59e8663c813ffa1bb99f020278a139f07c47f3858653071b3cec6b3",  # noqa: E501
        "hash": "13ab8b6371d8873405db20104705d7fecee2f9083f247250519e4b4c568b17fb",
    }
]

@pytest.fixture(params=range(len(TRANSACTION_FIXTURES)))
def txn_fixture(request):
    return TRANSACTION_FIXTURES[request.param]

@pytest.fixture(params=range(len(TYPED_TRANSACTION_FIXTURES)))
def typed_txn_fixture(request):
    return TYPED_TRANSACTION_FIXTURES[request.param]

@pytest.fixture
def eip155_fixture():
    return EIP155_FIXTURE



# Hand-encoded from the EIP-1559 field order, each field holds a distinct value
DYNAMIC_FEE_FIXTURES = [
    {
        "chainId": 1007,
        "nonce": 5,
        "maxPriorityFeePerGas": 6,
        "maxFeePerGas": 7,
        "gas": 21000,
        "to": b"\x35" * 20,
        "value": 8,
        "data": b"\x09",
        "access_list": (),
        "for_signing": "02e1" "8203ef" "05" "06" "07" "825208" "94" + "35" * 20 + "08" "09" "c0",  # noqa: E501
        # y_parity=1, r=0x11, s=0x12
        "signed": "02e4" "8203ef" "05" "06" "07" "825208" "94" + "35" * 20 + "08" "09" "c0" "01" "11" "12",  # noqa: E501
    },
    {
        "chainId": 1007,
        "nonce": 5,
        "maxPriorityFeePerGas": 6,
        "maxFeePerGas": 7,
        "gas": 21000,
        "to": b"\x35" * 20,
        "value": 8,
        "data": b"\x09",
        "access_list": ((b"\x0b" * 20, (10,)),),
        "for_signing": (
            "02f85a" "8203ef" "05" "06" "07" "825208" "94" + "35" * 20 + "08" "09"
            "f838" "f7" "94" + "0b" * 20 + "e1" "a0" + "00" * 31 + "0a"
        ),
        "signed": (
            "02f85d" "8203ef" "05" "06" "07" "825208" "94" + "35" * 20 + "08" "09"
            "f838" "f7" "94" + "0b" * 20 + "e1" "a0" + "00" * 31 + "0a" "01" "11" "12"
        ),
    },
]


@pytest.fixture(params=range(len(DYNAMIC_FEE_FIXTURES)))
def dynamic_fee_fixture(request):
    return DYNAMIC_FEE_FIXTURES[request.param]
