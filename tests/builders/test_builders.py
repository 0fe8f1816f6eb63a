"""
End-to-end builder tests.

Collaborators are ``unittest.mock.Mock`` instances so every test checks
both what was built and what the builder asked for.
"""

from unittest.mock import MagicMock, Mock

import pytest

from helpers import HASH160_ONE, KEY_ONE, KEY_TWO, PUBKEY_ONE, ZERO_MAINNET_ADDRESS, mk_unsigned_transfer

from funai_transactions.clarity import uint_cv
from funai_transactions.codec import c32_address, hash160
from funai_transactions.enums import (
    AddressHashMode,
    AddressVersion,
    ClarityVersion,
    FungibleConditionCode,
    PostConditionMode,
)
from funai_transactions.network import FUNAI_TESTNET
from funai_transactions.runtime.errors import (
    ErrorCode,
    FunaiError,
    InvalidIdentifierError,
    SigningError,
    UnsupportedMultiSigError,
    ValueTooLongError,
)
from funai_transactions.signers import TransactionSigner
from funai_transactions.tx.authorization import address_hash_from_public_keys
from funai_transactions.tx.builders import (
    ContractCallOptions,
    ContractDeployOptions,
    InferOptions,
    MultiSigOrigin,
    MultiSigSigner,
    RegisterModelOptions,
    SingleSigOrigin,
    SingleSigSigner,
    SponsorOptions,
    TokenTransferOptions,
    make_contract_call,
    make_contract_deploy,
    make_infer,
    make_register_model,
    make_token_transfer,
    make_unsigned_infer,
    make_unsigned_register_model,
    make_unsigned_token_transfer,
    sponsor_transaction,
)
from funai_transactions.tx.payload import (
    InferPayload,
    RegisterModelPayload,
    SmartContractPayload,
    VersionedSmartContractPayload,
)
from funai_transactions.tx.postconditions import make_standard_stx_post_condition
from funai_transactions.tx.transaction import Transaction

ORIGIN_ADDRESS = c32_address(AddressVersion.MAINNET_SINGLE_SIG, bytes.fromhex(HASH160_ONE))


def transfer_options(**overrides):
    values = {"recipient": ZERO_MAINNET_ADDRESS, "amount": 12345, "fee": 0, "nonce": 0}
    values.update(overrides)
    return TokenTransferOptions(**values)


class TestTokenTransfer:
    def test_signed_transfer_verifies(self, no_network):
        tx = make_token_transfer(transfer_options(fee=200, nonce=3, memo="rent"), SingleSigSigner(KEY_ONE),
                                 fee_estimator=no_network[0], nonce_lookup=no_network[1])
        assert tx.auth.spending_condition.fee == 200
        assert tx.auth.spending_condition.nonce == 3
        assert tx.payload.memo.content == "rent"
        tx.verify_origin()

    def test_signed_transfer_survives_wire(self, no_network):
        estimator, lookup = no_network
        tx = make_token_transfer(transfer_options(), SingleSigSigner(KEY_ONE), "mainnet", estimator, lookup)
        parsed = Transaction.deserialize(tx.serialize())
        assert parsed.txid() == tx.txid()
        parsed.verify_origin()

    def test_explicit_zero_fee_and_nonce_are_kept(self, no_network):
        tx = make_unsigned_token_transfer(transfer_options(fee=0, nonce=0), SingleSigOrigin(PUBKEY_ONE),
                                          fee_estimator=no_network[0], nonce_lookup=no_network[1])
        assert tx.auth.spending_condition.fee == 0
        assert tx.auth.spending_condition.nonce == 0

    def test_omitted_fee_and_nonce_are_fetched(self):
        estimator = Mock(return_value=180)
        lookup = Mock(return_value=7)
        tx = make_unsigned_token_transfer(transfer_options(fee=None, nonce=None), SingleSigOrigin(PUBKEY_ONE),
                                          fee_estimator=estimator, nonce_lookup=lookup)

        assert tx.auth.spending_condition.fee == 180
        assert tx.auth.spending_condition.nonce == 7
        lookup.assert_called_once_with(ORIGIN_ADDRESS)
        length, payload = estimator.call_args[0]
        assert length == len(tx.serialize())
        assert payload[0] == 0x00

    def test_only_missing_value_is_fetched(self):
        estimator = Mock(return_value=1)
        lookup = Mock(return_value=9)
        tx = make_unsigned_token_transfer(transfer_options(fee=50, nonce=None), SingleSigOrigin(PUBKEY_ONE),
                                          fee_estimator=estimator, nonce_lookup=lookup)
        estimator.assert_not_called()
        assert tx.auth.spending_condition.fee == 50
        assert tx.auth.spending_condition.nonce == 9

    def test_testnet_nonce_address(self):
        lookup = Mock(return_value=0)
        make_unsigned_token_transfer(transfer_options(nonce=None), SingleSigOrigin(PUBKEY_ONE), FUNAI_TESTNET,
                                     nonce_lookup=lookup)
        address = lookup.call_args[0][0]
        assert address.startswith("ST")

    def test_default_client_is_used_and_closed(self, monkeypatch):
        client = MagicMock()
        client.estimate_fee.return_value = 300
        client.get_nonce.return_value = 4
        factory = Mock(return_value=client)
        monkeypatch.setattr("funai_transactions.tx.builders.base.FunaiNodeClient.from_network", factory)

        tx = make_unsigned_token_transfer(transfer_options(fee=None, nonce=None), SingleSigOrigin(PUBKEY_ONE),
                                          "testnet")

        factory.assert_called_once_with(FUNAI_TESTNET)
        client.close.assert_called_once()
        assert tx.auth.spending_condition.fee == 300
        assert tx.auth.spending_condition.nonce == 4

    def test_memo_too_long(self, no_network):
        with pytest.raises(ValueTooLongError):
            make_unsigned_token_transfer(transfer_options(memo="x" * 35), SingleSigOrigin(PUBKEY_ONE),
                                         fee_estimator=no_network[0], nonce_lookup=no_network[1])

    def test_p2wpkh_origin(self, no_network):
        tx = make_token_transfer(transfer_options(), SingleSigSigner(KEY_ONE, AddressHashMode.P2WPKH),
                                 fee_estimator=no_network[0], nonce_lookup=no_network[1])
        assert tx.auth.spending_condition.hash_mode == AddressHashMode.P2WPKH
        tx.verify_origin()

    def test_multisig_nonce_address_uses_multisig_version(self, key_one, key_two):
        lookup = Mock(return_value=0)
        keys = [key_one.public_key_bytes, key_two.public_key_bytes]
        make_unsigned_token_transfer(transfer_options(nonce=None), MultiSigOrigin(keys, 2), nonce_lookup=lookup)
        expected = c32_address(AddressVersion.MAINNET_MULTI_SIG,
                               address_hash_from_public_keys(AddressHashMode.P2SH, 2, keys))
        lookup.assert_called_once_with(expected)


class TestContractCall:
    def test_two_of_two_contract_call(self, key_one, key_two, no_network):
        options = ContractCallOptions(
            contract_address=ZERO_MAINNET_ADDRESS,
            contract_name="kv-store",
            function_name="set-value",
            function_args=[uint_cv(1)],
            fee=0,
            nonce=0,
        )
        signer = MultiSigSigner([key_one.public_key_bytes, key_two.public_key_bytes], 2, [KEY_ONE, KEY_TWO])
        tx = make_contract_call(options, signer, fee_estimator=no_network[0], nonce_lookup=no_network[1])

        condition = tx.auth.spending_condition
        assert condition.signature_count == 2
        assert tx.payload.function_args == (uint_cv(1),)
        tx.verify_origin()

    def test_camel_case_options(self):
        options = ContractCallOptions(**{
            "contractAddress": ZERO_MAINNET_ADDRESS,
            "contractName": "kv-store",
            "functionName": "get-value",
            "postConditionMode": PostConditionMode.ALLOW,
        })
        assert options.function_name == "get-value"
        assert options.post_condition_mode == PostConditionMode.ALLOW
        assert options.fee is None

    def test_bad_function_name(self, no_network):
        options = ContractCallOptions(contract_address=ZERO_MAINNET_ADDRESS, contract_name="kv-store",
                                      function_name="1bad", fee=0, nonce=0)
        with pytest.raises(InvalidIdentifierError):
            make_contract_call(options, SingleSigSigner(KEY_ONE), fee_estimator=no_network[0],
                               nonce_lookup=no_network[1])


class TestContractDeploy:
    def test_deploy_with_post_conditions(self, no_network):
        condition = make_standard_stx_post_condition(ORIGIN_ADDRESS, FungibleConditionCode.LESS_EQUAL, 1000)
        options = ContractDeployOptions(contract_name="counter", code_body="(define-data-var n int 0)",
                                        post_conditions=[condition], fee=0, nonce=0)
        tx = make_contract_deploy(options, SingleSigSigner(KEY_ONE), fee_estimator=no_network[0],
                                  nonce_lookup=no_network[1])

        assert isinstance(tx.payload, SmartContractPayload)
        assert tx.post_conditions == [condition]
        assert tx.post_condition_mode == PostConditionMode.DENY
        assert Transaction.deserialize(tx.serialize()).post_conditions == [condition]
        tx.verify_origin()

    def test_versioned_deploy(self, no_network):
        options = ContractDeployOptions(contract_name="counter", code_body="(+ 1 2)",
                                        clarity_version=ClarityVersion.CLARITY2, fee=0, nonce=0)
        tx = make_contract_deploy(options, SingleSigSigner(KEY_ONE), fee_estimator=no_network[0],
                                  nonce_lookup=no_network[1])
        assert isinstance(tx.payload, VersionedSmartContractPayload)
        assert tx.payload.clarity_version == ClarityVersion.CLARITY2


class TestInference:
    def infer_options(self, **overrides):
        values = {
            "infer_user_address": ORIGIN_ADDRESS,
            "amount": 10,
            "user_input": "What is the capital of France?",
            "context": "geography",
            "model_name": "llama-3-8b",
            "fee": 0,
            "nonce": 0,
        }
        values.update(overrides)
        return InferOptions(**values)

    def test_infer(self, no_network):
        tx = make_infer(self.infer_options(), SingleSigSigner(KEY_ONE), fee_estimator=no_network[0],
                        nonce_lookup=no_network[1])
        assert isinstance(tx.payload, InferPayload)
        assert tx.payload.user_input.content == "What is the capital of France?"
        assert tx.payload.node_principal.address.hash160 == bytes(20)
        tx.verify_origin()

    def test_multisig_infer_rejected_before_anything_runs(self, key_one, key_two, no_network):
        keys = [key_one.public_key_bytes, key_two.public_key_bytes]
        with pytest.raises(UnsupportedMultiSigError) as exc_info:
            make_unsigned_infer(self.infer_options(fee=None, nonce=None), MultiSigOrigin(keys, 2),
                                fee_estimator=no_network[0], nonce_lookup=no_network[1])
        assert exc_info.value.code == ErrorCode.UNSUPPORTED_MULTISIG

        with pytest.raises(UnsupportedMultiSigError):
            make_infer(self.infer_options(), MultiSigSigner(keys, 2, [KEY_ONE, KEY_TWO]),
                       fee_estimator=no_network[0], nonce_lookup=no_network[1])

    def test_infer_input_too_long(self, no_network):
        with pytest.raises(ValueTooLongError):
            make_unsigned_infer(self.infer_options(user_input="é" * 70000), SingleSigOrigin(PUBKEY_ONE),
                                fee_estimator=no_network[0], nonce_lookup=no_network[1])

    def test_register_model(self, no_network):
        options = RegisterModelOptions(model_name="llama-3-8b", model_params='{"temperature": 0.7}', fee=0, nonce=0)
        tx = make_register_model(options, SingleSigSigner(KEY_ONE), fee_estimator=no_network[0],
                                 nonce_lookup=no_network[1])
        assert isinstance(tx.payload, RegisterModelPayload)
        assert Transaction.deserialize(tx.serialize_hex()).payload == tx.payload
        tx.verify_origin()

    def test_multisig_register_model_rejected(self, key_one, no_network):
        with pytest.raises(UnsupportedMultiSigError):
            make_unsigned_register_model(RegisterModelOptions(model_name="m", model_params="{}"),
                                         MultiSigOrigin([key_one.public_key_bytes], 1),
                                         fee_estimator=no_network[0], nonce_lookup=no_network[1])


class TestSponsor:
    def origin_signed(self, key_one):
        tx = mk_unsigned_transfer(sponsored=True, fee=0)
        TransactionSigner(tx).sign_origin(key_one)
        return tx

    def test_sponsor_with_explicit_fee_and_nonce(self, key_one, key_two, no_network):
        tx = self.origin_signed(key_one)
        sponsored = sponsor_transaction(
            SponsorOptions(transaction=tx, sponsor_private_key=KEY_TWO, fee=900, sponsor_nonce=2),
            fee_estimator=no_network[0], nonce_lookup=no_network[1],
        )

        sponsor = sponsored.auth.sponsor_spending_condition
        assert sponsor.fee == 900
        assert sponsor.nonce == 2
        assert sponsor.signer == hash160(key_two.public_key_bytes)
        sponsored.verify_sponsor()

    def test_input_left_untouched(self, key_one, no_network):
        tx = self.origin_signed(key_one)
        before = tx.serialize()
        sponsor_transaction(SponsorOptions(transaction=tx, sponsorPrivateKey=KEY_TWO, fee=1, sponsorNonce=0),
                            fee_estimator=no_network[0], nonce_lookup=no_network[1])
        assert tx.serialize() == before

    def test_sponsor_fee_and_nonce_fetched(self, key_one, key_two):
        tx = self.origin_signed(key_one)
        estimator = Mock(return_value=640)
        lookup = Mock(return_value=11)
        sponsored = sponsor_transaction(SponsorOptions(transaction=tx, sponsor_private_key=KEY_TWO),
                                        fee_estimator=estimator, nonce_lookup=lookup)

        lookup.assert_called_once_with(c32_address(AddressVersion.MAINNET_SINGLE_SIG,
                                                   hash160(key_two.public_key_bytes)))
        assert sponsored.auth.sponsor_spending_condition.fee == 640
        assert sponsored.auth.sponsor_spending_condition.nonce == 11
        sponsored.verify_sponsor()

    def test_testnet_transaction_uses_testnet_sponsor_address(self, key_one, key_two, no_network):
        tx = mk_unsigned_transfer(sponsored=True, fee=0, network=FUNAI_TESTNET)
        TransactionSigner(tx).sign_origin(key_one)
        lookup = Mock(return_value=0)
        sponsored = sponsor_transaction(SponsorOptions(transaction=tx, sponsor_private_key=KEY_TWO, fee=1),
                                        fee_estimator=no_network[0], nonce_lookup=lookup)

        address = c32_address(AddressVersion.TESTNET_SINGLE_SIG, hash160(key_two.public_key_bytes))
        assert address.startswith("ST")
        lookup.assert_called_once_with(address)
        sponsored.verify_sponsor()

    def test_explicit_network_overrides_transaction(self, key_one, key_two, no_network):
        tx = mk_unsigned_transfer(sponsored=True, fee=0, network=FUNAI_TESTNET)
        TransactionSigner(tx).sign_origin(key_one)
        lookup = Mock(return_value=0)
        sponsor_transaction(SponsorOptions(transaction=tx, sponsor_private_key=KEY_TWO, fee=1), "mainnet",
                            fee_estimator=no_network[0], nonce_lookup=lookup)

        lookup.assert_called_once_with(c32_address(AddressVersion.MAINNET_SINGLE_SIG,
                                                   hash160(key_two.public_key_bytes)))

    def test_unpriceable_payload_needs_fee(self, key_one, no_network):
        options = RegisterModelOptions(model_name="m", model_params="{}", fee=0, nonce=0, sponsored=True)
        tx = make_register_model(options, SingleSigSigner(KEY_ONE), fee_estimator=no_network[0],
                                 nonce_lookup=no_network[1])
        with pytest.raises(FunaiError) as exc_info:
            sponsor_transaction(SponsorOptions(transaction=tx, sponsor_private_key=KEY_TWO, sponsor_nonce=0),
                                fee_estimator=no_network[0], nonce_lookup=no_network[1])
        assert exc_info.value.code == ErrorCode.UNSUPPORTED_PAYLOAD

        sponsored = sponsor_transaction(
            SponsorOptions(transaction=tx, sponsor_private_key=KEY_TWO, fee=5, sponsor_nonce=0),
            fee_estimator=no_network[0], nonce_lookup=no_network[1],
        )
        sponsored.verify_sponsor()

    def test_standard_transaction_cannot_be_sponsored(self, key_one, no_network):
        tx = mk_unsigned_transfer()
        TransactionSigner(tx).sign_origin(key_one)
        with pytest.raises(SigningError):
            sponsor_transaction(SponsorOptions(transaction=tx, sponsor_private_key=KEY_TWO, fee=1, sponsor_nonce=0),
                                fee_estimator=no_network[0], nonce_lookup=no_network[1])
