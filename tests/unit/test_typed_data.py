"""Тесты для EIP-712 хэширования ордеров.

Coverage:
- Совместимость с eth_account.encode_typed_data (eth_signTypedData_v4)
- Чувствительность digest к каждому полю, nonce и domain
- Sign → recover
"""

import pytest
from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_utils import keccak

from src.core.domain.order import Signature
from src.core.signing.typed_data import (
    DOMAIN_TYPEHASH,
    ORDER_TYPE,
    ORDER_TYPEHASH,
    SigningDomain,
    order_digest,
    order_signable_message,
    order_struct_hash,
    order_typed_data,
    recover_signer,
)
from tests.factories import ONE, TOKEN_Z, VERIFYING_CONTRACT


class TestTypeHashes:
    def test_order_typehash(self):
        assert ORDER_TYPEHASH == keccak(text=ORDER_TYPE)
        assert ORDER_TYPE.startswith("Order(address borrower,address tokenIn")
        assert ORDER_TYPE.endswith("uint256 triggerPrice,uint256 nonce)")

    def test_domain_typehash(self):
        assert DOMAIN_TYPEHASH == keccak(
            text="EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
        )

    def test_default_domain_name_and_version(self, domain):
        assert domain.name == "LimitOrderBot"
        assert domain.version == "1"


class TestTypedDataCompatibility:
    """Layout совпадает побайтно со стандартным tooling."""

    def test_matches_encode_typed_data(self, make_order, domain):
        order = make_order(trigger_price=3 * ONE)

        expected = encode_typed_data(full_message=order_typed_data(order, 7, domain))
        actual = order_signable_message(order, 7, domain)

        assert actual.header == expected.header == domain.separator()
        assert actual.body == expected.body == order_struct_hash(order, 7)

    def test_standard_signature_recovers(self, make_order, domain, borrower_account, borrower):
        """Подпись через eth_signTypedData_v4 tooling проходит recovery."""
        order = make_order()
        message = encode_typed_data(full_message=order_typed_data(order, 0, domain))
        signed = Account.sign_message(message, borrower_account.key)

        signature = Signature(v=signed.v, r=signed.r, s=signed.s)
        assert recover_signer(order, 0, signature, domain) == borrower


class TestDigestSensitivity:
    @pytest.mark.parametrize(
        "field,value",
        [
            ("token_in", TOKEN_Z),
            ("token_out", TOKEN_Z),
            ("amount_in", 1),
            ("min_price", 1),
            ("trigger_price", 1),
        ],
    )
    def test_every_field_changes_digest(self, make_order, domain, field, value):
        order = make_order()
        changed = order.model_copy(update={field: value})

        assert order_digest(order, 0, domain) != order_digest(changed, 0, domain)

    def test_nonce_changes_digest(self, make_order, domain):
        order = make_order()
        assert order_digest(order, 0, domain) != order_digest(order, 1, domain)

    def test_domain_changes_digest(self, make_order, domain):
        order = make_order()
        other_chain = SigningDomain(chain_id=10, verifying_contract=VERIFYING_CONTRACT)

        assert order_digest(order, 0, domain) != order_digest(order, 0, other_chain)


class TestSignRecover:
    def test_recover_signer(self, make_order, domain, sign, borrower):
        order = make_order()
        assert recover_signer(order, 0, sign(order), domain) == borrower

    def test_recover_with_wrong_nonce_gives_other_address(self, make_order, domain, sign, borrower):
        order = make_order()
        assert recover_signer(order, 1, sign(order, nonce=0), domain) != borrower

    def test_signature_bytes_roundtrip(self, make_order, sign):
        signature = sign(make_order())
        assert Signature.from_bytes(signature.to_bytes()) == signature
