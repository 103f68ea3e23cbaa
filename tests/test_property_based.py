"""
Property-based tests for transaction signing.

These tests verify that signing properties hold across many random inputs.
"""
import json

from hypothesis import HealthCheck, given, settings, strategies as st

from ledgercall_sdk import signing
from ledgercall_sdk.models import Transaction

key_strategy = st.binary(min_size=32, max_size=32)
address_strategy = st.text(min_size=1, max_size=64, alphabet=st.characters(
    whitelist_categories=('Lu', 'Ll', 'Nd'),
))
amount_strategy = st.decimals(min_value=0, max_value=10**12, places=6, allow_nan=False, allow_infinity=False).map(str)
tx_strategy = st.builds(
    Transaction,
    from_address=address_strategy,
    to_address=address_strategy,
    amount=amount_strategy,
    nonce=st.integers(min_value=0, max_value=2**53),
    ou=st.sampled_from(["1", "3", "10"]),
    timestamp=st.floats(min_value=0, max_value=4e9, allow_nan=False, allow_infinity=False),
)

fast_settings = settings(max_examples=50, suppress_health_check=[HealthCheck.function_scoped_fixture])


@fast_settings
@given(key=key_strategy, tx=tx_strategy)
def test_sign_deterministic_and_verifiable(key, tx):
    """Same key and transaction always give the same, verifiable signature"""
    signature = signing.sign(key, tx)
    assert signing.sign(key, tx) == signature
    assert signing.verify(signing.public_key(key), tx, signature)


@fast_settings
@given(key=key_strategy, tx=tx_strategy, bump=st.integers(min_value=1, max_value=1000))
def test_nonce_change_invalidates(key, tx, bump):
    signature = signing.sign(key, tx)
    tampered = tx.model_copy(update={"nonce": tx.nonce + bump})
    assert not signing.verify(signing.public_key(key), tampered, signature)


@fast_settings
@given(tx=tx_strategy)
def test_canonical_encoding_round_trips(tx):
    """The canonical encoding parses back to a transaction with identical encoding"""
    decoded = Transaction.model_validate(json.loads(signing.canonical_bytes(tx)))
    assert signing.canonical_bytes(decoded) == signing.canonical_bytes(tx)
    assert list(json.loads(signing.canonical_bytes(tx))) == ["from", "to_", "amount", "nonce", "ou", "timestamp"]
