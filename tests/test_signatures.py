import pytest
from eth_utils import keccak
from hexbytes import HexBytes

from governance.constants import VoteType
from governance.digest import (
    ballot_digest,
    bridge_operators_ballot_digest,
    hash_ballot,
    hash_bridge_operators_ballot,
)
from governance.domain import bridge_manager_domain, governance_admin_domain
from governance.signatures import (
    Signature,
    ballot_typed_data,
    bridge_operators_ballot_typed_data,
    generate_signatures,
    recover_ballot_signer,
    sign_ballot,
)
from tests.conftest import PROPOSAL_HASH_ONE


def _eip191_hash(signable_message):
    return keccak(
        b"\x19" + signable_message.version + signable_message.header + signable_message.body
    )


@pytest.mark.parametrize("support", [VoteType.FOR, VoteType.AGAINST])
def test_ballot_typed_data_matches_digest(support):
    domain = governance_admin_domain()
    message = ballot_typed_data(domain, PROPOSAL_HASH_ONE, support)
    assert message.version == b"\x01"
    assert HexBytes(message.header) == domain.separator()
    assert HexBytes(message.body) == hash_ballot(PROPOSAL_HASH_ONE, support)
    assert _eip191_hash(message) == ballot_digest(domain.separator(), PROPOSAL_HASH_ONE, support)


def test_bridge_operators_ballot_typed_data_matches_digest(operators):
    domain = bridge_manager_domain(2021)
    message = bridge_operators_ballot_typed_data(domain, 7, operators)
    assert HexBytes(message.body) == hash_bridge_operators_ballot(7, operators)
    assert _eip191_hash(message) == bridge_operators_ballot_digest(
        domain.separator(), 7, operators
    )


def test_sign_and_recover_ballot(voters):
    domain = governance_admin_domain()
    voter = voters[0]
    signature = sign_ballot(voter, domain, PROPOSAL_HASH_ONE, VoteType.FOR)
    assert isinstance(signature, Signature)
    assert signature.v in (27, 28)
    assert len(signature.r) == 32
    assert len(signature.s) == 32

    signer = recover_ballot_signer(domain, PROPOSAL_HASH_ONE, VoteType.FOR, signature)
    assert signer == voter.address


def test_signature_is_bound_to_vote_and_domain(voters):
    voter = voters[0]
    domain = governance_admin_domain()
    signature = sign_ballot(voter, domain, PROPOSAL_HASH_ONE, VoteType.FOR)

    assert recover_ballot_signer(domain, PROPOSAL_HASH_ONE, VoteType.AGAINST, signature) != (
        voter.address
    )
    other_domain = bridge_manager_domain(2020)
    assert recover_ballot_signer(other_domain, PROPOSAL_HASH_ONE, VoteType.FOR, signature) != (
        voter.address
    )


def test_generate_signatures(voters, capsys):
    domain = bridge_manager_domain(2021)
    proposal_hash = b"\x42" * 32
    signatures = generate_signatures(voters, domain, proposal_hash)

    assert len(signatures) == len(voters)
    for voter, signature in zip(voters, signatures):
        assert recover_ballot_signer(domain, proposal_hash, VoteType.FOR, signature) == (
            voter.address
        )

    captured = capsys.readouterr()
    assert captured.out.count("Signing ballot for 0x" + "42" * 32) == len(voters)


class _RefusingAccount:
    address = "0x" + "00" * 20

    def sign_message(self, message):
        return None


def test_sign_ballot_refused():
    with pytest.raises(ValueError, match="refused"):
        sign_ballot(_RefusingAccount(), governance_admin_domain(), PROPOSAL_HASH_ONE, 0)
