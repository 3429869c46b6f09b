"""
tests/test_registry.py

Registry workflow:
  - end to end: challenge → sign → submit → block at height 1 linked to genesis
  - rejected proofs append nothing
  - stars by wallet: owner filter, ascending height, genesis excluded,
    decode failures abort the whole query
  - integrity failures propagate and the block stays
"""

import pytest

from starnotary.core.config import RegistryConfig
from starnotary.core.exceptions import (
    ChainIntegrityError,
    ChallengeExpiredError,
    DecodeError,
    SignatureInvalidError,
    ValidationError,
)
from starnotary.core.models import Block
from starnotary.ledger.chain import StarChain
from starnotary.registry.ownership import OwnershipVerifier
from starnotary.registry import service as service_module
from starnotary.registry.service import (
    StarRegistryService,
    get_global_registry,
    init_global_registry,
)


@pytest.fixture
def registry(clock):
    return StarRegistryService(clock=clock)


def register(registry: StarRegistryService, wallet, star):
    message = registry.request_ownership_challenge(wallet.address)
    return registry.submit_star(
        wallet.address, message, wallet.sign_message(message), star,
    )


class TestSubmitStar:

    def test_end_to_end(self, registry, clock, wallet):
        assert registry.height == 0

        message = registry.request_ownership_challenge(wallet.address)
        assert message == f"{wallet.address}:{clock.now}:starRegistry"

        clock.advance(120)
        block = registry.submit_star(
            wallet.address, message, wallet.sign_message(message), {"star": "Polaris"},
        )

        genesis = registry.get_block_by_height(0)
        assert block.height == 1
        assert block.previous_block_hash == genesis.hash
        assert block.decode_body() == {
            "owner": wallet.address,
            "star":  {"star": "Polaris"},
        }
        assert registry.height == 1
        assert registry.get_block_by_hash(block.hash) is block
        assert registry.validate_chain().valid

    def test_challenge_has_no_side_effects(self, registry, wallet):
        registry.request_ownership_challenge(wallet.address)
        assert registry.height == 0

    def test_expired_appends_nothing(self, registry, clock, wallet):
        message = registry.request_ownership_challenge(wallet.address)
        clock.advance(300)
        with pytest.raises(ChallengeExpiredError):
            registry.submit_star(
                wallet.address, message, wallet.sign_message(message), "Vega",
            )
        assert registry.height == 0

    def test_299_seconds_accepted(self, registry, clock, wallet):
        message = registry.request_ownership_challenge(wallet.address)
        clock.advance(299)
        block = registry.submit_star(
            wallet.address, message, wallet.sign_message(message), "Vega",
        )
        assert block.height == 1

    def test_bad_signature_appends_nothing(self, registry, wallet, wallet2):
        message = registry.request_ownership_challenge(wallet.address)
        with pytest.raises(SignatureInvalidError):
            registry.submit_star(
                wallet.address, message, wallet2.sign_message(message), "Vega",
            )
        assert registry.height == 0

    def test_unencodable_star_appends_nothing(self, registry, wallet):
        message = registry.request_ownership_challenge(wallet.address)
        with pytest.raises(ValidationError):
            registry.submit_star(
                wallet.address, message, wallet.sign_message(message), object(),
            )
        assert registry.height == 0

    def test_integrity_error_propagates_without_rollback(self, registry, wallet):
        register(registry, wallet, "Vega")
        register(registry, wallet, "Deneb")
        registry.get_block_by_height(1).body = Block.create(
            {"owner": "mallory", "star": "Vega"}
        ).body

        with pytest.raises(ChainIntegrityError) as exc_info:
            register(registry, wallet, "Altair")

        assert registry.height == 3
        assert exc_info.value.block is registry.get_block_by_height(3)
        assert registry.validate_chain().error_indices == [1]

    def test_config_window_is_used(self, clock, wallet):
        registry = StarRegistryService(
            config= RegistryConfig(challenge_window_seconds=10),
            clock=  clock,
        )
        message = registry.request_ownership_challenge(wallet.address)
        clock.advance(10)
        with pytest.raises(ChallengeExpiredError):
            registry.submit_star(
                wallet.address, message, wallet.sign_message(message), "Vega",
            )

    def test_uppercase_address_is_rejected(self, registry, wallet):
        address = wallet.address.upper()
        message = registry.request_ownership_challenge(address)
        with pytest.raises(SignatureInvalidError):
            registry.submit_star(
                address, message, wallet.sign_message(message), "Vega",
            )
        assert registry.height == 0
        assert registry.get_stars_by_wallet_address(wallet.address) == []


class TestStarsByWallet:

    def test_filters_by_owner_in_height_order(self, registry, wallet, wallet2):
        register(registry, wallet, {"name": "Polaris"})
        register(registry, wallet2, {"name": "Sirius"})
        register(registry, wallet, {"name": "Vega"})

        stars = registry.get_stars_by_wallet_address(wallet.address)
        assert stars == [
            {"owner": wallet.address, "star": {"name": "Polaris"}},
            {"owner": wallet.address, "star": {"name": "Vega"}},
        ]
        assert [s["star"]["name"] for s in registry.get_stars_by_wallet_address(wallet2.address)] == ["Sirius"]

    def test_unknown_owner_gets_empty_list(self, registry, wallet):
        register(registry, wallet, "Vega")
        assert registry.get_stars_by_wallet_address("nobody") == []

    def test_genesis_is_never_an_owner_record(self, clock):
        chain = StarChain(clock=clock, initialize=False)
        chain.append(Block.create({"owner": "addr1", "star": "genesis-claim"}))
        chain.append(Block.create({"owner": "addr1", "star": "Polaris"}))

        registry = StarRegistryService(chain=chain, clock=clock)
        assert registry.get_stars_by_wallet_address("addr1") == [
            {"owner": "addr1", "star": "Polaris"},
        ]

    def test_decode_failure_aborts_query(self, registry, wallet):
        register(registry, wallet, "Vega")
        register(registry, wallet, "Deneb")
        registry.get_block_by_height(2).body = "zz"

        with pytest.raises(DecodeError):
            registry.get_stars_by_wallet_address(wallet.address)


class TestInjectedParts:

    def test_uninitialized_chain_is_kept(self, clock, wallet):
        chain = StarChain(clock=clock, initialize=False)
        registry = StarRegistryService(chain=chain, clock=clock)
        assert registry.chain is chain
        assert registry.height == -1

        register(registry, wallet, "Vega")
        assert chain.height == 0
        assert chain.blocks[0].decode_body() == {"owner": wallet.address, "star": "Vega"}

    def test_injected_verifier_is_kept(self, clock):
        verifier = OwnershipVerifier(window_seconds=10, clock=clock)
        registry = StarRegistryService(verifier=verifier, clock=clock)
        assert registry.verifier is verifier


class TestLookups:

    def test_misses_return_none(self, registry):
        assert registry.get_block_by_hash("00" * 32) is None
        assert registry.get_block_by_height(5) is None


class TestGlobalRegistry:

    def test_init_and_get(self, monkeypatch):
        monkeypatch.setattr(service_module, "_global_registry", None)
        assert get_global_registry() is None

        registry = init_global_registry()
        assert get_global_registry() is registry
        assert registry.height == 0

        replacement = init_global_registry(RegistryConfig(genesis_data="again"))
        assert get_global_registry() is replacement
        assert replacement.chain.blocks[0].decode_body() == {"data": "again"}
