"""
tests/test_concurrency.py

Concurrency safety for StarChain.append().
Simultaneous submissions from many threads must each win a distinct
height: no duplicate heights, no shared previous hash, no lost blocks.

Run:
    pytest tests/test_concurrency.py -v --tb=short
"""

import threading

from starnotary.core.crypto import WalletKey
from starnotary.core.models import Block
from starnotary.ledger.chain import StarChain
from starnotary.registry.service import StarRegistryService

THREADS         = 8
APPENDS_PER_THR = 25


def _run_threads(target, count: int = THREADS):
    barrier = threading.Barrier(count)

    def runner(n):
        barrier.wait()
        target(n)

    threads = [threading.Thread(target=runner, args=(n,)) for n in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()


class TestConcurrency:

    def test_concurrent_appends_get_distinct_heights(self):
        chain  = StarChain()
        errors = []

        def append_many(n):
            try:
                for i in range(APPENDS_PER_THR):
                    chain.append(Block.create({"owner": f"t{n}", "star": i}))
            except Exception as e:
                errors.append(repr(e))

        _run_threads(append_many)

        assert errors == [], f"Concurrent appends raised exceptions: {errors}"

        blocks = chain.blocks
        total  = THREADS * APPENDS_PER_THR
        assert chain.height == total
        assert [b.height for b in blocks] == list(range(total + 1))

        prev_hashes = [b.previous_block_hash for b in blocks]
        assert len(set(prev_hashes)) == len(prev_hashes), (
            "Two blocks claim the same predecessor"
        )
        assert chain.validate().valid
        assert chain.audit().valid

    def test_concurrent_submissions_all_registered(self):
        registry = StarRegistryService()
        wallets  = [WalletKey.generate() for _ in range(THREADS)]
        accepted = [[] for _ in range(THREADS)]
        errors   = []

        def submit_many(n):
            wallet = wallets[n]
            try:
                for i in range(5):
                    message = registry.request_ownership_challenge(wallet.address)
                    block   = registry.submit_star(
                        wallet.address, message, wallet.sign_message(message), {"n": i},
                    )
                    accepted[n].append(block.height)
            except Exception as e:
                errors.append(repr(e))

        _run_threads(submit_many)

        assert errors == []
        heights = [h for per_thread in accepted for h in per_thread]
        assert sorted(heights) == list(range(1, THREADS * 5 + 1))

        for n, wallet in enumerate(wallets):
            stars = registry.get_stars_by_wallet_address(wallet.address)
            assert [s["star"]["n"] for s in stars] == list(range(5))
            assert accepted[n] == sorted(accepted[n])
