"""
Ledger reconciliation tests for EcoChain Hub
"""
import pytest

from ecochain import db
from ecochain.models import PickupRequest, User
from ecochain.services import ledger
from ecochain.services import pickups as pickup_service
from ecochain.services import redemptions as redemption_service


class TestPointCalculation:
    """Test floor(weight * 10)"""

    @pytest.mark.parametrize('weight, points', [
        (4.8, 48),
        (5, 50),
        (0.1, 1),
        (0.09, 0),
        (1.15, 11),
        (2.99, 29),
        (12.345, 123),
    ])
    def test_calculate_points(self, weight, points):
        assert ledger.calculate_points(weight) == points

    def test_custom_rate(self):
        assert ledger.calculate_points(2.5, points_per_kg=3) == 7


class TestLedgerReferences:

    def test_refs_are_unique(self):
        refs = {ledger.new_ledger_ref() for _ in range(200)}

        assert len(refs) == 200

    def test_each_completion_gets_its_own_ref(self, collector, pickup_factory):
        first = pickup_factory(status='accepted', collector_id=collector.id)
        second = pickup_factory(status='accepted', collector_id=collector.id)

        a = pickup_service.complete_pickup(collector, first.id, 1)
        b = pickup_service.complete_pickup(collector, second.id, 1)

        assert a['ledger_ref'] != b['ledger_ref']


class TestBalanceConsistency:
    """The cached balance always equals the sum of the ledger"""

    def test_balance_matches_history(self, citizen, collector, pickup_factory, store):
        for weight in (4.8, 3.2, 10):
            pickup = pickup_factory(status='accepted', collector_id=collector.id)
            pickup_service.complete_pickup(collector, pickup.id, weight)

        redemption_service.redeem_points(citizen, store.id, 60)

        refreshed = db.session.get(User, citizen.id)
        assert refreshed.eco_points == 48 + 32 + 100 - 60
        assert ledger.balance_from_history(citizen.id) == refreshed.eco_points
        assert db.session.get(User, collector.id).total_collections == 3

    def test_empty_history(self, citizen):
        assert ledger.balance_from_history(citizen.id) == 0

    def test_transactions_are_capped(self, app, citizen, collector, pickup_factory):
        app.config['TRANSACTIONS_PAGE_SIZE'] = 3
        for _ in range(5):
            pickup = pickup_factory(status='accepted', collector_id=collector.id)
            pickup_service.complete_pickup(collector, pickup.id, 1)

        assert len(ledger.get_transactions(citizen)) == 3
        assert len(ledger.get_transactions(citizen, limit=10)) == 5

    def test_failed_reconciliation_rolls_back(self, citizen, collector, pickup_factory, monkeypatch):
        """A failure on the last write leaves no trace of the earlier ones"""
        pickup = pickup_factory(status='accepted', collector_id=collector.id)

        def boom(**kwargs):
            raise RuntimeError('ledger unavailable')

        monkeypatch.setattr(ledger, 'Transaction', boom)
        with pytest.raises(RuntimeError):
            pickup_service.complete_pickup(collector, pickup.id, 2)

        refreshed = db.session.get(PickupRequest, pickup.id)
        assert refreshed.status == 'accepted'
        assert refreshed.eco_points_earned is None
        assert db.session.get(User, citizen.id).eco_points == 0
        assert db.session.get(User, collector.id).total_collections == 0
