import pytest

from petapp import wallet
from petapp.errors import InsufficientKoinsError, UnknownCatalogItemError


class TestLedger:
    def test_balance_of_missing_wallet_is_zero(self, store):
        assert wallet.get_balance(store.db, "u1") == 0

    def test_credit_creates_wallet(self, store):
        assert wallet.credit(store.db, "u1", 20) == 20
        assert wallet.get_balance(store.db, "u1") == 20

    def test_debit_has_no_overdraft_check(self, store):
        wallet.credit(store.db, "u1", 10)
        assert wallet.debit(store.db, "u1", 15) == -5

    def test_debit_sends_negative_increment(self, store):
        wallet.debit(store.db, "u1", 7)
        store.increment_wallet.assert_called_once_with(store.db, "u1", -7)

    @pytest.mark.parametrize("amount", [-1, 1.5, True, "10"])
    def test_invalid_amounts_rejected(self, store, amount):
        with pytest.raises(ValueError):
            wallet.credit(store.db, "u1", amount)
        store.increment_wallet.assert_not_called()


class TestSpend:
    def test_spend_within_balance(self, store):
        wallet.credit(store.db, "u1", 100)
        assert wallet.spend(store.db, "u1", 60) == 40

    def test_spend_exact_balance(self, store):
        wallet.credit(store.db, "u1", 60)
        assert wallet.spend(store.db, "u1", 60) == 0

    def test_spend_over_balance_raises_and_keeps_balance(self, store):
        wallet.credit(store.db, "u1", 10)
        with pytest.raises(InsufficientKoinsError) as exc:
            wallet.spend(store.db, "u1", 60)
        assert exc.value.balance == 10
        assert exc.value.price == 60
        assert wallet.get_balance(store.db, "u1") == 10


class TestPackages:
    def test_credit_package(self, store):
        package, balance = wallet.credit_package(store.db, "u1", "prod_TJrJT9hFwWozod")
        assert package.koins == 500
        assert balance == 500

    def test_unknown_product(self, store):
        with pytest.raises(UnknownCatalogItemError):
            wallet.credit_package(store.db, "u1", "prod_nope")
        assert "u1" not in store.wallets
