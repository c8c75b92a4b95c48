import pytest

from django.db import IntegrityError, transaction

from apps.common.exceptions import InsufficientFundsError
from apps.exchange.models import PointsAccount, PointsEntry
from apps.exchange.services import (
    get_or_create_account,
    get_balance,
    debit,
    credit,
    get_history,
    InvalidAmountError,
    InsufficientPermissionsError,
)


@pytest.mark.django_db
class TestPointsAccount:

    def test_first_reference_creates_empty_account(self, gateway, buyer):
        assert get_balance(gateway, user_id=buyer.id) == 0
        assert PointsAccount.objects.filter(user=buyer).count() == 1

        get_or_create_account(gateway, user_id=buyer.id)
        assert PointsAccount.objects.filter(user=buyer).count() == 1

    def test_credit(self, gateway, buyer, admin_user):
        account = credit(gateway, user_id=buyer.id, amount=75, granted_by=admin_user, note='Welcome')

        assert account.balance == 75
        entry = PointsEntry.objects.get(account=account)
        assert entry.amount == 75
        assert entry.granted_by == admin_user
        assert entry.note == 'Welcome'

    def test_member_cannot_credit(self, gateway, buyer, third_user):
        with pytest.raises(InsufficientPermissionsError):
            credit(gateway, user_id=buyer.id, amount=75, granted_by=third_user)

        assert get_balance(gateway, user_id=buyer.id) == 0

    @pytest.mark.parametrize('amount', [0, -10, True, 2.5])
    def test_amount_must_be_positive_integer(self, gateway, buyer, admin_user, amount):
        with pytest.raises(InvalidAmountError):
            credit(gateway, user_id=buyer.id, amount=amount, granted_by=admin_user)

    def test_debit(self, gateway, buyer, set_balance, listing):
        set_balance(buyer, 120)

        account = debit(gateway, user_id=buyer.id, amount=100, listing=listing)

        assert account.balance == 20

    def test_debit_more_than_balance(self, gateway, buyer, set_balance):
        set_balance(buyer, 99)

        with pytest.raises(InsufficientFundsError):
            debit(gateway, user_id=buyer.id, amount=100)

        assert get_balance(gateway, user_id=buyer.id) == 99
        assert not PointsEntry.objects.exists()

    def test_debit_exact_balance(self, gateway, buyer, set_balance):
        set_balance(buyer, 100)

        assert debit(gateway, user_id=buyer.id, amount=100).balance == 0

    def test_database_rejects_negative_balance(self, buyer, set_balance):
        account = set_balance(buyer, 10)

        with pytest.raises(IntegrityError), transaction.atomic():
            PointsAccount.objects.filter(pk=account.pk).update(balance=-1)

    def test_history_newest_first(self, gateway, buyer, admin_user, listing):
        credit(gateway, user_id=buyer.id, amount=200, granted_by=admin_user)
        debit(gateway, user_id=buyer.id, amount=100, listing=listing)

        history = list(get_history(gateway, user_id=buyer.id))

        assert [entry.amount for entry in history] == [-100, 200]

    def test_credit_unknown_user(self, gateway, admin_user):
        from apps.exchange.services import AccountNotFoundError

        with pytest.raises(AccountNotFoundError):
            credit(gateway, user_id='00000000-0000-0000-0000-000000000000', amount=5, granted_by=admin_user)

        assert not PointsAccount.objects.exists()
