from decimal import Decimal
from unittest.mock import MagicMock

import bcrypt
import pytest

from finplan.models.summary import BillsSummary
from finplan.models.user import User
from finplan.services.user_service import UserService


def _user(**overrides) -> User:
    defaults = dict(id=1, uuid="01USER", name="Maria Silva", email="maria@example.com", password_hash="hashed")
    defaults.update(overrides)
    return User(**defaults)


class TestUserService:
    def setup_method(self):
        self.mock_repo = MagicMock()
        self.mock_planning_repo = MagicMock()
        self.mock_summary = MagicMock()
        self.service = UserService(self.mock_repo, self.mock_planning_repo, self.mock_summary)

    def test_register_user_hashes_password(self):
        self.mock_repo.get_by_email.return_value = None
        self.mock_repo.create.side_effect = lambda user: user.model_copy(update={"id": 1})
        result = self.service.register_user("Maria Silva", "maria@example.com", "secret", salary=Decimal("5000"))
        passed = self.mock_repo.create.call_args[0][0]
        assert passed.password_hash.startswith("$2b$")
        assert bcrypt.checkpw(b"secret", passed.password_hash.encode())
        assert result.salary == Decimal("5000")

    def test_register_user_duplicate_email(self):
        self.mock_repo.get_by_email.return_value = _user()
        with pytest.raises(ValueError, match="already registered"):
            self.service.register_user("Maria", "maria@example.com", "secret")
        self.mock_repo.create.assert_not_called()

    def test_authenticate_success(self):
        hashed = bcrypt.hashpw(b"secret", bcrypt.gensalt()).decode()
        self.mock_repo.get_by_email.return_value = _user(password_hash=hashed)
        result = self.service.authenticate("maria@example.com", "secret")
        assert result is not None
        assert result.email == "maria@example.com"

    def test_authenticate_wrong_password(self):
        hashed = bcrypt.hashpw(b"secret", bcrypt.gensalt()).decode()
        self.mock_repo.get_by_email.return_value = _user(password_hash=hashed)
        assert self.service.authenticate("maria@example.com", "wrong") is None

    def test_authenticate_user_not_found(self):
        self.mock_repo.get_by_email.return_value = None
        assert self.service.authenticate("nobody@example.com", "pass") is None

    def test_update_user(self):
        self.mock_repo.update.side_effect = lambda user: user
        result = self.service.update_user(_user(), name="Maria Souza", salary=Decimal("7000"))
        assert result.name == "Maria Souza"
        assert result.salary == Decimal("7000")

    def test_update_user_email_taken(self):
        self.mock_repo.get_by_email.return_value = _user(id=2, email="joao@example.com")
        with pytest.raises(ValueError):
            self.service.update_user(_user(), email="joao@example.com")
        self.mock_repo.update.assert_not_called()

    def test_change_password(self):
        self.service.change_password(_user(), "newpass")
        user_id, new_hash = self.mock_repo.update_password_hash.call_args[0]
        assert user_id == 1
        assert bcrypt.checkpw(b"newpass", new_hash.encode())

    def test_delete_user_soft(self):
        self.service.delete_user(_user())
        self.mock_repo.soft_delete.assert_called_once_with(1)

    def test_delete_user_permanent(self):
        self.service.delete_user(_user(), permanent=True)
        self.mock_repo.hard_delete.assert_called_once_with(1)

    def test_get_user_summary(self):
        self.mock_summary.compute_summary.return_value = BillsSummary(
            bills_active_count=3,
            total_value=Decimal("1280"),
            partial_value_next_month=Decimal("1200"),
            partial_value_2_months_later=Decimal("1100"),
            partial_value_3_months_later=Decimal("1000"),
        )
        self.mock_planning_repo.count_by_user.return_value = 2

        summary = self.service.get_user_summary(_user(salary=Decimal("5000")))

        assert summary.id == "01USER"
        assert summary.salary == Decimal("5000")
        assert summary.bills_active_count == 3
        assert summary.plannings_count == 2
        assert summary.total_bills_value_monthly == Decimal("1280")
        assert summary.partial_value_3_months_later == Decimal("1000")
        self.mock_summary.compute_summary.assert_called_once_with(1)

    def test_get_user_summary_not_configured(self):
        service = UserService(self.mock_repo)
        with pytest.raises(RuntimeError):
            service.get_user_summary(_user())
