"""Tests for the Proxy pattern variants."""
from abc import ABC
from unittest.mock import Mock

import pytest

from patternkit.domain.exceptions import (
    AccessDeniedError,
    InsufficientFundsError,
    PatternUsageError,
    RemoteInvocationError,
)
from patternkit.patterns.proxy import (
    Account,
    AccountProtectionProxy,
    BankAccount,
    BaseProxy,
    DynamicForwardingProxy,
    LoopbackTransport,
    RemoteAccountProxy,
    RemoteCall,
    VirtualAccountProxy,
    forwarding_proxy,
)


class TestBankAccount:
    """Test the real subject."""

    def test_deposit_and_withdraw(self, account):
        assert account.deposit(50) == 150
        assert account.withdraw(30) == 120
        assert account.balance == 120

    def test_overdraw_rejected(self, account):
        with pytest.raises(InsufficientFundsError):
            account.withdraw(500)
        assert account.balance == 100

    def test_non_positive_amount_rejected(self, account):
        with pytest.raises(PatternUsageError):
            account.deposit(0)


class TestProtectionProxy:
    """Test access control."""

    def test_owner_allowed(self, account):
        proxy = AccountProtectionProxy(account, owner="alice", current_user_provider=lambda: "alice")
        assert proxy.deposit(10) == 110
        assert proxy.balance == 110

    def test_other_user_denied(self, account):
        proxy = AccountProtectionProxy(account, owner="alice", current_user_provider=lambda: "mallory")

        with pytest.raises(AccessDeniedError) as exc_info:
            proxy.withdraw(10)

        assert exc_info.value.user == "mallory"
        assert exc_info.value.operation == "withdraw"
        assert account.balance == 100

    def test_property_access_checked(self, account):
        proxy = AccountProtectionProxy(account, owner="alice", current_user_provider=lambda: "bob")
        with pytest.raises(AccessDeniedError):
            proxy.balance

    def test_is_an_account(self, account):
        proxy = AccountProtectionProxy(account, owner="alice")
        assert isinstance(proxy, Account)

    def test_only_interface_forwarded(self, account):
        proxy = AccountProtectionProxy(account, owner="alice", current_user_provider=lambda: "alice")
        assert proxy.forwarded_members == frozenset({"balance", "deposit", "withdraw"})
        with pytest.raises(AttributeError):
            proxy.close()

    def test_forwarded_method_keeps_docstring(self):
        assert AccountProtectionProxy.deposit.__doc__ == Account.deposit.__doc__


class TestVirtualProxy:
    """Test lazy creation of the subject."""

    def test_subject_created_on_first_use(self):
        factory = Mock(return_value=BankAccount(5))
        proxy = VirtualAccountProxy(factory)

        assert not proxy.is_materialized
        factory.assert_not_called()

        assert proxy.deposit(10) == 15
        assert proxy.is_materialized

    def test_factory_called_once(self):
        factory = Mock(return_value=BankAccount(5))
        proxy = VirtualAccountProxy(factory)

        proxy.deposit(1)
        proxy.withdraw(1)
        proxy.balance

        factory.assert_called_once_with()


class TestRemoteProxy:
    """Test marshalling calls through a transport."""

    def test_calls_delivered(self, account):
        transport = LoopbackTransport(account)
        proxy = RemoteAccountProxy(transport)

        assert proxy.deposit(25) == 125
        assert proxy.balance == 125
        assert [call.method for call in transport.calls] == ["deposit", "balance"]
        assert transport.calls[0].args == [25]
        assert transport.calls[1].attribute is True

    def test_subject_errors_wrapped(self, account):
        proxy = RemoteAccountProxy(LoopbackTransport(account))

        with pytest.raises(RemoteInvocationError) as exc_info:
            proxy.withdraw(1000)

        assert isinstance(exc_info.value.original_error, InsufficientFundsError)
        assert exc_info.value.__cause__ is exc_info.value.original_error

    def test_custom_transport(self):
        received = []

        def transport(call: RemoteCall):
            received.append(call)
            return 42

        proxy = RemoteAccountProxy(transport)
        assert proxy.deposit(1) == 42
        assert received == [RemoteCall(method="deposit", args=[1])]


class TestForwardingProxyDecorator:
    """Test generation of forwarding members."""

    def test_rejects_non_abc(self):
        class Plain:
            def run(self):
                pass

        with pytest.raises(PatternUsageError):
            forwarding_proxy(Plain)

    def test_rejects_interface_without_abstract_members(self):
        class Empty(ABC):
            pass

        with pytest.raises(PatternUsageError):
            forwarding_proxy(Empty)

    def test_rejects_class_without_forwarding_hooks(self):
        with pytest.raises(PatternUsageError):
            @forwarding_proxy(Account)
            class NotAProxy:
                pass

    def test_own_members_not_overwritten(self, account):
        @forwarding_proxy(Account)
        class CappedProxy(BaseProxy):
            def deposit(self, amount):
                return self._forward("deposit", min(amount, 10))

        proxy = CappedProxy(account)
        assert proxy.deposit(500) == 110
        assert isinstance(proxy, Account)


class TestDynamicForwardingProxy:
    """The catch-all proxy forwards everything, including non-interface members."""

    def test_forwards_interface(self, account):
        proxy = DynamicForwardingProxy(account)
        assert proxy.deposit(1) == 101

    def test_leaks_non_interface_member(self, account):
        proxy = DynamicForwardingProxy(account)
        proxy.close()
        assert account.balance == 0

    def test_is_not_an_account(self, account):
        assert not isinstance(DynamicForwardingProxy(account), Account)

    def test_dunder_lookups_not_forwarded(self, account):
        with pytest.raises(AttributeError):
            DynamicForwardingProxy(account).__fspath__
