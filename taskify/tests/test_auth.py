import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock

from taskify.core.auth import AuthService
from taskify.core.errors import DataAccessError, NotAuthenticatedError
from taskify.core.session import UserSession
from taskify.tests.helpers import FakeSupabaseClient, task_row


class TestAuthService(unittest.TestCase):
    def setUp(self):
        self.client = FakeSupabaseClient()
        self.auth = AuthService(self.client)

    def test_current_user_id(self):
        self.assertEqual(self.auth.current_user_id(), 'user-1')
        self.client.set_user(None)
        self.assertIsNone(self.auth.current_user_id())
        with self.assertRaises(NotAuthenticatedError):
            self.auth.require_user_id()

    def test_sign_in(self):
        user = SimpleNamespace(id='user-1', email='ana@example.com')
        self.client.auth.sign_in_with_password.return_value = SimpleNamespace(user=user)
        self.assertIs(self.auth.sign_in('ana@example.com', 'segredo'), user)
        self.client.auth.sign_in_with_password.assert_called_once_with(
            {'email': 'ana@example.com', 'password': 'segredo'})

    def test_sign_up_sends_name(self):
        self.auth.sign_up('ana@example.com', 'segredo', 'Ana')
        args, _ = self.client.auth.sign_up.call_args
        self.assertEqual(args[0]['options']['data']['name'], 'Ana')

    def test_oauth_returns_url(self):
        self.client.auth.sign_in_with_oauth.return_value = SimpleNamespace(url='https://auth.example/google')
        self.assertEqual(self.auth.sign_in_with_oauth(), 'https://auth.example/google')

    def test_sign_in_failure(self):
        self.client.auth.sign_in_with_password.side_effect = Exception('Invalid login credentials')
        with self.assertRaises(DataAccessError):
            self.auth.sign_in('ana@example.com', 'errada')

    def test_single_subscription_many_listeners(self):
        first, second = MagicMock(), MagicMock()
        self.auth.on_session_change(first)
        self.auth.on_session_change(second)
        self.client.auth.on_auth_state_change.assert_called_once()

        dispatch = self.client.auth.on_auth_state_change.call_args[0][0]
        dispatch('SIGNED_OUT', None)
        first.assert_called_once_with('SIGNED_OUT', None)
        second.assert_called_once_with('SIGNED_OUT', None)


class TestUserSession(unittest.TestCase):
    def test_sign_out_clears_items(self):
        client = FakeSupabaseClient()
        client.tables['tasks'] = [task_row('t1', 'Pagar aluguel')]
        session = UserSession(client, cache_dir=None)
        session.coordinator.refresh()
        self.assertEqual(len(session.coordinator.items), 1)

        dispatch = client.auth.on_auth_state_change.call_args[0][0]
        dispatch('SIGNED_OUT', None)
        self.assertEqual(session.coordinator.items, [])
        self.assertEqual(session.notifications.notifications, [])


if __name__ == '__main__':
    unittest.main()
