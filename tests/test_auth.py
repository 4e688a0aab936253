"""Authentication helper tests"""

import unittest
from unittest.mock import patch
import datetime
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import jwt

from auth import sign_token, verify_token, hash_password, compare_password, get_user_from_token
from config import auth_config
from models import User


class TestTokens(unittest.TestCase):

    def setUp(self):
        self.user = User(id='u1', name='Supervisor', email='sup@company.com', role='SUPERVISOR')

    def test_round_trip_payload(self):
        payload = verify_token(sign_token(self.user))

        self.assertEqual(payload['userId'], 'u1')
        self.assertEqual(payload['email'], 'sup@company.com')
        self.assertEqual(payload['role'], 'SUPERVISOR')

    def test_expired_token_is_rejected(self):
        token = jwt.encode(
            {'userId': 'u1', 'exp': datetime.datetime.now(datetime.timezone.utc) - datetime.timedelta(hours=1)},
            auth_config.jwt_secret, algorithm='HS256'
        )

        with self.assertRaises(jwt.ExpiredSignatureError):
            verify_token(token)

    def test_foreign_signature_is_rejected(self):
        token = jwt.encode({'userId': 'u1'}, 'another-secret', algorithm='HS256')

        with self.assertRaises(jwt.InvalidSignatureError):
            verify_token(token)

    @patch('auth.get_user_by_id')
    def test_user_from_token(self, mock_get_user):
        mock_get_user.return_value = self.user

        self.assertIs(get_user_from_token(sign_token(self.user)), self.user)
        mock_get_user.assert_called_once_with('u1')

    @patch('auth.get_user_by_id')
    def test_invalid_token_gives_no_user(self, mock_get_user):
        self.assertIsNone(get_user_from_token('not-a-token'))
        self.assertIsNone(get_user_from_token(None))
        mock_get_user.assert_not_called()


class TestPasswords(unittest.TestCase):

    @patch.object(auth_config, 'bcrypt_rounds', 4)
    def test_hash_and_compare(self):
        password_hash = hash_password('password123')

        self.assertNotEqual(password_hash, 'password123')
        self.assertTrue(compare_password('password123', password_hash))
        self.assertFalse(compare_password('wrong', password_hash))

    def test_empty_or_malformed_hash(self):
        self.assertFalse(compare_password('password123', ''))
        self.assertFalse(compare_password('password123', 'not-a-bcrypt-hash'))


if __name__ == '__main__':
    unittest.main()
