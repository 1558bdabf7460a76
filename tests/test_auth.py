"""
Authentication and account tests for EcoChain Hub
Tests registration, login, token handling, role selection and availability
"""
import json
import logging
from datetime import timedelta

import jwt
import pytest

from ecochain import db
from ecochain.errors import InvalidState, Unauthorized, ValidationError
from ecochain.middleware import RequestIdFilter
from ecochain.models import User
from ecochain.services import users as user_service


class TestRegistration:

    def test_register_user(self, client):
        response = client.post('/api/auth/register', json={
            'email': 'New.User@Example.com',
            'password': 'SecurePass123!',
            'name': 'New User',
        })

        assert response.status_code == 201
        data = json.loads(response.data)
        assert data['token']
        assert data['user']['email'] == 'new.user@example.com'
        assert data['user']['role'] is None
        assert 'password_hash' not in data['user']

    def test_duplicate_email(self, client, citizen):
        response = client.post('/api/auth/register', json={
            'email': citizen.email,
            'password': 'SecurePass123!',
        })

        assert response.status_code == 409

    @pytest.mark.parametrize('email, password', [
        ('not-an-email', 'SecurePass123!'),
        ('ok@example.com', 'short'),
    ])
    def test_invalid_registration(self, email, password):
        with pytest.raises(ValidationError):
            user_service.register_user(email, password)

    def test_missing_fields(self, client):
        response = client.post('/api/auth/register', json={'email': 'a@example.com'})

        assert response.status_code == 400


class TestLogin:

    def test_login_success(self, client, citizen):
        response = client.post('/api/auth/login', json={
            'email': citizen.email,
            'password': 'TestPass123!',
        })

        assert response.status_code == 200
        assert json.loads(response.data)['user']['id'] == citizen.id

    def test_login_wrong_password(self, client, citizen):
        response = client.post('/api/auth/login', json={
            'email': citizen.email,
            'password': 'WrongPass!',
        })

        assert response.status_code == 401

    def test_me(self, client, citizen, headers_for):
        response = client.get('/api/auth/me', headers=headers_for(citizen))

        assert response.status_code == 200
        assert json.loads(response.data)['user']['eco_points'] == 0

    def test_expired_token(self, app, client, citizen):
        token = jwt.encode(
            {'user_id': citizen.id, 'role': citizen.role, 'exp': 0},
            app.config['JWT_SECRET_KEY'],
            algorithm='HS256',
        )

        response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 401
        assert 'expired' in json.loads(response.data)['error']

    def test_garbage_token(self, client):
        response = client.get('/api/auth/me', headers={'Authorization': 'Bearer nonsense'})

        assert response.status_code == 401

    def test_request_id_is_echoed(self, client):
        response = client.get('/health', headers={'X-Request-ID': 'trace-123'})

        assert response.status_code == 200
        assert response.headers['X-Request-ID'] == 'trace-123'

    def test_log_records_carry_request_id(self, app):
        request_filter = RequestIdFilter()

        with app.test_request_context('/health', environ_overrides={'request_id': 'trace-456'}):
            record = logging.LogRecord('ecochain', logging.INFO, __file__, 1, 'inside', None, None)
            assert request_filter.filter(record)
            assert record.request_id == 'trace-456'

        record = logging.LogRecord('ecochain', logging.INFO, __file__, 1, 'outside', None, None)
        request_filter.filter(record)
        assert record.request_id == '-'


class TestRoleSelection:

    def test_choose_role(self, client, user_factory, headers_for):
        user = user_factory()

        response = client.post('/api/users/role', headers=headers_for(user), json={'role': 'collector'})

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['role'] == 'collector'
        assert data['token']
        assert db.session.get(User, user.id).role == 'collector'

    def test_role_is_set_once(self, user_factory):
        user = user_factory()
        user_service.set_role(user, 'citizen')

        assert user_service.set_role(user, 'citizen').role == 'citizen'
        with pytest.raises(InvalidState):
            user_service.set_role(user, 'collector')

    def test_admin_role_cannot_be_self_selected(self, user_factory):
        with pytest.raises(ValidationError):
            user_service.set_role(user_factory(), 'admin')


class TestAvailability:

    def test_collector_toggles_availability(self, client, collector, headers_for):
        response = client.post('/api/users/availability',
            headers=headers_for(collector), json={'is_available': True})

        assert response.status_code == 200
        assert db.session.get(User, collector.id).is_available is True

    def test_citizen_cannot_toggle(self, citizen):
        with pytest.raises(Unauthorized):
            user_service.set_availability(citizen, True)

    def test_flag_must_be_boolean(self, collector):
        with pytest.raises(ValidationError):
            user_service.set_availability(collector, 'yes')
