"""
Pytest configuration and fixtures for EcoChain Hub backend tests
"""
import pytest

from ecochain import create_app, db
from ecochain.models import PartnerStore, PickupRequest, User
from ecochain.utils.auth import generate_token


@pytest.fixture
def app():
    """Create application instance with a fresh in-memory database"""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def user_factory(app):
    """Factory for creating users with a given role"""
    counter = {'n': 0}

    def _create_user(role=None, **kwargs):
        counter['n'] += 1
        defaults = {
            'email': f'user{counter["n"]}@example.com',
            'name': f'Test User {counter["n"]}',
            'role': role,
            'eco_points': 0,
        }
        defaults.update(kwargs)

        user = User(**defaults)
        user.set_password('TestPass123!')
        db.session.add(user)
        db.session.commit()
        return user

    return _create_user


@pytest.fixture
def citizen(user_factory):
    return user_factory(role='citizen', name='Carla Citizen')


@pytest.fixture
def collector(user_factory):
    return user_factory(role='collector', name='Colin Collector')


@pytest.fixture
def other_collector(user_factory):
    return user_factory(role='collector', name='Olga Collector')


@pytest.fixture
def admin(user_factory):
    return user_factory(role='admin', name='Ada Admin')


@pytest.fixture
def headers_for(app):
    """Build JSON auth headers for a user"""
    def _headers(user):
        token = generate_token(user.id, user.role)
        return {
            'Authorization': f'Bearer {token}',
            'Content-Type': 'application/json'
        }
    return _headers


@pytest.fixture
def pickup_factory(app, citizen):
    """Factory for creating pickups directly in any state"""
    def _create_pickup(**kwargs):
        defaults = {
            'citizen_id': citizen.id,
            'material_type': 'plastic',
            'estimated_weight': 5.0,
            'status': 'pending',
            'address': '12 Green St',
            'latitude': 12.97,
            'longitude': 77.59,
        }
        defaults.update(kwargs)

        pickup = PickupRequest(**defaults)
        db.session.add(pickup)
        db.session.commit()
        return pickup

    return _create_pickup


@pytest.fixture
def store(app):
    """Active partner store: 10 EcoPoints per currency unit"""
    store = PartnerStore(
        name='Green Grocer',
        category='grocery',
        address='1 Market Rd',
        latitude=12.9,
        longitude=77.6,
        redemption_rate=10,
        is_active=True,
    )
    db.session.add(store)
    db.session.commit()
    return store
