import os
import pytest

# Set test environment variables before importing the app
os.environ['FLASK_ENV'] = 'testing'
os.environ['CHANGE_FEED_PUBSUB_ENABLED'] = 'false'

from stockroom import create_app
from stockroom.events import ChangeFeed
from stockroom.models import (
    db, Item, ItemStatus, Folder, Tag, PickList, PickListItem, PickListStatus, Profile
)
from stockroom.services.auth_service import issue_token
from werkzeug.security import generate_password_hash


@pytest.fixture(scope='session')
def app():
    """Create application for the tests."""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Database session that is emptied after each test."""
    with app.app_context():
        db.create_all()

        yield db.session

        db.session.rollback()
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()


@pytest.fixture
def feed():
    """A fresh change feed to hand to services under test."""
    return ChangeFeed()


@pytest.fixture
def profile(db_session):
    return create_test_profile(db_session)


@pytest.fixture
def auth_headers(profile):
    """Bearer token headers for a signed-in member."""
    return {
        'Authorization': f'Bearer {issue_token(profile)}',
        'Content-Type': 'application/json'
    }


# Helper functions for tests
def create_test_profile(db_session, **kwargs):
    defaults = {
        'email': 'picker@example.com',
        'password_hash': generate_password_hash('correct-horse'),
        'full_name': 'Pat Picker'
    }
    defaults.update(kwargs)

    profile = Profile(**defaults)
    db_session.add(profile)
    db_session.commit()
    return profile


def create_test_item(db_session, **kwargs):
    """Create a test item with default values."""
    import uuid
    defaults = {
        'name': 'Widget',
        'sku': f'TEST-{str(uuid.uuid4())[:8]}',
        'quantity': 10,
        'min_quantity': 2,
        'status': ItemStatus.ACTIVE
    }
    defaults.update(kwargs)

    item = Item(**defaults)
    db_session.add(item)
    db_session.commit()
    return item


def create_test_folder(db_session, **kwargs):
    defaults = {'name': 'Shelf A'}
    defaults.update(kwargs)

    folder = Folder(**defaults)
    db_session.add(folder)
    db_session.commit()
    return folder


def create_test_tag(db_session, **kwargs):
    defaults = {'name': 'fragile'}
    defaults.update(kwargs)

    tag = Tag(**defaults)
    db_session.add(tag)
    db_session.commit()
    return tag


def create_test_pick_list(db_session, status=PickListStatus.IN_PROGRESS, **kwargs):
    """Create a pick list; in progress by default so lines can be picked."""
    defaults = {'name': 'Order 1001', 'status': status}
    defaults.update(kwargs)

    pick_list = PickList(**defaults)
    db_session.add(pick_list)
    db_session.commit()
    return pick_list


def create_test_line(db_session, pick_list, item, **kwargs):
    defaults = {
        'pick_list_id': pick_list.id,
        'item_id': item.id,
        'quantity_requested': 5,
        'quantity_picked': 0,
        'sort_order': 1
    }
    defaults.update(kwargs)

    line = PickListItem(**defaults)
    db_session.add(line)
    db_session.commit()
    return line
