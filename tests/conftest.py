"""
Test configuration and fixtures for the redirector.
This centralizes all test setup, making individual tests clean.
"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from main import app
from redirector_app.cache.strategies import InMemoryCache
from redirector_app.database.connection import Base, get_db
from redirector_app.dependencies import get_cache
from redirector_app.item_types import ItemType
from redirector_app.models import (
    Attachment,
    Comment,
    ImportedItem,
    ImportOrigin,
    Link,
    ReadMarker,
    Site,
)

# Test database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# The migrated site used throughout the tests
SITE_ID = 1
ORIGIN_ID = 7
NOT_MIGRATED_SITE_ID = 2
OTHER_PRODUCT_SITE_ID = 3

READER_PROFILE_ID = 5
CAUGHT_UP_PROFILE_ID = 6
ATTACHMENT_SHA1 = "2fd4e1c67a2d28fced849ee1bb76e7391b93eb12"

# (item type, legacy id, current id)
IMPORTED = [
    (ItemType.MICROCOSM, "37", 900),
    (ItemType.MICROCOSM, "12", 901),
    (ItemType.COMMENT, "55", 4821),
    (ItemType.COMMENT, "60", 4822),
    (ItemType.CONVERSATION, "123", 50),
    (ItemType.CONVERSATION, "7865", 51),
    (ItemType.PROFILE, "42", 300),
    (ItemType.HUDDLE, "9", 77),
    (ItemType.ATTACHMENT, "88", 1234),
    (ItemType.CONVERSATION, "000456", 52),
]

COMMENT_TIMES = {
    5001: datetime(2014, 3, 1, 10, 0, 0),
    5002: datetime(2014, 3, 2, 10, 0, 0),
    5003: datetime(2014, 3, 3, 10, 0, 0),
}


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    This ensures tests are isolated and don't affect each other.
    """
    # Create tables
    Base.metadata.create_all(bind=engine)

    # Create session
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        # Cleanup
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def cache():
    return InMemoryCache()


@pytest.fixture(scope="function")
def legacy_site(db_session):
    """
    A site imported from vBulletin, with one conversation that has three
    comments, a reader who has read the first, and an attachment.
    """
    db_session.add(Site(site_id=SITE_ID, subdomain_key="lfgss"))
    db_session.add(Site(site_id=NOT_MIGRATED_SITE_ID, subdomain_key="newsite"))
    db_session.add(Site(site_id=OTHER_PRODUCT_SITE_ID, subdomain_key="phpbbsite"))

    db_session.add(ImportOrigin(origin_id=ORIGIN_ID, site_id=SITE_ID, product="vbulletin"))
    db_session.add(ImportOrigin(origin_id=8, site_id=OTHER_PRODUCT_SITE_ID, product="phpbb"))

    for item_type, old_id, item_id in IMPORTED:
        db_session.add(ImportedItem(
            origin_id=ORIGIN_ID,
            item_type_id=item_type.id,
            old_id=old_id,
            item_id=item_id,
        ))

    # Same legacy forum id under the other site's import
    db_session.add(ImportedItem(
        origin_id=8, item_type_id=ItemType.MICROCOSM.id, old_id="37", item_id=1900,
    ))

    for comment_id, created in COMMENT_TIMES.items():
        db_session.add(Comment(
            comment_id=comment_id,
            item_type_id=ItemType.CONVERSATION.id,
            item_id=50,
            created=created,
        ))

    db_session.add(ReadMarker(
        item_type_id=ItemType.CONVERSATION.id,
        item_id=50,
        profile_id=READER_PROFILE_ID,
        read=datetime(2014, 3, 1, 12, 0, 0),
    ))
    db_session.add(ReadMarker(
        item_type_id=ItemType.CONVERSATION.id,
        item_id=50,
        profile_id=CAUGHT_UP_PROFILE_ID,
        read=datetime(2014, 3, 4, 9, 0, 0),
    ))

    db_session.add(Attachment(attachment_meta_id=1234, file_sha1=ATTACHMENT_SHA1))

    db_session.commit()
    return db_session


@pytest.fixture(scope="function")
def short_links(db_session):
    """A few short links as the comment processor would have stored them"""
    links = [
        Link(short_url="abc", domain="www.example.com", url="https://www.example.com/page", hits=0),
        Link(short_url="abcd", domain="www.example.com", url="https://www.example.com/other", hits=3),
        Link(
            short_url="crc1",
            domain="www.chainreactioncycles.com",
            url="http://www.chainreactioncycles.com/michelin-pro4-service-course-road-bike-tyre/rp-prod73626",
            hits=0,
        ),
    ]
    db_session.add_all(links)
    db_session.commit()
    return links


@pytest.fixture(scope="function")
def client(db_session, cache):
    """
    Create a test client with database and cache dependencies overridden.
    This is the main fixture that tests will use.
    """
    def override_get_db():
        yield db_session

    # Override the database and cache dependencies
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache

    # Create test client
    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()
