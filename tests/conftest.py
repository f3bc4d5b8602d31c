import pytest

from inkfolio import create_app, db
from inkfolio.config import TestConfig
from inkfolio.errors import UpstreamFailure
from inkfolio.models import ROLE_ADMIN
from inkfolio.repository import ContentRepository
from inkfolio.storage import StoredBlob


class RecordingStorage:
    """In-memory blob storage that records calls and can fail deletes on demand."""

    def __init__(self):
        self.blobs = {}
        self.puts = []
        self.deleted = []
        self.fail_deletes = set()

    def put(self, pathname, data, content_type=None):
        url = 'https://blob.test/%s' % pathname
        self.puts.append(pathname)
        self.blobs[url] = data
        return StoredBlob(url, pathname)

    def delete(self, url):
        if url in self.fail_deletes:
            raise UpstreamFailure('Blob delete failed for %s' % url)
        self.deleted.append(url)
        self.blobs.pop(url, None)


@pytest.fixture
def app(tmp_path):
    config = type('LocalTestConfig', (TestConfig,), {
        'CONTENT_DIR': str(tmp_path / 'content'),
        'UPLOAD_FOLDER': str(tmp_path / 'uploads'),
    })
    app = create_app(config)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def repo(app):
    return ContentRepository(db.session)


@pytest.fixture
def storage(app):
    storage = RecordingStorage()
    app.extensions['blob_storage'] = storage
    return storage


@pytest.fixture
def admin(repo):
    return repo.create_user('admin@example.com', 'admin123', name='Admin', role=ROLE_ADMIN)


@pytest.fixture
def user(repo):
    return repo.create_user('reader@example.com', 'reader123', name='Reader')


@pytest.fixture
def auth_header(app):
    def make(user):
        token = app.extensions['tokens'].issue_token_pair(user.id)['token']
        return {'Authorization': 'Bearer %s' % token}
    return make
