import os, sys, pytest
# Ensure backend directory is on path so 'cpd_portal' and 'tests' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from cpd_portal import create_app, get_db
from cpd_portal.models.base import Base
# Import all model modules to ensure tables are registered before create_all
import cpd_portal.models.vendor  # noqa: F401
import cpd_portal.models.vendor_request  # noqa: F401

PUBLIC_STORAGE_URL = 'http://files.test/storage'


@pytest.fixture(scope='session', autouse=True)
def app_instance(tmp_path_factory):
    os.environ['DATABASE_URL'] = 'sqlite+pysqlite:///:memory:'
    app = create_app({
        'DATABASE_URL': 'sqlite+pysqlite:///:memory:',
        'JWT_SECRET_KEY': 'test-secret',
        'STORAGE_BACKEND': 'local',
        'LOCAL_STORAGE_DIR': str(tmp_path_factory.mktemp('storage')),
        'PUBLIC_STORAGE_URL': PUBLIC_STORAGE_URL,
        'RESEND_API_KEY': '',
        'SUPABASE_URL': '',
        'SUPABASE_SERVICE_ROLE_KEY': '',
        'ADMIN_NOTIFICATION_EMAILS': [],
    })
    # After app and blueprints are registered, ensure all tables exist
    with app.app_context():
        engine = get_db().get_bind()
        Base.metadata.create_all(engine)
    yield app


@pytest.fixture()
def app_context(app_instance):
    with app_instance.app_context():
        yield app_instance


@pytest.fixture()
def client(app_context):
    return app_context.test_client()
