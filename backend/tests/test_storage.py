import pytest
from cpd_portal.errors import StorageError
from cpd_portal.services.storage import LocalObjectStore, ObjectStore, SupabaseStorage, build_object_store
from cpd_portal.services.uploads import build_object_path, file_extension
from tests.test_notifications import FakeHttp, FakeResponse


def test_local_store_never_overwrites(tmp_path):
    store = LocalObjectStore(str(tmp_path), 'http://files.test/storage/')
    url = store.upload('vendor-posters', 'v1/1_abc.png', b'one', 'image/png')
    assert url == 'http://files.test/storage/vendor-posters/v1/1_abc.png'
    with pytest.raises(StorageError):
        store.upload('vendor-posters', 'v1/1_abc.png', b'two', 'image/png')
    assert (tmp_path / 'vendor-posters' / 'v1' / '1_abc.png').read_bytes() == b'one'


def test_local_store_rejects_path_escape(tmp_path):
    store = LocalObjectStore(str(tmp_path), 'http://files.test/storage')
    with pytest.raises(StorageError):
        store.upload('vendor-posters', '../../etc/passwd', b'x', 'text/plain')


def test_supabase_store_uploads_without_upsert():
    http = FakeHttp([FakeResponse(200, {'Key': 'vendor-posters/v1/a.png'}), FakeResponse(400, text='Duplicate')])
    store = SupabaseStorage('https://proj.supabase.co', 'service-key', session=http)
    url = store.upload('vendor-posters', 'v1/a.png', b'img', 'image/png')
    assert url == 'https://proj.supabase.co/storage/v1/object/public/vendor-posters/v1/a.png'
    method, target, kwargs = http.calls[0]
    assert target == 'https://proj.supabase.co/storage/v1/object/vendor-posters/v1/a.png'
    assert kwargs['headers']['x-upsert'] == 'false'
    assert kwargs['headers']['Content-Type'] == 'image/png'
    with pytest.raises(StorageError):
        store.upload('vendor-posters', 'v1/a.png', b'img', 'image/png')


def test_build_object_store_requires_supabase_credentials():
    with pytest.raises(RuntimeError):
        build_object_store({'STORAGE_BACKEND': 'supabase', 'SUPABASE_URL': '', 'SUPABASE_SERVICE_ROLE_KEY': ''})
    with pytest.raises(RuntimeError):
        build_object_store({'STORAGE_BACKEND': 's3'})


def test_object_paths_are_vendor_scoped_and_unique():
    paths = {build_object_path('vendor-1', 'png') for _ in range(50)}
    assert len(paths) == 50
    for p in paths:
        vendor, name = p.split('/')
        assert vendor == 'vendor-1'
        stamp, rest = name.split('_', 1)
        assert stamp.isdigit() and rest.endswith('.png')


@pytest.mark.parametrize('filename,expected', [
    ('poster.PNG', 'png'), ('archive.tar.gz', 'gz'), ('noext', None), ('weird.p/ng', None), (None, None),
])
def test_file_extension(filename, expected):
    assert file_extension(filename) == expected


def test_object_store_is_abstract():
    with pytest.raises(TypeError):
        ObjectStore()

    class UrlOnly(ObjectStore):
        def public_url(self, bucket, path):
            return f'{bucket}/{path}'
    with pytest.raises(TypeError):
        UrlOnly()
