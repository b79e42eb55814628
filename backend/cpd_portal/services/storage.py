"""Object store backends for uploaded vendor files.

Both backends share one contract: `upload(bucket, path, data, content_type)`
stores bytes without overwriting and returns the public URL.
"""
from __future__ import annotations
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from cpd_portal.errors import StorageError


class ObjectStore(ABC):
    @abstractmethod
    def upload(self, bucket: str, path: str, data: bytes, content_type: str, overwrite: bool = False) -> str:
        ...

    @abstractmethod
    def public_url(self, bucket: str, path: str) -> str:
        ...


class LocalObjectStore(ObjectStore):
    """Filesystem-backed store used for development and tests."""

    def __init__(self, root: str, public_base_url: str):
        self.root = os.path.abspath(root)
        self.public_base_url = public_base_url.rstrip('/')

    def _target(self, bucket: str, path: str) -> str:
        target = os.path.abspath(os.path.join(self.root, bucket, path))
        if not target.startswith(self.root + os.sep):
            raise StorageError(f'Invalid object path: {path}')
        return target

    def upload(self, bucket: str, path: str, data: bytes, content_type: str, overwrite: bool = False) -> str:
        target = self._target(bucket, path)
        os.makedirs(os.path.dirname(target), exist_ok=True)
        try:
            with open(target, 'wb' if overwrite else 'xb') as fh:
                fh.write(data)
        except FileExistsError:
            raise StorageError('The resource already exists')
        return self.public_url(bucket, path)

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url}/{bucket}/{quote(path)}"

    def local_path(self, bucket: str, path: str) -> str:
        return self._target(bucket, path)


class SupabaseStorage(ObjectStore):
    """Supabase Storage REST API, authenticated with the service role key."""

    def __init__(self, base_url: str, service_key: str, timeout: float = 10, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.service_key = service_key
        self.timeout = timeout
        self.http = session or requests.Session()

    def upload(self, bucket: str, path: str, data: bytes, content_type: str, overwrite: bool = False) -> str:
        resp = self.http.post(
            f"{self.base_url}/storage/v1/object/{bucket}/{quote(path)}",
            data=data,
            headers={
                'Authorization': f'Bearer {self.service_key}',
                'apikey': self.service_key,
                'Content-Type': content_type,
                'x-upsert': 'true' if overwrite else 'false',
            },
            timeout=self.timeout,
        )
        if not resp.ok:
            raise StorageError(f'Storage upload failed ({resp.status_code}): {resp.text}')
        return self.public_url(bucket, path)

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{quote(path)}"


def build_object_store(config: Dict[str, Any]) -> ObjectStore:
    backend = config.get('STORAGE_BACKEND', 'local')
    if backend == 'supabase':
        if not config.get('SUPABASE_URL') or not config.get('SUPABASE_SERVICE_ROLE_KEY'):
            raise RuntimeError('STORAGE_BACKEND=supabase requires SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY')
        return SupabaseStorage(config['SUPABASE_URL'], config['SUPABASE_SERVICE_ROLE_KEY'], config.get('HTTP_TIMEOUT_SECONDS', 10))
    if backend == 'local':
        return LocalObjectStore(config['LOCAL_STORAGE_DIR'], config['PUBLIC_STORAGE_URL'])
    raise RuntimeError(f'Unknown STORAGE_BACKEND: {backend}')

__all__ = ['ObjectStore', 'LocalObjectStore', 'SupabaseStorage', 'build_object_store']
