import logging
import os
from collections import namedtuple

import requests

from inkfolio.errors import NotFound, UpstreamFailure

logger = logging.getLogger(__name__)

StoredBlob = namedtuple('StoredBlob', ['url', 'pathname'])


class LocalBlobStorage:
    """Keeps blobs on local disk under UPLOAD_FOLDER; served by /api/uploads/<path>."""

    def __init__(self, root, base_url='/api/uploads'):
        self.root = os.path.abspath(root)
        self.base_url = base_url.rstrip('/')

    def path_for(self, pathname):
        path = os.path.abspath(os.path.join(self.root, pathname))
        if not path.startswith(self.root + os.sep):
            raise NotFound('File not found')
        return path

    def put(self, pathname, data, content_type=None):
        path = self.path_for(pathname)
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, 'wb') as fh:
                fh.write(data)
        except OSError as exc:
            raise UpstreamFailure('Could not store %s' % pathname) from exc
        return StoredBlob('%s/%s' % (self.base_url, pathname), pathname)

    def delete(self, url):
        prefix = self.base_url + '/'
        pathname = url[len(prefix):] if url.startswith(prefix) else url
        try:
            os.remove(self.path_for(pathname))
        except FileNotFoundError:
            logger.info('Blob %s already gone', pathname)
        except OSError as exc:
            raise UpstreamFailure('Could not delete %s' % pathname) from exc


class HttpBlobStorage:
    """Client for a Vercel-Blob-style HTTP API (PUT /<pathname>, POST /delete)."""

    api_version = '7'

    def __init__(self, api_url, token, timeout=30, session=None):
        self.api_url = api_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self.http = session or requests.Session()

    def _headers(self, **extra):
        headers = {
            'Authorization': 'Bearer %s' % self.token,
            'x-api-version': self.api_version,
        }
        headers.update(extra)
        return headers

    def put(self, pathname, data, content_type=None):
        headers = self._headers(**{'x-add-random-suffix': '0'})
        if content_type:
            headers['x-content-type'] = content_type
        try:
            resp = self.http.put('%s/%s' % (self.api_url, pathname), data=data,
                                 headers=headers, timeout=self.timeout)
            resp.raise_for_status()
            body = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise UpstreamFailure('Blob upload failed for %s' % pathname) from exc
        return StoredBlob(body['url'], body.get('pathname', pathname))

    def delete(self, url):
        try:
            resp = self.http.post('%s/delete' % self.api_url, json={'urls': [url]},
                                  headers=self._headers(), timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise UpstreamFailure('Blob delete failed for %s' % url) from exc


def storage_from_config(config):
    backend = config.get('BLOB_BACKEND', 'local')
    if backend == 'http':
        return HttpBlobStorage(config['BLOB_API_URL'], config['BLOB_READ_WRITE_TOKEN'])
    if backend == 'local':
        return LocalBlobStorage(config['UPLOAD_FOLDER'], config.get('UPLOAD_URL_PREFIX', '/api/uploads'))
    raise ValueError('Unknown BLOB_BACKEND: %r' % backend)
