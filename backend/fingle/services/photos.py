import os
import uuid

from flask import current_app
from werkzeug.utils import secure_filename


class PhotoStore:
    def store(self, data: bytes, filename: str = '') -> str:
        """Persist the photo and return an opaque reference (URL)."""
        raise NotImplementedError


class LocalPhotoStore(PhotoStore):
    """Writes uploads to a directory and serves them under a base URL."""

    def __init__(self, upload_dir: str, base_url: str):
        self.upload_dir = upload_dir
        self.base_url = base_url if base_url.endswith('/') else base_url + '/'

    def store(self, data, filename=''):
        ext = os.path.splitext(secure_filename(filename or ''))[1].lower() or '.jpg'
        name = f"{uuid.uuid4().hex}{ext}"
        os.makedirs(self.upload_dir, exist_ok=True)
        with open(os.path.join(self.upload_dir, name), 'wb') as fh:
            fh.write(data)
        return self.base_url + name


def get_photo_store() -> PhotoStore:
    return current_app.extensions['fingle.photo_store']
