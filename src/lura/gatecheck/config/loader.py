# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

"""Schema document loaders.

Loaders are dispatched on the location URL scheme. Every loader exposes
``load(url)`` returning the decoded JSON document. :class:`SchemeURLLoader` also
acts as a ``referencing`` retriever so that remote ``$ref`` targets are fetched
the same way as the root schema.
"""

from contextlib import closing
import json
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit
from urllib.request import url2pathname

import requests
from referencing import Resource
from referencing.jsonschema import DRAFT202012

from . import EMBEDDED_SCHEMA_URI
from .source import EmbeddedDefault, SchemaSource
from ..errors import (
    SchemaLoadError,
    UnexpectedStatus,
    UnsupportedScheme,
    UpstreamUnavailable,
)
from ..logger import logger

HTTP_TIMEOUT = 10


def to_url(location: str) -> str:
    """Turn a schema location into an URL, plain paths become `file://` URLs."""
    scheme = urlsplit(location).scheme
    # single letter scheme is a windows drive
    if len(scheme) > 1:
        return location
    return Path(location).resolve().as_uri()


def _decode(url: str, raw: str | bytes) -> Any:
    try:
        return json.loads(raw)
    except ValueError as e:
        raise SchemaLoadError(f"{url} is not a valid JSON document: {e}") from e


class FileLoader:
    def load(self, url: str) -> Any:
        path = Path(url2pathname(urlsplit(url).path))
        logger.debug(f"reading schema from {path}")
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise SchemaLoadError(f"{url}: {e.strerror or e}") from e
        return _decode(url, raw)


class HTTPURLLoader:
    def __init__(self, session: requests.Session | None = None, timeout: float = HTTP_TIMEOUT):
        self._session = session or requests.Session()
        self._timeout = timeout

    def load(self, url: str) -> Any:
        logger.debug(f"fetching schema {url}")
        try:
            response = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as e:
            raise UpstreamUnavailable(f"{url}: {e}") from e

        with closing(response):
            if response.status_code != requests.codes.ok:
                raise UnexpectedStatus(url, response.status_code)
            return _decode(url, response.content)


class SchemeURLLoader(dict):
    def load(self, url: str) -> Any:
        scheme = urlsplit(url).scheme
        try:
            loader = self[scheme]
        except KeyError:
            raise UnsupportedScheme(f"no loader for scheme '{scheme}' ({url})") from None
        return loader.load(url)

    def retrieve(self, uri: str) -> Resource:
        return Resource.from_contents(self.load(uri), default_specification=DRAFT202012)


def default_loader(session: requests.Session | None = None) -> SchemeURLLoader:
    http = HTTPURLLoader(session)
    return SchemeURLLoader(file=FileLoader(), http=http, https=http)


def load_schema(source: SchemaSource, loader: SchemeURLLoader) -> tuple[str, Any]:
    """Load the schema document of the given source.

    Embedded schema is decoded in place, no storage nor network access occurs.

    :returns: the URI the document is registered under and the decoded document
    """
    if isinstance(source, EmbeddedDefault):
        return EMBEDDED_SCHEMA_URI, _decode(EMBEDDED_SCHEMA_URI, source.text)

    url = to_url(source.location)
    return url, loader.load(url)
