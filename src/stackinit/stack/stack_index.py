"""Look up a stack's template archive URL in a YAML stack index.

Two index layouts are understood::

    projects:                      stacks:
      nodejs-express:                - id: nodejs-express
        - urls:                        templates:
            - https://.../x.tar.gz       - id: simple
                                           url: https://.../x.tar.gz
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List

import httpx
import yaml

from stackinit.errors import (
    RemoteStatusError,
    StackInitError,
    TransportError,
    UnknownStackError,
)
from stackinit.fetch.remote_fetcher import build_client, build_request

logger = logging.getLogger(__name__)

DEFAULT_INDEX_URL = "https://raw.githubusercontent.com/appsody/stacks/master/index.yaml"


@dataclass(frozen=True)
class StackIndex:
    """Stack name -> template URLs, in index order."""

    templates: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def from_yaml(cls, text, source="stack index"):
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise StackInitError(f"{source} is not valid YAML: {e}") from e
        if not isinstance(data, dict):
            raise StackInitError(f"{source} is not a stack index")

        templates = {}
        for name, entries in _mapping(data.get("projects"), source, "projects").items():
            where = f"projects.{name}"
            urls = templates[name] = []
            for entry in _sequence(entries, source, where):
                urls.extend(_sequence(_mapping(entry, source, where).get("urls"), source, where))
        for stack in _sequence(data.get("stacks"), source, "stacks"):
            stack = _mapping(stack, source, "stacks")
            stack_id = stack.get("id")
            if not stack_id:
                raise StackInitError(f"{source}: stack entry has no id")
            where = f"stacks.{stack_id}.templates"
            urls = templates.setdefault(stack_id, [])
            for template in _sequence(stack.get("templates"), source, where):
                url = _mapping(template, source, where).get("url")
                if url:
                    urls.append(url)
        return cls(templates)

    @classmethod
    def load(cls, location, client=None):
        """Load the index from a local path or an http(s)/file URL."""
        if os.path.isfile(location):
            logger.debug("Reading stack index from %s", location)
            try:
                with open(location, encoding="utf-8") as f:
                    return cls.from_yaml(f.read(), source=location)
            except (OSError, UnicodeDecodeError) as e:
                raise StackInitError(f"Cannot read stack index {location}: {e}") from e

        logger.debug("Fetching stack index from %s", location)
        owns_client = client is None
        if owns_client:
            client = build_client()
        try:
            response = client.send(build_request(client, location))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"Failed to fetch {location}: {e}") from e
        finally:
            if owns_client:
                client.close()
        if response.status_code != 200:
            raise RemoteStatusError(location, response.status_code, response.reason_phrase)
        return cls.from_yaml(response.text, source=location)

    def template_url(self, stack):
        urls = self.templates.get(stack)
        if not urls:
            raise UnknownStackError(
                f"Could not find a stack with the name {stack}.",
                remediation="Check the stack index for the available stacks.",
            )
        return urls[0]


def _mapping(value, source, where):
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise StackInitError(f"{source}: {where} should be a mapping")
    return value


def _sequence(value, source, where):
    if value is None:
        return []
    if not isinstance(value, list):
        raise StackInitError(f"{source}: {where} should be a list")
    return value
