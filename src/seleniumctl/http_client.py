"""HTTP client factory for the release store, with explicit proxy settings.

The process environment is read once, by ``proxy_settings_from_env``. Everything
downstream receives the settings explicitly.
"""

from __future__ import annotations

import os
from collections.abc import Generator, Mapping
from contextlib import contextmanager

import httpx

from seleniumctl.constants import HTTP_TIMEOUT, PROXY_ENV_VARS
from seleniumctl.models import ProxySettings


def normalize_proxy(value: str) -> str:
    """Prefix ``http://`` to a proxy value that has no scheme.

    >>> normalize_proxy("proxy.com:8080")
    'http://proxy.com:8080'
    >>> normalize_proxy("https://proxy.com")
    'https://proxy.com'
    """
    value = value.strip()
    if "://" in value:
        return value
    return f"http://{value}"


def proxy_settings_from_env(environ: Mapping[str, str] | None = None) -> ProxySettings:
    """Read ``http_proxy`` (then ``HTTP_PROXY``) into normalized ProxySettings."""
    env = os.environ if environ is None else environ
    for name in PROXY_ENV_VARS:
        value = env.get(name, "").strip()
        if value:
            return ProxySettings(url=normalize_proxy(value))
    return ProxySettings()


def normalize_proxy_env(environ: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of environ with every set proxy variable given a scheme.

    Blank values are left untouched and count as unset.
    """
    env = dict(environ)
    for name in PROXY_ENV_VARS:
        value = env.get(name, "").strip()
        if value:
            env[name] = normalize_proxy(value)
    return env


def build_http_client(
    proxy: ProxySettings | None = None, timeout: float = HTTP_TIMEOUT
) -> httpx.Client:
    """Create an httpx client for the release store.

    Args:
        proxy: Proxy to route requests through. Read from the environment when None.
        timeout: Transport timeout in seconds

    Returns:
        A new httpx.Client; the caller owns (and closes) it
    """
    if proxy is None:
        proxy = proxy_settings_from_env()
    # trust_env=False: the proxy decision has already been made above.
    return httpx.Client(
        proxy=proxy.url,
        timeout=timeout,
        follow_redirects=True,
        trust_env=False,
    )


@contextmanager
def http_session(
    client: httpx.Client | None = None,
) -> Generator[httpx.Client, None, None]:
    """Yield the given client, or a fresh one that is closed on exit."""
    if client is not None:
        yield client
        return
    with build_http_client() as owned:
        yield owned
