# tests/integration/conftest.py (v1)
"""Shared fixtures for integration tests using testcontainers.

Container lifecycle:
- session scope: containers start once per pytest session
- function scope: fresh key prefix / collection per test for isolation

Containers are reached through their bridge network IP and internal port,
which also works from inside a devcontainer with docker-outside-of-docker.
"""

from __future__ import annotations

import logging
import time
import uuid

import pytest

logger = logging.getLogger(__name__)


def pytest_configure(config):
    config.addinivalue_line("markers", "redis: marks tests requiring Redis container")
    config.addinivalue_line("markers", "mongodb: marks tests requiring MongoDB container")


# =====================================================================
#  DEVCONTAINER NETWORKING HELPERS
# =====================================================================

def _get_container_bridge_ip(container, max_attempts: int = 10) -> str:
    """Get container bridge network IP with retries."""
    for attempt in range(max_attempts):
        try:
            wrapped = container.get_wrapped_container()
            wrapped.reload()
            networks = wrapped.attrs.get("NetworkSettings", {}).get("Networks", {})
            for net_name, net_info in networks.items():
                ip = net_info.get("IPAddress", "")
                if ip:
                    logger.info(
                        "Container %s IP: %s (network: %s, attempt %d)",
                        wrapped.short_id, ip, net_name, attempt + 1,
                    )
                    return ip
        except Exception as e:
            logger.debug("Error getting IP (attempt %d): %s", attempt + 1, e)
        time.sleep(0.5)

    raise RuntimeError(
        f"Could not obtain container bridge IP after {max_attempts} attempts"
    )


def _docker_available() -> bool:
    """Check if Docker daemon is reachable."""
    try:
        import docker
        client = docker.from_env()
        client.ping()
        return True
    except Exception:
        return False


# =====================================================================
#  REDIS CONTAINER: session scope (bridge IP)
# =====================================================================

REDIS_IMAGE = "redis:7-alpine"
REDIS_INTERNAL_PORT = 6379


@pytest.fixture(scope="session")
def redis_url():
    if not _docker_available():
        pytest.skip("Docker not available")

    from testcontainers.core.container import DockerContainer
    from testcontainers.core.waiting_utils import wait_for_logs

    container = DockerContainer(REDIS_IMAGE).with_exposed_ports(REDIS_INTERNAL_PORT)
    container.start()
    wait_for_logs(container, predicate=r"Ready to accept connections", timeout=30)

    ip = _get_container_bridge_ip(container)
    logger.info("Redis ready at %s:%d", ip, REDIS_INTERNAL_PORT)
    yield f"redis://{ip}:{REDIS_INTERNAL_PORT}/0"
    container.stop()


@pytest.fixture
def redis_fast_store(redis_url):
    from smartcache.cache.redis_fast_store import RedisFastStore
    return RedisFastStore(redis_url=redis_url, key_prefix=f"test_{uuid.uuid4().hex[:8]}:")


# =====================================================================
#  MONGODB CONTAINER: session scope (bridge IP)
# =====================================================================

MONGO_IMAGE = "mongo:7"
MONGO_INTERNAL_PORT = 27017


@pytest.fixture(scope="session")
def mongodb_url():
    if not _docker_available():
        pytest.skip("Docker not available")

    from testcontainers.core.container import DockerContainer
    from testcontainers.core.waiting_utils import wait_for_logs

    container = DockerContainer(MONGO_IMAGE).with_exposed_ports(MONGO_INTERNAL_PORT)
    container.start()
    wait_for_logs(container, predicate=r"Waiting for connections", timeout=60)

    ip = _get_container_bridge_ip(container)
    logger.info("MongoDB ready at %s:%d", ip, MONGO_INTERNAL_PORT)
    yield f"mongodb://{ip}:{MONGO_INTERNAL_PORT}"
    container.stop()


@pytest.fixture
def mongo_record_store(mongodb_url):
    from pymongo import MongoClient

    from smartcache.cache.mongo_record_store import MongoRecordStore
    database = "smartcache_test"
    collection = f"summaries_{uuid.uuid4().hex[:8]}"
    store = MongoRecordStore(url=mongodb_url, database=database, collection=collection)
    yield store
    # The async client is bound to the test's event loop, which is closed here.
    cleanup = MongoClient(mongodb_url)
    try:
        cleanup[database].drop_collection(collection)
    except Exception as e:
        logger.debug("Collection cleanup failed: %s", e)
    finally:
        cleanup.close()
