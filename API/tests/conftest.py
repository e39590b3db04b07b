# tests/conftest.py
import hashlib

import pytest

from flowscope.domain.container import ContainerRecord, ContainerStatus
from flowscope.domain.runtime import RawContainer
from flowscope.services.classifier import classify


def fake_docker_id(name: str) -> str:
    return hashlib.sha256(name.encode()).hexdigest()


@pytest.fixture
def make_record():
    """Build a ContainerRecord the way the normalizer would, category from the name."""

    def _make(name, status=ContainerStatus.RUNNING, id=None, networks=(), image="img:latest", ports=()):
        return ContainerRecord(
            id=id or fake_docker_id(name)[:12],
            name=name,
            image=image,
            status=status,
            category=classify(name),
            networks=tuple(networks),
            ports=tuple(ports),
        )

    return _make


@pytest.fixture
def make_raw():
    def _make(name, id=None, state="running", status="Up 5 minutes", networks=("backend",), **kwargs):
        return RawContainer(
            id=id or fake_docker_id(name),
            names=(f"/{name}",),
            image=kwargs.pop("image", f"{name}:latest"),
            state=state,
            status=status,
            networks=tuple(networks),
            **kwargs,
        )

    return _make
