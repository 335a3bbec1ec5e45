"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path

import pytest

MODULES_PY = textwrap.dedent("""\
    from kubeplan.core.models import Module, Wait


    def _deployment(name):
        def generate(ctx):
            return [
                {
                    "apiVersion": "apps/v1",
                    "kind": "Deployment",
                    "metadata": {"name": name},
                    "spec": {"replicas": 1, "image": ctx.config("image_tag", "latest")},
                },
                {"apiVersion": "v1", "kind": "Service", "metadata": {"name": name}},
            ]
        return generate


    def _job(ctx):
        return [{"apiVersion": "batch/v1", "kind": "Job", "metadata": {"name": "migrate"}}]


    MODULES = [
        Module("db", generator=_deployment("db")),
        Module("migrate", deps=["db"], generator=_job,
               waits=[Wait(kind="Deployment", name="db", timeout=60)]),
        Module("api", deps=["migrate"], generator=_deployment("api"),
               waits=[Wait(kind="Job", name="migrate")]),
    ]
""")

CONFIG_YML = textwrap.dedent("""\
    env: staging
    kube:
      context: test-cluster
      namespace: apps
    modules: modules.py
    configs:
      image_tag: "1.2.3"
""")


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A directory with kubeplan.yml and a three-module modules.py."""
    (tmp_path / "kubeplan.yml").write_text(CONFIG_YML)
    (tmp_path / "modules.py").write_text(MODULES_PY)
    return tmp_path


@pytest.fixture
def config_path(project_dir: Path) -> Path:
    return project_dir / "kubeplan.yml"
