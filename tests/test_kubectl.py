"""
Tests for the kubectl adapter and manifest serialization.

run_command / race are mocked; no kubectl binary is needed.
"""

from unittest.mock import patch

import yaml

from kubeplan.adapters.kubectl import Kubectl
from kubeplan.adapters.manifest import to_manifest
from kubeplan.adapters.shell.command import CommandResult


def _mock_result(returncode=0):
    return CommandResult(argv=["kubectl"], returncode=returncode)


class TestCommonArgs:
    def test_defaults(self):
        assert Kubectl().common_args() == ["--namespace=default"]

    def test_context_and_namespace(self):
        kubectl = Kubectl(context="prod", namespace="apps")
        assert kubectl.common_args() == ["--context=prod", "--namespace=apps"]

    def test_empty_namespace_is_omitted(self):
        assert Kubectl(namespace="").common_args() == []

    def test_kubeconfig_first(self):
        kubectl = Kubectl(kubeconfig="/tmp/kc", context="c")
        assert kubectl.command("get", "pods") == [
            "kubectl", "--kubeconfig=/tmp/kc", "--context=c", "--namespace=default", "get", "pods",
        ]

    def test_custom_binary(self):
        assert Kubectl(binary="/opt/bin/kubectl").command()[0] == "/opt/bin/kubectl"


class TestVerbs:
    @patch("kubeplan.adapters.kubectl.run_command", return_value=_mock_result())
    def test_apply(self, mock_run):
        Kubectl().apply("doc")
        mock_run.assert_called_once_with(
            ["kubectl", "--namespace=default", "apply", "-f", "-"], input="doc",
        )

    @patch("kubeplan.adapters.kubectl.run_command", return_value=_mock_result())
    def test_apply_dry_run(self, mock_run):
        Kubectl().apply("doc", dry_run=True)
        assert mock_run.call_args.args[0][2:] == ["apply", "--dry-run=server", "-f", "-"]

    @patch("kubeplan.adapters.kubectl.run_command", return_value=_mock_result())
    def test_delete_job(self, mock_run):
        Kubectl().delete_job("seed")
        assert mock_run.call_args.args[0][2:] == [
            "delete", "jobs", "seed", "--ignore-not-found",
        ]

    @patch("kubeplan.adapters.kubectl.run_command", return_value=_mock_result())
    def test_rollout_status(self, mock_run):
        Kubectl().rollout_status("StatefulSet", "pg", 90)
        assert mock_run.call_args.args[0][2:] == [
            "rollout", "status", "--timeout=90s", "StatefulSet/pg",
        ]

    @patch("kubeplan.adapters.kubectl.race", return_value=(1, 0))
    def test_race_job_conditions(self, mock_race):
        condition, returncode = Kubectl().race_job_conditions("seed", 30)
        assert (condition, returncode) == ("failed", 0)
        complete, failed = mock_race.call_args.args[0]
        assert complete[2:] == ["wait", "--timeout=30s", "--for=condition=complete", "job/seed"]
        assert failed[2:] == ["wait", "--timeout=30s", "--for=condition=failed", "job/seed"]


class TestManifest:
    def test_strings_double_quoted(self):
        text = to_manifest({"kind": "ConfigMap", "data": {"flag": "yes", "version": "1.10"}})
        assert '"flag": "yes"' in text
        assert '"version": "1.10"' in text

    def test_numbers_and_bools_unquoted(self):
        text = to_manifest({"spec": {"replicas": 3, "paused": False}})
        assert '"replicas": 3' in text
        assert '"paused": false' in text

    def test_block_style_and_key_order(self):
        obj = {"apiVersion": "v1", "kind": "Service", "metadata": {"name": "api"}}
        text = to_manifest(obj)
        assert text.splitlines()[:3] == ['"apiVersion": "v1"', '"kind": "Service"', '"metadata":']
        assert "{" not in text

    def test_parses_back(self):
        obj = {
            "kind": "Deployment",
            "metadata": {"name": "api", "labels": {"app": "api"}},
            "spec": {"template": {"spec": {"containers": [{"name": "api", "args": ["--port", "80"]}]}}},
        }
        assert yaml.safe_load(to_manifest(obj)) == obj
