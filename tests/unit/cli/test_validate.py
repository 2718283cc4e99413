"""Unit tests for the validate CLI command.

These tests invoke the root group so logging is configured the way the
installed entry point configures it. ``--log-level ERROR`` keeps structlog
records out of the captured output.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml
from click.testing import CliRunner

from netadmit.cli.main import cli
from netadmit.cli.utils import ExitCode


def extract_json_from_output(output: str) -> Any:
    """Decode the JSON document at the start of CLI output.

    Args:
        output: Raw CLI output, possibly followed by an error line.

    Returns:
        Parsed JSON value.
    """
    value, _ = json.JSONDecoder().raw_decode(output[output.index("[") :])
    return value


def _tenant_network(name: str, **options: Any) -> dict[str, Any]:
    return {
        "apiVersion": "danm.k8s.io/v1",
        "kind": "TenantNetwork",
        "metadata": {"name": name, "namespace": "vnf"},
        "spec": {"NetworkID": name[:12], "NetworkType": "ipvlan", "Options": options},
    }


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def write_manifests(tmp_path: Path) -> Any:
    """Factory writing documents as multi-document YAML."""

    def _write(filename: str, *docs: dict[str, Any]) -> Path:
        path = tmp_path / filename
        path.write_text(yaml.safe_dump_all(docs))
        return path

    return _write


def _invoke(runner: CliRunner, *args: str) -> Any:
    return runner.invoke(cli, ["--log-level", "ERROR", "validate", *args])


class TestValidateCreate:
    """Test validating new manifests."""

    @pytest.mark.requirement("cli")
    def test_valid_manifests_admitted(
        self,
        runner: CliRunner,
        write_manifests: Any,
        danmnet_object: dict[str, Any],
    ) -> None:
        """Test that valid documents exit with SUCCESS."""
        path = write_manifests(
            "nets.yaml", danmnet_object, _tenant_network("internal", cidr="10.1.0.0/24")
        )

        result = _invoke(runner, str(path))

        assert result.exit_code == ExitCode.SUCCESS
        assert "Validation complete: 2/2 manifest(s) admitted" in result.output

    @pytest.mark.requirement("cli")
    def test_rejected_manifest_reported(
        self,
        runner: CliRunner,
        write_manifests: Any,
        danmnet_object: dict[str, Any],
    ) -> None:
        """Test that a rejection is printed with the network name."""
        danmnet_object["spec"]["Options"]["vxlan"] = 600
        path = write_manifests("nets.yaml", danmnet_object)

        result = _invoke(runner, str(path))

        assert result.exit_code == ExitCode.VALIDATION_ERROR
        assert (
            "Error: [management] VLAN ID and VxLAN ID parameters are mutually exclusive"
            in result.output
        )
        assert "Validation failed: 1/1 manifest(s) rejected" in result.output

    @pytest.mark.requirement("cli")
    def test_collect_all_reports_every_error(
        self, runner: CliRunner, write_manifests: Any
    ) -> None:
        """Test that --collect-all prints one line per failing rule."""
        doc = _tenant_network("internal", host_device="ens4", routes={"0.0.0.0/0": "10.0.0.1"})
        path = write_manifests("nets.yaml", doc)

        result = _invoke(runner, str(path), "--collect-all")

        assert result.exit_code == ExitCode.VALIDATION_ERROR
        assert "IP routes cannot be defined for a L2 network" in result.output
        assert "Manually configuring any one of host_device" in result.output

    @pytest.mark.requirement("cli")
    def test_kind_override(
        self, runner: CliRunner, write_manifests: Any, danmnet_object: dict[str, Any]
    ) -> None:
        """Test that --kind selects the chain regardless of document kind."""
        path = write_manifests("nets.yaml", danmnet_object)

        result = _invoke(runner, str(path), "--kind", "TenantNetwork")

        assert result.exit_code == ExitCode.VALIDATION_ERROR
        assert "is not allowed for TenantNetworks!" in result.output

    @pytest.mark.requirement("cli")
    def test_document_without_kind_rejected(
        self, runner: CliRunner, write_manifests: Any
    ) -> None:
        """Test that a document without kind is reported, not crashed on."""
        doc = _tenant_network("internal")
        del doc["kind"]
        path = write_manifests("nets.yaml", doc)

        result = _invoke(runner, str(path))

        assert result.exit_code == ExitCode.VALIDATION_ERROR
        assert "Resource kind is not set for network: internal" in result.output


class TestValidateJsonOutput:
    """Test --output json."""

    @pytest.mark.requirement("cli")
    def test_json_includes_defaulted_pool(
        self, runner: CliRunner, write_manifests: Any
    ) -> None:
        """Test that admitted outcomes carry the pool as it would be persisted."""
        path = write_manifests("nets.yaml", _tenant_network("internal", cidr="10.1.0.0/24"))

        result = _invoke(runner, str(path), "--output", "json")

        assert result.exit_code == ExitCode.SUCCESS
        outcomes = json.loads(result.output)
        assert outcomes[0]["allowed"] is True
        assert outcomes[0]["kind"] == "TenantNetwork"
        assert outcomes[0]["operation"] == "CREATE"
        assert outcomes[0]["pool"] == {"start": "10.1.0.1", "end": "10.1.0.254"}

    @pytest.mark.requirement("cli")
    def test_json_rejection(
        self, runner: CliRunner, write_manifests: Any, danmnet_object: dict[str, Any]
    ) -> None:
        """Test that rejected outcomes list their errors and failing rules."""
        danmnet_object["spec"]["AllowedTenants"] = ["tenant-a"]
        path = write_manifests("nets.yaml", danmnet_object)

        result = _invoke(runner, str(path), "--output", "json")

        assert result.exit_code == ExitCode.VALIDATION_ERROR
        outcomes = extract_json_from_output(result.output)
        assert outcomes[0]["allowed"] is False
        assert outcomes[0]["failed_rules"] == ["validate_absence_of_allowed_tenants"]


class TestValidateUpdate:
    """Test --operation update."""

    @pytest.mark.requirement("cli")
    def test_update_requires_old(self, runner: CliRunner, write_manifests: Any) -> None:
        """Test that update without --old is a usage error."""
        path = write_manifests("nets.yaml", _tenant_network("internal"))

        result = _invoke(runner, str(path), "--operation", "update")

        assert result.exit_code == ExitCode.USAGE_ERROR
        assert "--old is required" in result.output

    @pytest.mark.requirement("cli")
    def test_update_changing_device_rejected(
        self, runner: CliRunner, write_manifests: Any
    ) -> None:
        """Test that old and new documents are paired by identity."""
        old = write_manifests("old.yaml", _tenant_network("internal", host_device="eth0"))
        new = write_manifests("new.yaml", _tenant_network("internal", host_device="eth1"))

        result = _invoke(runner, str(new), "-o", "update", "--old", str(old))

        assert result.exit_code == ExitCode.VALIDATION_ERROR
        assert "Manually changing any one of host_device" in result.output

    @pytest.mark.requirement("cli")
    def test_update_keeping_device_admitted(
        self, runner: CliRunner, write_manifests: Any
    ) -> None:
        """Test that carrying over operator-set attributes is allowed."""
        old = write_manifests("old.yaml", _tenant_network("internal", host_device="eth0"))
        new = write_manifests(
            "new.yaml", _tenant_network("internal", host_device="eth0", cidr="10.1.0.0/24")
        )

        result = _invoke(runner, str(new), "-o", "update", "--old", str(old))

        assert result.exit_code == ExitCode.SUCCESS

    @pytest.mark.requirement("cli")
    def test_update_with_kind_override_pairs_kindless_documents(
        self, runner: CliRunner, write_manifests: Any
    ) -> None:
        """Test that --kind pairs documents that declare no kind."""
        old_doc = _tenant_network("internal", host_device="eth0")
        new_doc = _tenant_network("internal", host_device="eth0")
        del old_doc["kind"]
        del new_doc["kind"]
        old = write_manifests("old.yaml", old_doc)
        new = write_manifests("new.yaml", new_doc)

        result = _invoke(
            runner, str(new), "-o", "update", "--old", str(old), "--kind", "TenantNetwork"
        )

        assert result.exit_code == ExitCode.SUCCESS
        assert "Validation complete: 1/1 manifest(s) admitted" in result.output

    @pytest.mark.requirement("cli")
    def test_update_with_kind_override_ignores_declared_kinds(
        self, runner: CliRunner, write_manifests: Any
    ) -> None:
        """Test that --kind pairs documents whose declared kinds differ."""
        old_doc = _tenant_network("internal", host_device="eth0")
        old_doc["kind"] = "DanmNet"
        old = write_manifests("old.yaml", old_doc)
        new = write_manifests("new.yaml", _tenant_network("internal", host_device="eth1"))

        result = _invoke(
            runner, str(new), "-o", "update", "--old", str(old), "--kind", "TenantNetwork"
        )

        assert result.exit_code == ExitCode.VALIDATION_ERROR
        assert "Manually changing any one of host_device" in result.output
        assert "requires the previous manifest" not in result.output

    @pytest.mark.requirement("cli")
    def test_update_without_previous_version_rejected(
        self, runner: CliRunner, write_manifests: Any
    ) -> None:
        """Test that a document missing from --old is reported."""
        old = write_manifests("old.yaml", _tenant_network("other"))
        new = write_manifests("new.yaml", _tenant_network("internal"))

        result = _invoke(runner, str(new), "-o", "update", "--old", str(old))

        assert result.exit_code == ExitCode.VALIDATION_ERROR
        assert "requires the previous manifest" in result.output


class TestValidateInputErrors:
    """Test file handling errors."""

    @pytest.mark.requirement("cli")
    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test that a missing manifest file exits with FILE_NOT_FOUND."""
        result = _invoke(runner, str(tmp_path / "absent.yaml"))

        assert result.exit_code == ExitCode.FILE_NOT_FOUND
        assert "File not found" in result.output

    @pytest.mark.requirement("cli")
    def test_invalid_yaml(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test that malformed YAML exits with VALIDATION_ERROR."""
        path = tmp_path / "nets.yaml"
        path.write_text("kind: DanmNet\nspec: [unclosed\n")

        result = _invoke(runner, str(path))

        assert result.exit_code == ExitCode.VALIDATION_ERROR
        assert "Invalid YAML" in result.output

    @pytest.mark.requirement("cli")
    def test_empty_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test that an empty file is not an error."""
        path = tmp_path / "nets.yaml"
        path.write_text("")

        result = _invoke(runner, str(path))

        assert result.exit_code == ExitCode.SUCCESS
        assert "No manifests found" in result.output

    @pytest.mark.requirement("cli")
    def test_unknown_kind_option(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test that --kind only accepts registered kinds."""
        path = tmp_path / "nets.yaml"
        path.write_text("")

        result = _invoke(runner, str(path), "--kind", "NetworkPolicy")

        assert result.exit_code == ExitCode.USAGE_ERROR
