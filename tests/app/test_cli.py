from __future__ import annotations

import json
from typing import Any

import pytest

from ocphosts.adapters.manifest import ManifestError
from ocphosts.adapters.ocp.schema import NamedNode
from ocphosts.app import LookupKind
from ocphosts.domain.errors import UnavailableError
from ocphosts.domain.model import HostKind, HostState, StoredResource
from ocphosts.domain.provisioning import Action, Change, ProvisioningResult, ResourceFailure
from ocphosts.ui import cli


def test_plan_prints_changes_and_summary(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}

    def fake_plan(path: str) -> list[Change]:
        captured["path"] = path
        return [
            Change(name="web", kind=HostKind.STANDARD, action=Action.UPDATE, fields=("cpu_count",)),
            Change(name="db", kind=HostKind.STANDARD, action=Action.NOOP),
        ]

    monkeypatch.setattr(cli, "plan_manifest", fake_plan)

    cli.main(["plan", "hosts.json"])

    out = capsys.readouterr().out
    assert captured["path"] == "hosts.json"
    assert "  ~ web (virtual_host): update [cpu_count]" in out
    assert "1 of 2 resource(s) would change" in out


def test_apply_exits_non_zero_when_a_resource_fails(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    result = ProvisioningResult(
        changes=[Change(name="db", kind=HostKind.STANDARD, action=Action.CREATE)],
        failures=[
            ResourceFailure(
                name="web",
                action=Action.UPDATE,
                error=UnavailableError("Busy", operation="virtualHostResize"),
            )
        ],
    )
    monkeypatch.setattr(cli, "apply_manifest", lambda _path: result)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["apply", "hosts.json"])

    captured = capsys.readouterr()
    assert excinfo.value.code == 1
    assert "  + db (virtual_host): create" in captured.out
    assert "web: update failed: virtualHostResize: Busy" in captured.err


def test_apply_success_returns_normally(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "apply_manifest", lambda _path: ProvisioningResult())

    cli.main(["apply", "hosts.json"])


def test_destroy_requires_names_or_all() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["destroy"])

    assert excinfo.value.code == 2


def test_destroy_all_passes_none(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[Any] = []

    def fake_destroy(names: Any) -> ProvisioningResult:
        captured.append(names)
        return ProvisioningResult()

    monkeypatch.setattr(cli, "destroy_resources", fake_destroy)

    cli.main(["destroy", "--all"])
    cli.main(["destroy", "web", "db"])

    assert captured == [None, ["web", "db"]]


def test_manifest_errors_exit_with_usage_code(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(_path: str) -> list[Change]:
        raise ManifestError("Invalid manifest")

    monkeypatch.setattr(cli, "plan_manifest", broken)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["plan", "hosts.json"])

    assert excinfo.value.code == 2


def test_unexpected_errors_exit_with_failure_code(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken() -> ProvisioningResult:
        raise RuntimeError("database is locked")

    monkeypatch.setattr(cli, "refresh_state", broken)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["refresh"])

    assert excinfo.value.code == 1


def test_lookup_prints_the_resolved_id(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, Any] = {}

    def fake_lookup(kind: LookupKind, name: str, **kwargs: Any) -> NamedNode:
        captured.update(kind=kind, name=name, **kwargs)
        return NamedNode(id="tpl-1", name=name)

    monkeypatch.setattr(cli, "lookup", fake_lookup)

    cli.main(
        ["lookup", "template", "rhel9", "--customer-id", "cust-1", "--region", "fi1"]
    )

    assert capsys.readouterr().out.strip() == "tpl-1"
    assert captured["kind"] is LookupKind.TEMPLATE
    assert captured["customer_id"] == "cust-1"
    assert captured["region"] == "fi1"
    assert captured["solution_type"] is None


def test_import_passes_kind_and_prints_state(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def fake_import(name: str, kind: HostKind, remote_id: str) -> StoredResource:
        return StoredResource(
            name=name, kind=kind, state=HostState(remote_id=remote_id, status="RUNNING")
        )

    monkeypatch.setattr(cli, "import_host", fake_import)

    cli.main(["import", "legacy", "virtual_host_inventory", "vh-caas-1"])

    assert capsys.readouterr().out.strip() == (
        "legacy\tvirtual_host_inventory\tvh-caas-1\tRUNNING"
    )


def test_show_json(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    resources = [
        StoredResource(name="pending", kind=HostKind.STANDARD),
        StoredResource(
            name="web",
            kind=HostKind.STANDARD,
            state=HostState(remote_id="vh-1", uuid="4210-aaaa", status="RUNNING"),
        ),
    ]
    monkeypatch.setattr(cli, "show_state", lambda: resources)

    cli.main(["show", "--json"])

    rows = json.loads(capsys.readouterr().out)
    assert rows[0] == {
        "name": "pending",
        "kind": "virtual_host",
        "remote_id": "",
        "uuid": "",
        "status": "",
    }
    assert rows[1]["remote_id"] == "vh-1"
