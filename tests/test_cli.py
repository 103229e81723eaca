import pytest
from typer.testing import CliRunner

from conftest import FakeFabric
from fabops.cli import cli as cli_module
from fabops.cli.cli import app
from fabops.cli.commands import medallion
from fabops.cli.common.context import FabricAppContext, settle_seconds
from fabops.core.fabric import Capacity

runner = CliRunner()
WS = "Medallion_Architecture.Workspace"


@pytest.fixture
def fake(monkeypatch) -> FakeFabric:
    fabric = FakeFabric()
    monkeypatch.setattr(
        cli_module,
        "build_fabric_context",
        lambda fab_bin: FabricAppContext(fab_bin=fab_bin, adapter=fabric),
    )
    return fabric


def _deploy(*args: str):
    return runner.invoke(app, ["deploy", "--settle-seconds", "0", *args])


def test_deploy_creates_layout_and_exits_zero(fake):
    result = _deploy()

    assert result.exit_code == 0, result.output
    assert (WS, {"capacityname": "Cap1"}) in fake.created
    assert "3/3 lakehouses ready" in result.output


def test_deploy_twice_creates_nothing_the_second_time(fake):
    assert _deploy().exit_code == 0
    count = len(fake.created)

    result = _deploy()

    assert result.exit_code == 0
    assert len(fake.created) == count
    assert "Already existed: LH_Gold" in result.output


def test_missing_client_exits_one_without_listing_capacities(fake):
    fake.version_error = True

    result = _deploy()

    assert result.exit_code == 1
    assert "ls .capacities" not in fake.calls
    assert "pip install ms-fabric-cli" in result.output


def test_not_authenticated_exits_one_before_capacity_selection(fake):
    fake.auth_error = True

    result = _deploy()

    assert result.exit_code == 1
    assert "ls .capacities" not in fake.calls
    assert "fab auth login" in result.output


def test_no_capacity_exits_one_without_reconciling(fake):
    fake.capacities = [Capacity("Reserved_Only")]

    result = _deploy()

    assert result.exit_code == 1
    assert fake.created == []


def test_non_interactive_with_ambiguous_capacity_exits_one(fake):
    fake.capacities = [Capacity("Cap1"), Capacity("Cap2")]

    result = _deploy("--non-interactive")

    assert result.exit_code == 1
    assert fake.created == []
    assert "--capacity" in result.output


def test_explicit_capacity_is_used(fake):
    fake.capacities = [Capacity("Cap1"), Capacity("Cap2")]

    result = _deploy("--capacity", "Cap2.Capacity", "--workspace", "Demo")

    assert result.exit_code == 0, result.output
    assert ("Demo.Workspace", {"capacityname": "Cap2"}) in fake.created


def test_unknown_capacity_prompts(monkeypatch, fake):
    fake.capacities = [Capacity("Cap1"), Capacity("Cap2")]
    seen = []

    def _prompt(candidates):
        seen.append([c.name for c in candidates])
        return 1

    monkeypatch.setattr(medallion, "prompt_capacity_index", _prompt)

    result = _deploy("--capacity", "Cap9")

    assert result.exit_code == 0, result.output
    assert seen == [["Cap1", "Cap2"]]
    assert "Cap9" in result.output
    assert (WS, {"capacityname": "Cap2"}) in fake.created


def test_partial_failure_exits_zero_by_default_and_two_when_strict(fake):
    fake.fail_create.add(f"{WS}/LH_Silver.Lakehouse")

    relaxed = _deploy()
    assert relaxed.exit_code == 0
    assert "Failed: LH_Silver" in relaxed.output

    fake.existing.clear()
    fake.created.clear()
    strict = _deploy("--strict")
    assert strict.exit_code == 2


def test_workspace_creation_failure_exits_one(fake):
    fake.fail_create.add(WS)

    result = _deploy()

    assert result.exit_code == 1
    assert not any(".Lakehouse" in p for p, _ in fake.created)


def test_dry_run_creates_nothing(fake):
    result = _deploy("--dry-run")

    assert result.exit_code == 0, result.output
    assert fake.created == []
    assert "Would create: LH_Bronze" in result.output


def test_force_is_acknowledged(fake):
    fake.existing.add(WS)

    result = _deploy("--force")

    assert result.exit_code == 0
    assert "recreation is not supported" in result.output


def test_capacities_command_lists_reserved_ones_too(fake):
    fake.capacities = [Capacity("Cap1", sku="F2"), Capacity("Reserved_X")]

    result = runner.invoke(app, ["capacities"])

    assert result.exit_code == 0, result.output
    assert "Cap1" in result.output
    assert "Reserved_X" in result.output


def test_layout_command_needs_no_client(fake):
    result = runner.invoke(app, ["layout", "--workspace", "Demo"])

    assert result.exit_code == 0
    assert "Demo.Workspace" in result.output
    assert "LH_Silver.Lakehouse" in result.output
    assert "Files/cleansed" in result.output
    assert fake.calls == []


def test_settle_seconds_honors_env(monkeypatch):
    monkeypatch.setenv("FABOPS_SETTLE_SECONDS", "3")
    assert settle_seconds(None) == 3.0
    assert settle_seconds(0) == 0

    monkeypatch.setenv("FABOPS_SETTLE_SECONDS", "soon")
    assert settle_seconds(None) == 10


def test_bracketed_names_are_printed_literally(fake):
    fake.capacities = [Capacity("Cap[/x]")]

    shown = runner.invoke(app, ["layout", "--workspace", "Team[/x]"])
    deployed = _deploy("--workspace", "Team[/x]")

    assert shown.exit_code == 0, shown.output
    assert "Team[/x].Workspace" in shown.output
    assert deployed.exit_code == 0, deployed.output
    assert "Using capacity: Cap[/x]" in deployed.output
    assert ("Team[/x].Workspace", {"capacityname": "Cap[/x]"}) in fake.created


def test_unmatched_capacity_warning_is_shown_once(monkeypatch, fake):
    fake.capacities = [Capacity("Cap1"), Capacity("Cap2")]
    answers = iter([7, 0])
    monkeypatch.setattr(medallion, "prompt_capacity_index", lambda candidates: next(answers))

    result = _deploy("--capacity", "Cap9")

    assert result.exit_code == 0, result.output
    assert result.output.count("not among the available capacities") == 1


def test_blank_capacity_request_prompts_without_warning(monkeypatch, fake):
    fake.capacities = [Capacity("Cap1"), Capacity("Cap2")]
    monkeypatch.setattr(medallion, "prompt_capacity_index", lambda candidates: 1)

    result = _deploy("--capacity", "   ")

    assert result.exit_code == 0, result.output
    assert "not among the available capacities" not in result.output
    assert (WS, {"capacityname": "Cap2"}) in fake.created
