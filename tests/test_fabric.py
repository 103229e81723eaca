import pytest

from fabops.core.fabric import Capacity, ResourceKind, ResourcePath
from fabops.core.layout import DEFAULT_WORKSPACE_NAME, medallion_layout


def test_paths_render_like_the_fabric_cli():
    ws = ResourcePath.workspace("Sales")
    lh = ws.child(ResourceKind.LAKEHOUSE, "LH_Bronze")
    folder = lh.child(ResourceKind.FOLDER, "raw")
    nested = folder.child(ResourceKind.FOLDER, "2024")

    assert str(ws) == "Sales.Workspace"
    assert str(lh) == "Sales.Workspace/LH_Bronze.Lakehouse"
    assert str(folder) == "Sales.Workspace/LH_Bronze.Lakehouse/Files/raw"
    assert str(nested) == "Sales.Workspace/LH_Bronze.Lakehouse/Files/raw/2024"
    assert lh.listing_path() == "Sales.Workspace/LH_Bronze.Lakehouse/Files"
    assert folder.parent == lh
    assert ws.parent is None
    assert folder.leaf == "raw"
    assert lh.leaf == "LH_Bronze.Lakehouse"


def test_suffix_is_not_doubled():
    ws = ResourcePath.workspace("Sales.Workspace")

    assert str(ws) == "Sales.Workspace"
    assert ws.name == "Sales"


@pytest.mark.parametrize(
    "parent, kind",
    [
        (ResourcePath.workspace("W"), ResourceKind.FOLDER),
        (ResourcePath.workspace("W"), ResourceKind.WORKSPACE),
        (
            ResourcePath.workspace("W").child(ResourceKind.LAKEHOUSE, "L"),
            ResourceKind.LAKEHOUSE,
        ),
    ],
)
def test_children_must_respect_the_hierarchy(parent, kind):
    with pytest.raises(ValueError):
        parent.child(kind, "x")


def test_capacity_reference_and_reserved_marker():
    assert Capacity("Cap1").ref == "Cap1.Capacity"
    assert Capacity("Premium Reserved").is_reserved is True
    assert Capacity("Cap1").is_reserved is False


def test_medallion_layout_defaults_and_order():
    layout = medallion_layout(None)

    assert layout.workspace == DEFAULT_WORKSPACE_NAME
    assert [lh.name for lh in layout.lakehouses] == ["LH_Bronze", "LH_Silver", "LH_Gold"]
    assert all(len(lh.folders) == 3 for lh in layout.lakehouses)
    paths = [str(p) for p in layout.paths()]
    assert paths[0] == "Medallion_Architecture.Workspace"
    assert paths[1] == "Medallion_Architecture.Workspace/LH_Bronze.Lakehouse"
    assert len(paths) == 13


def test_medallion_layout_accepts_suffixed_names():
    assert medallion_layout(" Demo.Workspace ").workspace == "Demo"
