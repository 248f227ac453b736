from constellation.core.common.enums import FileCategory
from constellation.features.folder_scan.domain.models import FolderNode, TypeTotals
from constellation.features.folder_scan.service.aggregator import aggregate


def build_nodes():
    """
    /r (video 1000)
      /r/a (code 10, code 20)
        /r/a/x (image 5)
      /r/b (empty)
    """
    root = FolderNode.for_path("/r", 0)
    a = FolderNode.for_path("/r/a", 1)
    x = FolderNode.for_path("/r/a/x", 2)
    b = FolderNode.for_path("/r/b", 1)

    root.add_file(FileCategory.VIDEO, 1000)
    a.add_file(FileCategory.CODE, 10)
    a.add_file(FileCategory.CODE, 20)
    x.add_file(FileCategory.IMAGE, 5)

    a.children.append(x)
    root.children.extend([a, b])
    return root, a, x, b


def test_totals_are_direct_plus_children():
    root, a, x, b = build_nodes()

    folders = {f.id: f for f in aggregate(root)}

    assert folders[root.id].total_size == 1035
    assert folders[root.id].file_count == 4
    assert folders[a.id].total_size == 35
    assert folders[a.id].file_count == 3
    assert folders[x.id].total_size == 5
    assert folders[b.id].total_size == 0


def test_subfolder_count_is_immediate_children_only():
    root, a, x, b = build_nodes()

    folders = {f.id: f for f in aggregate(root)}

    assert folders[root.id].subfolder_count == 2
    assert folders[a.id].subfolder_count == 1
    assert folders[x.id].subfolder_count == 0
    assert folders[root.id].children_ids == (a.id, b.id)


def test_type_breakdown_is_summed_recursively():
    root, a, x, b = build_nodes()

    folders = {f.id: f for f in aggregate(root)}
    breakdown = folders[root.id].type_breakdown

    assert breakdown[FileCategory.VIDEO] == TypeTotals(size=1000, count=1)
    assert breakdown[FileCategory.CODE] == TypeTotals(size=30, count=2)
    assert breakdown[FileCategory.IMAGE] == TypeTotals(size=5, count=1)
    assert breakdown[FileCategory.AUDIO] == TypeTotals()
    # Direct breakdown stays untouched by the aggregation
    assert folders[root.id].direct_type_breakdown.to_dict() == {"video": {"size": 1000, "count": 1}}


def test_children_precede_parents_and_link_back():
    root, a, x, b = build_nodes()

    folders = aggregate(root)
    order = [f.id for f in folders]

    assert order[-1] == root.id
    assert order.index(x.id) < order.index(a.id)
    by_id = {f.id: f for f in folders}
    assert by_id[root.id].parent_id is None
    assert by_id[x.id].parent_id == a.id
    for folder in folders:
        for child_id in folder.children_ids:
            assert by_id[child_id].parent_id == folder.id


def test_very_deep_chain_does_not_recurse():
    root = FolderNode.for_path("/d", 0)
    node = root
    for depth in range(1, 5000):
        child = FolderNode.for_path(f"{node.path}/n", depth)
        child.add_file(FileCategory.OTHER, 1)
        node.children.append(child)
        node = child

    folders = aggregate(root)

    assert len(folders) == 5000
    assert folders[-1].file_count == 4999
