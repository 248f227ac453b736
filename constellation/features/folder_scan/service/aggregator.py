from typing import Dict, List, Optional, Tuple

from ..domain.models import FolderNode, FolderStats, TypeBreakdown


def aggregate(root: FolderNode) -> List[FolderStats]:
    """
    Single bottom-up pass over the owned tree.

    Each folder's totals are its direct statistics plus the already-computed totals
    of its immediate children. Folders are emitted children-first; every child id
    refers to a folder in the same list.

    Uses an explicit stack so very deep trees do not hit the recursion limit.
    """
    folders: List[FolderStats] = []
    # id -> (total_size, file_count, breakdown) for nodes already projected
    totals: Dict[str, Tuple[int, int, TypeBreakdown]] = {}

    stack: List[Tuple[FolderNode, Optional[str], bool]] = [(root, None, False)]
    while stack:
        node, parent_id, expanded = stack.pop()

        if not expanded:
            # Revisit the node once all of its children have been projected.
            stack.append((node, parent_id, True))
            for child in reversed(node.children):
                stack.append((child, node.id, False))
            continue

        total_size = node.direct_size
        file_count = node.direct_file_count
        breakdown = node.direct_breakdown.copy()
        for child in node.children:
            child_size, child_count, child_breakdown = totals[child.id]
            total_size += child_size
            file_count += child_count
            breakdown.merge(child_breakdown)

        totals[node.id] = (total_size, file_count, breakdown)
        folders.append(FolderStats(
            id=node.id,
            path=node.path,
            name=node.name,
            depth=node.depth,
            total_size=total_size,
            file_count=file_count,
            subfolder_count=len(node.children),
            type_breakdown=breakdown,
            children_ids=tuple(child.id for child in node.children),
            direct_size=node.direct_size,
            direct_file_count=node.direct_file_count,
            direct_type_breakdown=node.direct_breakdown.copy(),
            parent_id=parent_id,
        ))

    return folders
