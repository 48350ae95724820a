"""節點樹走訪與查找（深度優先、文件順序）."""

from typing import Iterator, List, Optional, Tuple

from .document import Document, DocumentNode


def walk(node: DocumentNode) -> Iterator[DocumentNode]:
    """前序深度優先走訪，順序即文件順序."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def walk_with_parents(
    node: DocumentNode, ancestors: Tuple[DocumentNode, ...] = ()
) -> Iterator[Tuple[DocumentNode, Tuple[DocumentNode, ...]]]:
    """同 walk，另附由根到父節點的祖先序列."""
    stack = [(node, ancestors)]
    while stack:
        current, parents = stack.pop()
        yield current, parents
        child_parents = parents + (current,)
        for child in reversed(current.children):
            stack.append((child, child_parents))


def find_node_by_id(node: DocumentNode, node_id: str) -> Optional[DocumentNode]:
    for candidate in walk(node):
        if candidate.id == node_id:
            return candidate
    return None


def count_nodes(node: DocumentNode) -> int:
    return sum(1 for _ in walk(node))


def get_all_nodes(node: DocumentNode) -> List[DocumentNode]:
    return list(walk(node))


class NodeFinder:
    """綁定單一 Document 的查找器."""

    def __init__(self, document: Document):
        self.document = document

    def find_node_by_id(self, node_id: str) -> Optional[DocumentNode]:
        return find_node_by_id(self.document.root, node_id)

    def count_nodes(self, node: Optional[DocumentNode] = None) -> int:
        return count_nodes(node or self.document.root)

    def get_all_nodes(self, node: Optional[DocumentNode] = None) -> List[DocumentNode]:
        return get_all_nodes(node or self.document.root)

    def top_level_frames(self) -> List[DocumentNode]:
        """第一個頁面（CANVAS）底下的頂層節點；文件沒有頁面時回傳根節點本身."""
        root = self.document.root
        if root.type == "DOCUMENT":
            if not root.children:
                return []
            page = root.children[0]
            return list(page.children) if page.type == "CANVAS" else list(root.children)
        if root.type == "CANVAS":
            return list(root.children)
        return [root]
