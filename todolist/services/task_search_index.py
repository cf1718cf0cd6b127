"""
Search index over task text (prefix trie of every field suffix)
"""

from typing import Dict, List, Optional
from todolist.models.task import Task
from todolist.utils.logger import logger


class TrieNode:
    """One trie node: children keyed by lowercased character, plus task ids"""

    __slots__ = ("children", "task_ids")

    def __init__(self):
        self.children: Dict[str, "TrieNode"] = {}
        self.task_ids: List[int] = []


class TaskSearchIndex:
    """
    Prefix trie mapping lowercased text to task ids

    Every suffix of every indexed field value is inserted, so a prefix
    lookup also finds matches that start in the middle of a word
    ("ing" finds "Testing"). Nodes store task ids rather than task
    objects; ids are resolved through the registry of indexed tasks.
    """

    def __init__(self):
        """Initialize an empty index"""
        self._root = TrieNode()
        self._tasks: Dict[int, Task] = {}
        self.logger = logger

    @property
    def indexed_count(self) -> int:
        """Number of tasks currently indexed"""
        return len(self._tasks)

    def add_task(self, task: Task) -> None:
        """
        Index a task by all its searchable content

        Args:
            task: Task to index (name, description, tags, status and priority labels)
        """
        for value in task.searchable_fields():
            self._index_string(value.lower(), task.id)
        self._tasks[task.id] = task

    def remove_task(self, task: Task) -> None:
        """
        Remove a task from every node it was indexed under

        Empty nodes are left in place; the collection rebuilds the whole
        index after mutations.

        Args:
            task: Task to remove
        """
        for value in task.searchable_fields():
            self._remove_string(value.lower(), task.id)
        self._tasks.pop(task.id, None)

    def search_prefix(self, prefix: str) -> List[Task]:
        """
        Find tasks having any indexed string that starts with the prefix

        Args:
            prefix: Search text (case-insensitive)

        Returns:
            Unique matching tasks, unordered
        """
        if not prefix:
            return []

        node = self._find_node(prefix.lower())
        if node is None:
            return []

        return self._resolve(self._collect_ids(node))

    def search_substring(self, substring: str) -> List[Task]:
        """
        Find tasks whose name, description or a tag contains the substring

        Slower than search_prefix: walks the whole trie, then checks each
        candidate's fields directly.

        Args:
            substring: Search text (case-insensitive)

        Returns:
            Unique matching tasks, unordered
        """
        if not substring:
            return []

        needle = substring.lower()
        results: List[Task] = []
        for task in self._resolve(self._collect_ids(self._root)):
            if needle in task.name.lower() or needle in task.description.lower():
                results.append(task)
            elif any(needle in tag.lower() for tag in task.tags):
                results.append(task)
        return results

    def clear(self) -> None:
        """Reset to an empty trie"""
        self._root = TrieNode()
        self._tasks = {}
        self.logger.debug("[SearchIndex] Index cleared")

    def node_count(self) -> int:
        """Total number of trie nodes, root included"""
        count = 0
        stack = [self._root]
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(node.children.values())
        return count

    # ---- internals ----

    def _index_string(self, text: str, task_id: int) -> None:
        for start in range(len(text)):
            current = self._root
            for char in text[start:]:
                child = current.children.get(char)
                if child is None:
                    child = TrieNode()
                    current.children[char] = child
                current = child

            if task_id not in current.task_ids:
                current.task_ids.append(task_id)

    def _remove_string(self, text: str, task_id: int) -> None:
        for start in range(len(text)):
            current: Optional[TrieNode] = self._root
            for char in text[start:]:
                current = current.children.get(char)
                if current is None:
                    break

            if current is not None and task_id in current.task_ids:
                current.task_ids.remove(task_id)

    def _find_node(self, prefix: str) -> Optional[TrieNode]:
        current = self._root
        for char in prefix:
            current = current.children.get(char)
            if current is None:
                return None
        return current

    @staticmethod
    def _collect_ids(node: TrieNode) -> List[int]:
        """Unique task ids stored at the node and anywhere beneath it"""
        seen = set()
        ids: List[int] = []
        stack = [node]
        while stack:
            current = stack.pop()
            for task_id in current.task_ids:
                if task_id not in seen:
                    seen.add(task_id)
                    ids.append(task_id)
            stack.extend(current.children.values())
        return ids

    def _resolve(self, task_ids: List[int]) -> List[Task]:
        return [self._tasks[task_id] for task_id in task_ids if task_id in self._tasks]
