"""
Knowledge Graph - Topic prerequisite graph and root-cause propagation.

Features:
    - Prerequisite relationships as directed edges (prerequisite -> topic)
    - Immediate and recursive prerequisite lookups
    - Cycle detection (the tables are assumed, not guaranteed, loop-free)
    - Dependency alerts: weak topics whose prerequisites are also weak
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

import networkx as nx

from .models import DependencyAlert, WeakTopicStat
from .syllabus import TOPIC_DEPENDENCIES

logger = logging.getLogger(__name__)


class TopicDependencyGraph:
    """
    Directed graph of syllabus topics.

    Structure:
        Prerequisite (e.g., "Limits")
        └── Topic (e.g., "C&D")
    """

    def __init__(self, dependencies: Optional[Mapping[str, Sequence[str]]] = None):
        """Build the graph from a topic -> [prerequisites] mapping."""
        self.graph = nx.DiGraph()
        self.dependencies: Dict[str, List[str]] = {}

        source = TOPIC_DEPENDENCIES if dependencies is None else dependencies
        for topic, prerequisites in source.items():
            self._add_topic(topic, prerequisites)

        if not self.is_acyclic():
            logger.warning("Topic dependency graph has cycles: %s", self.find_cycles())

    @classmethod
    def from_mapping(cls, dependencies: Mapping[str, Sequence[str]]) -> "TopicDependencyGraph":
        return cls(dependencies)

    @classmethod
    def from_json_file(cls, path: str) -> "TopicDependencyGraph":
        """Load a {"topic": ["prereq", ...]} JSON file."""
        with open(Path(path), 'r') as f:
            data = json.load(f)
        return cls(data.get("dependencies", data))

    def _add_topic(self, topic: str, prerequisites: Sequence[str]):
        self.dependencies[topic] = list(prerequisites)
        self.graph.add_node(topic)

        # Edges FROM prerequisites TO this topic
        for prereq in prerequisites:
            self.graph.add_edge(prereq, topic)

    # ==================== Query Methods ====================

    def __contains__(self, topic: str) -> bool:
        return topic in self.graph

    def get_prerequisites(self, topic: str) -> List[str]:
        """Immediate prerequisites, in declaration order. Unknown topic -> []."""
        if topic not in self.graph:
            return []
        return list(self.graph.predecessors(topic))

    def get_all_prerequisites(self, topic: str) -> Set[str]:
        """ALL prerequisites recursively."""
        if topic not in self.graph:
            return set()
        return nx.ancestors(self.graph, topic)

    def get_dependents(self, topic: str) -> List[str]:
        if topic not in self.graph:
            return []
        return list(self.graph.successors(topic))

    def is_acyclic(self) -> bool:
        return nx.is_directed_acyclic_graph(self.graph)

    def find_cycles(self) -> List[List[str]]:
        return [list(cycle) for cycle in nx.simple_cycles(self.graph)]

    def get_stats(self) -> dict:
        acyclic = self.is_acyclic()
        return {
            "total_topics": self.graph.number_of_nodes(),
            "total_edges": self.graph.number_of_edges(),
            "acyclic": acyclic,
            "max_depth": nx.dag_longest_path_length(self.graph) if acyclic and self.dependencies else None,
        }


class DependencyPropagator:
    """
    Flags weak topics that are probably symptoms of a weak prerequisite.

    Single-hop by default: "C&D" with weak prerequisite "Limits" raises
    one alert, but "Limits" -> "Functions" is not followed from "C&D".
    Pass transitive=True to follow every ancestor instead.
    """

    def __init__(self, graph: Optional[TopicDependencyGraph] = None, transitive: bool = False):
        self.graph = graph or TopicDependencyGraph()
        self.transitive = transitive

    def propagate(self, weakest_topics: Iterable[WeakTopicStat]) -> List[DependencyAlert]:
        ranked = list(weakest_topics)
        weak = {stat.topic for stat in ranked if stat.error_count >= 1}
        alerts = []

        for stat in ranked:
            if stat.topic not in weak:
                continue
            for prereq in self._candidates(stat.topic):
                if prereq in weak:
                    alerts.append(DependencyAlert(
                        symptom_topic=stat.topic,
                        root_cause_topic=prereq,
                        error_count=stat.error_count,
                    ))

        alerts.sort(key=lambda a: a.error_count, reverse=True)
        logger.debug("Raised %d dependency alerts from %d weak topics", len(alerts), len(weak))
        return alerts

    def _candidates(self, topic: str) -> List[str]:
        if not self.transitive:
            return self.graph.get_prerequisites(topic)
        return sorted(self.graph.get_all_prerequisites(topic))
